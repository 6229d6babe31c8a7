"""Domain errors raised by controllers and the authorization gate."""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class CampusError(Exception):
    """Base class for errors that map to a structured response."""

    error_type = "CampusException"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_body(self) -> Dict[str, Any]:
        return {"type": self.error_type, "message": self.message}


class EntityNotFound(CampusError):
    error_type = "EntityNotFoundException"
    status_code = 404

    def __init__(self, type_name: str, key: Any):
        super().__init__(f"{type_name} with id {key} not found")
        self.type_name = type_name
        self.key = key


class ValidationFailure(CampusError):
    error_type = "ValidationException"
    status_code = 400

    def __init__(self, message: str, fields: Optional[List[str]] = None):
        super().__init__(message)
        self.fields = list(fields or [])


class AccessDenied(CampusError):
    error_type = "AccessDeniedException"
    status_code = 403

    def __init__(self, reason: str):
        # Clients only ever see the generic message; reason is for logs.
        super().__init__("Access is denied")
        self.reason = reason


class Unauthorized(AccessDenied):
    """No authenticated principal on the request."""


class Forbidden(AccessDenied):
    """Authenticated, but missing the required role."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Optional

from campus_api.core.auth.models import Principal, normalize_role
from campus_api.core.errors import Forbidden, Unauthorized
from campus_api.core.observability.metrics import AUTHZ_DECISIONS_TOTAL

log = logging.getLogger("campus.auth")

# Role hierarchy: ADMIN implies USER
ROLE_ORDER = {
    "USER": 1,
    "ADMIN": 2,
}

READ = "read"
WRITE = "write"

DEFAULT_PERMISSIONS: Dict[str, str] = {
    READ: "USER",
    WRITE: "ADMIN",
}


def role_level(roles: Iterable[str]) -> int:
    """Highest known role level held; unknown roles grant nothing."""
    levels = [ROLE_ORDER.get(normalize_role(r), 0) for r in roles or []]
    return max(levels, default=0)


def enforce_required_role(*, roles: Iterable[str], required_role: str) -> bool:
    """
    Returns True if allowed else False.
    """
    required = normalize_role(required_role)
    if required not in ROLE_ORDER:
        raise ValueError(f"Unknown role: {required_role}")
    return role_level(roles) >= ROLE_ORDER[required]


class AuthorizationGate:
    """
    Explicit capability check, called first by every controller operation.

    Maps a permission ("read", "write") to the minimum role and rejects:
      - no principal          -> Unauthorized
      - principal lacks role  -> Forbidden
    """

    def __init__(self, permissions: Optional[Dict[str, str]] = None):
        self.permissions = dict(permissions or DEFAULT_PERMISSIONS)
        for perm, role in self.permissions.items():
            if normalize_role(role) not in ROLE_ORDER:
                raise ValueError(f"Unknown role for permission {perm}: {role}")

    def required_role(self, permission: str) -> str:
        try:
            return normalize_role(self.permissions[permission])
        except KeyError:
            raise ValueError(f"Unknown permission: {permission}") from None

    def check(self, principal: Optional[Principal], permission: str, *, resource: str = "") -> Principal:
        required = self.required_role(permission)

        if principal is None:
            self._record("deny", required, permission)
            log.info("authz deny subject=anonymous required=%s permission=%s resource=%s", required, permission, resource)
            raise Unauthorized("Authentication required")

        if not enforce_required_role(roles=principal.roles, required_role=required):
            self._record("deny", required, permission)
            log.info(
                "authz deny subject=%s roles=%s required=%s permission=%s resource=%s",
                principal.subject,
                principal.normalized_roles(),
                required,
                permission,
                resource,
            )
            raise Forbidden("Insufficient role")

        self._record("allow", required, permission)
        log.debug("authz allow subject=%s permission=%s resource=%s", principal.subject, permission, resource)
        return principal

    @staticmethod
    def _record(decision: str, required: str, permission: str) -> None:
        AUTHZ_DECISIONS_TOTAL.labels(decision=decision, required_role=required, permission=permission).inc()

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Optional

import jwt
from starlette.requests import Request

from campus_api.core.auth.models import Principal
from campus_api.core.settings import Settings


class AuthError(Exception):
    pass


@dataclass(frozen=True)
class JwtConfig:
    signing_key: str
    issuer: Optional[str] = None
    audience: Optional[str] = None
    leeway_seconds: int = 30


def _extract_bearer(request: Request) -> str:
    auth_header = request.headers.get("authorization") or request.headers.get("x-forwarded-authorization")
    if not auth_header:
        raise AuthError("Authentication required")
    if not auth_header.startswith("Bearer "):
        raise AuthError("Invalid authorization header")
    return auth_header[len("Bearer "):].strip()


class StaticTokenProvider:
    def __init__(self, settings: Settings):
        self.admin_token = settings.static_admin_token
        self.user_token = settings.static_user_token

        if not any([self.admin_token, self.user_token]):
            raise AuthError(
                "Missing static token config. "
                "Set CAMPUS_STATIC_ADMIN_TOKEN or CAMPUS_STATIC_USER_TOKEN."
            )

    def authenticate(self, request: Request) -> Principal:
        token = _extract_bearer(request)

        if self.admin_token and token == self.admin_token:
            return Principal(subject="admin", roles=["ADMIN", "USER"])
        if self.user_token and token == self.user_token:
            return Principal(subject="user", roles=["USER"])

        raise AuthError("Invalid bearer token")


class ApiKeyProvider:
    """
    Service accounts / API keys.

    Keys are loaded from CAMPUS_API_KEYS_JSON in this format:
      {
        "key_abc": {"sub": "svc-dining", "roles": ["ADMIN", "USER"]},
        "key_xyz": {"sub": "svc-reader", "roles": ["USER"]}
      }

    Client supplies:
      X-API-Key: <key>
    """

    def __init__(self, settings: Settings):
        raw = (settings.api_keys_json or "").strip()
        if not raw:
            raise AuthError("Missing CAMPUS_API_KEYS_JSON for api_key mode")

        try:
            self.keys: Dict[str, Dict[str, Any]] = json.loads(raw)
        except json.JSONDecodeError as e:
            raise AuthError(f"Invalid CAMPUS_API_KEYS_JSON: {e}") from e

        if not isinstance(self.keys, dict) or not self.keys:
            raise AuthError("CAMPUS_API_KEYS_JSON must be a non-empty object")

    def authenticate(self, request: Request) -> Principal:
        k = request.headers.get("x-api-key")
        if not k:
            raise AuthError("Authentication required")

        meta = self.keys.get(k)
        if not meta:
            raise AuthError("Invalid api key")

        sub = meta.get("sub") or "service"
        roles = meta.get("roles") or ["USER"]
        if isinstance(roles, str):
            roles = [roles]
        return Principal(subject=sub, roles=list(roles))


class JwtProvider:
    """
    HS256 bearer tokens signed with CAMPUS_SIGNING_KEY.
    Optional:
      CAMPUS_JWT_ISSUER
      CAMPUS_JWT_AUDIENCE
      CAMPUS_JWT_LEEWAY_SECONDS
    """

    def __init__(self, settings: Settings):
        if not settings.signing_key:
            raise AuthError("Missing CAMPUS_SIGNING_KEY for jwt mode")
        self.cfg = JwtConfig(
            signing_key=settings.signing_key,
            issuer=settings.jwt_issuer,
            audience=settings.jwt_audience,
            leeway_seconds=settings.jwt_leeway_seconds,
        )

    def authenticate(self, request: Request) -> Principal:
        token = _extract_bearer(request)

        options = {
            "verify_signature": True,
            "verify_exp": True,
            "verify_iat": False,
            "verify_nbf": True,
            "verify_iss": self.cfg.issuer is not None,
            "verify_aud": self.cfg.audience is not None,
        }

        try:
            claims = jwt.decode(
                token,
                self.cfg.signing_key,
                algorithms=["HS256"],
                issuer=self.cfg.issuer,
                audience=self.cfg.audience,
                options=options,
                leeway=self.cfg.leeway_seconds,
            )
        except jwt.PyJWTError as e:
            raise AuthError("Invalid bearer token") from e

        sub = claims.get("sub") or "user"
        roles = claims.get("roles") or claims.get("role") or ["USER"]
        if isinstance(roles, str):
            roles = [roles]
        return Principal(subject=sub, roles=list(roles))


def get_auth_provider(settings: Settings):
    mode = settings.auth_mode

    if mode == "static_token":
        # prod should not allow static tokens unless explicitly allowed
        if settings.is_prod and not settings.allow_static_token_in_prod:
            raise AuthError("static_token not allowed in prod (set CAMPUS_ALLOW_STATIC_TOKEN_IN_PROD=true to override)")
        return StaticTokenProvider(settings)

    if mode == "jwt":
        return JwtProvider(settings)

    if mode == "api_key":
        return ApiKeyProvider(settings)

    raise AuthError(f"Unsupported auth mode: {mode}")

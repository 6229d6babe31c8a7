from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional


def _env(name: str, default: str = "") -> str:
    return (os.getenv(name) or default).strip()


def _env_flag(name: str, default: str = "0") -> bool:
    return _env(name, default).lower() in ("1", "true", "yes")


def _env_opt(name: str) -> Optional[str]:
    return _env(name) or None


@dataclass(frozen=True)
class Settings:
    env: str = "dev"

    # Authentication
    auth_mode: str = "static_token"
    static_admin_token: Optional[str] = None
    static_user_token: Optional[str] = None
    allow_static_token_in_prod: bool = False
    api_keys_json: Optional[str] = None
    signing_key: Optional[str] = None
    jwt_issuer: Optional[str] = None
    jwt_audience: Optional[str] = None
    jwt_leeway_seconds: int = 30

    # Persistence
    store: str = "memory"
    db_path: str = "campus.db"

    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 8080

    @property
    def is_prod(self) -> bool:
        return self.env == "prod"

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings from CAMPUS_* environment variables.
        In dev, static tokens fall back to well-known development values.
        """
        env = _env("CAMPUS_ENV", "dev").lower()
        dev = env != "prod"

        return cls(
            env=env,
            auth_mode=_env("CAMPUS_AUTH_MODE", "static_token").lower(),
            static_admin_token=_env_opt("CAMPUS_STATIC_ADMIN_TOKEN") or ("dev_admin_token" if dev else None),
            static_user_token=_env_opt("CAMPUS_STATIC_USER_TOKEN") or ("dev_user_token" if dev else None),
            allow_static_token_in_prod=_env_flag("CAMPUS_ALLOW_STATIC_TOKEN_IN_PROD"),
            api_keys_json=_env_opt("CAMPUS_API_KEYS_JSON"),
            signing_key=_env_opt("CAMPUS_SIGNING_KEY"),
            jwt_issuer=_env_opt("CAMPUS_JWT_ISSUER"),
            jwt_audience=_env_opt("CAMPUS_JWT_AUDIENCE"),
            jwt_leeway_seconds=int(_env("CAMPUS_JWT_LEEWAY_SECONDS", "30") or "30"),
            store=_env("CAMPUS_STORE", "memory").lower(),
            db_path=_env("CAMPUS_DB_PATH", "campus.db"),
            log_level=_env("CAMPUS_LOG_LEVEL", "INFO").upper(),
            host=_env("CAMPUS_HOST", "127.0.0.1"),
            port=int(_env("CAMPUS_PORT", "8080") or "8080"),
        )

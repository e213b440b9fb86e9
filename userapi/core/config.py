"""
Configuration helpers for the user management API.

Routers/services read configuration through ``get_settings()`` instead of
touching os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
import os


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    database_url: str
    jwt_secret: str
    jwt_algorithm: str
    token_ttl_seconds: int
    log_level: str
    cors_allowed_origins: tuple[str, ...]
    auto_create_tables: bool


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _bool(value: str | None, default: bool = False) -> bool:
        if value is None:
            return default
        return value.strip().lower() in {"1", "true", "yes", "on"}

    app_env = (os.getenv("APP_ENV") or "dev").lower()
    origins = os.getenv("CORS_ALLOWED_ORIGINS", "")
    return Settings(
        app_env=app_env,
        database_url=os.getenv("DATABASE_URL", "sqlite:///./users.db").strip(),
        jwt_secret=os.getenv("JWT_SECRET_KEY", "dev-secret-change-me"),
        jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
        token_ttl_seconds=_int(os.getenv("TOKEN_TTL_SECONDS", "3600"), 3600),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        cors_allowed_origins=tuple(o.strip().rstrip("/") for o in origins.split(",") if o.strip()),
        auto_create_tables=_bool(os.getenv("AUTO_CREATE_TABLES"), app_env != "prod"),
    )

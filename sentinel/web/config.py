"""Web service configuration from environment variables."""

import os
from typing import Optional

from ..shared.exceptions import ConfigurationError


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


class WebConfig:
    """Configuration for web service.

    Values are read when the object is constructed so a fresh instance
    reflects the current environment.
    """

    REQUIRED = ("DATABASE_URL", "SECRET_KEY")

    def __init__(self):
        # Server
        self.HOST: str = os.getenv("HOST", "0.0.0.0")
        self.PORT: int = int(os.getenv("PORT", "8123"))

        # Managed database
        self.DATABASE_URL: Optional[str] = os.getenv("DATABASE_URL")
        self.DB_TIMEOUT_SECONDS: float = float(os.getenv("DB_TIMEOUT_SECONDS", "10"))
        self.SQL_ECHO: bool = _env_bool("SQL_ECHO", "false")

        # Auth provider tokens
        self.SECRET_KEY: Optional[str] = os.getenv("SECRET_KEY")
        self.JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
        self.JWT_AUDIENCE: Optional[str] = os.getenv("JWT_AUDIENCE") or None
        self.COOKIE_NAME: str = os.getenv("COOKIE_NAME", "session")
        self.LOGIN_URL: str = os.getenv("LOGIN_URL", "/auth/login")

        # Realtime
        self.REDIS_URL: Optional[str] = os.getenv("REDIS_URL") or None
        self.VIEW_CACHE_TTL: float = float(os.getenv("VIEW_CACHE_TTL", "30"))
        self.VIEW_CACHE_SIZE: int = int(os.getenv("VIEW_CACHE_SIZE", "256"))
        self.SSE_HEARTBEAT_SECONDS: float = float(os.getenv("SSE_HEARTBEAT_SECONDS", "30"))

        # Bulk export
        self.EXPORT_FETCH_TIMEOUT: float = float(os.getenv("EXPORT_FETCH_TIMEOUT", "10"))

        # CORS (for development)
        origins = os.getenv("CORS_ORIGINS")
        self.CORS_ORIGINS: list = origins.split(",") if origins else []

        # Logging
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    @classmethod
    def is_production(cls) -> bool:
        """Check if running in production."""
        return os.getenv("ENVIRONMENT", "").lower() == "production"

    def missing(self) -> list[str]:
        """Names of required variables that are not set."""
        return [name for name in self.REQUIRED if not getattr(self, name)]

    def validate(self) -> list[str]:
        """Validate configuration and return list of warnings.

        Raises:
            ConfigurationError: If a required connection variable is absent
        """
        missing = self.missing()
        if missing:
            raise ConfigurationError(
                f"Missing required configuration: {', '.join(missing)}"
            )

        warnings = []
        if not self.REDIS_URL:
            warnings.append("REDIS_URL not set - change notices stay in this process")
        return warnings


config = WebConfig()

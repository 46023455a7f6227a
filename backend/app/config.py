"""
Application Configuration

Uses Pydantic Settings for type-safe configuration.
"""

import re
from datetime import timedelta
from typing import Annotated, List, Literal, Optional
from pydantic_settings import BaseSettings, NoDecode
from pydantic import AliasChoices, Field, field_validator, ConfigDict

_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$")
_DURATION_UNITS = {"": "seconds", "s": "seconds", "m": "minutes", "h": "hours", "d": "days"}


def parse_duration(value: str) -> timedelta:
    """
    Parse a short duration string such as "7d", "12h", "30m" or "3600".

    A bare number is read as seconds.
    """
    match = _DURATION_RE.match(value)
    if not match:
        raise ValueError(f"Invalid duration: {value!r}")
    amount, unit = match.groups()
    return timedelta(**{_DURATION_UNITS[unit]: int(amount)})


class Settings(BaseSettings):
    """Application settings with validation."""

    # === Core ===
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Logging level")
    environment: Literal["development", "production", "test"] = Field(
        default="development"
    )

    # === Database ===
    database_url: str = Field(
        default="sqlite:///./runnio.db",
        description="Database connection URL"
    )

    # === CORS / Frontend ===
    cors_origins: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: ["http://localhost:8080", "http://localhost:8081"],
        description="Allowed CORS origins"
    )
    frontend_url: str = Field(
        default="http://localhost:8080",
        description="Base URL of the web client (invite links, OAuth redirects)"
    )

    # === Sessions ===
    jwt_secret: str = Field(
        ...,
        min_length=32,
        description="Symmetric secret for signing session tokens"
    )
    jwt_expires_in: str = Field(default="7d", description="Session lifetime, e.g. 7d, 12h")
    jwt_algorithm: str = Field(default="HS256")

    # === Invitations ===
    invitation_default_days: int = Field(default=7, ge=1, le=30)

    # === Strava ===
    strava_client_id: Optional[str] = Field(default=None)
    strava_client_secret: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("strava_client_secret", "strava_secret"),
    )
    strava_redirect_uri: Optional[str] = Field(default=None)
    strava_webhook_verify_token: Optional[str] = Field(default=None)
    strava_http_timeout_seconds: float = Field(default=15.0, gt=0)
    strava_sync_page_size: int = Field(default=30, ge=1, le=200)

    @field_validator('database_url')
    @classmethod
    def fix_postgres_url(cls, v: str) -> str:
        """Fix Render/Railway postgres:// URL to postgresql://"""
        if v.startswith("postgres://"):
            return v.replace("postgres://", "postgresql://", 1)
        return v

    @field_validator('cors_origins', mode='before')
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from comma-separated string."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(',')]
        return v

    @field_validator('jwt_expires_in')
    @classmethod
    def check_expires_in(cls, v: str) -> str:
        parse_duration(v)
        return v

    @property
    def session_lifetime(self) -> timedelta:
        return parse_duration(self.jwt_expires_in)

    @property
    def strava_configured(self) -> bool:
        return bool(self.strava_client_id and self.strava_client_secret)

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )


# Global settings instance
settings = Settings()

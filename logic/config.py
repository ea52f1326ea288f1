"""
Configuration management module.

Server settings are typed and loaded from environment variables (and a local
.env file when present) with pydantic-settings.
"""

import logging
import os
from functools import lru_cache
from typing import Annotated, Any, List, Optional

from pydantic import BeforeValidator, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

logger = logging.getLogger(__name__)

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
ENV_PATH = os.path.join(BASE_DIR, ".env")


def parse_origins(value: Any) -> Any:
    """Split a comma-separated origin list.

    Args:
        value: Raw CORS_ORIGINS value, e.g. "https://a.com, https://b.com".

    Returns:
        List of origins. Defaults to ["*"] when nothing usable is given.
        Non-string values are passed through for normal list validation.
    """
    if not isinstance(value, str):
        return value
    origins = [o.strip().rstrip("/") for o in value.split(",") if o.strip()]
    return origins or ["*"]


class Settings(BaseSettings):
    """Typed server settings.

    Attributes:
        database_url: SQLAlchemy URL of the gratitude store.
        host: Address the server binds to.
        port: Port the server listens on.
        share_base_url: Prefix for links returned in upload_success.
        cors_origins: Origins allowed by HTTP CORS and the socket server.
        rate_limit_seconds: Cooldown between two submissions from one IP.
        jitter_degrees: Full width of the box used to fuzz live broadcasts.
        max_message_length: Length a sanitised message is truncated to.
        history_limit: Number of rows sent to a client on connect.
        view_limit: Number of rows sent for a map_bounds query.
        trust_proxy: Read the client IP from X-Forwarded-For.
        log_level: Root logger level name.
    """

    model_config = SettingsConfigDict(
        env_file=ENV_PATH,
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
    )

    database_url: str = "sqlite:///./thankmap.db"
    host: str = "0.0.0.0"
    port: int = Field(default=3001, ge=1, le=65535)
    share_base_url: str = "https://thankmap.com"
    cors_origins: Annotated[List[str], NoDecode, BeforeValidator(parse_origins)] = ["*"]
    rate_limit_seconds: float = Field(default=20.0, ge=0)
    jitter_degrees: float = Field(default=0.1, ge=0)
    max_message_length: int = Field(default=280, gt=0)
    history_limit: int = Field(default=100, ge=1)
    view_limit: int = Field(default=100, ge=1)
    trust_proxy: bool = False
    log_level: str = "INFO"

    @field_validator("*", mode="wrap")
    @classmethod
    def fall_back_to_default(cls, value, handler, info):
        """Use the field default for a value that does not validate.

        A typo in .env is logged and ignored rather than stopping the server.
        """
        try:
            return handler(value)
        except ValidationError:
            default = cls.model_fields[info.field_name].default
            logger.warning(
                "Ignoring invalid %s=%r, using default %r",
                info.field_name.upper(), value, default,
            )
            return default

    @property
    def rate_limit_ms(self) -> int:
        return int(self.rate_limit_seconds * 1000)


def load_settings(env_file: Optional[str] = ENV_PATH, **overrides) -> Settings:
    """Load settings from the environment.

    Args:
        env_file: .env file to read, or None to use only the process environment.
        **overrides: Field values that take precedence over the environment.

    Returns:
        Populated Settings instance.
    """
    return Settings(_env_file=env_file, **overrides)


@lru_cache()
def get_settings() -> Settings:
    """Get the cached process-wide settings, loading them on first use."""
    return load_settings()

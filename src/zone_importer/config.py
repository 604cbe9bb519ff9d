"""Application configuration and settings management."""

from typing import Any, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="DZI_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Delivery Zone Importer API"
    api_prefix: str = "/api"
    backend_base_url: str = Field(
        default="http://localhost:8080",
        description="Base URL of the marketplace backend that owns stores and delivery zones.",
    )
    backend_token: Optional[str] = Field(
        default=None,
        description="Bearer token sent to the backend. Leave empty for unauthenticated local setups.",
    )
    backend_timeout_seconds: float = Field(default=30.0, gt=0.0)
    backend_max_retries: int = Field(default=2, ge=0)
    backend_backoff_seconds: float = Field(default=0.5, ge=0.0)
    default_zone_name: str = Field(
        default="Imported Zone",
        description="Zone name used when neither the metadata nor the placemark provide one.",
    )
    max_upload_bytes: int = Field(default=10 * 1024 * 1024, ge=1)
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    @field_validator("backend_base_url", mode="before")
    @classmethod
    def _strip_trailing_slash(cls, value: Any) -> str:
        return str(value).strip().rstrip("/")

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            # Try JSON first
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()


settings = Settings()

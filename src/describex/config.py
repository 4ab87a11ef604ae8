"""Environment-based configuration for describex."""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from DESCRIBEX_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="DESCRIBEX_",
        case_sensitive=False,
    )

    # Server
    host: str = "0.0.0.0"  # noqa: S104
    port: int = 8080
    log_level: str = "INFO"

    # Remote backend
    backend_url: str = "http://127.0.0.1:4943"
    # None leaves timeouts entirely to the transport
    backend_timeout: float | None = Field(default=None, gt=0)
    text_service_name: str = "OpenAI"

    # Length of the framing the upstream transport appends to completion
    # responses. Fragile: any change upstream silently breaks parsing.
    completion_suffix_length: int = Field(default=90, ge=0)

    # Encoding
    image_size: int = Field(default=224, ge=1)
    image_format: Literal["png", "jpeg", "webp"] = "png"
    image_quality: float = Field(default=0.9, ge=0.0, le=1.0)

    # UI
    preview_width: int = Field(default=600, ge=1)
    default_replicated: bool = False

    # Image worker threads
    max_concurrent: int = Field(default=1, ge=1)

    # Input limits
    max_image_pixels: int = Field(default=16_777_216, ge=1)
    max_file_size: int = Field(default=20_971_520, ge=1)


def get_settings() -> Settings:
    """Create and return application settings."""
    return Settings()

# src/mungori/core/settings.py
"""Application settings and configuration.

This module defines all configuration options for the Mungori community client.
Settings are loaded from environment variables with sensible defaults. When the
remote store credentials are missing the client runs entirely against the
built-in seed dataset.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PLACEHOLDER_URL = "YOUR_SUPABASE_URL"
PLACEHOLDER_KEY = "YOUR_SUPABASE_ANON_KEY"


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Mungori", alias="APP_NAME")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Remote store connection
    remote_store_enabled: bool = Field(default=True, alias="REMOTE_STORE_ENABLED")
    supabase_url: str | None = Field(default=None, alias="SUPABASE_URL")
    supabase_anon_key: str | None = Field(default=None, alias="SUPABASE_ANON_KEY")
    http_timeout_seconds: float = Field(default=10.0, alias="HTTP_TIMEOUT_SECONDS")

    # Marketplace image attachments
    image_bucket: str = Field(default="market-images", alias="IMAGE_BUCKET")
    max_images_per_item: int = Field(default=5, ge=1, alias="MAX_IMAGES_PER_ITEM")
    max_image_bytes: int = Field(default=5 * 1024 * 1024, ge=1, alias="MAX_IMAGE_BYTES")

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def remote_store_configured(self) -> bool:
        """Return True when the remote store should be used.

        Both credentials must be present and must not be the template
        placeholders shipped in example env files.
        """
        if not self.remote_store_enabled:
            return False
        if not (self.supabase_url and self.supabase_anon_key):
            return False
        return (
            self.supabase_url != PLACEHOLDER_URL
            and self.supabase_anon_key != PLACEHOLDER_KEY
        )


settings = Settings()

"""Configuration management for RKD MCP Server."""

from typing import Optional

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Required RKD service identity
    rkd_app_id: str
    rkd_username: str
    rkd_password: SecretStr
    rkd_base_url: str = "https://api.trkd.thomsonreuters.com/api"

    # Token lifecycle
    rkd_refresh_margin_seconds: float = 600.0
    rkd_default_token_lifetime_seconds: float = 3600.0

    # Optional settings
    log_level: str = "INFO"
    rkd_timeout: int = 30

    @model_validator(mode="after")
    def _check_refresh_margin(self) -> "Settings":
        if self.rkd_refresh_margin_seconds <= 0:
            raise ValueError("rkd_refresh_margin_seconds must be positive")
        if self.rkd_refresh_margin_seconds >= self.rkd_default_token_lifetime_seconds:
            raise ValueError(
                "rkd_refresh_margin_seconds must be smaller than "
                "rkd_default_token_lifetime_seconds"
            )
        return self


def get_settings() -> Settings:
    """Get application settings."""
    return Settings()


# Global settings instance (lazy loaded)
_settings: Optional[Settings] = None


def settings() -> Settings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = get_settings()
    return _settings

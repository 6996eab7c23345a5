"""Application configuration using pydantic-settings."""
from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Database
    database_url: str = Field(
        default="sqlite+aiosqlite:///./bookmarks.db",
        validation_alias="DATABASE_URL",
    )

    # Static bearer token guarding all /bookmarks and /tags routes
    bearer_token: str = Field(validation_alias="BEARER_TOKEN")

    # Server
    host: str = Field(default="0.0.0.0", validation_alias="HOST")
    port: int = Field(default=3000, validation_alias="PORT")

    # "production" disables request timing logs
    environment: str = Field(default="development", validation_alias="APP_ENV")

    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    # CORS - comma-separated list of allowed origins (stored as string, parsed via property)
    cors_origins_str: str = Field(default="*", validation_alias="CORS_ORIGINS")

    # Ordering of bookmark lists by id; "desc" is most-recent-first
    bookmark_order: Literal["asc", "desc"] = Field(
        default="desc", validation_alias="BOOKMARK_ORDER",
    )

    @field_validator("bearer_token")
    @classmethod
    def validate_bearer_token(cls, v: str) -> str:
        """Reject a blank token, which would otherwise lock every client out."""
        if not v.strip():
            raise ValueError("BEARER_TOKEN must not be empty")
        return v

    @property
    def is_production(self) -> bool:
        """Whether the app runs in production mode."""
        return self.environment.lower() == "production"

    @property
    def cors_origins(self) -> list[str]:
        """Parse comma-separated CORS origins string into a list."""
        if not self.cors_origins_str:
            return []
        return [origin.strip() for origin in self.cors_origins_str.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

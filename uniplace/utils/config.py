"""
Configuration management for UniPlace.

Uses Pydantic Settings for type-safe configuration with environment variable support.
"""

from pathlib import Path
from typing import Annotated, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


# Base paths
ROOT_DIR = Path(__file__).parent.parent.parent
PACKAGE_DIR = ROOT_DIR / "uniplace"
DATA_DIR = ROOT_DIR / "data"


class DatabaseSettings(BaseSettings):
    """MongoDB database configuration."""

    model_config = SettingsConfigDict(env_prefix="DB_")

    host: str = "localhost"
    port: int = 27017
    name: str = "uniplace"
    username: str | None = None
    password: str | None = None


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: str = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | {message}"
    file_path: Path = ROOT_DIR / "logs" / "uniplace.log"
    rotation: str = "10 MB"
    retention: str = "30 days"
    console_output: bool = True


class EligibilitySettings(BaseSettings):
    """Extra preconditions checked when a student applies."""

    model_config = SettingsConfigDict(env_prefix="ELIGIBILITY_")

    # Reject applications from students without an uploaded resume
    require_resume: bool = False
    # Treat postings past their deadline as closed
    enforce_deadline: bool = False


class LifecycleSettings(BaseSettings):
    """Application status workflow configuration."""

    model_config = SettingsConfigDict(env_prefix="LIFECYCLE_")

    # When False any status may follow any other
    enforce_transitions: bool = False


class NotificationSettings(BaseSettings):
    """Notification dispatch configuration."""

    model_config = SettingsConfigDict(env_prefix="NOTIFY_")

    enabled: bool = True
    max_workers: int = Field(default=4, ge=1, le=64)


class AuthSettings(BaseSettings):
    """Identities granted admin rights by the identity provider."""

    model_config = SettingsConfigDict(env_prefix="AUTH_")

    admin_ids: Annotated[list[str], NoDecode] = Field(default_factory=list)

    @field_validator("admin_ids", mode="before")
    @classmethod
    def split_admin_ids(cls, v: object) -> object:
        """Split the comma separated AUTH_ADMIN_IDS value."""
        if isinstance(v, str):
            return [part.strip() for part in v.split(",") if part.strip()]
        return v


class AppSettings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application metadata
    name: str = "UniPlace"
    version: str = "0.1.0"
    description: str = "Campus placement eligibility and application tracking engine"
    debug: bool = False

    # Environment
    environment: Literal["development", "production", "testing"] = "development"

    # Nested settings
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    eligibility: EligibilitySettings = Field(default_factory=EligibilitySettings)
    lifecycle: LifecycleSettings = Field(default_factory=LifecycleSettings)
    notifications: NotificationSettings = Field(default_factory=NotificationSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)


# Global settings instance (singleton pattern)
_settings: AppSettings | None = None


def get_settings() -> AppSettings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = AppSettings()
    return _settings


def reload_settings() -> AppSettings:
    """Force reload settings from environment."""
    global _settings
    _settings = AppSettings()
    return _settings

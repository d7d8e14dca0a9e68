"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set all values explicitly.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GoogleCalendarSettings(BaseSettings):
    """Google Calendar API settings.

    Token acquisition (service-account key exchange) happens outside this
    service; it only needs a bearer token and the identity events are
    created under.

    Environment variables:
        LABRES_GOOGLE_ACCESS_TOKEN: OAuth bearer token for Calendar API v3
        LABRES_GOOGLE_SERVICE_ACCOUNT_EMAIL: Identity that creates events
        LABRES_GOOGLE_API_BASE_URL: API root (default: https://www.googleapis.com/calendar/v3)
        LABRES_GOOGLE_TIMEOUT_SECONDS: HTTP timeout per call (default: 30)
        LABRES_GOOGLE_LOOKBACK_HOURS: How far back event listing starts (default: 24)
    """

    model_config = SettingsConfigDict(
        env_prefix="LABRES_GOOGLE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    access_token: SecretStr = Field(
        default=SecretStr(""),
        description="OAuth bearer token for the Calendar API",
    )
    service_account_email: str = Field(
        default="",
        description="Email of the service account that creates events",
    )
    api_base_url: str = Field(
        default="https://www.googleapis.com/calendar/v3",
        description="Calendar API root URL",
    )
    timeout_seconds: float = Field(
        default=30.0,
        description="HTTP timeout per Calendar API call",
        gt=0,
    )
    lookback_hours: int = Field(
        default=24,
        description="Hours before now from which events are listed",
        ge=0,
        le=24 * 31,
    )


class StorageSettings(BaseSettings):
    """Local JSON stores.

    Environment variables:
        LABRES_STORAGE_IDENTITY_LINKS_FILE: Identity link store
        LABRES_STORAGE_CALENDAR_MAPPINGS_FILE: Reservation id <-> event id map
    """

    model_config = SettingsConfigDict(
        env_prefix="LABRES_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    identity_links_file: Path = Field(
        default=Path("/var/lib/lab-resource-manager/identity_links.json"),
        description="Path of the identity link JSON store",
    )
    calendar_mappings_file: Path = Field(
        default=Path("/var/lib/lab-resource-manager/google_calendar_mappings.json"),
        description="Path of the calendar id mapping JSON store",
    )


class WatcherSettings(BaseSettings):
    """Change watcher settings.

    Environment variables:
        LABRES_WATCHER_ENABLED: Run the polling loop (default: true)
        LABRES_WATCHER_POLL_INTERVAL_SECONDS: Seconds between polls (default: 60)
    """

    model_config = SettingsConfigDict(
        env_prefix="LABRES_WATCHER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    enabled: bool = Field(default=True, description="Run the change watcher")
    poll_interval_seconds: int = Field(
        default=60,
        description="Seconds between two polls",
        ge=1,
        le=3600,
    )


class Settings(BaseSettings):
    """Main application settings.

    Environment variables:
        LABRES_RESOURCE_CONFIG_PATH: TOML resource catalog
        LABRES_REPOSITORY_BACKEND: google_calendar or in_memory
        LABRES_HOST: HTTP bind address (default: 127.0.0.1)
        LABRES_PORT: HTTP port (default: 8000)
    """

    model_config = SettingsConfigDict(
        env_prefix="LABRES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = Field(
        default="Lab Resource Manager", description="Application name"
    )
    debug: bool = Field(default=False, description="Debug mode")
    host: str = Field(default="127.0.0.1", description="Address the HTTP server binds to")
    port: int = Field(default=8000, description="HTTP server port", ge=1, le=65535)
    resource_config_path: Path = Field(
        default=Path("/etc/lab-resource-manager/resources.toml"),
        description="Path of the TOML resource catalog",
    )
    repository_backend: Literal["google_calendar", "in_memory"] = Field(
        default="google_calendar",
        description="Reservation storage backend",
    )

    @model_validator(mode="after")
    def validate_resource_config_suffix(self) -> "Settings":
        """The resource catalog is TOML."""
        if self.resource_config_path.suffix != ".toml":
            raise ValueError(
                f"resource_config_path must point to a .toml file, "
                f"got {self.resource_config_path}"
            )
        return self

    @property
    def google_calendar(self) -> GoogleCalendarSettings:
        return get_google_calendar_settings()

    @property
    def storage(self) -> StorageSettings:
        return get_storage_settings()

    @property
    def watcher(self) -> WatcherSettings:
        return get_watcher_settings()


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


@lru_cache
def get_google_calendar_settings() -> GoogleCalendarSettings:
    """Get cached Google Calendar settings."""
    return GoogleCalendarSettings()


@lru_cache
def get_storage_settings() -> StorageSettings:
    """Get cached storage settings."""
    return StorageSettings()


@lru_cache
def get_watcher_settings() -> WatcherSettings:
    """Get cached watcher settings."""
    return WatcherSettings()

"""
Configuration Management for Ledgerbook

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Storage locations and display defaults are read once and validated
at startup.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Local JSON document storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGERBOOK_STORAGE_",
        extra="ignore"
    )

    data_dir: Path = Field(
        default=Path("~/.ledgerbook"),
        description="Directory holding the database document"
    )
    db_filename: str = Field(
        default="ledgerbook_db.json",
        description="File name of the committed database document"
    )
    temp_filename: str = Field(
        default="ledgerbook_db.tmp",
        description="Scratch file written before replacing the database"
    )
    backup_prefix: str = Field(
        default="ledgerbook_backup",
        description="File name prefix for exported backups"
    )
    write_retry_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts for a single database write before giving up"
    )

    @field_validator('data_dir')
    @classmethod
    def expand_data_dir(cls, v: Path) -> Path:
        """Resolve ~ so every consumer sees the same absolute location."""
        return v.expanduser()

    @field_validator('db_filename', 'temp_filename')
    @classmethod
    def validate_filename(cls, v: str) -> str:
        if not v.strip() or "/" in v:
            raise ValueError(f"Invalid file name: {v!r}")
        return v

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_filename

    @property
    def temp_path(self) -> Path:
        return self.data_dir / self.temp_filename


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    app_version: str = Field(
        default="1.0.0",
        description="Version stamped into the database meta block"
    )

    # Display
    default_currency: str = Field(
        default="₹",
        min_length=1,
        max_length=8,
        description="Currency symbol used until the user picks one"
    )
    date_display_format: str = Field(
        default="%x",
        description="strftime pattern for date fields (locale date by default)"
    )

    # Search
    search_result_limit: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Maximum results returned per entity type"
    )
    min_query_length: int = Field(
        default=2,
        ge=1,
        description="Queries shorter than this are not searched"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    try:
        _ = settings.storage
        results["storage"] = True
    except Exception as e:
        results["storage"] = False
        results["storage_error"] = str(e)

    try:
        _ = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results

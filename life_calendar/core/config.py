"""
Application configuration using Pydantic Settings.

Centralizes all configuration with environment variable support.
Every variable is read with the ``LIFE_CALENDAR_`` prefix, e.g.
``LIFE_CALENDAR_MORTALITY_TABLE_PATH``.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_MORTALITY_TABLE_PATH = Path(__file__).parent.parent / "data" / "mortality_table.yaml"


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_prefix="LIFE_CALENDAR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore extra env vars
    )

    # Mortality table (YAML or JSON); bundled table when unset
    mortality_table_path: Optional[Path] = None

    # Profile storage
    database_url: str = "sqlite+aiosqlite:///./data/life_calendar.db"
    default_profile_id: str = "default"

    # Rendering
    output_dir: str = "~/.life_calendar/images"

    # Service
    view_cache_size: int = 128

    # Environment
    environment: str = "development"
    log_level: str = "INFO"
    log_to_file: bool = False

    def resolved_mortality_table_path(self) -> Path:
        """Configured table path, or the bundled default."""
        if self.mortality_table_path is None:
            return DEFAULT_MORTALITY_TABLE_PATH
        return self.mortality_table_path.expanduser()

    def resolved_output_dir(self) -> Path:
        return Path(self.output_dir).expanduser()


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

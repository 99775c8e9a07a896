"""
Application configuration using Pydantic Settings.

Loads configuration from environment variables (prefixed with ``UPT_``)
with type validation and sensible defaults for interactive use.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from upt.exceptions import HomeResolutionError

# Name of the reset record inside the user's home directory
RESET_FILE_NAME = ".upt"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="UPT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # =========================================================================
    # Persisted State
    # =========================================================================
    reset_file: Path | None = Field(
        default=None,
        description="Location of the reset record (defaults to ~/.upt)",
    )

    # =========================================================================
    # Watch Mode
    # =========================================================================
    watch_interval_ms: int = Field(
        default=5, ge=1, le=1000, description="Wait per redraw cycle in milliseconds"
    )

    # =========================================================================
    # Observability
    # =========================================================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING", description="Logging level"
    )
    log_format: Literal["console", "json"] = Field(
        default="console", description="Log output format"
    )

    @property
    def watch_interval_seconds(self) -> float:
        """Watch wait interval in seconds."""
        return self.watch_interval_ms / 1000


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


def resolve_reset_path(settings: Settings) -> Path:
    """
    Resolve where the reset record lives.

    Args:
        settings: Application settings

    Returns:
        The configured override, or ``~/.upt``

    Raises:
        HomeResolutionError: If no override is set and the home
            directory cannot be determined
    """
    if settings.reset_file is not None:
        return settings.reset_file.expanduser()

    try:
        home = Path.home()
    except (RuntimeError, KeyError) as e:
        raise HomeResolutionError(f"Impossible to get your home dir: {e}") from e

    return home / RESET_FILE_NAME

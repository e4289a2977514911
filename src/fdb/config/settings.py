"""
Environment settings using Pydantic.

This is the only place fdb reads the process environment (``FDB_`` prefix);
everything downstream receives explicit values.
"""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    # Directory for fdb.yaml and managed binaries (bin/)
    home: Path = Path("~/.fdb")

    # Namespace for exposure services, secrets and port-forwards
    namespace: str = "default"

    # Logging
    log_level: str = "WARNING"
    log_format: str = "console"  # console, json

    model_config = SettingsConfigDict(env_prefix="FDB_")

    @property
    def home_dir(self) -> Path:
        return self.home.expanduser()

    @property
    def bin_dir(self) -> Path:
        return self.home_dir / "bin"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

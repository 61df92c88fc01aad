"""Application settings and configuration."""

from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


def get_default_data_dir() -> Path:
    """Return the default data directory."""
    return Path("./data")


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    app_name: str = "Stock Portfolios"
    app_version: str = "0.1.0"

    # Reference currency all aggregated figures are normalized into (overridable per call)
    ref_currency: str = "TWD"

    # Storage
    repo_kind: str = "sqlite"  # "memory" | "sqlite"
    data_dir: Optional[Path] = None
    database_url: Optional[str] = None

    # Market data
    price_provider: str = "yahoo"  # "yahoo" | "stub" | "alphavantage" (alias "alpha", "av")
    quote_cache_ttl_seconds: int = 60
    fx_cache_ttl_seconds: int = 300
    fetch_timeout_seconds: float = 8.0
    history_lookback_days: int = 14
    failure_backoff_seconds: int = 60
    alphavantage_api_key: Optional[str] = None

    # Calendar used for "today"
    timezone: str = "US/Eastern"

    # HTTP server (entrypoint.py)
    host: str = "127.0.0.1"
    port: int = 8001

    log_level: str = "INFO"

    def get_data_dir(self) -> Path:
        """Get the data directory, creating it if needed."""
        data_dir = self.data_dir or get_default_data_dir()
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir

    def get_database_url(self) -> str:
        """Get database URL, deriving from data_dir if not set."""
        if self.database_url:
            return self.database_url
        db_path = self.get_data_dir() / "portfolios.db"
        return f"sqlite:///{db_path}"

    def get_ref_currency(self) -> str:
        return self.ref_currency.strip().upper()


# Global settings instance (can be replaced at runtime)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Return the current settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Settings) -> None:
    """Set the global settings instance."""
    global _settings
    _settings = settings


def reset_settings() -> None:
    """Reset settings to force reload."""
    global _settings
    _settings = None

"""Application settings and configuration."""

from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


def get_default_data_dir() -> Path:
    """Return the default data directory under the user's Documents folder."""
    return Path.home() / "Documents" / "Stockfolio Data"


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="STOCKFOLIO_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Stockfolio"
    app_version: str = "0.1.0"

    # Data directory (the state database lives here)
    data_dir: Optional[Path] = None

    # Database URL (derived from data_dir if not set explicitly)
    database_url: Optional[str] = None

    log_level: str = "INFO"

    # HTTP server
    host: str = "127.0.0.1"
    port: int = 8001

    # Valuation
    history_days: int = 30
    allow_oversell: bool = True

    # First-run / fallback account
    default_account_name: str = "Main Account"
    default_account_cash: float = 10000.0

    # Market data
    refresh_interval_seconds: float = 60.0
    auto_refresh: bool = True
    quote_fetch_timeout_seconds: float = 10.0
    quote_fetch_workers: int = 8
    force_mock_market_data: bool = False
    mock_seed: Optional[int] = None

    # Portfolio assistant
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4.1-mini"

    def get_data_dir(self) -> Path:
        """Get the data directory, creating it if needed."""
        data_dir = self.data_dir or get_default_data_dir()
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir

    def get_database_url(self) -> str:
        """Get database URL, deriving from data_dir if not set."""
        if self.database_url:
            return self.database_url
        db_path = self.get_data_dir() / "stockfolio.db"
        return f"sqlite:///{db_path}"


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

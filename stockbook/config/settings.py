"""
Application settings with Pydantic v2 validation.

Loads configuration from environment variables with sensible defaults.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Storage configuration."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    data_dir: Path = Path("data")
    db_name: str = "stockbook.db"

    # SQLite settings
    pool_size: int = 5
    busy_timeout: int = 30000  # ms

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name


class InsightSettings(BaseSettings):
    """Thresholds used by the insights engine."""

    model_config = SettingsConfigDict(env_prefix="INSIGHTS_")

    # Dead stock: no sales within this many days
    dead_stock_days: int = 30
    high_value_capital: float = 10000.0
    large_quantity: int = 50

    # Fast-moving classification
    fast_moving_days: int = 30
    max_window_days: int = 36500
    fast_moving_min_sales: int = 5
    fast_moving_min_quantity: int = 20
    reorder_buffer_days: int = 14
    stable_days_sentinel: int = 999

    # Low stock
    stockout_window_days: int = 7

    # Result sizes
    comprehensive_top_n: int = 10
    recent_movements: int = 10


class APISettings(BaseSettings):
    """API server configuration."""

    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    cors_origins: list[str] = ["http://localhost:3000"]
    slow_request_ms: float = 500.0


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Stockbook"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["auto", "console", "json"] = "auto"

    default_reorder_level: int = 10

    # Sub-settings
    storage: StorageSettings = Field(default_factory=StorageSettings)
    insights: InsightSettings = Field(default_factory=InsightSettings)
    api: APISettings = Field(default_factory=APISettings)


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings (for testing)."""
    global _settings
    _settings = None

"""Configuration management for regime_alloc."""

import logging

import structlog
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="REGIME_ALLOC_",
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # Model inputs
    window_length: int = 5
    trading_days_per_year: int = 252

    # Strategy simulation
    noise_amplitude: float = 0.0025
    random_seed: int | None = None

    # Application
    log_level: str = "INFO"

    # API Settings
    api_host: str = "0.0.0.0"
    api_port: int = 8000


settings = Settings()


def configure_logging(level: str | None = None) -> None:
    """Install a structlog logger that drops events below ``level``."""
    level_name = (level or settings.log_level).upper()
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level_name)
        ),
    )

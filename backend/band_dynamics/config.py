"""Application configuration loaded from environment variables."""

from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./band_dynamics.db"

    # App
    APP_ENV: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # Drama engine
    MAX_DRAMA_EVENTS_PER_TRIGGER: int = 2
    PRESET_CATALOG_PATH: Path | None = None  # None = shipped data/drama_presets.yaml

    # Starting chemistry for newly created bands
    DEFAULT_CHEMISTRY_LEVEL: int = 50
    DEFAULT_ROMANTIC_TENSION: int = 0
    DEFAULT_CREATIVE_ALIGNMENT: int = 50
    DEFAULT_CONFLICT_INDEX: int = 0

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()

"""
Data layer configuration using pydantic-settings.
All config is loaded from environment variables (or .env) with sensible defaults.
DATABASE_URL has no default: storage operations fail fast when it is unset.
"""

from typing import Optional

from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "Evently"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: Optional[str] = None
    DB_POOL_SIZE: int = 10
    DB_POOL_TIMEOUT: int = 15
    DB_SERVER_SELECTION_TIMEOUT: float = 15.0  # seconds
    DB_ECHO: bool = False

    model_config = {
        "env_file": ".env",
        "case_sensitive": True,
        "extra": "ignore",
    }


@lru_cache()
def get_settings() -> Settings:
    return Settings()

"""Engine configuration via environment variables."""

from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Engine settings loaded from environment variables (prefix FORMRULES_)."""

    # Logging
    LOG_LEVEL: str = "info"
    DEBUG: bool = False

    # Custom callbacks
    CALLBACK_DELIMITER: str = "."
    ALLOW_MODULE_CALLBACKS: bool = True

    # Message rendering
    LABEL_FALLBACK_TO_KEY: bool = True

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "env_prefix": "FORMRULES_"}


@lru_cache
def get_settings() -> Settings:
    return Settings()

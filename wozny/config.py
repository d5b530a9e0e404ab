import logging

from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    MISSING_SENTINEL: str = "[MISSING]"
    INDEX_FIELD: str = "__wozny_index"

    # Column context inference
    CONTEXT_SAMPLE_SIZE: int = 50
    STATE_CODE_RATIO: float = 0.7

    # Splittable-column classification
    SPLIT_SAMPLE_SIZE: int = 30
    SPLIT_MIN_SAMPLES: int = 5
    SPLIT_UNIQUENESS_RATIO: float = 0.7
    SPLIT_MATCH_RATIO: float = 0.4

    # Address parser input bounds
    ADDRESS_MIN_LENGTH: int = 5
    ADDRESS_MAX_LENGTH: int = 200

    PARTIAL_KEY_MIN_LENGTH: int = 3

    LOG_LEVEL: str = "WARNING"
    DEBUG: bool = False

    class Config:
        env_file = ".env"
        env_prefix = "WOZNY_"


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()


def configure_logging(level: str | None = None) -> None:
    """Apply LOG_LEVEL to the package logger. Handlers are left to the caller."""
    logging.getLogger("wozny").setLevel((level or get_settings().LOG_LEVEL).upper())

"""
Runtime configuration for the memorization trainer.

Values come from environment variables, optionally loaded from a .env file.
"""

import os
from functools import lru_cache
from typing import List

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()


class Settings(BaseModel):
    """Settings shared by the API server, the web UI and the API client."""
    quran_api_base_url: str = Field("https://api.alquran.cloud/v1/", description="AlQuran Cloud API root")
    translation_edition: str = Field("en.asad", description="Edition used for translations")
    audio_edition: str = Field("ar.alafasy", description="Edition used for recitation audio")
    request_timeout: float = Field(10.0, gt=0, description="Upstream request timeout in seconds")
    default_user_id: int = Field(1, ge=1)
    default_username: str = "learner"
    audio_cache_dir: str = ".audio_cache"
    host: str = "127.0.0.1"
    port: int = Field(8000, ge=1, le=65535)
    log_level: str = "info"
    cors_origins: List[str] = ["*"]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Build settings from the environment (cached)."""
    env = {
        "quran_api_base_url": os.getenv("QURAN_API_BASE_URL"),
        "translation_edition": os.getenv("QURAN_TRANSLATION_EDITION"),
        "audio_edition": os.getenv("QURAN_AUDIO_EDITION"),
        "request_timeout": os.getenv("QURAN_API_TIMEOUT"),
        "default_user_id": os.getenv("HIFZ_DEFAULT_USER_ID"),
        "default_username": os.getenv("HIFZ_DEFAULT_USERNAME"),
        "audio_cache_dir": os.getenv("HIFZ_AUDIO_CACHE_DIR"),
        "host": os.getenv("HIFZ_HOST"),
        "port": os.getenv("HIFZ_PORT"),
        "log_level": os.getenv("HIFZ_LOG_LEVEL"),
    }
    origins = os.getenv("HIFZ_CORS_ORIGINS")
    if origins:
        env["cors_origins"] = [origin.strip() for origin in origins.split(",") if origin.strip()]

    return Settings(**{key: value for key, value in env.items() if value is not None})

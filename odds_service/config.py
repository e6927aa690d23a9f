# odds_service/config.py
from functools import lru_cache
from typing import List

import structlog
from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # --- Scraping Targets ---
    TARGET_URLS: List[str] = []
    SCRAPE_INTERVAL_SECONDS: int = 300
    SCHEDULER_ENABLED: bool = False

    # --- HTTP ---
    HTTP_TIMEOUT: int = 20
    HTTP_MAX_ATTEMPTS: int = 3

    # --- Persistence ---
    DATABASE_PATH: str = "./odds_alchemist.db"

    # --- Logging ---
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # --- API Gateway Configuration ---
    UVICORN_HOST: str = "127.0.0.1"
    UVICORN_PORT: int = 8000

    # --- CORS Configuration ---
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000"]

    model_config = {"env_file": ".env", "case_sensitive": True}

    @field_validator("TARGET_URLS")
    @classmethod
    def strip_blank_urls(cls, urls: List[str]) -> List[str]:
        return [url.strip() for url in urls if url and url.strip()]

    @field_validator("SCRAPE_INTERVAL_SECONDS", "HTTP_TIMEOUT", "HTTP_MAX_ATTEMPTS")
    @classmethod
    def must_be_positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("must be a positive number")
        return value


@lru_cache()
def get_settings() -> Settings:
    """Loads settings once per process."""
    settings = Settings()
    structlog.get_logger(__name__).info(
        "Settings loaded",
        target_url_count=len(settings.TARGET_URLS),
        scheduler_enabled=settings.SCHEDULER_ENABLED,
    )
    return settings

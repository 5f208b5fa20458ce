"""Configuration management for the Wasfa recipe service.

Loads environment variables from system environment and .env file.
Priority order: system environment > .env file > hardcoded defaults

Missing API keys are not configuration errors: without GEMINI_API_KEY the
service answers from its static fallback tables, and without YOUTUBE_API_KEY
recipes are returned without video links.
"""

import os
from typing import Optional

from dotenv import load_dotenv


# Load .env file (if exists, silently continues if missing)
load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


class Config:
    """Application configuration loaded from environment variables."""

    def __init__(self) -> None:
        """Initialize configuration from environment variables."""
        # Gemini API key: empty means recipes come from the static fallback table
        self.GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
        # Default: gemini-2.5-flash (fast, cost-effective for short JSON answers)
        self.GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
        # YouTube Data API v3 key used to attach a video to each recipe
        self.YOUTUBE_API_KEY: str = os.getenv("YOUTUBE_API_KEY", "")
        # Server Port
        self.PORT: int = int(os.getenv("PORT", "7777"))
        # Number of recipes requested from the model per query. Default: 3
        self.MAX_RECIPES: int = int(os.getenv("MAX_RECIPES", "3"))

        # LLM Model Parameters
        # Temperature: 0.7 keeps recipes varied without drifting off the ingredient list
        self.TEMPERATURE: float = float(os.getenv("TEMPERATURE", "0.7"))
        self.TOP_P: float = float(os.getenv("TOP_P", "0.8"))
        self.TOP_K: int = int(os.getenv("TOP_K", "40"))
        # Max Output Tokens: 2048 fits three recipes with instructions
        self.MAX_OUTPUT_TOKENS: int = int(os.getenv("MAX_OUTPUT_TOKENS", "2048"))

        # Timeouts for external calls (seconds). A timeout is handled like any other
        # network error: recipes fall back to the static table, videos stay unset.
        self.AI_TIMEOUT_SECONDS: float = float(os.getenv("AI_TIMEOUT_SECONDS", "30"))
        self.VIDEO_TIMEOUT_SECONDS: float = float(os.getenv("VIDEO_TIMEOUT_SECONDS", "10"))

        # Retry Configuration for transient Gemini failures (timeouts, 429, 5xx)
        # MAX_RETRIES: total attempts per generation, including the first one
        self.MAX_RETRIES: int = int(os.getenv("MAX_RETRIES", "2"))
        # DELAY_BETWEEN_RETRIES: initial delay in seconds, doubled after each retry
        self.DELAY_BETWEEN_RETRIES: float = float(os.getenv("DELAY_BETWEEN_RETRIES", "1"))

        # Recipe Cache
        # ENABLE_CACHE: memoize generated recipe bundles by ingredient signature
        self.ENABLE_CACHE: bool = _env_bool("ENABLE_CACHE", "true")
        # CACHE_SINGLE_FLIGHT: serialize concurrent requests for the same ingredients
        # so only the first one calls Gemini. Off by default: concurrent identical
        # misses each regenerate and each store a row, which is harmless.
        self.CACHE_SINGLE_FLIGHT: bool = _env_bool("CACHE_SINGLE_FLIGHT", "false")
        # CACHE_DB_FILE: SQLite file used when DATABASE_URL is not set
        self.CACHE_DB_FILE: str = os.getenv("CACHE_DB_FILE", "tmp/recipe_cache.db")
        # DATABASE_URL: Optional SQLAlchemy URL (e.g. PostgreSQL) for production use
        self.DATABASE_URL: Optional[str] = os.getenv("DATABASE_URL")

    @property
    def cache_db_url(self) -> str:
        """SQLAlchemy URL of the recipe cache database."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return f"sqlite:///{self.CACHE_DB_FILE}"

    def validate(self) -> None:
        """Validate configuration values.

        Raises:
            ValueError: If a numeric setting is out of range.
        """
        if not (1 <= self.MAX_RECIPES <= 10):
            raise ValueError(f"MAX_RECIPES must be between 1 and 10, got: {self.MAX_RECIPES}")
        if not (0.0 <= self.TEMPERATURE <= 2.0):
            raise ValueError(f"TEMPERATURE must be between 0.0 and 2.0, got: {self.TEMPERATURE}")
        if not (0.0 < self.TOP_P <= 1.0):
            raise ValueError(f"TOP_P must be in (0.0, 1.0], got: {self.TOP_P}")
        if self.TOP_K < 1:
            raise ValueError(f"TOP_K must be at least 1, got: {self.TOP_K}")
        if self.MAX_OUTPUT_TOKENS < 512:
            raise ValueError(f"MAX_OUTPUT_TOKENS must be at least 512, got: {self.MAX_OUTPUT_TOKENS}")
        if self.AI_TIMEOUT_SECONDS <= 0:
            raise ValueError(f"AI_TIMEOUT_SECONDS must be positive, got: {self.AI_TIMEOUT_SECONDS}")
        if self.VIDEO_TIMEOUT_SECONDS <= 0:
            raise ValueError(f"VIDEO_TIMEOUT_SECONDS must be positive, got: {self.VIDEO_TIMEOUT_SECONDS}")
        if self.MAX_RETRIES < 1:
            raise ValueError(f"MAX_RETRIES must be at least 1, got: {self.MAX_RETRIES}")
        if self.DELAY_BETWEEN_RETRIES < 0:
            raise ValueError(
                f"DELAY_BETWEEN_RETRIES must not be negative, got: {self.DELAY_BETWEEN_RETRIES}"
            )


# Create module-level config instance and validate immediately
config = Config()
config.validate()

"""Application configuration using Pydantic Settings.

Loads settings from environment variables and .env file.
All settings have sensible defaults for local development.
"""

from __future__ import annotations

import json
import logging

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Valid Python logging levels
VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class Settings(BaseSettings):
    """Service-wide configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- Server ---
    service_env: str = "development"
    host: str = "0.0.0.0"
    port: int = 5000
    debug: bool = False

    # --- Logging ---
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level to uppercase.

        Falls back to INFO if an invalid level is provided.
        """
        normalized = v.upper().strip()
        if normalized not in VALID_LOG_LEVELS:
            # Log a warning (to stderr since logging may not be configured yet)
            import sys

            print(
                f"WARNING: Invalid LOG_LEVEL '{v}'. "
                f"Valid levels are: {', '.join(sorted(VALID_LOG_LEVELS))}. "
                "Falling back to INFO.",
                file=sys.stderr,
            )
            return "INFO"
        return normalized

    def get_log_level_int(self) -> int:
        """Return the integer value of the configured log level."""
        return getattr(logging, self.log_level, logging.INFO)

    # --- Fetching ---
    scrape_request_timeout: float = 45.0  # seconds per attempt
    scrape_max_redirects: int = 10
    scrape_max_attempts: int = 3
    # Pre-request delay: base + uniform(0, jitter)
    scrape_pre_request_delay: float = 1.0
    scrape_pre_request_jitter: float = 2.0
    # Backoff before attempt n: backoff * n + uniform(0, jitter)
    scrape_retry_backoff: float = 2.0
    scrape_retry_jitter: float = 1.5

    # --- Extraction thresholds (characters unless noted) ---
    extraction_min_content_length: int = 20
    extraction_specialized_min_length: int = 500
    extraction_chapter_match_min_length: int = 1000
    extraction_chapter_min_length: int = 800
    extraction_container_min_length: int = 200
    extraction_selector_min_length: int = 50
    extraction_paragraph_min_length: int = 10
    extraction_paragraph_max_fragments: int = 20
    extraction_title_min_length: int = 5
    extraction_contamination_ratio: float = 0.10  # UI keyword chars / total

    @model_validator(mode="after")
    def validate_retry_schedule(self) -> Settings:
        """Jitter must stay below the backoff step so delays keep growing."""
        if self.scrape_retry_jitter >= self.scrape_retry_backoff:
            raise ValueError(
                "scrape_retry_jitter must be smaller than scrape_retry_backoff"
            )
        if self.scrape_max_attempts < 1:
            raise ValueError("scrape_max_attempts must be at least 1")
        return self

    # --- CORS ---
    cors_origins: str = "http://localhost:3000,http://localhost:5000"

    def get_cors_origins(self) -> list[str]:
        """Parse cors_origins as JSON list or comma-separated string."""
        raw = self.cors_origins.strip()
        if raw.startswith("["):
            return json.loads(raw)
        return [o.strip() for o in raw.split(",") if o.strip()]


settings = Settings()

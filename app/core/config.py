"""
Configuration management for the admin search typeahead.

This module provides centralized configuration management supporting:
- Environment variables and an optional .env file
- Typeahead gating, ranking and cache tuning
- Directory API (users/FAQs JSON endpoints) connection settings
"""

from functools import lru_cache
from typing import Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import structlog

logger = structlog.get_logger(__name__)


class Settings(BaseSettings):
    """
    Application settings with defaults matching the dashboard's
    search-as-you-type behaviour.
    """

    # Environment Detection
    ENVIRONMENT: str = Field(
        default="local",
        description="Environment (local/development/production)"
    )
    DEBUG: bool = Field(
        default=False,
        description="Debug mode"
    )

    # Logging
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level"
    )
    LOG_FORMAT: str = Field(
        default="console",
        description="Log format (json/console)"
    )

    # Typeahead Behaviour
    TYPEAHEAD_MIN_CHARACTERS: int = Field(
        default=2,
        description="Minimum query length before ranking or provider calls"
    )
    TYPEAHEAD_MAX_SUGGESTIONS: int = Field(
        default=5,
        description="Maximum number of ranked suggestions displayed"
    )
    TYPEAHEAD_BLUR_GRACE_MS: int = Field(
        default=150,
        description="Delay before closing the dropdown on blur"
    )
    TYPEAHEAD_HIDE_EXACT_MATCH: bool = Field(
        default=False,
        description="Hide suggestions identical to the typed value"
    )

    # Suggestion Cache
    TYPEAHEAD_CACHE_MAX_AGE_MS: int = Field(
        default=300_000,
        description="Cache entry lifetime in milliseconds"
    )
    TYPEAHEAD_CACHE_MAX_ENTRIES: int = Field(
        default=50,
        description="Maximum cached queries per typeahead"
    )

    # Relevance Ranking
    FUZZY_SIMILARITY_THRESHOLD: float = Field(
        default=0.6,
        description="Minimum edit-distance similarity for a fuzzy match"
    )
    FUZZY_SCORE_MULTIPLIER: float = Field(
        default=60.0,
        description="Multiplier applied to fuzzy similarity"
    )
    UNICODE_WORD_BOUNDARIES: bool = Field(
        default=False,
        description="Use Unicode word characters for whole-word matching"
    )

    # Directory API (users.json / faqs.json)
    DIRECTORY_API_BASE_URL: str = Field(
        default="http://localhost:4000",
        description="Base URL of the dashboard API serving users and FAQs"
    )
    DIRECTORY_API_TIMEOUT_SECONDS: float = Field(
        default=5.0,
        description="HTTP timeout for directory lookups"
    )
    DIRECTORY_AUTH_TOKEN: Optional[str] = Field(
        default=None,
        description="Session token sent as the auth_token cookie"
    )
    USER_SEARCH_MAX_RESULTS: int = Field(
        default=8,
        description="Maximum users returned by a user search"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator('ENVIRONMENT')
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate and normalize environment name."""
        v = v.lower()
        if v not in ('local', 'development', 'staging', 'production'):
            logger.warning(f"Unknown environment: {v}, defaulting to 'local'")
            return 'local'
        return v

    @field_validator('LOG_LEVEL')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize log level names."""
        v = v.upper()
        if v not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
            raise ValueError(f"Unsupported LOG_LEVEL: {v}")
        return v

    @field_validator(
        'TYPEAHEAD_MAX_SUGGESTIONS',
        'TYPEAHEAD_CACHE_MAX_AGE_MS',
        'TYPEAHEAD_CACHE_MAX_ENTRIES',
        'USER_SEARCH_MAX_RESULTS',
    )
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("must be greater than zero")
        return v

    @field_validator('TYPEAHEAD_MIN_CHARACTERS', 'TYPEAHEAD_BLUR_GRACE_MS')
    @classmethod
    def validate_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("must not be negative")
        return v

    @field_validator('FUZZY_SIMILARITY_THRESHOLD')
    @classmethod
    def validate_threshold(cls, v: float) -> float:
        """Similarity is a ratio, so the threshold must be one too."""
        if not 0.0 <= v < 1.0:
            raise ValueError("FUZZY_SIMILARITY_THRESHOLD must be in [0.0, 1.0)")
        return v

    @field_validator('FUZZY_SCORE_MULTIPLIER')
    @classmethod
    def validate_multiplier(cls, v: float) -> float:
        # Fuzzy scores must stay below the substring tier (70)
        if not 0.0 < v <= 70.0:
            raise ValueError("FUZZY_SCORE_MULTIPLIER must be in (0, 70]")
        return v

    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.ENVIRONMENT == 'production'


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings.

    Loads settings from environment variables and the .env file and
    returns a validated, cached Settings instance.
    """
    settings = Settings()

    logger.info(
        "Settings loaded",
        environment=settings.ENVIRONMENT,
        debug=settings.DEBUG,
        min_characters=settings.TYPEAHEAD_MIN_CHARACTERS,
        max_suggestions=settings.TYPEAHEAD_MAX_SUGGESTIONS,
        cache_max_entries=settings.TYPEAHEAD_CACHE_MAX_ENTRIES,
        directory_api=settings.DIRECTORY_API_BASE_URL,
        directory_auth_configured=bool(settings.DIRECTORY_AUTH_TOKEN)
    )

    return settings

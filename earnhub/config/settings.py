"""
Application settings.

Loads configuration from environment variables using pydantic-settings.
"""

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from loguru import logger
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from earnhub.config.constants import (
    DEFAULT_HARD_WITHDRAWAL_CEILING,
    DEFAULT_OFFER_JOIN_DURATION_DAYS,
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str
    database_echo: bool = False

    # Redis (for Dramatiq and distributed locks)
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_password: str | None = None
    redis_db: int = 0

    # Application
    environment: str = "production"
    debug: bool = False
    log_level: str = "INFO"
    timezone: str = Field(
        default="UTC",
        description="IANA zone used for calendar days and profit periods",
    )

    # HTTP surfaces
    api_host: str = "0.0.0.0"
    api_port: int = Field(
        default=8080, ge=1, le=65535, description="Request API port"
    )
    health_check_port: int = Field(
        default=8081, ge=1, le=65535, description="Health check HTTP server port"
    )

    # Withdrawals
    hard_withdrawal_ceiling: int = Field(
        default=DEFAULT_HARD_WITHDRAWAL_CEILING,
        gt=0,
        description="Single request ceiling applied regardless of package",
    )

    # Offers and profit job
    offer_join_duration_days: int = Field(
        default=DEFAULT_OFFER_JOIN_DURATION_DAYS,
        gt=0,
        description="Days an offer join stays active after joining",
    )
    daily_profit_hour: int = Field(
        default=0, ge=0, le=23, description="Hour of the daily profit run"
    )
    monthly_profit_day: int = Field(
        default=1, ge=1, le=28, description="Day of month of the monthly profit run"
    )
    profit_lock_timeout: int = Field(
        default=600,
        gt=0,
        description="Distributed lock timeout for a profit run in seconds",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Validate that timezone is a known IANA zone."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {v}") from e
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize log level name."""
        level = v.upper()
        allowed = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}
        if level not in allowed:
            raise ValueError(f"Invalid log level: {v}")
        return level

    @model_validator(mode="after")
    def validate_production(self) -> "Settings":
        """Validate production-specific requirements."""
        if self.environment == "production":
            if self.debug:
                raise ValueError(
                    "DEBUG must be False in production environment. "
                    "Set DEBUG=false in your .env file."
                )
            if self.database_url.startswith("sqlite"):
                logger.warning(
                    "DATABASE_URL points to SQLite in production. "
                    "Use PostgreSQL (postgresql+asyncpg://...)."
                )
        return self

    @property
    def tzinfo(self) -> ZoneInfo:
        """Local server timezone."""
        return ZoneInfo(self.timezone)


settings = Settings()

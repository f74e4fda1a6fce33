# backend/app/core/config.py
import logging
import os
from pathlib import Path
from typing import List

from dotenv import load_dotenv
from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEV_SECRET_KEY = "change-me-in-production-trainerlocator-secret"


def is_running_tests() -> bool:
    """
    Detect if code is running under pytest.

    PYTEST_CURRENT_TEST is set automatically by pytest during test runs, and is
    not expected to be present in production environments.
    """
    return os.getenv("PYTEST_CURRENT_TEST") is not None


logger = logging.getLogger(__name__)

# Load .env file only if not in CI
if not os.getenv("CI"):
    env_path = Path(__file__).parent.parent.parent / ".env"  # Goes up to backend/.env
    logger.info(f"[CONFIG] Looking for .env at: {env_path}")
    load_dotenv(env_path)


class Settings(BaseSettings):
    """Runtime configuration, populated from environment variables."""

    environment: str = Field(default="development", description="development | test | production")
    log_level: str = "INFO"

    # Security
    secret_key: SecretStr = Field(
        default=SecretStr(DEV_SECRET_KEY),
        description="Key used to sign access tokens",
    )
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 7

    # Database
    database_url: str = Field(
        default="sqlite:///./trainerlocator.db",
        description="SQLAlchemy URL for the primary database",
    )
    test_database_url: str = Field(
        default="sqlite:///./trainerlocator_test.db",
        description="SQLAlchemy URL used when is_testing is set",
    )
    is_testing: bool = False
    auto_create_tables: bool = Field(
        default=True,
        description="Create missing tables on startup (development convenience; use alembic elsewhere)",
    )
    sql_echo: bool = False

    # CORS
    cors_allowed_origins: str = Field(
        default="http://localhost:3000,http://localhost:5173",
        description="Comma separated list of allowed origins",
    )

    # Booking policy defaults
    default_cancellation_hours: int = Field(default=24, ge=0)
    default_refund_percentage: int = Field(default=100, ge=0, le=100)

    # Stats / listing
    recent_window_days: int = Field(default=30, ge=1)
    default_page_size: int = Field(default=10, ge=1)
    max_page_size: int = Field(default=100, ge=1)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("environment")
    @classmethod
    def _normalize_environment(cls, value: str) -> str:
        return (value or "development").strip().lower()

    @field_validator("secret_key")
    @classmethod
    def _secret_key_length(cls, value: SecretStr) -> SecretStr:
        if len(value.get_secret_value()) < 32:
            raise ValueError("secret_key must be at least 32 characters")
        return value

    @property
    def allowed_origins(self) -> List[str]:
        return [origin.strip() for origin in self.cors_allowed_origins.split(",") if origin.strip()]

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def uses_dev_secret(self) -> bool:
        return self.secret_key.get_secret_value() == DEV_SECRET_KEY

    def get_database_url(self) -> str:
        """Return the database URL for the current mode."""
        if self.is_testing:
            return self.test_database_url
        return self.database_url


settings = Settings()
logger.info(
    "[CONFIG] environment=%s testing=%s auto_create_tables=%s",
    settings.environment,
    settings.is_testing,
    settings.auto_create_tables,
)

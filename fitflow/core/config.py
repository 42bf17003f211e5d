# fitflow/core/config.py
import logging
import os
from pathlib import Path
from typing import List, Literal, Optional

from dotenv import load_dotenv
from pydantic import AliasChoices, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import BRAND_NAME

logger = logging.getLogger(__name__)


def is_running_tests() -> bool:
    """
    Detect if code is running under pytest.

    PYTEST_CURRENT_TEST is set automatically by pytest during test runs, and is
    not expected to be present in production environments.
    """
    return os.getenv("PYTEST_CURRENT_TEST") is not None


# Load .env file only if not in CI
if not os.getenv("CI"):
    env_path = Path(__file__).resolve().parents[2] / ".env"
    logger.debug("[CONFIG] Looking for .env at: %s (exists=%s)", env_path, env_path.exists())
    load_dotenv(env_path)


if os.getenv("CI") or is_running_tests():
    _DEFAULT_SECRET_KEY = SecretStr("ci-test-secret-key-not-for-production")
else:
    _DEFAULT_SECRET_KEY = SecretStr("dev-secret-key-change-me-before-deploying")


class Settings(BaseSettings):
    app_name: str = BRAND_NAME
    environment: Literal["development", "production", "test"] = "development"
    log_level: str = "INFO"

    # Database
    database_url: str = Field(
        default="sqlite:///./fitflow.db",
        description="SQLAlchemy URL for the document store",
    )
    database_echo: bool = False
    database_pool_size: int = Field(default=10, ge=1)
    database_max_overflow: int = Field(default=5, ge=0)

    # Identity tokens
    secret_key: SecretStr = Field(
        default=_DEFAULT_SECRET_KEY,
        validation_alias=AliasChoices("JWT_ACCESS_SECRET", "SECRET_KEY", "secret_key"),
        description="Secret key for JWT tokens",
    )
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60
    auth_cookie_name: str = "token"
    cookie_secure: bool = False
    cookie_samesite: Literal["lax", "strict", "none"] = "lax"

    # External identity provider; its ID tokens are exchanged for a session at /auth/login
    identity_provider_secret: Optional[SecretStr] = Field(
        default=None,
        validation_alias=AliasChoices("IDP_JWT_SECRET", "identity_provider_secret"),
        description="HS256 key of the identity provider; falls back to secret_key",
    )
    identity_provider_audience: str = "fitflow"

    # Comma-separated list of allowed frontend origins
    cors_origins: str = "http://localhost:5173"

    # Payments
    stripe_secret_key: Optional[SecretStr] = Field(
        default=None,
        validation_alias=AliasChoices("STRIPE_SECRET_KEY", "PAYMENT_GATEWAY_KEY", "stripe_secret_key"),
    )
    payment_currency: str = "usd"

    # Monitoring
    slow_operation_threshold_seconds: float = 1.0

    is_testing: bool = False  # Set to True when running tests

    model_config = SettingsConfigDict(
        env_file=".env" if not os.getenv("CI") else None,
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("cookie_samesite", mode="before")
    @classmethod
    def _normalize_samesite(cls, value: object) -> str:
        if value is None:
            return "lax"
        return str(value).strip().lower()

    @field_validator("payment_currency")
    @classmethod
    def _lower_currency(cls, value: str) -> str:
        return value.strip().lower()

    @property
    def cors_origin_list(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


settings = Settings()

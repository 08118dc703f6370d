from functools import lru_cache
from threading import Lock
from typing import Optional
import structlog
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import model_validator

# Environment Constants
ENV_PRODUCTION = "production"
ENV_STAGING = "staging"
ENV_DEVELOPMENT = "development"

ARM_COMMON_URI = "https://management.azure.com/subscriptions"
ARM_DEFAULT_SCOPE = "https://management.azure.com/.default"


@lru_cache
def get_settings() -> "Settings":
    """Returns a singleton instance of the client settings."""
    return Settings()


_settings_reload_lock = Lock()


def reload_settings_from_environment() -> "Settings":
    """
    Atomically rebuild and replace cached settings from environment values.

    This avoids mutating the cached singleton instance in-place.
    """
    logger = structlog.get_logger()
    with _settings_reload_lock:
        logger.info("settings_reload_started")
        get_settings.cache_clear()
        refreshed = get_settings()
        logger.info("settings_reload_completed")
        return refreshed


class Settings(BaseSettings):
    """
    Configuration for the ARM client.
    Uses Pydantic-Settings for environment variable parsing from .env.
    """

    APP_NAME: str = "armrest"
    VERSION: str = "0.1.0"
    DEBUG: bool = False
    # ENVIRONMENT options: local, development, staging, production
    ENVIRONMENT: str = ENV_DEVELOPMENT
    TESTING: bool = False

    # Identity (service principal)
    AZURE_SUBSCRIPTION_ID: Optional[str] = None
    AZURE_RESOURCE_GROUP: Optional[str] = None  # default group for single-group calls
    AZURE_TENANT_ID: Optional[str] = None
    AZURE_CLIENT_ID: Optional[str] = None
    AZURE_CLIENT_SECRET: Optional[str] = None

    # Resource Manager endpoint
    ARM_BASE_URL: str = ARM_COMMON_URI
    ARM_TOKEN_SCOPE: str = ARM_DEFAULT_SCOPE

    # Pinned api-version per resource type. Never negotiated at runtime.
    STORAGE_API_VERSION: str = "2015-05-01-preview"
    SNAPSHOT_API_VERSION: str = "2017-03-30"
    RESOURCE_GROUP_API_VERSION: str = "2015-01-01"

    HTTP_TIMEOUT_SECONDS: float = 20.0

    # Multi-group listing
    AGGREGATE_MAX_CONCURRENCY: int = 10
    # None waits for every group indefinitely.
    AGGREGATE_GROUP_TIMEOUT_SECONDS: Optional[float] = None

    model_config = SettingsConfigDict(env_file=".env", env_ignore_empty=True, extra="ignore")

    @model_validator(mode="after")
    def validate_all_config(self) -> "Settings":
        if self.TESTING and self.ENVIRONMENT in {ENV_PRODUCTION, ENV_STAGING}:
            raise ValueError(
                "TESTING must be false in staging/production runtime environments."
            )
        if self.AGGREGATE_MAX_CONCURRENCY < 1:
            raise ValueError("AGGREGATE_MAX_CONCURRENCY must be at least 1.")
        if (
            self.AGGREGATE_GROUP_TIMEOUT_SECONDS is not None
            and self.AGGREGATE_GROUP_TIMEOUT_SECONDS <= 0
        ):
            raise ValueError("AGGREGATE_GROUP_TIMEOUT_SECONDS must be positive when set.")
        if self.HTTP_TIMEOUT_SECONDS <= 0:
            raise ValueError("HTTP_TIMEOUT_SECONDS must be positive.")
        if self.is_production and not self.ARM_BASE_URL.startswith("https://"):
            raise ValueError("ARM_BASE_URL must use https in production.")
        return self

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == ENV_PRODUCTION

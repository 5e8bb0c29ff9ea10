"""Blood pressure health client - Configuration Management.

Environment-based configuration using Pydantic settings. Nothing here is
persisted by the client; values come from the environment or a ``.env``
file.
"""

from functools import lru_cache
import logging
from pathlib import Path
from typing import Self

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings

from bloodpressure.core.exceptions import InvalidConfigurationError

# Configure logger
logger = logging.getLogger(__name__)

KNOWN_ENVIRONMENTS = ("development", "testing", "production")


class Settings(BaseSettings):
    """Application settings with safe defaults and validation."""

    # Environment settings
    environment: str = Field(default="development", alias="ENVIRONMENT")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Application settings
    app_name: str = Field(default="Blood Pressure", alias="APP_NAME")
    app_version: str = "1.0.0"

    # Health store settings
    query_window_days: int = Field(default=14, gt=0, alias="QUERY_WINDOW_DAYS")
    query_limit: int | None = Field(default=None, gt=0, alias="QUERY_LIMIT")
    store_timeout_seconds: float = Field(
        default=10.0, gt=0, alias="STORE_TIMEOUT_SECONDS"
    )
    local_store_path: Path | None = Field(default=None, alias="LOCAL_STORE_PATH")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "populate_by_name": True,
        "extra": "ignore",
    }

    @model_validator(mode="after")
    def validate_environment(self) -> Self:
        """Reject unknown environments and normalise the log level."""
        if self.environment.lower() not in KNOWN_ENVIRONMENTS:
            raise InvalidConfigurationError(
                "ENVIRONMENT",
                self.environment,
                reason="expected one of " + ", ".join(KNOWN_ENVIRONMENTS),
            )
        self.log_level = self.log_level.upper()
        if logging.getLevelName(self.log_level) == f"Level {self.log_level}":
            raise InvalidConfigurationError("LOG_LEVEL", self.log_level)
        return self

    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment.lower() == "development"

    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment.lower() == "production"

    def is_testing(self) -> bool:
        """Check if running in testing mode."""
        return self.environment.lower() == "testing"

    def log_configuration_summary(self) -> None:
        """Log configuration summary for debugging."""
        logger.info("Blood pressure client configuration:")
        logger.info("   Environment: %s", self.environment)
        logger.info("   Debug mode: %s", self.debug)
        logger.info("   Query window: %s days", self.query_window_days)
        logger.info("   Query limit: %s", self.query_limit or "none")
        logger.info("   Store timeout: %ss", self.store_timeout_seconds)
        logger.info("   Local store: %s", self.local_store_path or "in-memory")


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    settings = Settings()

    # Log configuration summary in debug mode
    if settings.debug or settings.log_level == "DEBUG":
        settings.log_configuration_summary()

    return settings

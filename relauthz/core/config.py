"""
Configuration management using Pydantic Settings.

Type-safe configuration loaded from environment variables.

Usage:
    from relauthz.core.config import settings

    endpoint = settings.spicedb_endpoint
    if settings.spicedb_debug:
        # Every outbound SpiceDB call requests debug trailers
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from relauthz.core.enums import Environment


class Settings(BaseSettings):
    """
    Authorization layer settings (flat structure).

    Configuration precedence:
        1. Environment variables
        2. Default values (only for non-sensitive config)
    """

    # Environment detection
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment (development, testing, ci, production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    # SpiceDB connection
    spicedb_endpoint: str = Field(
        default="localhost:50051",
        description="SpiceDB gRPC endpoint (host:port)",
    )
    spicedb_preshared_key: str = Field(
        default="",
        description="Preshared key sent as bearer token to SpiceDB",
    )
    spicedb_insecure: bool = Field(
        default=True,
        description="Use a plaintext channel (local SpiceDB only)",
    )
    spicedb_debug: bool = Field(
        default=False,
        description="Request debug trailers on every SpiceDB call and log check traces",
    )
    spicedb_schema_path: str | None = Field(
        default=None,
        description="Schema file pushed at startup. Defaults to the bundled schema.zed",
    )

    model_config = SettingsConfigDict(
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """
        Validate and normalize the log level name.

        Args:
            v: Log level name.

        Returns:
            str: Upper-cased log level.

        Raises:
            ValueError: If the level is not a standard logging level.
        """
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {v}")
        return level

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == Environment.PRODUCTION

    @property
    def use_json_logs(self) -> bool:
        """JSON log rendering for testing and CI."""
        return self.environment in {Environment.TESTING, Environment.CI}


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: Cached settings instance.
    """
    return Settings()


# Global settings instance (singleton pattern)
settings = get_settings()

"""
Configuration Management for Expense Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The server needs a port and a database connection string; the UI needs
to know where the server lives. Everything else has a sensible default.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServerSettings(BaseSettings):
    """RPC server and database configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    server_host: str = Field(
        default="0.0.0.0",
        description="Address the RPC server binds to"
    )
    server_port: int = Field(
        default=2022,
        ge=1,
        le=65535,
        description="Port the RPC server listens on"
    )
    database_url: str = Field(
        default="sqlite:///./expenses.db",
        description="SQLAlchemy database connection string"
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )

    @field_validator('log_level')
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept 'info', 'Info', ... as well as 'INFO'."""
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


class ClientSettings(BaseSettings):
    """Settings used by the UI to reach the RPC server."""

    model_config = SettingsConfigDict(
        env_prefix="EXPENSE_API_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    url: str = Field(
        default="http://localhost:2022",
        description="Base URL of the RPC server"
    )
    timeout: float = Field(
        default=5.0,
        gt=0,
        description="Request timeout in seconds"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def server(self) -> ServerSettings:
        return ServerSettings()

    @property
    def client(self) -> ClientSettings:
        return ClientSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()

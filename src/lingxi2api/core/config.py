"""
Configuration management for Lingxi2API.

This module handles all application configuration using Pydantic Settings
for environment variable management and validation.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# The vendor base URL is not configurable through the environment; only the
# x-lingxi-base-url request header may override it.
FIXED_LINGXI_BASE_URL = "https://lingxi.wps.cn"

DEFAULT_REFRESH_URL = "https://account.wps.cn/api/v3/islogin"


class LingxiConfig(BaseSettings):
    """Lingxi upstream connection settings."""

    model_config = SettingsConfigDict(
        env_prefix="LINGXI_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    session_id: Optional[str] = Field(
        default=None,
        description="Lingxi assistant session id"
    )
    cookie: Optional[str] = Field(
        default=None,
        description="Raw cookie string (wps_sid etc.) seeding the shared cookie store"
    )
    user_agent: str = Field(
        default="Mozilla/5.0",
        description="User-Agent sent to Lingxi"
    )
    client_type: str = Field(
        default="h5",
        description="Value of the x-client-type header"
    )
    refresh_url: str = Field(
        default=DEFAULT_REFRESH_URL,
        description="Account check endpoint used to refresh the session cookie"
    )
    logging: bool = Field(
        default=False,
        description="Emit per-request diagnostic logs"
    )
    auto_refresh: bool = Field(
        default=True,
        description="Refresh the session cookie periodically in the background"
    )
    refresh_interval_ms: int = Field(
        default=3600000,
        description="Background refresh interval in milliseconds",
        ge=1000
    )
    refresh_initial_delay_ms: int = Field(
        default=5000,
        description="Delay before the first background refresh in milliseconds",
        ge=0
    )
    timeout: float = Field(
        default=600.0,
        description="Upstream HTTP timeout in seconds",
        gt=0
    )


class ServerConfig(BaseSettings):
    """Server configuration settings."""

    model_config = SettingsConfigDict(
        env_prefix="SERVER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    host: str = Field(
        default="0.0.0.0",
        description="Server host address"
    )
    port: int = Field(
        default=8787,
        description="Server port",
        ge=1,
        le=65535
    )
    reload: bool = Field(
        default=False,
        description="Enable auto-reload in development"
    )

    # CORS settings
    cors_origins: List[str] = Field(
        default=["*"],
        description="Allowed CORS origins"
    )
    cors_methods: List[str] = Field(
        default=["GET", "POST", "OPTIONS"],
        description="Allowed CORS methods"
    )
    cors_headers: List[str] = Field(
        default=["*"],
        description="Allowed CORS headers"
    )


class LoggingConfig(BaseSettings):
    """Logging configuration settings."""

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    level: str = Field(
        default="INFO",
        description="Logging level"
    )
    format: str = Field(
        default="text",
        description="Log format (json or text)"
    )
    file_path: Optional[str] = Field(
        default=None,
        description="Log file path (optional)"
    )
    max_file_size: int = Field(
        default=10485760,  # 10MB
        description="Maximum log file size in bytes",
        ge=1048576,
        le=104857600
    )
    backup_count: int = Field(
        default=5,
        description="Number of backup log files",
        ge=1,
        le=20
    )

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate logging level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v.upper()

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        """Validate log format."""
        valid_formats = {"json", "text"}
        if v.lower() not in valid_formats:
            raise ValueError(f"Invalid log format: {v}. Must be one of {valid_formats}")
        return v.lower()


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Application info
    app_name: str = Field(
        default="lingxi-openai-proxy",
        description="Application name"
    )
    app_version: str = Field(
        default="0.1.0",
        description="Application version"
    )
    app_description: str = Field(
        default="OpenAI compatible chat completions backed by Lingxi",
        description="Application description"
    )

    # Environment
    environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode"
    )

    # Sub-configurations
    lingxi: LingxiConfig = Field(default_factory=LingxiConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment."""
        valid_envs = {"development", "staging", "production", "testing"}
        if v.lower() not in valid_envs:
            raise ValueError(f"Invalid environment: {v}. Must be one of {valid_envs}")
        return v.lower()


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get application settings."""
    return settings


def reload_settings() -> Settings:
    """Reload settings from environment."""
    global settings
    settings = Settings()
    return settings

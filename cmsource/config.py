"""Configuration loading for the Cloudera Manager data source.

This module provides centralized configuration management:
- Load settings from environment variables and .env files
- Validate configuration using pydantic
- Provide typed access to all settings
- Build the host-shaped InstanceSettings for the data source
"""

import base64
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from cmsource.core.models import InstanceSettings


class Settings(BaseSettings):
    """Application configuration loaded from environment.

    Uses pydantic-settings for environment variable handling with
    .env file support via python-dotenv.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Cloudera Manager connection
    cm_url: str = Field(
        default="http://localhost:7180",
        description="Cloudera Manager base URL",
    )
    cm_api_version: Literal["v4..v5", "v6-10", "v11+"] = Field(
        default="v4..v5",
        description="Cloudera Manager API version family",
    )
    cm_username: str = Field(
        default="",
        description="Cloudera Manager user for basic authentication",
    )
    cm_password: str = Field(
        default="",
        description="Cloudera Manager password for basic authentication",
    )
    cm_with_credentials: bool = Field(
        default=False,
        description="Send credentials with requests even without basic auth",
    )
    cm_datasource_name: str = Field(
        default="cloudera-manager",
        description="Display name of the data source",
    )

    # Transport
    request_timeout_seconds: float = Field(
        default=30.0,
        description="HTTP request timeout in seconds",
    )

    # Logging configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Log level",
    )
    log_format: Literal["json", "text"] = Field(
        default="text",
        description="Log format",
    )

    @field_validator("cm_url")
    @classmethod
    def validate_cm_url(cls, v: str) -> str:
        """Ensure the base URL is an http(s) URL."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("cm_url must start with http:// or https://")
        return v

    @field_validator("request_timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Ensure request timeout is positive."""
        if v <= 0:
            raise ValueError("request_timeout_seconds must be positive")
        return v

    def basic_auth(self) -> str | None:
        """Return the ``Basic`` credential, or None without a username."""
        if not self.cm_username:
            return None
        token = base64.b64encode(
            f"{self.cm_username}:{self.cm_password}".encode()
        ).decode("ascii")
        return f"Basic {token}"

    def instance_settings(self) -> InstanceSettings:
        """Build the settings the data source is constructed from."""
        return InstanceSettings(
            url=self.cm_url,
            name=self.cm_datasource_name,
            basic_auth=self.basic_auth(),
            with_credentials=self.cm_with_credentials,
            json_data={"cmAPIVersion": self.cm_api_version},
        )


def load_settings(env_file: str | None = None) -> Settings:
    """Load application settings from environment.

    Args:
        env_file: Optional path to .env file. If not provided,
                 uses the default .env in the current directory.

    Returns:
        Validated Settings instance.

    Raises:
        ValidationError: If settings validation fails.
    """
    if env_file:
        return Settings(_env_file=env_file)  # type: ignore[call-arg]
    return Settings()


__all__ = ["Settings", "load_settings"]

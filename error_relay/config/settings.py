"""
Configuration settings management.

Provides a centralized configuration system with support for:
- YAML configuration files
- Environment variable overrides
- Default values
- Runtime validation
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from error_relay.core.exceptions import ConfigurationError, FallbackContentError
from error_relay.sinks.base import DEFAULT_ERROR_MESSAGE
from error_relay.transport.discord_client import DEFAULT_API_BASE
from error_relay.utils.validators import validate_fallback_content, validate_snowflake


class ClientConfig(BaseModel):
    """Configuration for the chat-service client."""

    token: Optional[str] = None
    api_base: str = DEFAULT_API_BASE
    timeout: int = Field(default=10, ge=1, le=120)


class ChannelSinkConfig(BaseModel):
    """Configuration for the channel sink."""

    enabled: bool = False
    channel_id: Optional[int] = None

    @field_validator("channel_id")
    @classmethod
    def validate_channel_id(cls, v: Optional[int]) -> Optional[int]:
        validate_snowflake(v, field="channel_id")
        return v

    @model_validator(mode="after")
    def check_channel_id(self) -> "ChannelSinkConfig":
        if self.enabled and self.channel_id is None:
            raise ValueError("channel_id is required when the channel sink is enabled")
        return self


class WebhookSinkConfig(BaseModel):
    """Configuration for the webhook sink."""

    enabled: bool = False
    webhook_id: Optional[int] = None
    token: Optional[str] = None

    @field_validator("webhook_id")
    @classmethod
    def validate_webhook_id(cls, v: Optional[int]) -> Optional[int]:
        validate_snowflake(v, field="webhook_id")
        return v

    @model_validator(mode="after")
    def check_credentials(self) -> "WebhookSinkConfig":
        if self.enabled and (self.webhook_id is None or not self.token):
            raise ValueError("webhook_id and token are required when the webhook sink is enabled")
        return self


class FileSinkConfig(BaseModel):
    """Configuration for the file sink."""

    enabled: bool = False
    path: str = "./errors.log"


class GlobalConfig(BaseModel):
    """Global configuration settings."""

    log_level: str = "INFO"
    log_file: Optional[str] = None
    json_logs: bool = False

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()


class Settings(BaseSettings):
    """
    Main settings class combining all configuration sections.

    Configuration is loaded from:
    1. Default values
    2. YAML configuration file
    3. Environment variables (prefixed with ERROR_RELAY_)
    """

    model_config = SettingsConfigDict(
        env_prefix="ERROR_RELAY_",
        env_nested_delimiter="__",
        case_sensitive=False,
        populate_by_name=True,
    )

    global_config: GlobalConfig = Field(default_factory=GlobalConfig, alias="global")
    client: ClientConfig = Field(default_factory=ClientConfig)
    channel: ChannelSinkConfig = Field(default_factory=ChannelSinkConfig)
    webhook: WebhookSinkConfig = Field(default_factory=WebhookSinkConfig)
    file: FileSinkConfig = Field(default_factory=FileSinkConfig)
    fallback_content: str = DEFAULT_ERROR_MESSAGE

    @field_validator("fallback_content")
    @classmethod
    def validate_fallback(cls, v: str) -> str:
        """Reject fallback content no transport would accept."""
        try:
            return validate_fallback_content(v)
        except FallbackContentError as e:
            raise ValueError(e.message) from e

    @property
    def needs_client(self) -> bool:
        """Whether a network sink is enabled."""
        return self.channel.enabled or self.webhook.enabled

    @classmethod
    def from_yaml(cls, path: str) -> "Settings":
        """
        Load settings from a YAML file.

        Args:
            path: Path to YAML configuration file.

        Returns:
            Settings instance with loaded configuration.

        Raises:
            ConfigurationError: If the file is missing or not a mapping.
            ValidationError: If configuration values are invalid.
        """
        config_path = Path(path)
        if not config_path.is_file():
            raise ConfigurationError(f"Configuration file not found: {path}", config_file=path)

        with open(config_path, "r", encoding="utf-8") as f:
            try:
                config_data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Malformed YAML: {e}", config_file=path) from e

        if not isinstance(config_data, dict):
            raise ConfigurationError("Configuration root must be a mapping", config_file=path)

        return cls(**config_data)

    def to_yaml(self, path: str) -> None:
        """
        Save settings to a YAML file.

        Args:
            path: Path to save configuration.
        """
        config_path = Path(path)
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w", encoding="utf-8") as f:
            yaml.dump(
                self.model_dump(by_alias=True),
                f,
                default_flow_style=False,
                sort_keys=False,
            )


def find_config_file() -> Optional[str]:
    """
    Find configuration file in standard locations.

    Returns:
        Path to configuration file or None if not found.
    """
    search_paths = [
        os.environ.get("ERROR_RELAY_CONFIG"),
        "/etc/error_relay/config.yaml",
        "/etc/error_relay/config.yml",
        "./config.yaml",
        "./config.yml",
    ]

    for path in search_paths:
        if path and Path(path).is_file():
            return path

    return None


@lru_cache
def get_settings(config_path: Optional[str] = None) -> Settings:
    """
    Get settings singleton.

    Args:
        config_path: Optional path to configuration file.

    Returns:
        Settings instance.
    """
    if config_path is None:
        config_path = find_config_file()

    if config_path:
        return Settings.from_yaml(config_path)

    return Settings()


def validate_config(config: Dict[str, Any]) -> List[str]:
    """
    Validate configuration dictionary.

    Args:
        config: Configuration dictionary to validate.

    Returns:
        List of validation error messages (empty if valid).
    """
    errors: List[str] = []

    try:
        Settings(**config)
    except Exception as e:
        errors.append(str(e))

    return errors

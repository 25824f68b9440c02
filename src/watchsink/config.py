"""Configuration management for Watchsink.

This module defines the configuration schema using Pydantic settings,
supporting TOML files, environment variables, and programmatic overrides.

Configuration loading priority (highest to lowest):
1. Programmatic overrides (passed to WatchsinkConfig constructor)
2. TOML configuration file
3. Environment variables (WATCHSINK_* prefix)
4. Default values defined in this module

The legacy KW_WEBHOOK_* variables are not read here. They are fallbacks
applied by ``watchsink.webhook.resolver`` when a field is left empty.

Example TOML configuration:
    [handler.webhook]
    url = "https://hooks.example.com/kubewatch"
    hmac_key = "c2VjcmV0"

    [logging]
    level = "DEBUG"
    format = "console"

Example environment variable override:
    WATCHSINK_HANDLER__WEBHOOK__URL="https://hooks.example.com/kubewatch"
    WATCHSINK_LOGGING__LEVEL=DEBUG
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import tomli
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from watchsink.errors import ConfigError


class WebhookConfig(BaseSettings):
    """Webhook sink configuration.

    Empty strings mean "not configured" and let the resolver fall back to
    the KW_WEBHOOK_* environment variables.

    Attributes:
        url: Endpoint that receives the POSTed notifications
        hmac_key: Base64-encoded HMAC key; empty disables signing
        hmac_signature_header: Header carrying the hex signature
        timeout_seconds: Request timeout; None waits indefinitely
    """

    model_config = SettingsConfigDict(
        env_prefix="WATCHSINK_HANDLER__WEBHOOK__",
        extra="forbid",
    )

    url: str = Field(default="")
    hmac_key: str = Field(default="", repr=False)
    hmac_signature_header: str = Field(default="")
    timeout_seconds: float | None = Field(default=None, gt=0)


class HandlerConfig(BaseSettings):
    """Notification handler configuration.

    Attributes:
        webhook: Webhook sink settings
    """

    model_config = SettingsConfigDict(
        env_prefix="WATCHSINK_HANDLER__",
        extra="forbid",
    )

    webhook: WebhookConfig = Field(default_factory=WebhookConfig)


class LoggingConfig(BaseSettings):
    """Logging configuration.

    Attributes:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format: Log format (json or console)
        file: Optional log file path (None for stdout only)
        rotation_size_mb: Log file rotation size in megabytes
        retention_count: Number of rotated log files to keep
    """

    model_config = SettingsConfigDict(
        env_prefix="WATCHSINK_LOGGING__",
        extra="forbid",
    )

    level: str = Field(default="INFO")
    format: str = Field(default="json")
    file: Path | None = Field(default=None)
    rotation_size_mb: int = Field(default=50, ge=1, le=1000)
    retention_count: int = Field(default=10, ge=1, le=100)

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level is recognized."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v_upper

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        """Validate log format is recognized."""
        valid_formats = {"json", "console"}
        v_lower = v.lower()
        if v_lower not in valid_formats:
            raise ValueError(f"Invalid log format: {v}. Must be one of {valid_formats}")
        return v_lower


class WatchsinkConfig(BaseSettings):
    """Root configuration for Watchsink.

    Mirrors the layout consumed by notification handlers, so the webhook
    settings live at ``config.handler.webhook``.

    Environment variable format for nested config:
        WATCHSINK_<SECTION>__<KEY>=value
    """

    model_config = SettingsConfigDict(
        env_prefix="WATCHSINK_",
        env_nested_delimiter="__",
        extra="forbid",
    )

    handler: HandlerConfig = Field(default_factory=HandlerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_config(config_path: Path | None = None) -> WatchsinkConfig:
    """Load configuration from TOML file with environment variable overlay.

    Configuration search order (first found is used):
    1. config_path if explicitly provided
    2. ./watchsink.toml (current directory)
    3. ~/.config/watchsink/config.toml (user config directory)

    Args:
        config_path: Explicit path to TOML config file. If None, searches
                    default locations.

    Returns:
        WatchsinkConfig: Fully resolved configuration instance.

    Raises:
        ConfigError: If config_path is explicitly provided but doesn't exist,
                    or the TOML file is unreadable or invalid.
    """
    toml_data: dict[str, Any] = {}

    if config_path is not None:
        if not config_path.exists():
            raise ConfigError(f"Config file not found: {config_path}")
        selected_path = config_path
    else:
        search_paths = [
            Path.cwd() / "watchsink.toml",
            Path.home() / ".config" / "watchsink" / "config.toml",
        ]
        selected_path = None
        for path in search_paths:
            if path.exists():
                selected_path = path
                break

    if selected_path is not None:
        try:
            with open(selected_path, "rb") as f:
                toml_data = tomli.load(f)
        except tomli.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML in {selected_path}: {e}") from e

    try:
        return WatchsinkConfig(**toml_data)
    except ValidationError as e:
        if selected_path:
            raise ConfigError(f"Invalid configuration in {selected_path}: {e}") from e
        raise ConfigError(f"Invalid configuration: {e}") from e

"""
Lighthouse Client Configuration
===============================

This module handles configuration loading for the client and its demo app.

Configuration Sources (in order of precedence):
    1. Environment variables (highest priority)
    2. lighthouse.yaml / config.yaml file
    3. Default values (lowest priority)

Environment Variable Mapping:
    LIGHTHOUSE_URL            -> lighthouse.url
    LIGHTHOUSE_USERNAME       -> lighthouse.username
    LIGHTHOUSE_TOKEN          -> lighthouse.token
    LIGHTHOUSE_ROWS           -> display.rows
    LIGHTHOUSE_COLS           -> display.cols
    LIGHTHOUSE_FRAME_INTERVAL -> app.frame_interval_seconds
    LIGHTHOUSE_LOG_LEVEL      -> logging.level

Example:
    from lighthouse_client.config import load_config, setup_logging

    settings = load_config()
    setup_logging(settings)
    credentials = settings.credentials()
"""

import logging
import os
from pathlib import Path
from typing import Mapping, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from lighthouse_client.display.frame import (
    LIGHTHOUSE_COLS,
    LIGHTHOUSE_ROWS,
    Geometry,
)
from lighthouse_client.errors import ConfigError
from lighthouse_client.protocol.credentials import Credentials
from lighthouse_client.protocol.transport import DEFAULT_URL


logger = logging.getLogger(__name__)


# =============================================================================
# Configuration Models
# =============================================================================

class LighthouseConfig(BaseModel):
    """Server connection configuration."""

    url: str = Field(default=DEFAULT_URL, description="WebSocket URL of the server")
    username: str = Field(default="", description="Lighthouse user name")
    token: str = Field(default="", description="Lighthouse API token")
    open_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Timeout for opening the WebSocket",
    )
    ping_interval_seconds: float = Field(
        default=20.0,
        gt=0,
        description="WebSocket keepalive ping interval",
    )


class DisplayConfig(BaseModel):
    """Display geometry configuration."""

    rows: int = Field(default=LIGHTHOUSE_ROWS, ge=1, description="Pixel rows")
    cols: int = Field(default=LIGHTHOUSE_COLS, ge=1, description="Pixel columns")

    @property
    def geometry(self) -> Geometry:
        return Geometry(self.rows, self.cols)


class AppConfig(BaseModel):
    """Demo application configuration."""

    frame_interval_seconds: float = Field(
        default=1.0,
        ge=0,
        description="Pause between rendered frames",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="text", description="Log format: json or text")


class Settings(BaseModel):
    """
    Main settings class for the Lighthouse client.

    Loads configuration from YAML file and environment variables.
    Environment variables take precedence over file values.
    """

    lighthouse: LighthouseConfig = Field(default_factory=LighthouseConfig)
    display: DisplayConfig = Field(default_factory=DisplayConfig)
    app: AppConfig = Field(default_factory=AppConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    def credentials(self) -> Credentials:
        """
        Build credentials from the lighthouse section.

        Raises:
            ConfigError: If username or token is missing
        """
        if not self.lighthouse.username or not self.lighthouse.token:
            raise ConfigError(
                "Lighthouse credentials missing: set LIGHTHOUSE_USERNAME and "
                "LIGHTHOUSE_TOKEN or the lighthouse section of the config file"
            )
        return Credentials(self.lighthouse.username, self.lighthouse.token)


# =============================================================================
# Configuration Loading
# =============================================================================

def load_config(
    config_path: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """
    Load configuration from YAML file and environment variables.

    Priority (highest to lowest):
        1. Environment variables
        2. YAML config file
        3. Default values

    Args:
        config_path: Path to a YAML file. If None, searches common locations.
        environ: Environment mapping, defaults to os.environ

    Returns:
        Settings: Loaded configuration

    Raises:
        ConfigError: If the file or an override is invalid
    """
    environ = os.environ if environ is None else environ

    if config_path is None:
        search_paths = [
            Path("lighthouse.yaml"),
            Path("lighthouse.yml"),
            Path("config.yaml"),
        ]
        for path in search_paths:
            if path.exists():
                config_path = str(path)
                break

    config_data: dict = {}
    if config_path and Path(config_path).exists():
        logger.info(f"Loading config from: {config_path}")
        try:
            with open(config_path, "r") as f:
                config_data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e
        if not isinstance(config_data, dict):
            raise ConfigError(f"Config file {config_path} must contain a mapping")
    elif config_path:
        raise ConfigError(f"Config file not found: {config_path}")
    else:
        logger.debug("No config file found, using defaults and environment variables")

    try:
        _apply_env_overrides(config_data, environ)
    except ValueError as e:
        raise ConfigError(f"Invalid environment override: {e}") from e

    try:
        return Settings.model_validate(config_data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


def _apply_env_overrides(config_data: dict, environ: Mapping[str, str]) -> None:
    """Apply environment variable overrides to config data."""

    # Server settings
    if env_url := environ.get("LIGHTHOUSE_URL"):
        config_data.setdefault("lighthouse", {})["url"] = env_url
    if env_user := environ.get("LIGHTHOUSE_USERNAME"):
        config_data.setdefault("lighthouse", {})["username"] = env_user
    if env_token := environ.get("LIGHTHOUSE_TOKEN"):
        config_data.setdefault("lighthouse", {})["token"] = env_token

    # Display settings
    if env_rows := environ.get("LIGHTHOUSE_ROWS"):
        config_data.setdefault("display", {})["rows"] = int(env_rows)
    if env_cols := environ.get("LIGHTHOUSE_COLS"):
        config_data.setdefault("display", {})["cols"] = int(env_cols)

    # App settings
    if env_interval := environ.get("LIGHTHOUSE_FRAME_INTERVAL"):
        config_data.setdefault("app", {})["frame_interval_seconds"] = float(env_interval)

    # Logging settings
    if env_log := environ.get("LIGHTHOUSE_LOG_LEVEL"):
        config_data.setdefault("logging", {})["level"] = env_log


def setup_logging(settings: Settings) -> None:
    """Configure logging based on settings."""
    log_level = getattr(logging, settings.logging.level.upper(), logging.INFO)

    if settings.logging.format == "json":
        log_format = '{"time": "%(asctime)s", "level": "%(levelname)s", "module": "%(name)s", "message": "%(message)s"}'
    else:
        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
    )

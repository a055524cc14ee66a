"""
Configuration state for the connection adapters.

Combines YAML files with environment overrides, type validation and sensible
defaults. Secrets (user name, password) are read from the environment only,
never from YAML.
"""

import copy
import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, model_validator

from sql_connection.infrastructure.database.credentials import NetworkCredentials

logger = logging.getLogger(__name__)

DEFAULT_PORT = 5432


# =============================================================================
# PYDANTIC MODELS - Type-Safe Configuration
# =============================================================================


class ConnectionConfig(BaseModel):
    """Where to connect and how large the pool may grow. Immutable."""

    host: str = Field(min_length=1)
    database: str = Field(min_length=1)
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)
    query_parameters: dict[str, str] | None = Field(default=None)
    min_connections: int = Field(default=2, ge=0)
    max_connections: int = Field(default=5, ge=1)

    @model_validator(mode="after")
    def validate_pool_bounds(self) -> "ConnectionConfig":
        if self.max_connections < self.min_connections:
            raise ValueError(
                f"max_connections ({self.max_connections}) must be >= "
                f"min_connections ({self.min_connections})"
            )
        return self

    class Config:
        frozen = True


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO")
    json_logs: bool = Field(default=True)
    include_timestamp: bool = Field(default=True)

    class Config:
        extra = "allow"


class ConfigState(BaseModel):
    """Root configuration state - single source of truth for adapter settings."""

    database: ConnectionConfig | None = Field(default=None)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    env: str = Field(default="dev")
    config_dir: str = Field(default="./config")

    class Config:
        extra = "allow"


# =============================================================================
# CONFIG LOADER
# =============================================================================


class ConfigLoader:
    """
    Load and validate configuration from YAML files.

    Merges, in order:
      1. database.yaml and logging.yaml from config_dir
      2. env/<SQLCONN_ENV>.yaml
      3. Environment variable overrides (PGHOST, PGPORT, ...)
    """

    def __init__(self, config_dir: str = "./config"):
        self.config_dir = Path(config_dir)
        self._yaml_cache: dict[Path, Any] = {}
        self.env = os.getenv("SQLCONN_ENV", "dev")

    def _load_yaml(self, path: Path) -> dict[str, Any]:
        """Load YAML file with caching."""
        if path in self._yaml_cache:
            return copy.deepcopy(self._yaml_cache[path])

        if not path.exists():
            logger.debug(f"Config file not found (using defaults): {path}")
            return {}

        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
                self._yaml_cache[path] = data
                logger.debug(f"Loaded config: {path.relative_to(self.config_dir)}")
                return copy.deepcopy(data)
        except yaml.YAMLError as e:
            logger.error(f"Failed to load {path}: {e}")
            return {}

    @staticmethod
    def _section(config: dict[str, Any], name: str) -> dict[str, Any]:
        """Return config[name], replacing a missing or empty (``name:``) section."""
        if not isinstance(config.get(name), dict):
            config[name] = {}
        return config[name]

    def _apply_env_overrides(self, config: dict[str, Any]) -> dict[str, Any]:
        """Apply environment variable overrides to config."""
        env_map = {
            "PGHOST": "host",
            "PGPORT": "port",
            "PGDATABASE": "database",
            "PG_MIN_CONNECTIONS": "min_connections",
            "PG_MAX_CONNECTIONS": "max_connections",
        }
        for env_name, key in env_map.items():
            if value := os.getenv(env_name):
                self._section(config, "database")[key] = value

        if log_level := os.getenv("LOG_LEVEL"):
            self._section(config, "logging")["level"] = log_level

        return config

    def _merge_dicts(self, base: dict, override: dict) -> dict:
        """Deep merge override into base dict."""
        result = base.copy()
        for key, value in override.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = self._merge_dicts(result[key], value)
            else:
                result[key] = value
        return result

    def load(self) -> ConfigState:
        """
        Load complete configuration state.

        Returns:
            ConfigState: Validated configuration object

        Raises:
            ValidationError: If configuration is invalid
        """
        logger.info(f"Loading configuration from {self.config_dir} (env: {self.env})")

        config: dict[str, Any] = {}

        for config_file in ["database.yaml", "logging.yaml"]:
            file_config = self._load_yaml(self.config_dir / config_file)
            config = self._merge_dicts(config, file_config)

        env_config = self._load_yaml(self.config_dir / "env" / f"{self.env}.yaml")
        config = self._merge_dicts(config, env_config)

        config = self._apply_env_overrides(config)
        # A bare "logging:" key means defaults, same as leaving it out.
        config = {key: value for key, value in config.items() if value is not None}

        try:
            state = ConfigState(env=self.env, config_dir=str(self.config_dir), **config)
        except Exception as e:
            logger.error(f"Configuration validation failed: {e}")
            raise

        if state.database is not None:
            logger.info(
                f"Configuration loaded: host={state.database.host} "
                f"database={state.database.database} "
                f"pool={state.database.min_connections}..{state.database.max_connections}"
            )
        return state


def credentials_from_env() -> NetworkCredentials | None:
    """Build credentials from PGUSER / PGPASSWORD, or None when PGUSER is unset."""
    user_name = os.getenv("PGUSER")
    if not user_name:
        return None
    return NetworkCredentials(user_name, os.getenv("PGPASSWORD", ""))


# =============================================================================
# GLOBAL INSTANCE
# =============================================================================


def get_config(config_dir: str | None = None) -> ConfigState:
    """
    Load and return the configuration state.

    Args:
        config_dir: Override config directory. Defaults to $SQLCONN_CONFIG_DIR or ./config
    """
    if config_dir is None:
        config_dir = os.getenv("SQLCONN_CONFIG_DIR", "./config")
        if not Path(config_dir).exists():
            logger.warning(f"Config directory not found at {config_dir}, using defaults")

    loader = ConfigLoader(config_dir=config_dir)
    return loader.load()


__all__ = [
    "ConfigLoader",
    "ConfigState",
    "ConnectionConfig",
    "DEFAULT_PORT",
    "LoggingConfig",
    "credentials_from_env",
    "get_config",
]

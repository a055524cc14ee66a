"""Configuration package for sql_connection."""

from .state import (
    ConfigLoader,
    ConfigState,
    ConnectionConfig,
    LoggingConfig,
    credentials_from_env,
    get_config,
)

__all__ = [
    "ConfigLoader",
    "ConfigState",
    "ConnectionConfig",
    "LoggingConfig",
    "credentials_from_env",
    "get_config",
]

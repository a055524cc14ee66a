"""Backend adapters implementing the SQL connection interface."""

from .postgres import PostgreSqlConnection, build_connection_uri, connect, connect_from_config

__all__ = [
    "PostgreSqlConnection",
    "build_connection_uri",
    "connect",
    "connect_from_config",
]

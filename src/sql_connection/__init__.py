"""
Generic SQL connection abstraction with a pooled PostgreSQL adapter.

Modules:
- infrastructure: Connection interfaces, credentials, errors, logging
- config: Validated connection and logging settings
- storage: Database adapters (PostgreSQL via asyncpg)
"""

from sql_connection.infrastructure.database import (
    ConfigurationError,
    ConnectionNotOpenError,
    Credentials,
    NetworkCredentials,
    SqlConnection,
)
from sql_connection.storage.adapters import PostgreSqlConnection, connect

__all__ = [
    "ConfigurationError",
    "ConnectionNotOpenError",
    "Credentials",
    "NetworkCredentials",
    "PostgreSqlConnection",
    "SqlConnection",
    "connect",
]

"""
SQL connection exception hierarchy.

Only errors raised by the adapters themselves live here. Connection and
query failures from the driver (asyncpg) propagate unchanged.
"""


class SqlConnectionError(Exception):
    """Base exception for errors raised by the connection adapters."""

    def __init__(self, message: str, connection: str | None = None):
        super().__init__(message)
        self.connection = connection


class ConfigurationError(SqlConnectionError, ValueError):
    """The adapter was given an argument it cannot work with (e.g. wrong credentials kind)."""

    pass


class ConnectionNotOpenError(SqlConnectionError, RuntimeError):
    """A query was issued before ``open`` completed. Indicates a caller bug."""

    pass

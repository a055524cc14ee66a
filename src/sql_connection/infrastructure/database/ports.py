"""
SQL connection interfaces.
Provides the abstraction adapters implement so callers can be written
against any SQL backend and tested with substitutes.
"""

from abc import ABC, abstractmethod
from typing import Any

from sql_connection.infrastructure.database.credentials import Credentials

# Column values are decoded by the driver; their types are only known at runtime.
Row = tuple[Any, ...]


class SqlSchema:
    """
    Schema associated with a connection.

    Holds a back reference to the owning connection; no introspection is
    performed here.
    """

    def __init__(self) -> None:
        self.connection: "SqlConnection | None" = None


class SqlConnection(ABC):
    """
    Base class for SQL connection adapters.

    Usable as an async context manager; leaving the block closes the
    connection. Entering does not open it, since ``open`` needs credentials.
    """

    def __init__(self, schema: SqlSchema):
        self.schema = schema
        self.schema.connection = self

    @abstractmethod
    async def open(self, credentials: Credentials) -> None:
        """Authenticate and make the connection ready for queries."""
        ...

    @abstractmethod
    async def execute_sql(self, statement: str) -> list[Row]:
        """
        Execute raw SQL text.

        Args:
            statement: SQL text, forwarded as-is

        Returns:
            Every result row, fully materialized
        """
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release every resource held by the connection."""
        ...

    async def __aenter__(self) -> "SqlConnection":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

"""Tests for the SqlConnection base class that adapters and substitutes share."""

import pytest

import sql_connection.infrastructure.database as database
from sql_connection.infrastructure.database import (
    NetworkCredentials,
    SqlConnection,
    SqlSchema,
)


class InMemoryConnection(SqlConnection):
    """Substitute backend: answers every statement with the same rows."""

    def __init__(self, rows):
        super().__init__(SqlSchema())
        self.rows = rows
        self.opened_with = None
        self.close_calls = 0

    async def open(self, credentials):
        self.opened_with = credentials

    async def execute_sql(self, statement):
        return list(self.rows)

    async def close(self):
        self.close_calls += 1


async def count_rows(connection: SqlConnection, statement: str) -> int:
    return len(await connection.execute_sql(statement))


class TestSqlConnection:
    def test_is_the_single_exported_interface(self):
        assert "SqlConnection" in database.__all__
        assert not hasattr(database, "ISqlConnection")

    def test_incomplete_subclass_cannot_be_instantiated(self):
        class OpenOnly(SqlConnection):
            async def open(self, credentials):
                pass

        with pytest.raises(TypeError):
            OpenOnly(SqlSchema())

    def test_schema_back_reference(self):
        connection = InMemoryConnection(rows=[])

        assert connection.schema.connection is connection

    @pytest.mark.asyncio
    async def test_callers_written_against_base_accept_substitutes(self):
        connection = InMemoryConnection(rows=[(1,), (2,)])
        await connection.open(NetworkCredentials("alice", "secret"))

        assert await count_rows(connection, "SELECT id FROM products") == 2

    @pytest.mark.asyncio
    async def test_context_manager_closes_without_opening(self):
        connection = InMemoryConnection(rows=[])

        async with connection as entered:
            assert entered is connection

        assert connection.opened_with is None
        assert connection.close_calls == 1

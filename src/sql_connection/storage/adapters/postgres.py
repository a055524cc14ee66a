"""
PostgreSQL adapter for the SQL connection interface.

Builds a connection URI from network credentials, owns an asyncpg pool and
forwards raw SQL text to it. Rows are buffered completely before the
connection goes back to the pool, so callers can iterate results after other
queries have reused the connection.

See infrastructure.database.ports.SqlConnection for the full interface.
"""

from collections.abc import Callable, Mapping
from typing import Any
from urllib.parse import quote, urlencode

import asyncpg
from pydantic import ValidationError

from sql_connection.config.state import DEFAULT_PORT, ConnectionConfig
from sql_connection.infrastructure.database.credentials import (
    Credentials,
    NetworkCredentials,
)
from sql_connection.infrastructure.database.exceptions import (
    ConfigurationError,
    ConnectionNotOpenError,
)
from sql_connection.infrastructure.database.ports import Row, SqlConnection, SqlSchema
from sql_connection.infrastructure.observability import get_database_logger

__all__ = [
    "PostgreSqlConnection",
    "build_connection_uri",
    "connect",
    "connect_from_config",
]

SCHEME = "postgres"

# Called as factory(dsn, min_size=..., max_size=..., statement_cache_size=0);
# awaiting the result starts the pool.
PoolFactory = Callable[..., Any]


def build_connection_uri(
    host: str,
    database: str,
    user_name: str,
    password: str,
    *,
    port: int = DEFAULT_PORT,
    query_parameters: Mapping[str, str] | None = None,
) -> str:
    """
    Build ``postgres://<user>:<password>@<host>:<port>/<database>?<query>``.

    User name, password and database are percent-encoded; the query segment is
    omitted when there are no parameters.
    """
    user_info = f"{quote(user_name, safe='')}:{quote(password, safe='')}"
    if ":" in host and not host.startswith("["):
        host = f"[{host}]"

    uri = f"{SCHEME}://{user_info}@{host}:{port}/{quote(database, safe='')}"
    if query_parameters:
        uri += "?" + urlencode(list(query_parameters.items()))
    return uri


class PostgreSqlConnection(SqlConnection):
    """
    SqlConnection targeting a PostgreSQL database through an asyncpg pool.

    The pool is created by ``open`` and lives until ``close`` or the next
    successful ``open``, which closes it once the replacement has started.
    """

    DEFAULT_PORT = DEFAULT_PORT

    def __init__(
        self,
        host: str,
        database: str,
        *,
        port: int = DEFAULT_PORT,
        query_parameters: Mapping[str, str] | None = None,
        min_connections: int = 2,
        max_connections: int = 5,
        pool_factory: PoolFactory | None = None,
    ):
        """
        Initialize adapter.

        Args:
            host: Name of the host of the PostgreSQL server
            database: Name of the database
            port: Port to connect on
            query_parameters: Extra URI query parameters (sslmode, connect_timeout, ...)
            min_connections: Connections the pool keeps open
            max_connections: Upper bound on concurrently checked-out connections
            pool_factory: Pool constructor, asyncpg.create_pool when omitted

        Raises:
            ConfigurationError: If the settings are invalid
        """
        try:
            config = ConnectionConfig(
                host=host,
                database=database,
                port=port,
                query_parameters=dict(query_parameters) if query_parameters else None,
                min_connections=min_connections,
                max_connections=max_connections,
            )
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid connection settings: {e}", connection=f"{host}/{database}"
            ) from e

        super().__init__(SqlSchema())
        self.config = config
        self._pool_factory = pool_factory
        self._pool: asyncpg.Pool | None = None
        self._log = get_database_logger(host=host, port=port, database=database)

    @classmethod
    def from_config(
        cls, config: ConnectionConfig, *, pool_factory: PoolFactory | None = None
    ) -> "PostgreSqlConnection":
        """Create an adapter from a validated ConnectionConfig."""
        return cls(
            config.host,
            config.database,
            port=config.port,
            query_parameters=config.query_parameters,
            min_connections=config.min_connections,
            max_connections=config.max_connections,
            pool_factory=pool_factory,
        )

    @property
    def host(self) -> str:
        return self.config.host

    @property
    def database(self) -> str:
        return self.config.database

    @property
    def port(self) -> int:
        return self.config.port

    @property
    def query_parameters(self) -> dict[str, str] | None:
        return self.config.query_parameters

    @property
    def min_connections(self) -> int:
        return self.config.min_connections

    @property
    def max_connections(self) -> int:
        return self.config.max_connections

    @property
    def pool(self) -> asyncpg.Pool | None:
        """Access underlying connection pool."""
        return self._pool

    @property
    def is_open(self) -> bool:
        return self._pool is not None

    def _describe(self) -> str:
        return f"{self.host}:{self.port}/{self.database}"

    # ------------------------------------------------------------------
    # SqlConnection
    # ------------------------------------------------------------------

    async def open(self, credentials: Credentials) -> None:
        """
        Create the connection pool and run its startup sequence.

        Args:
            credentials: Must be NetworkCredentials

        Raises:
            ConfigurationError: If credentials are not NetworkCredentials
            OSError, asyncpg.PostgresError: Propagated from the driver when the
                server is unreachable or rejects the credentials
        """
        if not isinstance(credentials, NetworkCredentials):
            raise ConfigurationError(
                "Expecting NetworkCredentials for the connection",
                connection=self._describe(),
            )

        dsn = build_connection_uri(
            self.host,
            self.database,
            credentials.user_name,
            credentials.password,
            port=self.port,
            query_parameters=self.query_parameters,
        )

        self._log.info(
            "pool_opening",
            min_connections=self.min_connections,
            max_connections=self.max_connections,
        )

        # statement_cache_size=0: statements are passed through, never cached server-side.
        pool_factory = self._pool_factory or asyncpg.create_pool
        pool = pool_factory(
            dsn,
            min_size=self.min_connections,
            max_size=self.max_connections,
            statement_cache_size=0,
        )

        # A failed start leaves any current pool in service.
        try:
            await pool
        except Exception as e:
            self._log.error("pool_start_failed", error_type=type(e).__name__)
            raise

        previous, self._pool = self._pool, pool
        self._log.info("pool_opened")

        if previous is not None:
            await previous.close()
            self._log.info("pool_replaced")

    async def execute_sql(self, statement: str) -> list[Row]:
        """
        Execute raw SQL text on a pooled connection.

        The statement is not parameterized or escaped. Every row is read
        before the connection is released. asyncpg sends it through the
        extended protocol, so the text must hold a single SQL command.

        Returns:
            One tuple of column values per row

        Raises:
            ConnectionNotOpenError: If ``open`` has not completed
        """
        if self._pool is None:
            raise ConnectionNotOpenError(
                "Connection is not open; call open() first",
                connection=self._describe(),
            )

        # Diagnostic only: the statement may contain sensitive values.
        self._log.debug("sql_statement", statement=statement)

        try:
            async with self._pool.acquire() as connection:
                records = await connection.fetch(statement)
                rows = [tuple(record) for record in records]
        except Exception as e:
            self._log.error("sql_failed", error_type=type(e).__name__)
            raise

        self._log.debug("sql_completed", row_count=len(rows))
        return rows

    async def close(self) -> None:
        """Close the pool, if any. Safe to call repeatedly."""
        if self._pool is None:
            return

        pool, self._pool = self._pool, None
        await pool.close()
        self._log.info("pool_closed")


async def connect(
    host: str,
    database: str,
    user_name: str,
    password: str,
    *,
    port: int = DEFAULT_PORT,
    query_parameters: Mapping[str, str] | None = None,
    min_connections: int = 2,
    max_connections: int = 5,
    pool_factory: PoolFactory | None = None,
) -> PostgreSqlConnection:
    """
    Connect to ``database`` at ``host`` as ``user_name``.

    Usage:
        >>> conn = await connect("db.example.com", "orders", "alice", "secret")
        >>> rows = await conn.execute_sql("SELECT 1")
    """
    connection = PostgreSqlConnection(
        host,
        database,
        port=port,
        query_parameters=query_parameters,
        min_connections=min_connections,
        max_connections=max_connections,
        pool_factory=pool_factory,
    )

    await connection.open(NetworkCredentials(user_name, password))

    return connection


async def connect_from_config(
    config: ConnectionConfig,
    credentials: Credentials,
    *,
    pool_factory: PoolFactory | None = None,
) -> PostgreSqlConnection:
    """Open an adapter described by ``config`` (e.g. ``get_config().database``)."""
    connection = PostgreSqlConnection.from_config(config, pool_factory=pool_factory)
    await connection.open(credentials)
    return connection

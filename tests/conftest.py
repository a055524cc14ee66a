"""
In-memory stand-ins for an asyncpg pool.

FakePool follows the asyncpg surface the adapter relies on: awaiting the pool
starts it, ``acquire()`` is an async context manager bounded by ``max_size``,
connections expose ``fetch`` and the pool exposes ``close``.
"""

import asyncio
from contextlib import asynccontextmanager

import pytest


class FakeRecord:
    """Mimics asyncpg.Record: iterating yields column values in order."""

    def __init__(self, **columns):
        self._columns = columns

    def __iter__(self):
        return iter(self._columns.values())

    def __getitem__(self, key):
        return self._columns[key]


class FakeConnection:
    def __init__(self, pool: "FakePool", number: int):
        self.pool = pool
        self.number = number

    async def fetch(self, statement: str):
        self.pool.events.append(("fetch", self.number, statement))
        self.pool.statements.append(statement)
        if self.pool.query_delay:
            await asyncio.sleep(self.pool.query_delay)
        if self.pool.query_error is not None:
            raise self.pool.query_error
        return list(self.pool.records)


class FakePool:
    def __init__(
        self,
        dsn: str,
        *,
        min_size: int,
        max_size: int,
        records=(),
        start_error: Exception | None = None,
        query_error: Exception | None = None,
        query_delay: float = 0.0,
    ):
        self.dsn = dsn
        self.min_size = min_size
        self.max_size = max_size
        self.records = list(records)
        self.start_error = start_error
        self.query_error = query_error
        self.query_delay = query_delay

        self.started = False
        self.closed = False
        self.acquired = 0
        self.released = 0
        self.in_use = 0
        self.peak_in_use = 0
        self.events: list[tuple] = []
        self.statements: list[str] = []
        self._slots = asyncio.Semaphore(max_size)

    def __await__(self):
        return self._start().__await__()

    async def _start(self):
        if self.start_error is not None:
            raise self.start_error
        self.started = True
        return self

    @asynccontextmanager
    async def acquire(self):
        if not self.started:
            raise AssertionError("acquire() on a pool that was never started")
        if self.closed:
            raise AssertionError("acquire() on a closed pool")
        async with self._slots:
            self.acquired += 1
            number = self.acquired
            self.in_use += 1
            self.peak_in_use = max(self.peak_in_use, self.in_use)
            self.events.append(("acquire", number))
            try:
                yield FakeConnection(self, number)
            finally:
                self.in_use -= 1
                self.released += 1
                self.events.append(("release", number))

    async def close(self):
        self.closed = True


class FakePoolFactory:
    """Callable with the asyncpg.create_pool signature; remembers every pool it made."""

    def __init__(self, **pool_options):
        self.pool_options = pool_options
        self.pools: list[FakePool] = []

    def __call__(self, dsn, *, min_size, max_size, **connect_kwargs):
        pool = FakePool(dsn, min_size=min_size, max_size=max_size, **self.pool_options)
        pool.connect_kwargs = connect_kwargs
        self.pools.append(pool)
        return pool

    @property
    def last(self) -> FakePool:
        return self.pools[-1]


@pytest.fixture
def fake_record():
    return FakeRecord


@pytest.fixture
def pool_factory():
    """Factory whose pools answer every query with two rows."""
    return FakePoolFactory(
        records=[
            FakeRecord(id=1, name="widget", price=9.5),
            FakeRecord(id=2, name="gadget", price=None),
        ]
    )


@pytest.fixture
def make_pool_factory():
    return FakePoolFactory

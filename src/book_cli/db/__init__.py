from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import AsyncIterator, Awaitable, Callable

import aiosqlite
from filelock import FileLock

SchemaFn = Callable[[aiosqlite.Connection], Awaitable[None]]

logger = logging.getLogger("book_cli.db")


# ---------------- Registry ----------------

@dataclass(frozen=True)
class _SchemaEntry:
    name: str
    fn: SchemaFn
    order: int


_REGISTRY: list[_SchemaEntry] = []


def register_schema(name: str, fn: SchemaFn, *, order: int = 100) -> None:
    """Register a schema ensure-function to be executed when a store opens.

    Args:
        name: Unique schema name (e.g., "purchases").
        fn: Async callable(conn) -> None, idempotent schema creation/migration.
        order: Execution order (lower runs earlier). Keep stable across versions.
    """
    if any(e.name == name for e in _REGISTRY):
        return
    _REGISTRY.append(_SchemaEntry(name=name, fn=fn, order=order))


async def ensure_all_schemas(conn: aiosqlite.Connection) -> None:
    """Run all registered schema ensure-functions in deterministic order."""
    for entry in sorted(_REGISTRY, key=lambda e: (e.order, e.name)):
        logger.debug(f"Ensuring schema {entry.name}")
        await entry.fn(conn)


# ---------------- Locking / DB utils ----------------

class AsyncFileLock:
    """Async wrapper around filelock.FileLock to keep the loop non-blocking."""

    def __init__(self, path: Path, timeout: float = 30.0):
        # acquire and release run on different worker threads
        self._lock = FileLock(str(path), timeout=timeout, thread_local=False)

    async def __aenter__(self):
        await asyncio.to_thread(self._lock.acquire)
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await asyncio.to_thread(self._lock.release)


async def connect_db(db_path: Path) -> aiosqlite.Connection:
    """Open an aiosqlite connection with sensible PRAGMA defaults.

    The connection runs in autocommit mode; transactions are opened
    explicitly with :func:`transaction`. Rows are returned as
    :class:`sqlite3.Row`.

    Args:
        db_path: SQLite database file path.
    """
    conn = await aiosqlite.connect(db_path, isolation_level=None)
    conn.row_factory = aiosqlite.Row
    await conn.execute("PRAGMA journal_mode=WAL;")
    await conn.execute("PRAGMA busy_timeout=5000;")
    await conn.execute("PRAGMA synchronous=NORMAL;")
    return conn


@asynccontextmanager
async def open_db(db_path: Path) -> AsyncIterator[aiosqlite.Connection]:
    """Context manager variant of :func:`connect_db` that closes on exit."""
    conn = await connect_db(db_path)
    try:
        yield conn
    finally:
        await conn.close()


@asynccontextmanager
async def transaction(conn: aiosqlite.Connection) -> AsyncIterator[aiosqlite.Connection]:
    """Run the body inside an IMMEDIATE transaction.

    Commits when the body finishes and rolls back when it raises.
    """
    await conn.execute("BEGIN IMMEDIATE;")
    try:
        yield conn
    except BaseException:
        await conn.execute("ROLLBACK;")
        raise
    await conn.execute("COMMIT;")


# ---------------- Public high-level helpers ----------------

async def ensure_db_ready_async(db_path: Path, timeout: float = 30.0) -> None:
    """Create the database file and ensure all registered schemas.

    Args:
        db_path: SQLite database file path.
        timeout: Seconds to wait for the database lock.
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    lock_path = db_path.with_suffix(".lock")
    async with AsyncFileLock(lock_path, timeout=timeout):
        async with open_db(db_path) as conn:
            await ensure_all_schemas(conn)

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional, Union

import aiosqlite

from book_cli.db import (
    AsyncFileLock,
    connect_db,
    ensure_db_ready_async,
    register_schema,
    transaction,
)
from book_cli.constants import MAX_VOLUME
from book_cli.exceptions import InvalidPurchase, StoreNotOpen
from book_cli.models import PurchaseRecord, UpsertResult
from book_cli.utils import today, validate_date


logger = logging.getLogger("book_cli.db.purchases")

# ------------------ Schema & SQL ------------------

SCHEMA_SQL = r"""
CREATE TABLE IF NOT EXISTS purchases (
  id        INTEGER PRIMARY KEY AUTOINCREMENT,
  series    TEXT    NOT NULL,
  volume    INTEGER NOT NULL,
  store     TEXT,
  notes     TEXT,
  bought_at TEXT,
  UNIQUE(series, volume)
);
"""

# columns added after the first release; only ever appended
ADDED_COLUMNS = (
    ("bought_at", "TEXT"),
)

EXISTS_SQL = "SELECT 1 FROM purchases WHERE series = ? AND volume = ?;"

UPSERT_SQL = """
INSERT INTO purchases (series, volume, store, notes, bought_at)
VALUES (?, ?, ?, ?, ?)
ON CONFLICT(series, volume) DO UPDATE SET
  store     = excluded.store,
  notes     = excluded.notes,
  bought_at = excluded.bought_at;
"""

GET_SQL = """
SELECT id, series, volume, store, notes, bought_at
FROM purchases
WHERE series = ? AND volume = ?;
"""

LATEST_BY_SERIES_SQL = r"""
SELECT id, series, volume, store, notes, bought_at
FROM purchases
WHERE series LIKE ? ESCAPE '\'
ORDER BY volume DESC, series
LIMIT 1;
"""

LATEST_PER_SERIES_SQL = r"""
SELECT p1.id, p1.series, p1.volume, p1.store, p1.notes, p1.bought_at
FROM purchases p1
INNER JOIN (
  SELECT series, MAX(volume) AS mv FROM purchases GROUP BY series
) p2 ON p1.series = p2.series AND p1.volume = p2.mv
WHERE p1.series LIKE ? ESCAPE '\'
ORDER BY p1.series;
"""

COUNT_SQL = "SELECT COUNT(*) FROM purchases;"


async def ensure_purchases_schema(conn: aiosqlite.Connection) -> None:
    """Create the purchases table and add columns older files lack."""
    await conn.executescript(SCHEMA_SQL)

    cur = await conn.execute("PRAGMA table_info(purchases);")
    columns = {row[1] for row in await cur.fetchall()}
    await cur.close()

    for name, decl in ADDED_COLUMNS:
        if name not in columns:
            await conn.execute(f"ALTER TABLE purchases ADD COLUMN {name} {decl};")
            logger.info(f"Added column {name} to purchases table")


register_schema("purchases", ensure_purchases_schema, order=10)


def like_pattern(keyword: str) -> str:
    """Build a LIKE pattern matching ``keyword`` anywhere, taken literally."""
    escaped = (
        keyword.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    )
    return f"%{escaped}%"


def _check_purchase(series: str, volume: int, bought_at: Optional[str]):
    if not isinstance(series, str) or not series.strip():
        raise InvalidPurchase("series must be a non-empty string")
    if isinstance(volume, bool) or not isinstance(volume, int) \
            or not 0 <= volume <= MAX_VOLUME:
        raise InvalidPurchase(
            f"volume must be an integer from 0 to {MAX_VOLUME}, got {volume!r}"
        )
    if bought_at is None:
        bought_at = today()
    return series, volume, validate_date(bought_at)


# ------------------ Store ------------------

class PurchaseStore:
    """The persisted collection of purchased volumes.

    A store is created once, opened, used and closed::

        async with PurchaseStore(path) as store:
            await store.upsert("One Piece", 105, "Kinokuniya")

    Opening creates the database file and runs every registered schema
    function, so older files get migrated on first use.

    Args:
        db_path: The SQLite database file.
        lock_timeout: Seconds to wait for the lock file next to the database.
    """

    def __init__(
            self,
            db_path: Union[str, Path],
            lock_timeout: float = 30.0
    ) -> None:
        self._db_path = Path(db_path)
        self._lock_path = self._db_path.with_suffix(".lock")
        self._lock_timeout = lock_timeout
        self._conn: Optional[aiosqlite.Connection] = None
        self._in_transaction = False

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self._db_path)!r})"

    @property
    def db_path(self) -> Path:
        return self._db_path

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    @property
    def conn(self) -> aiosqlite.Connection:
        if self._conn is None:
            raise StoreNotOpen(f"{self!r} is not open")
        return self._conn

    async def open(self) -> "PurchaseStore":
        if self._conn is not None:
            return self
        await ensure_db_ready_async(self._db_path, timeout=self._lock_timeout)
        self._conn = await connect_db(self._db_path)
        logger.debug(f"Opened purchase store at {self._db_path}")
        return self

    async def close(self) -> None:
        if self._conn is None:
            return
        conn, self._conn = self._conn, None
        await conn.close()
        logger.debug(f"Closed purchase store at {self._db_path}")

    async def __aenter__(self) -> "PurchaseStore":
        return await self.open()

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator["PurchaseStore"]:
        """Group several writes into one atomic unit.

        Writes made in the body become visible together on success and are
        all discarded if the body raises. Nested use joins the outer
        transaction.
        """
        if self._in_transaction:
            yield self
            return

        async with AsyncFileLock(self._lock_path, timeout=self._lock_timeout):
            async with transaction(self.conn):
                self._in_transaction = True
                try:
                    yield self
                finally:
                    self._in_transaction = False

    async def upsert(
            self,
            series: str,
            volume: int,
            store: str = "",
            notes: str = "",
            bought_at: Optional[str] = None
    ) -> UpsertResult:
        """Record a purchase or update the one already recorded.

        A new ``(series, volume)`` pair is inserted. For a known pair only
        ``store``, ``notes`` and ``bought_at`` are overwritten.

        Args:
            series: The series name.
            volume: The volume number within the series.
            store: Where the volume was bought.
            notes: Free text.
            bought_at: Purchase date as ``YYYY-MM-DD``. Defaults to today.

        Returns:
            :attr:`UpsertResult.INSERTED` or :attr:`UpsertResult.UPDATED`.
        """
        series, volume, bought_at = _check_purchase(series, volume, bought_at)

        async with self.transaction():
            cur = await self.conn.execute(EXISTS_SQL, (series, volume))
            existed = await cur.fetchone() is not None
            await cur.close()
            await self.conn.execute(
                UPSERT_SQL, (series, volume, store, notes, bought_at)
            )

        result = UpsertResult.UPDATED if existed else UpsertResult.INSERTED
        logger.debug(f"{result.value} {series} vol. {volume} ({bought_at})")
        return result

    async def get(self, series: str, volume: int) -> Optional[PurchaseRecord]:
        cur = await self.conn.execute(GET_SQL, (series, volume))
        row = await cur.fetchone()
        await cur.close()
        return PurchaseRecord.from_row(row) if row is not None else None

    async def latest_by_series(self, keyword: str) -> Optional[PurchaseRecord]:
        """Return the highest volume among all series containing ``keyword``.

        The maximum is taken across every matching series together, not per
        series. Ties on the volume go to the series sorting first.
        """
        cur = await self.conn.execute(
            LATEST_BY_SERIES_SQL, (like_pattern(keyword),)
        )
        row = await cur.fetchone()
        await cur.close()
        return PurchaseRecord.from_row(row) if row is not None else None

    async def latest_per_series(self, keyword: str = "") -> list[PurchaseRecord]:
        """Return the highest recorded volume of each series.

        Only series containing ``keyword`` are returned, sorted by name. An
        empty keyword returns all series.
        """
        cur = await self.conn.execute(
            LATEST_PER_SERIES_SQL, (like_pattern(keyword),)
        )
        rows = await cur.fetchall()
        await cur.close()
        return [PurchaseRecord.from_row(r) for r in rows]

    async def count(self) -> int:
        cur = await self.conn.execute(COUNT_SQL)
        (n,) = await cur.fetchone()
        await cur.close()
        return n

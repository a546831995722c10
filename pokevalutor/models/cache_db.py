from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path

from aiosqlite import connect
from aiosqlite.core import Connection


SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS cache_entries (
        key TEXT PRIMARY KEY,
        value TEXT NOT NULL,
        saved_at REAL NOT NULL,
        expires_at REAL NOT NULL
    )
    """,
    "CREATE INDEX IF NOT EXISTS ix_cache_entries_expires_at ON cache_entries (expires_at)",
    "CREATE INDEX IF NOT EXISTS ix_cache_entries_saved_at ON cache_entries (saved_at)",
)


@dataclass
class CacheRow:
    key: str
    value: str
    saved_at: float
    expires_at: float


class CacheStore:
    """Sqlite table of cache entries, indexed by expiry and save time.

    Keys are namespaced by ``prefix`` so sweeps and clears only ever touch
    entries that belong to this cache.
    """

    def __init__(self, path: Path | str, prefix: str) -> None:
        self.path = Path(path)
        self.prefix = prefix
        self._ready = False
        # Key range covering the namespace, so lookups stay on the primary key index.
        self._bounds = (prefix, prefix + "\uffff")

    @asynccontextmanager
    async def session(self) -> AsyncIterator[Connection]:
        if not self._ready:
            self.path.parent.mkdir(parents=True, exist_ok=True)

        async with connect(str(self.path)) as db:
            if not self._ready:
                for statement in SCHEMA:
                    await db.execute(statement)
                await db.commit()
                self._ready = True
            yield db

    async def get(self, key: str) -> CacheRow | None:
        async with self.session() as db:
            async with db.execute(
                "SELECT key, value, saved_at, expires_at FROM cache_entries WHERE key = ?",
                (key,),
            ) as cursor:
                row = await cursor.fetchone()

        if not row:
            return None
        return CacheRow(key=row[0], value=row[1], saved_at=row[2], expires_at=row[3])

    async def put(self, row: CacheRow) -> None:
        async with self.session() as db:
            await db.execute(
                "INSERT OR REPLACE INTO cache_entries (key, value, saved_at, expires_at) VALUES (?, ?, ?, ?)",
                (row.key, row.value, row.saved_at, row.expires_at),
            )
            await db.commit()

    async def delete(self, key: str) -> None:
        async with self.session() as db:
            await db.execute("DELETE FROM cache_entries WHERE key = ?", (key,))
            await db.commit()

    async def delete_expired(self, now: float) -> int:
        async with self.session() as db:
            cursor = await db.execute(
                "DELETE FROM cache_entries WHERE key >= ? AND key < ? AND expires_at < ?",
                (*self._bounds, now),
            )
            await db.commit()
            return cursor.rowcount

    async def count(self) -> int:
        async with self.session() as db:
            async with db.execute(
                "SELECT COUNT(*) FROM cache_entries WHERE key >= ? AND key < ?",
                self._bounds,
            ) as cursor:
                row = await cursor.fetchone()
        return row[0]

    async def evict_oldest(self, keep: int) -> int:
        """Delete the oldest entries until at most ``keep`` remain."""
        async with self.session() as db:
            cursor = await db.execute(
                """
                DELETE FROM cache_entries WHERE key IN (
                    SELECT key FROM cache_entries
                    WHERE key >= ? AND key < ?
                    ORDER BY saved_at DESC, rowid DESC
                    LIMIT -1 OFFSET ?
                )
                """,
                (*self._bounds, keep),
            )
            await db.commit()
            return cursor.rowcount

    async def keys(self) -> list[str]:
        async with self.session() as db:
            async with db.execute(
                "SELECT key FROM cache_entries WHERE key >= ? AND key < ? ORDER BY saved_at, rowid",
                self._bounds,
            ) as cursor:
                rows = await cursor.fetchall()
        return [row[0] for row in rows]

    async def clear(self) -> None:
        async with self.session() as db:
            await db.execute(
                "DELETE FROM cache_entries WHERE key >= ? AND key < ?",
                self._bounds,
            )
            await db.commit()

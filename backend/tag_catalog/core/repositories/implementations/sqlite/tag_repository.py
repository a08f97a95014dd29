from __future__ import annotations

import asyncio
import sqlite3
from contextlib import closing
from pathlib import Path
from typing import TYPE_CHECKING, Any

from tag_catalog.core.errors import TagStorageError
from tag_catalog.core.models.tag import FALLBACK_CATEGORY, Tag, TagCategory
from tag_catalog.core.repositories.tag_repository import TagRepository, chunked
from tag_catalog.utils.logging import get_logger

logger = get_logger(__name__)

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

# Stay well under SQLITE_MAX_VARIABLE_NUMBER on older builds (999)
_IN_CLAUSE_CHUNK = 500


class SqliteTagRepository(TagRepository):
    """SQLite implementation of the TagRepository.

    Every operation opens its own short-lived connection inside a worker
    thread, so concurrent requests never share a handle. Writers are
    serialized by SQLite itself; ``INSERT ... ON CONFLICT(name) DO NOTHING``
    makes a duplicate insert a no-op whose rowcount is 0.
    """

    TABLE_NAME = "tags"

    def __init__(self, path: str | Path, *, busy_timeout_seconds: float = 5.0) -> None:
        # Each operation opens a new connection, so an in-memory database would vanish between calls
        if str(path).strip() in ("", ":memory:"):
            raise ValueError("SqliteTagRepository needs a database file path, not an in-memory database")
        self._path = str(path)
        self._busy_timeout = busy_timeout_seconds

    async def initialize(self) -> SqliteTagRepository:
        def _create_schema(conn: sqlite3.Connection) -> None:
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {self.TABLE_NAME} (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL UNIQUE,
                    category TEXT DEFAULT '{FALLBACK_CATEGORY.value}'
                )
                """
            )

        parent = Path(self._path).parent
        if not parent.exists():
            parent.mkdir(parents=True, exist_ok=True)

        await self._run(_create_schema)
        logger.info("SQLite tag store ready at %s", self._path)
        return self

    async def list_all(self) -> Sequence[Tag]:
        def _query(conn: sqlite3.Connection) -> list[sqlite3.Row]:
            return conn.execute(
                f"SELECT id, name, category FROM {self.TABLE_NAME} ORDER BY category ASC, name ASC"
            ).fetchall()

        rows = await self._run(_query)
        return [self._row_to_tag(r) for r in rows]

    async def existing_names(self, candidates: Iterable[str]) -> set[str]:
        names = list(dict.fromkeys(candidates))
        if not names:
            return set()

        def _query(conn: sqlite3.Connection) -> set[str]:
            found: set[str] = set()
            for chunk in chunked(names, _IN_CLAUSE_CHUNK):
                placeholders = ",".join("?" for _ in chunk)
                rows = conn.execute(
                    f"SELECT name FROM {self.TABLE_NAME} WHERE name IN ({placeholders})",
                    tuple(chunk),
                ).fetchall()
                found.update(r["name"] for r in rows)
            return found

        return await self._run(_query)

    async def insert_if_absent(self, name: str, category: TagCategory) -> bool:
        def _insert(conn: sqlite3.Connection) -> bool:
            cur = conn.execute(
                f"INSERT INTO {self.TABLE_NAME} (name, category) VALUES (?, ?) "
                "ON CONFLICT(name) DO NOTHING",
                (name, TagCategory(category).value),
            )
            return cur.rowcount > 0

        return await self._run(_insert)

    async def count(self) -> int:
        def _query(conn: sqlite3.Connection) -> int:
            return int(conn.execute(f"SELECT COUNT(*) FROM {self.TABLE_NAME}").fetchone()[0])

        return await self._run(_query)

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._path, timeout=self._busy_timeout)
        conn.row_factory = sqlite3.Row
        return conn

    async def _run(self, func: Callable[[sqlite3.Connection], Any]) -> Any:
        def _call() -> Any:
            with closing(self._connect()) as conn:
                # The connection context manager commits on success and rolls back on error
                with conn:
                    return func(conn)

        try:
            return await asyncio.to_thread(_call)
        except sqlite3.Error as err:
            logger.error("SQLite operation failed on %s: %s", self._path, err)
            raise TagStorageError(f"SQLite tag store failure: {err}") from err

    @staticmethod
    def _row_to_tag(row: sqlite3.Row) -> Tag:
        return Tag.model_validate({"id": row["id"], "name": row["name"], "category": row["category"]})

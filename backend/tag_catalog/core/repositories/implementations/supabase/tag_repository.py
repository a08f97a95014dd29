from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

from tag_catalog.core.errors import TagStorageError
from tag_catalog.core.models.tag import Tag, TagCategory
from tag_catalog.core.repositories.tag_repository import TagRepository, chunked
from tag_catalog.utils.logging import get_logger

logger = get_logger(__name__)

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

    from supabase import Client

# PostgREST encodes `in.(...)` filters in the URL
_IN_FILTER_CHUNK = 200

# Supabase default for PostgREST max-rows
_LIST_PAGE_SIZE = 1000


class SupabaseTagRepository(TagRepository):
    """Supabase implementation of the TagRepository.

    Uses Supabase's PostgREST client. Assumes a table shaped like:

        create table tags (
            id bigint generated always as identity primary key,
            name text not null unique,
            category text default 'Miscellaneous / Meta'
        );

    Idempotent inserts rely on an upsert with ``ignore_duplicates``: PostgREST
    turns it into ``ON CONFLICT (name) DO NOTHING`` and returns no row when
    the name already existed.
    """

    def __init__(self, client: Client, *, table_name: str = "tags", page_size: int = _LIST_PAGE_SIZE) -> None:
        self._client: Client = client
        self._table = table_name
        self._page_size = page_size

    async def initialize(self) -> SupabaseTagRepository:
        # Schema is managed by Supabase migrations; only verify the table is reachable
        await self._run(
            lambda: self._client.table(self._table)
            .select("id")
            .limit(1)
            .execute()
        )
        logger.info("Supabase tag store ready (table=%s)", self._table)
        return self

    async def list_all(self) -> Sequence[Tag]:
        page_size = self._page_size
        offset = 0
        tags: list[Tag] = []

        while True:
            # PostgREST caps every response at max-rows, so page on the primary key
            def _fetch_page(start: int = offset) -> Any:
                return (
                    self._client.table(self._table)
                    .select("id, name, category")
                    .order("id")
                    .range(start, start + page_size - 1)
                    .execute()
                )

            resp = await self._run(_fetch_page)
            rows: list[dict[str, Any]] = resp.data or []
            tags.extend(Tag.model_validate(r) for r in rows)

            if len(rows) < page_size:
                break
            offset += page_size

        # Code point order, matching SQLite's BINARY collation rather than the Postgres locale
        tags.sort(key=lambda t: (t.category.value, t.name))
        return tags

    async def existing_names(self, candidates: Iterable[str]) -> set[str]:
        names = list(dict.fromkeys(candidates))
        found: set[str] = set()
        for chunk in chunked(names, _IN_FILTER_CHUNK):
            resp = await self._run(
                lambda chunk=chunk: self._client.table(self._table)
                .select("name")
                .in_("name", list(chunk))
                .execute()
            )
            found.update(r["name"] for r in (resp.data or []))
        return found

    async def insert_if_absent(self, name: str, category: TagCategory) -> bool:
        row = {"name": name, "category": TagCategory(category).value}
        resp = await self._run(
            lambda: self._client.table(self._table)
            .upsert(row, on_conflict="name", ignore_duplicates=True)
            .execute()
        )
        return bool(resp.data)

    async def count(self) -> int:
        resp = await self._run(
            lambda: self._client.table(self._table)
            .select("id", count="exact")
            .limit(1)
            .execute()
        )
        return int(resp.count or 0)

    async def _run(self, func: Callable[[], Any]) -> Any:
        try:
            return await asyncio.to_thread(func)
        except Exception as err:  # postgrest, httpx and auth errors share no base class
            logger.error("Supabase operation failed on table %s: %s", self._table, err)
            raise TagStorageError(f"Supabase tag store failure: {err}") from err

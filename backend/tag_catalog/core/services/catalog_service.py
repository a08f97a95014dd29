from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Collection, Sequence

    from tag_catalog.core.models.tag import Tag, TagCategory
    from tag_catalog.core.repositories.tag_repository import TagRepository


class TagSort(str, Enum):
    """Sort orders offered by the tag viewer."""

    CATEGORY = "category"
    AZ = "az"
    ZA = "za"


class TagCatalogService:
    """Read side of the catalog: search, category filter and sort.

    Keeps application logic (filtering, ordering) outside transport layer.
    """

    def __init__(self, repo: TagRepository) -> None:
        self._repo = repo

    async def list_tags(
        self,
        *,
        query: str | None = None,
        categories: Collection[TagCategory] | None = None,
        sort: TagSort = TagSort.CATEGORY,
    ) -> Sequence[Tag]:
        tags = list(await self._repo.list_all())

        needle = (query or "").strip().lower()
        if needle:
            tags = [t for t in tags if needle in t.name.lower()]
        if categories:
            wanted = set(categories)
            tags = [t for t in tags if t.category in wanted]

        if sort is TagSort.AZ:
            return sorted(tags, key=lambda t: t.name)
        if sort is TagSort.ZA:
            return sorted(tags, key=lambda t: t.name, reverse=True)
        return sorted(tags, key=lambda t: (t.category.value, t.name))

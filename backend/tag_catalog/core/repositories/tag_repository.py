from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from tag_catalog.core.models.tag import Tag, TagCategory


class TagRepository(ABC):
    """Abstract repository interface for categorized tags.

    Implementations own durability and must enforce a uniqueness constraint on
    the tag name at the storage layer; that constraint is what keeps racing
    ingestion requests from creating duplicates. Backend failures are raised as
    TagStorageError.
    """

    @abstractmethod
    async def initialize(self) -> TagRepository:  # pragma: no cover - interface only
        """Prepare the backing store (schema, connectivity) and return self."""

    @abstractmethod
    async def list_all(self) -> Sequence[Tag]:  # pragma: no cover
        """Return every tag ordered by category, then name, ascending."""

    @abstractmethod
    async def existing_names(self, candidates: Iterable[str]) -> set[str]:  # pragma: no cover
        """Return the subset of candidates already stored."""

    @abstractmethod
    async def insert_if_absent(self, name: str, category: TagCategory) -> bool:  # pragma: no cover
        """Create the tag unless the name exists. Return True only if a row was created."""

    @abstractmethod
    async def count(self) -> int:  # pragma: no cover
        """Return the number of stored tags."""


def chunked(items: Sequence[str], size: int) -> Iterable[Sequence[str]]:
    """Yield consecutive slices of at most ``size`` items."""
    for start in range(0, len(items), size):
        yield items[start:start + size]

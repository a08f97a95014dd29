from __future__ import annotations

from enum import Enum

from pydantic import Field

from tag_catalog.core.models.base import AppBaseModel
from tag_catalog.core.models.tag import FALLBACK_CATEGORY, TagCategory


class ClassificationStatus(str, Enum):
    OK = "ok"
    FALLBACK = "fallback"


class ClassificationResult(AppBaseModel):
    """Outcome of one classifier call: ``Ok(mapping)`` or ``Fallback(mapping)``.

    Both variants carry a complete tag -> category mapping; a fallback maps
    every requested tag to ``Miscellaneous / Meta`` and records why.
    """

    status: ClassificationStatus
    categories: dict[str, TagCategory] = Field(default_factory=dict)
    error: str | None = None

    @property
    def is_fallback(self) -> bool:
        return self.status is ClassificationStatus.FALLBACK

    def category_for(self, tag: str) -> TagCategory:
        return self.categories.get(tag, FALLBACK_CATEGORY)

    @classmethod
    def ok(cls, categories: dict[str, TagCategory]) -> ClassificationResult:
        return cls(status=ClassificationStatus.OK, categories=categories)

    @classmethod
    def fallback(cls, tags: list[str], error: str) -> ClassificationResult:
        return cls(
            status=ClassificationStatus.FALLBACK,
            categories={t: FALLBACK_CATEGORY for t in tags},
            error=error,
        )

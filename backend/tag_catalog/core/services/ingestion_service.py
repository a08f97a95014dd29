from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from tag_catalog.core.errors import InvalidTagBatchError, TagStorageError
from tag_catalog.core.schemas.ingestion import IngestionSummary
from tag_catalog.utils.logging import get_logger

if TYPE_CHECKING:
    from tag_catalog.core.repositories.tag_repository import TagRepository
    from tag_catalog.core.services.classification_service import TagClassifier


logger = get_logger(__name__)


def validate_tag_batch(candidates: object) -> list[str]:
    """Check an incoming batch and return its non-blank tags in order.

    Tag text is kept exactly as received (case and inner spacing included);
    only entries that are entirely whitespace are dropped.
    """
    if isinstance(candidates, (str, bytes)) or not isinstance(candidates, Sequence):
        raise InvalidTagBatchError("Tags must be provided as a list of strings")
    if len(candidates) == 0:
        raise InvalidTagBatchError("Tag batch must not be empty")

    tags: list[str] = []
    for item in candidates:
        if not isinstance(item, str):
            raise InvalidTagBatchError(f"Every tag must be a string, got {type(item).__name__}")
        if item.strip():
            tags.append(item)

    if not tags:
        raise InvalidTagBatchError("Tag batch contains only blank entries")
    return tags


class TagIngestionService:
    """Adds newly observed tags to the catalog, classifying only unseen ones."""

    def __init__(self, repo: TagRepository, classifier: TagClassifier) -> None:
        self._repo = repo
        self._classifier = classifier

    async def ingest(self, candidates: Sequence[str]) -> IngestionSummary:
        """Classify and store the tags of a batch that are not yet known.

        Known tags never reach the classifier, and a batch with nothing new
        makes no classifier call at all. Inserts are idempotent, so a tag
        another request stored in the meantime is simply not counted.
        Storage failures are fatal for the call and raised as TagStorageError
        once every remaining insert has been attempted.
        """
        tags = validate_tag_batch(candidates)

        existing = await self._repo.existing_names(tags)
        new_tags = [t for t in dict.fromkeys(tags) if t not in existing]

        summary = IngestionSummary(received_count=len(tags), new_count=len(new_tags))
        if not new_tags:
            logger.info("Received %d tags, but all already exist in the catalog", len(tags))
            return summary

        result = await self._classifier.classify(new_tags)
        summary.classification_status = result.status
        if result.is_fallback:
            logger.warning("Storing %d tags with the fallback category: %s", len(new_tags), result.error)

        first_error: TagStorageError | None = None
        for tag in new_tags:
            try:
                inserted = await self._repo.insert_if_absent(tag, result.category_for(tag))
            except TagStorageError as err:
                logger.error("Failed to store tag %r: %s", tag, err)
                first_error = first_error or err
                continue
            if inserted:
                summary.added_count += 1

        if first_error is not None:
            raise TagStorageError(
                f"Stored {summary.added_count} of {len(new_tags)} new tags before failing: {first_error}",
                added_count=summary.added_count,
            ) from first_error

        logger.info("Processed %d tags. Added %d new categorized tags to the catalog",
                    len(tags), summary.added_count)
        return summary

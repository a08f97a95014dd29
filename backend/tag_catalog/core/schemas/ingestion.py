from __future__ import annotations

from tag_catalog.core.models.base import AppBaseModel
from tag_catalog.core.schemas.classification import ClassificationStatus


class IngestionSummary(AppBaseModel):
    """What one ingestion call did.

    - received_count: non-blank tags in the request, duplicates included
    - new_count: distinct tags that were not yet stored when the call began
    - added_count: records actually created (a concurrent call may win some)
    - classification_status: None when no classifier call was needed
    """

    added_count: int = 0
    received_count: int = 0
    new_count: int = 0
    classification_status: ClassificationStatus | None = None

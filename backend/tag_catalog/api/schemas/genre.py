from __future__ import annotations

from pydantic import Field

from tag_catalog.core.models.base import AppBaseModel
from tag_catalog.core.models.tag import TagCategory  # noqa: TCH001
from tag_catalog.core.schemas.classification import ClassificationStatus  # noqa: TCH001


class GenreBatchCreate(AppBaseModel):
    # Key name matches what the browser extension posts
    genres: list[str] = Field(description="Tags captured from the music app, duplicates allowed")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "genres": ["heavy metal", "slow build up", "80s"]
                }
            ]
        }
    }


class GenreIngestResult(AppBaseModel):
    message: str
    added_count: int
    received_count: int
    new_count: int
    classification_status: ClassificationStatus | None = None


class GenreRead(AppBaseModel):
    id: int | str
    name: str
    category: TagCategory

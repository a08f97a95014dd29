from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from tag_catalog.api.schemas.genre import GenreBatchCreate, GenreIngestResult, GenreRead
from tag_catalog.core.errors import InvalidTagBatchError, TagStorageError
from tag_catalog.core.models.tag import TagCategory
from tag_catalog.core.services.catalog_service import TagCatalogService, TagSort
from tag_catalog.core.services.ingestion_service import TagIngestionService
from tag_catalog.dependencies import get_catalog_service, get_ingestion_service
from tag_catalog.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.get("", response_model=list[GenreRead])
async def list_genres(
    q: str | None = Query(default=None, description="Case-insensitive substring of the tag name"),
    category: list[TagCategory] | None = Query(default=None, description="Only these categories"),
    sort: TagSort = Query(default=TagSort.CATEGORY),
    service: TagCatalogService = Depends(get_catalog_service),
):
    """Return stored tags, by default ordered by category and then name."""
    try:
        tags = await service.list_tags(query=q, categories=category, sort=sort)
    except TagStorageError as err:
        logger.error("Error fetching tags: %s", err)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch tags",
        ) from err
    return [GenreRead.model_validate(t) for t in tags]


@router.post("", response_model=GenreIngestResult, status_code=status.HTTP_201_CREATED)
async def ingest_genres(
    payload: GenreBatchCreate,
    response: Response,
    service: TagIngestionService = Depends(get_ingestion_service),
):
    """Categorize unseen tags and add them to the catalog.

    Answers 201 when at least one tag was added and 200 when nothing was new.
    Classification problems never fail the request; affected tags are stored
    as ``Miscellaneous / Meta``.
    """
    try:
        summary = await service.ingest(payload.genres)
    except InvalidTagBatchError as err:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f'Request body must be an object with a non-empty "genres" array. {err}',
        ) from err
    except TagStorageError as err:
        logger.exception("An unexpected error occurred while processing tags")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An internal error occurred.",
        ) from err

    if summary.new_count == 0:
        message = "All received tags already exist."
    else:
        message = f"Successfully added {summary.added_count} new tags."
    if summary.added_count == 0:
        response.status_code = status.HTTP_200_OK

    return GenreIngestResult(message=message, **summary.model_dump())

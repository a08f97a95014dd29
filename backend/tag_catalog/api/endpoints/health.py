from __future__ import annotations

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from tag_catalog.config import Settings
from tag_catalog.core.errors import TagStorageError
from tag_catalog.core.repositories.tag_repository import TagRepository
from tag_catalog.dependencies import get_app_settings, get_tag_repository

router = APIRouter()


@router.get("/")
async def health_check():
    """Health check endpoint."""
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={
            "status": "healthy",
            "service": "music-tag-catalog",
            "version": "0.1.0"
        }
    )


@router.get("/ready")
async def readiness_check(
    repo: TagRepository = Depends(get_tag_repository),
    app_settings: Settings = Depends(get_app_settings),
):
    """Readiness check endpoint."""
    db_status = "connected"
    tag_count: int | None = None
    try:
        tag_count = await repo.count()
    except TagStorageError as e:
        db_status = f"error: {str(e)}"

    return JSONResponse(
        status_code=status.HTTP_200_OK if tag_count is not None else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "ready" if tag_count is not None else "degraded",
            "database": db_status,
            "storage_backend": app_settings.storage_backend,
            "tag_count": tag_count,
            "classifier_model": app_settings.classifier_model,
            "api_prefix": app_settings.api_prefix
        }
    )

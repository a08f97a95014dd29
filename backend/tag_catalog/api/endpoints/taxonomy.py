from __future__ import annotations

from fastapi import APIRouter

from tag_catalog.core.models.tag import TagCategory

router = APIRouter()


@router.get("/categories", response_model=list[str])
async def list_categories() -> list[str]:
    """Return the fixed taxonomy in classifier order for client-side filtering."""
    return [c.value for c in TagCategory.ordered()]

from __future__ import annotations

from fastapi import APIRouter

from .endpoints import genres, health, taxonomy

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(genres.router, prefix="/genres", tags=["genres"])
api_router.include_router(taxonomy.router, prefix="/metadata", tags=["metadata"])

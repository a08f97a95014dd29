from __future__ import annotations

from fastapi import Depends, Request

from tag_catalog.config import Settings  # noqa: TCH001
from tag_catalog.core.repositories.tag_repository import TagRepository  # noqa: TCH001
from tag_catalog.core.services.catalog_service import TagCatalogService
from tag_catalog.core.services.classification_service import TagClassifier
from tag_catalog.core.services.ingestion_service import TagIngestionService
from tag_catalog.utils.openai_client import get_openai_client


def get_app_settings(request: Request) -> Settings:
    """Settings the running application was created with."""
    return request.app.state.settings


def get_tag_repository(request: Request) -> TagRepository:
    """Return the tag store initialized during application startup."""
    return request.app.state.tag_repository


def get_tag_classifier(app_settings: Settings = Depends(get_app_settings)) -> TagClassifier:
    """Construct the classifier with the shared OpenAI client."""
    return TagClassifier.from_settings(get_openai_client(), app_settings)


def get_ingestion_service(
    repo: TagRepository = Depends(get_tag_repository),
    classifier: TagClassifier = Depends(get_tag_classifier),
) -> TagIngestionService:
    """Get a request-scoped ingestion service instance."""
    return TagIngestionService(repo, classifier)


def get_catalog_service(repo: TagRepository = Depends(get_tag_repository)) -> TagCatalogService:
    """Get a request-scoped catalog service instance."""
    return TagCatalogService(repo)

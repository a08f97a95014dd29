from __future__ import annotations

from functools import lru_cache

from openai import AsyncOpenAI

from tag_catalog.config import settings
from tag_catalog.utils.logging import get_logger


@lru_cache(maxsize=1)
def get_openai_client() -> AsyncOpenAI:
    """Return a singleton OpenAI client.

    Uses the environment's OPENAI_API_KEY by default. If `APP_OPENAI_API_KEY` is
    provided in the application's settings, it will be used explicitly. The
    classifier timeout is applied at the transport level so a stalled request
    can never block ingestion indefinitely.
    """
    logger = get_logger(__name__)
    options = {
        "timeout": settings.classifier_timeout_seconds,
        "max_retries": settings.classifier_max_retries,
    }
    if settings.openai_api_key:
        logger.debug("Initializing OpenAI client with APP_OPENAI_API_KEY")
        return AsyncOpenAI(api_key=settings.openai_api_key, **options)
    logger.debug("Initializing OpenAI client with default OPENAI_API_KEY from environment")
    return AsyncOpenAI(**options)

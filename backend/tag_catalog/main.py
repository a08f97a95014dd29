from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.gzip import GZipMiddleware
from starlette.middleware.trustedhost import TrustedHostMiddleware
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from .api.router import api_router
from .config import Settings, settings
from .db.base import create_tag_repository
from .utils.logging import get_logger, setup_logging

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from .core.repositories.tag_repository import TagRepository

logger = get_logger(__name__)


def create_app(
    app_settings: Settings | None = None,
    *,
    tag_repository: TagRepository | None = None,
) -> FastAPI:
    """Build the API.

    The tag store is created from settings (unless one is passed in) and
    initialized once at startup; request handlers receive it through
    dependencies rather than a module-level handle.
    """
    cfg = app_settings or settings
    setup_logging(cfg.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        repo = tag_repository or create_tag_repository(cfg)
        app.state.tag_repository = await repo.initialize()
        logger.info("Tag store is ready (backend=%s)", cfg.storage_backend)
        yield

    app = FastAPI(
        title="Music Tag Catalog API",
        debug=cfg.debug,
        version="0.1.0",
        root_path=cfg.root_path or "",
        lifespan=lifespan,
    )
    app.state.settings = cfg

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.cors_origins,
        allow_origin_regex=cfg.cors_origin_regex,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=[
            "Accept",
            "Accept-Language",
            "Content-Language",
            "Content-Type",
            "X-Requested-With",
        ],
        max_age=600,  # Cache preflight requests for 10 minutes
    )

    # Proxy headers (X-Forwarded-*) when behind ALB/ingress
    app.add_middleware(ProxyHeadersMiddleware, trusted_hosts=["*"])

    # Trusted hosts (configure in env for production)
    app.add_middleware(TrustedHostMiddleware, allowed_hosts=cfg.trusted_hosts)

    # The full catalog listing is large and compresses well
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    app.include_router(api_router, prefix=cfg.api_prefix)
    return app


app = create_app()

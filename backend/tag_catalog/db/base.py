from __future__ import annotations

from typing import TYPE_CHECKING

from supabase import Client, create_client
from supabase.lib.client_options import ClientOptions

from tag_catalog.core.repositories.implementations.sqlite.tag_repository import SqliteTagRepository
from tag_catalog.core.repositories.implementations.supabase.tag_repository import SupabaseTagRepository
from tag_catalog.utils.logging import get_logger

if TYPE_CHECKING:
    from tag_catalog.config import Settings
    from tag_catalog.core.repositories.tag_repository import TagRepository

logger = get_logger(__name__)


def create_supabase_admin_client(app_settings: Settings) -> Client:
    """Create a Supabase client using the service role key.

    The tag catalog has no per-user rows, so the service role is the only
    client the store needs.
    """
    logger.debug("Initializing Supabase admin client")
    if not app_settings.supabase_url:
        raise RuntimeError("supabase_url is required for the supabase storage backend")
    if not app_settings.supabase_service_role_key:
        raise RuntimeError("supabase_service_role_key is required for the supabase storage backend")
    return create_client(
        app_settings.supabase_url,
        app_settings.supabase_service_role_key,
        options=ClientOptions(auto_refresh_token=False, persist_session=False),
    )


def create_tag_repository(app_settings: Settings) -> TagRepository:
    """Build the configured tag store. Call ``initialize()`` on it before use."""
    if app_settings.storage_backend == "supabase":
        return SupabaseTagRepository(
            create_supabase_admin_client(app_settings),
            table_name=app_settings.supabase_tags_table,
        )
    return SqliteTagRepository(
        app_settings.sqlite_path,
        busy_timeout_seconds=app_settings.sqlite_busy_timeout_seconds,
    )

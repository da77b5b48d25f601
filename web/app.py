"""
Application factory.

Builds the aiohttp application with its middlewares, routes and the
/uploads static directory. Collaborators are passed in so tests can use
their own database and image store.
"""

from pathlib import Path

from aiohttp import web
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.config.constants import UPLOADS_URL_PREFIX
from app.config.settings import Settings
from app.services.image_storage_service import ImageStore, LocalImageStore
from app.services.token_service import ReconciliationScheduler
from web.app_keys import (
    IMAGE_STORE_KEY,
    RECONCILIATION_KEY,
    SESSION_MAKER_KEY,
    SETTINGS_KEY,
)
from web.handlers import ROUTE_TABLES
from web.middlewares import database_middleware, error_middleware


# Multipart overhead allowed on top of the logo size
REQUEST_SIZE_MARGIN_BYTES = 1024 * 1024


def create_app(
    settings: Settings,
    session_maker: async_sessionmaker[AsyncSession],
    image_store: ImageStore | None = None,
    schedule_reconciliation: ReconciliationScheduler | None = None,
) -> web.Application:
    """
    Create the web application.

    Args:
        settings: Application settings
        session_maker: Factory for per-request database sessions
        image_store: Logo storage (local uploads directory when omitted)
        schedule_reconciliation: Enqueues pending token records

    Returns:
        Configured aiohttp application
    """
    app = web.Application(
        middlewares=[error_middleware, database_middleware],
        client_max_size=settings.max_logo_size_bytes + REQUEST_SIZE_MARGIN_BYTES,
    )

    upload_dir = Path(settings.upload_dir)
    if image_store is None:
        image_store = LocalImageStore(
            upload_dir, UPLOADS_URL_PREFIX, settings.max_logo_size_bytes
        )
    upload_dir.mkdir(parents=True, exist_ok=True)

    app[SETTINGS_KEY] = settings
    app[SESSION_MAKER_KEY] = session_maker
    app[IMAGE_STORE_KEY] = image_store
    if schedule_reconciliation is not None:
        app[RECONCILIATION_KEY] = schedule_reconciliation

    for routes in ROUTE_TABLES:
        app.add_routes(routes)
    app.router.add_static(UPLOADS_URL_PREFIX, upload_dir, name="uploads")

    logger.info(f"Web application created, uploads served from {upload_dir}")
    return app

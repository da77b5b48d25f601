"""Typed keys for objects stored on the aiohttp application."""

from aiohttp import web
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.config.settings import Settings
from app.services.image_storage_service import ImageStore
from app.services.token_service import ReconciliationScheduler


SETTINGS_KEY = web.AppKey("settings", Settings)
SESSION_MAKER_KEY = web.AppKey("session_maker", async_sessionmaker[AsyncSession])
IMAGE_STORE_KEY = web.AppKey("image_store", ImageStore)
RECONCILIATION_KEY = web.AppKey("schedule_reconciliation", ReconciliationScheduler)

# Per-request key holding the database session
REQUEST_SESSION_KEY = "db_session"

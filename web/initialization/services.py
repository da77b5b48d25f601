"""
Web Initialization - Services Module.

Wires the collaborators the web application needs: database session
factory, logo storage and the reconciliation job scheduler.
"""

from typing import Any

from loguru import logger

from app.config.settings import Settings
from app.services.image_storage_service import LocalImageStore
from app.services.token_service import ReconciliationScheduler


def create_image_store(settings: Settings) -> LocalImageStore:
    """Local logo storage served under /uploads."""
    store = LocalImageStore(settings.upload_dir, max_size=settings.max_logo_size_bytes)
    logger.info(f"Logo storage: {store.directory}")
    return store


def create_reconciliation_scheduler() -> ReconciliationScheduler:
    """
    Scheduler that enqueues the token reconciliation actor.

    Importing the actor configures the dramatiq broker.
    """
    from jobs.tasks.token_reconciliation import reconcile_pending_token

    def schedule(payload: dict[str, Any]) -> None:
        reconcile_pending_token.send(payload)

    logger.info("Reconciliation scheduler ready")
    return schedule

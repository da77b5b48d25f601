"""
Token reconciliation task.

Persists token records that were accepted as pending while the database
was unavailable. Retried by dramatiq with exponential backoff until the
database is back or retries run out. Idempotent through the record's
creation key.
"""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from typing import Any

import dramatiq
from dramatiq.middleware import CurrentMessage
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.settings import settings
from app.services.token_service import TokenService
from jobs.async_runner import create_local_session, run_async
from jobs.broker import broker  # noqa: F401


SessionFactory = Callable[[], AbstractAsyncContextManager[AsyncSession]]


async def reconcile_token(
    payload: dict[str, Any],
    session_factory: SessionFactory = create_local_session,
) -> int:
    """
    Persist one pending token record.

    Args:
        payload: PendingTokenRecord.to_payload() output
        session_factory: Opens a database session

    Returns:
        Id of the stored token

    Raises:
        PersistenceUnavailableError: Database still unavailable (retried)
    """
    async with session_factory() as session:
        token = await TokenService(session).persist_pending(payload)
    return token.id


@dramatiq.actor(
    queue_name="reconciliation",
    max_retries=settings.reconciliation_max_retries,
    min_backoff=settings.reconciliation_min_backoff_ms,
    max_backoff=settings.reconciliation_max_backoff_ms,
    time_limit=60_000,
)
def reconcile_pending_token(payload: dict[str, Any]) -> None:
    """Dramatiq entry point; exceptions trigger a retry."""
    creation_key = payload.get("creation_key")
    message = CurrentMessage.get_current_message()
    attempt = message.options.get("retries", 0) + 1 if message else 1
    logger.info(f"Reconciling pending token {creation_key} (attempt {attempt})")

    try:
        token_id = run_async(reconcile_token(payload))
    except Exception as e:
        logger.warning(f"Reconciliation of {creation_key} failed, will retry: {e}")
        raise

    logger.info(f"Pending token {creation_key} reconciled as id={token_id}")

"""Service construction for request handlers."""

from aiohttp import web

from app.services.memedrop_service import MemeDropService
from app.services.token_service import TokenService
from web.app_keys import IMAGE_STORE_KEY, RECONCILIATION_KEY, SETTINGS_KEY
from web.middlewares.database import get_session


def token_service(request: web.Request) -> TokenService:
    """TokenService bound to the request session."""
    app = request.app
    return TokenService(
        get_session(request),
        image_store=app[IMAGE_STORE_KEY],
        schedule_reconciliation=app.get(RECONCILIATION_KEY),
        db_timeout=app[SETTINGS_KEY].db_operation_timeout,
    )


def memedrop_service(request: web.Request) -> MemeDropService:
    """MemeDropService bound to the request session."""
    return MemeDropService(get_session(request))


def chain_filter(request: web.Request) -> str | None:
    """Optional ?chain= lookup filter."""
    chain = request.query.get("chain", "").strip().lower()
    return chain or None

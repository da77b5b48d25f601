"""
Database middleware.

Opens one AsyncSession per request and closes it afterwards. Services
commit or roll back through their @transaction methods; the middleware only
owns the session lifecycle.
"""

from collections.abc import Awaitable, Callable

from aiohttp import web
from sqlalchemy.ext.asyncio import AsyncSession

from web.app_keys import REQUEST_SESSION_KEY, SESSION_MAKER_KEY


Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


@web.middleware
async def database_middleware(request: web.Request, handler: Handler) -> web.StreamResponse:
    """Provide request[REQUEST_SESSION_KEY] for the duration of the request."""
    session_maker = request.app[SESSION_MAKER_KEY]
    async with session_maker() as session:
        request[REQUEST_SESSION_KEY] = session
        return await handler(request)


def get_session(request: web.Request) -> AsyncSession:
    """Session opened for this request."""
    return request[REQUEST_SESSION_KEY]

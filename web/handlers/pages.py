"""
Token page handler.

GET /coin/{name} renders the shareable page of the newest token with this
name and counts the view. Unknown names get the not-found page.
"""

from aiohttp import web
from loguru import logger

from app.services.page_renderer import build_token_page
from app.utils.exceptions import NotFoundError, PersistenceUnavailableError
from web.app_keys import SETTINGS_KEY
from web.handlers.dependencies import chain_filter, token_service
from web.messages.page_templates import (
    render_not_found_page,
    render_token_page,
    render_unavailable_page,
)


routes = web.RouteTableDef()


@routes.get("/coin/{name}")
async def token_page(request: web.Request) -> web.Response:
    name = request.match_info["name"]
    chain = chain_filter(request)
    service = token_service(request)

    try:
        await service.increment_view(name, chain)
        token = await service.get_token(name, chain)
    except NotFoundError:
        logger.info(f"Token page not found: {name!r}")
        return web.Response(
            text=render_not_found_page(name), status=404, content_type="text/html"
        )
    except PersistenceUnavailableError:
        return web.Response(
            text=render_unavailable_page(), status=503, content_type="text/html"
        )

    page = build_token_page(token, request.app[SETTINGS_KEY].public_base_url)
    return web.Response(text=render_token_page(page), content_type="text/html")

"""
Token API handlers.

POST   /api/tokens                 create (multipart or JSON)
GET    /api/tokens                 list, newest first
GET    /api/tokens/{name}          fetch by case-insensitive name
PATCH  /api/tokens/{name}/theme    partial theme update
POST   /api/tokens/{name}/view     atomic view increment
"""

from typing import Any

from aiohttp import web
from loguru import logger

from app.services.image_storage_service import UploadedImage
from app.utils.exceptions import ValidationError
from app.validators.token import ThemeUpdate, TokenCreate, parse_model
from web.handlers.dependencies import chain_filter, token_service
from web.serializers import token_to_dict


routes = web.RouteTableDef()

IDEMPOTENCY_HEADER = "Idempotency-Key"
MAX_IDEMPOTENCY_KEY_LENGTH = 128


async def _read_json(request: web.Request) -> dict[str, Any]:
    try:
        data = await request.json()
    except ValueError as e:
        raise ValidationError("Request body must be valid JSON") from e
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


async def _read_token_form(request: web.Request) -> tuple[dict[str, Any], UploadedImage | None]:
    """Read token fields and the optional logo from a multipart or JSON body."""
    if request.content_type == "application/json":
        return await _read_json(request), None

    form = await request.post()
    fields: dict[str, Any] = {}
    logo = None
    for key, value in form.items():
        if isinstance(value, web.FileField):
            if key == "logo":
                logo = UploadedImage(
                    data=value.file.read(),
                    content_type=value.content_type,
                    filename=value.filename,
                )
            continue
        fields[key] = value
    return fields, logo


def _creation_key(request: web.Request) -> str | None:
    key = request.headers.get(IDEMPOTENCY_HEADER, "").strip()
    if not key:
        return None
    if len(key) > MAX_IDEMPOTENCY_KEY_LENGTH:
        raise ValidationError(
            f"{IDEMPOTENCY_HEADER} must be at most {MAX_IDEMPOTENCY_KEY_LENGTH} characters"
        )
    return key


@routes.post("/api/tokens")
async def create_token(request: web.Request) -> web.Response:
    """Create a token record."""
    fields, logo = await _read_token_form(request)
    description = parse_model(TokenCreate, fields)

    result = await token_service(request).create_token(
        description, logo=logo, creation_key=_creation_key(request)
    )

    if result.is_pending:
        return web.json_response(result.pending.to_dict(), status=503)
    status = 200 if result.replayed else 201
    return web.json_response(token_to_dict(result.token), status=status)


@routes.get("/api/tokens")
async def list_tokens(request: web.Request) -> web.Response:
    tokens = await token_service(request).list_tokens()
    return web.json_response([token_to_dict(token) for token in tokens])


@routes.get("/api/tokens/{name}")
async def get_token(request: web.Request) -> web.Response:
    token = await token_service(request).get_token(
        request.match_info["name"], chain_filter(request)
    )
    return web.json_response(token_to_dict(token))


@routes.patch("/api/tokens/{name}/theme")
async def update_theme(request: web.Request) -> web.Response:
    update = parse_model(ThemeUpdate, await _read_json(request))
    token = await token_service(request).update_theme(
        request.match_info["name"], update, chain_filter(request)
    )
    return web.json_response(token_to_dict(token))


@routes.post("/api/tokens/{name}/view")
async def increment_view(request: web.Request) -> web.Response:
    name = request.match_info["name"]
    view_count = await token_service(request).increment_view(name, chain_filter(request))
    logger.debug(f"View count for {name!r}: {view_count}")
    return web.json_response({"viewCount": view_count})

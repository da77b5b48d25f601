"""
MemeDrop API handlers.

GET   /api/memedrop/entries       entry count
POST  /api/memedrop/entries       manual entry
GET   /api/memedrop/entries/all   all entries, newest first
"""

from aiohttp import web

from app.utils.exceptions import ValidationError
from app.validators.token import MemeDropEntryCreate, parse_model
from web.handlers.dependencies import memedrop_service
from web.serializers import memedrop_entry_to_dict


routes = web.RouteTableDef()


@routes.get("/api/memedrop/entries")
async def count_entries(request: web.Request) -> web.Response:
    count = await memedrop_service(request).count_entries()
    return web.json_response(count)


@routes.get("/api/memedrop/entries/all")
async def list_entries(request: web.Request) -> web.Response:
    entries = await memedrop_service(request).list_entries()
    return web.json_response([memedrop_entry_to_dict(entry) for entry in entries])


@routes.post("/api/memedrop/entries")
async def create_entry(request: web.Request) -> web.Response:
    try:
        data = await request.json()
    except ValueError as e:
        raise ValidationError("Request body must be valid JSON") from e
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")

    payload = parse_model(MemeDropEntryCreate, data)
    entry = await memedrop_service(request).create_entry(payload)
    return web.json_response(memedrop_entry_to_dict(entry), status=201)

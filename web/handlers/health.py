"""
Health check handler.

GET /api/health checks the database with a MemeDrop count.
"""

import asyncio
from datetime import UTC, datetime

from aiohttp import web
from loguru import logger

from web.app_keys import SETTINGS_KEY
from web.handlers.dependencies import memedrop_service


routes = web.RouteTableDef()


@routes.get("/api/health")
async def health(request: web.Request) -> web.Response:
    """
    Health check endpoint.

    Returns:
        200 when the database answers, 503 otherwise
    """
    timeout = request.app[SETTINGS_KEY].db_operation_timeout
    timestamp = datetime.now(UTC).isoformat()
    try:
        await asyncio.wait_for(memedrop_service(request).count_entries(), timeout=timeout)
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        return web.json_response(
            {
                "status": "unhealthy",
                "database": "disconnected",
                "timestamp": timestamp,
            },
            status=503,
        )

    return web.json_response(
        {
            "status": "healthy",
            "database": "connected",
            "timestamp": timestamp,
        }
    )

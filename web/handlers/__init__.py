"""
Web handlers.

Each module exposes a RouteTableDef named routes.
"""

from web.handlers import health, memedrop, pages, tokens


ROUTE_TABLES = (health.routes, tokens.routes, memedrop.routes, pages.routes)

__all__ = ["ROUTE_TABLES"]

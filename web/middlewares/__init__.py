"""
Web middlewares.

Order matters: the error middleware wraps the database middleware so that
failures during session cleanup are mapped too.
"""

from web.middlewares.database import database_middleware
from web.middlewares.error_handler import error_middleware


__all__ = ["database_middleware", "error_middleware"]

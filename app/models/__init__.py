"""
Database models.

Exports all SQLAlchemy models for easy imports.
"""

from app.models.base import Base
from app.models.memedrop_entry import MemeDropEntry
from app.models.token import Token


__all__ = [
    "Base",
    "MemeDropEntry",
    "Token",
]

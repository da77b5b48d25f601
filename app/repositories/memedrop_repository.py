"""
MemeDrop repository.

Data access layer for MemeDropEntry model.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.memedrop_entry import MemeDropEntry
from app.repositories.base import BaseRepository


class MemeDropRepository(BaseRepository[MemeDropEntry]):
    """MemeDrop entry repository. Entries are append-only."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize MemeDrop repository."""
        super().__init__(MemeDropEntry, session)

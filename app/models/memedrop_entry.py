"""
MemeDrop entry model.

Entries in the weekly prize drawing.
"""

from datetime import UTC, datetime

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.config.business_constants import MAX_CHAIN_LENGTH
from app.models.base import Base


class MemeDropEntry(Base):
    """
    MemeDrop entry entity.

    wallet_address is a display identifier (masked token address for
    automatic enrollments), not a verified wallet.
    """

    __tablename__ = "meme_drop_entries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    wallet_address: Mapped[str] = mapped_column(Text, nullable=False)
    token_name: Mapped[str] = mapped_column(Text, nullable=False)
    chain: Mapped[str] = mapped_column(String(MAX_CHAIN_LENGTH), nullable=False)
    twitter: Mapped[str | None] = mapped_column(Text, nullable=True)
    email: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False, index=True
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<MemeDropEntry(id={self.id}, token_name={self.token_name!r})>"

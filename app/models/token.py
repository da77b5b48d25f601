"""
Token model.

A promotional page record for a meme-coin token.
"""

from datetime import UTC, datetime

from sqlalchemy import CheckConstraint, DateTime, Index, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from app.config.business_constants import (
    DEFAULT_BUTTON_STYLE,
    DEFAULT_FONT_STYLE,
    DEFAULT_THEME,
    MAX_CHAIN_LENGTH,
)
from app.models.base import Base


class Token(Base):
    """
    Token page entity.

    Pages are resolved by lower(token_name), not by id. Several records may
    share a name; lookups resolve to the newest one (created_at, then id,
    descending), optionally narrowed by chain.

    Attributes:
        id: Primary key
        token_name: Display name as entered by the creator
        token_address: Contract/mint address (length-checked only)
        chain: Lowercase chain id (solana, ethereum, ...)
        logo_url: Absolute URL or /uploads/... path
        theme: Page theme
        button_style: Button style
        font_style: Font style
        view_count: Page views, only ever incremented
        created_at: Creation timestamp (immutable)
        creation_key: Idempotency key for creation and reconciliation
    """

    __tablename__ = "tokens"
    __table_args__ = (
        CheckConstraint("view_count >= 0", name="ck_tokens_view_count_non_negative"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    token_name: Mapped[str] = mapped_column(Text, nullable=False)
    token_address: Mapped[str] = mapped_column(Text, nullable=False)
    chain: Mapped[str] = mapped_column(String(MAX_CHAIN_LENGTH), nullable=False)
    logo_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    theme: Mapped[str] = mapped_column(
        String(32), nullable=False, default=DEFAULT_THEME, server_default=DEFAULT_THEME
    )
    button_style: Mapped[str] = mapped_column(
        String(32), nullable=False, default=DEFAULT_BUTTON_STYLE, server_default=DEFAULT_BUTTON_STYLE
    )
    font_style: Mapped[str] = mapped_column(
        String(32), nullable=False, default=DEFAULT_FONT_STYLE, server_default=DEFAULT_FONT_STYLE
    )

    view_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default="0"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False
    )

    creation_key: Mapped[str | None] = mapped_column(
        String(128), nullable=True, unique=True, comment="Idempotency key"
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<Token(id={self.id}, token_name={self.token_name!r}, "
            f"chain={self.chain!r}, view_count={self.view_count})>"
        )


Index(
    "ix_tokens_name_lower_chain_created",
    func.lower(Token.token_name),
    Token.chain,
    Token.created_at,
)

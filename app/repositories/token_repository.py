"""
Token repository.

Data access layer for Token model.
"""

from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from app.models.token import Token
from app.repositories.base import BaseRepository


class TokenRepository(BaseRepository[Token]):
    """
    Token repository with name-based lookups.

    Name lookups are case-insensitive and resolve to the newest record:
    created_at descending, id descending as tie-breaker.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize token repository."""
        super().__init__(Token, session)

    @staticmethod
    def _newest_id(name: str, chain: str | None = None):
        """Scalar subquery selecting the id a name resolves to."""
        candidate = aliased(Token)
        stmt = select(candidate.id).where(
            func.lower(candidate.token_name) == name.lower()
        )
        if chain:
            stmt = stmt.where(candidate.chain == chain.lower())
        return (
            stmt.order_by(candidate.created_at.desc(), candidate.id.desc())
            .limit(1)
            .scalar_subquery()
        )

    async def get_by_name(
        self, name: str, chain: str | None = None
    ) -> Token | None:
        """
        Get token by case-insensitive name.

        Args:
            name: Token name in any case
            chain: Optional chain filter

        Returns:
            Newest matching token or None
        """
        stmt = select(Token).where(func.lower(Token.token_name) == name.lower())
        if chain:
            stmt = stmt.where(Token.chain == chain.lower())
        stmt = stmt.order_by(Token.created_at.desc(), Token.id.desc()).limit(1)

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_creation_key(self, creation_key: str) -> Token | None:
        """Get token by its idempotency key."""
        return await self.get_by(creation_key=creation_key)

    async def increment_view_count(
        self, name: str, chain: str | None = None
    ) -> int | None:
        """
        Atomically increment view count of the token a name resolves to.

        Runs as a single UPDATE ... SET view_count = view_count + 1 so
        concurrent viewers never lose increments.

        Args:
            name: Token name in any case
            chain: Optional chain filter

        Returns:
            New view count or None if no token matches
        """
        stmt = (
            update(Token)
            .where(Token.id == self._newest_id(name, chain))
            .values(view_count=Token.view_count + 1)
            .returning(Token.view_count)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def update_theme(
        self, name: str, chain: str | None = None, **fields: Any
    ) -> Token | None:
        """
        Update theme fields of the token a name resolves to.

        Args:
            name: Token name in any case
            chain: Optional chain filter
            **fields: theme / button_style / font_style values to set

        Returns:
            Updated token or None if not found
        """
        token = await self.get_by_name(name, chain)
        if token is None:
            return None

        for key, value in fields.items():
            setattr(token, key, value)

        await self.session.flush()
        await self.session.refresh(token)
        return token

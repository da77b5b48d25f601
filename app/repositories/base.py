"""
Base repository.

Generic data access shared by the token and MemeDrop repositories. Both
tables are append-mostly and listed newest first.
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.base import Base

# Generic type for model
ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Base repository for models with id and created_at columns.

    Repositories never commit; the calling service owns the transaction.

    Example:
        class MemeDropRepository(BaseRepository[MemeDropEntry]):
            def __init__(self, session: AsyncSession):
                super().__init__(MemeDropEntry, session)
    """

    def __init__(self, model: type[ModelType], session: AsyncSession) -> None:
        self.model = model
        self.session = session

    async def get_by_id(self, id: int) -> ModelType | None:
        return await self.session.get(self.model, id)

    async def get_by(self, **filters: Any) -> ModelType | None:
        """First row matching exact column filters, or None."""
        stmt = select(self.model).filter_by(**filters).limit(1)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def find_all(self, limit: int | None = None, **filters: Any) -> list[ModelType]:
        """
        List rows newest first.

        Ties on created_at are broken by id so the order is stable.

        Args:
            limit: Max number of rows
            **filters: Column filters

        Returns:
            Matching rows
        """
        stmt = (
            select(self.model)
            .filter_by(**filters)
            .order_by(self.model.created_at.desc(), self.model.id.desc())
        )
        if limit:
            stmt = stmt.limit(limit)

        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, **data: Any) -> ModelType:
        """
        Insert a row and load server-side defaults.

        Args:
            **data: Column values

        Returns:
            Flushed and refreshed entity (id and defaults populated)
        """
        entity = self.model(**data)
        self.session.add(entity)
        await self.session.flush()
        await self.session.refresh(entity)
        return entity

    async def count(self, **filters: Any) -> int:
        stmt = select(func.count()).select_from(self.model)
        if filters:
            stmt = stmt.filter_by(**filters)

        result = await self.session.execute(stmt)
        return result.scalar() or 0

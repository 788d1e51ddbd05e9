"""Base repository shared by every table family."""

from typing import TypeVar, Generic, Optional, List, Type, Any
from uuid import UUID

from sqlalchemy import select, delete, func
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Base

T = TypeVar("T", bound=Base)


class Repository(Generic[T]):
    """
    Base repository over a single table.

    Subclasses set ``model`` and add the filtered queries their views need.
    Writes are flushed and refreshed so generated columns are populated
    before the session commits.
    """

    model: Type[T]

    def __init__(self, session: AsyncSession):
        self.session = session

    def _base_query(self):
        """Get base query for the model."""
        return select(self.model)

    async def _all(self, query) -> List[T]:
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def get_by_id(self, id: UUID) -> Optional[T]:
        """Get entity by primary key."""
        return await self.session.get(self.model, id)

    async def get_all(
        self,
        limit: Optional[int] = None,
        order_by: Any = None,
    ) -> List[T]:
        """Get all entities, optionally ordered and limited."""
        query = self._base_query()
        if order_by is not None:
            query = query.order_by(order_by)
        if limit is not None:
            query = query.limit(limit)
        return await self._all(query)

    async def create(self, entity: T) -> T:
        """Create a new entity."""
        self.session.add(entity)
        await self.session.flush()
        await self.session.refresh(entity)
        return entity

    async def update(self, entity: T) -> T:
        """Update an existing entity."""
        await self.session.flush()
        await self.session.refresh(entity)
        return entity

    async def delete(self, id: UUID) -> bool:
        """Delete an entity by ID."""
        query = delete(self.model).where(self.model.id == id)
        result = await self.session.execute(query)
        return result.rowcount > 0

    async def count(self, *conditions) -> int:
        """Count entities matching the given conditions."""
        query = select(func.count()).select_from(self.model)
        if conditions:
            query = query.where(*conditions)
        result = await self.session.execute(query)
        return result.scalar_one()

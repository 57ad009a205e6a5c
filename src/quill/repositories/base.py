"""Base repository pattern for all data access."""

from typing import Generic, TypeVar, Type, Optional, List, Tuple
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Base repository with common CRUD operations.

    All repositories should inherit from this class.
    """

    def __init__(self, model: Type[ModelType], session: AsyncSession):
        """
        Initialize repository.

        Args:
            model: SQLAlchemy model class
            session: Async database session
        """
        self.model = model
        self.session = session

    async def get(self, id: UUID) -> Optional[ModelType]:
        """Get single record by ID."""
        result = await self.session.execute(
            select(self.model).where(self.model.id == id)
        )
        return result.scalar_one_or_none()

    async def create(self, **data) -> ModelType:
        """Create new record."""
        instance = self.model(**data)
        self.session.add(instance)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def update(self, id: UUID, **data) -> Optional[ModelType]:
        """Update existing record."""
        instance = await self.get(id)
        if not instance:
            return None

        for key, value in data.items():
            if hasattr(instance, key):
                setattr(instance, key, value)

        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def delete(self, id: UUID) -> bool:
        """Delete record (hard delete)."""
        instance = await self.get(id)
        if not instance:
            return False

        await self.session.delete(instance)
        await self.session.flush()
        return True

    async def commit(self) -> None:
        """Commit the unit of work so it is durable before the response is sent."""
        await self.session.commit()

    async def count(self, query: Optional[Select] = None) -> int:
        """Count rows matched by ``query`` (all rows if omitted)."""
        if query is None:
            query = select(self.model)
        result = await self.session.execute(
            select(func.count()).select_from(query.order_by(None).subquery())
        )
        return int(result.scalar_one())

    async def paginate(
        self,
        query: Select,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[ModelType], int]:
        """Run ``query`` for one page and return (items, total)."""
        total = await self.count(query)
        result = await self.session.execute(
            query.offset((page - 1) * limit).limit(limit)
        )
        return list(result.scalars().all()), total

"""
Base repository.

Generic operations shared by all repositories.
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from airdrop_tracker.models.base import Base

# Generic type for model
ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Base repository with generic async operations.

    Type Parameters:
        ModelType: SQLAlchemy model class

    Example:
        class WalletRepository(BaseRepository[AirdropWallet]):
            def __init__(self, session: AsyncSession):
                super().__init__(AirdropWallet, session)
    """

    def __init__(
        self, model: type[ModelType], session: AsyncSession
    ) -> None:
        """
        Initialize repository.

        Args:
            model: SQLAlchemy model class
            session: Async database session
        """
        self.model = model
        self.session = session

    async def get_by(
        self, for_update: bool = False, **filters: Any
    ) -> ModelType | None:
        """
        Get single entity by filters.

        Args:
            for_update: Use SELECT FOR UPDATE to lock the row
            **filters: Column filters

        Returns:
            First matching entity or None
        """
        stmt = select(self.model).filter_by(**filters)
        if for_update:
            stmt = stmt.with_for_update()
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def find_all(
        self,
        limit: int | None = None,
        offset: int | None = None,
        **filters: Any,
    ) -> list[ModelType]:
        """
        Find all entities matching filters.

        Args:
            limit: Max number of results
            offset: Number of results to skip
            **filters: Column filters

        Returns:
            List of matching entities
        """
        stmt = select(self.model).filter_by(**filters)

        if offset:
            stmt = stmt.offset(offset)
        if limit:
            stmt = stmt.limit(limit)

        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count(self, **filters: Any) -> int:
        """
        Count entities matching filters.

        Args:
            **filters: Column filters

        Returns:
            Count of matching entities
        """
        stmt = select(func.count()).select_from(self.model)

        if filters:
            stmt = stmt.filter_by(**filters)

        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def insert_ignore(
        self, values: dict[str, Any], conflict_columns: list[str]
    ) -> bool:
        """
        INSERT ... ON CONFLICT DO NOTHING.

        Args:
            values: Column values
            conflict_columns: Columns of the unique constraint

        Returns:
            True if a row was inserted, False on conflict
        """
        dialect = self.session.get_bind().dialect.name
        if dialect == "postgresql":
            stmt = postgresql.insert(self.model)
        elif dialect == "sqlite":
            stmt = sqlite.insert(self.model)
        else:
            raise NotImplementedError(f"Unsupported dialect: {dialect}")

        stmt = stmt.values(**values).on_conflict_do_nothing(
            index_elements=conflict_columns
        )
        result = await self.session.execute(stmt)
        return result.rowcount > 0

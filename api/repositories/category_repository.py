"""Category repository for database operations."""

import uuid

from sqlalchemy import or_
from sqlalchemy.ext.asyncio import AsyncSession

from models import Category
from repositories.base_repository import BaseRepository
from repositories.constructor import register_repository


@register_repository(Category)
class CategoryRepository(BaseRepository[Category]):
    """Repository for Category database operations."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Category)

    async def find_conflicting(
        self,
        name: str,
        short_name: str,
        *,
        exclude_id: uuid.UUID | None = None,
    ) -> list[Category]:
        """Categories already using ``name`` or ``short_name``.

        Pass ``exclude_id`` to ignore the category being updated.
        """
        criteria = [or_(Category.name == name, Category.short_name == short_name)]
        if exclude_id is not None:
            criteria.append(Category.id != exclude_id)
        return await self.get(*criteria)

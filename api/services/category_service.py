"""Category service: uniqueness and existence rules for categories."""

import uuid

from models import Category
from repositories.category_repository import CategoryRepository
from repositories.constructor import RepositoryConstructor
from services.base_service import BaseService
from services.constructor import register_service
from services.result import Result

NOT_FOUND_MESSAGE = "This category does not exist in the database"
DUPLICATE_MESSAGE = "A category with this name or short name already exists"
DUPLICATE_IN_BATCH_MESSAGE = (
    "Another category in this list has the same name or short name"
)


@register_service(Category)
class CategoryService(BaseService[Category]):
    """Categories are unique by name and by short name."""

    def __init__(self, repositories: RepositoryConstructor) -> None:
        super().__init__(repositories, Category)

    @property
    def repository(self) -> CategoryRepository:
        return self.repositories.get_repository(Category)  # type: ignore[return-value]

    async def validate_on_create(self, entity: Category) -> Result:
        conflicts = await self.repository.find_conflicting(
            entity.name, entity.short_name
        )
        if conflicts:
            return Result.fail(DUPLICATE_MESSAGE)
        return Result()

    async def validate_on_create_in_batch(
        self, entity: Category, earlier: list[Category]
    ) -> Result:
        if any(
            other.name == entity.name or other.short_name == entity.short_name
            for other in earlier
        ):
            return Result.fail(DUPLICATE_IN_BATCH_MESSAGE)
        return Result()

    async def validate_on_update(self, entity: Category) -> Result:
        if await self.repository.get_by_id(entity.id) is None:
            return Result.fail(NOT_FOUND_MESSAGE)
        conflicts = await self.repository.find_conflicting(
            entity.name, entity.short_name, exclude_id=entity.id
        )
        if conflicts:
            return Result.fail(DUPLICATE_MESSAGE)
        return Result()

    async def validate_on_delete(self, entity: Category) -> Result:
        return await self.validate_on_delete_by_id(entity.id)

    async def validate_on_delete_by_id(self, entity_id: uuid.UUID) -> Result:
        if await self.repository.get_by_id(entity_id) is None:
            return Result.fail(NOT_FOUND_MESSAGE)
        return Result()

"""Generic service: validation + persistence orchestration for one entity type.

Each mutating operation follows the same shape:

    validate -> pass: stage change + commit + success Result
             -> fail: failed Result carrying the validation Result as cause

Any exception raised while validating or persisting is logged and turned into
a failed Result that keeps the exception. Nothing escapes the service.
"""

import uuid
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Iterable

from core.logger import get_logger
from models import Entity
from repositories.base_repository import BaseRepository
from repositories.constructor import RepositoryConstructor
from services.result import Result

logger = get_logger(__name__)


class BaseService[ModelT: Entity](ABC):
    """Abstract base for entity services.

    Subclasses pass their model type and implement the validate_on_* rules.
    """

    def __init__(
        self, repositories: RepositoryConstructor, model: type[ModelT]
    ) -> None:
        self.repositories = repositories
        self.model = model

    @property
    def model_name(self) -> str:
        return self.model.__name__

    @property
    def repository(self) -> BaseRepository[ModelT]:
        return self.repositories.get_repository(self.model)

    # -- validation rules ------------------------------------------------------

    @abstractmethod
    async def validate_on_create(self, entity: ModelT) -> Result: ...

    @abstractmethod
    async def validate_on_update(self, entity: ModelT) -> Result: ...

    @abstractmethod
    async def validate_on_delete(self, entity: ModelT) -> Result: ...

    @abstractmethod
    async def validate_on_delete_by_id(self, entity_id: uuid.UUID) -> Result: ...

    async def validate_on_create_in_batch(
        self, entity: ModelT, earlier: list[ModelT]
    ) -> Result:
        """Rules an entity must satisfy against the entities queued before it."""
        return Result()

    # -- reads -----------------------------------------------------------------

    async def get_all(self) -> list[ModelT]:
        return await self.repository.get_all()

    async def get_by_id(self, entity_id: uuid.UUID) -> ModelT | None:
        return await self.repository.get_by_id(entity_id)

    async def advance_query[R](
        self, operation: Callable[[RepositoryConstructor], Awaitable[R]]
    ) -> R:
        """Run an arbitrary operation against the repository constructor.

        Escape hatch for queries the generic CRUD surface cannot express.
        The operation owns its own error handling and commit.
        """
        return await operation(self.repositories)

    # -- writes ----------------------------------------------------------------

    async def create(self, entity: ModelT) -> Result:
        try:
            validation = await self._validate_create(entity)
            if validation.failed:
                return Result.fail(
                    f"{self.model_name} was not created: validation failed"
                ).with_cause(validation)

            await self.repository.insert(entity)
            await self.repository.commit_changes()
        except Exception as e:
            logger.exception("service.create.failed", model=self.model_name)
            return Result.fail(f"Error inserting {self.model_name} in the database", e)

        logger.info("service.created", model=self.model_name, entity_id=str(entity.id))
        return Result.ok(f"{self.model_name} inserted successfully")

    async def create_range(self, entities: Iterable[ModelT]) -> Result:
        """Validate every entity, then insert all of them with a single commit.

        If any entity fails validation nothing is inserted; the returned
        Result carries the messages of every failing entity.
        """
        entities = list(entities)
        try:
            failures = []
            for index, entity in enumerate(entities):
                validation = await self._validate_create(entity)
                if validation.success:
                    validation = await self.validate_on_create_in_batch(
                        entity, entities[:index]
                    )
                if validation.failed:
                    failures.append(validation)
            if failures:
                return Result.fail(
                    f"{len(failures)} of {len(entities)} {self.model_name} "
                    "entities failed validation; nothing was inserted"
                ).with_cause(Result.combine(failures))

            await self.repository.insert_range(entities)
            await self.repository.commit_changes()
        except Exception as e:
            logger.exception("service.create_range.failed", model=self.model_name)
            return Result.fail(
                f"Error inserting the list of {self.model_name} entities", e
            )

        logger.info("service.created_range", model=self.model_name, count=len(entities))
        return Result.ok(
            f"{len(entities)} {self.model_name} entities inserted successfully"
        )

    async def update(self, entity: ModelT) -> Result:
        try:
            validation = await self._validate_update(entity)
            if validation.failed:
                return Result.fail(
                    f"{self.model_name} was not updated: validation failed"
                ).with_cause(validation)

            await self.repository.update(entity)
            await self.repository.commit_changes()
        except Exception as e:
            logger.exception("service.update.failed", model=self.model_name)
            return Result.fail(f"Error updating {self.model_name} in the database", e)

        logger.info("service.updated", model=self.model_name, entity_id=str(entity.id))
        return Result.ok(f"{self.model_name} updated successfully")

    async def update_range(self, entities: Iterable[ModelT]) -> Result:
        """Update every entity with a single commit, or none if one fails validation."""
        entities = list(entities)
        try:
            for entity in entities:
                validation = await self._validate_update(entity)
                if validation.failed:
                    return Result.fail(
                        f"The list of {self.model_name} entities was not updated"
                    ).with_cause(validation)

            await self.repository.update_range(entities)
            await self.repository.commit_changes()
        except Exception as e:
            logger.exception("service.update_range.failed", model=self.model_name)
            return Result.fail(
                f"Error updating the list of {self.model_name} entities", e
            )

        logger.info("service.updated_range", model=self.model_name, count=len(entities))
        return Result.ok(
            f"{len(entities)} {self.model_name} entities updated successfully"
        )

    async def delete(self, entity: ModelT) -> Result:
        try:
            validation = await self.validate_on_delete(entity)
            if validation.failed:
                return Result.fail(
                    f"{self.model_name} was not deleted: validation failed"
                ).with_cause(validation)

            await self.repository.delete(entity)
            await self.repository.commit_changes()
        except Exception as e:
            logger.exception("service.delete.failed", model=self.model_name)
            return Result.fail(f"Error deleting {self.model_name} from the database", e)

        logger.info("service.deleted", model=self.model_name, entity_id=str(entity.id))
        return Result.ok(f"{self.model_name} deleted successfully")

    async def delete_by_id(self, entity_id: uuid.UUID) -> Result:
        try:
            validation = await self.validate_on_delete_by_id(entity_id)
            if validation.failed:
                return Result.fail(
                    f"{self.model_name} was not deleted: validation failed"
                ).with_cause(validation)

            await self.repository.delete_by_id(entity_id)
            await self.repository.commit_changes()
        except Exception as e:
            logger.exception("service.delete.failed", model=self.model_name)
            return Result.fail(f"Error deleting {self.model_name} from the database", e)

        logger.info("service.deleted", model=self.model_name, entity_id=str(entity_id))
        return Result.ok(f"{self.model_name} deleted successfully")

    async def delete_range(self, entities: Iterable[ModelT]) -> Result:
        """Delete every entity with a single commit, or none if one fails validation."""
        entities = list(entities)
        try:
            for entity in entities:
                validation = await self.validate_on_delete(entity)
                if validation.failed:
                    return Result.fail(
                        f"The list of {self.model_name} entities was not deleted"
                    ).with_cause(validation)

            await self.repository.delete_range(entities)
            await self.repository.commit_changes()
        except Exception as e:
            logger.exception("service.delete_range.failed", model=self.model_name)
            return Result.fail(
                f"Error deleting the list of {self.model_name} entities", e
            )

        logger.info("service.deleted_range", model=self.model_name, count=len(entities))
        return Result.ok(
            f"{len(entities)} {self.model_name} entities deleted successfully"
        )

    # -- helpers ---------------------------------------------------------------

    async def _validate_create(self, entity: ModelT) -> Result:
        if entity.id is not None:
            return Result.fail(
                f"{self.model_name} already has an identifier; use update instead"
            )
        return await self.validate_on_create(entity)

    async def _validate_update(self, entity: ModelT) -> Result:
        if entity.id is None:
            return Result.fail(
                f"{self.model_name} has no identifier; use create instead"
            )
        return await self.validate_on_update(entity)

"""Type-keyed repository lookup.

Repositories are registered against the model they persist:

    @register_repository(Category)
    class CategoryRepository(BaseRepository[Category]):
        def __init__(self, db: AsyncSession) -> None:
            super().__init__(db, Category)

Any entity without a registration gets a plain BaseRepository.
"""

from collections.abc import Callable
from typing import Annotated, Any

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import DbSession
from models import Entity
from repositories.base_repository import BaseRepository

RepositoryFactory = Callable[[AsyncSession], BaseRepository[Any]]

_REPOSITORY_REGISTRY: dict[type[Entity], RepositoryFactory] = {}


def register_repository[F: RepositoryFactory](model: type[Entity]) -> Callable[[F], F]:
    """Class decorator binding a repository factory to ``model``."""

    def decorator(factory: F) -> F:
        _REPOSITORY_REGISTRY[model] = factory
        return factory

    return decorator


def registered_repository(model: type[Entity]) -> RepositoryFactory | None:
    return _REPOSITORY_REGISTRY.get(model)


class RepositoryConstructor:
    """Resolves the repository bound to a model type for one session.

    One instance per request; repositories are cached per model so every
    caller in the request shares the same session and staged changes.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db
        self._repositories: dict[type[Entity], BaseRepository[Any]] = {}

    def get_repository[ModelT: Entity](
        self, model: type[ModelT]
    ) -> BaseRepository[ModelT]:
        repository = self._repositories.get(model)
        if repository is None:
            factory = _REPOSITORY_REGISTRY.get(model)
            if factory is not None:
                repository = factory(self.db)
            elif issubclass(model, Entity):
                repository = BaseRepository(self.db, model)
            else:
                raise TypeError(f"{model!r} is not a persisted entity type")
            self._repositories[model] = repository
        return repository


def get_repository_constructor(db: DbSession) -> RepositoryConstructor:
    return RepositoryConstructor(db)


Repositories = Annotated[RepositoryConstructor, Depends(get_repository_constructor)]

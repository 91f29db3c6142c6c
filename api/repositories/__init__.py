"""Repository layer for database operations.

Repositories encapsulate all database queries, keeping services free of SQL.
BaseRepository gives every entity the same CRUD surface; RepositoryConstructor
resolves the repository registered for a model type within one session.
"""

from repositories.base_repository import BaseRepository, EntityNotFoundError
from repositories.category_repository import CategoryRepository
from repositories.constructor import (
    Repositories,
    RepositoryConstructor,
    get_repository_constructor,
    register_repository,
)
from repositories.utils import log_slow_query

__all__ = [
    "BaseRepository",
    "CategoryRepository",
    "EntityNotFoundError",
    "Repositories",
    "RepositoryConstructor",
    "get_repository_constructor",
    "log_slow_query",
    "register_repository",
]

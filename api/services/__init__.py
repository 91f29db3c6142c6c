"""Service layer for business logic.

Services encapsulate validation rules and orchestrate repositories, keeping
routes thin and focused on HTTP handling.

Layer hierarchy:
    Routes (HTTP) -> Services (Business Logic) -> Repositories (Database)

Services should:
- Contain all business rules and validation
- Orchestrate calls to repositories through the RepositoryConstructor
- Return Result (a dataclass) for every mutating operation

Services should NOT:
- Directly execute SQL queries (use repositories)
- Know about HTTP request/response details
- Let exceptions escape a mutating operation (return a failed Result)
"""

from services.base_service import BaseService
from services.category_service import CategoryService
from services.constructor import (
    ServiceConstructor,
    Services,
    get_service_constructor,
    register_service,
)
from services.result import Result

__all__ = [
    "BaseService",
    "CategoryService",
    "Result",
    "ServiceConstructor",
    "Services",
    "get_service_constructor",
    "register_service",
]

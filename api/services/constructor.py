"""Type-keyed service lookup.

Services are registered against the model they manage:

    @register_service(Category)
    class CategoryService(BaseService[Category]):
        ...

ServiceConstructor.get_service(Category) then returns a CategoryService bound
to the request's RepositoryConstructor.
"""

from collections.abc import Callable
from typing import Annotated, Any

from fastapi import Depends

from models import Entity
from repositories.constructor import Repositories, RepositoryConstructor
from services.base_service import BaseService

ServiceFactory = Callable[[RepositoryConstructor], BaseService[Any]]

_SERVICE_REGISTRY: dict[type[Entity], ServiceFactory] = {}


def register_service[F: ServiceFactory](model: type[Entity]) -> Callable[[F], F]:
    """Class decorator binding a service factory to ``model``."""

    def decorator(factory: F) -> F:
        _SERVICE_REGISTRY[model] = factory
        return factory

    return decorator


class ServiceConstructor:
    """Resolves the service bound to a model type for one request."""

    def __init__(self, repositories: RepositoryConstructor) -> None:
        self.repositories = repositories
        self._services: dict[type[Entity], BaseService[Any]] = {}

    def get_service[S: BaseService[Any]](
        self,
        model: type[Entity],
        expected: type[S] | None = None,
    ) -> S:
        """Return the service for ``model``.

        Raises:
            LookupError: No service is registered for ``model``.
            TypeError: The registered service is not an ``expected`` instance.
        """
        service = self._services.get(model)
        if service is None:
            factory = _SERVICE_REGISTRY.get(model)
            if factory is None:
                raise LookupError(f"No service registered for {model.__name__}")
            service = factory(self.repositories)
            self._services[model] = service

        if expected is not None and not isinstance(service, expected):
            raise TypeError(
                f"Service for {model.__name__} is {type(service).__name__}, "
                f"not {expected.__name__}"
            )
        return service  # type: ignore[return-value]


def get_service_constructor(repositories: Repositories) -> ServiceConstructor:
    return ServiceConstructor(repositories)


Services = Annotated[ServiceConstructor, Depends(get_service_constructor)]

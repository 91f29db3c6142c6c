"""Unit tests for the service locator and BaseService defaults."""

from unittest.mock import MagicMock

import pytest

from models import Category
from services.base_service import BaseService
from services.category_service import CategoryService
from services.constructor import (
    ServiceConstructor,
    get_service_constructor,
    register_service,
)
from services.result import Result


class _Orphan:
    """Model type without a registered service."""


class _NotACategoryService(BaseService[Category]):
    async def validate_on_create(self, entity):
        return Result()

    async def validate_on_update(self, entity):
        return Result()

    async def validate_on_delete(self, entity):
        return Result()

    async def validate_on_delete_by_id(self, entity_id):
        return Result()


@pytest.mark.unit
class TestServiceConstructor:
    def test_returns_registered_service(self):
        constructor = ServiceConstructor(MagicMock())

        service = constructor.get_service(Category)

        assert isinstance(service, CategoryService)
        assert service.repositories is constructor.repositories

    def test_expected_type_is_checked(self):
        constructor = ServiceConstructor(MagicMock())

        assert isinstance(
            constructor.get_service(Category, CategoryService), CategoryService
        )
        with pytest.raises(TypeError, match="not _NotACategoryService"):
            constructor.get_service(Category, _NotACategoryService)

    def test_caches_one_service_per_model(self):
        constructor = ServiceConstructor(MagicMock())

        assert constructor.get_service(Category) is constructor.get_service(Category)

    def test_unregistered_model_raises_lookup_error(self):
        constructor = ServiceConstructor(MagicMock())

        with pytest.raises(LookupError, match="No service registered for _Orphan"):
            constructor.get_service(_Orphan)  # type: ignore[arg-type]

    def test_register_service_binds_factory(self):
        constructor = ServiceConstructor(MagicMock())
        factory = MagicMock(return_value=MagicMock(spec=BaseService))

        register_service(_Orphan)(factory)  # type: ignore[arg-type]
        try:
            service = constructor.get_service(_Orphan)  # type: ignore[arg-type]
        finally:
            from services import constructor as constructor_module

            constructor_module._SERVICE_REGISTRY.pop(_Orphan, None)

        factory.assert_called_once_with(constructor.repositories)
        assert service is factory.return_value

    def test_dependency_wraps_repositories(self):
        repositories = MagicMock()
        assert get_service_constructor(repositories).repositories is repositories


@pytest.mark.unit
class TestBaseService:
    def test_cannot_instantiate_without_validation_rules(self):
        with pytest.raises(TypeError):
            BaseService(MagicMock(), Category)  # type: ignore[abstract]

    def test_repository_is_resolved_by_model(self):
        repositories = MagicMock()
        service = _NotACategoryService(repositories, Category)

        assert service.repository is repositories.get_repository.return_value
        repositories.get_repository.assert_called_once_with(Category)
        assert service.model_name == "Category"

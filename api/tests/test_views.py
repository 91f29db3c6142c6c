"""Unit tests for views and the ResultResponse schema."""

import uuid

import pytest
from pydantic import ValidationError

from models import Category
from schemas import ResultResponse
from services.result import Result
from tests.factories import CategoryFactory
from views import BaseView, CategoryView


@pytest.mark.unit
class TestCategoryView:
    def test_to_model_without_id_leaves_id_unset(self):
        view = CategoryView(name="Cloud", short_name="cloud", description="d")

        model = view.to_model()

        assert isinstance(model, Category)
        assert model.id is None
        assert model.name == "Cloud"
        assert model.description == "d"

    def test_to_model_copies_id(self):
        category_id = uuid.uuid4()
        view = CategoryView(id=category_id, name="Cloud", short_name="cloud")

        assert view.to_model().id == category_id

    def test_to_model_strips_names(self):
        model = CategoryView(name="  Cloud ", short_name=" cl ").to_model()
        assert (model.name, model.short_name) == ("Cloud", "cl")

    def test_from_model_reads_attributes(self):
        category = CategoryFactory.build(id=uuid.uuid4())

        view = CategoryView.from_model(category)

        assert view.id == category.id
        assert view.name == category.name
        assert view.short_name == category.short_name

    def test_rejects_unknown_fields(self):
        with pytest.raises(ValidationError):
            CategoryView.model_validate(
                {"name": "Cloud", "short_name": "cl", "colour": "red"}
            )

    def test_rejects_empty_name(self):
        with pytest.raises(ValidationError):
            CategoryView(name="", short_name="cl")

    @pytest.mark.parametrize(
        ("name", "short_name"), [("   ", "cl"), ("Cloud", "  "), ("\t", "\n")]
    )
    def test_rejects_blank_names(self, name, short_name):
        with pytest.raises(ValidationError):
            CategoryView(name=name, short_name=short_name)

    def test_length_limit_applies_after_stripping(self):
        view = CategoryView(name="Cloud", short_name=" " + "x" * 50 + " ")
        assert view.short_name == "x" * 50

    def test_rejects_overlong_short_name(self):
        with pytest.raises(ValidationError):
            CategoryView(name="Cloud", short_name="x" * 51)

    def test_base_view_is_abstract(self):
        with pytest.raises(TypeError):
            BaseView()  # type: ignore[abstract]


@pytest.mark.unit
class TestResultResponse:
    def test_success(self):
        response = ResultResponse.from_result(Result.ok("done"))

        assert response.model_dump() == {
            "success": True,
            "messages": ["done"],
            "error_type": None,
            "error_detail": None,
            "cause": None,
        }

    def test_exception_is_rendered_as_strings(self):
        response = ResultResponse.from_result(
            Result.fail("Error inserting Category", RuntimeError("db down"))
        )

        assert response.success is False
        assert response.error_type == "RuntimeError"
        assert response.error_detail == "db down"

    def test_cause_is_nested(self):
        result = Result.fail("outer").with_cause(Result.fail("inner"))

        response = ResultResponse.from_result(result)

        assert response.cause is not None
        assert response.cause.messages == ["inner"]
        assert response.cause.cause is None

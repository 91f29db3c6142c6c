"""Category CRUD endpoints under /Category."""

from models import Category
from routes.base_controller import BaseController
from services.category_service import CategoryService
from views import CategoryView


class CategoryController(BaseController[Category, CategoryView]):
    def __init__(self) -> None:
        super().__init__(Category, CategoryView, CategoryService)


controller = CategoryController()
router = controller.router

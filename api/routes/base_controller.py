"""Generic CRUD controller.

A BaseController wires one entity family (model, view, service) to an
APIRouter with the same five endpoints:

    GET    /{Entity}/All          -> list of views
    GET    /{Entity}/Id?id=       -> one view
    POST   /{Entity}/save         -> create from a view without id
    PUT    /{Entity}/update       -> update from a view with id
    DELETE /{Entity}/remove?ID=   -> delete by id

Bodies are taken as raw JSON and parsed into the view here, so a payload of
the wrong shape yields a failed Result instead of a framework 422.
"""

import uuid
from typing import Annotated, Any

from fastapi import APIRouter, Body, HTTPException, Query
from pydantic import ValidationError

from core.logger import get_logger
from models import Entity
from schemas import ResultResponse
from services.base_service import BaseService
from services.constructor import Services
from services.result import Result
from views import BaseView

logger = get_logger(__name__)

JsonBody = Annotated[Any, Body()]


class BaseController[ModelT: Entity, ViewT: BaseView]:
    """Exposes a service's CRUD operations over HTTP.

    Subclasses may override any endpoint method; the router is built from
    the bound methods when the controller is instantiated.
    """

    def __init__(
        self,
        model: type[ModelT],
        view: type[ViewT],
        service: type[BaseService[ModelT]],
        *,
        prefix: str | None = None,
    ) -> None:
        self.model = model
        self.view = view
        self.service = service
        name = prefix or model.__name__
        self.router = APIRouter(prefix=f"/{name}", tags=[name.lower()])
        self._register_routes(name)

    def _register_routes(self, name: str) -> None:
        self.router.add_api_route(
            "/All",
            self.get_all,
            methods=["GET"],
            response_model=list[self.view],
            name=f"GetAll{name}",
        )
        self.router.add_api_route(
            "/Id",
            self.get_by_id,
            methods=["GET"],
            response_model=self.view,
            name=f"Get{name}ByID",
            responses={404: {"description": f"{name} not found"}},
        )
        self.router.add_api_route(
            "/save",
            self.post_save,
            methods=["POST"],
            response_model=ResultResponse,
            name=f"PostSave{name}",
        )
        self.router.add_api_route(
            "/update",
            self.put_update,
            methods=["PUT"],
            response_model=ResultResponse,
            name=f"PutUpdate{name}",
        )
        self.router.add_api_route(
            "/remove",
            self.delete_remove,
            methods=["DELETE"],
            response_model=ResultResponse,
            name=f"Delete{name}",
        )

    def get_service(self, services: Services) -> BaseService[ModelT]:
        return services.get_service(self.model, self.service)

    async def get_all(self, services: Services) -> list[ViewT]:
        """Get every entity of this type."""
        entities = await self.get_service(services).get_all()
        return [self.view.from_model(entity) for entity in entities]

    async def get_by_id(
        self,
        services: Services,
        entity_id: Annotated[uuid.UUID, Query(alias="id")],
    ) -> ViewT:
        """Get one entity by its identifier."""
        entity = await self.get_service(services).get_by_id(entity_id)
        if entity is None:
            raise HTTPException(
                status_code=404, detail=f"{self.model.__name__} not found"
            )
        return self.view.from_model(entity)

    async def post_save(self, services: Services, payload: JsonBody) -> ResultResponse:
        """Create an entity from a view that has no identifier yet."""
        view = self.parse_view(payload)
        if view is None:
            return ResultResponse.from_result(self.wrong_view_result())
        if view.id is not None:
            result = self.wrong_view_result().with_error(
                f"A new {self.model.__name__} must not carry an id; use update instead"
            )
            return ResultResponse.from_result(result)

        result = await self.get_service(services).create(view.to_model())
        return ResultResponse.from_result(result)

    async def put_update(self, services: Services, payload: JsonBody) -> ResultResponse:
        """Update an existing entity from a view that carries its identifier."""
        view = self.parse_view(payload)
        if view is None:
            return ResultResponse.from_result(self.wrong_view_result())
        if view.id is None:
            result = self.wrong_view_result().with_error(
                f"An id is required to update a {self.model.__name__}"
            )
            return ResultResponse.from_result(result)

        result = await self.get_service(services).update(view.to_model())
        return ResultResponse.from_result(result)

    async def delete_remove(
        self,
        services: Services,
        entity_id: Annotated[uuid.UUID, Query(alias="ID")],
    ) -> ResultResponse:
        """Delete an entity by its identifier."""
        result = await self.get_service(services).delete_by_id(entity_id)
        return ResultResponse.from_result(result)

    def parse_view(self, payload: Any) -> ViewT | None:
        try:
            return self.view.model_validate(payload)
        except ValidationError as e:
            logger.info(
                "controller.view.rejected",
                view=self.view.__name__,
                error_count=e.error_count(),
            )
            return None

    def wrong_view_result(self) -> Result:
        return Result.fail(f"The received view is not of type '{self.view.__name__}'")

"""Views: transport-facing projections of models.

A view carries the identifier plus the fields a client may see or send, and
converts to and from its model. Subclasses implement parse_model() to build
a fresh model from their own fields; to_model() copies the identifier across.
"""

import uuid
from abc import abstractmethod
from datetime import datetime
from typing import Annotated, Self

from pydantic import BaseModel, ConfigDict, StringConstraints

from models import Category, Entity


class BaseView(BaseModel):
    """Base projection with the entity identifier.

    ``id`` is None for entities that have not been persisted yet.
    """

    model_config = ConfigDict(from_attributes=True, extra="forbid")

    id: uuid.UUID | None = None

    @abstractmethod
    def parse_model(self) -> Entity:
        """Build a new model from the view's own fields (without the id)."""

    def to_model(self) -> Entity:
        model = self.parse_model()
        if self.id is not None:
            model.id = self.id
        return model

    @classmethod
    def from_model(cls, model: Entity) -> Self:
        return cls.model_validate(model)


class CategoryView(BaseView):
    """Category as exchanged over HTTP. Timestamps are output only."""

    name: Annotated[
        str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)
    ]
    short_name: Annotated[
        str, StringConstraints(strip_whitespace=True, min_length=1, max_length=50)
    ]
    description: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def parse_model(self) -> Category:
        return Category(
            name=self.name,
            short_name=self.short_name,
            description=self.description,
        )

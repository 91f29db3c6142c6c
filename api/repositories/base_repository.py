"""Generic repository with reusable CRUD operations for one entity type."""

import uuid
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from sqlalchemy import ColumnElement, Select, func, select, text
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import (
    InstrumentedAttribute,
    make_transient_to_detached,
    selectinload,
)
from sqlalchemy.orm.attributes import flag_modified

from core.logger import get_logger
from models import Entity
from repositories.utils import loaded_column_values, log_slow_query

logger = get_logger(__name__)

# Relationship names (or a comma-separated string of them) or attributes
Include = str | Iterable[str | InstrumentedAttribute[Any]]


class EntityNotFoundError(LookupError):
    """Raised when a delete targets an entity that does not exist."""

    def __init__(self, model: type[Entity], key: object):
        self.model = model
        self.key = key
        super().__init__(f"{model.__name__} matching {key!r} does not exist")


class BaseRepository[ModelT: Entity]:
    """Thin data-access layer over one AsyncSession for one model.

    Mutating methods only stage changes in the session; nothing is durable
    until commit_changes() is called. Subclasses add entity-specific queries.
    """

    def __init__(self, db: AsyncSession, model: type[ModelT]) -> None:
        self.db = db
        self.model = model

    @property
    def model_name(self) -> str:
        return self.model.__name__

    # -- reads ---------------------------------------------------------------

    async def get_by_id(self, entity_id: uuid.UUID | None) -> ModelT | None:
        """Get an entity by primary key. Checks the identity map first."""
        if entity_id is None:
            return None
        return await self.db.get(self.model, entity_id)

    def query(
        self,
        *criteria: ColumnElement[bool],
        include: Include = (),
    ) -> Select[tuple[ModelT]]:
        """Build a deferred SELECT, optionally eager-loading relationships.

        The statement is not executed; callers may keep composing it
        (order_by, limit, ...) before passing it to get() or the session.
        """
        stmt = select(self.model)
        for attribute in self._resolve_includes(include):
            stmt = stmt.options(selectinload(attribute))
        if criteria:
            stmt = stmt.where(*criteria)
        return stmt

    async def get(
        self,
        *criteria: ColumnElement[bool],
        include: Include = (),
    ) -> list[ModelT]:
        result = await self.db.execute(self.query(*criteria, include=include))
        return list(result.scalars().all())

    async def first(self, *criteria: ColumnElement[bool]) -> ModelT | None:
        result = await self.db.execute(self.query(*criteria).limit(1))
        return result.scalars().first()

    async def exists(self, *criteria: ColumnElement[bool]) -> bool:
        return await self.first(*criteria) is not None

    async def count(self, *criteria: ColumnElement[bool]) -> int:
        stmt = select(func.count()).select_from(self.model)
        if criteria:
            stmt = stmt.where(*criteria)
        result = await self.db.execute(stmt)
        return result.scalar_one()

    async def get_all(self) -> list[ModelT]:
        result = await self.db.execute(select(self.model))
        return list(result.scalars().all())

    # -- writes --------------------------------------------------------------

    async def insert(self, entity: ModelT) -> ModelT:
        self.db.add(entity)
        return entity

    async def insert_range(self, entities: Iterable[ModelT]) -> list[ModelT]:
        entities = list(entities)
        self.db.add_all(entities)
        return entities

    async def update(self, entity: ModelT) -> ModelT:
        """Stage an update for ``entity`` and return the tracked instance.

        - Already tracked: returned as is, the session picks up its changes.
        - A row with the same id is loaded: the values set on ``entity`` are
          copied onto the tracked instance.
        - Otherwise: ``entity`` is attached as if it had been loaded and its
          set columns are marked modified. An UPDATE that matches no row
          fails at commit time.
        """
        state = sa_inspect(entity)
        if state.persistent or state.pending:
            return entity
        if state.detached:
            return await self.db.merge(entity)
        if entity.id is None:
            raise ValueError(f"Cannot update a {self.model_name} without an id")

        values = loaded_column_values(entity)
        values.pop("id", None)

        tracked = await self.get_by_id(entity.id)
        if tracked is not None:
            for key, value in values.items():
                setattr(tracked, key, value)
            return tracked

        make_transient_to_detached(entity)
        self.db.add(entity)
        for key in values:
            flag_modified(entity, key)
        return entity

    async def update_range(self, entities: Iterable[ModelT]) -> list[ModelT]:
        return [await self.update(entity) for entity in entities]

    async def update_property(
        self,
        entity: ModelT,
        *attributes: str | InstrumentedAttribute[Any],
    ) -> ModelT:
        """Attach ``entity`` and mark only the given attributes as modified.

        The attributes must have been set on ``entity``.
        """
        state = sa_inspect(entity)
        if state.transient:
            make_transient_to_detached(entity)
        if not (state.persistent or state.pending):
            self.db.add(entity)
        for attribute in attributes:
            key = attribute if isinstance(attribute, str) else attribute.key
            flag_modified(entity, key)
        return entity

    async def delete(self, entity: ModelT) -> None:
        """Stage a delete. Entities not tracked by this session are looked up by id."""
        state = sa_inspect(entity)
        if not state.persistent:
            tracked = await self.get_by_id(entity.id)
            if tracked is None:
                raise EntityNotFoundError(self.model, entity.id)
            entity = tracked
        await self.db.delete(entity)

    async def delete_by_id(self, entity_id: uuid.UUID) -> None:
        entity = await self.get_by_id(entity_id)
        if entity is None:
            raise EntityNotFoundError(self.model, entity_id)
        await self.db.delete(entity)

    async def delete_where(self, *criteria: ColumnElement[bool]) -> None:
        """Delete the first entity matching ``criteria``."""
        entity = await self.first(*criteria)
        if entity is None:
            raise EntityNotFoundError(self.model, [str(c) for c in criteria])
        await self.db.delete(entity)

    async def delete_range(self, entities: Iterable[ModelT]) -> None:
        for entity in entities:
            await self.delete(entity)

    @log_slow_query("commit_changes")
    async def commit_changes(self) -> int:
        """Flush and commit every staged change in one transaction.

        Returns the number of staged objects. On failure the session is
        rolled back, so nothing from the batch persists, and the error is
        re-raised.
        """
        staged = len(self.db.new) + len(self.db.dirty) + len(self.db.deleted)
        try:
            await self.db.commit()
        except Exception:
            logger.warning(
                "repository.commit.failed", model=self.model_name, staged=staged
            )
            try:
                await self.db.rollback()
            except Exception as rollback_err:
                logger.warning("db.rollback.failed", error=str(rollback_err))
            raise
        return staged

    @log_slow_query("run_query")
    async def run_query(
        self,
        sql: str,
        params: Mapping[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        """Execute raw SQL on the session's connection, bypassing ORM mapping.

        Returns rows as plain dicts (empty list for statements without rows).
        Use bound ``:name`` parameters, never string formatting.
        """
        conn = await self.db.connection()
        result = await conn.execute(text(sql), dict(params or {}))
        if not result.returns_rows:
            return []
        return [dict(row) for row in result.mappings().all()]

    def _resolve_includes(
        self, include: Include
    ) -> Sequence[InstrumentedAttribute[Any]]:
        if isinstance(include, str):
            include = [name for name in include.split(",") if name.strip()]

        relationships = sa_inspect(self.model).relationships
        resolved: list[InstrumentedAttribute[Any]] = []
        for item in include:
            if isinstance(item, str):
                name = item.strip()
                if name not in relationships:
                    raise ValueError(f"{self.model_name} has no relationship {name!r}")
                item = getattr(self.model, name)
            resolved.append(item)
        return resolved

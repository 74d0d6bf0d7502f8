from contextlib import asynccontextmanager
from typing import Any, Mapping

import structlog
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from storefront.shared.config import Base, Settings, build_engine, build_session_factory, load_settings

from .base import Storage
from .errors import ForeignKeyError, IntegrityViolationError, RecordNotFoundError, UniqueConstraintError
from .filters import parse_order_by, parse_where, to_clause
from .registry import NESTED, PARENTS, EntityKind, model_for, split_fields

logger = structlog.get_logger(__name__)


def translate_integrity_error(exc: IntegrityError) -> IntegrityViolationError:
    """Maps driver messages (PostgreSQL and SQLite) onto the storage error types."""
    message = str(exc.orig) if exc.orig is not None else str(exc)
    lowered = message.lower()
    if "unique" in lowered or "duplicate key" in lowered:
        return UniqueConstraintError(message)
    if "foreign key" in lowered:
        return ForeignKeyError(message)
    return IntegrityViolationError(message)


class SqlAlchemyStorage(Storage):
    """Storage over an async SQLAlchemy engine; one session per call."""

    def __init__(self, engine: AsyncEngine):
        self._engine = engine
        self._session_factory = build_session_factory(engine)

    @classmethod
    def from_url(cls, database_url: str, echo: bool = False) -> "SqlAlchemyStorage":
        return cls(build_engine(database_url, echo=echo))

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    async def create_schema(self):
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def _commit(self, session: AsyncSession):
        try:
            await session.commit()
        except IntegrityError as e:
            await session.rollback()
            raise translate_integrity_error(e) from e

    async def _refresh(self, session: AsyncSession, kind: EntityKind, entity):
        await session.refresh(entity)
        if kind in PARENTS:
            # A changed foreign key must bring the matching parent with it
            await session.refresh(entity, [PARENTS[kind][0]])

    async def create(self, kind: EntityKind, fields: Mapping[str, Any]):
        kind = EntityKind(kind)
        scalars, children = split_fields(kind, fields)
        entity = model_for(kind)(**scalars)

        if kind in NESTED:
            relation, child_kind, _ = NESTED[kind]
            child_model = model_for(child_kind)
            setattr(entity, relation, [
                child_model(**{"position": position, **child})
                for position, child in enumerate(children)
            ])

        async with self._session_factory() as session:
            session.add(entity)
            await self._commit(session)
            await self._refresh(session, kind, entity)
            logger.debug("entity_created", kind=kind.value, id=entity.id)
            return entity

    async def find_many(self, kind, where=None, order_by=None) -> list:
        kind = EntityKind(kind)
        model = model_for(kind)

        stmt = select(model)
        for cond in parse_where(kind, where):
            stmt = stmt.where(to_clause(model, cond))

        ordering = parse_order_by(kind, order_by)
        if ordering:
            field, descending = ordering
            column = getattr(model, field)
            stmt = stmt.order_by(column.desc() if descending else column.asc())

        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def find_unique(self, kind, record_id):
        async with self._session_factory() as session:
            return await session.get(model_for(kind), record_id)

    async def update(self, kind, record_id, fields):
        kind = EntityKind(kind)
        scalars, _ = split_fields(kind, fields, allow_nested=False)

        async with self._session_factory() as session:
            entity = await session.get(model_for(kind), record_id)
            if entity is None:
                raise RecordNotFoundError(kind, record_id)

            for key, value in scalars.items():
                setattr(entity, key, value)

            await self._commit(session)
            await self._refresh(session, kind, entity)
            return entity

    async def delete(self, kind, record_id):
        kind = EntityKind(kind)
        async with self._session_factory() as session:
            entity = await session.get(model_for(kind), record_id)
            if entity is None:
                raise RecordNotFoundError(kind, record_id)

            await session.delete(entity)
            await self._commit(session)

    async def delete_many(self, kind) -> int:
        kind = EntityKind(kind)
        async with self._session_factory() as session:
            try:
                # Bulk deletes hit the FK check at execute time, before commit
                result = await session.execute(delete(model_for(kind)))
            except IntegrityError as e:
                await session.rollback()
                raise translate_integrity_error(e) from e
            await self._commit(session)
            logger.debug("collection_cleared", kind=kind.value, count=result.rowcount)
            return result.rowcount

    async def disconnect(self):
        await self._engine.dispose()


@asynccontextmanager
async def open_storage(settings: Settings | None = None):
    """Yields a SqlAlchemyStorage for the configured database and always disposes it."""
    settings = settings or load_settings()
    storage = SqlAlchemyStorage.from_url(settings.database_url, echo=settings.sql_echo)
    try:
        yield storage
    finally:
        await storage.disconnect()

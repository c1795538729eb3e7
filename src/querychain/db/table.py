# src/querychain/db/table.py
"""Table handles: the narrow operation interface models talk to."""

from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Type

from rich.markup import escape
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import async_sessionmaker
from sqlalchemy.orm import sessionmaker

from querychain.core.logging import LogLevel, color_palette, log
from querychain.db.statements import (
    build_count,
    build_delete,
    build_select,
    build_update,
    creation_values,
    table_name,
    unknown_options,
)


class _BaseHandle:
    """Shared bookkeeping for sync and async table handles."""

    def __init__(self, model: Type[Any], session_factory: Any):
        self.model = model
        self.session_factory = session_factory
        self.name = table_name(model)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"

    def _trace(self, operation: str, detail: Any = None) -> None:
        if not log.is_enabled(LogLevel.DEBUG):
            return
        message = f"{color_palette['operation'](operation)} {color_palette['table'](self.name)}"
        if detail is not None:
            message += f" {escape(repr(detail))}"
        log.debug(message)
        if isinstance(detail, Mapping):
            extra = unknown_options(detail)
            if extra:
                log.debug(f"Ignoring unsupported options: {escape(', '.join(extra))}")

    @staticmethod
    def _single(options: Mapping[str, Any]) -> Dict[str, Any]:
        """Options for a one-row read; an explicit limit is kept."""
        if options.get("limit") is None:
            return {**options, "limit": 1}
        return dict(options)

    @staticmethod
    def _reads_nothing(options: Mapping[str, Any]) -> bool:
        return options.get("limit") == 0


class TableHandle(_BaseHandle):
    """
    Sequelize-style operations over one mapped class and a session factory.

    Every call runs in its own session. Returned instances are detached from
    it with their column values loaded.
    """

    session_factory: sessionmaker

    def create(self, data: Mapping[str, Any]) -> Any:
        self._trace("create", dict(data))
        with self.session_factory.begin() as session:
            item = self.model(**data)
            session.add(item)
            session.flush()
            session.refresh(item)
            session.expunge(item)
        return item

    def bulk_create(self, records: Sequence[Mapping[str, Any]]) -> List[Any]:
        self._trace("bulk_create", f"{len(records)} records")
        with self.session_factory.begin() as session:
            items = [self.model(**record) for record in records]
            session.add_all(items)
            session.flush()
            for item in items:
                session.refresh(item)
            session.expunge_all()
        return items

    def find_all(self, options: Mapping[str, Any]) -> List[Any]:
        self._trace("find_all", options)
        with self.session_factory() as session:
            return list(session.scalars(build_select(self.model, options)).all())

    def find_one(self, options: Mapping[str, Any]) -> Optional[Any]:
        self._trace("find_one", options)
        if self._reads_nothing(options):
            return None
        with self.session_factory() as session:
            return session.scalars(build_select(self.model, self._single(options))).first()

    def find_by_pk(self, ident: Any) -> Optional[Any]:
        self._trace("find_by_pk", ident)
        with self.session_factory() as session:
            return session.get(self.model, ident)

    def find_or_create(self, options: Mapping[str, Any]) -> Tuple[Any, bool]:
        """Return ``(instance, created)`` for the row matching ``options['where']``."""
        lookup = {"where": options.get("where") or {}}
        existing = self.find_one(lookup)
        if existing is not None:
            return existing, False
        try:
            return self.create(creation_values(options)), True
        except IntegrityError:
            # Another writer inserted the same row in between.
            existing = self.find_one(lookup)
            if existing is None:
                raise
            return existing, False

    def count(self, options: Mapping[str, Any]) -> int:
        self._trace("count", options)
        with self.session_factory() as session:
            return int(session.scalar(build_count(self.model, options)) or 0)

    def update(self, payload: Mapping[str, Any], options: Mapping[str, Any]) -> int:
        self._trace("update", options)
        with self.session_factory.begin() as session:
            result = session.execute(build_update(self.model, payload, options))
            return result.rowcount

    def destroy(self, options: Mapping[str, Any]) -> int:
        self._trace("destroy", options)
        with self.session_factory.begin() as session:
            result = session.execute(build_delete(self.model, options))
            return result.rowcount


class AsyncTableHandle(_BaseHandle):
    """Asyncio counterpart of :class:`TableHandle` over an ``async_sessionmaker``."""

    session_factory: async_sessionmaker

    async def create(self, data: Mapping[str, Any]) -> Any:
        self._trace("create", dict(data))
        async with self.session_factory.begin() as session:
            item = self.model(**data)
            session.add(item)
            await session.flush()
            await session.refresh(item)
            session.expunge(item)
        return item

    async def bulk_create(self, records: Sequence[Mapping[str, Any]]) -> List[Any]:
        self._trace("bulk_create", f"{len(records)} records")
        async with self.session_factory.begin() as session:
            items = [self.model(**record) for record in records]
            session.add_all(items)
            await session.flush()
            for item in items:
                await session.refresh(item)
            session.expunge_all()
        return items

    async def find_all(self, options: Mapping[str, Any]) -> List[Any]:
        self._trace("find_all", options)
        async with self.session_factory() as session:
            result = await session.scalars(build_select(self.model, options))
            return list(result.all())

    async def find_one(self, options: Mapping[str, Any]) -> Optional[Any]:
        self._trace("find_one", options)
        if self._reads_nothing(options):
            return None
        async with self.session_factory() as session:
            result = await session.scalars(build_select(self.model, self._single(options)))
            return result.first()

    async def find_by_pk(self, ident: Any) -> Optional[Any]:
        self._trace("find_by_pk", ident)
        async with self.session_factory() as session:
            return await session.get(self.model, ident)

    async def find_or_create(self, options: Mapping[str, Any]) -> Tuple[Any, bool]:
        lookup = {"where": options.get("where") or {}}
        existing = await self.find_one(lookup)
        if existing is not None:
            return existing, False
        try:
            return await self.create(creation_values(options)), True
        except IntegrityError:
            existing = await self.find_one(lookup)
            if existing is None:
                raise
            return existing, False

    async def count(self, options: Mapping[str, Any]) -> int:
        self._trace("count", options)
        async with self.session_factory() as session:
            return int(await session.scalar(build_count(self.model, options)) or 0)

    async def update(self, payload: Mapping[str, Any], options: Mapping[str, Any]) -> int:
        self._trace("update", options)
        async with self.session_factory.begin() as session:
            result = await session.execute(build_update(self.model, payload, options))
            return result.rowcount

    async def destroy(self, options: Mapping[str, Any]) -> int:
        self._trace("destroy", options)
        async with self.session_factory.begin() as session:
            result = await session.execute(build_delete(self.model, options))
            return result.rowcount

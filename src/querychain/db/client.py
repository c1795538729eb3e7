# src/querychain/db/client.py
"""Engine and session ownership for sync and asyncio applications."""

from typing import Any, AsyncIterator, Dict, Iterator, Optional, Type

from rich.markup import escape
from sqlalchemy import MetaData, create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from querychain.core.config import DbConfig, PoolConfig
from querychain.core.logging import color_palette, log
from querychain.db.table import AsyncTableHandle, TableHandle


def engine_options(config: DbConfig, pool_config: PoolConfig, is_async: bool = False) -> Dict[str, Any]:
    """Keyword arguments for ``create_engine`` / ``create_async_engine``."""
    options: Dict[str, Any] = {"echo": config.echo}
    if config.is_memory:
        # One shared connection, otherwise every session sees an empty database.
        options["poolclass"] = StaticPool
        if not is_async:
            options["connect_args"] = {"check_same_thread": False}
    elif not config.is_sqlite:
        options.update(pool_config.engine_kwargs())
    return options


class DbClient:
    """Owns the SQLAlchemy engine and session factory for one database."""

    def __init__(self, config: DbConfig, pool_config: Optional[PoolConfig] = None):
        self.config = config
        self.pool_config = pool_config or PoolConfig()
        self.engine: Engine = create_engine(
            config.url, **engine_options(config, self.pool_config)
        )
        self.SessionLocal = sessionmaker(bind=self.engine, expire_on_commit=False)

    def get_db(self) -> Iterator[Session]:
        """Session dependency (FastAPI ``Depends`` compatible)."""
        db = self.SessionLocal()
        try:
            yield db
        finally:
            db.close()

    def test_connection(self) -> None:
        try:
            with self.engine.connect() as connection:
                connection.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            log.error(f"Database connection failed: {escape(str(e))}")
            raise
        log.success(f"Connected to {escape(self.config.safe_url())}")

    def create_tables(self, metadata: MetaData) -> None:
        """Create every table of a declarative metadata that does not exist yet."""
        metadata.create_all(self.engine)
        log.info(f"Created tables: {', '.join(color_palette['table'](t) for t in metadata.tables)}")

    def drop_tables(self, metadata: MetaData) -> None:
        metadata.drop_all(self.engine)

    def table(self, model: Type[Any]) -> TableHandle:
        return TableHandle(model, self.SessionLocal)

    def model(self, model: Type[Any]):
        """Return a fresh query-building Model bound to ``model``'s table."""
        from querychain.query.model import Model

        return Model(self.table(model))

    def close(self) -> None:
        self.engine.dispose()
        log.debug("Engine disposed")


class AsyncDbClient:
    """Asyncio counterpart of :class:`DbClient`; needs an async driver (e.g. ``sqlite+aiosqlite``)."""

    def __init__(self, config: DbConfig, pool_config: Optional[PoolConfig] = None):
        self.config = config
        self.pool_config = pool_config or PoolConfig()
        self.engine: AsyncEngine = create_async_engine(
            config.url, **engine_options(config, self.pool_config, is_async=True)
        )
        self.SessionLocal = async_sessionmaker(bind=self.engine, expire_on_commit=False)

    async def get_db(self) -> AsyncIterator[AsyncSession]:
        async with self.SessionLocal() as db:
            yield db

    async def test_connection(self) -> None:
        try:
            async with self.engine.connect() as connection:
                await connection.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            log.error(f"Database connection failed: {escape(str(e))}")
            raise
        log.success(f"Connected to {escape(self.config.safe_url())}")

    async def create_tables(self, metadata: MetaData) -> None:
        async with self.engine.begin() as connection:
            await connection.run_sync(metadata.create_all)
        log.info(f"Created tables: {', '.join(color_palette['table'](t) for t in metadata.tables)}")

    async def drop_tables(self, metadata: MetaData) -> None:
        async with self.engine.begin() as connection:
            await connection.run_sync(metadata.drop_all)

    def table(self, model: Type[Any]) -> AsyncTableHandle:
        return AsyncTableHandle(model, self.SessionLocal)

    def model(self, model: Type[Any]):
        from querychain.query.async_model import AsyncModel

        return AsyncModel(self.table(model))

    async def close(self) -> None:
        await self.engine.dispose()
        log.debug("Engine disposed")

"""
querychain: chainable query building and CRUD models on top of SQLAlchemy.
"""

from querychain.api import register_error_handlers
from querychain.core import (
    CreateError,
    DbConfig,
    DeleteError,
    ErrorKind,
    ModelError,
    NotFoundError,
    PoolConfig,
    ReadError,
    UpdateError,
    ValidationError,
    log,
)
from querychain.db import AsyncDbClient, AsyncTableHandle, DbClient, Op, TableHandle
from querychain.query import AsyncModel, Model, QueryBuilder

__version__ = "0.1.0"


def querychain_init() -> str:
    """Log the package version and return it."""
    log.info(f"querychain initialized (version {__version__})")
    return __version__


__all__ = [
    "DbConfig",
    "PoolConfig",
    "DbClient",
    "AsyncDbClient",
    "TableHandle",
    "AsyncTableHandle",
    "QueryBuilder",
    "Model",
    "AsyncModel",
    "Op",
    "ErrorKind",
    "ModelError",
    "ValidationError",
    "CreateError",
    "ReadError",
    "NotFoundError",
    "UpdateError",
    "DeleteError",
    "register_error_handlers",
    "querychain_init",
    "log",
]

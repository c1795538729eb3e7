"""Core utilities: configuration, logging and errors."""

from querychain.core.config import DbConfig, PoolConfig
from querychain.core.errors import (
    CreateError,
    DeleteError,
    ErrorKind,
    ModelError,
    NotFoundError,
    ReadError,
    UpdateError,
    ValidationError,
)
from querychain.core.logging import LogLevel, Logger, color_palette, log

__all__ = [
    "DbConfig",
    "PoolConfig",
    "ErrorKind",
    "ModelError",
    "ValidationError",
    "CreateError",
    "ReadError",
    "NotFoundError",
    "UpdateError",
    "DeleteError",
    "Logger",
    "LogLevel",
    "log",
    "color_palette",
]

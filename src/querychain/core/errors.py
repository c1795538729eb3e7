# src/querychain/core/errors.py
"""Error hierarchy raised by models and table handles."""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    """Discriminant carried by every ModelError."""

    MODEL = "model"
    VALIDATION = "validation"
    CREATE = "create"
    READ = "read"
    NOT_FOUND = "not_found"
    UPDATE = "update"
    DELETE = "delete"


class ModelError(Exception):
    """Base error for every failure surfaced by a model."""

    kind: ErrorKind = ErrorKind.MODEL
    default_status_code: int = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = (
            status_code if status_code is not None else self.default_status_code
        )

    @property
    def name(self) -> str:
        return type(self).__name__

    def to_dict(self) -> Dict[str, Any]:
        """Serializable form used by the HTTP error handlers."""
        return {
            "error": True,
            "kind": self.kind.value,
            "name": self.name,
            "message": self.message,
            "status_code": self.status_code,
        }


class ValidationError(ModelError, TypeError):
    """An argument given to a builder or terminal call has the wrong shape."""

    kind = ErrorKind.VALIDATION
    default_status_code = 422


class CreateError(ModelError):
    kind = ErrorKind.CREATE


class ReadError(ModelError):
    kind = ErrorKind.READ


class NotFoundError(ModelError):
    """Raised only when not-found gating is active and a lookup yields nothing."""

    kind = ErrorKind.NOT_FOUND
    default_status_code = 404


class UpdateError(ModelError):
    kind = ErrorKind.UPDATE


class DeleteError(ModelError):
    kind = ErrorKind.DELETE

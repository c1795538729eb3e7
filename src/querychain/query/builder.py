# src/querychain/query/builder.py
import inspect
from contextlib import contextmanager
from typing import Any, Awaitable, Callable, Dict, Iterator, List, Mapping, Optional, Tuple, Type, TypeVar, Union

from querychain.core.errors import (
    CreateError,
    DeleteError,
    ModelError,
    NotFoundError,
    ReadError,
    UpdateError,
    ValidationError,
)
from querychain.db.operators import Op

DIRECTIONS = ("ASC", "DESC")

TRUNCATE_OPTIONS = {"where": {}, "truncate": True}

# Error type and message prefix for a failed table-handle call, per terminal operation.
FAILURES: Dict[str, Tuple[Type[ModelError], str]] = {
    "create": (CreateError, "Error creating {table}"),
    "insert": (CreateError, "Error inserting into {table}"),
    "get_or_create": (ModelError, "Error creating or finding {table}"),
    "get": (ReadError, "Fail fetching data"),
    "get_where": (ReadError, "Fail fetching data"),
    "find": (ReadError, "Error finding {table} with id {ident}"),
    "first": (ReadError, "Error finding first {table}"),
    "exists": (ReadError, "Error in exists method"),
    "count": (ReadError, "Error counting {table}"),
    "update": (UpdateError, "Error updating {table} table"),
    "delete": (DeleteError, "Error deleting from {table}"),
    "truncate": (DeleteError, "Error truncating {table}"),
}

B = TypeVar("B", bound="QueryBuilder")

_NO_IDENT = object()


def is_list_like(value: Any) -> bool:
    return isinstance(value, (list, tuple, set, frozenset))


def require_mapping(value: Any, message: str) -> None:
    if not isinstance(value, Mapping):
        raise ValidationError(message)


def require_optional_mapping(value: Any, message: str) -> None:
    if value is not None and not isinstance(value, Mapping):
        raise ValidationError(message)


def require_list_like(value: Any, message: str) -> None:
    if not is_list_like(value):
        raise ValidationError(message)


def require_optional_int(value: Any, message: str) -> None:
    # bool is an int subclass but never a valid row count
    if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
        raise ValidationError(message)


def normalize_direction(direction: Any) -> str:
    normalized = direction.upper() if isinstance(direction, str) else None
    if normalized not in DIRECTIONS:
        raise ModelError("Order available: ASC or DESC")
    return normalized


class QueryBuilder:
    """
    Accumulates conditions, ordering, grouping, projection and pagination
    across chained calls.

    Terminal operations of Model / AsyncModel consume this state through
    build_options() and reset it once the driver call succeeded.
    """

    def __init__(self):
        self.clear()

    # ===== Reset points =====

    def clear(self) -> None:
        """Return every piece of builder state to its default."""
        self.conditions: Dict[str, Any] = {}
        self.orders: List[Tuple[str, str]] = []
        self.attributes: List[str] = []
        self.groups: List[str] = []
        self.options: Dict[str, Any] = {}
        self.throw_error: bool = False
        self.limit_value: Optional[int] = None
        self.offset_value: Optional[int] = None

    def reset_conditions(self) -> None:
        self.conditions = {}

    def reset_options(self) -> None:
        self.options = {}

    def reset_throw_error(self) -> None:
        self.throw_error = False

    def _consume_throw_error(self) -> bool:
        throw_error = self.throw_error
        self.reset_throw_error()
        return throw_error

    # ===== Verification =====

    @staticmethod
    def _check_verified(verified: Any, name: str) -> None:
        if not isinstance(verified, bool):
            raise ValidationError(f"{name} callback must return boolean value")
        if not verified:
            raise ModelError("Unverified state occurred")

    def verify_sync(self: B, predicate: Callable[[B], bool]) -> B:
        """Run ``predicate(self)``; raise ModelError unless it returns True."""
        self._check_verified(predicate(self), "verify_sync")
        return self

    async def verify(self: B, predicate: Callable[[B], Union[bool, Awaitable[bool]]]) -> B:
        """
        Async variant of verify_sync.

        The predicate may be a coroutine function; its result is awaited
        before the check, so the chain only continues once it has completed.
        """
        verified = predicate(self)
        if inspect.isawaitable(verified):
            verified = await verified
        self._check_verified(verified, "verify")
        return self

    # ===== Builders =====

    def where(self: B, column_or_conditions: Union[str, Mapping[str, Any]], value: Any = None) -> B:
        if isinstance(column_or_conditions, str):
            self.conditions[column_or_conditions] = value
        elif isinstance(column_or_conditions, Mapping):
            self.conditions.update(column_or_conditions)
        return self

    def where_in(self: B, column: str, values: Any) -> B:
        require_list_like(values, "values in where_in method must be a list")
        self.conditions[column] = {Op.IN: list(values)}
        return self

    def order_by(self: B, column: str, direction: str = "ASC") -> B:
        self.orders.append((column, normalize_direction(direction)))
        return self

    def set_orders(self: B, orders: List[Tuple[str, str]]) -> B:
        """Replace the whole order list."""
        require_list_like(orders, "orders in set_orders method must be a list")
        for entry in orders:
            if not (isinstance(entry, (list, tuple)) and len(entry) == 2):
                raise ValidationError("orders in set_orders method must be (column, direction) pairs")
        self.orders = [(column, normalize_direction(direction)) for column, direction in orders]
        return self

    def group_by(self: B, *columns: str) -> B:
        self.groups.extend(columns)
        return self

    def need_columns(self: B, columns: Any) -> B:
        require_list_like(columns, "columns in need_columns method must be a list")
        self.attributes = list(columns)
        return self

    def limit(self: B, value: Optional[int]) -> B:
        require_optional_int(value, "limit in limit method must be a number")
        self.limit_value = value
        return self

    def offset(self: B, value: Optional[int]) -> B:
        require_optional_int(value, "Offset must be a number")
        self.offset_value = value
        return self

    def option(self: B, key_or_options: Union[str, Mapping[str, Any]], value: Any = None) -> B:
        """Set passthrough options; they win over anything derived from the builder."""
        if isinstance(key_or_options, str):
            self.options[key_or_options] = value
        elif isinstance(key_or_options, Mapping):
            self.options.update(key_or_options)
        return self

    def with_error(self: B, value: bool = True) -> B:
        self.throw_error = value
        return self

    # ===== Options =====

    def build_options(self) -> Dict[str, Any]:
        """Compose the driver options; keys already in the overlay are kept as-is."""
        options = dict(self.options)
        if "where" not in options:
            options["where"] = dict(self.conditions)
        if self.attributes and "attributes" not in options:
            options["attributes"] = list(self.attributes)
        if self.orders and "order" not in options:
            options["order"] = list(self.orders)
        if self.groups and "group" not in options:
            options["group"] = list(self.groups)
        if self.limit_value is not None and "limit" not in options:
            options["limit"] = self.limit_value
        if self.offset_value is not None and "offset" not in options:
            options["offset"] = self.offset_value
        return options

    def _call_options(
        self,
        columns: Optional[List[str]] = None,
        conditions: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, Any]:
        # Explicit arguments win for this call only.
        options = self.build_options()
        if conditions is not None:
            options["where"] = dict(conditions)
        if columns:
            options["attributes"] = list(columns)
        return options

    # ===== Terminal call support =====

    @property
    def identifier(self) -> str:
        return self.table.name

    @contextmanager
    def _driver_call(self, operation: str, **fields: Any) -> Iterator[None]:
        """Wrap a table-handle failure into the operation's error kind."""
        try:
            yield
        except ModelError:
            raise
        except Exception as e:
            error_type, prefix = FAILURES[operation]
            message = prefix.format(table=self.identifier, **fields)
            raise error_type(f"{message}: {e}") from e

    def _finish(self, result: Any) -> Any:
        self.clear()
        return result

    def _require_found(self, item: Any, throw_error: bool, ident: Any = _NO_IDENT) -> None:
        if item is None and throw_error:
            if ident is _NO_IDENT:
                raise NotFoundError(f"{self.identifier} not found")
            raise NotFoundError(f"{self.identifier} not found with id {ident}")

    def _require_created(self, created: bool, throw_error: bool, data: Mapping[str, Any]) -> None:
        if not created and throw_error:
            raise CreateError(f"{self.identifier} already exists with data {dict(data)}")

    # ===== Argument checks =====

    @staticmethod
    def _record(data: Any) -> Dict[str, Any]:
        require_mapping(data, "Inserted data must be a mapping")
        return dict(data)

    @staticmethod
    def _records(data: Any) -> Union[Dict[str, Any], List[Dict[str, Any]]]:
        """One record as a dict, several as a list of dicts."""
        if isinstance(data, Mapping):
            return dict(data)
        if is_list_like(data) and all(isinstance(record, Mapping) for record in data):
            return [dict(record) for record in data]
        raise ValidationError("Inserted data must be a mapping or a list of mappings")

    def _get_or_create_options(self, data: Any, defaults: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
        return {"where": self._record(data), "defaults": dict(defaults or {})}

    def _read_options(self, columns: Any, conditions: Any) -> Dict[str, Any]:
        if columns is not None:
            require_list_like(columns, "columns in get method must be a list")
        require_optional_mapping(conditions, "conditions in get method must be a mapping")
        return self._call_options(columns, conditions)

    def _get_where_options(self, conditions: Any) -> Dict[str, Any]:
        require_optional_mapping(conditions, "conditions in get_where method must be a mapping")
        options = {"where": dict(conditions if conditions is not None else self.conditions)}
        if self.attributes:
            options["attributes"] = list(self.attributes)
        return options

    def _where_options(self, conditions: Any, method: str) -> Dict[str, Any]:
        require_optional_mapping(conditions, f"conditions in {method} method must be a mapping")
        return self._call_options(conditions=conditions)

    def _update_args(self, payload: Any, conditions: Any) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        require_mapping(payload, "Update payload must be a mapping")
        return dict(payload), self._where_options(conditions, "update")

# src/querychain/query/model.py
"""Chainable CRUD model over a synchronous table handle."""

from typing import Any, List, Mapping, Optional

from querychain.core.errors import ModelError
from querychain.db.table import TableHandle
from querychain.query.builder import TRUNCATE_OPTIONS, QueryBuilder


class Model(QueryBuilder):
    """
    Query builder bound to one table.

    Chain builders, then finish with a terminal operation. Each terminal
    operation makes exactly one table-handle call, wraps any failure into a
    kind-specific ModelError and resets the builder state when it succeeds.

    Usage:
        users = Model(db_client.table(User))
        rows = users.where("status", True).order_by("id", "desc").limit(10).get()
    """

    def __init__(self, table: TableHandle):
        if table is None:
            raise ModelError("Model table must be defined in constructor")
        super().__init__()
        self.table = table

    # ===== Create =====

    def create(self, data: Mapping[str, Any]) -> Any:
        record = self._record(data)
        with self._driver_call("create"):
            item = self.table.create(record)
        return self._finish(item)

    def insert(self, data: Any) -> Any:
        """Insert one mapping or a list of mappings."""
        records = self._records(data)
        with self._driver_call("insert"):
            if isinstance(records, list):
                result = self.table.bulk_create(records)
            else:
                result = self.table.create(records)
        return self._finish(result)

    def get_or_create(self, data: Mapping[str, Any], defaults: Optional[Mapping[str, Any]] = None) -> Any:
        """
        Find the row matching ``data`` or create it.

        With ``with_error()`` active an existing row raises CreateError
        instead of being returned.
        """
        throw_error = self._consume_throw_error()
        options = self._get_or_create_options(data, defaults)
        with self._driver_call("get_or_create"):
            item, created = self.table.find_or_create(options)
        self._require_created(created, throw_error, data)
        return self._finish(item)

    # ===== Read =====

    def get(self, columns: Optional[List[str]] = None, conditions: Optional[Mapping[str, Any]] = None) -> List[Any]:
        options = self._read_options(columns, conditions)
        with self._driver_call("get"):
            items = self.table.find_all(options)
        return self._finish(items)

    def get_where(self, conditions: Optional[Mapping[str, Any]] = None) -> List[Any]:
        """Like get(), restricted to conditions and projection."""
        options = self._get_where_options(conditions)
        with self._driver_call("get_where"):
            items = self.table.find_all(options)
        return self._finish(items)

    def find(self, ident: Any) -> Optional[Any]:
        throw_error = self._consume_throw_error()
        with self._driver_call("find", ident=ident):
            item = self.table.find_by_pk(ident)
        self._require_found(item, throw_error, ident)
        return self._finish(item)

    def first(self) -> Optional[Any]:
        throw_error = self._consume_throw_error()
        options = self.build_options()
        with self._driver_call("first"):
            item = self.table.find_one(options)
        self._require_found(item, throw_error)
        return self._finish(item)

    def exists(self, conditions: Optional[Mapping[str, Any]] = None) -> bool:
        options = self._where_options(conditions, "exists")
        with self._driver_call("exists"):
            item = self.table.find_one(options)
        return self._finish(item is not None)

    def count(self, conditions: Optional[Mapping[str, Any]] = None) -> int:
        options = self._where_options(conditions, "count")
        with self._driver_call("count"):
            total = self.table.count(options)
        return self._finish(total)

    # ===== Update / Delete =====

    def update(self, payload: Mapping[str, Any], conditions: Optional[Mapping[str, Any]] = None) -> int:
        """Update every row matching the conditions; returns the affected row count."""
        values, options = self._update_args(payload, conditions)
        with self._driver_call("update"):
            affected = self.table.update(values, options)
        return self._finish(affected)

    def delete(self, conditions: Optional[Mapping[str, Any]] = None) -> int:
        options = self._where_options(conditions, "delete")
        with self._driver_call("delete"):
            affected = self.table.destroy(options)
        return self._finish(affected)

    def truncate(self) -> int:
        """Remove every row, ignoring builder state."""
        with self._driver_call("truncate"):
            affected = self.table.destroy(dict(TRUNCATE_OPTIONS))
        return self._finish(affected)

# src/querychain/query/async_model.py
from typing import Any, List, Mapping, Optional

from querychain.core.errors import ModelError
from querychain.db.table import AsyncTableHandle
from querychain.query.builder import TRUNCATE_OPTIONS, QueryBuilder


class AsyncModel(QueryBuilder):
    """
    Asyncio counterpart of :class:`querychain.query.model.Model`.

    Builders stay synchronous; every terminal operation is a coroutine.

    Usage:
        users = AsyncModel(async_client.table(User))
        user = await users.where("phone", "0712").with_error().first()
    """

    def __init__(self, table: AsyncTableHandle):
        if table is None:
            raise ModelError("Model table must be defined in constructor")
        super().__init__()
        self.table = table

    async def create(self, data: Mapping[str, Any]) -> Any:
        record = self._record(data)
        with self._driver_call("create"):
            item = await self.table.create(record)
        return self._finish(item)

    async def insert(self, data: Any) -> Any:
        records = self._records(data)
        with self._driver_call("insert"):
            if isinstance(records, list):
                result = await self.table.bulk_create(records)
            else:
                result = await self.table.create(records)
        return self._finish(result)

    async def get_or_create(self, data: Mapping[str, Any], defaults: Optional[Mapping[str, Any]] = None) -> Any:
        throw_error = self._consume_throw_error()
        options = self._get_or_create_options(data, defaults)
        with self._driver_call("get_or_create"):
            item, created = await self.table.find_or_create(options)
        self._require_created(created, throw_error, data)
        return self._finish(item)

    async def get(self, columns: Optional[List[str]] = None, conditions: Optional[Mapping[str, Any]] = None) -> List[Any]:
        options = self._read_options(columns, conditions)
        with self._driver_call("get"):
            items = await self.table.find_all(options)
        return self._finish(items)

    async def get_where(self, conditions: Optional[Mapping[str, Any]] = None) -> List[Any]:
        options = self._get_where_options(conditions)
        with self._driver_call("get_where"):
            items = await self.table.find_all(options)
        return self._finish(items)

    async def find(self, ident: Any) -> Optional[Any]:
        throw_error = self._consume_throw_error()
        with self._driver_call("find", ident=ident):
            item = await self.table.find_by_pk(ident)
        self._require_found(item, throw_error, ident)
        return self._finish(item)

    async def first(self) -> Optional[Any]:
        throw_error = self._consume_throw_error()
        options = self.build_options()
        with self._driver_call("first"):
            item = await self.table.find_one(options)
        self._require_found(item, throw_error)
        return self._finish(item)

    async def exists(self, conditions: Optional[Mapping[str, Any]] = None) -> bool:
        options = self._where_options(conditions, "exists")
        with self._driver_call("exists"):
            item = await self.table.find_one(options)
        return self._finish(item is not None)

    async def count(self, conditions: Optional[Mapping[str, Any]] = None) -> int:
        options = self._where_options(conditions, "count")
        with self._driver_call("count"):
            total = await self.table.count(options)
        return self._finish(total)

    async def update(self, payload: Mapping[str, Any], conditions: Optional[Mapping[str, Any]] = None) -> int:
        values, options = self._update_args(payload, conditions)
        with self._driver_call("update"):
            affected = await self.table.update(values, options)
        return self._finish(affected)

    async def delete(self, conditions: Optional[Mapping[str, Any]] = None) -> int:
        options = self._where_options(conditions, "delete")
        with self._driver_call("delete"):
            affected = await self.table.destroy(options)
        return self._finish(affected)

    async def truncate(self) -> int:
        with self._driver_call("truncate"):
            affected = await self.table.destroy(dict(TRUNCATE_OPTIONS))
        return self._finish(affected)

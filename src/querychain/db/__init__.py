"""Database interaction components: clients, table handles and operators."""

from querychain.db.client import AsyncDbClient, DbClient
from querychain.db.operators import LIST_OPERATORS, OPERATOR_MAP, Op
from querychain.db.table import AsyncTableHandle, TableHandle

__all__ = [
    "DbClient",
    "AsyncDbClient",
    "TableHandle",
    "AsyncTableHandle",
    "Op",
    "OPERATOR_MAP",
    "LIST_OPERATORS",
]

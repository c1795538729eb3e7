# test/conftest.py
from datetime import datetime
from typing import Optional

import pytest
import pytest_asyncio
from sqlalchemy import String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from querychain import AsyncDbClient, DbClient, DbConfig, Model


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100))
    phone: Mapped[str] = mapped_column(String(20), unique=True)
    password: Mapped[str] = mapped_column(String(100))
    status: Mapped[bool] = mapped_column(default=True)
    validated_at: Mapped[Optional[datetime]] = mapped_column(nullable=True)


def user_data(index, name=None, **extra):
    data = {
        "name": name or f"User {index}",
        "phone": f"12345678{index:02d}",
        "password": f"password{index}",
    }
    data.update(extra)
    return data


class FakeTable:
    """Records every call; methods return canned values or raise ``error``."""

    name = "fake"

    def __init__(self, result=None, error=None, created=True):
        self.result = result
        self.error = error
        self.created = created
        self.calls = []

    def _call(self, operation, *args):
        self.calls.append((operation, *args))
        if self.error is not None:
            raise self.error
        return self.result

    def create(self, data):
        return self._call("create", data)

    def bulk_create(self, records):
        return self._call("bulk_create", records)

    def find_all(self, options):
        return self._call("find_all", options)

    def find_one(self, options):
        return self._call("find_one", options)

    def find_by_pk(self, ident):
        return self._call("find_by_pk", ident)

    def find_or_create(self, options):
        return self._call("find_or_create", options), self.created

    def count(self, options):
        return self._call("count", options)

    def update(self, payload, options):
        return self._call("update", payload, options)

    def destroy(self, options):
        return self._call("destroy", options)



class AsyncFakeTable(FakeTable):
    """Coroutine flavour of FakeTable for AsyncModel."""

    async def create(self, data):
        return self._call("create", data)

    async def bulk_create(self, records):
        return self._call("bulk_create", records)

    async def find_all(self, options):
        return self._call("find_all", options)

    async def find_one(self, options):
        return self._call("find_one", options)

    async def find_by_pk(self, ident):
        return self._call("find_by_pk", ident)

    async def find_or_create(self, options):
        return self._call("find_or_create", options), self.created

    async def count(self, options):
        return self._call("count", options)

    async def update(self, payload, options):
        return self._call("update", payload, options)

    async def destroy(self, options):
        return self._call("destroy", options)

@pytest.fixture
def fake_table():
    return FakeTable(result=[])


@pytest.fixture
def client():
    db = DbClient(DbConfig(driver="sqlite", database=":memory:"))
    db.create_tables(Base.metadata)
    yield db
    db.close()


@pytest.fixture
def users(client) -> Model:
    return client.model(User)


@pytest_asyncio.fixture
async def async_client():
    db = AsyncDbClient(DbConfig(driver="sqlite+aiosqlite", database=":memory:"))
    await db.create_tables(Base.metadata)
    yield db
    await db.close()


@pytest.fixture
def async_users(async_client):
    return async_client.model(User)

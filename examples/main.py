# examples/main.py
"""
querychain demo: a small FastAPI app backed by a chainable users model.

    uvicorn examples.main:app --reload
"""

from typing import Optional

from fastapi import FastAPI
from sqlalchemy import String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from querychain import DbClient, DbConfig, Op, querychain_init, register_error_handlers
from querychain.core.logging import color_palette, log


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100))
    phone: Mapped[str] = mapped_column(String(20), unique=True)
    password: Mapped[str] = mapped_column(String(100))
    status: Mapped[bool] = mapped_column(default=True)


# ? Setup ---------------------------------------------------------------------------------------------

log.section("Starting Application")
querychain_init()

db_client = DbClient(DbConfig(driver="sqlite", database=":memory:"))

with log.timed("Database initialization"):
    db_client.test_connection()
    db_client.create_tables(Base.metadata)
    with log.indented():
        seeded = db_client.model(User).insert(
            [
                {"name": "Ada", "phone": "100", "password": "x"},
                {"name": "Grace", "phone": "101", "password": "x"},
                {"name": "Linus", "phone": "102", "password": "x", "status": False},
            ]
        )
        log.success(f"Seeded {len(seeded)} rows into {color_palette['table']('users')}")

log.table(
    headers=["id", "name", "status"],
    rows=[[u.id, u.name, u.status] for u in db_client.model(User).order_by("id").get()],
    title="users",
)

app: FastAPI = FastAPI(title="querychain demo")
register_error_handlers(app)


def serialize(user: User) -> dict:
    return {"id": user.id, "name": user.name, "phone": user.phone, "status": user.status}


# ? Routes --------------------------------------------------------------------------------------------

@app.get("/users")
def list_users(
    name: Optional[str] = None,
    active: Optional[bool] = None,
    limit: int = 20,
    offset: int = 0,
):
    users = db_client.model(User)
    if name:
        users.where("name", {Op.LIKE: f"%{name}%"})
    if active is not None:
        users.where("status", active)
    return [serialize(u) for u in users.order_by("id").offset(offset).limit(limit).get()]


@app.get("/users/{user_id}")
def read_user(user_id: int):
    return serialize(db_client.model(User).with_error().find(user_id))


@app.post("/users")
def create_user(payload: dict):
    users = db_client.model(User)
    user = users.verify_sync(lambda m: not m.exists({"phone": payload.get("phone")})).create(payload)
    return serialize(user)


@app.delete("/users/{user_id}")
def delete_user(user_id: int):
    return {"deleted": db_client.model(User).delete({"id": user_id})}


def run():
    import uvicorn

    uvicorn.run(app, host="127.0.0.1", port=8000)


if __name__ == "__main__":
    run()

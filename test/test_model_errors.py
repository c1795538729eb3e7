# test/test_model_errors.py
"""Error wrapping and reset rules of terminal operations, against a fake table."""

import pytest

from conftest import AsyncFakeTable, FakeTable
from querychain import (
    AsyncModel,
    CreateError,
    DeleteError,
    Model,
    ModelError,
    NotFoundError,
    ReadError,
    UpdateError,
    ValidationError,
)


def loaded(table):
    return Model(table).where("name", "A").order_by("id").limit(3).offset(1).need_columns(["id"])


FAILURE_CASES = [
    (lambda m: m.create({"name": "A"}), CreateError, "Error creating fake: boom"),
    (lambda m: m.insert([{"name": "A"}]), CreateError, "Error inserting into fake: boom"),
    (lambda m: m.get(), ReadError, "Fail fetching data: boom"),
    (lambda m: m.get_where(), ReadError, "Fail fetching data: boom"),
    (lambda m: m.find(1), ReadError, "Error finding fake with id 1: boom"),
    (lambda m: m.first(), ReadError, "Error finding first fake: boom"),
    (lambda m: m.exists(), ReadError, "Error in exists method: boom"),
    (lambda m: m.count(), ReadError, "Error counting fake: boom"),
    (lambda m: m.update({"name": "B"}), UpdateError, "Error updating fake table: boom"),
    (lambda m: m.delete(), DeleteError, "Error deleting from fake: boom"),
    (lambda m: m.truncate(), DeleteError, "Error truncating fake: boom"),
    (lambda m: m.get_or_create({"name": "A"}), ModelError, "Error creating or finding fake: boom"),
]


@pytest.mark.parametrize("call, error_type, message", FAILURE_CASES)
def test_driver_failures_are_wrapped(call, error_type, message):
    cause = RuntimeError("boom")
    model = loaded(FakeTable(error=cause))
    with pytest.raises(error_type) as info:
        call(model)
    assert info.value.message == message
    assert info.value.__cause__ is cause


@pytest.mark.asyncio
@pytest.mark.parametrize("call, error_type, message", FAILURE_CASES)
async def test_async_failures_match_sync_wrapping(call, error_type, message):
    cause = RuntimeError("boom")
    model = AsyncModel(AsyncFakeTable(error=cause)).where("name", "A").limit(3)
    with pytest.raises(error_type) as info:
        await call(model)
    assert info.value.message == message
    assert info.value.__cause__ is cause
    assert model.conditions == {"name": "A"}
    assert model.limit_value == 3


def test_find_none_ident_keeps_id_in_message():
    with pytest.raises(NotFoundError, match="fake not found with id None"):
        Model(FakeTable(result=None)).with_error().find(None)

@pytest.mark.parametrize(
    "call",
    [
        lambda m: m.get(),
        lambda m: m.count(),
        lambda m: m.update({"name": "B"}),
        lambda m: m.delete(),
    ],
)
def test_failure_keeps_accumulated_state(call):
    model = loaded(FakeTable(error=RuntimeError("boom")))
    with pytest.raises(ModelError):
        call(model)
    assert model.conditions == {"name": "A"}
    assert model.orders == [("id", "ASC")]
    assert model.limit_value == 3
    assert model.attributes == ["id"]


@pytest.mark.parametrize(
    "call",
    [
        lambda m: m.create({"name": "A"}),
        lambda m: m.insert({"name": "A"}),
        lambda m: m.get(),
        lambda m: m.get_where(),
        lambda m: m.find(1),
        lambda m: m.first(),
        lambda m: m.exists(),
        lambda m: m.count(),
        lambda m: m.update({"name": "B"}),
        lambda m: m.delete(),
        lambda m: m.truncate(),
        lambda m: m.get_or_create({"name": "A"}),
    ],
)
def test_success_resets_state(call):
    model = loaded(FakeTable(result=0)).group_by("name").option("distinct", True).with_error(False)
    call(model)
    assert model.conditions == {}
    assert model.orders == []
    assert model.attributes == []
    assert model.groups == []
    assert model.options == {}
    assert model.limit_value is None
    assert model.offset_value is None
    assert model.throw_error is False


def test_typed_errors_propagate_unchanged():
    original = NotFoundError("already typed")
    model = Model(FakeTable(error=original))
    with pytest.raises(NotFoundError) as info:
        model.get()
    assert info.value is original


def test_explicit_arguments_override_for_one_call():
    table = FakeTable(result=[])
    model = Model(table).where("name", "A").need_columns(["id"])
    model.get(["name"], {"status": True})
    assert table.calls[-1] == ("find_all", {"where": {"status": True}, "attributes": ["name"]})


def test_override_does_not_touch_accumulated_state():
    table = FakeTable(error=RuntimeError("boom"))
    model = Model(table).where("name", "A")
    with pytest.raises(ReadError):
        model.get(conditions={"status": True})
    assert model.conditions == {"name": "A"}


def test_get_where_uses_only_conditions_and_projection():
    table = FakeTable(result=[])
    Model(table).where("name", "A").need_columns(["id"]).order_by("id").limit(1).get_where()
    assert table.calls[-1] == ("find_all", {"where": {"name": "A"}, "attributes": ["id"]})


def test_count_uses_where_rule_of_get():
    table = FakeTable(result=4)
    model = Model(table).where("name", "A")
    assert model.count() == 4
    assert table.calls[-1][1]["where"] == {"name": "A"}
    model.where("name", "A").count({"name": "B"})
    assert table.calls[-1][1]["where"] == {"name": "B"}


def test_truncate_ignores_builder_state():
    table = FakeTable(result=2)
    Model(table).where("name", "A").truncate()
    assert table.calls[-1] == ("destroy", {"where": {}, "truncate": True})


def test_insert_dispatches_on_shape():
    table = FakeTable(result="ok")
    model = Model(table)
    model.insert({"name": "A"})
    model.insert([{"name": "A"}, {"name": "B"}])
    assert [call[0] for call in table.calls] == ["create", "bulk_create"]


@pytest.mark.parametrize("data", ["x", 5, [{"name": "A"}, "x"]])
def test_insert_validates_shape(data):
    table = FakeTable()
    with pytest.raises(ValidationError):
        Model(table).insert(data)
    assert table.calls == []


@pytest.mark.parametrize(
    "call",
    [
        lambda m: m.create(["not", "a", "mapping"]),
        lambda m: m.get("name"),
        lambda m: m.get(conditions=["x"]),
        lambda m: m.exists("phone"),
        lambda m: m.count(1),
        lambda m: m.update("x"),
        lambda m: m.delete(["x"]),
    ],
)
def test_arguments_are_validated_before_driver_call(call):
    table = FakeTable()
    with pytest.raises(ValidationError):
        call(Model(table))
    assert table.calls == []


def test_find_not_found_policy():
    model = Model(FakeTable(result=None))
    assert model.find(7) is None
    with pytest.raises(NotFoundError, match="fake not found with id 7") as info:
        model.with_error().find(7)
    assert info.value.status_code == 404
    assert model.throw_error is False


def test_first_not_found_policy():
    model = Model(FakeTable(result=None)).where("name", "A")
    with pytest.raises(NotFoundError, match="fake not found"):
        model.with_error().first()
    assert model.throw_error is False
    assert model.conditions == {"name": "A"}


def test_find_read_failure_clears_flag():
    model = Model(FakeTable(error=RuntimeError("boom")))
    with pytest.raises(ReadError):
        model.with_error().find(1)
    assert model.throw_error is False


def test_get_or_create_existing_with_gating():
    table = FakeTable(result={"id": 1}, created=False)
    model = Model(table)
    assert model.get_or_create({"name": "A"}) == {"id": 1}
    with pytest.raises(CreateError, match="already exists"):
        model.with_error().get_or_create({"name": "A"})
    assert model.throw_error is False


def test_get_or_create_passes_defaults():
    table = FakeTable(result={"id": 1})
    Model(table).get_or_create({"phone": "1"}, defaults={"name": "A"})
    assert table.calls[-1] == ("find_or_create", {"where": {"phone": "1"}, "defaults": {"name": "A"}})


def test_error_serialization():
    error = NotFoundError("users not found")
    assert error.to_dict() == {
        "error": True,
        "kind": "not_found",
        "name": "NotFoundError",
        "message": "users not found",
        "status_code": 404,
    }
    assert ModelError("x", status_code=409).status_code == 409

# src/querychain/db/statements.py
"""Translate options mappings into SQLAlchemy statements."""

from typing import Any, Dict, List, Mapping, Optional, Type

from sqlalchemy import (
    ColumnElement,
    Delete,
    Select,
    Update,
    and_,
    delete,
    func,
    inspect,
    or_,
    select,
    true,
    update,
)
from sqlalchemy.orm import load_only

from .operators import LIST_OPERATORS, LOGICAL_OPERATORS, OPERATOR_MAP, Op

# Option keys understood by the table handles; anything else is ignored.
KNOWN_OPTIONS = {
    "where",
    "attributes",
    "order",
    "group",
    "limit",
    "offset",
    "distinct",
    "defaults",
    "truncate",
}


def table_name(model: Type[Any]) -> str:
    return inspect(model).local_table.name


def resolve_column(model: Type[Any], name: str) -> Any:
    """Return the mapped attribute for a column name or raise ValueError."""
    mapper = inspect(model)
    if not isinstance(name, str) or name not in mapper.columns.keys():
        raise ValueError(f"Unknown column {name!r} on table {table_name(model)!r}")
    return getattr(model, name)


def apply_operator(column: Any, operator: str, operand: Any) -> ColumnElement:
    if operator not in OPERATOR_MAP:
        raise ValueError(f"Unknown operator {operator!r}")

    if operator == Op.IS_NULL:
        return column.is_(None) if operand else column.is_not(None)

    if operator in LIST_OPERATORS:
        if isinstance(operand, (str, bytes)) or not hasattr(operand, "__iter__"):
            raise ValueError(f"Operator {operator!r} expects a list of values")
        values = list(operand)
        if operator == Op.BETWEEN:
            if len(values) != 2:
                raise ValueError("Operator 'between' expects exactly two bounds")
            return column.between(*values)
        return getattr(column, OPERATOR_MAP[operator])(values)

    return getattr(column, OPERATOR_MAP[operator])(operand)


def _all_of(clauses: List[ColumnElement]) -> ColumnElement:
    return and_(*clauses) if clauses else true()


def build_conditions(model: Type[Any], where: Mapping[str, Any]) -> List[ColumnElement]:
    """
    Build WHERE clauses from a condition mapping.

    Scalars compare for equality (None means IS NULL), sequences and sets
    become IN, nested mappings apply one operator per key. The `$or` and
    `$and` keys take a list of condition mappings.
    """
    clauses: List[ColumnElement] = []
    for key, value in where.items():
        if key in LOGICAL_OPERATORS:
            groups = [_all_of(build_conditions(model, item)) for item in value]
            combine = or_ if key == Op.OR else and_
            clauses.append(combine(*groups) if groups else true())
            continue

        column = resolve_column(model, key)
        if isinstance(value, Mapping):
            clauses.extend(
                apply_operator(column, operator, operand)
                for operator, operand in value.items()
            )
        elif isinstance(value, (list, tuple, set, frozenset)):
            clauses.append(column.in_(list(value)))
        elif value is None:
            clauses.append(column.is_(None))
        else:
            clauses.append(column == value)
    return clauses


def _where(stmt, model: Type[Any], options: Mapping[str, Any]):
    where = options.get("where")
    if where:
        clauses = build_conditions(model, where)
        if clauses:
            stmt = stmt.where(*clauses)
    return stmt


def _order_clause(model: Type[Any], entry: Any) -> ColumnElement:
    if isinstance(entry, str):
        return resolve_column(model, entry).asc()
    column_name, direction = entry
    column = resolve_column(model, column_name)
    if str(direction).upper() == "DESC":
        return column.desc()
    return column.asc()


def build_select(model: Type[Any], options: Mapping[str, Any]) -> Select:
    stmt = _where(select(model), model, options)

    attributes = options.get("attributes")
    if attributes:
        stmt = stmt.options(load_only(*[resolve_column(model, name) for name in attributes]))

    group = options.get("group")
    if group:
        stmt = stmt.group_by(*[resolve_column(model, name) for name in group])

    order = options.get("order")
    if order:
        stmt = stmt.order_by(*[_order_clause(model, entry) for entry in order])

    if options.get("distinct"):
        stmt = stmt.distinct()
    if options.get("limit") is not None:
        stmt = stmt.limit(options["limit"])
    if options.get("offset") is not None:
        stmt = stmt.offset(options["offset"])
    return stmt


def build_count(model: Type[Any], options: Mapping[str, Any]) -> Select:
    return _where(select(func.count()).select_from(model), model, options)


def build_update(model: Type[Any], payload: Mapping[str, Any], options: Mapping[str, Any]) -> Update:
    values = {resolve_column(model, key): value for key, value in payload.items()}
    if not values:
        raise ValueError("Update payload is empty")
    stmt = update(model).values(values).execution_options(synchronize_session=False)
    return _where(stmt, model, options)


def build_delete(model: Type[Any], options: Mapping[str, Any]) -> Delete:
    stmt = delete(model).execution_options(synchronize_session=False)
    if options.get("truncate"):
        return stmt
    return _where(stmt, model, options)


def creation_values(options: Mapping[str, Any]) -> Dict[str, Any]:
    """Column values for a find-or-create insert: plain equalities plus defaults."""
    where = options.get("where") or {}
    values = {
        key: value
        for key, value in where.items()
        if key not in LOGICAL_OPERATORS and not isinstance(value, (Mapping, list, tuple, set))
    }
    values.update(options.get("defaults") or {})
    return values


def unknown_options(options: Mapping[str, Any]) -> Optional[List[str]]:
    extra = sorted(key for key in options if key not in KNOWN_OPTIONS)
    return extra or None

"""
Column filter inputs used by the derived per-entity queries and mutations
"""

import dataclasses
import operator
from collections.abc import Callable
from enum import Enum
from typing import Any

import strawberry
from sqlalchemy.sql.elements import ColumnElement, UnaryExpression


@strawberry.input(description="Comparison operators for an integer column.")
class IntFilter:
    eq: int | None = None
    ne: int | None = None
    gt: int | None = None
    gte: int | None = None
    lt: int | None = None
    lte: int | None = None
    in_array: list[int] | None = None
    not_in_array: list[int] | None = None
    is_null: bool | None = None


@strawberry.input(description="Comparison operators for a floating point column.")
class FloatFilter:
    eq: float | None = None
    ne: float | None = None
    gt: float | None = None
    gte: float | None = None
    lt: float | None = None
    lte: float | None = None
    in_array: list[float] | None = None
    not_in_array: list[float] | None = None
    is_null: bool | None = None


@strawberry.input(description="Comparison and pattern operators for a text column.")
class StringFilter:
    eq: str | None = None
    ne: str | None = None
    gt: str | None = None
    gte: str | None = None
    lt: str | None = None
    lte: str | None = None
    like: str | None = None
    ilike: str | None = None
    in_array: list[str] | None = None
    not_in_array: list[str] | None = None
    is_null: bool | None = None


@strawberry.input(description="Comparison operators for a boolean column.")
class BooleanFilter:
    eq: bool | None = None
    ne: bool | None = None
    is_null: bool | None = None


# Python column type -> operator input exposed for it
FILTER_INPUTS: dict[type, type] = {
    int: IntFilter,
    float: FloatFilter,
    str: StringFilter,
    bool: BooleanFilter,
}

OPERATORS: dict[str, Callable[[Any, Any], ColumnElement[bool]]] = {
    "eq": operator.eq,
    "ne": operator.ne,
    "gt": operator.gt,
    "gte": operator.ge,
    "lt": operator.lt,
    "lte": operator.le,
    "like": lambda column, value: column.like(value),
    "ilike": lambda column, value: column.ilike(value),
    "in_array": lambda column, value: column.in_(value),
    "not_in_array": lambda column, value: column.not_in(value),
    "is_null": lambda column, value: column.is_(None) if value else column.is_not(None),
}


def filter_input_for(python_type: type) -> type | None:
    """Return the operator input for a column's Python type, if one exists."""
    for base, filter_input in FILTER_INPUTS.items():
        if issubclass(python_type, base):
            # bool is a subclass of int; prefer the exact match
            return FILTER_INPUTS.get(python_type, filter_input)
    return None


def column_filter_clauses(column: Any, column_filter: Any) -> list[ColumnElement[bool]]:
    """Compile one column's operator input into SQL predicates."""
    clauses = []
    for field in dataclasses.fields(column_filter):
        value = getattr(column_filter, field.name)
        if value is None:
            continue
        clauses.append(OPERATORS[field.name](column, value))
    return clauses


def filter_clauses(model: type, filters: Any | None) -> list[ColumnElement[bool]]:
    """Compile a derived ``<Table>Filters`` input into predicates, ANDed by the caller.

    Columns without a filter, and operators left null, add nothing.
    """
    if filters is None:
        return []

    clauses = []
    for field in dataclasses.fields(filters):
        column_filter = getattr(filters, field.name)
        if column_filter is None:
            continue
        clauses.extend(column_filter_clauses(getattr(model, field.name), column_filter))
    return clauses


@strawberry.enum(description="Sort direction of one column.")
class OrderDirection(Enum):
    asc = "asc"
    desc = "desc"


@strawberry.input(description="Sort by this column; higher priority columns sort first.")
class ColumnOrder:
    direction: OrderDirection
    priority: int


def order_clauses(model: type, order_by: Any | None) -> list[UnaryExpression[Any]]:
    """Compile a derived ``<Table>OrderBy`` input into ORDER BY terms.

    Columns are ranked by descending priority; ties keep declaration order.
    """
    if order_by is None:
        return []

    ranked = []
    for field in dataclasses.fields(order_by):
        column_order = getattr(order_by, field.name)
        if column_order is None:
            continue
        column = getattr(model, field.name)
        term = column.desc() if column_order.direction is OrderDirection.desc else column.asc()
        ranked.append((column_order.priority, term))

    ranked.sort(key=lambda item: -item[0])
    return [term for _, term in ranked]

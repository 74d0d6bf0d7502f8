"""
Filter grammar shared by every Storage implementation.

A ``where`` mapping has one entry per field. A plain value means equality;
a nested mapping applies operators, all of which must hold:

    {"stock": {"lt": 0}}
    {"category_id": {"in": ["a", "b"]}, "name": {"contains": "guide"}}
"""
import operator
from dataclasses import dataclass
from typing import Any, Mapping

from .errors import UnknownFieldError
from .registry import EntityKind, column_names

OPERATORS = ("equals", "not", "lt", "lte", "gt", "gte", "in", "contains")

_COMPARATORS = {
    "equals": operator.eq,
    "not": operator.ne,
    "lt": operator.lt,
    "lte": operator.le,
    "gt": operator.gt,
    "gte": operator.ge,
}


@dataclass(frozen=True)
class Condition:
    field: str
    op: str
    value: Any


def parse_where(kind: EntityKind, where: Mapping[str, Any] | None) -> list[Condition]:
    if not where:
        return []

    known = column_names(kind)
    conditions = []
    for field, spec in where.items():
        if field not in known:
            raise UnknownFieldError(f"Cannot filter {EntityKind(kind).value} on '{field}'")

        if isinstance(spec, Mapping):
            for op, value in spec.items():
                if op not in OPERATORS:
                    raise UnknownFieldError(f"Unsupported filter operator '{op}'")
                conditions.append(Condition(field, op, value))
        else:
            conditions.append(Condition(field, "equals", spec))
    return conditions


def parse_order_by(kind: EntityKind, order_by: str | None) -> tuple[str, bool] | None:
    """Returns ``(field, descending)`` for ``"name"`` / ``"-created_at"``."""
    if not order_by:
        return None
    descending = order_by.startswith("-")
    field = order_by.lstrip("-")
    if field not in column_names(kind):
        raise UnknownFieldError(f"Cannot order {EntityKind(kind).value} by '{field}'")
    return field, descending


def matches(row: Mapping[str, Any], conditions: list[Condition]) -> bool:
    """Evaluates conditions against a plain row, for in-process storage."""
    for cond in conditions:
        actual = row.get(cond.field)

        if cond.op == "in":
            if actual not in cond.value:
                return False
        elif cond.op == "contains":
            if actual is None or str(cond.value).lower() not in str(actual).lower():
                return False
        elif cond.op in ("equals", "not"):
            if not _COMPARATORS[cond.op](actual, cond.value):
                return False
        else:
            # NULL never satisfies an ordering comparison
            if actual is None or not _COMPARATORS[cond.op](actual, cond.value):
                return False
    return True


def to_clause(model, cond: Condition):
    """Translates a condition into a SQLAlchemy boolean expression."""
    column = getattr(model, cond.field)

    if cond.op == "in":
        return column.in_(list(cond.value))
    if cond.op == "contains":
        # Literal substring: % and _ in the search text are escaped
        return column.icontains(str(cond.value), autoescape=True)
    if cond.op == "equals" and cond.value is None:
        return column.is_(None)
    if cond.op == "not" and cond.value is None:
        return column.is_not(None)
    return _COMPARATORS[cond.op](column, cond.value)

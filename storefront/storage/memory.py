"""
In-process Storage used by the test suite and for running the API without a
database.

Columns, defaults, unique keys and foreign keys are read from the SQLAlchemy
table metadata so the fake cannot drift from the real schema. Uniqueness and
NOT NULL are always enforced. Foreign keys are enforced unless the storage is
built with ``enforce_foreign_keys=False``. CHECK constraints are not enforced,
which lets tests stage data the invariant checker must catch.
"""
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Mapping

from sqlalchemy import Numeric

from .base import Storage
from .errors import ForeignKeyError, IntegrityViolationError, RecordNotFoundError, UniqueConstraintError
from .filters import matches, parse_order_by, parse_where
from .registry import NESTED, PARENTS, EntityKind, kind_for_table, model_for, split_fields


def _table(kind: EntityKind):
    return model_for(kind).__table__


def _coerce(column, value):
    if value is None or not isinstance(column.type, Numeric):
        return value
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    scale = column.type.scale
    if scale is not None:
        value = value.quantize(Decimal(1).scaleb(-scale), rounding=ROUND_HALF_UP)
    return value


class InMemoryStorage(Storage):

    def __init__(self, enforce_foreign_keys: bool = True):
        self.enforce_foreign_keys = enforce_foreign_keys
        self.disconnected = False
        # dicts keep insertion order, which stands in for "natural" row order
        self._rows: dict[EntityKind, dict[str, dict]] = {kind: {} for kind in EntityKind}

    # --- row preparation ---

    def _prepare(self, kind: EntityKind, fields: Mapping[str, Any]) -> dict:
        row = {}
        for column in _table(kind).columns:
            if column.key in fields:
                row[column.key] = _coerce(column, fields[column.key])
            elif column.default is not None:
                default = column.default
                row[column.key] = default.arg(None) if default.is_callable else default.arg
            else:
                row[column.key] = None
        return row

    def _check_row(
        self,
        kind: EntityKind,
        row: dict,
        pending: Mapping[EntityKind, set] | None = None,
        exclude_id: str | None = None,
    ):
        """Validates a row before it is stored; ``exclude_id`` is the row being updated."""
        table = _table(kind)
        pending = pending or {}

        for column in table.columns:
            value = row.get(column.key)

            if value is None:
                if not column.nullable:
                    raise IntegrityViolationError(
                        f"NOT NULL constraint failed: {table.name}.{column.key}"
                    )
                continue

            if column.primary_key or column.unique:
                for other_id, other in self._rows[kind].items():
                    if other_id != exclude_id and other.get(column.key) == value:
                        raise UniqueConstraintError(
                            f"UNIQUE constraint failed: {table.name}.{column.key}"
                        )

            if self.enforce_foreign_keys:
                for fk in column.foreign_keys:
                    target = kind_for_table(fk.column.table.name)
                    if value not in self._rows[target] and value not in pending.get(target, ()):
                        raise ForeignKeyError(
                            f"FOREIGN KEY constraint failed: {table.name}.{column.key}"
                        )

    def _check_unreferenced(self, kind: EntityKind, ids: set):
        if not self.enforce_foreign_keys or not ids:
            return
        target_table = _table(kind).name

        for other_kind in EntityKind:
            for column in _table(other_kind).columns:
                if not any(fk.column.table.name == target_table for fk in column.foreign_keys):
                    continue
                for other in self._rows[other_kind].values():
                    if other.get(column.key) in ids:
                        raise ForeignKeyError(
                            f"FOREIGN KEY constraint failed: "
                            f"{_table(other_kind).name}.{column.key} references {target_table}"
                        )

    def _materialize(self, kind: EntityKind, row: dict):
        entity = model_for(kind)(**row)

        if kind in NESTED:
            relation, child_kind, parent_key = NESTED[kind]
            children = sorted(
                (child for child in self._rows[child_kind].values() if child[parent_key] == row["id"]),
                key=lambda child: child.get("position") or 0,
            )
            child_model = model_for(child_kind)
            setattr(entity, relation, [child_model(**child) for child in children])

        if kind in PARENTS:
            relation, parent_kind, foreign_key = PARENTS[kind]
            parent = self._rows[parent_kind].get(row[foreign_key])
            # Orphans (foreign keys relaxed) load with no parent, as a LEFT JOIN would
            setattr(entity, relation, model_for(parent_kind)(**parent) if parent is not None else None)

        return entity

    # --- Storage interface ---

    async def create(self, kind, fields):
        kind = EntityKind(kind)
        scalars, children = split_fields(kind, fields)

        row = self._prepare(kind, scalars)
        self._check_row(kind, row)

        child_rows = []
        if kind in NESTED:
            _, child_kind, parent_key = NESTED[kind]
            pending = {kind: {row["id"]}}
            for position, child in enumerate(children):
                child_row = self._prepare(
                    child_kind, {"position": position, **child, parent_key: row["id"]}
                )
                self._check_row(child_kind, child_row, pending)
                child_rows.append(child_row)

        # Everything validated; now the whole unit lands at once
        self._rows[kind][row["id"]] = row
        for child_row in child_rows:
            self._rows[NESTED[kind][1]][child_row["id"]] = child_row

        return self._materialize(kind, row)

    async def find_many(self, kind, where=None, order_by=None) -> list:
        kind = EntityKind(kind)
        conditions = parse_where(kind, where)
        rows = [row for row in self._rows[kind].values() if matches(row, conditions)]

        ordering = parse_order_by(kind, order_by)
        if ordering:
            field, descending = ordering
            # None sorts last ascending, first descending, as in PostgreSQL
            rows.sort(key=lambda r: (r.get(field) is None, r.get(field)), reverse=descending)

        return [self._materialize(kind, row) for row in rows]

    async def find_unique(self, kind, record_id):
        kind = EntityKind(kind)
        row = self._rows[kind].get(record_id)
        return self._materialize(kind, row) if row is not None else None

    async def update(self, kind, record_id, fields):
        kind = EntityKind(kind)
        scalars, _ = split_fields(kind, fields, allow_nested=False)

        current = self._rows[kind].get(record_id)
        if current is None:
            raise RecordNotFoundError(kind, record_id)

        row = dict(current)
        for column in _table(kind).columns:
            if column.key in scalars:
                row[column.key] = _coerce(column, scalars[column.key])
            elif column.onupdate is not None and scalars:
                row[column.key] = column.onupdate.arg(None)

        self._check_row(kind, row, exclude_id=record_id)
        self._rows[kind][record_id] = row
        return self._materialize(kind, row)

    async def delete(self, kind, record_id):
        kind = EntityKind(kind)
        if record_id not in self._rows[kind]:
            raise RecordNotFoundError(kind, record_id)

        self._check_unreferenced(kind, {record_id})
        del self._rows[kind][record_id]

    async def delete_many(self, kind) -> int:
        kind = EntityKind(kind)
        self._check_unreferenced(kind, set(self._rows[kind]))

        count = len(self._rows[kind])
        self._rows[kind].clear()
        return count

    async def disconnect(self):
        self.disconnected = True

"""Exact money arithmetic for orders. Everything is Decimal, never float."""
from decimal import Decimal
from typing import Iterable, Tuple


def to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        # str() keeps the shortest repr, so 49.99 stays 49.99
        return Decimal(str(value))
    return Decimal(value)


def line_total(price_at_time, quantity: int) -> Decimal:
    return to_decimal(price_at_time) * quantity


def order_total(lines: Iterable[Tuple[object, int]]) -> Decimal:
    """Sums ``(price_at_time, quantity)`` pairs."""
    return sum((line_total(price, quantity) for price, quantity in lines), Decimal("0"))

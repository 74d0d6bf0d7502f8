"""
Read-only acceptance checks over stored data.

Each check reads a snapshot of the collections it needs and reports every
offending entity. None of them writes, so they can run concurrently.
"""
import asyncio
from dataclasses import dataclass, field

import structlog

from storefront.shared.observability import storefront_invariant_violations_total
from storefront.services.order_service.totals import order_total, to_decimal
from storefront.storage import EntityKind, Storage

logger = structlog.get_logger(__name__)

NO_NEGATIVE_STOCK = "no_negative_stock"
CATEGORY_REFERENCES = "category_references"
ORDER_TOTALS = "order_totals"


@dataclass(frozen=True)
class Violation:
    invariant: str
    entity_id: str
    detail: str


@dataclass
class InvariantReport:
    name: str
    violations: list[Violation] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.violations

    @property
    def offending_ids(self) -> list[str]:
        return [v.entity_id for v in self.violations]


class InvariantViolationError(AssertionError):
    def __init__(self, reports: list[InvariantReport]):
        self.reports = reports
        failed = [r for r in reports if not r.ok]
        summary = "; ".join(f"{r.name}: {', '.join(r.offending_ids)}" for r in failed)
        super().__init__(f"Invariant violations: {summary}")


def _report(name: str, violations: list[Violation]) -> InvariantReport:
    for violation in violations:
        storefront_invariant_violations_total.labels(invariant=name).inc()
        logger.warning(
            "invariant_violated",
            invariant=name,
            entity_id=violation.entity_id,
            detail=violation.detail,
        )
    return InvariantReport(name=name, violations=violations)


async def check_no_negative_stock(storage: Storage) -> InvariantReport:
    bad = await storage.find_many(EntityKind.PRODUCT, {"stock": {"lt": 0}})
    return _report(NO_NEGATIVE_STOCK, [
        Violation(NO_NEGATIVE_STOCK, p.id, f"stock is {p.stock}") for p in bad
    ])


async def check_category_references(storage: Storage) -> InvariantReport:
    products = await storage.find_many(EntityKind.PRODUCT)
    categories = await storage.find_many(EntityKind.CATEGORY)
    category_ids = {c.id for c in categories}

    return _report(CATEGORY_REFERENCES, [
        Violation(CATEGORY_REFERENCES, p.id, f"category {p.category_id} does not exist")
        for p in products
        if p.category_id not in category_ids
    ])


async def check_order_totals(storage: Storage) -> InvariantReport:
    orders = await storage.find_many(EntityKind.ORDER)

    violations = []
    for order in orders:
        # Stored snapshots only; current product prices are irrelevant here
        expected = order_total((item.price_at_time, item.quantity) for item in order.order_items)
        actual = to_decimal(order.total_amount)
        if actual != expected:
            violations.append(Violation(
                ORDER_TOTALS, order.id, f"totalAmount {actual} != sum of items {expected}"
            ))
    return _report(ORDER_TOTALS, violations)


async def check_invariants(storage: Storage) -> list[InvariantReport]:
    return list(await asyncio.gather(
        check_no_negative_stock(storage),
        check_category_references(storage),
        check_order_totals(storage),
    ))


async def assert_invariants(storage: Storage) -> list[InvariantReport]:
    reports = await check_invariants(storage)
    if not all(r.ok for r in reports):
        raise InvariantViolationError(reports)
    return reports

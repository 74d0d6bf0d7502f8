"""
Reference data for tests and local seeding.

The snapshot is fixed: two categories, two products, one order with two
items. Rebuilding it always yields the same names, slugs, descriptions,
prices and stock; only generated ids and timestamps differ between runs.
"""
from dataclasses import dataclass
from decimal import Decimal

import structlog

from storefront.services.catalog_service.models import Category, Product
from storefront.services.order_service.models import Order, OrderStatus
from storefront.services.order_service.totals import order_total
from storefront.storage import DELETION_ORDER, EntityKind, Storage

logger = structlog.get_logger(__name__)

ELECTRONICS = {
    "name": "Electronics",
    "slug": "electronics",
    "description": "Electronic devices and accessories",
}

BOOKS = {
    "name": "Books",
    "slug": "books",
    "description": "Books and reading material",
}

HEADPHONES = {
    "name": "Wireless Headphones",
    "description": "Noise cancelling wireless headphones",
    "price": Decimal("199.99"),
    "stock": 10,
    "image_url": "https://example.com/headphones.jpg",
}

GUIDE = {
    "name": "Programming Guide",
    "description": "Modern web development guide",
    "price": Decimal("49.99"),
    "stock": 5,
    "image_url": "https://example.com/guide.jpg",
}

CUSTOMER = {
    "client_name": "Test User",
    "client_phone": "0000000000",
    "client_address": "Test Address",
}


@dataclass(frozen=True)
class FixtureSet:
    electronics: Category
    books: Category
    headphones: Product
    guide: Product
    order: Order

    @property
    def categories(self) -> tuple[Category, Category]:
        return self.electronics, self.books

    @property
    def products(self) -> tuple[Product, Product]:
        return self.headphones, self.guide


async def reset_storage(storage: Storage) -> dict[EntityKind, int]:
    """Clears every collection, children before parents."""
    removed = {}
    for kind in DELETION_ORDER:
        removed[kind] = await storage.delete_many(kind)
    logger.info("storage_reset", **{kind.value: count for kind, count in removed.items()})
    return removed


async def create_test_data(storage: Storage, *, reset: bool = True) -> FixtureSet:
    """
    Builds the reference snapshot. Each write is awaited before the next.

    With ``reset=False`` the caller guarantees a clean state; leftover rows
    then collide on the category slug and the UniqueConstraintError
    propagates unchanged.
    """
    if reset:
        await reset_storage(storage)

    electronics = await storage.create(EntityKind.CATEGORY, ELECTRONICS)
    books = await storage.create(EntityKind.CATEGORY, BOOKS)

    headphones = await storage.create(EntityKind.PRODUCT, {**HEADPHONES, "category_id": electronics.id})
    guide = await storage.create(EntityKind.PRODUCT, {**GUIDE, "category_id": books.id})

    # priceAtTime comes from the products as created, not from the constants
    items = [
        {"product_id": headphones.id, "quantity": 1, "price_at_time": headphones.price},
        {"product_id": guide.id, "quantity": 2, "price_at_time": guide.price},
    ]
    order = await storage.create(EntityKind.ORDER, {
        **CUSTOMER,
        "total_amount": order_total((item["price_at_time"], item["quantity"]) for item in items),
        "status": OrderStatus.PENDING.value,
        "order_items": items,
    })

    logger.info("fixtures_created", order_id=order.id, total_amount=str(order.total_amount))
    return FixtureSet(
        electronics=electronics,
        books=books,
        headphones=headphones,
        guide=guide,
        order=order,
    )

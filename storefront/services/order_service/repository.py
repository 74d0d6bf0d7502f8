from typing import Optional

from storefront.storage import EntityKind, Storage

from .models import Order


class OrderRepository:
    @staticmethod
    async def create_order(storage: Storage, fields: dict) -> Order:
        # fields["order_items"] travels with the order in one atomic create
        return await storage.create(EntityKind.ORDER, fields)

    @staticmethod
    async def get_order(storage: Storage, order_id: str) -> Optional[Order]:
        return await storage.find_unique(EntityKind.ORDER, order_id)

    @staticmethod
    async def get_orders(storage: Storage, where: dict | None = None) -> list[Order]:
        return await storage.find_many(EntityKind.ORDER, where, order_by="-created_at")

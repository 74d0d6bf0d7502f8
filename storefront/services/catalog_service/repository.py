from typing import Optional

from storefront.storage import EntityKind, Storage

from .models import Category, Product


class CategoryRepository:

    @staticmethod
    async def create(storage: Storage, fields: dict) -> Category:
        return await storage.create(EntityKind.CATEGORY, fields)

    @staticmethod
    async def get_all(storage: Storage) -> list[Category]:
        return await storage.find_many(EntityKind.CATEGORY, order_by="name")

    @staticmethod
    async def get_by_id(storage: Storage, category_id: str) -> Optional[Category]:
        return await storage.find_unique(EntityKind.CATEGORY, category_id)

    @staticmethod
    async def get_by_slug(storage: Storage, slug: str) -> Optional[Category]:
        matches = await storage.find_many(EntityKind.CATEGORY, {"slug": slug})
        return matches[0] if matches else None


class ProductRepository:

    @staticmethod
    async def create_product(storage: Storage, fields: dict) -> Product:
        return await storage.create(EntityKind.PRODUCT, fields)

    @staticmethod
    async def get_products(storage: Storage, where: dict | None = None) -> list[Product]:
        return await storage.find_many(EntityKind.PRODUCT, where, order_by="-created_at")

    @staticmethod
    async def get_product_by_id(storage: Storage, product_id: str) -> Optional[Product]:
        return await storage.find_unique(EntityKind.PRODUCT, product_id)

    @staticmethod
    async def update_product(storage: Storage, product_id: str, fields: dict) -> Product:
        return await storage.update(EntityKind.PRODUCT, product_id, fields)

    @staticmethod
    async def delete_product(storage: Storage, product_id: str):
        await storage.delete(EntityKind.PRODUCT, product_id)

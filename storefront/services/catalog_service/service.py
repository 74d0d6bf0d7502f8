import structlog
from fastapi import HTTPException, status

from storefront.storage import ForeignKeyError, Storage, UniqueConstraintError

from .repository import CategoryRepository, ProductRepository
from .schemas import CategoryCreate, ProductCreate, ProductUpdate

logger = structlog.get_logger(__name__)


class CategoryService:

    @staticmethod
    async def list_categories(storage: Storage):
        return await CategoryRepository.get_all(storage)

    @staticmethod
    async def get_category(storage: Storage, category_id: str):
        return await CategoryRepository.get_by_id(storage, category_id)

    @staticmethod
    async def create_category(storage: Storage, data: CategoryCreate):
        try:
            category = await CategoryRepository.create(storage, data.model_dump())
        except UniqueConstraintError:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Category slug '{data.slug}' already exists",
            )
        logger.info("category_created", category_id=category.id, slug=category.slug)
        return category


class ProductService:

    @staticmethod
    async def _require_category(storage: Storage, category_id: str):
        if await CategoryRepository.get_by_id(storage, category_id) is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Category not found")

    @staticmethod
    async def list_products(storage: Storage, category: str | None = None, search: str | None = None):
        where = {}
        if category:
            match = await CategoryRepository.get_by_slug(storage, category)
            if match is None:
                return []
            where["category_id"] = match.id
        if search and search.strip():
            where["name"] = {"contains": search.strip()}

        return await ProductRepository.get_products(storage, where)

    @staticmethod
    async def get_product_by_id(storage: Storage, product_id: str):
        return await ProductRepository.get_product_by_id(storage, product_id)

    @staticmethod
    async def create_product(storage: Storage, data: ProductCreate):
        await ProductService._require_category(storage, data.category_id)

        product = await ProductRepository.create_product(storage, data.model_dump())
        logger.info("product_created", product_id=product.id, category_id=product.category_id)
        return product

    @staticmethod
    async def update_product(storage: Storage, product_id: str, data: ProductUpdate):
        # Only the optional columns may be cleared with an explicit null
        fields = {
            key: value
            for key, value in data.model_dump(exclude_unset=True).items()
            if value is not None or key in ("description", "image_url")
        }
        if fields.get("category_id") is not None:
            await ProductService._require_category(storage, fields["category_id"])

        return await ProductRepository.update_product(storage, product_id, fields)

    @staticmethod
    async def delete_product(storage: Storage, product_id: str):
        try:
            await ProductRepository.delete_product(storage, product_id)
        except ForeignKeyError:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Product is referenced by existing orders",
            )
        logger.info("product_deleted", product_id=product_id)

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from storefront.storage import Storage, get_storage

from .schemas import CategoryCreate, CategoryResponse, ProductCreate, ProductResponse, ProductUpdate
from .service import CategoryService, ProductService

category_router = APIRouter(prefix="/categories", tags=["Categories"])
product_router = APIRouter(prefix="/products", tags=["Products"])


@category_router.get("", response_model=list[CategoryResponse])
async def list_categories(storage: Storage = Depends(get_storage)):
    return await CategoryService.list_categories(storage)


@category_router.get("/{category_id}", response_model=CategoryResponse)
async def get_category(category_id: str, storage: Storage = Depends(get_storage)):
    category = await CategoryService.get_category(storage, category_id)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    return category


@category_router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(payload: CategoryCreate, storage: Storage = Depends(get_storage)):
    return await CategoryService.create_category(storage, payload)


@product_router.get("", response_model=list[ProductResponse])
async def list_products(
    category: str | None = Query(default=None, description="Category slug"),
    search: str | None = Query(default=None),
    storage: Storage = Depends(get_storage),
):
    return await ProductService.list_products(storage, category=category, search=search)


@product_router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str, storage: Storage = Depends(get_storage)):
    product = await ProductService.get_product_by_id(storage, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@product_router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(payload: ProductCreate, storage: Storage = Depends(get_storage)):
    return await ProductService.create_product(storage, payload)


@product_router.put("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: str,
    payload: ProductUpdate,
    storage: Storage = Depends(get_storage),
):
    if await ProductService.get_product_by_id(storage, product_id) is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return await ProductService.update_product(storage, product_id, payload)


@product_router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(product_id: str, storage: Storage = Depends(get_storage)):
    if await ProductService.get_product_by_id(storage, product_id) is None:
        raise HTTPException(status_code=404, detail="Product not found")
    await ProductService.delete_product(storage, product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

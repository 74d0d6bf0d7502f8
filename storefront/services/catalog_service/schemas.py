from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import Field

from storefront.shared.schemas import ApiModel

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


class CategoryCreate(ApiModel):
    name: str = Field(min_length=1)
    slug: str = Field(min_length=1, pattern=SLUG_PATTERN)
    description: Optional[str] = None


class CategoryResponse(ApiModel):
    id: str
    name: str
    slug: str
    description: Optional[str]
    created_at: datetime
    updated_at: datetime


class ProductCreate(ApiModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    stock: int = Field(ge=0)
    category_id: str
    image_url: Optional[str] = None


class ProductUpdate(ApiModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    stock: Optional[int] = Field(default=None, ge=0)
    category_id: Optional[str] = None
    image_url: Optional[str] = None


class CategorySummary(ApiModel):
    id: str
    name: str
    slug: str


class ProductResponse(ApiModel):
    id: str
    name: str
    description: Optional[str]
    price: Decimal
    stock: int
    category_id: str
    image_url: Optional[str]
    category: Optional[CategorySummary] = None
    created_at: datetime
    updated_at: datetime

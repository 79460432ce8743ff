# truekind/domain/schemas/catalog.py
from datetime import datetime

from pydantic import Field

from truekind.domain.schemas.common import SLUG_PATTERN, ApiModel, Money, Payload, UpdatePayload


# categories

class CategoryIn(Payload):
    name: str = Field(..., min_length=1, max_length=255)
    slug: str = Field(..., min_length=1, max_length=255, pattern=SLUG_PATTERN)
    description: str | None = None
    parent_id: int | None = Field(None, gt=0)
    image_url: str | None = None


class CategoryUpdate(UpdatePayload):
    required_fields = ("name", "slug")

    name: str | None = Field(None, min_length=1, max_length=255)
    slug: str | None = Field(None, min_length=1, max_length=255, pattern=SLUG_PATTERN)
    description: str | None = None
    parent_id: int | None = Field(None, gt=0)
    image_url: str | None = None


class CategoryOut(ApiModel):
    id: int
    name: str
    slug: str
    description: str | None = None
    parent_id: int | None = None
    image_url: str | None = None
    created_at: datetime
    updated_at: datetime


# brands

class BrandIn(Payload):
    name: str = Field(..., min_length=1, max_length=255)
    slug: str = Field(..., min_length=1, max_length=255, pattern=SLUG_PATTERN)
    description: str | None = None
    logo_url: str | None = None
    banner_url: str | None = None
    is_featured: bool = False


class BrandUpdate(UpdatePayload):
    required_fields = ("name", "slug", "is_featured")

    name: str | None = Field(None, min_length=1, max_length=255)
    slug: str | None = Field(None, min_length=1, max_length=255, pattern=SLUG_PATTERN)
    description: str | None = None
    logo_url: str | None = None
    banner_url: str | None = None
    is_featured: bool | None = None


class BrandOut(ApiModel):
    id: int
    name: str
    slug: str
    description: str | None = None
    logo_url: str | None = None
    banner_url: str | None = None
    is_featured: bool
    created_at: datetime
    updated_at: datetime


# products

class ProductIn(Payload):
    name: str = Field(..., min_length=1, max_length=255)
    slug: str = Field(..., min_length=1, max_length=255, pattern=SLUG_PATTERN)
    description: str = Field(..., min_length=1)
    short_description: str | None = Field(None, max_length=512)
    brand_id: int | None = Field(None, gt=0)
    category_id: int | None = Field(None, gt=0)
    price: Money = Field(..., gt=0, max_digits=10, decimal_places=2)
    original_price: Money | None = Field(None, gt=0, max_digits=10, decimal_places=2)
    sku: str = Field(..., min_length=1, max_length=64)
    stock_quantity: int = Field(0, ge=0)
    is_featured: bool = False
    is_new: bool = False
    rating: Money | None = Field(None, ge=0, le=5)
    review_count: int = Field(0, ge=0)


class ProductUpdate(UpdatePayload):
    required_fields = (
        "name", "slug", "description", "price", "sku",
        "stock_quantity", "is_featured", "is_new", "review_count",
    )

    name: str | None = Field(None, min_length=1, max_length=255)
    slug: str | None = Field(None, min_length=1, max_length=255, pattern=SLUG_PATTERN)
    description: str | None = Field(None, min_length=1)
    short_description: str | None = Field(None, max_length=512)
    brand_id: int | None = Field(None, gt=0)
    category_id: int | None = Field(None, gt=0)
    price: Money | None = Field(None, gt=0, max_digits=10, decimal_places=2)
    original_price: Money | None = Field(None, gt=0, max_digits=10, decimal_places=2)
    sku: str | None = Field(None, min_length=1, max_length=64)
    stock_quantity: int | None = Field(None, ge=0)
    is_featured: bool | None = None
    is_new: bool | None = None
    rating: Money | None = Field(None, ge=0, le=5)
    review_count: int | None = Field(None, ge=0)


class ProductOut(ApiModel):
    id: int
    name: str
    slug: str
    description: str
    short_description: str | None = None
    brand_id: int | None = None
    category_id: int | None = None
    price: Money
    original_price: Money | None = None
    sku: str
    stock_quantity: int
    is_featured: bool
    is_new: bool
    rating: Money | None = None
    review_count: int
    created_at: datetime
    updated_at: datetime


# product images

class ProductImageIn(Payload):
    product_id: int = Field(..., gt=0)
    image_url: str = Field(..., min_length=1, max_length=1024)
    alt_text: str | None = Field(None, max_length=255)
    is_primary: bool = False
    display_order: int = Field(0, ge=0)


class ProductImageUpdate(UpdatePayload):
    required_fields = ("product_id", "image_url", "is_primary", "display_order")

    product_id: int | None = Field(None, gt=0)
    image_url: str | None = Field(None, min_length=1, max_length=1024)
    alt_text: str | None = Field(None, max_length=255)
    is_primary: bool | None = None
    display_order: int | None = Field(None, ge=0)


class ProductImageOut(ApiModel):
    id: int
    product_id: int
    image_url: str
    alt_text: str | None = None
    is_primary: bool
    display_order: int
    created_at: datetime


# reviews

class ReviewIn(Payload):
    product_id: int = Field(..., gt=0)
    rating: int = Field(..., ge=1, le=5)
    title: str | None = Field(None, max_length=255)
    comment: str = Field(..., min_length=1)


class ReviewUpdate(UpdatePayload):
    required_fields = ("rating", "comment", "is_verified", "helpful_count")

    rating: int | None = Field(None, ge=1, le=5)
    title: str | None = Field(None, max_length=255)
    comment: str | None = Field(None, min_length=1)
    is_verified: bool | None = None
    helpful_count: int | None = Field(None, ge=0)


class ReviewOut(ApiModel):
    id: int
    product_id: int
    user_id: str
    rating: int
    title: str | None = None
    comment: str
    is_verified: bool
    helpful_count: int
    created_at: datetime
    updated_at: datetime

# truekind/domain/schemas/commerce.py
from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_core import PydanticCustomError

from truekind.domain.schemas.common import ApiModel, Money, Payload, UpdatePayload
from truekind.domain.schemas.catalog import ProductOut

DiscountType = Literal["percentage", "fixed"]


def coupon_terms_error(discount_type: str, discount_value: Decimal, valid_from: datetime, valid_until: datetime):
    """(code, message) for inconsistent coupon terms, None when they hold.

    Shared by create and by update once the new values are merged onto the row.
    """
    if discount_type == "percentage" and discount_value > 100:
        return "INVALID_PERCENTAGE_VALUE", "Percentage discount cannot exceed 100"
    if valid_until <= valid_from:
        return "INVALID_DATE_RANGE", "validUntil must be after validFrom"
    return None


# coupons

class CouponIn(Payload):
    code: str = Field(..., min_length=1, max_length=64)
    description: str | None = None
    discount_type: DiscountType
    discount_value: Money = Field(..., gt=0, max_digits=10, decimal_places=2)
    min_purchase_amount: Money | None = Field(None, ge=0, max_digits=10, decimal_places=2)
    max_discount_amount: Money | None = Field(None, gt=0, max_digits=10, decimal_places=2)
    usage_limit: int | None = Field(None, ge=1)
    valid_from: datetime
    valid_until: datetime
    is_active: bool = True

    @field_validator("code")
    @classmethod
    def upper_code(cls, value: str) -> str:
        return value.upper()

    @model_validator(mode="after")
    def check_terms(self):
        error = coupon_terms_error(self.discount_type, self.discount_value, self.valid_from, self.valid_until)
        if error:
            raise PydanticCustomError(*error)
        return self


class CouponUpdate(UpdatePayload):
    required_fields = ("code", "discount_type", "discount_value", "valid_from", "valid_until", "is_active", "used_count")

    code: str | None = Field(None, min_length=1, max_length=64)
    description: str | None = None
    discount_type: DiscountType | None = None
    discount_value: Money | None = Field(None, gt=0, max_digits=10, decimal_places=2)
    min_purchase_amount: Money | None = Field(None, ge=0, max_digits=10, decimal_places=2)
    max_discount_amount: Money | None = Field(None, gt=0, max_digits=10, decimal_places=2)
    usage_limit: int | None = Field(None, ge=1)
    used_count: int | None = Field(None, ge=0)
    valid_from: datetime | None = None
    valid_until: datetime | None = None
    is_active: bool | None = None

    @field_validator("code")
    @classmethod
    def upper_code(cls, value: str | None) -> str | None:
        return value.upper() if value else value


class CouponOut(ApiModel):
    id: int
    code: str
    description: str | None = None
    discount_type: str
    discount_value: Money
    min_purchase_amount: Money | None = None
    max_discount_amount: Money | None = None
    usage_limit: int | None = None
    used_count: int
    valid_from: datetime
    valid_until: datetime
    is_active: bool
    created_at: datetime
    updated_at: datetime


class CouponValidateIn(Payload):
    code: str = Field(..., min_length=1)
    subtotal: Money = Field(..., ge=0, max_digits=10, decimal_places=2)


class CouponQuote(ApiModel):
    coupon: CouponOut
    discount_amount: Money
    total: Money


# orders

class OrderLineIn(Payload):
    product_id: int = Field(..., gt=0)
    quantity: int = Field(..., gt=0)


class OrderIn(Payload):
    order_number: str | None = Field(None, min_length=1, max_length=64)
    session_id: str | None = Field(None, min_length=1, max_length=128)
    subtotal: Money = Field(..., ge=0, max_digits=10, decimal_places=2)
    discount_amount: Money = Field(Decimal("0"), ge=0, max_digits=10, decimal_places=2)
    tax_amount: Money = Field(Decimal("0"), ge=0, max_digits=10, decimal_places=2)
    shipping_amount: Money = Field(Decimal("0"), ge=0, max_digits=10, decimal_places=2)
    total_amount: Money = Field(..., ge=0, max_digits=10, decimal_places=2)
    coupon_code: str | None = Field(None, min_length=1, max_length=64)
    payment_method: str = Field(..., min_length=1, max_length=32)
    shipping_address: str = Field(..., min_length=1)
    billing_address: str | None = None
    notes: str | None = None
    items: list[OrderLineIn] = Field(default_factory=list)


class OrderUpdate(UpdatePayload):
    required_fields = (
        "status", "payment_status", "subtotal", "discount_amount", "tax_amount",
        "shipping_amount", "total_amount", "payment_method", "shipping_address",
    )

    status: str | None = None
    payment_status: str | None = None
    subtotal: Money | None = Field(None, ge=0, max_digits=10, decimal_places=2)
    discount_amount: Money | None = Field(None, ge=0, max_digits=10, decimal_places=2)
    tax_amount: Money | None = Field(None, ge=0, max_digits=10, decimal_places=2)
    shipping_amount: Money | None = Field(None, ge=0, max_digits=10, decimal_places=2)
    total_amount: Money | None = Field(None, ge=0, max_digits=10, decimal_places=2)
    payment_method: str | None = Field(None, min_length=1, max_length=32)
    shipping_address: str | None = Field(None, min_length=1)
    billing_address: str | None = None
    tracking_number: str | None = Field(None, max_length=128)
    notes: str | None = None


class OrderItemOut(ApiModel):
    id: int
    product_id: int
    quantity: int
    unit_price: Money
    total_price: Money


class OrderOut(ApiModel):
    id: int
    order_number: str
    user_id: str | None = None
    session_id: str | None = None
    status: str
    payment_status: str
    subtotal: Money
    discount_amount: Money
    tax_amount: Money
    shipping_amount: Money
    total_amount: Money
    coupon_code: str | None = None
    payment_method: str
    gateway_order_id: str | None = None
    shipping_address: str
    billing_address: str | None = None
    tracking_number: str | None = None
    notes: str | None = None
    items: list[OrderItemOut] = []
    created_at: datetime
    updated_at: datetime


# cart / wishlist

class CartItemIn(Payload):
    product_id: int = Field(..., gt=0)
    quantity: int = Field(1, gt=0)
    session_id: str | None = Field(None, min_length=1, max_length=128)


class CartItemUpdate(UpdatePayload):
    required_fields = ("quantity",)

    quantity: int | None = Field(None, gt=0)


class CartItemOut(ApiModel):
    id: int
    session_id: str | None = None
    user_id: str | None = None
    product_id: int
    quantity: int
    created_at: datetime
    updated_at: datetime
    product: ProductOut | None = None


class WishlistItemIn(Payload):
    product_id: int = Field(..., gt=0)
    session_id: str | None = Field(None, min_length=1, max_length=128)


class WishlistItemOut(ApiModel):
    id: int
    session_id: str | None = None
    user_id: str | None = None
    product_id: int
    created_at: datetime
    product: ProductOut | None = None


# payments

class PaymentOrderIn(Payload):
    order_id: int = Field(..., gt=0)
    session_id: str | None = Field(None, min_length=1, max_length=128)


class PaymentOrderOut(ApiModel):
    order_id: int
    gateway_order_id: str
    amount: int
    currency: str
    key_id: str


class PaymentVerifyIn(Payload):
    order_id: int = Field(..., gt=0)
    gateway_order_id: str = Field(..., min_length=1)
    payment_id: str = Field(..., min_length=1)
    signature: str = Field(..., min_length=1)
    session_id: str | None = Field(None, min_length=1, max_length=128)

# truekind/repos/commerce_repo.py
from datetime import datetime

from sqlalchemy import delete, func, or_, select, update

from truekind.data.models.cart_item import CartItemModel, WishlistItemModel
from truekind.data.models.commerce import CouponModel, OrderItemModel, OrderModel
from truekind.repos.base import BaseRepo
from truekind.utils.clock import utcnow


class CouponRepo(BaseRepo):
    model = CouponModel
    label = "Coupon"
    unique_codes = {"code": "DUPLICATE_COUPON_CODE"}
    search_columns = ("code", "description")
    sort_columns = {
        "code": "code",
        "validUntil": "valid_until",
        "usedCount": "used_count",
        "createdAt": "created_at",
    }

    def get_by_code(self, code: str) -> CouponModel | None:
        return self.db.execute(
            select(CouponModel).where(func.upper(CouponModel.code) == code.upper())
        ).scalar_one_or_none()

    def redeem(self, coupon_id: int) -> int:
        """Conditional increment of used_count, 0 rows means the limit is reached. Caller commits."""
        result = self.db.execute(
            update(CouponModel)
            .where(
                CouponModel.id == coupon_id,
                or_(CouponModel.usage_limit.is_(None), CouponModel.used_count < CouponModel.usage_limit),
            )
            .values(used_count=CouponModel.used_count + 1)
        )
        return result.rowcount


class OrderRepo(BaseRepo):
    model = OrderModel
    label = "Order"
    unique_codes = {"order_number": "DUPLICATE_ORDER_NUMBER", "gateway_order_id": "DUPLICATE_GATEWAY_ORDER"}
    search_columns = ("order_number", "tracking_number", "shipping_address")
    sort_columns = {"createdAt": "created_at", "totalAmount": "total_amount", "orderNumber": "order_number"}

    def add_pending(self, order: OrderModel):
        """Stage an order inside the open transaction."""
        self.db.add(order)
        self.flush()
        return order

    def add_item(self, item: OrderItemModel):
        self.db.add(item)

    def delete_order(self, order: OrderModel):
        self.db.execute(delete(OrderItemModel).where(OrderItemModel.order_id == order.id))
        self.delete(order)


class CartRepo(BaseRepo):
    model = CartItemModel
    label = "Cart item"
    unique_codes = {"session_id": "DUPLICATE_CART_ITEM", "user_id": "DUPLICATE_CART_ITEM"}
    sort_columns = {"createdAt": "created_at", "updatedAt": "updated_at"}
    default_sort = ("created_at", "asc")

    def get_line(self, owner_filter, product_id: int) -> CartItemModel | None:
        return self.db.execute(
            select(CartItemModel).where(owner_filter, CartItemModel.product_id == product_id)
        ).scalars().first()

    def increment(self, item_id: int, quantity: int) -> int:
        result = self.db.execute(
            update(CartItemModel)
            .where(CartItemModel.id == item_id)
            .values(quantity=CartItemModel.quantity + quantity, updated_at=utcnow())
        )
        self.db.commit()
        return result.rowcount

    def purge_guest_items(self, before: datetime) -> int:
        result = self.db.execute(
            delete(CartItemModel).where(
                CartItemModel.user_id.is_(None),
                CartItemModel.updated_at < before,
            )
        )
        self.db.commit()
        return result.rowcount


class WishlistRepo(BaseRepo):
    model = WishlistItemModel
    label = "Wishlist item"
    unique_codes = {"session_id": "DUPLICATE_WISHLIST_ITEM", "user_id": "DUPLICATE_WISHLIST_ITEM"}
    sort_columns = {"createdAt": "created_at"}

    def get_line(self, owner_filter, product_id: int) -> WishlistItemModel | None:
        return self.db.execute(
            select(WishlistItemModel).where(owner_filter, WishlistItemModel.product_id == product_id)
        ).scalars().first()

# truekind/services/order_service.py
import secrets
from decimal import Decimal

from sqlalchemy import or_
from sqlalchemy.orm import Session

from truekind.data.models.commerce import OrderItemModel, OrderModel
from truekind.domain.errors import Forbidden, InvalidRequest, NotFound, StoreError
from truekind.domain.schemas.commerce import OrderIn, OrderOut, OrderUpdate
from truekind.domain.schemas.common import SessionUser
from truekind.domain.states import ORDER_STATUS, PAYMENT_STATUS
from truekind.repos.catalog_repo import ProductRepo
from truekind.repos.commerce_repo import CouponRepo, OrderRepo
from truekind.services.base import CrudService, build_filters, require_changes
from truekind.services.coupon_service import CouponService, money
from truekind.services.notification_service import NotificationService
from truekind.utils.clock import utcnow
from truekind.utils.logging import get_logger

logger = get_logger(__name__)


def new_order_number() -> str:
    return f"TK-{utcnow():%Y%m%d}-{secrets.token_hex(4).upper()}"


def missing_identifier() -> InvalidRequest:
    return InvalidRequest("Sign in or provide a sessionId", "MISSING_IDENTIFIER")


class OrderService(CrudService):
    """
    Checkout and order tracking.

    An order, its lines, the stock reservations and the coupon redemption are
    written in one transaction. Stock and coupon usage use conditional UPDATEs
    so concurrent checkouts cannot oversell or overuse.
    """

    repo_class = OrderRepo
    out_schema = OrderOut
    not_found = ("Order not found", "ORDER_NOT_FOUND")
    deleted_name = "Order"

    def __init__(self, db: Session):
        super().__init__(db)
        self.products = ProductRepo(db)
        self.coupons = CouponRepo(db)
        self.notification_service = NotificationService()

    # query

    def list(self, page: dict, user: SessionUser | None, session_id: str | None = None,
             status: str | None = None, payment_status: str | None = None):
        filters = build_filters((OrderModel.status, status), (OrderModel.payment_status, payment_status))
        if user is not None and user.is_staff:
            filters += build_filters((OrderModel.session_id, session_id))
        elif user is not None:
            owned = OrderModel.user_id == user.id
            filters.append(or_(owned, OrderModel.session_id == session_id) if session_id else owned)
        elif session_id:
            filters.append(OrderModel.session_id == session_id)
        else:
            raise missing_identifier()
        return self.repo.list(filters=filters, **page)

    def get_for(self, order_id: int, user: SessionUser | None, session_id: str | None = None) -> OrderModel:
        order = self.get(order_id)
        self.check_access(order, user, session_id)
        return order

    @staticmethod
    def check_access(order: OrderModel, user: SessionUser | None, session_id: str | None):
        if user is not None and (user.is_staff or order.user_id == user.id):
            return
        if session_id and order.session_id == session_id:
            return
        if user is None and not session_id:
            raise missing_identifier()
        raise Forbidden("You do not have access to this order", "FORBIDDEN")

    # commands

    def create(self, payload: OrderIn, user: SessionUser | None) -> OrderModel:
        if user is None and not payload.session_id:
            raise missing_identifier()

        data = payload.model_dump(exclude={"items"})
        data["order_number"] = data["order_number"] or new_order_number()
        order = OrderModel(
            **data,
            user_id=user.id if user else None,
            status="pending",
            payment_status="pending",
        )

        try:
            self.repo.add_pending(order)
            self._add_lines(order, payload)
            if payload.coupon_code:
                self._redeem_coupon(order, payload.coupon_code, Decimal(payload.subtotal))
        except StoreError:
            self.repo.rollback()
            raise

        self.repo.commit()
        self.db.refresh(order)
        logger.info(f"Order {order.order_number} ({order.id}) placed with {len(payload.items)} lines")

        self.notification_service.order_received(order.id, order.order_number, user.email if user else None)
        return order

    def _add_lines(self, order: OrderModel, payload: OrderIn):
        if not payload.items:
            return
        products = self.products.get_many({line.product_id for line in payload.items})
        for line in payload.items:
            product = products.get(line.product_id)
            if product is None:
                raise NotFound(f"Product {line.product_id} not found", "PRODUCT_NOT_FOUND")
            if self.products.reserve_stock(product.id, line.quantity) == 0:
                raise InvalidRequest(f"Not enough stock for {product.name}", "INSUFFICIENT_STOCK")
            unit_price = Decimal(product.price)
            self.repo.add_item(
                OrderItemModel(
                    order_id=order.id,
                    product_id=product.id,
                    quantity=line.quantity,
                    unit_price=unit_price,
                    total_price=money(unit_price * line.quantity),
                )
            )

    def _redeem_coupon(self, order: OrderModel, code: str, subtotal: Decimal):
        coupon = CouponService(self.db).usable_coupon(code, subtotal)
        if self.coupons.redeem(coupon.id) == 0:
            raise InvalidRequest("Coupon usage limit reached", "COUPON_USAGE_LIMIT_REACHED")
        order.coupon_code = coupon.code

    def update(self, order_id: int, payload: OrderUpdate, user: SessionUser) -> OrderModel:
        order = self.get(order_id)
        changes = require_changes(payload.changes())

        if not user.is_staff:
            self.check_access(order, user, None)
            # customers may only cancel their own order
            if changes.keys() != {"status"} or changes["status"] != "cancelled":
                raise Forbidden("Only staff can modify orders", "FORBIDDEN")

        if "status" in changes:
            changes["status"] = ORDER_STATUS.move(order.status, changes["status"])
        if "payment_status" in changes:
            changes["payment_status"] = PAYMENT_STATUS.move(order.payment_status, changes["payment_status"])

        if changes.get("status") == "cancelled" and order.status != "cancelled":
            for item in order.items:
                self.products.release_stock(item.product_id, item.quantity)
            logger.info(f"Order {order.order_number} cancelled, stock released")

        return self.repo.update(order, changes)

    def remove(self, order):
        self.repo.delete_order(order)

# truekind/services/payment_service.py
from decimal import Decimal

from sqlalchemy.orm import Session

from truekind.data.models.commerce import OrderModel
from truekind.domain.errors import InvalidRequest
from truekind.domain.schemas.commerce import PaymentOrderOut, PaymentVerifyIn
from truekind.domain.schemas.common import SessionUser
from truekind.domain.states import ORDER_STATUS, PAYMENT_STATUS
from truekind.repos.commerce_repo import OrderRepo
from truekind.services.notification_service import NotificationService
from truekind.services.order_service import OrderService
from truekind.services.payment_client import PaymentGatewayClient
from truekind.utils.logging import get_logger
from truekind.utils.settings import PAYMENT_CURRENCY

logger = get_logger(__name__)


def minor_units(amount) -> int:
    return int((Decimal(amount) * 100).quantize(Decimal("1")))


class PaymentService:
    """Creates gateway orders for checkout and settles them from the signed callback."""

    def __init__(self, db: Session, gateway: PaymentGatewayClient):
        self.db = db
        self.repo = OrderRepo(db)
        self.orders = OrderService(db)
        self.gateway = gateway
        self.notification_service = NotificationService()

    def create_gateway_order(self, order_id: int, user: SessionUser | None, session_id: str | None) -> PaymentOrderOut:
        order = self.orders.get_for(order_id, user, session_id)
        if order.payment_status not in ("pending", "failed") or order.status == "cancelled":
            raise InvalidRequest("Order cannot be paid in its current state", "PAYMENT_NOT_ALLOWED")

        amount = minor_units(order.total_amount)
        data = self.gateway.create_order(
            amount=amount,
            currency=PAYMENT_CURRENCY,
            receipt=order.order_number,
            notes={"orderId": str(order.id)},
        )
        changes = {"gateway_order_id": data["id"]}
        if order.payment_status == "failed":
            changes["payment_status"] = PAYMENT_STATUS.move(order.payment_status, "pending")
        self.repo.update(order, changes)
        logger.info(f"Gateway order {data['id']} created for order {order.order_number}")

        return PaymentOrderOut(
            order_id=order.id,
            gateway_order_id=data["id"],
            amount=amount,
            currency=PAYMENT_CURRENCY,
            key_id=self.gateway.key_id,
        )

    def verify(self, payload: PaymentVerifyIn, user: SessionUser | None, session_id: str | None) -> OrderModel:
        order = self.orders.get_for(payload.order_id, user, session_id)
        if not order.gateway_order_id or order.gateway_order_id != payload.gateway_order_id:
            raise InvalidRequest("Payment does not belong to this order", "GATEWAY_ORDER_MISMATCH")

        if order.payment_status == "paid":
            if order.payment_reference == payload.payment_id:
                return order
            raise InvalidRequest("Order is already paid", "PAYMENT_NOT_ALLOWED")

        if not self.gateway.verify_signature(payload.gateway_order_id, payload.payment_id, payload.signature):
            if PAYMENT_STATUS.can_move(order.payment_status, "failed"):
                self.repo.update(order, {"payment_status": "failed"})
            logger.warning(f"Invalid payment signature for order {order.order_number}")
            raise InvalidRequest("Payment signature verification failed", "INVALID_SIGNATURE")

        changes = {
            "payment_status": PAYMENT_STATUS.move(order.payment_status, "paid"),
            "payment_reference": payload.payment_id,
        }
        if order.status == "pending":
            changes["status"] = ORDER_STATUS.move(order.status, "confirmed")
        order = self.repo.update(order, changes)
        logger.info(f"Order {order.order_number} paid ({payload.payment_id})")

        recipient = user.email if user else None
        self.notification_service.payment_confirmed(order.id, order.order_number, recipient)
        return order

# truekind/services/notification_service.py
from truekind.celery_worker import celery_app
from truekind.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """Customer notifications, delivered by Celery workers."""

    @staticmethod
    def order_received(order_id: int, order_number: str, recipient: str | None):
        send_order_notification_task.delay(order_id, order_number, recipient, "received")

    @staticmethod
    def payment_confirmed(order_id: int, order_number: str, recipient: str | None):
        send_order_notification_task.delay(order_id, order_number, recipient, "paid")


@celery_app.task(name="truekind.services.notification_service.send_order_notification_task")
def send_order_notification_task(order_id: int, order_number: str, recipient: str | None, kind: str):
    logger.info(f"[NOTIFICATION] order {order_number} ({order_id}) {kind}, recipient={recipient or 'guest'}")
    return {"order_id": order_id, "kind": kind, "status": "sent"}

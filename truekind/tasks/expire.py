# truekind/tasks/expire.py
from datetime import timedelta

from truekind.celery_worker import celery_app
from truekind.data.database import SessionLocal
from truekind.repos.commerce_repo import CartRepo
from truekind.utils.clock import utcnow
from truekind.utils.logging import get_logger
from truekind.utils.settings import GUEST_CART_TTL_SECONDS

logger = get_logger(__name__)


@celery_app.task(name="truekind.tasks.expire.purge_guest_cart_items_task")
def purge_guest_cart_items_task():
    logger.info("Purge guest carts task started")

    db = SessionLocal()
    try:
        before = utcnow() - timedelta(seconds=GUEST_CART_TTL_SECONDS)
        purged = CartRepo(db).purge_guest_items(before)
        logger.info(f"Purged {purged} guest cart items untouched since {before.isoformat()}")
        return purged
    finally:
        db.close()

# truekind/celery_worker.py
from celery import Celery

from truekind.utils.settings import CELERY_BROKER_URL, CELERY_RESULT_BACKEND, CELERY_TASK_ALWAYS_EAGER

celery_app = Celery(
    "truekind",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
)

# tasks are registered by import
celery_app.conf.imports = (
    "truekind.tasks.expire",
    "truekind.tasks.blog",
    "truekind.services.notification_service",
    "truekind.services.sitemap_service",
)

celery_app.conf.beat_schedule = {
    "publish-scheduled-posts-every-minute": {
        "task": "truekind.tasks.blog.publish_scheduled_posts_task",
        "schedule": 60.0,
    },
    "purge-guest-carts-hourly": {
        "task": "truekind.tasks.expire.purge_guest_cart_items_task",
        "schedule": 60.0 * 60,
    },
}

celery_app.conf.timezone = "UTC"
celery_app.conf.task_always_eager = CELERY_TASK_ALWAYS_EAGER

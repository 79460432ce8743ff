# truekind/tasks/blog.py
from truekind.celery_worker import celery_app
from truekind.data.database import SessionLocal
from truekind.services.blog_post_service import BlogPostService
from truekind.utils.logging import get_logger

logger = get_logger(__name__)


@celery_app.task(name="truekind.tasks.blog.publish_scheduled_posts_task")
def publish_scheduled_posts_task():
    db = SessionLocal()
    try:
        published = BlogPostService(db).publish_due()
        if published:
            logger.info(f"Scheduled publishing released {published} posts")
        return published
    finally:
        db.close()

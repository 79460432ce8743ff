# truekind/services/comment_service.py
from datetime import timedelta

from sqlalchemy.orm import Session

from truekind.data.models.blog import BlogCommentModel
from truekind.domain.errors import AuthenticationRequired, Conflict, Forbidden, InvalidRequest, NotFound
from truekind.domain.schemas.blog import CommentIn, CommentListItem, CommentOut, CommentUpdate
from truekind.domain.schemas.common import SessionUser
from truekind.domain.states import COMMENT_STATUS
from truekind.repos.blog_repo import BlogPostRepo, CommentRepo
from truekind.services.base import CrudService, build_filters, require_changes
from truekind.utils.clock import as_utc, utcnow
from truekind.utils.logging import get_logger
from truekind.utils.settings import COMMENT_EDIT_WINDOW_SECONDS
from truekind.utils.text import is_email

logger = get_logger(__name__)


class CommentService(CrudService):
    repo_class = CommentRepo
    out_schema = CommentOut
    not_found = ("Comment not found", "COMMENT_NOT_FOUND")
    deleted_name = "Comment"

    def __init__(self, db: Session):
        super().__init__(db)
        self.posts = BlogPostRepo(db)

    def get_visible(self, comment_id: int, user: SessionUser | None) -> BlogCommentModel:
        """Approved comments for everyone, others for their author and staff."""
        comment = self.get(comment_id)
        if comment.status == "approved":
            return comment
        if user is not None and (user.is_staff or comment.author_id == user.id):
            return comment
        raise NotFound(*self.not_found)

    def list(self, page: dict, user: SessionUser | None, post_id: int | None = None, status: str | None = None,
             author_id: str | None = None, parent_comment_id=None) -> list[CommentListItem]:
        """Staff see every comment. Everyone else sees approved ones, plus their own when they ask for a status."""
        if status is not None:
            COMMENT_STATUS.validate(status)

        filters = build_filters(
            (BlogCommentModel.post_id, post_id),
            (BlogCommentModel.author_id, author_id),
            (BlogCommentModel.parent_comment_id, parent_comment_id),
            (BlogCommentModel.status, status),
        )
        if user is None or not user.is_staff:
            if status is None:
                filters.append(BlogCommentModel.status == "approved")
            elif status != "approved":
                if user is None:
                    raise AuthenticationRequired()
                filters.append(BlogCommentModel.author_id == user.id)

        return [
            CommentListItem.model_validate(comment).model_copy(update={"user_name": name, "user_image": image})
            for comment, name, image in self.repo.list_with_users(filters=filters, **page)
        ]

    def create(self, payload: CommentIn, user: SessionUser | None) -> BlogCommentModel:
        post = self.posts.get(payload.post_id)
        if not post or post.status != "published":
            raise NotFound("Post not found", "POST_NOT_FOUND")

        if payload.parent_comment_id is not None:
            parent = self.repo.get(payload.parent_comment_id)
            if not parent:
                raise NotFound("Parent comment not found", "PARENT_COMMENT_NOT_FOUND")
            if parent.post_id != post.id:
                raise InvalidRequest("Parent comment belongs to another post", "INVALID_PARENT_COMMENT_ID")
            if parent.parent_comment_id is not None:
                raise InvalidRequest("Replies can only be one level deep", "INVALID_PARENT_COMMENT_ID")

        if user is not None:
            author = {"author_id": user.id, "author_name": user.name, "author_email": None}
        else:
            if not payload.author_name:
                raise InvalidRequest("authorName is required for guest comments", "MISSING_AUTHOR_NAME")
            if not payload.author_email:
                raise InvalidRequest("authorEmail is required for guest comments", "MISSING_AUTHOR_EMAIL")
            if not is_email(payload.author_email):
                raise InvalidRequest("authorEmail is not a valid email address", "INVALID_EMAIL_FORMAT")
            author = {"author_id": None, "author_name": payload.author_name, "author_email": payload.author_email}

        comment = self.repo.add(
            BlogCommentModel(
                post_id=post.id,
                content=payload.content,
                parent_comment_id=payload.parent_comment_id,
                status="pending",
                **author,
            )
        )
        logger.info(f"Comment {comment.id} on post {post.id} awaiting moderation")
        return comment

    def update(self, comment_id: int, payload: CommentUpdate, user: SessionUser) -> BlogCommentModel:
        comment = self.get(comment_id)
        changes = require_changes(payload.changes())

        if "content" in changes:
            if comment.author_id is None or comment.author_id != user.id:
                raise Forbidden("You can only edit your own comments", "UNAUTHORIZED_EDIT")
            if utcnow() - as_utc(comment.created_at) > timedelta(seconds=COMMENT_EDIT_WINDOW_SECONDS):
                hours = COMMENT_EDIT_WINDOW_SECONDS // 3600
                raise Forbidden(f"Comments can only be edited within {hours} hours", "EDIT_TIME_EXPIRED")

        if "status" in changes:
            if not user.is_staff:
                raise Forbidden("Only admins and editors can moderate comments", "UNAUTHORIZED_MODERATION")
            COMMENT_STATUS.move(comment.status, changes["status"])
            if changes["status"] != comment.status:
                logger.info(f"Comment {comment.id} {comment.status} -> {changes['status']} by {user.id}")

        return self.repo.update(comment, changes)

    def check_delete(self, comment, user=None):
        if user is None or not (user.is_staff or comment.author_id == user.id):
            raise Forbidden("You can only delete your own comments", "UNAUTHORIZED_DELETE")
        if self.repo.has_replies(comment.id):
            raise Conflict("Comment has replies", "HAS_REPLIES")

# truekind/services/blog_post_service.py
from datetime import datetime

from sqlalchemy.orm import Session

from truekind.data.models.blog import BlogPostModel
from truekind.domain.errors import AuthenticationRequired, Forbidden, InvalidRequest, NotFound
from truekind.domain.schemas.blog import (
    BlogPostDetail,
    BlogPostIn,
    BlogPostListItem,
    BlogPostOut,
    BlogPostSummary,
    BlogPostUpdate,
    CategoryRef,
    LinkedProduct,
)
from truekind.domain.schemas.catalog import ProductOut
from truekind.domain.schemas.common import SessionUser
from truekind.domain.states import POST_STATUS
from truekind.repos.blog_repo import BlogCategoryRepo, BlogPostRepo, BlogTagRepo
from truekind.repos.catalog_repo import ProductRepo
from truekind.repos.user_repo import UserRepo
from truekind.services.base import CrudService, build_filters, require_changes
from truekind.services.sitemap_service import SitemapService
from truekind.services.user_service import UserService
from truekind.utils.clock import as_utc, utcnow
from truekind.utils.logging import get_logger
from truekind.utils.text import read_time, slugify

logger = get_logger(__name__)

LIST_STATUSES = POST_STATUS.states | {"all"}


def resolve_status(current: str, target: str, published_at: datetime | None, now: datetime):
    """Validated (status, published_at) for a post moving from `current` to `target`."""
    target = POST_STATUS.move(current, target)
    published_at = as_utc(published_at)
    if target == "scheduled":
        if published_at is None:
            raise InvalidRequest("Scheduled posts need a publishedAt date", "MISSING_PUBLISH_DATE")
        if published_at <= now:
            raise InvalidRequest("publishedAt must be in the future for scheduled posts", "INVALID_PUBLISH_DATE")
    elif target == "published" and (published_at is None or published_at > now):
        published_at = now
    return target, published_at


class BlogPostService(CrudService):
    repo_class = BlogPostRepo
    out_schema = BlogPostOut
    not_found = ("Post not found", "POST_NOT_FOUND")
    deleted_name = "Post"

    def __init__(self, db: Session):
        super().__init__(db)
        self.categories = BlogCategoryRepo(db)
        self.tags = BlogTagRepo(db)
        self.products = ProductRepo(db)
        self.users = UserRepo(db)

    # queries

    def list(self, page: dict, user: SessionUser | None, status: str = "published",
             category_id=None, tag_id: int | None = None, author_id: str | None = None) -> list[BlogPostListItem]:
        if status not in LIST_STATUSES:
            raise InvalidRequest(f"status must be one of: {', '.join(sorted(LIST_STATUSES))}", "INVALID_STATUS")

        filters = build_filters(
            (BlogPostModel.category_id, category_id),
            (BlogPostModel.author_id, author_id),
        )
        if status != "all":
            filters.append(BlogPostModel.status == status)
        if status != "published":
            if user is None:
                raise AuthenticationRequired()
            if not user.is_staff:
                filters.append(BlogPostModel.author_id == user.id)

        rows = self.repo.list_posts(filters=filters, tag_id=tag_id, **page)
        return [
            BlogPostListItem.model_validate(post).model_copy(
                update={
                    "author_name": author_name,
                    "author_image": author_image,
                    "category_name": category_name,
                    "category_slug": category_slug,
                    "comment_count": comment_count or 0,
                }
            )
            for post, author_name, author_image, category_name, category_slug, comment_count in rows
        ]

    def get_visible(self, post_id: int, user: SessionUser | None) -> BlogPostModel:
        """Published posts for everyone, drafts and scheduled posts for their author and staff."""
        post = self.get(post_id)
        if post.status != "published" and not self._can_manage(post, user):
            raise NotFound(*self.not_found)
        return post

    def read_published(self, slug: str) -> BlogPostDetail:
        post = self.repo.get_by_slug(slug)
        if not post or post.status != "published":
            raise NotFound(*self.not_found)
        self.repo.increment_views(post.id)
        self.db.refresh(post)
        return self.detail(post)

    def detail(self, post: BlogPostModel) -> BlogPostDetail:
        author = self.users.get_user(post.author_id)
        category = self.categories.get(post.category_id) if post.category_id else None
        products = [
            LinkedProduct.model_validate({**ProductOut.model_validate(product).model_dump(), "position": position})
            for product, position in self.repo.linked_products(post.id)
        ]
        return BlogPostDetail.model_validate(post).model_copy(
            update={
                "author": UserService(self.db).author_view(author) if author else None,
                "category": CategoryRef.model_validate(category) if category else None,
                "products": products,
                "related_posts": [BlogPostSummary.model_validate(p) for p in self.repo.related(post)],
            }
        )

    # commands

    @staticmethod
    def _can_manage(post: BlogPostModel, user: SessionUser | None) -> bool:
        return user is not None and (user.is_staff or post.author_id == user.id)

    def _check_references(self, category_id=None, tag_ids=None, product_links=None):
        if category_id is not None:
            self.require_reference(self.categories, category_id, "Blog category not found", "CATEGORY_NOT_FOUND")
        if tag_ids:
            missing = set(tag_ids) - self.tags.existing_ids(tag_ids)
            if missing:
                raise NotFound(f"Tags not found: {sorted(missing)}", "TAG_NOT_FOUND")
        if product_links:
            wanted = {link["product_id"] for link in product_links}
            missing = wanted - set(self.products.get_many(wanted))
            if missing:
                raise NotFound(f"Products not found: {sorted(missing)}", "PRODUCT_NOT_FOUND")

    def create(self, payload: BlogPostIn, user: SessionUser) -> BlogPostModel:
        data = payload.model_dump()
        tag_ids = data.pop("tag_ids")
        product_links = data.pop("product_links")
        self._check_references(data["category_id"], tag_ids, product_links)

        data["slug"] = data["slug"] or slugify(data["title"])
        if not data["slug"]:
            raise InvalidRequest("A slug could not be derived from the title", "INVALID_SLUG")
        data["status"], data["published_at"] = resolve_status("draft", data["status"], data["published_at"], utcnow())

        post = BlogPostModel(**data, author_id=user.id, read_time=read_time(data["content"]))
        self.repo.replace_tags(post, tag_ids)
        self.repo.replace_product_links(post, [(link["product_id"], link["position"]) for link in product_links])
        post = self.repo.add(post)
        logger.info(f"Post {post.id} ({post.slug}) created as {post.status} by {user.id}")

        if post.status == "published":
            SitemapService.request_ping()
        return post

    def update(self, post_id: int, payload: BlogPostUpdate, user: SessionUser) -> BlogPostModel:
        post = self.get(post_id)
        if not self._can_manage(post, user):
            raise Forbidden("You can only edit your own posts", "FORBIDDEN")

        changes = require_changes(payload.changes())
        tag_ids = changes.pop("tag_ids", None)
        product_links = changes.pop("product_links", None)
        self._check_references(changes.get("category_id"), tag_ids, product_links)

        if "content" in changes:
            changes["read_time"] = read_time(changes["content"])

        was_published = post.status == "published"
        if "status" in changes or "published_at" in changes:
            changes["status"], changes["published_at"] = resolve_status(
                post.status,
                changes.get("status", post.status),
                changes.get("published_at", post.published_at),
                utcnow(),
            )

        if tag_ids is not None:
            self.repo.replace_tags(post, tag_ids)
        if product_links is not None:
            self.repo.replace_product_links(post, [(link["product_id"], link["position"]) for link in product_links])
        post = self.repo.update(post, changes)
        logger.info(f"Post {post.id} updated by {user.id}")

        if post.status == "published" and not was_published:
            SitemapService.request_ping()
        return post

    def check_delete(self, post, user=None):
        if not self._can_manage(post, user):
            raise Forbidden("You can only delete your own posts", "FORBIDDEN")

    def remove(self, post):
        self.repo.delete_post(post)

    def publish_due(self, now: datetime | None = None) -> int:
        now = now or utcnow()
        due = self.repo.due_scheduled(now)
        for post in due:
            post.status = POST_STATUS.move(post.status, "published")
        if due:
            self.repo.commit()
            logger.info(f"Published {len(due)} scheduled posts")
            SitemapService.request_ping()
        return len(due)

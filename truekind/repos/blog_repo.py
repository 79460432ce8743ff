# truekind/repos/blog_repo.py
from datetime import datetime

from sqlalchemy import delete, exists, func, select, update

from truekind.data.models.blog import (
    BlogAnalyticsEventModel,
    BlogCategoryModel,
    BlogCommentModel,
    BlogPostModel,
    BlogPostTagModel,
    BlogProductLinkModel,
    BlogTagModel,
)
from truekind.data.models.catalog import ProductModel
from truekind.data.models.user import UserModel
from truekind.repos.base import BaseRepo

PUBLISHED = "published"


def _apply_order(expression, order: str | None, default: str):
    return expression.asc() if (order or default) == "asc" else expression.desc()


class BlogPostRepo(BaseRepo):
    model = BlogPostModel
    label = "Post"
    unique_codes = {"slug": "SLUG_EXISTS"}
    search_columns = ("title", "excerpt", "content", "focus_keyword")

    def get_by_slug(self, slug: str) -> BlogPostModel | None:
        return self.db.execute(
            select(BlogPostModel).where(BlogPostModel.slug == slug)
        ).scalar_one_or_none()

    def list_posts(self, filters=(), tag_id: int | None = None, search: str | None = None,
                   sort: str | None = None, order: str | None = None, limit: int = 10, offset: int = 0):
        """Rows of (post, author name, author image, category name, category slug, comment count)."""
        comment_count = (
            select(func.count(BlogCommentModel.id))
            .where(BlogCommentModel.post_id == BlogPostModel.id, BlogCommentModel.status == "approved")
            .correlate(BlogPostModel)
            .scalar_subquery()
        )
        stmt = (
            select(
                BlogPostModel,
                UserModel.name,
                UserModel.image,
                BlogCategoryModel.name,
                BlogCategoryModel.slug,
                comment_count,
            )
            .outerjoin(UserModel, UserModel.id == BlogPostModel.author_id)
            .outerjoin(BlogCategoryModel, BlogCategoryModel.id == BlogPostModel.category_id)
            .where(*filters)
        )
        if tag_id is not None:
            stmt = stmt.where(
                exists().where(BlogPostTagModel.post_id == BlogPostModel.id, BlogPostTagModel.tag_id == tag_id)
            )
        if search:
            stmt = stmt.where(self.search_clause(search))

        published = func.coalesce(BlogPostModel.published_at, BlogPostModel.created_at)
        if sort == "oldest":
            primary = _apply_order(published, order, "asc")
        elif sort == "trending":
            primary = _apply_order(BlogPostModel.view_count + BlogPostModel.share_count, order, "desc")
        elif sort == "mostRead":
            primary = _apply_order(BlogPostModel.view_count, order, "desc")
        elif sort == "title":
            primary = _apply_order(BlogPostModel.title, order, "asc")
        else:
            primary = _apply_order(published, order, "desc")

        stmt = stmt.order_by(primary, BlogPostModel.id.desc()).limit(limit).offset(offset)
        return self.db.execute(stmt).all()

    def related(self, post: BlogPostModel, limit: int = 4):
        stmt = select(BlogPostModel).where(BlogPostModel.status == PUBLISHED, BlogPostModel.id != post.id)
        if post.category_id is not None:
            stmt = stmt.where(BlogPostModel.category_id == post.category_id)
        stmt = stmt.order_by(BlogPostModel.published_at.desc(), BlogPostModel.id.desc()).limit(limit)
        return self.db.execute(stmt).scalars().all()

    def linked_products(self, post_id: int):
        return self.db.execute(
            select(ProductModel, BlogProductLinkModel.position)
            .join(BlogProductLinkModel, BlogProductLinkModel.product_id == ProductModel.id)
            .where(BlogProductLinkModel.post_id == post_id)
            .order_by(BlogProductLinkModel.position, ProductModel.id)
        ).all()

    def replace_tags(self, post: BlogPostModel, tag_ids: list[int]):
        # existing rows are kept, the unit of work inserts before it deletes orphans
        current = {link.tag_id: link for link in post.tag_links}
        post.tag_links = [current.get(tag_id) or BlogPostTagModel(tag_id=tag_id) for tag_id in dict.fromkeys(tag_ids)]

    def replace_product_links(self, post: BlogPostModel, links: list[tuple[int, int]]):
        current = {link.product_id: link for link in post.product_links}
        kept = []
        for product_id, position in dict(links).items():
            link = current.get(product_id) or BlogProductLinkModel(product_id=product_id)
            link.position = position
            kept.append(link)
        post.product_links = kept

    def increment_views(self, post_id: int) -> int:
        return self._increment(post_id, view_count=BlogPostModel.view_count + 1)

    def increment_shares(self, post_id: int) -> int:
        return self._increment(post_id, share_count=BlogPostModel.share_count + 1)

    def _increment(self, post_id: int, **values) -> int:
        result = self.db.execute(update(BlogPostModel).where(BlogPostModel.id == post_id).values(**values))
        self.db.commit()
        return result.rowcount

    def due_scheduled(self, now: datetime):
        return self.db.execute(
            select(BlogPostModel).where(
                BlogPostModel.status == "scheduled",
                BlogPostModel.published_at <= now,
            )
        ).scalars().all()

    def delete_post(self, post: BlogPostModel):
        for dependent in (BlogAnalyticsEventModel, BlogPostTagModel, BlogProductLinkModel):
            self.db.execute(delete(dependent).where(dependent.post_id == post.id))
        # replies first, parents are referenced by them
        self.db.execute(
            delete(BlogCommentModel).where(
                BlogCommentModel.post_id == post.id, BlogCommentModel.parent_comment_id.is_not(None)
            )
        )
        self.db.execute(delete(BlogCommentModel).where(BlogCommentModel.post_id == post.id))
        self.db.expire(post)
        self.delete(post)


class _TaxonomyRepo(BaseRepo):
    sort_columns = {"name": "name", "createdAt": "created_at"}
    default_sort = ("name", "asc")
    search_columns = ("name",)

    def count_expression(self):
        raise NotImplementedError

    def list_with_counts(self, search: str | None = None, sort: str | None = None, order: str | None = None,
                         limit: int = 10, offset: int = 0, filters=()):
        post_count = self.count_expression()
        stmt = select(self.model, post_count).where(*filters)
        if search:
            stmt = stmt.where(self.search_clause(search))
        if sort == "postCount":
            stmt = stmt.order_by(_apply_order(post_count, order, "desc"), self.model.id.asc())
        else:
            stmt = stmt.order_by(*self.ordering(sort, order))
        return self.db.execute(stmt.limit(limit).offset(offset)).all()


class BlogCategoryRepo(_TaxonomyRepo):
    model = BlogCategoryModel
    label = "Blog category"
    unique_codes = {"name": "NAME_EXISTS", "slug": "SLUG_EXISTS"}
    search_columns = ("name", "description")

    def count_expression(self):
        return (
            select(func.count(BlogPostModel.id))
            .where(BlogPostModel.category_id == BlogCategoryModel.id, BlogPostModel.status == PUBLISHED)
            .correlate(BlogCategoryModel)
            .scalar_subquery()
        )

    def in_use(self, category_id: int) -> bool:
        return self.db.execute(select(exists().where(BlogPostModel.category_id == category_id))).scalar()


class BlogTagRepo(_TaxonomyRepo):
    model = BlogTagModel
    label = "Tag"
    unique_codes = {"name": "DUPLICATE_NAME", "slug": "DUPLICATE_SLUG"}

    def count_expression(self):
        return (
            select(func.count(BlogPostTagModel.id))
            .join(BlogPostModel, BlogPostModel.id == BlogPostTagModel.post_id)
            .where(BlogPostTagModel.tag_id == BlogTagModel.id, BlogPostModel.status == PUBLISHED)
            .correlate(BlogTagModel)
            .scalar_subquery()
        )

    def existing_ids(self, tag_ids) -> set[int]:
        return set(self.db.execute(select(BlogTagModel.id).where(BlogTagModel.id.in_(tag_ids))).scalars())

    def in_use(self, tag_id: int) -> bool:
        return self.db.execute(select(exists().where(BlogPostTagModel.tag_id == tag_id))).scalar()


class CommentRepo(BaseRepo):
    model = BlogCommentModel
    label = "Comment"
    search_columns = ("content",)
    sort_columns = {"createdAt": "created_at"}
    default_sort = ("created_at", "asc")

    def list_with_users(self, filters=(), search: str | None = None, sort: str | None = None,
                        order: str | None = None, limit: int = 10, offset: int = 0):
        stmt = (
            select(BlogCommentModel, UserModel.name, UserModel.image)
            .outerjoin(UserModel, UserModel.id == BlogCommentModel.author_id)
            .where(*filters)
        )
        if search:
            stmt = stmt.where(self.search_clause(search))
        stmt = stmt.order_by(*self.ordering(sort, order)).limit(limit).offset(offset)
        return self.db.execute(stmt).all()

    def has_replies(self, comment_id: int) -> bool:
        return self.db.execute(
            select(exists().where(BlogCommentModel.parent_comment_id == comment_id))
        ).scalar()


class AnalyticsRepo(BaseRepo):
    model = BlogAnalyticsEventModel
    label = "Analytics event"

    @staticmethod
    def _window(post_id: int, start: datetime | None, end: datetime | None):
        clauses = [BlogAnalyticsEventModel.post_id == post_id]
        if start is not None:
            clauses.append(BlogAnalyticsEventModel.created_at >= start)
        if end is not None:
            clauses.append(BlogAnalyticsEventModel.created_at <= end)
        return clauses

    def counts_by_event(self, post_id: int, start=None, end=None) -> dict[str, int]:
        rows = self.db.execute(
            select(BlogAnalyticsEventModel.event, func.count(BlogAnalyticsEventModel.id))
            .where(*self._window(post_id, start, end))
            .group_by(BlogAnalyticsEventModel.event)
        ).all()
        return {event: count for event, count in rows}

    def unique_sessions(self, post_id: int, start=None, end=None) -> int:
        return self.db.execute(
            select(func.count(func.distinct(BlogAnalyticsEventModel.session_id))).where(
                *self._window(post_id, start, end),
                BlogAnalyticsEventModel.session_id.is_not(None),
            )
        ).scalar_one()

    def events(self, post_id: int, start=None, end=None, limit: int = 10, offset: int = 0):
        return self.db.execute(
            select(BlogAnalyticsEventModel)
            .where(*self._window(post_id, start, end))
            .order_by(BlogAnalyticsEventModel.created_at.desc(), BlogAnalyticsEventModel.id.desc())
            .limit(limit)
            .offset(offset)
        ).scalars().all()

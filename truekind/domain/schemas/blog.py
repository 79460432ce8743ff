# truekind/domain/schemas/blog.py
from datetime import datetime
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_core import PydanticCustomError

from truekind.domain.schemas.common import SLUG_PATTERN, ApiModel, Payload, UpdatePayload
from truekind.domain.schemas.catalog import ProductOut
from truekind.domain.states import ANALYTICS_EVENTS

PostStatus = Literal["draft", "published", "scheduled"]
CommentStatus = Literal["pending", "approved", "rejected"]


# categories / tags

class BlogCategoryIn(Payload):
    name: str = Field(..., min_length=1, max_length=255)
    slug: str | None = Field(None, min_length=1, max_length=255, pattern=SLUG_PATTERN)
    description: str | None = None


class BlogCategoryUpdate(UpdatePayload):
    required_fields = ("name", "slug")

    name: str | None = Field(None, min_length=1, max_length=255)
    slug: str | None = Field(None, min_length=1, max_length=255, pattern=SLUG_PATTERN)
    description: str | None = None


class BlogCategoryOut(ApiModel):
    id: int
    name: str
    slug: str
    description: str | None = None
    post_count: int = 0
    created_at: datetime
    updated_at: datetime


class BlogTagIn(Payload):
    name: str = Field(..., min_length=1, max_length=255)
    slug: str | None = Field(None, min_length=1, max_length=255, pattern=SLUG_PATTERN)


class BlogTagUpdate(UpdatePayload):
    required_fields = ("name", "slug")

    name: str | None = Field(None, min_length=1, max_length=255)
    slug: str | None = Field(None, min_length=1, max_length=255, pattern=SLUG_PATTERN)


class BlogTagOut(ApiModel):
    id: int
    name: str
    slug: str
    post_count: int = 0
    created_at: datetime
    updated_at: datetime


class TagRef(ApiModel):
    id: int
    name: str
    slug: str


class CategoryRef(ApiModel):
    id: int
    name: str
    slug: str


# authors

class AuthorOut(ApiModel):
    id: str
    name: str
    email: str | None = None
    image: str | None = None
    bio: str | None = None
    avatar: str | None = None
    social_links: dict[str, Any] = Field(default_factory=dict)


# posts

class ProductLinkIn(Payload):
    product_id: int = Field(..., gt=0)
    position: int = Field(0, ge=0)


class _SeoFields(Payload):
    meta_title: str | None = Field(None, max_length=255)
    meta_description: str | None = Field(None, max_length=512)
    canonical_url: str | None = Field(None, max_length=1024)
    robots_meta: str | None = Field(None, max_length=64)
    og_title: str | None = Field(None, max_length=255)
    og_description: str | None = Field(None, max_length=512)
    og_image: str | None = Field(None, max_length=1024)
    twitter_title: str | None = Field(None, max_length=255)
    twitter_description: str | None = Field(None, max_length=512)
    twitter_image: str | None = Field(None, max_length=1024)
    focus_keyword: str | None = Field(None, max_length=255)
    seo_score: int | None = Field(None, ge=0, le=100)


class BlogPostIn(_SeoFields):
    title: str = Field(..., min_length=1, max_length=255)
    slug: str | None = Field(None, min_length=1, max_length=255, pattern=SLUG_PATTERN)
    excerpt: str | None = None
    content: str = Field(..., min_length=1)
    featured_image: str | None = Field(None, max_length=1024)
    featured_image_alt: str | None = Field(None, max_length=255)
    category_id: int | None = Field(None, gt=0)
    status: PostStatus = "draft"
    published_at: datetime | None = None
    tag_ids: list[int] = Field(default_factory=list)
    product_links: list[ProductLinkIn] = Field(default_factory=list)


class BlogPostUpdate(UpdatePayload, _SeoFields):
    required_fields = ("title", "slug", "content", "status", "tag_ids", "product_links")

    title: str | None = Field(None, min_length=1, max_length=255)
    slug: str | None = Field(None, min_length=1, max_length=255, pattern=SLUG_PATTERN)
    excerpt: str | None = None
    content: str | None = Field(None, min_length=1)
    featured_image: str | None = Field(None, max_length=1024)
    featured_image_alt: str | None = Field(None, max_length=255)
    category_id: int | None = Field(None, gt=0)
    status: PostStatus | None = None
    published_at: datetime | None = None
    tag_ids: list[int] | None = None
    product_links: list[ProductLinkIn] | None = None


class ProductLinkOut(ApiModel):
    product_id: int
    position: int


class BlogPostSummary(ApiModel):
    id: int
    title: str
    slug: str
    excerpt: str | None = None
    featured_image: str | None = None
    featured_image_alt: str | None = None
    author_id: str
    category_id: int | None = None
    status: str
    published_at: datetime | None = None
    read_time: int
    view_count: int
    share_count: int
    created_at: datetime
    updated_at: datetime


class BlogPostListItem(BlogPostSummary):
    author_name: str | None = None
    author_image: str | None = None
    category_name: str | None = None
    category_slug: str | None = None
    comment_count: int = 0


class BlogPostOut(BlogPostSummary):
    content: str
    meta_title: str | None = None
    meta_description: str | None = None
    canonical_url: str | None = None
    robots_meta: str | None = None
    og_title: str | None = None
    og_description: str | None = None
    og_image: str | None = None
    twitter_title: str | None = None
    twitter_description: str | None = None
    twitter_image: str | None = None
    focus_keyword: str | None = None
    seo_score: int | None = None
    tags: list[TagRef] = []
    product_links: list[ProductLinkOut] = []


class LinkedProduct(ProductOut):
    position: int


class BlogPostDetail(BlogPostOut):
    author: AuthorOut | None = None
    category: CategoryRef | None = None
    products: list[LinkedProduct] = []
    related_posts: list[BlogPostSummary] = []


# comments

class CommentIn(Payload):
    post_id: int = Field(..., gt=0)
    content: str = Field(..., min_length=1)
    parent_comment_id: int | None = Field(None, gt=0)
    author_name: str | None = Field(None, max_length=255)
    author_email: str | None = Field(None, max_length=255)


class CommentUpdate(UpdatePayload):
    required_fields = ("content", "status")

    content: str | None = Field(None, min_length=1)
    status: CommentStatus | None = None


class CommentOut(ApiModel):
    id: int
    post_id: int
    author_id: str | None = None
    author_name: str | None = None
    content: str
    status: str
    parent_comment_id: int | None = None
    created_at: datetime
    updated_at: datetime


class CommentListItem(CommentOut):
    user_name: str | None = None
    user_image: str | None = None


# analytics

class AnalyticsEventIn(Payload):
    # required, an explicit null or "" is reported as missing
    event: str | None = Field(...)
    metadata: dict[str, Any] | None = None
    session_id: str | None = Field(None, min_length=1, max_length=128)

    @field_validator("event")
    @classmethod
    def known_event(cls, value: str | None) -> str:
        if not value:
            raise PydanticCustomError("MISSING_EVENT", "event is required")
        if value not in ANALYTICS_EVENTS:
            raise PydanticCustomError(
                "INVALID_EVENT_TYPE",
                "Event must be one of: {allowed}",
                {"allowed": ", ".join(ANALYTICS_EVENTS)},
            )
        return value


class AnalyticsEventOut(ApiModel):
    id: int
    post_id: int
    event: str
    metadata: dict[str, Any] | None = None
    user_id: str | None = None
    session_id: str | None = None
    created_at: datetime


class ScrollEngagement(ApiModel):
    scroll50_percentage: int
    scroll100_percentage: int


class AnalyticsSummary(ApiModel):
    post_id: int
    total_pageviews: int
    total_shares: int
    product_clicks: int
    unique_sessions: int
    event_breakdown: dict[str, int]
    scroll_engagement: ScrollEngagement


class AnalyticsReport(ApiModel):
    summary: AnalyticsSummary
    events: list[AnalyticsEventOut]

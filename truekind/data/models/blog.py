from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from truekind.data.database import Base
from truekind.utils.clock import utcnow


class BlogCategoryModel(Base):
    __tablename__ = "blog_categories"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False, unique=True)
    slug = Column(String(255), nullable=False, unique=True)
    description = Column(Text)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)


class BlogTagModel(Base):
    __tablename__ = "blog_tags"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False, unique=True)
    slug = Column(String(255), nullable=False, unique=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)


class BlogPostModel(Base):
    __tablename__ = "blog_posts"

    id = Column(Integer, primary_key=True)
    title = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, unique=True)
    excerpt = Column(Text)
    content = Column(Text, nullable=False)
    featured_image = Column(String(1024))
    featured_image_alt = Column(String(255))
    author_id = Column(String(64), ForeignKey("users.id"), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("blog_categories.id"), index=True)

    status = Column(String(16), nullable=False, default="draft")  # draft | published | scheduled
    published_at = Column(DateTime(timezone=True), index=True)
    read_time = Column(Integer, nullable=False, default=0)
    view_count = Column(Integer, nullable=False, default=0)
    share_count = Column(Integer, nullable=False, default=0)

    # SEO
    meta_title = Column(String(255))
    meta_description = Column(String(512))
    canonical_url = Column(String(1024))
    robots_meta = Column(String(64))
    og_title = Column(String(255))
    og_description = Column(String(512))
    og_image = Column(String(1024))
    twitter_title = Column(String(255))
    twitter_description = Column(String(512))
    twitter_image = Column(String(1024))
    focus_keyword = Column(String(255))
    seo_score = Column(Integer)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    tag_links = relationship("BlogPostTagModel", cascade="all, delete-orphan", passive_deletes=True)
    tags = relationship("BlogTagModel", secondary="blog_post_tags", order_by="BlogTagModel.name", viewonly=True)
    product_links = relationship(
        "BlogProductLinkModel",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="BlogProductLinkModel.position",
    )


class BlogPostTagModel(Base):
    __tablename__ = "blog_post_tags"
    __table_args__ = (UniqueConstraint("post_id", "tag_id"),)

    id = Column(Integer, primary_key=True)
    post_id = Column(Integer, ForeignKey("blog_posts.id", ondelete="CASCADE"), nullable=False, index=True)
    tag_id = Column(Integer, ForeignKey("blog_tags.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)


class BlogProductLinkModel(Base):
    __tablename__ = "blog_product_links"
    __table_args__ = (UniqueConstraint("post_id", "product_id"),)

    id = Column(Integer, primary_key=True)
    post_id = Column(Integer, ForeignKey("blog_posts.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)


class BlogCommentModel(Base):
    __tablename__ = "blog_comments"

    id = Column(Integer, primary_key=True)
    post_id = Column(Integer, ForeignKey("blog_posts.id", ondelete="CASCADE"), nullable=False, index=True)
    author_id = Column(String(64), ForeignKey("users.id"), index=True)
    author_name = Column(String(255))
    author_email = Column(String(255))
    content = Column(Text, nullable=False)
    status = Column(String(16), nullable=False, default="pending")  # pending | approved | rejected
    parent_comment_id = Column(Integer, ForeignKey("blog_comments.id"), index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)


class BlogAnalyticsEventModel(Base):
    __tablename__ = "blog_analytics"

    id = Column(Integer, primary_key=True)
    post_id = Column(Integer, ForeignKey("blog_posts.id", ondelete="CASCADE"), nullable=False, index=True)
    event = Column(String(32), nullable=False, index=True)
    # "metadata" is reserved on declarative classes
    event_metadata = Column("metadata", JSON)
    user_id = Column(String(64), ForeignKey("users.id"))
    session_id = Column(String(128))
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from truekind.data.database import Base
from truekind.utils.clock import utcnow


class CartItemModel(Base):
    """A cart line owned by a signed-in user or by an anonymous session id."""

    __tablename__ = "cart_items"
    __table_args__ = (
        UniqueConstraint("session_id", "product_id"),
        UniqueConstraint("user_id", "product_id"),
    )

    id = Column(Integer, primary_key=True)
    session_id = Column(String(128), index=True)
    user_id = Column(String(64), ForeignKey("users.id"), index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False)

    quantity = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    product = relationship("ProductModel", lazy="joined")


class WishlistItemModel(Base):
    __tablename__ = "wishlist_items"
    __table_args__ = (
        UniqueConstraint("session_id", "product_id"),
        UniqueConstraint("user_id", "product_id"),
    )

    id = Column(Integer, primary_key=True)
    session_id = Column(String(128), index=True)
    user_id = Column(String(64), ForeignKey("users.id"), index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    product = relationship("ProductModel", lazy="joined")

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from truekind.data.database import Base
from truekind.utils.clock import utcnow


class CouponModel(Base):
    __tablename__ = "coupons"

    id = Column(Integer, primary_key=True)
    code = Column(String(64), nullable=False, unique=True)
    description = Column(Text)
    discount_type = Column(String(16), nullable=False)  # percentage | fixed
    discount_value = Column(Numeric(10, 2), nullable=False)
    min_purchase_amount = Column(Numeric(10, 2))
    max_discount_amount = Column(Numeric(10, 2))
    usage_limit = Column(Integer)
    used_count = Column(Integer, nullable=False, default=0)
    valid_from = Column(DateTime(timezone=True), nullable=False)
    valid_until = Column(DateTime(timezone=True), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    order_number = Column(String(64), nullable=False, unique=True)
    user_id = Column(String(64), ForeignKey("users.id"), index=True)
    session_id = Column(String(128), index=True)

    status = Column(String(16), nullable=False, default="pending")
    payment_status = Column(String(16), nullable=False, default="pending")

    subtotal = Column(Numeric(10, 2), nullable=False)
    discount_amount = Column(Numeric(10, 2), nullable=False, default=0)
    tax_amount = Column(Numeric(10, 2), nullable=False, default=0)
    shipping_amount = Column(Numeric(10, 2), nullable=False, default=0)
    total_amount = Column(Numeric(10, 2), nullable=False)

    coupon_code = Column(String(64))
    payment_method = Column(String(32), nullable=False)
    gateway_order_id = Column(String(128), unique=True)
    payment_reference = Column(String(128))
    shipping_address = Column(Text, nullable=False)
    billing_address = Column(Text)
    tracking_number = Column(String(128))
    notes = Column(Text)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    items = relationship("OrderItemModel", lazy="selectin", order_by="OrderItemModel.id", passive_deletes=True)


class OrderItemModel(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)
    total_price = Column(Numeric(10, 2), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

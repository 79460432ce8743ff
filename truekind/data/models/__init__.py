# import all models so SQLAlchemy registers them on Base.metadata

from truekind.data.models.user import UserModel, AuthorProfileModel
from truekind.data.models.catalog import (
    CategoryModel,
    BrandModel,
    ProductModel,
    ProductImageModel,
    ReviewModel,
)
from truekind.data.models.commerce import CouponModel, OrderModel, OrderItemModel
from truekind.data.models.cart_item import CartItemModel, WishlistItemModel
from truekind.data.models.blog import (
    BlogCategoryModel,
    BlogTagModel,
    BlogPostModel,
    BlogPostTagModel,
    BlogProductLinkModel,
    BlogCommentModel,
    BlogAnalyticsEventModel,
)

__all__ = [
    "UserModel",
    "AuthorProfileModel",
    "CategoryModel",
    "BrandModel",
    "ProductModel",
    "ProductImageModel",
    "ReviewModel",
    "CouponModel",
    "OrderModel",
    "OrderItemModel",
    "CartItemModel",
    "WishlistItemModel",
    "BlogCategoryModel",
    "BlogTagModel",
    "BlogPostModel",
    "BlogPostTagModel",
    "BlogProductLinkModel",
    "BlogCommentModel",
    "BlogAnalyticsEventModel",
]

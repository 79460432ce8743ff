# truekind/repos/catalog_repo.py
from sqlalchemy import delete, exists, func, select, update

from truekind.data.models.blog import BlogProductLinkModel
from truekind.data.models.cart_item import CartItemModel, WishlistItemModel
from truekind.data.models.catalog import (
    BrandModel,
    CategoryModel,
    ProductImageModel,
    ProductModel,
    ReviewModel,
)
from truekind.data.models.commerce import OrderItemModel
from truekind.repos.base import BaseRepo


class CategoryRepo(BaseRepo):
    model = CategoryModel
    label = "Category"
    unique_codes = {"slug": "SLUG_EXISTS"}
    search_columns = ("name", "description")
    sort_columns = {"name": "name", "createdAt": "created_at"}
    default_sort = ("name", "asc")

    def has_children(self, category_id: int) -> bool:
        return self.db.execute(
            select(exists().where(CategoryModel.parent_id == category_id))
        ).scalar()

    def has_products(self, category_id: int) -> bool:
        return self.db.execute(
            select(exists().where(ProductModel.category_id == category_id))
        ).scalar()

    def ancestor_ids(self, category_id: int) -> list[int]:
        """Parents of a category, nearest first."""
        seen = []
        current = self.get(category_id)
        while current is not None and current.parent_id is not None and current.parent_id not in seen:
            seen.append(current.parent_id)
            current = self.get(current.parent_id)
        return seen


class BrandRepo(BaseRepo):
    model = BrandModel
    label = "Brand"
    unique_codes = {"name": "DUPLICATE_NAME", "slug": "DUPLICATE_SLUG"}
    search_columns = ("name", "description")
    sort_columns = {"name": "name", "createdAt": "created_at"}
    default_sort = ("name", "asc")

    def has_products(self, brand_id: int) -> bool:
        return self.db.execute(
            select(exists().where(ProductModel.brand_id == brand_id))
        ).scalar()


class ProductRepo(BaseRepo):
    model = ProductModel
    label = "Product"
    unique_codes = {"slug": "DUPLICATE_SLUG", "sku": "DUPLICATE_SKU"}
    search_columns = ("name", "description", "short_description", "sku")
    sort_columns = {
        "name": "name",
        "price": "price",
        "rating": "rating",
        "stockQuantity": "stock_quantity",
        "createdAt": "created_at",
    }

    def get_many(self, product_ids) -> dict[int, ProductModel]:
        rows = self.db.execute(select(ProductModel).where(ProductModel.id.in_(product_ids))).scalars()
        return {p.id: p for p in rows}

    def has_order_items(self, product_id: int) -> bool:
        return self.db.execute(
            select(exists().where(OrderItemModel.product_id == product_id))
        ).scalar()

    def delete_with_dependents(self, product: ProductModel):
        for dependent in (ProductImageModel, ReviewModel, CartItemModel, WishlistItemModel, BlogProductLinkModel):
            self.db.execute(delete(dependent).where(dependent.product_id == product.id))
        self.delete(product)

    def reserve_stock(self, product_id: int, quantity: int) -> int:
        """Conditional decrement, 0 rows means not enough stock. Caller commits."""
        result = self.db.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id, ProductModel.stock_quantity >= quantity)
            .values(stock_quantity=ProductModel.stock_quantity - quantity)
        )
        return result.rowcount

    def release_stock(self, product_id: int, quantity: int):
        self.db.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id)
            .values(stock_quantity=ProductModel.stock_quantity + quantity)
        )

    def refresh_rating(self, product_id: int):
        avg, count = self.db.execute(
            select(func.avg(ReviewModel.rating), func.count(ReviewModel.id)).where(
                ReviewModel.product_id == product_id
            )
        ).one()
        self.db.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id)
            .values(
                rating=round(float(avg), 1) if avg is not None else None,
                review_count=count,
            )
        )
        self.db.commit()


class ProductImageRepo(BaseRepo):
    model = ProductImageModel
    label = "Product image"
    sort_columns = {"displayOrder": "display_order", "createdAt": "created_at"}
    default_sort = ("display_order", "asc")

    def clear_primary(self, product_id: int, keep_id: int | None = None):
        stmt = update(ProductImageModel).where(
            ProductImageModel.product_id == product_id,
            ProductImageModel.is_primary.is_(True),
        )
        if keep_id is not None:
            stmt = stmt.where(ProductImageModel.id != keep_id)
        self.db.execute(stmt.values(is_primary=False))


class ReviewRepo(BaseRepo):
    model = ReviewModel
    label = "Review"
    search_columns = ("title", "comment")
    sort_columns = {"createdAt": "created_at", "rating": "rating", "helpfulCount": "helpful_count"}

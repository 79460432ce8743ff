# truekind/services/catalog_service.py
from decimal import Decimal

from sqlalchemy.orm import Session

from truekind.data.models.catalog import (
    BrandModel,
    CategoryModel,
    ProductImageModel,
    ProductModel,
    ReviewModel,
)
from truekind.domain.errors import Conflict, Forbidden, InvalidRequest
from truekind.domain.schemas.catalog import (
    BrandIn,
    BrandOut,
    BrandUpdate,
    CategoryIn,
    CategoryOut,
    CategoryUpdate,
    ProductImageIn,
    ProductImageOut,
    ProductImageUpdate,
    ProductIn,
    ProductOut,
    ProductUpdate,
    ReviewIn,
    ReviewOut,
    ReviewUpdate,
)
from truekind.domain.schemas.common import SessionUser
from truekind.repos.catalog_repo import (
    BrandRepo,
    CategoryRepo,
    ProductImageRepo,
    ProductRepo,
    ReviewRepo,
)
from truekind.services.base import CrudService, build_filters, require_changes
from truekind.utils.logging import get_logger

logger = get_logger(__name__)


class CategoryService(CrudService):
    repo_class = CategoryRepo
    out_schema = CategoryOut
    not_found = ("Category not found", "CATEGORY_NOT_FOUND")
    deleted_name = "Category"

    def list(self, page: dict, parent_id=None):
        return self.repo.list(filters=build_filters((CategoryModel.parent_id, parent_id)), **page)

    def _check_parent(self, parent_id: int | None, category_id: int | None = None):
        if parent_id is None:
            return
        if parent_id == category_id:
            raise InvalidRequest("Category cannot be its own parent", "SELF_REFERENCE")
        self.require_reference(self.repo, parent_id, "Parent category not found", "PARENT_NOT_FOUND")
        if category_id is not None and category_id in self.repo.ancestor_ids(parent_id):
            raise InvalidRequest("Parent would create a cycle in the category tree", "CIRCULAR_REFERENCE")

    def create(self, payload: CategoryIn) -> CategoryModel:
        self._check_parent(payload.parent_id)
        category = self.repo.add(CategoryModel(**payload.model_dump()))
        logger.info(f"Category {category.id} created ({category.slug})")
        return category

    def update(self, category_id: int, payload: CategoryUpdate) -> CategoryModel:
        category = self.get(category_id)
        changes = require_changes(payload.changes())
        if "parent_id" in changes:
            self._check_parent(changes["parent_id"], category_id)
        return self.repo.update(category, changes)

    def check_delete(self, category, user=None):
        if self.repo.has_children(category.id):
            raise Conflict("Category has child categories", "HAS_CHILDREN")
        if self.repo.has_products(category.id):
            raise Conflict("Category is assigned to products", "CATEGORY_IN_USE")


class BrandService(CrudService):
    repo_class = BrandRepo
    out_schema = BrandOut
    not_found = ("Brand not found", "BRAND_NOT_FOUND")
    deleted_name = "Brand"

    def list(self, page: dict, is_featured: bool | None = None):
        return self.repo.list(filters=build_filters((BrandModel.is_featured, is_featured)), **page)

    def create(self, payload: BrandIn) -> BrandModel:
        brand = self.repo.add(BrandModel(**payload.model_dump()))
        logger.info(f"Brand {brand.id} created ({brand.slug})")
        return brand

    def update(self, brand_id: int, payload: BrandUpdate) -> BrandModel:
        brand = self.get(brand_id)
        return self.repo.update(brand, require_changes(payload.changes()))

    def check_delete(self, brand, user=None):
        if self.repo.has_products(brand.id):
            raise Conflict("Brand is assigned to products", "BRAND_IN_USE")


class ProductService(CrudService):
    repo_class = ProductRepo
    out_schema = ProductOut
    not_found = ("Product not found", "PRODUCT_NOT_FOUND")
    deleted_name = "Product"

    def __init__(self, db: Session):
        super().__init__(db)
        self.categories = CategoryRepo(db)
        self.brands = BrandRepo(db)

    def list(
        self,
        page: dict,
        category_id=None,
        brand_id=None,
        is_featured: bool | None = None,
        is_new: bool | None = None,
        min_price: Decimal | None = None,
        max_price: Decimal | None = None,
        in_stock: bool | None = None,
    ):
        filters = build_filters(
            (ProductModel.category_id, category_id),
            (ProductModel.brand_id, brand_id),
            (ProductModel.is_featured, is_featured),
            (ProductModel.is_new, is_new),
        )
        if min_price is not None:
            filters.append(ProductModel.price >= min_price)
        if max_price is not None:
            filters.append(ProductModel.price <= max_price)
        if in_stock is True:
            filters.append(ProductModel.stock_quantity > 0)
        elif in_stock is False:
            filters.append(ProductModel.stock_quantity <= 0)
        return self.repo.list(filters=filters, **page)

    def _check_references(self, data: dict):
        if data.get("category_id") is not None:
            self.require_reference(self.categories, data["category_id"], "Category not found", "CATEGORY_NOT_FOUND")
        if data.get("brand_id") is not None:
            self.require_reference(self.brands, data["brand_id"], "Brand not found", "BRAND_NOT_FOUND")

    def create(self, payload: ProductIn) -> ProductModel:
        data = payload.model_dump()
        self._check_references(data)
        product = self.repo.add(ProductModel(**data))
        logger.info(f"Product {product.id} created (sku={product.sku})")
        return product

    def update(self, product_id: int, payload: ProductUpdate) -> ProductModel:
        product = self.get(product_id)
        changes = require_changes(payload.changes())
        self._check_references(changes)
        return self.repo.update(product, changes)

    def check_delete(self, product, user=None):
        if self.repo.has_order_items(product.id):
            raise Conflict("Product appears in orders and cannot be deleted", "PRODUCT_IN_ORDERS")

    def remove(self, product):
        self.repo.delete_with_dependents(product)


class ProductImageService(CrudService):
    repo_class = ProductImageRepo
    out_schema = ProductImageOut
    not_found = ("Product image not found", "PRODUCT_IMAGE_NOT_FOUND")
    deleted_name = "Product image"

    def __init__(self, db: Session):
        super().__init__(db)
        self.products = ProductRepo(db)

    def list(self, page: dict, product_id=None, is_primary: bool | None = None):
        filters = build_filters(
            (ProductImageModel.product_id, product_id),
            (ProductImageModel.is_primary, is_primary),
        )
        return self.repo.list(filters=filters, **page)

    def create(self, payload: ProductImageIn) -> ProductImageModel:
        self.require_reference(self.products, payload.product_id, "Product not found", "PRODUCT_NOT_FOUND")
        if payload.is_primary:
            # one primary image per product
            self.repo.clear_primary(payload.product_id)
        return self.repo.add(ProductImageModel(**payload.model_dump()))

    def update(self, image_id: int, payload: ProductImageUpdate) -> ProductImageModel:
        image = self.get(image_id)
        changes = require_changes(payload.changes())
        if "product_id" in changes:
            self.require_reference(self.products, changes["product_id"], "Product not found", "PRODUCT_NOT_FOUND")
        if changes.get("is_primary"):
            self.repo.clear_primary(changes.get("product_id", image.product_id), keep_id=image.id)
        return self.repo.update(image, changes)


class ReviewService(CrudService):
    repo_class = ReviewRepo
    out_schema = ReviewOut
    not_found = ("Review not found", "REVIEW_NOT_FOUND")
    deleted_name = "Review"

    OWNER_FIELDS = {"rating", "title", "comment"}
    STAFF_FIELDS = {"is_verified", "helpful_count"}

    def __init__(self, db: Session):
        super().__init__(db)
        self.products = ProductRepo(db)

    def list(self, page: dict, product_id=None, user_id: str | None = None,
             rating: int | None = None, is_verified: bool | None = None):
        filters = build_filters(
            (ReviewModel.product_id, product_id),
            (ReviewModel.user_id, user_id),
            (ReviewModel.rating, rating),
            (ReviewModel.is_verified, is_verified),
        )
        return self.repo.list(filters=filters, **page)

    def create(self, payload: ReviewIn, user: SessionUser) -> ReviewModel:
        self.require_reference(self.products, payload.product_id, "Product not found", "PRODUCT_NOT_FOUND")
        review = self.repo.add(ReviewModel(**payload.model_dump(), user_id=user.id))
        self.products.refresh_rating(review.product_id)
        logger.info(f"Review {review.id} added to product {review.product_id} by {user.id}")
        return review

    def update(self, review_id: int, payload: ReviewUpdate, user: SessionUser) -> ReviewModel:
        review = self.get(review_id)
        changes = require_changes(payload.changes())
        if self.OWNER_FIELDS & changes.keys() and review.user_id != user.id:
            raise Forbidden("Only the author can edit this review", "FORBIDDEN")
        if self.STAFF_FIELDS & changes.keys() and not user.is_staff:
            raise Forbidden("Only staff can verify or score reviews", "FORBIDDEN")
        review = self.repo.update(review, changes)
        if "rating" in changes:
            self.products.refresh_rating(review.product_id)
            self.db.refresh(review)
        return review

    def check_delete(self, review, user=None):
        if review.user_id != user.id and not user.is_staff:
            raise Forbidden("Only the author can delete this review", "FORBIDDEN")

    def remove(self, review):
        product_id = review.product_id
        self.repo.delete(review)
        self.products.refresh_rating(product_id)

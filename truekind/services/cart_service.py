# truekind/services/cart_service.py
from sqlalchemy.orm import Session

from truekind.data.models.cart_item import CartItemModel, WishlistItemModel
from truekind.domain.errors import Conflict, Forbidden
from truekind.domain.schemas.commerce import (
    CartItemIn,
    CartItemOut,
    CartItemUpdate,
    WishlistItemIn,
    WishlistItemOut,
)
from truekind.domain.schemas.common import SessionUser
from truekind.repos.catalog_repo import ProductRepo
from truekind.repos.commerce_repo import CartRepo, WishlistRepo
from truekind.services.base import CrudService, require_changes
from truekind.services.order_service import missing_identifier
from truekind.utils.logging import get_logger

logger = get_logger(__name__)


class _OwnedItems(CrudService):
    """Items keyed by the signed-in user, or by an anonymous sessionId for guests."""

    def __init__(self, db: Session):
        super().__init__(db)
        self.products = ProductRepo(db)

    def owner(self, user: SessionUser | None, session_id: str | None):
        """(where clause, owner columns) for the caller."""
        model = self.repo.model
        if user is not None:
            return model.user_id == user.id, {"user_id": user.id, "session_id": None}
        if session_id:
            return model.session_id == session_id, {"user_id": None, "session_id": session_id}
        raise missing_identifier()

    def list(self, page: dict, user: SessionUser | None, session_id: str | None, product_id: int | None = None):
        where, _ = self.owner(user, session_id)
        filters = [where]
        if product_id is not None:
            filters.append(self.repo.model.product_id == product_id)
        return self.repo.list(filters=filters, **page)

    def get_owned(self, item_id: int, user: SessionUser | None, session_id: str | None):
        item = self.get(item_id)
        _, owner = self.owner(user, session_id)
        if item.user_id != owner["user_id"] or item.session_id != owner["session_id"]:
            raise Forbidden("This item belongs to another shopper", "FORBIDDEN")
        return item

    def delete(self, item_id: int, user: SessionUser | None = None, session_id: str | None = None):
        item = self.get_owned(item_id, user, session_id)
        snapshot = self.out_schema.model_validate(item)
        self.repo.delete(item)
        logger.info(f"{self.deleted_name} {item_id} removed")
        return snapshot

    def _require_product(self, product_id: int):
        self.require_reference(self.products, product_id, "Product not found", "PRODUCT_NOT_FOUND")


class CartService(_OwnedItems):
    repo_class = CartRepo
    out_schema = CartItemOut
    not_found = ("Cart item not found", "CART_ITEM_NOT_FOUND")
    deleted_name = "Cart item"

    def add_item(self, payload: CartItemIn, user: SessionUser | None) -> tuple[CartItemModel, bool]:
        """Adds the product or increases the quantity of its existing line. Returns (item, created)."""
        where, owner = self.owner(user, payload.session_id)
        self._require_product(payload.product_id)

        existing = self.repo.get_line(where, payload.product_id)
        if existing is None:
            try:
                item = self.repo.add(
                    CartItemModel(product_id=payload.product_id, quantity=payload.quantity, **owner)
                )
                logger.info(f"Cart line {item.id} created for product {payload.product_id}")
                return item, True
            except Conflict:
                # a concurrent request created the line first
                existing = self.repo.get_line(where, payload.product_id)
                if existing is None:
                    raise

        logger.info(
            f"Product {payload.product_id} already in cart, quantity "
            f"{existing.quantity} -> {existing.quantity + payload.quantity}"
        )
        self.repo.increment(existing.id, payload.quantity)
        self.db.refresh(existing)
        return existing, False

    def update(self, item_id: int, payload: CartItemUpdate, user: SessionUser | None,
               session_id: str | None) -> CartItemModel:
        item = self.get_owned(item_id, user, session_id)
        return self.repo.update(item, require_changes(payload.changes()))


class WishlistService(_OwnedItems):
    repo_class = WishlistRepo
    out_schema = WishlistItemOut
    not_found = ("Wishlist item not found", "WISHLIST_ITEM_NOT_FOUND")
    deleted_name = "Wishlist item"

    def add_item(self, payload: WishlistItemIn, user: SessionUser | None) -> WishlistItemModel:
        _, owner = self.owner(user, payload.session_id)
        self._require_product(payload.product_id)
        item = self.repo.add(WishlistItemModel(product_id=payload.product_id, **owner))
        logger.info(f"Wishlist line {item.id} created for product {payload.product_id}")
        return item

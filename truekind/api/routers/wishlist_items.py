# truekind/api/routers/wishlist_items.py
from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from truekind.api.deps import ListParams, deleted, get_current_user
from truekind.data.database import get_db
from truekind.domain.schemas.commerce import WishlistItemIn, WishlistItemOut
from truekind.domain.schemas.common import SessionUser
from truekind.services.cart_service import WishlistService

router = APIRouter(prefix="/wishlist-items", tags=["wishlist"])


def get_service(db: Session):
    return WishlistService(db)


@router.get("", response_model=list[WishlistItemOut] | WishlistItemOut)
def list_wishlist_items(
    id: int | None = Query(None),
    session_id: str | None = Query(None, alias="sessionId"),
    product_id: int | None = Query(None, alias="productId"),
    params: ListParams = Depends(),
    user: SessionUser | None = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    if id is not None:
        return svc.get_owned(id, user, session_id)
    return svc.list(params.page(), user, session_id, product_id=product_id)


@router.get("/{id}", response_model=WishlistItemOut)
def get_wishlist_item(
    item_id: int = Path(..., alias="id"),
    session_id: str | None = Query(None, alias="sessionId"),
    user: SessionUser | None = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_service(db).get_owned(item_id, user, session_id)


@router.post("", response_model=WishlistItemOut, status_code=201)
def add_wishlist_item(
    payload: WishlistItemIn,
    user: SessionUser | None = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_service(db).add_item(payload, user)


@router.delete("/{id}")
def delete_wishlist_item(
    item_id: int = Path(..., alias="id"),
    session_id: str | None = Query(None, alias="sessionId"),
    user: SessionUser | None = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return deleted("Wishlist item removed", "wishlistItem", get_service(db).delete(item_id, user, session_id))

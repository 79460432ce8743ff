# truekind/api/routers/cart_items.py
from fastapi import APIRouter, Depends, Path, Query, Response
from sqlalchemy.orm import Session

from truekind.api.deps import ListParams, deleted, get_current_user
from truekind.data.database import get_db
from truekind.domain.schemas.commerce import CartItemIn, CartItemOut, CartItemUpdate
from truekind.domain.schemas.common import SessionUser
from truekind.services.cart_service import CartService

router = APIRouter(prefix="/cart-items", tags=["cart"])


def get_service(db: Session):
    return CartService(db)


@router.get("", response_model=list[CartItemOut] | CartItemOut)
def list_cart_items(
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


@router.get("/{id}", response_model=CartItemOut)
def get_cart_item(
    item_id: int = Path(..., alias="id"),
    session_id: str | None = Query(None, alias="sessionId"),
    user: SessionUser | None = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_service(db).get_owned(item_id, user, session_id)


@router.post("", response_model=CartItemOut, status_code=201)
def add_cart_item(
    payload: CartItemIn,
    response: Response,
    user: SessionUser | None = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """201 for a new line, 200 when an existing line's quantity was increased."""
    item, created = get_service(db).add_item(payload, user)
    if not created:
        response.status_code = 200
    return item


@router.put("/{id}", response_model=CartItemOut)
def update_cart_item(
    payload: CartItemUpdate,
    item_id: int = Path(..., alias="id"),
    session_id: str | None = Query(None, alias="sessionId"),
    user: SessionUser | None = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_service(db).update(item_id, payload, user, session_id)


@router.delete("/{id}")
def delete_cart_item(
    item_id: int = Path(..., alias="id"),
    session_id: str | None = Query(None, alias="sessionId"),
    user: SessionUser | None = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return deleted("Cart item removed", "cartItem", get_service(db).delete(item_id, user, session_id))

# truekind/api/routers/orders.py
from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from truekind.api.deps import ListParams, deleted, get_current_user, require_staff, require_user
from truekind.data.database import get_db
from truekind.domain.schemas.commerce import OrderIn, OrderOut, OrderUpdate
from truekind.domain.schemas.common import SessionUser
from truekind.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(db: Session):
    return OrderService(db)


@router.get("", response_model=list[OrderOut] | OrderOut)
def list_orders(
    id: int | None = Query(None),
    session_id: str | None = Query(None, alias="sessionId"),
    status: str | None = Query(None),
    payment_status: str | None = Query(None, alias="paymentStatus"),
    params: ListParams = Depends(),
    user: SessionUser | None = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Staff see every order, shoppers their own (by account or guest sessionId)."""
    svc = get_service(db)
    if id is not None:
        return svc.get_for(id, user, session_id)
    return svc.list(params.page(), user, session_id=session_id, status=status, payment_status=payment_status)


@router.get("/{id}", response_model=OrderOut)
def get_order(
    order_id: int = Path(..., alias="id"),
    session_id: str | None = Query(None, alias="sessionId"),
    user: SessionUser | None = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_service(db).get_for(order_id, user, session_id)


@router.post("", response_model=OrderOut, status_code=201)
def create_order(
    payload: OrderIn,
    user: SessionUser | None = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Places an order: lines, stock reservation and coupon redemption in one transaction.
    A notification is queued once it commits.
    """
    return get_service(db).create(payload, user)


@router.put("/{id}", response_model=OrderOut)
def update_order(
    payload: OrderUpdate,
    order_id: int = Path(..., alias="id"),
    user: SessionUser = Depends(require_user),
    db: Session = Depends(get_db),
):
    return get_service(db).update(order_id, payload, user)


@router.delete("/{id}")
def delete_order(
    order_id: int = Path(..., alias="id"),
    user: SessionUser = Depends(require_staff),
    db: Session = Depends(get_db),
):
    return deleted("Order deleted", "order", get_service(db).delete(order_id, user))

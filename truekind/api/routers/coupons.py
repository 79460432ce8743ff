# truekind/api/routers/coupons.py
from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from truekind.api.deps import ListParams, deleted, require_staff
from truekind.data.database import get_db
from truekind.domain.schemas.commerce import CouponIn, CouponOut, CouponQuote, CouponUpdate, CouponValidateIn
from truekind.domain.schemas.common import SessionUser
from truekind.services.coupon_service import CouponService

router = APIRouter(prefix="/coupons", tags=["coupons"])


def get_service(db: Session):
    return CouponService(db)


@router.get("", response_model=list[CouponOut] | CouponOut)
def list_coupons(
    id: int | None = Query(None),
    code: str | None = Query(None),
    is_active: bool | None = Query(None, alias="isActive"),
    discount_type: str | None = Query(None, alias="discountType"),
    params: ListParams = Depends(),
    user: SessionUser = Depends(require_staff),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    if id is not None:
        return svc.get(id)
    return svc.list(params.page(), is_active=is_active, discount_type=discount_type, code=code)


@router.post("/validate", response_model=CouponQuote)
def validate_coupon(payload: CouponValidateIn, db: Session = Depends(get_db)):
    """Checks a code against a cart subtotal without redeeming it."""
    return get_service(db).quote(payload.code, payload.subtotal)


@router.get("/{id}", response_model=CouponOut)
def get_coupon(
    coupon_id: int = Path(..., alias="id"),
    user: SessionUser = Depends(require_staff),
    db: Session = Depends(get_db),
):
    return get_service(db).get(coupon_id)


@router.post("", response_model=CouponOut, status_code=201)
def create_coupon(payload: CouponIn, user: SessionUser = Depends(require_staff), db: Session = Depends(get_db)):
    return get_service(db).create(payload)


@router.put("/{id}", response_model=CouponOut)
def update_coupon(
    payload: CouponUpdate,
    coupon_id: int = Path(..., alias="id"),
    user: SessionUser = Depends(require_staff),
    db: Session = Depends(get_db),
):
    return get_service(db).update(coupon_id, payload)


@router.delete("/{id}")
def delete_coupon(
    coupon_id: int = Path(..., alias="id"),
    user: SessionUser = Depends(require_staff),
    db: Session = Depends(get_db),
):
    return deleted("Coupon deleted", "coupon", get_service(db).delete(coupon_id, user))

# truekind/api/routers/reviews.py
from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from truekind.api.deps import ListParams, deleted, id_filter, require_user
from truekind.data.database import get_db
from truekind.domain.schemas.catalog import ReviewIn, ReviewOut, ReviewUpdate
from truekind.domain.schemas.common import SessionUser
from truekind.services.catalog_service import ReviewService

router = APIRouter(prefix="/reviews", tags=["reviews"])


def get_service(db: Session):
    return ReviewService(db)


@router.get("", response_model=list[ReviewOut] | ReviewOut)
def list_reviews(
    id: int | None = Query(None),
    product_id: str | None = Query(None, alias="productId"),
    user_id: str | None = Query(None, alias="userId"),
    rating: int | None = Query(None, ge=1, le=5),
    is_verified: bool | None = Query(None, alias="isVerified"),
    params: ListParams = Depends(),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    if id is not None:
        return svc.get(id)
    return svc.list(
        params.page(),
        product_id=id_filter(product_id, "productId"),
        user_id=user_id,
        rating=rating,
        is_verified=is_verified,
    )


@router.get("/{id}", response_model=ReviewOut)
def get_review(review_id: int = Path(..., alias="id"), db: Session = Depends(get_db)):
    return get_service(db).get(review_id)


@router.post("", response_model=ReviewOut, status_code=201)
def create_review(payload: ReviewIn, user: SessionUser = Depends(require_user), db: Session = Depends(get_db)):
    return get_service(db).create(payload, user)


@router.put("/{id}", response_model=ReviewOut)
def update_review(
    payload: ReviewUpdate,
    review_id: int = Path(..., alias="id"),
    user: SessionUser = Depends(require_user),
    db: Session = Depends(get_db),
):
    return get_service(db).update(review_id, payload, user)


@router.delete("/{id}")
def delete_review(
    review_id: int = Path(..., alias="id"),
    user: SessionUser = Depends(require_user),
    db: Session = Depends(get_db),
):
    return deleted("Review deleted", "review", get_service(db).delete(review_id, user))

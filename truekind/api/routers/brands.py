# truekind/api/routers/brands.py
from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from truekind.api.deps import ListParams, deleted, require_staff
from truekind.data.database import get_db
from truekind.domain.schemas.catalog import BrandIn, BrandOut, BrandUpdate
from truekind.domain.schemas.common import SessionUser
from truekind.services.catalog_service import BrandService

router = APIRouter(prefix="/brands", tags=["brands"])


def get_service(db: Session):
    return BrandService(db)


@router.get("", response_model=list[BrandOut] | BrandOut)
def list_brands(
    id: int | None = Query(None),
    is_featured: bool | None = Query(None, alias="isFeatured"),
    params: ListParams = Depends(),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    if id is not None:
        return svc.get(id)
    return svc.list(params.page(), is_featured=is_featured)


@router.get("/{id}", response_model=BrandOut)
def get_brand(brand_id: int = Path(..., alias="id"), db: Session = Depends(get_db)):
    return get_service(db).get(brand_id)


@router.post("", response_model=BrandOut, status_code=201)
def create_brand(payload: BrandIn, user: SessionUser = Depends(require_staff), db: Session = Depends(get_db)):
    return get_service(db).create(payload)


@router.put("/{id}", response_model=BrandOut)
def update_brand(
    payload: BrandUpdate,
    brand_id: int = Path(..., alias="id"),
    user: SessionUser = Depends(require_staff),
    db: Session = Depends(get_db),
):
    return get_service(db).update(brand_id, payload)


@router.delete("/{id}")
def delete_brand(
    brand_id: int = Path(..., alias="id"),
    user: SessionUser = Depends(require_staff),
    db: Session = Depends(get_db),
):
    return deleted("Brand deleted", "brand", get_service(db).delete(brand_id, user))

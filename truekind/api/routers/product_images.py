# truekind/api/routers/product_images.py
from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from truekind.api.deps import ListParams, deleted, id_filter, require_staff
from truekind.data.database import get_db
from truekind.domain.schemas.catalog import ProductImageIn, ProductImageOut, ProductImageUpdate
from truekind.domain.schemas.common import SessionUser
from truekind.services.catalog_service import ProductImageService

router = APIRouter(prefix="/product-images", tags=["product-images"])


def get_service(db: Session):
    return ProductImageService(db)


@router.get("", response_model=list[ProductImageOut] | ProductImageOut)
def list_images(
    id: int | None = Query(None),
    product_id: str | None = Query(None, alias="productId"),
    is_primary: bool | None = Query(None, alias="isPrimary"),
    params: ListParams = Depends(),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    if id is not None:
        return svc.get(id)
    return svc.list(params.page(), product_id=id_filter(product_id, "productId"), is_primary=is_primary)


@router.get("/{id}", response_model=ProductImageOut)
def get_image(image_id: int = Path(..., alias="id"), db: Session = Depends(get_db)):
    return get_service(db).get(image_id)


@router.post("", response_model=ProductImageOut, status_code=201)
def create_image(
    payload: ProductImageIn,
    user: SessionUser = Depends(require_staff),
    db: Session = Depends(get_db),
):
    return get_service(db).create(payload)


@router.put("/{id}", response_model=ProductImageOut)
def update_image(
    payload: ProductImageUpdate,
    image_id: int = Path(..., alias="id"),
    user: SessionUser = Depends(require_staff),
    db: Session = Depends(get_db),
):
    return get_service(db).update(image_id, payload)


@router.delete("/{id}")
def delete_image(
    image_id: int = Path(..., alias="id"),
    user: SessionUser = Depends(require_staff),
    db: Session = Depends(get_db),
):
    return deleted("Product image deleted", "productImage", get_service(db).delete(image_id, user))

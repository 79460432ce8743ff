# truekind/api/routers/products.py
from decimal import Decimal

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from truekind.api.deps import ListParams, deleted, id_filter, require_staff
from truekind.data.database import get_db
from truekind.domain.schemas.catalog import ProductIn, ProductOut, ProductUpdate
from truekind.domain.schemas.common import SessionUser
from truekind.services.catalog_service import ProductService

router = APIRouter(prefix="/products", tags=["products"])


def get_service(db: Session):
    return ProductService(db)


@router.get("", response_model=list[ProductOut] | ProductOut)
def list_products(
    id: int | None = Query(None),
    category_id: str | None = Query(None, alias="categoryId"),
    brand_id: str | None = Query(None, alias="brandId"),
    is_featured: bool | None = Query(None, alias="isFeatured"),
    is_new: bool | None = Query(None, alias="isNew"),
    min_price: Decimal | None = Query(None, alias="minPrice", ge=0),
    max_price: Decimal | None = Query(None, alias="maxPrice", ge=0),
    in_stock: bool | None = Query(None, alias="inStock"),
    params: ListParams = Depends(),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    if id is not None:
        return svc.get(id)
    return svc.list(
        params.page(),
        category_id=id_filter(category_id, "categoryId"),
        brand_id=id_filter(brand_id, "brandId"),
        is_featured=is_featured,
        is_new=is_new,
        min_price=min_price,
        max_price=max_price,
        in_stock=in_stock,
    )


@router.get("/{id}", response_model=ProductOut)
def get_product(product_id: int = Path(..., alias="id"), db: Session = Depends(get_db)):
    return get_service(db).get(product_id)


@router.post("", response_model=ProductOut, status_code=201)
def create_product(payload: ProductIn, user: SessionUser = Depends(require_staff), db: Session = Depends(get_db)):
    return get_service(db).create(payload)


@router.put("/{id}", response_model=ProductOut)
def update_product(
    payload: ProductUpdate,
    product_id: int = Path(..., alias="id"),
    user: SessionUser = Depends(require_staff),
    db: Session = Depends(get_db),
):
    return get_service(db).update(product_id, payload)


@router.delete("/{id}")
def delete_product(
    product_id: int = Path(..., alias="id"),
    user: SessionUser = Depends(require_staff),
    db: Session = Depends(get_db),
):
    """Removes the product with its images, reviews, cart and wishlist lines."""
    return deleted("Product deleted", "product", get_service(db).delete(product_id, user))

# truekind/api/routers/categories.py
from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from truekind.api.deps import ListParams, deleted, id_filter, require_staff
from truekind.data.database import get_db
from truekind.domain.schemas.catalog import CategoryIn, CategoryOut, CategoryUpdate
from truekind.domain.schemas.common import SessionUser
from truekind.services.catalog_service import CategoryService

router = APIRouter(prefix="/categories", tags=["categories"])


def get_service(db: Session):
    return CategoryService(db)


@router.get("", response_model=list[CategoryOut] | CategoryOut)
def list_categories(
    id: int | None = Query(None),
    parent_id: str | None = Query(None, alias="parentId"),
    params: ListParams = Depends(),
    db: Session = Depends(get_db),
):
    """Top-level categories with ?parentId=null."""
    svc = get_service(db)
    if id is not None:
        return svc.get(id)
    return svc.list(params.page(), parent_id=id_filter(parent_id, "parentId"))


@router.get("/{id}", response_model=CategoryOut)
def get_category(category_id: int = Path(..., alias="id"), db: Session = Depends(get_db)):
    return get_service(db).get(category_id)


@router.post("", response_model=CategoryOut, status_code=201)
def create_category(
    payload: CategoryIn,
    user: SessionUser = Depends(require_staff),
    db: Session = Depends(get_db),
):
    return get_service(db).create(payload)


@router.put("/{id}", response_model=CategoryOut)
def update_category(
    payload: CategoryUpdate,
    category_id: int = Path(..., alias="id"),
    user: SessionUser = Depends(require_staff),
    db: Session = Depends(get_db),
):
    return get_service(db).update(category_id, payload)


@router.delete("/{id}")
def delete_category(
    category_id: int = Path(..., alias="id"),
    user: SessionUser = Depends(require_staff),
    db: Session = Depends(get_db),
):
    snapshot = get_service(db).delete(category_id, user)
    return deleted("Category deleted", "category", snapshot)

# truekind/api/routers/blog_taxonomy.py
from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from truekind.api.deps import ListParams, deleted, require_user
from truekind.data.database import get_db
from truekind.domain.schemas.blog import (
    BlogCategoryIn,
    BlogCategoryOut,
    BlogCategoryUpdate,
    BlogTagIn,
    BlogTagOut,
    BlogTagUpdate,
)
from truekind.domain.schemas.common import SessionUser
from truekind.services.blog_taxonomy_service import BlogCategoryService, BlogTagService

categories_router = APIRouter(prefix="/blog/categories", tags=["blog"])
tags_router = APIRouter(prefix="/blog/tags", tags=["blog"])


# categories

@categories_router.get("", response_model=list[BlogCategoryOut] | BlogCategoryOut)
def list_categories(id: int | None = Query(None), params: ListParams = Depends(), db: Session = Depends(get_db)):
    svc = BlogCategoryService(db)
    if id is not None:
        return svc.get_counted(id)
    return svc.list(params.page())


@categories_router.get("/{id}", response_model=BlogCategoryOut)
def get_category(category_id: int = Path(..., alias="id"), db: Session = Depends(get_db)):
    return BlogCategoryService(db).get_counted(category_id)


@categories_router.post("", response_model=BlogCategoryOut, status_code=201)
def create_category(
    payload: BlogCategoryIn,
    user: SessionUser = Depends(require_user),
    db: Session = Depends(get_db),
):
    return BlogCategoryService(db).create(payload)


@categories_router.put("/{id}", response_model=BlogCategoryOut)
def update_category(
    payload: BlogCategoryUpdate,
    category_id: int = Path(..., alias="id"),
    user: SessionUser = Depends(require_user),
    db: Session = Depends(get_db),
):
    return BlogCategoryService(db).update(category_id, payload)


@categories_router.delete("/{id}")
def delete_category(
    category_id: int = Path(..., alias="id"),
    user: SessionUser = Depends(require_user),
    db: Session = Depends(get_db),
):
    return deleted("Category deleted", "category", BlogCategoryService(db).delete(category_id, user))


# tags

@tags_router.get("", response_model=list[BlogTagOut] | BlogTagOut)
def list_tags(id: int | None = Query(None), params: ListParams = Depends(), db: Session = Depends(get_db)):
    svc = BlogTagService(db)
    if id is not None:
        return svc.get_counted(id)
    return svc.list(params.page())


@tags_router.get("/{id}", response_model=BlogTagOut)
def get_tag(tag_id: int = Path(..., alias="id"), db: Session = Depends(get_db)):
    return BlogTagService(db).get_counted(tag_id)


@tags_router.post("", response_model=BlogTagOut, status_code=201)
def create_tag(payload: BlogTagIn, user: SessionUser = Depends(require_user), db: Session = Depends(get_db)):
    return BlogTagService(db).create(payload)


@tags_router.put("/{id}", response_model=BlogTagOut)
def update_tag(
    payload: BlogTagUpdate,
    tag_id: int = Path(..., alias="id"),
    user: SessionUser = Depends(require_user),
    db: Session = Depends(get_db),
):
    return BlogTagService(db).update(tag_id, payload)


@tags_router.delete("/{id}")
def delete_tag(
    tag_id: int = Path(..., alias="id"),
    user: SessionUser = Depends(require_user),
    db: Session = Depends(get_db),
):
    return deleted("Tag deleted", "tag", BlogTagService(db).delete(tag_id, user))

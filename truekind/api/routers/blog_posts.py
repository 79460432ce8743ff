# truekind/api/routers/blog_posts.py
from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from truekind.api.deps import ListParams, deleted, get_current_user, id_filter, require_user
from truekind.data.database import get_db
from truekind.domain.schemas.blog import BlogPostDetail, BlogPostIn, BlogPostListItem, BlogPostOut, BlogPostUpdate
from truekind.domain.schemas.common import SessionUser
from truekind.services.blog_post_service import BlogPostService

router = APIRouter(prefix="/blog/posts", tags=["blog"])


def get_service(db: Session):
    return BlogPostService(db)


@router.get("", response_model=list[BlogPostListItem] | BlogPostOut)
def list_posts(
    id: int | None = Query(None),
    status: str = Query("published"),
    category_id: str | None = Query(None, alias="categoryId"),
    tag_id: int | None = Query(None, alias="tagId"),
    author_id: str | None = Query(None, alias="authorId"),
    params: ListParams = Depends(),
    user: SessionUser | None = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Published posts by default. Drafts and scheduled posts need a session,
    and non-staff users only get their own.
    """
    svc = get_service(db)
    if id is not None:
        return svc.get_visible(id, user)
    return svc.list(
        params.page(),
        user,
        status=status,
        category_id=id_filter(category_id, "categoryId"),
        tag_id=tag_id,
        author_id=author_id,
    )


@router.get("/{slug}", response_model=BlogPostDetail)
def read_post(slug: str, db: Session = Depends(get_db)):
    """A published post by slug. Counts as one view."""
    return get_service(db).read_published(slug)


@router.post("", response_model=BlogPostOut, status_code=201)
def create_post(payload: BlogPostIn, user: SessionUser = Depends(require_user), db: Session = Depends(get_db)):
    return get_service(db).create(payload, user)


@router.put("/{id}", response_model=BlogPostOut)
def update_post(
    payload: BlogPostUpdate,
    post_id: int = Path(..., alias="id"),
    user: SessionUser = Depends(require_user),
    db: Session = Depends(get_db),
):
    return get_service(db).update(post_id, payload, user)


@router.delete("/{id}")
def delete_post(
    post_id: int = Path(..., alias="id"),
    user: SessionUser = Depends(require_user),
    db: Session = Depends(get_db),
):
    return deleted("Post deleted", "post", get_service(db).delete(post_id, user))

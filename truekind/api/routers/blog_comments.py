# truekind/api/routers/blog_comments.py
from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from truekind.api.deps import ListParams, deleted, get_current_user, id_filter, require_user
from truekind.data.database import get_db
from truekind.domain.schemas.blog import CommentIn, CommentListItem, CommentOut, CommentUpdate
from truekind.domain.schemas.common import SessionUser
from truekind.services.comment_service import CommentService

router = APIRouter(prefix="/blog/comments", tags=["blog"])


def get_service(db: Session):
    return CommentService(db)


@router.get("", response_model=list[CommentListItem] | CommentOut)
def list_comments(
    id: int | None = Query(None),
    post_id: int | None = Query(None, alias="postId"),
    status: str | None = Query(None),
    author_id: str | None = Query(None, alias="authorId"),
    parent_comment_id: str | None = Query(None, alias="parentCommentId"),
    params: ListParams = Depends(),
    user: SessionUser | None = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    if id is not None:
        return svc.get_visible(id, user)
    return svc.list(
        params.page(),
        user,
        post_id=post_id,
        status=status,
        author_id=author_id,
        parent_comment_id=id_filter(parent_comment_id, "parentCommentId"),
    )


@router.get("/{id}", response_model=CommentOut)
def get_comment(
    comment_id: int = Path(..., alias="id"),
    user: SessionUser | None = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_service(db).get_visible(comment_id, user)


@router.post("", response_model=CommentOut, status_code=201)
def create_comment(
    payload: CommentIn,
    user: SessionUser | None = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Signed-in users comment as themselves, guests give authorName and authorEmail."""
    return get_service(db).create(payload, user)


@router.put("/{id}", response_model=CommentOut)
def update_comment(
    payload: CommentUpdate,
    comment_id: int = Path(..., alias="id"),
    user: SessionUser = Depends(require_user),
    db: Session = Depends(get_db),
):
    return get_service(db).update(comment_id, payload, user)


@router.delete("/{id}")
def delete_comment(
    comment_id: int = Path(..., alias="id"),
    user: SessionUser = Depends(require_user),
    db: Session = Depends(get_db),
):
    return deleted("Comment deleted", "comment", get_service(db).delete(comment_id, user))

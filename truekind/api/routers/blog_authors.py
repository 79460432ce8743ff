# truekind/api/routers/blog_authors.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from truekind.data.database import get_db
from truekind.domain.schemas.blog import AuthorOut
from truekind.services.user_service import UserService

router = APIRouter(prefix="/blog/authors", tags=["blog"])


@router.get("/{author_id}", response_model=AuthorOut)
def get_author(author_id: str, db: Session = Depends(get_db)):
    return UserService(db).get_author(author_id)

# truekind/api/deps.py
from typing import Literal

from fastapi import Depends, Query, Request
from sqlalchemy.orm import Session

from truekind.data.database import get_db
from truekind.domain.errors import AuthenticationRequired, Forbidden, InvalidRequest
from truekind.domain.schemas.common import SessionUser
from truekind.services.base import NULL
from truekind.services.session_client import SessionClient
from truekind.services.user_service import UserService
from truekind.utils.settings import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, SESSION_COOKIE_NAME
from truekind.utils.text import constant_case


def _session_token(request: Request) -> str | None:
    header = request.headers.get("Authorization", "")
    if header.lower().startswith("bearer "):
        token = header[7:].strip()
        if token:
            return token
    return request.cookies.get(SESSION_COOKIE_NAME) or None


def get_current_user(request: Request, db: Session = Depends(get_db)) -> SessionUser | None:
    """The signed-in user, or None for guests. Resolved once per request."""
    token = _session_token(request)
    if not token:
        return None
    data = SessionClient().get_session_user(token)
    if not data:
        return None
    return UserService(db).sync_session_user(data)


def require_user(user: SessionUser | None = Depends(get_current_user)) -> SessionUser:
    if user is None:
        raise AuthenticationRequired()
    return user


def require_staff(user: SessionUser = Depends(require_user)) -> SessionUser:
    if not user.is_staff:
        raise Forbidden("This action requires an admin or editor role", "FORBIDDEN")
    return user


class ListParams:
    """limit/offset/search/sort/order shared by every collection GET."""

    def __init__(
        self,
        limit: int = Query(DEFAULT_PAGE_SIZE, ge=1),
        offset: int = Query(0, ge=0),
        search: str | None = Query(None),
        sort: str | None = Query(None),
        order: Literal["asc", "desc"] | None = Query(None),
    ):
        self.limit = min(limit, MAX_PAGE_SIZE)
        self.offset = offset
        self.search = search.strip() if search and search.strip() else None
        self.sort = sort
        self.order = order

    def page(self) -> dict:
        return {"search": self.search, "sort": self.sort, "order": self.order, "limit": self.limit, "offset": self.offset}


def id_filter(raw: str | None, field: str):
    """None when absent, NULL for the literal 'null', the id otherwise."""
    if raw is None or raw == "":
        return None
    if raw.lower() == NULL:
        return NULL
    try:
        value = int(raw)
    except ValueError:
        value = 0
    if value <= 0:
        raise InvalidRequest(f"{field} must be a positive integer or null", f"INVALID_{constant_case(field)}")
    return value


def deleted(message: str, key: str, snapshot) -> dict:
    """{message, <key>: row} envelope returned by every DELETE."""
    return {"message": message, key: snapshot.model_dump(mode="json", by_alias=True)}

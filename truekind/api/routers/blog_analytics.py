# truekind/api/routers/blog_analytics.py
from datetime import datetime

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from truekind.api.deps import ListParams, get_current_user, require_user
from truekind.data.database import get_db
from truekind.domain.schemas.blog import AnalyticsEventIn, AnalyticsEventOut, AnalyticsReport, AnalyticsSummary
from truekind.domain.schemas.common import SessionUser
from truekind.services.analytics_service import AnalyticsService

router = APIRouter(prefix="/blog/posts", tags=["blog"])


def get_service(db: Session):
    return AnalyticsService(db)


@router.post("/{id}/analytics", response_model=AnalyticsEventOut, status_code=201)
def record_event(
    payload: AnalyticsEventIn,
    post_id: int = Path(..., alias="id"),
    user: SessionUser | None = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_service(db).record(post_id, payload, user)


@router.get("/{id}/analytics", response_model=AnalyticsReport | AnalyticsSummary)
def post_analytics(
    post_id: int = Path(..., alias="id"),
    start: datetime | None = Query(None, alias="from"),
    end: datetime | None = Query(None, alias="to"),
    include_events: bool = Query(False, alias="includeEvents"),
    params: ListParams = Depends(),
    user: SessionUser = Depends(require_user),
    db: Session = Depends(get_db),
):
    return get_service(db).report(
        post_id,
        user,
        start=start,
        end=end,
        include_events=include_events,
        limit=params.limit,
        offset=params.offset,
    )

# truekind/services/analytics_service.py
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy.orm import Session

from truekind.data.models.blog import BlogAnalyticsEventModel
from truekind.domain.errors import Forbidden, InvalidRequest, NotFound
from truekind.domain.schemas.blog import (
    AnalyticsEventIn,
    AnalyticsEventOut,
    AnalyticsReport,
    AnalyticsSummary,
    ScrollEngagement,
)
from truekind.domain.schemas.common import SessionUser
from truekind.domain.states import ANALYTICS_EVENTS
from truekind.repos.blog_repo import AnalyticsRepo, BlogPostRepo
from truekind.utils.clock import as_utc
from truekind.utils.logging import get_logger

logger = get_logger(__name__)


def percentage(count: int, total: int) -> int:
    """count/total*100 rounded half up, 0 when there is nothing to divide by."""
    if not total:
        return 0
    return int((Decimal(count) * 100 / Decimal(total)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def event_out(event: BlogAnalyticsEventModel) -> AnalyticsEventOut:
    return AnalyticsEventOut(
        id=event.id,
        post_id=event.post_id,
        event=event.event,
        metadata=event.event_metadata,
        user_id=event.user_id,
        session_id=event.session_id,
        created_at=event.created_at,
    )


class AnalyticsService:
    def __init__(self, db: Session):
        self.repo = AnalyticsRepo(db)
        self.posts = BlogPostRepo(db)

    def _post(self, post_id: int):
        post = self.posts.get(post_id)
        if not post:
            raise NotFound("Post not found", "POST_NOT_FOUND")
        return post

    def record(self, post_id: int, payload: AnalyticsEventIn, user: SessionUser | None) -> AnalyticsEventOut:
        post = self._post(post_id)
        event = self.repo.add(
            BlogAnalyticsEventModel(
                post_id=post.id,
                event=payload.event,
                event_metadata=payload.metadata,
                user_id=user.id if user else None,
                session_id=payload.session_id,
            )
        )
        if payload.event == "share":
            self.posts.increment_shares(post.id)
        return event_out(event)

    def report(self, post_id: int, user: SessionUser, start: datetime | None = None, end: datetime | None = None,
               include_events: bool = False, limit: int = 10, offset: int = 0):
        post = self._post(post_id)
        if not (user.is_staff or post.author_id == user.id):
            raise Forbidden("Only the author or staff can view post analytics", "FORBIDDEN")

        start, end = as_utc(start), as_utc(end)
        if start is not None and end is not None and end < start:
            raise InvalidRequest("to must not be before from", "INVALID_DATE_RANGE")

        counts = self.repo.counts_by_event(post.id, start, end)
        breakdown = {event: counts.get(event, 0) for event in ANALYTICS_EVENTS}
        pageviews = breakdown["pageview"]
        summary = AnalyticsSummary(
            post_id=post.id,
            total_pageviews=pageviews,
            total_shares=breakdown["share"],
            product_clicks=breakdown["product_click"],
            unique_sessions=self.repo.unique_sessions(post.id, start, end),
            event_breakdown=breakdown,
            scroll_engagement=ScrollEngagement(
                scroll50_percentage=percentage(breakdown["scroll_50"], pageviews),
                scroll100_percentage=percentage(breakdown["scroll_100"], pageviews),
            ),
        )
        if not include_events:
            return summary

        events = self.repo.events(post.id, start, end, limit=limit, offset=offset)
        return AnalyticsReport(summary=summary, events=[event_out(e) for e in events])

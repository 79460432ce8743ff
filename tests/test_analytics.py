from truekind.data.models import BlogPostModel
from truekind.services.analytics_service import percentage
from tests.conftest import fetch, make_post


def _record(client, post_id, event, session_id=None, **extra):
    body = {"event": event, **extra}
    if session_id:
        body["sessionId"] = session_id
    return client.post(f"/api/blog/posts/{post_id}/analytics", json=body)


def test_record_validates_event(client, auth):
    post = make_post(auth.shopper().id)
    auth.logout()

    assert client.post(f"/api/blog/posts/{post.id}/analytics", json={}).json()["code"] == "MISSING_EVENT"
    for blank in ("", "   ", None):
        res = client.post(f"/api/blog/posts/{post.id}/analytics", json={"event": blank})
        assert res.status_code == 400
        assert res.json()["code"] == "MISSING_EVENT"
    res = _record(client, post.id, "like")
    assert res.status_code == 400
    assert res.json()["code"] == "INVALID_EVENT_TYPE"

    res = _record(client, 999, "pageview")
    assert res.status_code == 404
    assert res.json()["code"] == "POST_NOT_FOUND"

    res = _record(client, post.id, "product_click", "s-1", metadata={"productId": 7})
    assert res.status_code == 201
    assert res.json()["metadata"] == {"productId": 7}
    assert res.json()["userId"] is None


def test_share_bumps_share_count(client, auth):
    post = make_post(auth.shopper().id)
    _record(client, post.id, "share", "s-1")
    _record(client, post.id, "share", "s-2")
    assert fetch(BlogPostModel, post.id).share_count == 2


def test_summary(client, auth):
    author = auth.shopper()
    post = make_post(author.id)
    auth.logout()
    for session in ("a", "b", "c"):
        _record(client, post.id, "pageview", session)
    _record(client, post.id, "pageview")
    _record(client, post.id, "scroll_50", "a")
    _record(client, post.id, "scroll_50", "b")
    _record(client, post.id, "scroll_50", "c")
    _record(client, post.id, "scroll_100", "a")
    _record(client, post.id, "share", "b")

    assert client.get(f"/api/blog/posts/{post.id}/analytics").status_code == 401

    auth.shopper()
    summary = client.get(f"/api/blog/posts/{post.id}/analytics").json()
    assert summary["totalPageviews"] == 4
    assert summary["totalShares"] == 1
    assert summary["productClicks"] == 0
    assert summary["uniqueSessions"] == 3
    assert summary["eventBreakdown"] == {
        "pageview": 4,
        "share": 1,
        "product_click": 0,
        "scroll_50": 3,
        "scroll_100": 1,
    }
    assert summary["scrollEngagement"] == {"scroll50Percentage": 75, "scroll100Percentage": 25}

    report = client.get(f"/api/blog/posts/{post.id}/analytics?includeEvents=true&limit=3").json()
    assert report["summary"]["totalPageviews"] == 4
    assert len(report["events"]) == 3
    assert report["events"][0]["event"] == "share"


def test_summary_window_and_access(client, auth):
    post = make_post(auth.shopper().id)
    _record(client, post.id, "pageview", "a")

    future = client.get(f"/api/blog/posts/{post.id}/analytics?from=2999-01-01T00:00:00Z").json()
    assert future["totalPageviews"] == 0
    assert future["scrollEngagement"] == {"scroll50Percentage": 0, "scroll100Percentage": 0}

    res = client.get(f"/api/blog/posts/{post.id}/analytics?from=2030-01-02T00:00:00Z&to=2030-01-01T00:00:00Z")
    assert res.json()["code"] == "INVALID_DATE_RANGE"
    assert client.get(f"/api/blog/posts/{post.id}/analytics?from=yesterday").json()["code"] == "INVALID_FROM"

    auth.other()
    assert client.get(f"/api/blog/posts/{post.id}/analytics").status_code == 403
    auth.staff()
    assert client.get(f"/api/blog/posts/{post.id}/analytics").status_code == 200


def test_percentage_rounds_half_up():
    assert percentage(1, 8) == 13
    assert percentage(1, 3) == 33
    assert percentage(2, 3) == 67
    assert percentage(5, 0) == 0

from datetime import timedelta

from truekind.data.database import SessionLocal
from truekind.data.models import AuthorProfileModel, BlogPostModel
from truekind.services.blog_post_service import BlogPostService
from truekind.tasks.blog import publish_scheduled_posts_task
from truekind.utils.clock import utcnow
from tests.conftest import add, fetch, make_blog_category, make_post, make_product, make_tag


def _post(**extra):
    return {"title": "Why your skin barrier matters", "content": "word " * 450, **extra}


def test_create_needs_session(client):
    assert client.post("/api/blog/posts", json=_post()).status_code == 401


def test_create_derives_slug_and_read_time(client, auth, pings):
    auth.shopper()
    res = client.post("/api/blog/posts", json=_post())
    assert res.status_code == 201
    body = res.json()
    assert body["slug"] == "why-your-skin-barrier-matters"
    assert body["readTime"] == 3
    assert body["status"] == "draft"
    assert body["authorId"] == "shopper-1"
    assert body["publishedAt"] is None
    assert pings == []

    res = client.post("/api/blog/posts", json=_post())
    assert res.json()["code"] == "SLUG_EXISTS"

    res = client.post("/api/blog/posts", json=_post(authorId="editor-1"))
    assert res.json()["code"] == "USER_ID_NOT_ALLOWED"


def test_publishing_stamps_date_and_pings_sitemap(client, auth, pings):
    auth.shopper()
    res = client.post("/api/blog/posts", json=_post(status="published"))
    assert res.json()["status"] == "published"
    assert res.json()["publishedAt"] is not None
    assert len(pings) == 2
    assert all("sitemap.xml" in url for url in pings)


def test_references_are_checked(client, auth):
    auth.shopper()
    assert client.post("/api/blog/posts", json=_post(categoryId=9)).json()["code"] == "CATEGORY_NOT_FOUND"
    assert client.post("/api/blog/posts", json=_post(tagIds=[9])).json()["code"] == "TAG_NOT_FOUND"
    res = client.post("/api/blog/posts", json=_post(productLinks=[{"productId": 9}]))
    assert res.status_code == 404
    assert res.json()["code"] == "PRODUCT_NOT_FOUND"


def test_tags_and_product_links(client, auth):
    auth.shopper()
    tag_a, tag_b = make_tag("Acne"), make_tag("Barrier")
    serum, spf = make_product(name="Serum"), make_product(name="Sunscreen")
    res = client.post(
        "/api/blog/posts",
        json=_post(
            tagIds=[tag_b.id, tag_a.id],
            productLinks=[{"productId": spf.id, "position": 2}, {"productId": serum.id, "position": 1}],
        ),
    )
    body = res.json()
    assert [t["name"] for t in body["tags"]] == ["Acne", "Barrier"]
    assert [(p["productId"], p["position"]) for p in body["productLinks"]] == [(serum.id, 1), (spf.id, 2)]

    res = client.put(f"/api/blog/posts/{body['id']}", json={"tagIds": [tag_a.id], "productLinks": []})
    assert [t["name"] for t in res.json()["tags"]] == ["Acne"]
    assert res.json()["productLinks"] == []


def test_scheduling_rules(client, auth):
    auth.shopper()
    res = client.post("/api/blog/posts", json=_post(status="scheduled"))
    assert res.json()["code"] == "MISSING_PUBLISH_DATE"

    past = (utcnow() - timedelta(hours=1)).isoformat()
    res = client.post("/api/blog/posts", json=_post(status="scheduled", publishedAt=past))
    assert res.json()["code"] == "INVALID_PUBLISH_DATE"

    future = (utcnow() + timedelta(days=2)).isoformat()
    res = client.post("/api/blog/posts", json=_post(status="scheduled", publishedAt=future))
    assert res.status_code == 201
    assert res.json()["status"] == "scheduled"


def test_status_transitions(client, auth):
    auth.shopper()
    post = client.post("/api/blog/posts", json=_post()).json()
    url = f"/api/blog/posts/{post['id']}"

    assert client.put(url, json={"status": "archived"}).json()["code"] == "INVALID_STATUS"
    assert client.put(url, json={"status": "published"}).json()["status"] == "published"
    res = client.put(url, json={"status": "draft"})
    assert res.json()["code"] == "INVALID_STATUS_TRANSITION"
    # same status is a no-op
    assert client.put(url, json={"status": "published"}).status_code == 200


def test_update_recomputes_read_time(client, auth):
    auth.shopper()
    post = client.post("/api/blog/posts", json=_post()).json()
    res = client.put(f"/api/blog/posts/{post['id']}", json={"content": "short and sweet"})
    assert res.json()["readTime"] == 1
    assert client.put(f"/api/blog/posts/{post['id']}", json={"title": None}).json()["code"] == "MISSING_REQUIRED_FIELD"


def test_only_author_or_staff_may_edit(client, auth):
    auth.shopper()
    post = client.post("/api/blog/posts", json=_post()).json()

    auth.other()
    assert client.put(f"/api/blog/posts/{post['id']}", json={"title": "Mine now"}).status_code == 403
    assert client.delete(f"/api/blog/posts/{post['id']}").status_code == 403

    auth.staff()
    assert client.put(f"/api/blog/posts/{post['id']}", json={"title": "Edited"}).json()["title"] == "Edited"
    res = client.delete(f"/api/blog/posts/{post['id']}")
    assert res.status_code == 200
    assert res.json()["post"]["title"] == "Edited"
    assert fetch(BlogPostModel, post["id"]) is None


def test_listing_visibility(client, auth):
    author = auth.shopper()
    make_post(author.id, title="Published one")
    make_post(author.id, title="My draft", status="draft")
    make_post("shopper-2", title="Their draft", status="draft")

    auth.logout()
    assert [p["title"] for p in client.get("/api/blog/posts").json()] == ["Published one"]
    assert client.get("/api/blog/posts?status=draft").status_code == 401
    assert client.get("/api/blog/posts?status=secret").json()["code"] == "INVALID_STATUS"

    auth.shopper()
    assert [p["title"] for p in client.get("/api/blog/posts?status=draft").json()] == ["My draft"]

    auth.staff()
    drafts = sorted(p["title"] for p in client.get("/api/blog/posts?status=draft").json())
    assert drafts == ["My draft", "Their draft"]
    assert len(client.get("/api/blog/posts?status=all").json()) == 3


def test_listing_joins_and_filters(client, auth):
    author = auth.shopper()
    routines = make_blog_category("Routines")
    tag = make_tag("Spf")
    older = make_post(author.id, title="Older", category_id=routines.id, published_at=utcnow() - timedelta(days=3))
    newer = make_post(author.id, title="Newer", view_count=40)
    client.put(f"/api/blog/posts/{older.id}", json={"tagIds": [tag.id]})

    rows = client.get("/api/blog/posts").json()
    assert [p["title"] for p in rows] == ["Newer", "Older"]
    assert rows[1]["authorName"] == "Asha Rao"
    assert rows[1]["categoryName"] == "Routines"
    assert rows[1]["categorySlug"] == "routines"
    assert rows[1]["commentCount"] == 0

    assert [p["title"] for p in client.get("/api/blog/posts?sort=oldest").json()] == ["Older", "Newer"]
    assert [p["title"] for p in client.get("/api/blog/posts?sort=mostRead").json()] == ["Newer", "Older"]
    assert [p["id"] for p in client.get(f"/api/blog/posts?categoryId={routines.id}").json()] == [older.id]
    assert [p["id"] for p in client.get("/api/blog/posts?categoryId=null").json()] == [newer.id]
    assert [p["id"] for p in client.get(f"/api/blog/posts?tagId={tag.id}").json()] == [older.id]
    assert [p["id"] for p in client.get("/api/blog/posts?search=newer").json()] == [newer.id]


def test_read_by_slug(client, auth):
    author = auth.shopper()
    add(AuthorProfileModel(user_id=author.id, bio="Dermatology nerd", social_links={"instagram": "@asha"}))
    routines = make_blog_category("Routines")
    serum = make_product(name="Serum")
    post = make_post(author.id, title="Main", category_id=routines.id)
    client.put(f"/api/blog/posts/{post.id}", json={"productLinks": [{"productId": serum.id, "position": 0}]})
    for i in range(5):
        make_post(author.id, title=f"Related {i}", category_id=routines.id)
    make_post(author.id, title="Elsewhere")
    make_post(author.id, title="Hidden", status="draft", category_id=routines.id)

    auth.logout()
    res = client.get("/api/blog/posts/main")
    assert res.status_code == 200
    body = res.json()
    assert body["viewCount"] == 1
    assert body["author"]["bio"] == "Dermatology nerd"
    assert body["author"]["socialLinks"] == {"instagram": "@asha"}
    assert body["author"]["email"] is None
    assert body["category"] == {"id": routines.id, "name": "Routines", "slug": "routines"}
    assert [p["name"] for p in body["products"]] == ["Serum"]
    assert len(body["relatedPosts"]) == 4
    assert all(p["title"].startswith("Related") for p in body["relatedPosts"])

    assert client.get("/api/blog/posts/main").json()["viewCount"] == 2
    assert client.get("/api/blog/posts/hidden").json()["code"] == "POST_NOT_FOUND"
    assert client.get("/api/blog/posts/nope").status_code == 404


def test_single_post_by_id_respects_visibility(client, auth):
    author = auth.shopper()
    draft = make_post(author.id, title="Secret draft", status="draft")
    assert client.get(f"/api/blog/posts?id={draft.id}").json()["title"] == "Secret draft"
    auth.other()
    assert client.get(f"/api/blog/posts?id={draft.id}").json()["code"] == "POST_NOT_FOUND"


def test_scheduled_posts_publish_when_due(auth, pings):
    author = auth.shopper()
    due = make_post(author.id, title="Due", status="scheduled", published_at=utcnow() - timedelta(minutes=1))
    later = make_post(author.id, title="Later", status="scheduled", published_at=utcnow() + timedelta(days=1))

    assert publish_scheduled_posts_task.delay().get() == 1
    assert fetch(BlogPostModel, due.id).status == "published"
    assert fetch(BlogPostModel, later.id).status == "scheduled"
    assert len(pings) == 2

    db = SessionLocal()
    try:
        assert BlogPostService(db).publish_due() == 0
    finally:
        db.close()

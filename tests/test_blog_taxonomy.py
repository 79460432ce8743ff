from tests.conftest import make_blog_category, make_post, make_tag


def test_writes_need_session(client):
    assert client.post("/api/blog/categories", json={"name": "Routines"}).status_code == 401
    assert client.post("/api/blog/tags", json={"name": "Acne"}).status_code == 401


def test_slug_derived_from_name(client, auth):
    auth.shopper()
    res = client.post("/api/blog/categories", json={"name": "Skin Science 101"})
    assert res.status_code == 201
    assert res.json()["slug"] == "skin-science-101"
    assert res.json()["postCount"] == 0

    res = client.post("/api/blog/tags", json={"name": "Vitamin C", "slug": "vit-c"})
    assert res.json()["slug"] == "vit-c"

    assert client.post("/api/blog/tags", json={"name": "Vitamin C"}).json()["code"] == "DUPLICATE_NAME"
    assert client.post("/api/blog/categories", json={"name": "Skin Science 101", "slug": "science"}).json()["code"] == "NAME_EXISTS"
    assert client.post("/api/blog/tags", json={"name": "!!!"}).json()["code"] == "INVALID_SLUG"


def test_post_counts_only_published(client, auth):
    author = auth.shopper()
    routines = make_blog_category("Routines")
    make_blog_category("Ingredients")
    make_post(author.id, title="One", category_id=routines.id)
    make_post(author.id, title="Two", category_id=routines.id)
    make_post(author.id, title="Draft", status="draft", category_id=routines.id)

    counts = {c["name"]: c["postCount"] for c in client.get("/api/blog/categories").json()}
    assert counts == {"Ingredients": 0, "Routines": 2}

    by_count = client.get("/api/blog/categories?sort=postCount").json()
    assert [c["name"] for c in by_count] == ["Routines", "Ingredients"]

    assert client.get(f"/api/blog/categories/{routines.id}").json()["postCount"] == 2
    assert client.get(f"/api/blog/categories?id={routines.id}").json()["name"] == "Routines"
    assert client.get("/api/blog/categories/999").json()["code"] == "CATEGORY_NOT_FOUND"


def test_tag_counts_and_in_use(client, auth):
    author = auth.shopper()
    tag = make_tag("Acne")
    spare = make_tag("Spare")
    post = make_post(author.id, title="Acne basics")
    client.put(f"/api/blog/posts/{post.id}", json={"tagIds": [tag.id]})

    assert client.get(f"/api/blog/tags/{tag.id}").json()["postCount"] == 1

    res = client.delete(f"/api/blog/tags/{tag.id}")
    assert res.status_code == 400
    assert res.json()["code"] == "TAG_IN_USE"

    res = client.delete(f"/api/blog/tags/{spare.id}")
    assert res.json()["message"] == "Tag deleted"
    assert res.json()["tag"]["name"] == "Spare"


def test_category_in_use(client, auth):
    author = auth.shopper()
    routines = make_blog_category("Routines")
    make_post(author.id, title="Draft", status="draft", category_id=routines.id)
    assert client.delete(f"/api/blog/categories/{routines.id}").json()["code"] == "CATEGORY_IN_USE"


def test_rename(client, auth):
    auth.shopper()
    tag = make_tag("Spf")
    res = client.put(f"/api/blog/tags/{tag.id}", json={"name": "SPF"})
    assert res.json()["name"] == "SPF"
    assert res.json()["slug"] == "spf"
    assert client.put(f"/api/blog/tags/{tag.id}", json={}).json()["code"] == "NO_UPDATES"

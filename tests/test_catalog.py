from truekind.data.models import BrandModel, OrderItemModel, OrderModel, ProductModel
from tests.conftest import add, fetch, make_category, make_product


def test_category_tree_rules(client, auth):
    auth.staff()
    root = client.post("/api/categories", json={"name": "Skincare", "slug": "skincare"}).json()
    child = client.post(
        "/api/categories", json={"name": "Serums", "slug": "serums", "parentId": root["id"]}
    ).json()
    assert child["parentId"] == root["id"]

    res = client.put(f"/api/categories/{root['id']}", json={"parentId": root["id"]})
    assert res.json()["code"] == "SELF_REFERENCE"

    res = client.put(f"/api/categories/{root['id']}", json={"parentId": child["id"]})
    assert res.json()["code"] == "CIRCULAR_REFERENCE"

    res = client.post("/api/categories", json={"name": "Ghost", "slug": "ghost", "parentId": 999})
    assert res.status_code == 404
    assert res.json()["code"] == "PARENT_NOT_FOUND"

    res = client.delete(f"/api/categories/{root['id']}")
    assert res.json()["code"] == "HAS_CHILDREN"


def test_category_filters(client):
    root = make_category("Skincare")
    make_category("Serums", parent_id=root.id)

    top = client.get("/api/categories?parentId=null").json()
    assert [c["slug"] for c in top] == ["skincare"]

    children = client.get(f"/api/categories?parentId={root.id}").json()
    assert [c["slug"] for c in children] == ["serums"]

    assert client.get("/api/categories?parentId=abc").json()["code"] == "INVALID_PARENT_ID"
    assert client.get(f"/api/categories?id={root.id}").json()["name"] == "Skincare"


def test_category_in_use(client, auth):
    auth.staff()
    category = make_category("Cleansers")
    make_product(category_id=category.id)
    res = client.delete(f"/api/categories/{category.id}")
    assert res.json()["code"] == "CATEGORY_IN_USE"


def test_brand_in_use(client, auth):
    auth.staff()
    brand = add(BrandModel(name="Minimalist", slug="minimalist"))
    product = make_product(brand_id=brand.id)

    res = client.delete(f"/api/brands/{brand.id}")
    assert res.status_code == 400
    assert res.json()["code"] == "BRAND_IN_USE"
    assert fetch(BrandModel, brand.id) is not None

    client.delete(f"/api/products/{product.id}")
    res = client.delete(f"/api/brands/{brand.id}")
    assert res.status_code == 200
    assert res.json()["brand"]["slug"] == "minimalist"


def test_delete_returns_envelope(client, auth):
    auth.staff()
    category = make_category("Toners")
    res = client.delete(f"/api/categories/{category.id}")
    assert res.status_code == 200
    body = res.json()
    assert body["message"] == "Category deleted"
    assert body["category"]["slug"] == "toners"
    assert client.get(f"/api/categories/{category.id}").status_code == 404


def test_brand_duplicates(client, auth):
    auth.staff()
    assert client.post("/api/brands", json={"name": "Truekind", "slug": "truekind"}).status_code == 201
    res = client.post("/api/brands", json={"name": "Truekind", "slug": "truekind-2"})
    assert res.json()["code"] == "DUPLICATE_NAME"
    res = client.post("/api/brands", json={"name": "Other", "slug": "truekind"})
    assert res.json()["code"] == "DUPLICATE_SLUG"


def test_product_create_and_references(client, auth):
    auth.staff()
    payload = {
        "name": "Gel Cleanser",
        "slug": "gel-cleanser",
        "description": "Low pH gel cleanser",
        "price": 349.5,
        "sku": "TK-CLN-001",
        "stockQuantity": 12,
    }
    res = client.post("/api/products", json=payload)
    assert res.status_code == 201
    body = res.json()
    assert body["price"] == 349.5
    assert body["stockQuantity"] == 12
    assert body["reviewCount"] == 0

    res = client.post("/api/products", json={**payload, "slug": "gel-cleanser-2"})
    assert res.json()["code"] == "DUPLICATE_SKU"

    res = client.post("/api/products", json={**payload, "slug": "x", "sku": "X", "categoryId": 404})
    assert res.status_code == 404
    assert res.json()["code"] == "CATEGORY_NOT_FOUND"

    res = client.put(f"/api/products/{body['id']}", json={"brandId": 77})
    assert res.json()["code"] == "BRAND_NOT_FOUND"


def test_product_update_rules(client, auth):
    auth.staff()
    product = make_product()
    res = client.put(f"/api/products/{product.id}", json={})
    assert res.json()["code"] == "NO_UPDATES"

    res = client.put(f"/api/products/{product.id}", json={"name": None})
    assert res.json()["code"] == "MISSING_REQUIRED_FIELD"

    res = client.put(f"/api/products/{product.id}", json={"shortDescription": "Calming", "price": 520})
    assert res.status_code == 200
    assert res.json()["shortDescription"] == "Calming"
    assert res.json()["price"] == 520.0
    assert res.json()["name"] == "Barrier Serum"


def test_product_listing_filters(client):
    category = make_category("Serums")
    make_product(name="Niacinamide Serum", price="600.00", category_id=category.id, is_featured=True)
    make_product(name="Clay Mask", price="300.00", stock=0)
    make_product(name="Vitamin C Serum", price="900.00", category_id=category.id)

    names = lambda res: sorted(p["name"] for p in res.json())

    assert names(client.get(f"/api/products?categoryId={category.id}")) == ["Niacinamide Serum", "Vitamin C Serum"]
    assert names(client.get("/api/products?isFeatured=true")) == ["Niacinamide Serum"]
    assert names(client.get("/api/products?minPrice=500&maxPrice=800")) == ["Niacinamide Serum"]
    assert names(client.get("/api/products?inStock=false")) == ["Clay Mask"]
    assert names(client.get("/api/products?search=serum")) == ["Niacinamide Serum", "Vitamin C Serum"]

    by_price = client.get("/api/products?sort=price&order=desc").json()
    assert [p["name"] for p in by_price] == ["Vitamin C Serum", "Niacinamide Serum", "Clay Mask"]

    # unknown sort keys fall back to the default ordering
    assert client.get("/api/products?sort=password").status_code == 200


def test_product_in_orders_cannot_be_deleted(client, auth):
    auth.staff()
    product = make_product()
    order = add(
        OrderModel(
            order_number="TK-1",
            status="pending",
            payment_status="pending",
            subtotal=499,
            total_amount=499,
            payment_method="card",
            shipping_address="12 MG Road",
        )
    )
    add(OrderItemModel(order_id=order.id, product_id=product.id, quantity=1, unit_price=499, total_price=499))

    res = client.delete(f"/api/products/{product.id}")
    assert res.json()["code"] == "PRODUCT_IN_ORDERS"


def test_product_delete_removes_dependents(client, auth):
    user = auth.staff()
    product = make_product()
    client.post("/api/product-images", json={"productId": product.id, "imageUrl": "https://img/1.jpg"})
    client.post("/api/reviews", json={"productId": product.id, "rating": 5, "comment": "Great"})
    client.post("/api/cart-items", json={"productId": product.id, "sessionId": "guest-1"})

    res = client.delete(f"/api/products/{product.id}")
    assert res.status_code == 200
    assert res.json()["product"]["id"] == product.id
    assert fetch(ProductModel, product.id) is None
    assert client.get(f"/api/reviews?userId={user.id}").json() == []


def test_single_primary_image(client, auth):
    auth.staff()
    product = make_product()
    first = client.post(
        "/api/product-images", json={"productId": product.id, "imageUrl": "https://img/1.jpg", "isPrimary": True}
    ).json()
    second = client.post(
        "/api/product-images", json={"productId": product.id, "imageUrl": "https://img/2.jpg", "isPrimary": True}
    ).json()

    images = {i["id"]: i["isPrimary"] for i in client.get(f"/api/product-images?productId={product.id}").json()}
    assert images == {first["id"]: False, second["id"]: True}

    client.put(f"/api/product-images/{first['id']}", json={"isPrimary": True})
    images = {i["id"]: i["isPrimary"] for i in client.get(f"/api/product-images?productId={product.id}").json()}
    assert images == {first["id"]: True, second["id"]: False}

    res = client.post("/api/product-images", json={"productId": 999, "imageUrl": "https://img/3.jpg"})
    assert res.json()["code"] == "PRODUCT_NOT_FOUND"


def test_reviews_refresh_product_rating(client, auth):
    product = make_product()

    auth.shopper()
    mine = client.post("/api/reviews", json={"productId": product.id, "rating": 5, "comment": "Love it"}).json()
    assert mine["userId"] == "shopper-1"

    auth.other()
    client.post("/api/reviews", json={"productId": product.id, "rating": 2, "comment": "Stings a bit"})

    refreshed = client.get(f"/api/products/{product.id}").json()
    assert refreshed["rating"] == 3.5
    assert refreshed["reviewCount"] == 2

    # someone else's review
    res = client.put(f"/api/reviews/{mine['id']}", json={"rating": 1})
    assert res.status_code == 403

    auth.shopper()
    client.put(f"/api/reviews/{mine['id']}", json={"rating": 4})
    assert client.get(f"/api/products/{product.id}").json()["rating"] == 3.0

    res = client.put(f"/api/reviews/{mine['id']}", json={"isVerified": True})
    assert res.status_code == 403

    auth.staff()
    assert client.put(f"/api/reviews/{mine['id']}", json={"isVerified": True}).json()["isVerified"] is True
    assert client.delete(f"/api/reviews/{mine['id']}").status_code == 200
    refreshed = client.get(f"/api/products/{product.id}").json()
    assert refreshed["rating"] == 2.0
    assert refreshed["reviewCount"] == 1


def test_review_for_unknown_product(client, auth):
    auth.shopper()
    res = client.post("/api/reviews", json={"productId": 42, "rating": 3, "comment": "?"})
    assert res.status_code == 404
    assert res.json()["code"] == "PRODUCT_NOT_FOUND"

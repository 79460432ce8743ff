from decimal import Decimal

from truekind.data.models import CouponModel, ProductModel
from truekind.services import notification_service
from tests.conftest import RecordingTask, fetch, make_coupon, make_product


def _order(items, **extra):
    return {
        "subtotal": 998,
        "totalAmount": 998,
        "paymentMethod": "card",
        "shippingAddress": "12 MG Road, Bengaluru",
        "items": items,
        **extra,
    }


def test_guest_needs_session_id(client):
    product = make_product()
    res = client.post("/api/orders", json=_order([{"productId": product.id, "quantity": 1}]))
    assert res.status_code == 400
    assert res.json()["code"] == "MISSING_IDENTIFIER"

    assert client.get("/api/orders").json()["code"] == "MISSING_IDENTIFIER"


def test_checkout_reserves_stock_and_notifies(client, auth, monkeypatch):
    task = RecordingTask()
    monkeypatch.setattr(notification_service, "send_order_notification_task", task)
    auth.shopper()
    product = make_product(stock=5)

    res = client.post("/api/orders", json=_order([{"productId": product.id, "quantity": 2}]))
    assert res.status_code == 201
    order = res.json()
    assert order["status"] == "pending"
    assert order["paymentStatus"] == "pending"
    assert order["userId"] == "shopper-1"
    assert order["orderNumber"].startswith("TK-")
    assert order["items"][0]["unitPrice"] == 499.0
    assert order["items"][0]["totalPrice"] == 998.0

    assert fetch(ProductModel, product.id).stock_quantity == 3
    assert task.calls == [(order["id"], order["orderNumber"], "shopper-1@example.com", "received")]


def test_insufficient_stock_rolls_back_everything(client):
    plenty = make_product(name="Sunscreen", stock=10)
    scarce = make_product(name="Retinol", stock=1)
    coupon = make_coupon(code="SAVE5", discount_type="fixed", value="5")

    res = client.post(
        "/api/orders",
        json=_order(
            [{"productId": plenty.id, "quantity": 3}, {"productId": scarce.id, "quantity": 2}],
            sessionId="guest-9",
            couponCode="SAVE5",
        ),
    )
    assert res.status_code == 400
    assert res.json()["code"] == "INSUFFICIENT_STOCK"

    assert fetch(ProductModel, plenty.id).stock_quantity == 10
    assert fetch(ProductModel, scarce.id).stock_quantity == 1
    assert fetch(CouponModel, coupon.id).used_count == 0
    assert client.get("/api/orders?sessionId=guest-9").json() == []


def test_unknown_product_in_order(client):
    res = client.post("/api/orders", json=_order([{"productId": 404, "quantity": 1}], sessionId="guest-1"))
    assert res.status_code == 404
    assert res.json()["code"] == "PRODUCT_NOT_FOUND"


def test_coupon_usage_limit_enforced_at_checkout(client):
    product = make_product(stock=10)
    coupon = make_coupon(code="ONCE", discount_type="fixed", value="50", usage_limit=1)

    first = client.post(
        "/api/orders",
        json=_order([{"productId": product.id, "quantity": 1}], sessionId="guest-1", couponCode="once"),
    )
    assert first.status_code == 201
    assert first.json()["couponCode"] == "ONCE"
    assert fetch(CouponModel, coupon.id).used_count == 1

    second = client.post(
        "/api/orders",
        json=_order([{"productId": product.id, "quantity": 1}], sessionId="guest-2", couponCode="ONCE"),
    )
    assert second.json()["code"] == "COUPON_USAGE_LIMIT_REACHED"
    assert fetch(CouponModel, coupon.id).used_count == 1
    assert fetch(ProductModel, product.id).stock_quantity == 9


def test_duplicate_order_number(client):
    payload = _order([], sessionId="guest-1", orderNumber="TK-FIXED-1")
    assert client.post("/api/orders", json=payload).status_code == 201
    res = client.post("/api/orders", json=payload)
    assert res.json()["code"] == "DUPLICATE_ORDER_NUMBER"


def test_order_visibility(client, auth):
    product = make_product()
    guest_order = client.post(
        "/api/orders", json=_order([{"productId": product.id, "quantity": 1}], sessionId="guest-7")
    ).json()

    assert client.get(f"/api/orders/{guest_order['id']}?sessionId=guest-7").status_code == 200
    res = client.get(f"/api/orders/{guest_order['id']}?sessionId=guest-8")
    assert res.status_code == 403

    auth.shopper()
    assert client.get("/api/orders").json() == []
    assert client.get(f"/api/orders/{guest_order['id']}").status_code == 403

    auth.staff()
    assert [o["id"] for o in client.get("/api/orders").json()] == [guest_order["id"]]
    assert client.get(f"/api/orders?id={guest_order['id']}").json()["orderNumber"] == guest_order["orderNumber"]


def test_status_machine(client, auth):
    auth.staff()
    order = client.post("/api/orders", json=_order([], sessionId="guest-1")).json()
    url = f"/api/orders/{order['id']}"

    assert client.put(url, json={"status": "shipped"}).json()["code"] == "INVALID_STATUS_TRANSITION"
    assert client.put(url, json={"status": "lost"}).json()["code"] == "INVALID_STATUS"

    for status in ("confirmed", "processing", "shipped", "delivered"):
        res = client.put(url, json={"status": status})
        assert res.status_code == 200
        assert res.json()["status"] == status

    assert client.put(url, json={"status": "cancelled"}).json()["code"] == "INVALID_STATUS_TRANSITION"
    assert client.put(url, json={"paymentStatus": "refunded"}).json()["code"] == "INVALID_PAYMENT_STATUS_TRANSITION"


def test_customer_can_only_cancel(client, auth):
    auth.shopper()
    product = make_product(stock=4)
    order = client.post("/api/orders", json=_order([{"productId": product.id, "quantity": 3}])).json()
    assert fetch(ProductModel, product.id).stock_quantity == 1

    res = client.put(f"/api/orders/{order['id']}", json={"status": "confirmed"})
    assert res.status_code == 403

    res = client.put(f"/api/orders/{order['id']}", json={"status": "cancelled"})
    assert res.status_code == 200
    assert res.json()["status"] == "cancelled"
    assert fetch(ProductModel, product.id).stock_quantity == 4

    assert client.delete(f"/api/orders/{order['id']}").status_code == 403
    auth.staff()
    res = client.delete(f"/api/orders/{order['id']}")
    assert res.status_code == 200
    assert res.json()["order"]["id"] == order["id"]


def test_money_fields_serialize_as_numbers(client):
    order = client.post(
        "/api/orders", json=_order([], sessionId="guest-1", subtotal=100.5, taxAmount=18.09, totalAmount=118.59)
    ).json()
    assert order["subtotal"] == 100.5
    assert order["taxAmount"] == 18.09
    assert Decimal(str(order["totalAmount"])) == Decimal("118.59")


def test_negative_amounts_are_rejected(client, auth):
    assert client.post("/api/orders", json=_order([], sessionId="guest-1", subtotal=-1)).json()["code"] == (
        "INVALID_SUBTOTAL"
    )

    auth.staff()
    order = client.post("/api/orders", json=_order([], sessionId="guest-1")).json()
    url = f"/api/orders/{order['id']}"

    res = client.put(url, json={"subtotal": -5})
    assert res.status_code == 400
    assert res.json()["code"] == "INVALID_SUBTOTAL"
    assert client.put(url, json={"shippingAmount": -0.01}).json()["code"] == "INVALID_SHIPPING_AMOUNT"
    assert client.get(url).json()["subtotal"] == 998.0

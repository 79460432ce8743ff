from datetime import timedelta
from decimal import Decimal

from truekind.data.models import CouponModel
from truekind.services.coupon_service import discount_for
from truekind.utils.clock import utcnow
from tests.conftest import make_coupon


def _window(days=30):
    now = utcnow()
    return {"validFrom": (now - timedelta(days=1)).isoformat(), "validUntil": (now + timedelta(days=days)).isoformat()}


def test_create_uppercases_code(client, auth):
    auth.staff()
    res = client.post(
        "/api/coupons", json={"code": "glow15", "discountType": "percentage", "discountValue": 15, **_window()}
    )
    assert res.status_code == 201
    assert res.json()["code"] == "GLOW15"
    assert res.json()["usedCount"] == 0

    res = client.post(
        "/api/coupons", json={"code": "GLOW15", "discountType": "fixed", "discountValue": 50, **_window()}
    )
    assert res.json()["code"] == "DUPLICATE_COUPON_CODE"


def test_percentage_over_100_rejected(client, auth):
    auth.staff()
    res = client.post(
        "/api/coupons", json={"code": "HUGE", "discountType": "percentage", "discountValue": 150, **_window()}
    )
    assert res.status_code == 400
    assert res.json()["code"] == "INVALID_PERCENTAGE_VALUE"


def test_date_range_checked_on_create_and_update(client, auth):
    auth.staff()
    now = utcnow()
    res = client.post(
        "/api/coupons",
        json={
            "code": "BACKWARDS",
            "discountType": "fixed",
            "discountValue": 100,
            "validFrom": now.isoformat(),
            "validUntil": (now - timedelta(days=2)).isoformat(),
        },
    )
    assert res.json()["code"] == "INVALID_DATE_RANGE"

    coupon = make_coupon()
    res = client.put(f"/api/coupons/{coupon.id}", json={"validUntil": (now - timedelta(days=5)).isoformat()})
    assert res.json()["code"] == "INVALID_DATE_RANGE"

    res = client.put(f"/api/coupons/{coupon.id}", json={"discountValue": 120})
    assert res.json()["code"] == "INVALID_PERCENTAGE_VALUE"


def test_coupon_admin_needs_staff(client, auth):
    auth.shopper()
    assert client.get("/api/coupons").status_code == 403


def test_validate_quotes_discount(client):
    make_coupon(code="GLOW10", value="10", max_discount_amount=Decimal("50"))
    res = client.post("/api/coupons/validate", json={"code": "glow10", "subtotal": 300})
    assert res.status_code == 200
    body = res.json()
    assert body["discountAmount"] == 30.0
    assert body["total"] == 270.0
    assert body["coupon"]["code"] == "GLOW10"

    # capped by maxDiscountAmount
    res = client.post("/api/coupons/validate", json={"code": "GLOW10", "subtotal": 1000})
    assert res.json()["discountAmount"] == 50.0


def test_validate_rejections(client):
    now = utcnow()
    make_coupon(code="OLD", valid_from=now - timedelta(days=10), valid_until=now - timedelta(days=1))
    make_coupon(code="SOON", valid_from=now + timedelta(days=1), valid_until=now + timedelta(days=10))
    make_coupon(code="OFF", is_active=False)
    make_coupon(code="USEDUP", usage_limit=2, used_count=2)
    make_coupon(code="BIGSPEND", min_purchase_amount=Decimal("1000"))

    def code_for(code):
        return client.post("/api/coupons/validate", json={"code": code, "subtotal": 500}).json()["code"]

    assert code_for("OLD") == "COUPON_EXPIRED"
    assert code_for("SOON") == "COUPON_NOT_YET_VALID"
    assert code_for("OFF") == "COUPON_INACTIVE"
    assert code_for("USEDUP") == "COUPON_USAGE_LIMIT_REACHED"
    assert code_for("BIGSPEND") == "MIN_PURCHASE_NOT_MET"

    res = client.post("/api/coupons/validate", json={"code": "NOPE", "subtotal": 500})
    assert res.status_code == 404
    assert res.json()["code"] == "COUPON_NOT_FOUND"


def test_discount_for_fixed_never_exceeds_subtotal():
    coupon = CouponModel(discount_type="fixed", discount_value=Decimal("200"))
    assert discount_for(coupon, Decimal("150")) == Decimal("150.00")

    coupon = CouponModel(discount_type="percentage", discount_value=Decimal("12.5"))
    assert discount_for(coupon, Decimal("99.99")) == Decimal("12.50")

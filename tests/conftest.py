import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "1"
os.environ["PAYMENT_KEY_ID"] = "rzp_test_key"
os.environ["PAYMENT_KEY_SECRET"] = "rzp_test_secret"
os.environ["SITE_URL"] = "https://shop.test"

from datetime import timedelta
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from truekind.api.deps import get_current_user
from truekind.data.database import Base, SessionLocal, engine
from truekind.data.models import (
    BlogCategoryModel,
    BlogPostModel,
    BlogTagModel,
    CategoryModel,
    CouponModel,
    ProductModel,
)
from truekind.main import app
from truekind.services.user_service import UserService
from truekind.utils.clock import utcnow

STAFF = {"user_id": "editor-1", "role": "editor", "name": "Meera Editor"}
SHOPPER = {"user_id": "shopper-1", "role": "user", "name": "Asha Rao"}
OTHER = {"user_id": "shopper-2", "role": "user", "name": "Ravi Iyer"}


@pytest.fixture(autouse=True)
def reset_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


class _Response:
    status_code = 200

    def raise_for_status(self):
        return None


@pytest.fixture(autouse=True)
def pings(monkeypatch):
    """Search engine pings go nowhere. Returns the list of requested URLs."""
    calls = []

    def fake_get(url, timeout=None, **kwargs):
        calls.append(url)
        return _Response()

    monkeypatch.setattr("truekind.services.sitemap_service.requests.get", fake_get)
    return calls


class Auth:
    def login(self, user_id: str, role: str = "user", name: str = "Test User"):
        data = {"id": user_id, "name": name, "email": f"{user_id}@example.com", "role": role}
        db = SessionLocal()
        try:
            user = UserService(db).sync_session_user(data)
        finally:
            db.close()
        app.dependency_overrides[get_current_user] = lambda: user
        return user

    def staff(self):
        return self.login(**STAFF)

    def shopper(self):
        return self.login(**SHOPPER)

    def other(self):
        return self.login(**OTHER)

    def logout(self):
        app.dependency_overrides.pop(get_current_user, None)


@pytest.fixture
def auth():
    a = Auth()
    yield a
    a.logout()


# rows inserted straight through the ORM

def add(obj):
    db = SessionLocal()
    try:
        db.add(obj)
        db.commit()
        db.refresh(obj)
        db.expunge(obj)
        return obj
    finally:
        db.close()


def fetch(model, obj_id):
    db = SessionLocal()
    try:
        obj = db.get(model, obj_id)
        if obj is not None:
            db.expunge(obj)
        return obj
    finally:
        db.close()


def make_category(name="Skincare", slug=None, parent_id=None):
    return add(CategoryModel(name=name, slug=slug or name.lower().replace(" ", "-"), parent_id=parent_id))


def make_product(name="Barrier Serum", price="499.00", stock=10, sku=None, **kwargs):
    slug = name.lower().replace(" ", "-")
    return add(
        ProductModel(
            name=name,
            slug=slug,
            description=f"{name} for everyday use",
            price=Decimal(price),
            sku=sku or slug.upper(),
            stock_quantity=stock,
            **kwargs,
        )
    )


def make_coupon(code="GLOW10", discount_type="percentage", value="10", **kwargs):
    now = utcnow()
    values = {
        "valid_from": now - timedelta(days=1),
        "valid_until": now + timedelta(days=30),
        "is_active": True,
        **kwargs,
    }
    return add(CouponModel(code=code, discount_type=discount_type, discount_value=Decimal(value), **values))


def make_blog_category(name="Routines"):
    return add(BlogCategoryModel(name=name, slug=name.lower()))


def make_tag(name="Beginners"):
    return add(BlogTagModel(name=name, slug=name.lower()))


def make_post(author_id, title="Morning routine", status="published", category_id=None, **kwargs):
    slug = kwargs.pop("slug", title.lower().replace(" ", "-"))
    values = {"published_at": utcnow() if status == "published" else None, **kwargs}
    return add(
        BlogPostModel(
            title=title,
            slug=slug,
            content="Cleanse, treat, protect.",
            author_id=author_id,
            category_id=category_id,
            status=status,
            read_time=1,
            **values,
        )
    )


class RecordingTask:
    """Stands in for a Celery task, keeps the .delay() arguments."""

    def __init__(self):
        self.calls = []

    def delay(self, *args):
        self.calls.append(args)

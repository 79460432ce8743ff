# truekind/data/seed.py
from decimal import Decimal

from sqlalchemy import select

from truekind.data.database import Base, SessionLocal, engine
from truekind.data.models import (
    AuthorProfileModel,
    BlogCategoryModel,
    BlogPostModel,
    BlogPostTagModel,
    BlogTagModel,
    BrandModel,
    CategoryModel,
    ProductModel,
    UserModel,
)
from truekind.utils.clock import utcnow
from truekind.utils.logging import get_logger
from truekind.utils.text import read_time

logger = get_logger(__name__)

WELCOME_POST = (
    "A gentle routine starts with a cleanser that respects your skin barrier. "
    "Follow with a hydrating serum and finish with sunscreen every morning."
)


def seed(db=None) -> bool:
    """Demo catalog and journal content. Only runs against an empty catalog."""
    own_session = db is None
    db = db or SessionLocal()
    try:
        if db.execute(select(ProductModel.id).limit(1)).first():
            return False

        skincare = CategoryModel(name="Skincare", slug="skincare")
        db.add(skincare)
        db.flush()
        serums = CategoryModel(name="Serums", slug="serums", parent_id=skincare.id)
        brand = BrandModel(name="Truekind", slug="truekind", is_featured=True)
        db.add_all([serums, brand])
        db.flush()

        db.add_all(
            [
                ProductModel(
                    name="Barrier Repair Serum",
                    slug="barrier-repair-serum",
                    description="Ceramides and niacinamide for stressed skin.",
                    price=Decimal("899.00"),
                    sku="TK-SER-001",
                    stock_quantity=50,
                    category_id=serums.id,
                    brand_id=brand.id,
                    is_featured=True,
                ),
                ProductModel(
                    name="Daily Mineral Sunscreen SPF 50",
                    slug="daily-mineral-sunscreen-spf-50",
                    description="Zinc oxide sunscreen without a white cast.",
                    price=Decimal("649.00"),
                    sku="TK-SUN-001",
                    stock_quantity=80,
                    category_id=skincare.id,
                    brand_id=brand.id,
                    is_new=True,
                ),
            ]
        )

        editor = UserModel(id="seed-editor", name="Truekind Editorial", email="editorial@truekind.com", role="editor")
        db.add(editor)
        db.flush()
        db.add(AuthorProfileModel(user_id=editor.id, bio="Skincare notes from the Truekind team.", social_links={}))

        journal = BlogCategoryModel(name="Routines", slug="routines")
        tag = BlogTagModel(name="Beginners", slug="beginners")
        db.add_all([journal, tag])
        db.flush()

        post = BlogPostModel(
            title="Building your first skincare routine",
            slug="building-your-first-skincare-routine",
            excerpt="Three steps are enough to start.",
            content=WELCOME_POST,
            author_id=editor.id,
            category_id=journal.id,
            status="published",
            published_at=utcnow(),
            read_time=read_time(WELCOME_POST),
        )
        db.add(post)
        db.flush()
        db.add(BlogPostTagModel(post_id=post.id, tag_id=tag.id))

        db.commit()
        logger.info("Seeded demo catalog and journal content")
        return True
    finally:
        if own_session:
            db.close()


if __name__ == "__main__":
    Base.metadata.create_all(bind=engine)
    seed()

# truekind/main.py
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from truekind.api.errors import register_exception_handlers
from truekind.api.routers import (
    blog_analytics,
    blog_authors,
    blog_comments,
    blog_posts,
    blog_taxonomy,
    brands,
    cart_items,
    categories,
    coupons,
    health,
    orders,
    payments,
    product_images,
    products,
    reviews,
    sitemap,
    wishlist_items,
)
from truekind.data import models  # noqa: F401  registers every table on Base.metadata
from truekind.data.database import Base, engine
from truekind.utils.logging import get_logger
from truekind.utils.settings import CORS_ORIGINS

logger = get_logger(__name__)

logger.info(f"Creating tables: {sorted(Base.metadata.tables)}")
Base.metadata.create_all(bind=engine)

ROUTERS = (
    health.router,
    categories.router,
    brands.router,
    products.router,
    product_images.router,
    reviews.router,
    coupons.router,
    orders.router,
    cart_items.router,
    wishlist_items.router,
    payments.router,
    blog_analytics.router,
    blog_posts.router,
    blog_taxonomy.categories_router,
    blog_taxonomy.tags_router,
    blog_comments.router,
    blog_authors.router,
    sitemap.router,
)


def create_app() -> FastAPI:
    app = FastAPI(
        title="Truekind Storefront",
        version="1.0.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials="*" not in CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    for router in ROUTERS:
        app.include_router(router, prefix="/api")

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)

# truekind/api/routers/sitemap.py
from fastapi import APIRouter

from truekind.services.sitemap_service import SitemapService

router = APIRouter(prefix="/sitemap-ping", tags=["seo"])


@router.post("", status_code=202)
def ping_sitemap():
    url = SitemapService.request_ping()
    return {"success": True, "message": "Sitemap ping queued", "sitemapUrl": url}

# truekind/services/sitemap_service.py
from urllib.parse import quote

import requests

from truekind.celery_worker import celery_app
from truekind.utils.logging import get_logger
from truekind.utils.retry import http_retry
from truekind.utils.settings import HTTP_TIMEOUT_SECONDS, SITE_URL

logger = get_logger(__name__)

PING_ENDPOINTS = (
    "https://www.google.com/ping?sitemap={sitemap}",
    "https://www.bing.com/ping?sitemap={sitemap}",
)


def sitemap_url() -> str:
    return f"{SITE_URL}/sitemap.xml"


class SitemapService:
    @staticmethod
    def request_ping() -> str:
        url = sitemap_url()
        ping_search_engines_task.delay(url)
        logger.info(f"Sitemap ping queued for {url}")
        return url


@http_retry()
def _ping(endpoint: str) -> int:
    resp = requests.get(endpoint, timeout=HTTP_TIMEOUT_SECONDS)
    resp.raise_for_status()
    return resp.status_code


@celery_app.task(name="truekind.services.sitemap_service.ping_search_engines_task")
def ping_search_engines_task(url: str):
    results = {}
    for template in PING_ENDPOINTS:
        endpoint = template.format(sitemap=quote(url, safe=""))
        try:
            results[endpoint] = _ping(endpoint)
        except requests.RequestException as e:
            logger.warning(f"Sitemap ping failed for {endpoint}: {e}")
            results[endpoint] = None
    logger.info(f"Sitemap pinged: {results}")
    return results

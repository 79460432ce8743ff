# truekind/services/session_client.py
import requests

from truekind.utils.logging import get_logger
from truekind.utils.retry import http_retry
from truekind.utils.settings import AUTH_SERVICE_URL, HTTP_TIMEOUT_SECONDS

logger = get_logger(__name__)


class SessionClient:
    """Resolves a session token against the auth service."""

    def __init__(self, base_url: str | None = None, timeout: float = HTTP_TIMEOUT_SECONDS):
        self.base_url = (base_url or AUTH_SERVICE_URL).rstrip("/")
        self.timeout = timeout

    @http_retry()
    def get_session_user(self, token: str) -> dict | None:
        url = f"{self.base_url}/api/auth/get-session"
        logger.debug(f"SessionClient GET {url}")

        resp = requests.get(url, headers={"Authorization": f"Bearer {token}"}, timeout=self.timeout)
        if resp.status_code in (401, 403, 404):
            return None
        resp.raise_for_status()

        data = resp.json()
        if not data or not data.get("user"):
            return None
        return data["user"]

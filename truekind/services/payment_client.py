# truekind/services/payment_client.py
import hashlib
import hmac

import requests

from truekind.utils.logging import get_logger
from truekind.utils.retry import http_retry
from truekind.utils.settings import (
    HTTP_TIMEOUT_SECONDS,
    PAYMENT_GATEWAY_URL,
    PAYMENT_KEY_ID,
    PAYMENT_KEY_SECRET,
)

logger = get_logger(__name__)


class PaymentGatewayClient:
    """
    Order creation and payment signature checks for the payment gateway.
    Capture happens on the gateway side.
    """

    def __init__(
        self,
        base_url: str | None = None,
        key_id: str | None = None,
        key_secret: str | None = None,
        timeout: float = HTTP_TIMEOUT_SECONDS,
    ):
        self.base_url = (base_url or PAYMENT_GATEWAY_URL).rstrip("/")
        self.key_id = key_id if key_id is not None else PAYMENT_KEY_ID
        self.key_secret = key_secret if key_secret is not None else PAYMENT_KEY_SECRET
        self.timeout = timeout

    @http_retry()
    def create_order(self, amount: int, currency: str, receipt: str, notes: dict | None = None) -> dict:
        url = f"{self.base_url}/v1/orders"
        logger.info(f"PaymentGatewayClient POST {url} receipt={receipt} amount={amount}")

        resp = requests.post(
            url,
            json={"amount": amount, "currency": currency, "receipt": receipt, "notes": notes or {}},
            auth=(self.key_id, self.key_secret),
            timeout=self.timeout,
        )
        resp.raise_for_status()
        return resp.json()

    def signature_for(self, gateway_order_id: str, payment_id: str) -> str:
        message = f"{gateway_order_id}|{payment_id}".encode()
        return hmac.new(self.key_secret.encode(), message, hashlib.sha256).hexdigest()

    def verify_signature(self, gateway_order_id: str, payment_id: str, signature: str) -> bool:
        return hmac.compare_digest(self.signature_for(gateway_order_id, payment_id), signature)

"""
Checkout API client - what the storefront uses to talk to this backend.

Wraps the proxy endpoints with httpx and turns error envelopes into
CheckoutApiError.
"""
import logging
from typing import Any, Optional
from urllib.parse import quote

import httpx

from exceptions import CheckoutApiError, InsufficientFundsError
from domain.constants import INSUFFICIENT_FUNDS_MESSAGE
from models import CheckoutConfigResponse, CryptoOrderResponse, OrderStatusResponse

logger = logging.getLogger(__name__)


class CheckoutApiClient:
    """Async client for the checkout proxy endpoints."""

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    async def aclose(self):
        await self._client.aclose()

    async def _call(self, method: str, path: str, action: str, **kwargs) -> Any:
        response = await self._client.request(method, path, **kwargs)
        if response.is_success:
            return response.json() if response.content else None

        try:
            body = response.json()
        except ValueError:
            body = response.text

        message = f"Failed to {action}"
        details = body
        if isinstance(body, dict) and isinstance(body.get("error"), dict):
            message = body["error"].get("message") or message
            details = body["error"].get("details")
        elif isinstance(body, str) and body:
            message = f"{message}: {response.status_code} {body}"

        raise CheckoutApiError(response.status_code, message, details)

    @staticmethod
    def _auth(client_secret: Optional[str]) -> dict:
        return {"Authorization": client_secret} if client_secret else {}

    # ── Orders ──────────────────────────────────────────────────────

    async def create_order(self, body: dict) -> dict:
        return await self._call("POST", "/api/orders", "create order", json=body)

    async def edit_order(self, order_id: str, body: dict, client_secret: Optional[str] = None) -> dict:
        return await self._call(
            "PATCH",
            f"/api/orders/{quote(order_id, safe='')}",
            "edit order",
            json=body,
            headers=self._auth(client_secret),
        )

    async def get_order(self, order_id: str, client_secret: Optional[str] = None) -> dict:
        return await self._call(
            "GET",
            f"/api/orders/{quote(order_id, safe='')}",
            "get order",
            headers=self._auth(client_secret),
        )

    # ── Crypto ──────────────────────────────────────────────────────

    async def create_crypto_order(self, chain: str, currency: str) -> CryptoOrderResponse:
        data = await self._call(
            "POST",
            "/api/crypto/create-order",
            "create order",
            json={"chain": chain, "currency": currency},
        )
        return CryptoOrderResponse.model_validate(data)

    async def check_order_status(self, order_id: str) -> OrderStatusResponse:
        data = await self._call(
            "GET",
            "/api/crypto/order-status",
            "check order status",
            params={"orderId": order_id},
        )
        return OrderStatusResponse.model_validate(data)

    async def process_payment(
        self,
        order_id: str,
        client_secret: str,
        tx_id: str,
        currency: str,
        network: str,
    ) -> dict:
        return await self._call(
            "POST",
            "/api/crypto/process-payment",
            "process payment",
            json={
                "orderId": order_id,
                "clientSecret": client_secret,
                "txId": tx_id,
                "currency": currency,
                "network": network,
            },
        )

    # ── Config ──────────────────────────────────────────────────────

    async def get_config(self) -> CheckoutConfigResponse:
        data = await self._call("GET", "/api/checkout/config", "load checkout config")
        return CheckoutConfigResponse.model_validate(data["data"])


def handle_api_error(error: BaseException) -> str:
    """Turn any checkout failure into a message fit for the buyer."""
    logger.error(f"API error: {error!r}")
    if isinstance(error, InsufficientFundsError):
        return INSUFFICIENT_FUNDS_MESSAGE
    if isinstance(error, CheckoutApiError):
        message = error.message
    elif str(error):
        message = str(error)
    else:
        return "An unexpected error occurred"
    if "insufficient funds" in message.lower():
        return INSUFFICIENT_FUNDS_MESSAGE
    return message

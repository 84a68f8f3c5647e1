"""
Crossmint commerce API client singleton.

Every call is a single request with no retries. Server-initiated calls
authenticate with the API key; calls continuing a buyer's order forward the
buyer's Authorization header (the order client secret) instead.
"""
import json
import logging
from typing import Any, Optional
from urllib.parse import quote

import httpx

from config import settings
from domain.constants import CHECKOUT_API_VERSION, ORDERS_API_VERSION
from domain.errors import UpstreamError

logger = logging.getLogger(__name__)


def _read_body(response: httpx.Response) -> Any:
    """Decode an upstream body as JSON when possible, else return the raw text."""
    if not response.content:
        return None
    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return response.text


class CommerceClient:
    """Thin async wrapper around the commerce order and checkout endpoints."""

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        # Tests swap in an httpx.MockTransport here
        self._transport = transport

    # ── Plumbing ────────────────────────────────────────────────────

    def _url(self, version: str, path: str) -> str:
        return f"{settings.api_base_url}{version}/{path}"

    def _order_url(self, order_id: str) -> str:
        return self._url(ORDERS_API_VERSION, f"orders/{quote(order_id, safe='')}")

    @staticmethod
    def _headers(authorization: Optional[str] = None) -> dict:
        headers = {"Content-Type": "application/json"}
        if authorization:
            headers["Authorization"] = authorization
        else:
            headers["X-API-KEY"] = settings.crossmint_api_key
        return headers

    async def _request(
        self,
        method: str,
        url: str,
        action: str,
        headers: dict,
        payload: Optional[dict] = None,
    ) -> Any:
        """
        Send one request and return the decoded body.

        Raises:
            UpstreamError: on any non-2xx response (status + body preserved)
        """
        async with httpx.AsyncClient(
            timeout=settings.http_timeout_seconds,
            transport=self._transport,
        ) as client:
            response = await client.request(method, url, headers=headers, json=payload)

        body = _read_body(response)

        if not response.is_success:
            logger.error(
                f"Crossmint API error while trying to {action}: "
                f"status={response.status_code} reason={response.reason_phrase} body={body}"
            )
            raise UpstreamError(action, response.status_code, response.reason_phrase, body)

        return body

    # ── Orders API ──────────────────────────────────────────────────

    async def create_order(self, body: dict) -> dict:
        """POST /orders with the server API key."""
        return await self._request(
            "POST",
            self._url(ORDERS_API_VERSION, "orders"),
            "create order",
            self._headers(),
            body,
        )

    async def get_order(self, order_id: str, authorization: Optional[str] = None) -> dict:
        """GET /orders/{id} with the buyer's client secret, or the API key."""
        return await self._request(
            "GET",
            self._order_url(order_id),
            "get order",
            self._headers(authorization),
        )

    async def edit_order(
        self,
        order_id: str,
        body: dict,
        authorization: Optional[str] = None,
    ) -> dict:
        """PATCH /orders/{id} (e.g. to attach the recipient)."""
        return await self._request(
            "PATCH",
            self._order_url(order_id),
            "edit order",
            self._headers(authorization),
            body,
        )

    # ── Checkout API ────────────────────────────────────────────────

    async def process_crypto_payment(
        self,
        order_id: str,
        client_secret: str,
        tx_id: str,
        currency: str,
        network: str,
    ) -> Optional[dict]:
        """
        Report a submitted on-chain payment for an order.

        Authenticated with the order client secret. Returns None when the
        API answers 204 No Content.
        """
        url = self._url(
            CHECKOUT_API_VERSION,
            f"checkout/orders/{quote(order_id, safe='')}/process-crypto-payment",
        )
        return await self._request(
            "POST",
            url,
            "process payment",
            self._headers(client_secret),
            {"txId": tx_id, "currency": currency, "network": network},
        )


# Global client instance
commerce_client = CommerceClient()

"""
Pytest configuration and shared fixtures for the checkout backend tests.

Provides an ASGI test client, a stubbed commerce API (httpx.MockTransport
installed on the commerce client singleton) and sample upstream payloads.
"""
import json
from typing import AsyncGenerator, Callable, Union

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from checkout_api import CheckoutApiClient
from commerce_client import commerce_client
from config import settings
from main import app

UPSTREAM_BASE = "https://commerce.test/api/"
ORDERS_PATH = "/api/2022-06-09/orders"
CHECKOUT_PATH = "/api/2023-06-09/checkout/orders"

TEST_API_KEY = "sk_test_checkout"
TEST_COLLECTION_ID = "col-123"
TEST_EMAIL = "buyer@example.com"
TEST_PAYER = "0x1111111111111111111111111111111111111111"


# ── Settings ────────────────────────────────────────────────────────


@pytest.fixture(autouse=True)
def configured_settings():
    """Point settings at the stub upstream for every test, then restore."""
    overrides = {
        "crossmint_api_key": TEST_API_KEY,
        "crossmint_api_base_url": UPSTREAM_BASE,
        "crossmint_collection_id": TEST_COLLECTION_ID,
        "crossmint_email": TEST_EMAIL,
        "crossmint_payer_address": TEST_PAYER,
        "environment": "development",
    }
    original = {key: getattr(settings, key) for key in overrides}
    for key, value in overrides.items():
        setattr(settings, key, value)
    yield settings
    for key, value in original.items():
        setattr(settings, key, value)


# ── Upstream Stub ───────────────────────────────────────────────────

Responder = Union[httpx.Response, Callable[[httpx.Request], httpx.Response]]


class UpstreamStub:
    """Records every request and answers from a (method, path) table."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self._routes: dict[tuple[str, str], list[Responder]] = {}

    def add(self, method: str, path: str, status: int = 200, json_body=None, text=None):
        if json_body is not None:
            response = httpx.Response(status, json=json_body)
        elif text is not None:
            response = httpx.Response(status, text=text)
        else:
            response = httpx.Response(status)
        self._routes.setdefault((method, path), []).append(response)

    def add_callback(self, method: str, path: str, callback: Callable[[httpx.Request], httpx.Response]):
        self._routes.setdefault((method, path), []).append(callback)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self._routes.get((request.method, request.url.path))
        if not queue:
            return httpx.Response(404, json={"error": "not stubbed"})
        # the last registered responder keeps answering once the queue drains
        responder = queue.pop(0) if len(queue) > 1 else queue[0]
        return responder(request) if callable(responder) else responder

    def body(self, index: int = -1) -> dict:
        return json.loads(self.requests[index].content)


@pytest.fixture
def upstream():
    stub = UpstreamStub()
    commerce_client._transport = httpx.MockTransport(stub.handler)
    yield stub
    commerce_client._transport = None


# ── Clients ─────────────────────────────────────────────────────────


def _asgi_transport() -> ASGITransport:
    # 500 responses come back as responses instead of re-raised app errors
    return ASGITransport(app=app, raise_app_exceptions=False)


@pytest_asyncio.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to the FastAPI app."""
    async with AsyncClient(transport=_asgi_transport(), base_url="http://test") as c:
        yield c


@pytest_asyncio.fixture
async def checkout_api() -> AsyncGenerator[CheckoutApiClient, None]:
    """Storefront client wired to the app in-process."""
    async with CheckoutApiClient(base_url="http://test", transport=_asgi_transport()) as api:
        yield api


# ── Sample Upstream Payloads ────────────────────────────────────────


def make_order(order_id: str = "ord_123", status: str = "awaiting-payment", preparation=None) -> dict:
    """Order body shaped like the commerce API's GET /orders/{id}."""
    payment = {"status": status, "method": "base-sepolia", "currency": "usdc"}
    if preparation is not None:
        payment["preparation"] = preparation
    return {
        "orderId": order_id,
        "phase": "payment",
        "locale": "en-US",
        "lineItems": [],
        "quote": {"status": "valid", "totalPrice": {"amount": "1.00", "currency": "usdc"}},
        "payment": payment,
    }


@pytest.fixture
def crypto_order_created() -> dict:
    order = make_order(
        "ord_crypto",
        preparation={
            "chain": "base-sepolia",
            "payerAddress": TEST_PAYER,
            "serializedTransaction": "0x02f8b1",
            "paymentAddress": "0x2222222222222222222222222222222222222222",
        },
    )
    order["payment"]["amount"] = "1.05"
    return {"clientSecret": "cs_crypto_secret", "order": order}


@pytest.fixture
def card_order_prepared() -> dict:
    return make_order(
        "ord_card",
        preparation={
            "stripePublishableKey": "pk_test_123",
            "stripeClientSecret": "pi_123_secret_456",
        },
    )

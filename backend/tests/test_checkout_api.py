"""
Tests for the storefront-side CheckoutApiClient and handle_api_error.
"""
import httpx
import pytest

from checkout_api import CheckoutApiClient, handle_api_error
from domain.constants import INSUFFICIENT_FUNDS_MESSAGE
from exceptions import CheckoutApiError, InsufficientFundsError
from tests.conftest import ORDERS_PATH, make_order


class TestCheckoutApiClient:

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_error_envelope_becomes_exception(self, checkout_api, upstream):
        upstream.add("GET", f"{ORDERS_PATH}/ord_1", 404, {"error": "Order not found"})

        with pytest.raises(CheckoutApiError) as exc_info:
            await checkout_api.get_order("ord_1")

        err = exc_info.value
        assert err.status_code == 404
        assert err.message.startswith("Failed to get order: 404")
        assert err.details["upstream"] == {"error": "Order not found"}

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_client_secret_sent_as_authorization(self, checkout_api, upstream):
        upstream.add("GET", f"{ORDERS_PATH}/ord_1", 200, make_order("ord_1"))

        await checkout_api.get_order("ord_1", client_secret="cs_secret")

        assert upstream.requests[0].headers["Authorization"] == "cs_secret"

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_check_order_status(self, checkout_api, upstream):
        upstream.add("GET", f"{ORDERS_PATH}/ord_1", 200, make_order("ord_1", status="failed"))

        result = await checkout_api.check_order_status("ord_1")

        assert result.status == "failed"

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_get_config(self, checkout_api):
        config = await checkout_api.get_config()
        assert config.poll_interval_seconds == 5.0

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_plain_text_error(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(503, text="maintenance"))
        async with CheckoutApiClient(base_url="http://test", transport=transport) as api:
            with pytest.raises(CheckoutApiError) as exc_info:
                await api.check_order_status("ord_1")

        assert exc_info.value.status_code == 503
        assert exc_info.value.message == "Failed to check order status: 503 maintenance"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_order_id_is_escaped_in_path(self):
        seen = []

        def handler(request):
            seen.append(request.url.raw_path)
            return httpx.Response(200, json={"id": "ord/1 x"})

        transport = httpx.MockTransport(handler)
        async with CheckoutApiClient(base_url="http://test", transport=transport) as api:
            await api.get_order("ord/1 x")
            await api.edit_order("ord/1 x", {"locale": "en-US"})

        assert seen == [b"/api/orders/ord%2F1%20x"] * 2


class TestHandleApiError:

    @pytest.mark.unit
    def test_checkout_api_error_message(self):
        assert handle_api_error(CheckoutApiError(400, "Order ID is required")) == "Order ID is required"

    @pytest.mark.unit
    def test_insufficient_funds_is_rewritten(self):
        error = RuntimeError("execution reverted: insufficient funds for gas * price + value")
        assert handle_api_error(error) == INSUFFICIENT_FUNDS_MESSAGE

    @pytest.mark.unit
    def test_insufficient_funds_exception(self):
        assert handle_api_error(InsufficientFundsError()) == INSUFFICIENT_FUNDS_MESSAGE

    @pytest.mark.unit
    def test_empty_error(self):
        assert handle_api_error(RuntimeError()) == "An unexpected error occurred"

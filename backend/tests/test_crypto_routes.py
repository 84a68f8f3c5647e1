"""
Tests for the crypto checkout endpoints.

Tests: create-order defaults/validation/normalization, order-status,
process-payment validation, 204 handling and upstream error propagation.
"""
import pytest

from tests.conftest import (
    CHECKOUT_PATH,
    ORDERS_PATH,
    TEST_API_KEY,
    TEST_COLLECTION_ID,
    TEST_EMAIL,
    TEST_PAYER,
    make_order,
)

PROCESS_PAYMENT_BODY = {
    "orderId": "ord_crypto",
    "clientSecret": "cs_crypto_secret",
    "txId": "0xabc123",
    "currency": "usdc",
    "network": "base-sepolia",
}


class TestCreateCryptoOrder:
    """Tests for POST /api/crypto/create-order."""

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_defaults_build_order_from_settings(self, client, upstream, crypto_order_created):
        upstream.add("POST", ORDERS_PATH, 200, crypto_order_created)

        response = await client.post("/api/crypto/create-order")

        assert response.status_code == 200
        assert upstream.requests[0].headers["X-API-KEY"] == TEST_API_KEY
        assert upstream.body() == {
            "recipient": {"email": TEST_EMAIL},
            "locale": "en-US",
            "payment": {
                "method": "ethereum-sepolia",
                "currency": "usdc",
                "payerAddress": TEST_PAYER,
            },
            "lineItems": {"collectionLocator": f"crossmint:{TEST_COLLECTION_ID}"},
        }

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_malformed_body_falls_back_to_defaults(self, client, upstream, crypto_order_created):
        upstream.add("POST", ORDERS_PATH, 200, crypto_order_created)

        response = await client.post(
            "/api/crypto/create-order",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 200
        assert upstream.body()["payment"]["method"] == "ethereum-sepolia"
        assert upstream.body()["payment"]["currency"] == "usdc"

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_wrongly_typed_chain_is_a_validation_error(self, client, upstream):
        response = await client.post("/api/crypto/create-order", json={"chain": 5})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "validation_error"
        assert "chain" in response.json()["error"]["message"]
        assert upstream.requests == []

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_response_is_normalized(self, client, upstream, crypto_order_created):
        upstream.add("POST", ORDERS_PATH, 200, crypto_order_created)

        response = await client.post(
            "/api/crypto/create-order",
            json={"chain": "base-sepolia", "currency": "eth"},
        )

        data = response.json()
        assert data["orderId"] == "ord_crypto"
        assert data["clientSecret"] == "cs_crypto_secret"
        assert data["paymentAddress"] == "0x2222222222222222222222222222222222222222"
        assert data["amount"] == "1.05"
        assert data["serializedTx"] == "0x02f8b1"
        assert data["paymentStatus"] == "awaiting-payment"
        assert upstream.body()["payment"]["method"] == "base-sepolia"
        assert upstream.body()["payment"]["currency"] == "eth"

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_invalid_chain_lists_valid_options(self, client, upstream):
        response = await client.post("/api/crypto/create-order", json={"chain": "solana"})

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["message"] == (
            "Invalid chain: solana. Valid options are: ethereum-sepolia, base-sepolia"
        )
        assert error["details"]["validOptions"] == ["ethereum-sepolia", "base-sepolia"]
        assert upstream.requests == []

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_invalid_currency_rejected(self, client, upstream):
        response = await client.post("/api/crypto/create-order", json={"currency": "doge"})

        assert response.status_code == 400
        assert "Invalid currency: doge" in response.json()["error"]["message"]

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_insufficient_funds_status_reaches_client(self, client, upstream, crypto_order_created):
        crypto_order_created["order"]["payment"]["status"] = "crypto-payer-insufficient-funds"
        upstream.add("POST", ORDERS_PATH, 200, crypto_order_created)

        response = await client.post("/api/crypto/create-order")

        assert response.json()["paymentStatus"] == "crypto-payer-insufficient-funds"

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_upstream_failure_propagated(self, client, upstream):
        upstream.add("POST", ORDERS_PATH, 401, {"error": "unauthorized"})

        response = await client.post("/api/crypto/create-order")

        assert response.status_code == 401
        assert response.json()["error"]["details"]["upstream"] == {"error": "unauthorized"}


class TestOrderStatus:
    """Tests for GET /api/crypto/order-status."""

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_missing_order_id_returns_400(self, client, upstream):
        response = await client.get("/api/crypto/order-status")

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Order ID is required"
        assert upstream.requests == []

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_returns_payment_status(self, client, upstream):
        upstream.add("GET", f"{ORDERS_PATH}/ord_5", 200, make_order("ord_5", status="completed"))

        response = await client.get("/api/crypto/order-status", params={"orderId": "ord_5"})

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "completed"
        assert data["payment"]["currency"] == "usdc"
        assert upstream.requests[0].headers["X-API-KEY"] == TEST_API_KEY

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_upstream_error_propagated(self, client, upstream):
        upstream.add("GET", f"{ORDERS_PATH}/ord_5", 500, text="boom")

        response = await client.get("/api/crypto/order-status", params={"orderId": "ord_5"})

        assert response.status_code == 500
        assert response.json()["error"]["details"]["upstream"] == "boom"


class TestProcessPayment:
    """Tests for POST /api/crypto/process-payment."""

    @pytest.mark.api
    @pytest.mark.asyncio
    @pytest.mark.parametrize("field", ["orderId", "clientSecret", "txId", "currency", "network"])
    async def test_each_field_is_required(self, client, upstream, field):
        body = {k: v for k, v in PROCESS_PAYMENT_BODY.items() if k != field}

        response = await client.post("/api/crypto/process-payment", json=body)

        assert response.status_code == 400
        assert response.json()["error"]["message"] == f"Missing required fields: {field}"
        assert upstream.requests == []

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_empty_field_rejected(self, client, upstream):
        response = await client.post(
            "/api/crypto/process-payment",
            json={**PROCESS_PAYMENT_BODY, "txId": ""},
        )

        assert response.status_code == 400
        assert "txId" in response.json()["error"]["message"]

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_no_content_means_success(self, client, upstream):
        upstream.add("POST", f"{CHECKOUT_PATH}/ord_crypto/process-crypto-payment", 204)

        response = await client.post("/api/crypto/process-payment", json=PROCESS_PAYMENT_BODY)

        assert response.status_code == 200
        assert response.json() == {"success": True}

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_forwards_tx_with_client_secret(self, client, upstream):
        upstream.add(
            "POST",
            f"{CHECKOUT_PATH}/ord_crypto/process-crypto-payment",
            200,
            {"status": "processing"},
        )

        response = await client.post("/api/crypto/process-payment", json=PROCESS_PAYMENT_BODY)

        assert response.json() == {"status": "processing"}
        sent = upstream.requests[0]
        assert sent.headers["Authorization"] == "cs_crypto_secret"
        assert "X-API-KEY" not in sent.headers
        assert upstream.body() == {
            "txId": "0xabc123",
            "currency": "usdc",
            "network": "base-sepolia",
        }

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_upstream_rejection_keeps_status_and_details(self, client, upstream):
        upstream.add(
            "POST",
            f"{CHECKOUT_PATH}/ord_crypto/process-crypto-payment",
            422,
            {"error": "transaction not found"},
        )

        response = await client.post("/api/crypto/process-payment", json=PROCESS_PAYMENT_BODY)

        assert response.status_code == 422
        error = response.json()["error"]
        assert error["message"].startswith("Failed to process payment: 422")
        assert error["details"]["upstream"] == {"error": "transaction not found"}

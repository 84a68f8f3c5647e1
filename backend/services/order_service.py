"""
Order Proxy Service

Handles:
    1. Generic order create / read / edit, forwarded verbatim
    2. Crypto order creation from configured defaults, normalized for the widget
    3. Order status lookup for pollers
    4. Crypto payment confirmation with the order client secret

Nothing is stored locally: the commerce API owns every order. Upstream
failures surface as UpstreamError with the upstream status code.
"""
import logging
from typing import Optional

from commerce_client import commerce_client
from config import settings
from domain.constants import DEFAULT_CRYPTO_CHAIN, DEFAULT_CRYPTO_CURRENCY, DEFAULT_LOCALE
from domain.enums import CryptoChain, CryptoCurrency
from domain.errors import ValidationError
from models import (
    CreateOrderRequest,
    CryptoOrderResponse,
    EditOrderRequest,
    OrderStatusResponse,
    ProcessPaymentRequest,
)

logger = logging.getLogger(__name__)

VALID_CHAINS = [c.value for c in CryptoChain]
VALID_CURRENCIES = [c.value for c in CryptoCurrency]


# ════════════════════════════════════════════════════════════════════
# Generic Order Pass-Through
# ════════════════════════════════════════════════════════════════════


async def create_order(req: CreateOrderRequest) -> dict:
    """Create an order with the server API key and return the upstream body."""
    logger.info(
        "Creating order with Crossmint... "
        f"(recipient={req.recipient.to_upstream() if req.recipient else None}, "
        f"method={req.payment.method.value}, currency={req.payment.currency})"
    )

    data = await commerce_client.create_order(req.to_upstream())

    order_id = (data or {}).get("order", {}).get("orderId")
    logger.info(f"Order created successfully: {order_id}")
    return data


async def get_order(order_id: str, authorization: Optional[str] = None) -> dict:
    """Read an order, using the buyer's client secret when one is supplied."""
    _require_order_id(order_id)
    logger.info(f"Getting order {order_id} from Crossmint...")

    data = await commerce_client.get_order(order_id, authorization=authorization)

    logger.info(f"Order retrieved successfully: {(data or {}).get('orderId', order_id)}")
    return data


async def edit_order(
    order_id: str,
    req: EditOrderRequest,
    authorization: Optional[str] = None,
) -> dict:
    """Patch an order (typically to attach the recipient)."""
    _require_order_id(order_id)
    logger.info(
        f"Editing order {order_id} with Crossmint... "
        f"(recipient={req.recipient.to_upstream() if req.recipient else None})"
    )

    data = await commerce_client.edit_order(
        order_id, req.to_upstream(), authorization=authorization
    )

    logger.info(f"Order edited successfully: {(data or {}).get('orderId', order_id)}")
    return data


# ════════════════════════════════════════════════════════════════════
# Crypto Checkout
# ════════════════════════════════════════════════════════════════════


def resolve_crypto_options(
    chain: Optional[str] = None,
    currency: Optional[str] = None,
) -> tuple[str, str]:
    """
    Apply defaults and check chain/currency against the offered options.

    Raises:
        ValidationError: for an unsupported chain or currency
    """
    chain = chain or DEFAULT_CRYPTO_CHAIN
    currency = currency or DEFAULT_CRYPTO_CURRENCY

    if chain not in VALID_CHAINS:
        raise ValidationError(
            f"Invalid chain: {chain}. Valid options are: {', '.join(VALID_CHAINS)}",
            details={"field": "chain", "validOptions": VALID_CHAINS},
        )
    if currency not in VALID_CURRENCIES:
        raise ValidationError(
            f"Invalid currency: {currency}. Valid options are: {', '.join(VALID_CURRENCIES)}",
            details={"field": "currency", "validOptions": VALID_CURRENCIES},
        )
    return chain, currency


def build_crypto_order_body(chain: str, currency: str) -> dict:
    """Order body for the configured collection, recipient and payer wallet."""
    return {
        "recipient": {"email": settings.crossmint_email},
        "locale": DEFAULT_LOCALE,
        "payment": {
            "method": chain,
            "currency": currency,
            "payerAddress": settings.crossmint_payer_address,
        },
        "lineItems": {"collectionLocator": settings.collection_locator},
    }


def normalize_crypto_order(data: dict) -> CryptoOrderResponse:
    """Flatten a create-order response into what the crypto widget consumes."""
    order = data["order"]
    payment = order.get("payment") or {}
    preparation = payment.get("preparation") or {}

    return CryptoOrderResponse(
        orderId=order["orderId"],
        clientSecret=data["clientSecret"],
        paymentAddress=preparation.get("paymentAddress"),
        amount=payment.get("amount"),
        serializedTx=preparation.get("serializedTransaction"),
        paymentStatus=payment.get("status"),
    )


async def create_crypto_order(
    chain: Optional[str] = None,
    currency: Optional[str] = None,
) -> CryptoOrderResponse:
    """Create a crypto-paid order and return the normalized details."""
    chain, currency = resolve_crypto_options(chain, currency)
    logger.info(f"Creating order with Crossmint using chain={chain}, currency={currency}...")

    data = await commerce_client.create_order(build_crypto_order_body(chain, currency))
    result = normalize_crypto_order(data)

    logger.info(
        f"  ✅ Crypto order created: {result.order_id} "
        f"(amount={result.amount}, status={result.payment_status})"
    )
    return result


async def get_order_status(order_id: Optional[str]) -> OrderStatusResponse:
    """Current payment status of an order, read with the server API key."""
    if not order_id:
        raise ValidationError("Order ID is required", details={"field": "orderId"})

    data = await commerce_client.get_order(order_id)
    payment = (data or {}).get("payment") or {}

    logger.debug(f"Order status fetched: {order_id} → {payment.get('status')}")
    return OrderStatusResponse(status=payment.get("status"), payment=payment)


async def process_payment(req: ProcessPaymentRequest) -> dict:
    """
    Confirm an on-chain payment with the checkout API.

    The client secret authenticates the call; only its length is logged.
    """
    logger.info(
        f"Processing payment: order={req.order_id} tx={req.tx_id} "
        f"currency={req.currency} network={req.network} "
        f"clientSecretLength={len(req.client_secret)}"
    )

    data = await commerce_client.process_crypto_payment(
        order_id=req.order_id,
        client_secret=req.client_secret,
        tx_id=req.tx_id,
        currency=req.currency,
        network=req.network,
    )

    if data is None:
        logger.info(f"  ✅ Payment accepted (no content) for order {req.order_id}")
        return {"success": True}

    logger.info(f"  ✅ Payment processed for order {req.order_id}")
    return data


def _require_order_id(order_id: str):
    if not order_id or not order_id.strip():
        raise ValidationError("Order ID is required", details={"field": "orderId"})

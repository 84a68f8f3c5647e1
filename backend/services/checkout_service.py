"""
Checkout Flows - card and crypto purchase of the collection NFT.

Card (hosted payment element):
    create order → attach recipient → re-read order → mount element → confirm

Crypto (connected wallet):
    create crypto order → send serialized tx from wallet → process payment

Both flows talk only to this backend (CheckoutApiClient). Confirming the card
payment and signing the crypto transaction are delegated to the injected
PaymentProcessor / WalletConnector; neither flow touches keys or card data.

Completion is reported through `on_complete(order_id)`, after which a
SuccessTracker polls the order until it settles.
"""
import inspect
import logging
from typing import Any, Callable, Optional, Protocol

from checkout_api import CheckoutApiClient, handle_api_error
from config import settings
from domain.constants import (
    CARD_ELEMENT_APPEARANCE,
    CARD_PAYMENT_METHOD_ORDER,
    DEFAULT_BILLING_NAME,
    DEFAULT_CRYPTO_CHAIN,
    DEFAULT_CRYPTO_CURRENCY,
    MISSING_PAYMENT_CONFIG_MESSAGE,
)
from domain.enums import (
    CardCheckoutState,
    CryptoCheckoutState,
    PaymentMethod,
    PaymentStatus,
)
from exceptions import InsufficientFundsError, PaymentConfigurationError
from models import CryptoOrderResponse, PaymentConfirmation, PaymentElementConfig
from services.status_poller import StatusPoller

logger = logging.getLogger(__name__)

OnComplete = Callable[[str], Any]

CREATE_ORDER_FAILED_MESSAGE = "Failed to create order. Please try again."
UNEXPECTED_PAYMENT_ERROR = "An unexpected error occurred. Please try again."


class PaymentProcessor(Protocol):
    """Hosted card element: submits the form and confirms the payment."""

    async def confirm_payment(self, config: PaymentElementConfig) -> PaymentConfirmation:
        ...


class WalletConnector(Protocol):
    """Connected wallet: parses, signs and broadcasts a serialized transaction."""

    async def send_transaction(self, serialized_tx: str, chain: str) -> str:
        """Returns the transaction hash."""
        ...


async def _notify(callback: Optional[OnComplete], order_id: str):
    if callback is None:
        return
    result = callback(order_id)
    if inspect.isawaitable(result):
        await result


# ════════════════════════════════════════════════════════════════════
# Card Checkout
# ════════════════════════════════════════════════════════════════════


class CardCheckout:
    """Hosted payment element flow."""

    def __init__(
        self,
        api: CheckoutApiClient,
        on_complete: Optional[OnComplete] = None,
        collection_id: Optional[str] = None,
        recipient_email: Optional[str] = None,
    ):
        self.api = api
        self.on_complete = on_complete
        self.collection_id = collection_id or settings.crossmint_collection_id
        self.recipient_email = recipient_email or settings.crossmint_email

        self.state = CardCheckoutState.LOADING
        self.order_id: Optional[str] = None
        self.config: Optional[PaymentElementConfig] = None
        self.error: Optional[str] = None
        self.payment_error: Optional[str] = None

    def build_order_request(self) -> dict:
        return {
            "payment": {"method": PaymentMethod.STRIPE_PAYMENT_ELEMENT.value},
            "lineItems": {
                "collectionLocator": f"crossmint:{self.collection_id}",
                "callData": {"quantity": 1},
            },
        }

    async def start(self) -> Optional[PaymentElementConfig]:
        """
        Create the order, attach the recipient and read back the payment
        preparation. Every call after create uses the id create returned.
        """
        try:
            created = await self.api.create_order(self.build_order_request())
            order_id = created["order"]["orderId"]
            self.order_id = order_id

            await self.api.edit_order(order_id, {"recipient": {"email": self.recipient_email}})
            order = await self.api.get_order(order_id)
        except Exception as e:
            logger.error(f"Error creating order: {e}")
            self.state = CardCheckoutState.ERROR
            self.error = CREATE_ORDER_FAILED_MESSAGE
            return None

        try:
            self.config = self._element_config(order_id, order)
        except PaymentConfigurationError as e:
            logger.error(f"Order {order_id} is not ready for card payment: {e}")
            self.state = CardCheckoutState.ERROR
            self.error = MISSING_PAYMENT_CONFIG_MESSAGE
            return None

        self.state = CardCheckoutState.READY
        logger.info(f"Card checkout ready for order {order_id}")
        return self.config

    def _element_config(self, order_id: str, order: dict) -> PaymentElementConfig:
        preparation = ((order or {}).get("payment") or {}).get("preparation") or {}
        publishable_key = preparation.get("stripePublishableKey")
        client_secret = preparation.get("stripeClientSecret")

        if not (order_id and publishable_key and client_secret):
            raise PaymentConfigurationError(
                "payment.preparation lacks stripePublishableKey or stripeClientSecret"
            )

        return PaymentElementConfig(
            orderId=order_id,
            stripePublishableKey=publishable_key,
            stripeClientSecret=client_secret,
            billingName=DEFAULT_BILLING_NAME,
            billingEmail=self.recipient_email,
            paymentMethodOrder=list(CARD_PAYMENT_METHOD_ORDER),
            appearance=CARD_ELEMENT_APPEARANCE,
        )

    async def confirm(self, processor: PaymentProcessor) -> bool:
        """
        Confirm the card payment through the hosted element.

        Processor errors are shown to the buyer and the form stays usable.
        """
        if self.state != CardCheckoutState.READY or self.config is None:
            logger.error("Payment element is not ready; ignoring confirm")
            return False

        self.state = CardCheckoutState.PROCESSING
        self.payment_error = None

        try:
            result = await processor.confirm_payment(self.config)
        except Exception as e:
            logger.error(f"Unexpected error confirming payment: {e}")
            self.payment_error = UNEXPECTED_PAYMENT_ERROR
            self.state = CardCheckoutState.READY
            return False

        if result.error_message:
            logger.warning(f"Payment confirmation error: {result.error_message}")
            self.payment_error = result.error_message
            self.state = CardCheckoutState.READY
            return False

        if not result.payment_intent_id:
            self.state = CardCheckoutState.READY
            return False

        logger.info(
            f"Payment successful: intent={result.payment_intent_id} status={result.status}"
        )
        self.state = CardCheckoutState.COMPLETED
        await _notify(self.on_complete, self.order_id)
        return True


# ════════════════════════════════════════════════════════════════════
# Crypto Checkout
# ════════════════════════════════════════════════════════════════════


class CryptoCheckout:
    """Wallet transfer flow."""

    def __init__(
        self,
        api: CheckoutApiClient,
        on_complete: Optional[OnComplete] = None,
        chain: str = DEFAULT_CRYPTO_CHAIN,
        currency: str = DEFAULT_CRYPTO_CURRENCY,
    ):
        self.api = api
        self.on_complete = on_complete
        self.chain = chain
        self.currency = currency

        self.state = CryptoCheckoutState.CREATING
        self.order: Optional[CryptoOrderResponse] = None
        self.tx_hash: Optional[str] = None
        self.error: Optional[str] = None
        self.is_processing = False
        self._order_requested = False

    async def start(self) -> Optional[CryptoOrderResponse]:
        """Create the crypto order. Only the first call reaches the backend."""
        if self._order_requested:
            return self.order
        self._order_requested = True

        try:
            order = await self.api.create_crypto_order(self.chain, self.currency)
            if order.payment_status == PaymentStatus.CRYPTO_PAYER_INSUFFICIENT_FUNDS.value:
                raise InsufficientFundsError(f"Payer cannot cover order {order.order_id}")
        except Exception as e:
            logger.error(f"Order creation error: {e}")
            self._fail(handle_api_error(e))
            return None

        self.order = order
        self.state = CryptoCheckoutState.AWAITING_PAYMENT
        await self._initial_status_check()
        return order

    async def _initial_status_check(self):
        try:
            status = await self.api.check_order_status(self.order.order_id)
            logger.info(f"Initial status check for {self.order.order_id}: {status.status}")
        except Exception as e:
            logger.warning(f"Status check error: {e}")

    async def sign_and_send(self, wallet: WalletConnector) -> Optional[str]:
        """Hand the prepared transaction to the wallet; keeps the returned hash."""
        if not self.order or not self.order.serialized_tx:
            return None

        try:
            tx_hash = await wallet.send_transaction(self.order.serialized_tx, self.chain)
        except Exception as e:
            logger.error(f"Transaction error: {e}")
            self._fail(handle_api_error(e) if str(e) else "Failed to send transaction")
            return None

        self.tx_hash = tx_hash
        self.state = CryptoCheckoutState.COMPLETED
        logger.info(f"Transaction sent for order {self.order.order_id}: {tx_hash}")
        return tx_hash

    async def process_payment(self) -> bool:
        """Report the sent transaction so the order can settle."""
        if not self.order or not self.tx_hash:
            return False

        self.is_processing = True
        logger.info(
            f"Processing crypto payment: order={self.order.order_id} tx={self.tx_hash} "
            f"clientSecretLength={len(self.order.client_secret)}"
        )
        try:
            await self.api.process_payment(
                order_id=self.order.order_id,
                client_secret=self.order.client_secret,
                tx_id=self.tx_hash,
                currency=self.currency,
                network=self.chain,
            )
        except Exception as e:
            logger.error(f"Payment processing error for {self.order.order_id}: {e}")
            self._fail(handle_api_error(e))
            return False
        finally:
            self.is_processing = False

        self.state = CryptoCheckoutState.PROCESSED
        await _notify(self.on_complete, self.order.order_id)
        return True

    def _fail(self, message: str):
        self.error = message
        self.state = CryptoCheckoutState.ERROR


# ════════════════════════════════════════════════════════════════════
# Success View
# ════════════════════════════════════════════════════════════════════


def format_status(status: Optional[str]) -> str:
    if not status:
        return "Checking"
    return status[0].upper() + status[1:]


STATUS_MESSAGES = {
    PaymentStatus.COMPLETED.value: (
        "Payment Successful",
        "You will receive a confirmation email shortly.",
    ),
    PaymentStatus.FAILED.value: (
        "Payment Failed",
        "Please try again or contact support if the issue persists.",
    ),
}


class SuccessTracker:
    """Polls a completed checkout's order until it settles."""

    def __init__(
        self,
        api: CheckoutApiClient,
        order_id: str,
        interval: Optional[float] = None,
        max_attempts: Optional[int] = None,
        max_errors: Optional[int] = None,
    ):
        self.order_id = order_id
        self.poller = StatusPoller(
            order_id,
            api.check_order_status,
            interval=interval,
            max_attempts=max_attempts,
            max_errors=max_errors,
        )

    def start(self):
        return self.poller.start()

    async def stop(self):
        await self.poller.stop()

    async def wait(self) -> Optional[str]:
        return await self.poller.wait()

    def view(self) -> dict:
        """Everything the success screen renders."""
        snapshot = self.poller.get_status()
        headline, message = STATUS_MESSAGES.get(self.poller.status, (None, None))
        return {
            "orderId": self.order_id,
            "status": format_status(self.poller.status),
            "settled": headline is not None,
            "headline": headline,
            "message": message,
            "elapsedSeconds": snapshot["elapsedSeconds"],
            "lastPolled": snapshot["lastPolled"],
            "error": snapshot["lastError"],
            "payment": self.poller.payment,
        }

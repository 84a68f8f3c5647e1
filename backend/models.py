"""
Pydantic models for request/response validation.

Request models mirror the commerce API order contract. Unknown keys are
kept (extra="allow") so bodies are forwarded verbatim.
"""
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from domain.enums import PaymentMethod


class CheckoutBase(BaseModel):
    """Shared base - construct by Python name or camelCase alias, keep unknown keys."""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    def to_upstream(self) -> dict:
        """Serialize for the commerce API (aliases, no unset optionals)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ── Order Request Models ────────────────────────────────────────────

class PhysicalAddress(CheckoutBase):
    name: str
    line1: str
    line2: Optional[str] = None
    city: str
    state: Optional[str] = None
    postal_code: str = Field(..., alias="postalCode")
    country: str


class Recipient(CheckoutBase):
    """Delivery target: an email or a wallet address."""
    email: Optional[str] = None
    wallet_address: Optional[str] = Field(None, alias="walletAddress")
    physical_address: Optional[PhysicalAddress] = Field(None, alias="physicalAddress")

    @model_validator(mode="after")
    def _email_or_wallet(self):
        if not self.email and not self.wallet_address:
            raise ValueError("recipient requires either email or walletAddress")
        return self


class PaymentRequest(CheckoutBase):
    method: PaymentMethod
    currency: Optional[str] = None
    payer_address: Optional[str] = Field(None, alias="payerAddress")
    receipt_email: Optional[str] = Field(None, alias="receiptEmail")


class ExecutionParameters(CheckoutBase):
    mode: str = "exact-in"
    amount: str
    max_slippage_bps: Optional[str] = Field(None, alias="maxSlippageBps")


class LineItem(CheckoutBase):
    """One line item, addressed by collection, product or token locator."""
    collection_locator: Optional[str] = Field(None, alias="collectionLocator")
    product_locator: Optional[str] = Field(None, alias="productLocator")
    token_locator: Optional[str] = Field(None, alias="tokenLocator")
    call_data: Optional[dict[str, Any]] = Field(None, alias="callData")
    execution_parameters: Optional[ExecutionParameters] = Field(None, alias="executionParameters")

    @model_validator(mode="after")
    def _one_locator(self):
        if not (self.collection_locator or self.product_locator or self.token_locator):
            raise ValueError(
                "line item requires collectionLocator, productLocator or tokenLocator"
            )
        return self


class CreateOrderRequest(CheckoutBase):
    """POST /api/orders body."""
    recipient: Optional[Recipient] = None
    locale: Optional[str] = None
    payment: PaymentRequest
    line_items: Union[LineItem, List[LineItem]] = Field(..., alias="lineItems")


class EditOrderRequest(CheckoutBase):
    """PATCH /api/orders/{orderId} body."""
    recipient: Optional[Recipient] = None
    locale: Optional[str] = None
    payment: Optional[PaymentRequest] = None


# ── Crypto Checkout Models ──────────────────────────────────────────

class CryptoOrderRequest(CheckoutBase):
    """POST /api/crypto/create-order body. Both fields fall back to defaults."""
    chain: Optional[str] = None
    currency: Optional[str] = None


class CryptoOrderResponse(CheckoutBase):
    """Normalized order details handed to the crypto widget."""
    order_id: str = Field(..., alias="orderId")
    client_secret: str = Field(..., alias="clientSecret")
    payment_address: Optional[str] = Field(None, alias="paymentAddress")
    amount: Optional[str] = None
    serialized_tx: Optional[str] = Field(None, alias="serializedTx")
    payment_status: Optional[str] = Field(None, alias="paymentStatus")


class OrderStatusResponse(CheckoutBase):
    status: Optional[str] = None
    payment: dict[str, Any] = Field(default_factory=dict)


class ProcessPaymentRequest(CheckoutBase):
    """POST /api/crypto/process-payment body - every field is required."""
    order_id: str = Field(..., alias="orderId", min_length=1)
    client_secret: str = Field(..., alias="clientSecret", min_length=1)
    tx_id: str = Field(..., alias="txId", min_length=1)
    currency: str = Field(..., min_length=1)
    network: str = Field(..., min_length=1)


# ── Card Checkout Models ────────────────────────────────────────────

class PaymentElementConfig(CheckoutBase):
    """Everything the hosted card element needs to mount."""
    order_id: str = Field(..., alias="orderId")
    stripe_publishable_key: str = Field(..., alias="stripePublishableKey")
    stripe_client_secret: str = Field(..., alias="stripeClientSecret")
    billing_name: str = Field(..., alias="billingName")
    billing_email: str = Field(..., alias="billingEmail")
    payment_method_order: List[str] = Field(..., alias="paymentMethodOrder")
    appearance: dict[str, Any]


class PaymentConfirmation(CheckoutBase):
    """Outcome reported by the payment processor after confirmation."""
    payment_intent_id: Optional[str] = Field(None, alias="paymentIntentId")
    status: Optional[str] = None
    error_message: Optional[str] = Field(None, alias="errorMessage")


# ── Public Config ───────────────────────────────────────────────────

class CheckoutOption(BaseModel):
    id: str
    name: str


class CheckoutConfigResponse(CheckoutBase):
    collection_id: str = Field(..., alias="collectionId")
    default_email: str = Field(..., alias="defaultEmail")
    chains: List[CheckoutOption]
    currencies: List[CheckoutOption]
    poll_interval_seconds: float = Field(..., alias="pollIntervalSeconds")

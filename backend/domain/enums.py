"""
Domain enums mirroring the commerce API vocabulary.
"""

from enum import Enum


class PaymentMethod(str, Enum):
    ARBITRUM_SEPOLIA = "arbitrum-sepolia"
    BASE_SEPOLIA = "base-sepolia"
    ETHEREUM_SEPOLIA = "ethereum-sepolia"
    OPTIMISM_SEPOLIA = "optimism-sepolia"
    ARBITRUM = "arbitrum"
    BSC = "bsc"
    ETHEREUM = "ethereum"
    OPTIMISM = "optimism"
    SOLANA = "solana"
    STRIPE_PAYMENT_ELEMENT = "stripe-payment-element"


class CryptoChain(str, Enum):
    """Chains offered by the crypto checkout."""
    ETHEREUM_SEPOLIA = "ethereum-sepolia"
    BASE_SEPOLIA = "base-sepolia"

    @property
    def display_name(self) -> str:
        return {
            CryptoChain.ETHEREUM_SEPOLIA: "Ethereum Sepolia",
            CryptoChain.BASE_SEPOLIA: "Base Sepolia",
        }[self]


class CryptoCurrency(str, Enum):
    """Currencies offered by the crypto checkout."""
    ETH = "eth"
    USDC = "usdc"

    @property
    def display_name(self) -> str:
        return self.value.upper()


class PaymentStatus(str, Enum):
    """
    Order payment statuses observed while polling.

    Only COMPLETED and FAILED are terminal; the commerce API may report
    other in-between values, which are treated as pending.
    """
    PENDING = "pending"
    AWAITING_PAYMENT = "awaiting-payment"
    CRYPTO_PAYER_INSUFFICIENT_FUNDS = "crypto-payer-insufficient-funds"
    COMPLETED = "completed"
    FAILED = "failed"


TERMINAL_STATUSES = frozenset({PaymentStatus.COMPLETED.value, PaymentStatus.FAILED.value})


def is_terminal(status: str | None) -> bool:
    return status in TERMINAL_STATUSES


class CardCheckoutState(str, Enum):
    LOADING = "loading"
    READY = "ready"
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"


class CryptoCheckoutState(str, Enum):
    CREATING = "creating"
    AWAITING_PAYMENT = "awaiting-payment"
    COMPLETED = "completed"      # transaction sent, not yet confirmed upstream
    PROCESSED = "processed"
    ERROR = "error"


class PollerState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    FINISHED = "finished"        # terminal order status observed
    FAILED = "failed"            # too many consecutive errors
    TIMED_OUT = "timed_out"      # attempt budget exhausted
    CANCELLED = "cancelled"

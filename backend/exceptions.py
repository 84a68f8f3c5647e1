"""
Custom exception classes for the checkout client.
"""
from typing import Any


class CheckoutApiError(Exception):
    """Raised when a checkout proxy endpoint answers with a non-2xx status."""

    def __init__(self, status_code: int, message: str, details: Any = None):
        super().__init__(f"{message} ({status_code})")
        self.status_code = status_code
        self.message = message
        self.details = details


class PaymentConfigurationError(Exception):
    """Raised when an order lacks the preparation data a widget needs."""
    pass


class InsufficientFundsError(Exception):
    """Raised when the payer wallet cannot cover the crypto order."""
    pass

"""
Domain constants used across services/routers.
"""

# Commerce API versions (path prefixes under the base URL)
ORDERS_API_VERSION = "2022-06-09"
CHECKOUT_API_VERSION = "2023-06-09"

DEFAULT_LOCALE = "en-US"
DEFAULT_CRYPTO_CHAIN = "ethereum-sepolia"
DEFAULT_CRYPTO_CURRENCY = "usdc"

INSUFFICIENT_FUNDS_MESSAGE = (
    "Insufficient funds. Please make sure you have enough ETH to cover the transaction."
)
MISSING_PAYMENT_CONFIG_MESSAGE = "Missing payment configuration"

# Hosted card element defaults
DEFAULT_BILLING_NAME = "Test User"
CARD_PAYMENT_METHOD_ORDER = ("card", "apple_pay", "google_pay")
CARD_ELEMENT_APPEARANCE = {
    "theme": "night",
    "variables": {
        "colorPrimary": "#4F46E5",
        "colorBackground": "#18181B",
        "colorText": "#FFFFFF",
        "colorDanger": "#EF4444",
        "fontFamily": "ui-sans-serif, system-ui, sans-serif",
    },
}

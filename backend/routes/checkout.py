"""
Public checkout configuration for the storefront.
"""
from fastapi import APIRouter

from config import settings
from domain.enums import CryptoChain, CryptoCurrency
from domain.responses import success_response
from models import CheckoutConfigResponse, CheckoutOption

router = APIRouter(prefix="/api/checkout", tags=["checkout"])


@router.get("/config")
async def get_checkout_config():
    """
    Values the frontend needs before starting a checkout.

    Never includes the API key.
    """
    config = CheckoutConfigResponse(
        collectionId=settings.crossmint_collection_id,
        defaultEmail=settings.crossmint_email,
        chains=[CheckoutOption(id=c.value, name=c.display_name) for c in CryptoChain],
        currencies=[CheckoutOption(id=c.value, name=c.display_name) for c in CryptoCurrency],
        pollIntervalSeconds=settings.status_poll_seconds,
    )
    return success_response(config.model_dump(by_alias=True))

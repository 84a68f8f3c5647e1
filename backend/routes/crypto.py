"""
Crypto checkout endpoints.

Endpoints:
    POST /api/crypto/create-order     - Create an order payable on-chain
    GET  /api/crypto/order-status     - Current payment status (?orderId=)
    POST /api/crypto/process-payment  - Report the buyer's transaction hash
"""
import json
import logging
from typing import Optional

from fastapi import APIRouter, Query, Request
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from domain.responses import ERROR_RESPONSES
from models import (
    CryptoOrderRequest,
    CryptoOrderResponse,
    OrderStatusResponse,
    ProcessPaymentRequest,
)
from services import order_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/crypto", tags=["crypto"])


async def _read_crypto_order_request(request: Request) -> CryptoOrderRequest:
    """Parse the optional body; a missing or unreadable body means defaults."""
    raw = await request.body()
    try:
        data = json.loads(raw) if raw else {}
    except ValueError:
        logger.warning("Unreadable create-order body, using defaults")
        data = {}
    if not isinstance(data, dict):
        data = {}
    try:
        return CryptoOrderRequest.model_validate(data)
    except ValidationError as e:
        raise RequestValidationError(
            [{**err, "loc": ("body", *err["loc"])} for err in e.errors(include_url=False)]
        )


@router.post(
    "/create-order",
    response_model=CryptoOrderResponse,
    responses=ERROR_RESPONSES,
    openapi_extra={
        "requestBody": {
            "required": False,
            "content": {"application/json": {"schema": CryptoOrderRequest.model_json_schema()}},
        }
    },
)
async def create_crypto_order(request: Request):
    """
    Create an order for the configured collection, paid from the
    configured payer wallet.

    Body is optional; chain defaults to ethereum-sepolia, currency to usdc.
    """
    req = await _read_crypto_order_request(request)
    return await order_service.create_crypto_order(req.chain, req.currency)


@router.get("/order-status", response_model=OrderStatusResponse, responses=ERROR_RESPONSES)
async def get_order_status(order_id: Optional[str] = Query(None, alias="orderId")):
    """Payment status of an order; polled by the checkout client."""
    return await order_service.get_order_status(order_id)


@router.post("/process-payment", responses=ERROR_RESPONSES)
async def process_payment(req: ProcessPaymentRequest):
    """
    Confirm an on-chain payment.

    Returns `{"success": true}` when the commerce API answers 204,
    otherwise its JSON body.
    """
    return await order_service.process_payment(req)

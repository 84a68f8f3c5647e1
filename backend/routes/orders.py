"""
Order proxy endpoints - create, read and edit commerce API orders.

Bodies go to the commerce API unchanged and its JSON comes back unchanged.
Reads and edits forward the caller's Authorization header (the order client
secret) when present, otherwise the server API key is used.

Endpoints:
    POST  /api/orders             - Create an order
    GET   /api/orders/{order_id}  - Read an order
    PATCH /api/orders/{order_id}  - Edit an order (recipient, locale, payment)
"""
import logging
from typing import Optional

from fastapi import APIRouter, Header, status

from domain.responses import ERROR_RESPONSES
from models import CreateOrderRequest, EditOrderRequest
from services import order_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/orders", tags=["orders"])


# ── POST /api/orders ───────────────────────────────────────────────

@router.post("", status_code=status.HTTP_201_CREATED, responses=ERROR_RESPONSES)
async def create_order(req: CreateOrderRequest):
    """
    Create an order with the commerce API.

    Returns the upstream `{clientSecret, order}` body as-is.
    """
    return await order_service.create_order(req)


# ── GET /api/orders/{order_id} ─────────────────────────────────────

@router.get("/{order_id}", responses=ERROR_RESPONSES)
async def get_order(
    order_id: str,
    authorization: Optional[str] = Header(None),
):
    """Read an order."""
    return await order_service.get_order(order_id, authorization=authorization)


# ── PATCH /api/orders/{order_id} ───────────────────────────────────

@router.patch("/{order_id}", responses=ERROR_RESPONSES)
async def edit_order(
    order_id: str,
    req: EditOrderRequest,
    authorization: Optional[str] = Header(None),
):
    """Edit an order, e.g. attach the recipient before payment."""
    return await order_service.edit_order(order_id, req, authorization=authorization)

"""
Health check endpoint.
"""
from datetime import datetime, timezone

from fastapi import APIRouter, status

from config import settings

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check():
    """Liveness plus a hint whether the commerce API credentials are configured."""
    return {
        "status": "healthy",
        "environment": settings.environment,
        "crossmint_configured": bool(settings.crossmint_api_key),
        "collection_configured": bool(settings.crossmint_collection_id),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }

"""
Standard API response models and helpers.

Order endpoints mirror the commerce API bodies verbatim; everything the
backend produces itself uses these envelopes:
- Success: { "success": true, "data": <payload>, "meta": {...} }
- Error: { "success": false, "error": { "code": "...", "message": "...", "details": {...} } }
"""
from typing import Any
from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """Standard error detail structure."""
    code: str = Field(..., description="Error code (e.g., 'validation_error', 'upstream')")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] | None = Field(default=None, description="Additional error context")


class StandardErrorResponse(BaseModel):
    """Standard error response envelope."""
    success: bool = Field(False, description="Always false for errors")
    error: ErrorDetail = Field(..., description="Error details")


# OpenAPI `responses=` block shared by every proxy route
ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": StandardErrorResponse, "description": "Missing or invalid input"},
    500: {"model": StandardErrorResponse, "description": "Unexpected failure"},
    "4XX": {"model": StandardErrorResponse, "description": "Propagated commerce API error"},
}


def success_response(data: Any, meta: dict[str, Any] | None = None) -> dict[str, Any]:
    """
    Create a standardized success response.

    Args:
        data: The response payload
        meta: Optional metadata

    Returns:
        dict: { "success": true, "data": <data>, "meta": <meta> }
    """
    response = {"success": True, "data": data}
    if meta:
        response["meta"] = meta
    return response


def error_response(code: str, message: str, details: Any = None) -> dict[str, Any]:
    """Create a standardized error body (see StandardErrorResponse)."""
    return {
        "success": False,
        "error": {
            "code": code,
            "message": message,
            "details": details,
        },
    }

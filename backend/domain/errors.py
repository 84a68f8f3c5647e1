"""
Custom domain exceptions for consistent error handling.

These exceptions are mapped to HTTP status codes by the global exception handler
in main.py.
"""
import json
from typing import Any

from fastapi import HTTPException, status


class DomainError(HTTPException):
    """Base class for all domain-specific errors."""
    def __init__(self, message: str, status_code: int = status.HTTP_400_BAD_REQUEST, details: dict | None = None):
        super().__init__(status_code=status_code, detail=message)
        self.message = message
        self.details = details or {}


class ValidationError(DomainError):
    """Validation error (400)."""
    def __init__(self, message: str, field: str | None = None, details: dict | None = None):
        if field:
            message = f"Validation error on {field}: {message}"
        super().__init__(message, status_code=status.HTTP_400_BAD_REQUEST, details=details)


class UpstreamError(DomainError):
    """
    The commerce API answered with a non-2xx status.

    Keeps the upstream status code so the proxy can propagate it unchanged,
    and carries the upstream body under details["upstream"].
    """
    def __init__(
        self,
        action: str,
        status_code: int,
        reason: str = "",
        body: Any = None,
    ):
        if isinstance(body, str):
            text = body
        elif body is not None:
            text = json.dumps(body)
        else:
            text = ""
        message = f"Failed to {action}: {status_code} {reason}".rstrip()
        if text:
            message = f"{message} - {text}"
        super().__init__(
            message,
            status_code=status_code,
            details={"status": status_code, "upstream": body},
        )
        self.action = action
        self.body = body

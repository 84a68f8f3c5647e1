"""
NFT Headless Checkout - FastAPI Application

Backend proxy between the storefront and the Crossmint commerce API:
order create/read/edit, crypto order creation, status lookup and crypto
payment confirmation.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import settings
from domain.responses import error_response
from routes import checkout, crypto, health, orders

# ── Logging ─────────────────────────────────────────────────────────

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# ── Lifespan ────────────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: validate settings. Nothing to tear down; no local state."""
    settings.validate_production_settings()
    logger.info(
        f"Checkout proxy ready (environment={settings.environment}, "
        f"upstream={settings.api_base_url})"
    )

    yield  # app runs here

    logger.info("Shutting down")


# ── App Factory ─────────────────────────────────────────────────────

app = FastAPI(
    title="NFT Headless Checkout API",
    description="Card and crypto checkout proxy for the Crossmint commerce API",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Routes ──────────────────────────────────────────────────────────

app.include_router(health.router)
app.include_router(checkout.router)
app.include_router(orders.router)
app.include_router(crypto.router)


# ── Exception Handlers ──────────────────────────────────────────────


def describe_validation_errors(errors: list[dict]) -> tuple[str, list[dict]]:
    """
    Turn pydantic error entries into one readable message plus a compact
    per-field list.
    """
    missing = []
    invalid = []
    fields = []
    for err in errors:
        loc = [str(p) for p in err.get("loc", ())]
        # drop the "body"/"query"/"path" prefix
        field = ".".join(loc[1:]) or (loc[0] if loc else "request")
        fields.append({"field": field, "type": err.get("type"), "message": err.get("msg")})
        if err.get("type") == "missing":
            missing.append(field)
        else:
            invalid.append(f"{field} ({err.get('msg')})")

    parts = []
    if missing:
        parts.append(f"Missing required fields: {', '.join(missing)}")
    if invalid:
        parts.append(f"Invalid fields: {'; '.join(invalid)}")
    return ". ".join(parts) or "Invalid request", fields


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request, exc: RequestValidationError):
    """Malformed or incomplete input is a 400, not FastAPI's default 422."""
    message, fields = describe_validation_errors(exc.errors())
    logger.warning(f"Rejected request on {request.url.path}: {message}")
    return JSONResponse(
        status_code=400,
        content=error_response("validation_error", message, {"fields": fields}),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """
    Catch-all for unhandled exceptions.

    Never return raw exception details to clients; the traceback is logged.
    """
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content=error_response("internal_server_error", "Internal server error"),
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request, exc: StarletteHTTPException):
    """
    Standardize HTTPException responses for frontend consumers.

    Keeps the HTTP status code (upstream status included), but
    wraps the payload.
    """
    if hasattr(exc, "message") and hasattr(exc, "details"):
        # DomainError with structured error info
        error_code = exc.__class__.__name__.replace("Error", "").lower()
        return JSONResponse(
            status_code=exc.status_code,
            content=error_response(error_code, exc.message, exc.details),
            headers=getattr(exc, "headers", None),
        )

    detail = exc.detail
    message = detail if isinstance(detail, str) else "Request failed"
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(
            "http_error",
            message,
            detail if not isinstance(detail, str) else None,
        ),
        headers=getattr(exc, "headers", None),
    )


# ── Entrypoint ──────────────────────────────────────────────────────

if __name__ == "__main__":
    import uvicorn
    import os
    port = int(os.environ.get("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port, log_level="info")

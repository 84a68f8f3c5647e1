"""
Configuration management for the NFT Headless Checkout backend.

Loads settings from .env via pydantic-settings.

Notes:
    - The Crossmint API key never leaves the backend; the frontend only
      receives the per-order client secret.
    - validate_production_settings() enforces strict CORS in production.
"""
import logging

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ── Crossmint Commerce API ──────────────────────────────────────
    crossmint_api_key: str = ""
    crossmint_api_base_url: str = "https://staging.crossmint.com/api/"

    # ── Checkout Defaults ───────────────────────────────────────────
    crossmint_email: str = "cse@paella.dev"        # default NFT recipient
    crossmint_payer_address: str = ""              # wallet paying crypto orders
    crossmint_collection_id: str = ""

    # ── Upstream HTTP ───────────────────────────────────────────────
    http_timeout_seconds: float = 30.0

    # ── Status Polling ──────────────────────────────────────────────
    status_poll_seconds: float = 5.0
    status_poll_max_attempts: int = 120   # 10 minutes at the default interval
    status_poll_max_errors: int = 5       # consecutive failures before giving up

    # ── Application ─────────────────────────────────────────────────
    environment: str = "development"

    # ── CORS ────────────────────────────────────────────────────────
    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173,http://127.0.0.1:5173"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # allow unknown .env keys without crashing
    )

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def api_base_url(self) -> str:
        """Commerce API base URL, always ending with a slash."""
        base = self.crossmint_api_base_url
        return base if base.endswith("/") else base + "/"

    @property
    def collection_locator(self) -> str:
        return f"crossmint:{self.crossmint_collection_id}"

    def validate_production_settings(self):
        """
        Validate settings for production safety.

        Called during app startup.
        """
        if self.environment == "production":
            if not self.crossmint_api_key:
                raise ValueError(
                    "CROSSMINT_API_KEY must be set in production. "
                    "Every server-initiated order call is authenticated with it."
                )
            if "*" in self.cors_origins:
                raise ValueError(
                    "CORS_ORIGINS must not contain '*' in production. "
                    "Set explicit allowed origins."
                )
            if "staging" in self.crossmint_api_base_url:
                logger.warning("⚠️  Production environment is pointed at the staging commerce API")
            logger.info("✅ Production settings validated")
        else:
            warnings = []
            if not self.crossmint_api_key:
                warnings.append("CROSSMINT_API_KEY is empty (upstream calls will be rejected)")
            if not self.crossmint_collection_id:
                warnings.append("CROSSMINT_COLLECTION_ID is empty")
            if "*" in self.cors_origins:
                warnings.append("CORS_ORIGINS contains '*' (open access)")
            for w in warnings:
                logger.warning(f"⚠️  {w}")


# Global settings instance
settings = Settings()

"""Centralized application configuration via Pydantic Settings.

Loads all env vars into a typed Settings instance shared by the API
routers and the extraction service.
"""

from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Supabase
    SUPABASE_URL: str = Field(..., description="Supabase project URL")
    SUPABASE_ANON_KEY: str = Field(..., description="Supabase anon/public key")

    # CORS
    ALLOWED_ORIGINS: str = Field(
        default="http://localhost:3000",
        description="Comma-separated allowed origins for CORS",
    )

    # Logging
    LOG_LEVEL: str = Field(default="INFO", description="Python log level")
    ENVIRONMENT: str = Field(
        default="development",
        description="Runtime environment: development, staging, production",
    )

    # App
    APP_VERSION: str = Field(default="0.1.0", description="Application version")

    # Extraction
    MAX_EXTRACT_CHARS: int = Field(
        default=20_000,
        description="Largest text body accepted by POST /transactions/extract",
    )
    STRICT_DATES: bool = Field(
        default=False,
        description="Drop records whose date cannot be parsed instead of using now()",
    )
    TRANSACTIONS_TABLE: str = Field(
        default="transactions",
        description="Supabase table holding persisted transactions",
    )

    @property
    def allowed_origins(self) -> list[str]:
        """Parse comma-separated origins into a list."""
        return [o.strip() for o in self.ALLOWED_ORIGINS.split(",") if o.strip()]

    @property
    def log_level(self) -> str:
        return self.LOG_LEVEL

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    model_config = {"env_file": ".env", "extra": "ignore"}


def get_settings() -> Settings:
    """Factory for Settings, overridable in tests."""
    return Settings()


# Module-level singleton (lazy: only created when first accessed)
try:
    settings = get_settings()
except Exception:
    # During testing, env vars may not be set; tests patch settings
    settings = None  # type: ignore[assignment]

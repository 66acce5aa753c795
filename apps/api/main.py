"""SpendSmart API: FastAPI entry point.

Serves the transaction extraction engine over HTTP: extract from pasted
SMS/statement text, list and delete the caller's stored transactions.
"""

import structlog
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from apps.api.core.config import settings
from apps.api.core.errors import register_error_handlers
from apps.api.core.logging import setup_logging

from apps.api.domains.transactions.router import router as transactions_router
from apps.api.routers import health

logger = structlog.get_logger()

APP_VERSION = settings.APP_VERSION if settings else "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown hooks."""
    setup_logging(
        log_level=settings.log_level if settings else "INFO",
        json_output=settings.is_production if settings else False,
    )
    logger.info("app_starting", version=APP_VERSION)
    yield
    logger.info("app_stopping")


app = FastAPI(
    title="SpendSmart API",
    description="Extracts transactions from bank SMS, statements and receipts.",
    version=APP_VERSION,
    lifespan=lifespan,
)

register_error_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins if settings else ["http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(transactions_router, prefix="/api/v1")
app.include_router(health.router, prefix="/api/v1")

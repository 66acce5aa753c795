"""Transactions router: extract from text, list, delete."""

import asyncio
import functools
from typing import Optional

import structlog
from fastapi import APIRouter, Depends, Query
from supabase import Client

from apps.api.core import config
from apps.api.core.auth import AuthContext, get_auth_context, get_user_client
from apps.api.domains.transactions import service
from apps.api.domains.transactions.schemas import (
    DeleteResponse,
    ExtractRequest,
    ExtractResponse,
    TransactionPage,
)

router = APIRouter(prefix="/transactions", tags=["transactions"])
logger = structlog.get_logger()

DEFAULT_MAX_EXTRACT_CHARS = 20_000


def _table() -> str:
    return config.settings.TRANSACTIONS_TABLE if config.settings else "transactions"


@router.post("/extract", status_code=201, response_model=ExtractResponse)
async def extract_transactions(
    body: ExtractRequest,
    client: Client = Depends(get_user_client),
    auth: AuthContext = Depends(get_auth_context),
):
    """Extract transactions from free text and store them for the caller.

    Extraction runs in the default executor, off the event loop.
    """
    settings = config.settings
    loop = asyncio.get_running_loop()
    candidates = await loop.run_in_executor(
        None,
        functools.partial(
            service.extract_candidates,
            body.text,
            mode=body.mode.value,
            max_chars=settings.MAX_EXTRACT_CHARS if settings else DEFAULT_MAX_EXTRACT_CHARS,
            strict_dates=settings.STRICT_DATES if settings else False,
        ),
    )
    saved = service.save_candidates(client, auth, candidates, body.text, table=_table())

    logger.info(
        "extract_complete",
        mode=body.mode.value,
        count=len(saved),
        patterns=[c.pattern for c in candidates],
    )
    return {
        "success": True,
        "message": f"Successfully extracted {len(saved)} transaction(s)",
        "transactions": saved,
    }


@router.get("", response_model=TransactionPage)
async def list_transactions(
    cursor: Optional[str] = Query(default=None, description="created_at of the last row seen"),
    limit: int = Query(default=service.DEFAULT_PAGE_SIZE, ge=1),
    client: Client = Depends(get_user_client),
    auth: AuthContext = Depends(get_auth_context),
):
    """List the caller's transactions, newest first."""
    return service.list_transactions(client, auth, cursor=cursor, limit=limit, table=_table())


@router.delete("/{transaction_id}", response_model=DeleteResponse)
async def delete_transaction(
    transaction_id: str,
    client: Client = Depends(get_user_client),
    auth: AuthContext = Depends(get_auth_context),
):
    service.delete_transaction(client, auth, transaction_id, table=_table())
    return {"success": True}

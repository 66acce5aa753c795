"""Transactions service: extraction, persistence and paging.

Wraps the extraction engine for the API: validates the request text, runs
the engine, and stores the candidates in the Supabase ``transactions``
table scoped to the caller's user and organization.
"""

from functools import lru_cache
from typing import Optional

import structlog
from supabase import Client

from apps.api.core.auth import AuthContext
from apps.api.core.errors import (
    BadRequestError,
    ForbiddenError,
    NotFoundError,
    PayloadTooLargeError,
)
from packages.extraction_engine import TransactionCandidate, TransactionExtractor

logger = structlog.get_logger()

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 50
LIST_COLUMNS = "id, date, description, amount, type, category, balance, confidence, created_at"


@lru_cache(maxsize=2)
def get_extractor(strict_dates: bool = False) -> TransactionExtractor:
    """Shared extractor per date policy; extractors hold no per-call state."""
    return TransactionExtractor(strict_dates=strict_dates)


def extract_candidates(
    text: str,
    mode: str = "all",
    max_chars: int = 20_000,
    strict_dates: bool = False,
) -> list[TransactionCandidate]:
    """Run the engine over request text.

    Raises:
        BadRequestError: text is empty or nothing could be extracted.
        PayloadTooLargeError: text is longer than ``max_chars``.
    """
    if not text or not text.strip():
        raise BadRequestError("Text is required")
    if len(text) > max_chars:
        raise PayloadTooLargeError(f"Text exceeds {max_chars} characters")

    extractor = get_extractor(strict_dates)
    if mode == "one":
        candidate = extractor.extract_one(text)
        candidates = [candidate] if candidate is not None else []
    else:
        candidates = extractor.extract_all(text)

    if not candidates:
        raise BadRequestError("No transactions found in text")
    return candidates


def build_row(candidate: TransactionCandidate, auth: AuthContext, raw_text: str) -> dict:
    """Map a candidate onto a ``transactions`` table row."""
    return {
        "user_id": auth.subject_id,
        "organization_id": auth.tenant_id,
        "date": candidate.date.isoformat(),
        "description": candidate.description,
        "amount": candidate.amount,
        "type": candidate.transaction_type.value,
        "category": candidate.category.value if candidate.category else "other",
        "balance": candidate.balance,
        "confidence": candidate.confidence,
        "raw_text": raw_text,
    }


def save_candidates(
    client: Client,
    auth: AuthContext,
    candidates: list[TransactionCandidate],
    raw_text: str,
    table: str = "transactions",
) -> list[dict]:
    rows = [build_row(c, auth, raw_text) for c in candidates]
    result = client.table(table).insert(rows).execute()
    logger.info(
        "transactions_saved",
        count=len(result.data),
        user_id=auth.subject_id,
        organization_id=auth.tenant_id,
    )
    return result.data


def list_transactions(
    client: Client,
    auth: AuthContext,
    cursor: Optional[str] = None,
    limit: int = DEFAULT_PAGE_SIZE,
    table: str = "transactions",
) -> dict:
    """Page through the caller's transactions, newest first.

    ``cursor`` is the ``created_at`` of the last row of the previous page.
    One extra row is fetched to tell whether another page exists.
    """
    limit = max(1, min(limit, MAX_PAGE_SIZE))
    query = (
        client.table(table)
        .select(LIST_COLUMNS)
        .eq("user_id", auth.subject_id)
        .eq("organization_id", auth.tenant_id)
    )
    if cursor:
        query = query.lt("created_at", cursor)

    result = query.order("created_at", desc=True).limit(limit + 1).execute()
    rows = result.data or []

    has_more = len(rows) > limit
    page = rows[:limit]
    next_cursor = page[-1]["created_at"] if has_more and page else None

    logger.info("transactions_listed", count=len(page), has_more=has_more)
    return {"transactions": page, "next_cursor": next_cursor, "has_more": has_more}


def delete_transaction(
    client: Client,
    auth: AuthContext,
    transaction_id: str,
    table: str = "transactions",
) -> None:
    """Delete one of the caller's transactions.

    Raises:
        NotFoundError: no row with that id is visible.
        ForbiddenError: the row belongs to another user or organization.
    """
    result = (
        client.table(table)
        .select("id, user_id, organization_id")
        .eq("id", transaction_id)
        .limit(1)
        .execute()
    )
    if not result.data:
        raise NotFoundError("Transaction not found")

    row = result.data[0]
    if row.get("user_id") != auth.subject_id or row.get("organization_id") != auth.tenant_id:
        raise ForbiddenError("Transaction belongs to another account")

    client.table(table).delete().eq("id", transaction_id).execute()
    logger.info("transaction_deleted", transaction_id=transaction_id, user_id=auth.subject_id)

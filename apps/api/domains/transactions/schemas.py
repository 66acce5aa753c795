"""Pydantic schemas for the transactions domain."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class ExtractMode(str, Enum):
    ONE = "one"
    ALL = "all"


class ExtractRequest(BaseModel):
    """Free text (SMS, statement lines, receipt) to extract transactions from."""

    text: str = ""
    mode: ExtractMode = ExtractMode.ALL


class TransactionOut(BaseModel):
    """A persisted transaction as returned to the client."""

    id: Optional[str] = None
    date: str
    description: str = ""
    amount: float
    type: str = "debit"  # "credit" or "debit"
    category: str = "other"
    balance: Optional[float] = None
    confidence: float = 0.0
    created_at: Optional[str] = None


class ExtractResponse(BaseModel):
    success: bool = True
    message: str
    transactions: list[TransactionOut] = Field(default_factory=list)


class TransactionPage(BaseModel):
    """One page of the caller's transactions, newest first."""

    transactions: list[TransactionOut]
    next_cursor: Optional[str] = None
    has_more: bool = False


class DeleteResponse(BaseModel):
    success: bool = True

"""Numeric token parsing and debit/credit inference."""

import re
from typing import Optional

from .models import TransactionType

DEBIT_WORDS = frozenset(
    {"debit", "debited", "dr", "paid", "sent", "transferred", "charged", "withdrawal"}
)
CREDIT_WORDS = frozenset({"credit", "credited", "cr", "received", "deposit"})

_NUMERIC = re.compile(r"[-+]?\d+(?:\.\d+)?")


def parse_amount(token: Optional[str]) -> Optional[float]:
    """Parse a captured amount token into a signed float.

    Grouping commas are stripped (``1,50,000`` and ``150,000`` both work).
    Anything else left over, such as a second decimal point, makes the token
    malformed and None is returned so the caller can treat the pattern as a
    non-match.
    """
    if token is None:
        return None
    cleaned = token.replace(",", "").strip()
    if not _NUMERIC.fullmatch(cleaned):
        return None
    return float(cleaned)


def infer_direction(
    keyword: Optional[str], default: TransactionType = TransactionType.DEBIT
) -> TransactionType:
    """Map a captured type/action keyword onto debit or credit."""
    word = (keyword or "").strip().lower().rstrip(".:")
    if word in DEBIT_WORDS:
        return TransactionType.DEBIT
    if word in CREDIT_WORDS:
        return TransactionType.CREDIT
    return default

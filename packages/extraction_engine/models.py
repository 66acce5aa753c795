"""Transaction candidate model produced by the extraction engine."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class TransactionType(str, Enum):
    DEBIT = "debit"
    CREDIT = "credit"


class Category(str, Enum):
    FOOD = "food"
    TRANSPORT = "transport"
    SHOPPING = "shopping"
    ENTERTAINMENT = "entertainment"
    HEALTH = "health"
    UTILITIES = "utilities"
    TRANSFER = "transfer"
    OTHER = "other"


@dataclass(frozen=True)
class TransactionCandidate:
    """One extracted transaction.

    ``amount`` is always a magnitude; direction lives in ``transaction_type``.
    ``span`` is the half-open ``[start, end)`` range of source text the
    pattern consumed.
    """

    date: datetime
    description: str
    amount: float
    transaction_type: TransactionType
    category: Optional[Category]
    confidence: float
    balance: Optional[float] = None
    pattern: str = ""
    span: Tuple[int, int] = (0, 0)
    date_estimated: bool = False
    raw_data: Dict[str, Any] = field(default_factory=dict, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for DataFrame creation and JSON responses."""
        return {
            "date": self.date.isoformat(),
            "description": self.description,
            "amount": self.amount,
            "type": self.transaction_type.value,
            "category": self.category.value if self.category else None,
            "balance": self.balance,
            "confidence": self.confidence,
            "pattern": self.pattern,
            "span_start": self.span[0],
            "span_end": self.span[1],
            "date_estimated": self.date_estimated,
            "raw_data": dict(self.raw_data),
        }

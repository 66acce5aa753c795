"""
SpendSmart Extraction Engine

Rule-based transaction extraction from bank SMS, statement lines and receipts.
"""

__version__ = "0.1.0"

from .models import Category, TransactionCandidate, TransactionType
from .categorizer import CategoryClassifier, DEFAULT_CATEGORY_TABLE
from .dates import normalize_date
from .extractor import TransactionExtractor, extract_all, extract_one
from .patterns import PATTERN_TIERS, PatternTier

__all__ = [
    "Category",
    "TransactionCandidate",
    "TransactionType",
    "CategoryClassifier",
    "DEFAULT_CATEGORY_TABLE",
    "normalize_date",
    "TransactionExtractor",
    "extract_all",
    "extract_one",
    "PATTERN_TIERS",
    "PatternTier",
]

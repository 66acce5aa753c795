"""
Transaction extractor - runs the pattern cascade over free text.

Single mode returns the first candidate found by the highest-priority tier
that matches. Multi mode scans every tier, keeps non-overlapping matches in
acceptance order, and only tries the fallback when nothing else matched.
"""

import logging
from datetime import datetime
from typing import Callable, List, Optional, Sequence, Tuple

import pandas as pd

from .categorizer import CategoryClassifier
from .dates import NormalizedDate, normalize_date
from .models import TransactionCandidate
from .overlap import OverlapTracker
from .patterns import PATTERN_TIERS, PatternTier, RawCapture, find_balance

logger = logging.getLogger(__name__)

FRAME_COLUMNS = [
    "date",
    "description",
    "amount",
    "type",
    "category",
    "balance",
    "confidence",
    "pattern",
    "span_start",
    "span_end",
    "date_estimated",
    "raw_data",
]

_Accepted = Tuple[PatternTier, RawCapture, NormalizedDate]


class TransactionExtractor:
    """
    Extracts transaction candidates from SMS, statement lines and receipts.

    Usage:
        extractor = TransactionExtractor()
        candidate = extractor.extract_one(sms_text)
        candidates = extractor.extract_all(statement_text)
    """

    def __init__(
        self,
        classifier: Optional[CategoryClassifier] = None,
        tiers: Optional[Sequence[PatternTier]] = None,
        fallback_min: float = 0.1,
        fallback_max: float = 10_000_000,
        strict_dates: bool = False,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Args:
            classifier: Category classifier; the built-in keyword table if None.
            tiers: Pattern tiers to run, sorted by priority before use.
            fallback_min: Fallback amounts must be strictly greater than this.
            fallback_max: Fallback amounts must be strictly less than this.
            strict_dates: Drop candidates whose date could not be parsed
                instead of stamping them with the current time.
            clock: Source of "now" for unparseable dates.
        """
        self.classifier = classifier or CategoryClassifier()
        self.tiers = tuple(sorted(tiers or PATTERN_TIERS, key=lambda tier: tier.priority))
        self.fallback_min = fallback_min
        self.fallback_max = fallback_max
        self.strict_dates = strict_dates
        self.clock = clock

    def extract_one(self, text: Optional[str]) -> Optional[TransactionCandidate]:
        """Return the best single candidate, or None."""
        if not text or not text.strip():
            return None

        for tier in self.tiers:
            for capture in tier.scan(text):
                date = self._accept(tier, capture)
                if date is None:
                    continue
                logger.debug(f"Tier {tier.name} matched [{capture.start}, {capture.end})")
                candidate = self._candidate(text, tier, capture, date, len(text))
                logger.debug("Extraction complete: 1 candidate (single mode)")
                return candidate

        logger.debug("Extraction complete: 0 candidates (single mode)")
        return None

    def extract_all(self, text: Optional[str]) -> List[TransactionCandidate]:
        """Return every non-overlapping candidate in acceptance order."""
        if not text or not text.strip():
            return []

        tracker = OverlapTracker()
        accepted: List[_Accepted] = []

        for tier in self.tiers:
            if tier.fallback:
                if accepted:
                    continue
                capture = tier.first(text)
                captures = [capture] if capture is not None else []
            else:
                captures = tier.scan(text)

            for capture in captures:
                date = self._accept(tier, capture)
                if date is None:
                    continue
                if not tracker.claim(capture.start, capture.end):
                    logger.debug(
                        f"Tier {tier.name} match [{capture.start}, {capture.end}) overlaps, skipped"
                    )
                    continue
                logger.debug(f"Tier {tier.name} matched [{capture.start}, {capture.end})")
                accepted.append((tier, capture, date))

        starts = sorted(capture.start for _, capture, _ in accepted)
        candidates = []
        for tier, capture, date in accepted:
            window_end = next((start for start in starts if start > capture.start), len(text))
            candidates.append(self._candidate(text, tier, capture, date, window_end))

        logger.debug(f"Extraction complete: {len(candidates)} candidates (multi mode)")
        return candidates

    def extract_frame(self, text: Optional[str], mode: str = "all") -> pd.DataFrame:
        """Extract into a DataFrame with one row per candidate.

        The frame always carries FRAME_COLUMNS, even when nothing was found.
        """
        if mode == "one":
            candidate = self.extract_one(text)
            candidates = [candidate] if candidate is not None else []
        elif mode == "all":
            candidates = self.extract_all(text)
        else:
            raise ValueError(f"Unknown extraction mode: {mode!r}")

        return pd.DataFrame([c.to_dict() for c in candidates], columns=FRAME_COLUMNS)

    def _accept(self, tier: PatternTier, capture: RawCapture) -> Optional[NormalizedDate]:
        """Apply the fallback sanity bounds and date policy to a capture."""
        if tier.fallback and not (self.fallback_min < abs(capture.amount) < self.fallback_max):
            logger.debug(f"Fallback amount {capture.amount} outside sanity bounds")
            return None

        now = self.clock() if self.clock else None
        date = normalize_date(capture.date, now=now)
        if date.estimated and self.strict_dates:
            logger.debug(f"Tier {tier.name} dropped: unparseable date {capture.date!r}")
            return None
        return date

    def _candidate(
        self,
        text: str,
        tier: PatternTier,
        capture: RawCapture,
        date: NormalizedDate,
        window_end: int,
    ) -> TransactionCandidate:
        return TransactionCandidate(
            date=date.value,
            description=capture.description,
            amount=abs(capture.amount),
            transaction_type=capture.direction,
            category=self.classifier.classify(capture.category_text),
            confidence=tier.confidence,
            balance=find_balance(text[capture.start : window_end]),
            pattern=tier.name,
            span=(capture.start, capture.end),
            date_estimated=date.estimated,
            raw_data=dict(capture.tokens),
        )


_default_extractor: Optional[TransactionExtractor] = None


def _extractor() -> TransactionExtractor:
    global _default_extractor
    if _default_extractor is None:
        _default_extractor = TransactionExtractor()
    return _default_extractor


def extract_one(text: Optional[str]) -> Optional[TransactionCandidate]:
    """Convenience wrapper around a shared default TransactionExtractor."""
    return _extractor().extract_one(text)


def extract_all(text: Optional[str]) -> List[TransactionCandidate]:
    """Convenience wrapper around a shared default TransactionExtractor."""
    return _extractor().extract_all(text)

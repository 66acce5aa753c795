"""
Pattern tiers for the extraction cascade.

Each tier pairs a compiled regex with a builder that turns a match into a
RawCapture (date token, description, signed amount, direction). Tiers are
ordered by priority; confidence decreases strictly with priority so that a
more specific shape always outranks a looser one.

    1  labeled            Date:/Description:/Amount: receipt blocks
    2  pipe_textual       11 Dec 2025 | Swiggy | Debit: 850
    3  vendor_arrow       Uber Ride * Airport Drop / 12/11/2025 -> Rs1,250.00 debited
    4  pipe_numeric       15/01/2026 | FLIPKART SALE | Rs. 4,599.00 | Debit
    5  iso_inline         txn123 2025-12-10 Amazon.in Order Rs2,999.00 Dr
    6  sms_amount_first   INR 3,250.00 debited from A/c ... on 12-01-2026
    7  account_debited    Your A/C XX1234 debited with Rs.1,450.00 on 15-Jan-26
    8  labeled_paid_to    Date: / Paid to: / Amount: receipts
    9  action_first       paid Rs.450 to ... on 10 Jan 2026
    10 amount_action      Rs.3,450 paid on 02-Jan-2026
    11 fallback           any date token plus any currency amount
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, Optional, Tuple

from .amounts import infer_direction, parse_amount
from .dates import DATE_SEPARATOR
from .models import TransactionType

logger = logging.getLogger(__name__)

CURRENCY = r"(?<![A-Za-z])(?:Rs\.?|INR|USD|EUR|GBP|SGD|AED|₹|\$|€|£)"
AMOUNT = r"(?:\d[\d,.]*\d|\d)"
KIND = r"(?:debited|credited|debit|credit|dr|cr)"
MONTH = (
    r"(?:jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?|aug(?:ust)?"
    r"|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)(?![a-z])"
)

DATE_TEXTUAL = r"(?<!\d)\d{1,2}" + DATE_SEPARATOR + MONTH + DATE_SEPARATOR + r"\d{2,4}(?!\d)"
DATE_NUMERIC = r"(?<!\d)\d{1,2}[-/]\d{1,2}[-/]\d{2,4}(?!\d)"
DATE_ISO = r"(?<!\d)\d{4}-\d{2}-\d{2}(?!\d)"
DATE_ANY = r"(?:" + DATE_ISO + "|" + DATE_TEXTUAL + "|" + DATE_NUMERIC + ")"


@dataclass(frozen=True)
class RawCapture:
    """Fields lifted out of one match before normalization."""

    start: int
    end: int
    date: str
    description: str
    amount: float
    direction: TransactionType
    category_text: str
    tokens: Dict[str, Any] = field(default_factory=dict)


Builder = Callable[[re.Match], Optional[RawCapture]]


@dataclass(frozen=True)
class PatternTier:
    priority: int
    name: str
    confidence: float
    regex: re.Pattern
    build: Builder
    fallback: bool = False

    def first(self, text: str) -> Optional[RawCapture]:
        """Build from the first match that yields a capture."""
        return next(self.scan(text), None)

    def scan(self, text: str) -> Iterator[RawCapture]:
        for match in self.regex.finditer(text):
            capture = self.build(match)
            if capture is not None:
                yield capture


# ---------------------------------------------------------------------------
# Description helpers
# ---------------------------------------------------------------------------

_WHITESPACE = re.compile(r"\s+")
_CLAUSE = re.compile(
    r"(?:\binfo\s*:|\b(?:towards|for|to|from|at)\b)\s*:?\s*(?P<clause>[A-Za-z][^\n\r.]{3,70})",
    re.IGNORECASE,
)
_CLAUSE_CUT = re.compile(r"\s+on\s+\d|\s*\(", re.IGNORECASE)
_PARTY_CLAUSE = re.compile(
    r"\b(?:at|to|from)\b\s+(?P<clause>[A-Za-z][^\n\r]{3,60})", re.IGNORECASE
)


def clean_description(text: Optional[str], limit: int = 100) -> str:
    """Collapse whitespace, trim separator debris and cap the length."""
    text = _WHITESPACE.sub(" ", text or "")
    text = text.strip(" -|:*=")
    return text[:limit].strip()


def recover_description(text: str, start: int, end: int) -> str:
    """Find a payee/merchant clause for narrative SMS shapes.

    The text after the match is searched first, then the text from the
    match start onwards. A clause is cut before any trailing ``on <date>``
    or parenthesised remark. Falls back to the leading 70 characters.
    """
    for window in (text[end:], text[start:]):
        match = _CLAUSE.search(window)
        if match:
            clause = clean_description(_CLAUSE_CUT.split(match.group("clause"), maxsplit=1)[0])
            if clause:
                return clause
    return clean_description(text[:70])


def _amount(match: re.Match) -> Optional[float]:
    token = match.group("amount")
    value = parse_amount(token)
    if value is None:
        logger.debug(f"Malformed amount token {token!r} at {match.start()}")
    return value


def _tokens(match: re.Match) -> Dict[str, Any]:
    return {key: value for key, value in match.groupdict().items() if value is not None}


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def _build_labeled(match: re.Match) -> Optional[RawCapture]:
    amount = _amount(match)
    if amount is None:
        return None
    description = clean_description(match.group("description"))
    return RawCapture(
        start=match.start(),
        end=match.end(),
        date=match.group("date"),
        description=description,
        amount=amount,
        direction=TransactionType.DEBIT if amount < 0 else TransactionType.CREDIT,
        category_text=description,
        tokens=_tokens(match),
    )


def _build_pipe(match: re.Match) -> Optional[RawCapture]:
    kind = match.group("kind") or match.group("kind_after")
    if not kind:
        return None
    amount = _amount(match)
    if amount is None:
        return None
    description = clean_description(match.group("description"))
    return RawCapture(
        start=match.start(),
        end=match.end(),
        date=match.group("date"),
        description=description,
        amount=amount,
        direction=infer_direction(kind),
        category_text=description,
        tokens=_tokens(match),
    )


def _build_vendor_arrow(match: re.Match) -> Optional[RawCapture]:
    amount = _amount(match)
    if amount is None:
        return None
    vendor = clean_description(match.group("vendor"))
    if not vendor:
        return None
    detail = clean_description(match.group("detail"))
    description = f"{vendor} - {detail}" if detail else vendor
    return RawCapture(
        start=match.start(),
        end=match.end(),
        date=match.group("date"),
        description=description[:100],
        amount=amount,
        direction=infer_direction(match.group("kind")),
        category_text=vendor,
        tokens=_tokens(match),
    )


def _build_inline(match: re.Match) -> Optional[RawCapture]:
    amount = _amount(match)
    if amount is None:
        return None
    description = clean_description(match.group("description"))
    return RawCapture(
        start=match.start(),
        end=match.end(),
        date=match.group("date"),
        description=description,
        amount=amount,
        direction=infer_direction(match.group("kind")),
        category_text=description,
        tokens=_tokens(match),
    )


def _build_narrative(match: re.Match) -> Optional[RawCapture]:
    amount = _amount(match)
    if amount is None:
        return None
    description = recover_description(match.string, match.start(), match.end())
    return RawCapture(
        start=match.start(),
        end=match.end(),
        date=match.group("date"),
        description=description,
        amount=amount,
        direction=infer_direction(match.groupdict().get("kind")),
        category_text=description,
        tokens=_tokens(match),
    )


def _build_paid_to(match: re.Match) -> Optional[RawCapture]:
    amount = _amount(match)
    if amount is None:
        return None
    description = clean_description(match.group("description"))
    return RawCapture(
        start=match.start(),
        end=match.end(),
        date=match.group("date"),
        description=description,
        amount=amount,
        direction=TransactionType.DEBIT,
        category_text=description,
        tokens=_tokens(match),
    )


# ---------------------------------------------------------------------------
# Fallback: first date token anywhere plus first currency amount anywhere
# ---------------------------------------------------------------------------

FALLBACK_DATE = re.compile(DATE_ANY, re.IGNORECASE)
FALLBACK_AMOUNT = re.compile(CURRENCY + r"\s*(?P<amount>" + AMOUNT + ")", re.IGNORECASE)
FALLBACK_KIND = re.compile(
    r"\b(?:debited|credited|debit|credit|dr|cr|paid|received|sent|charged"
    r"|transferred|withdrawal|deposit)\b",
    re.IGNORECASE,
)


def _build_fallback(date_match: re.Match) -> Optional[RawCapture]:
    text = date_match.string
    amount_match = FALLBACK_AMOUNT.search(text)
    if amount_match is None:
        return None
    amount = _amount(amount_match)
    if amount is None:
        return None

    description = ""
    if amount_match.start() > date_match.end():
        description = clean_description(text[date_match.end() : amount_match.start()])
    if len(description) < 3:
        party = _PARTY_CLAUSE.search(text)
        if party:
            description = clean_description(party.group("clause"))
        else:
            description = clean_description(text[:70])

    kind = FALLBACK_KIND.search(text)
    return RawCapture(
        start=min(date_match.start(), amount_match.start()),
        end=max(date_match.end(), amount_match.end()),
        date=date_match.group(0),
        description=description,
        amount=amount,
        direction=infer_direction(kind.group(0) if kind else None),
        category_text=description,
        tokens={
            "date": date_match.group(0),
            "amount": amount_match.group("amount"),
            "kind": kind.group(0) if kind else None,
        },
    )


# ---------------------------------------------------------------------------
# Tier table
# ---------------------------------------------------------------------------


def _pipe_regex(date_fragment: str) -> re.Pattern:
    return re.compile(
        r"(?P<date>" + date_fragment + r")\s*\|\s*(?P<description>[^|\n\r]+?)\s*\|\s*"
        r"(?:(?P<kind>" + KIND + r")\b\s*:?\s*)?"
        r"(?:" + CURRENCY + r"\s*)?(?P<amount>" + AMOUNT + r")"
        r"(?:\s*\|\s*(?P<kind_after>" + KIND + r")\b)?",
        re.IGNORECASE,
    )


LABELED = re.compile(
    r"Date:\s*(?P<date>\d{1,2}\s+" + MONTH + r"\s+\d{4})\s*[\n\r]+"
    r"\s*(?:Description|Merchant):\s*(?P<description>[^\n\r]+)[\n\r]+"
    r"\s*Amount[:\s]+(?:" + CURRENCY + r"\s*)?(?P<amount>[-+]?" + AMOUNT + r")",
    re.IGNORECASE,
)

PIPE_TEXTUAL = _pipe_regex(DATE_TEXTUAL)

# Vendor starts a line; one attempt per line keeps the scan linear.
VENDOR_ARROW = re.compile(
    r"^[ \t]*(?P<vendor>[^\s*|][^\n\r*|]*?)(?:\*(?P<detail>[^\n\r]*?))?(?:[\n\r]+[ \t]*)?"
    r"(?<![\d/])(?P<date>\d{1,2}/\d{1,2}/\d{2,4})[ \t]*(?:->|→|[-:=>])*[ \t]*"
    r"(?:" + CURRENCY + r"[ \t]*)?(?P<amount>" + AMOUNT + r")[ \t]*(?P<kind>" + KIND + r")\b",
    re.IGNORECASE | re.MULTILINE,
)

PIPE_NUMERIC = _pipe_regex(DATE_NUMERIC)

ISO_INLINE = re.compile(
    r"(?:\b(?P<txn_id>txn\w*)\s+)?(?P<date>" + DATE_ISO + r")\s+"
    r"(?P<description>[^\n\r]+?)\s*(?:" + CURRENCY + r"\s*)?(?P<amount>" + AMOUNT + r")\s+"
    r"(?P<kind>" + KIND + r")\b"
    r"(?:\s+Bal(?:ance)?\s*[:=]?\s*(?:" + CURRENCY + r"\s*)?" + AMOUNT + r")?",
    re.IGNORECASE,
)

SMS_AMOUNT_FIRST = re.compile(
    CURRENCY + r"\s*(?P<amount>" + AMOUNT + r")\s+(?P<kind>debited|credited)\b"
    r"[^\n\r]{0,120}?\b(?:on|at)\s+(?P<date>" + DATE_ANY + r")",
    re.IGNORECASE,
)

ACCOUNT_DEBITED = re.compile(
    r"\b(?:a/c|ac|account|wallet)\b[^\n\r]{0,120}?\b(?P<kind>debited|credited)\b[^\n\r]{0,120}?"
    + CURRENCY
    + r"\s*(?P<amount>"
    + AMOUNT
    + r")[^\n\r]{0,120}?\bon\s+(?P<date>"
    + DATE_ANY
    + r")",
    re.IGNORECASE,
)

LABELED_PAID_TO = re.compile(
    r"Date:\s*(?P<date>\d{1,2}\s+" + MONTH + r"\s+\d{4})\s*[\n\r]+"
    r"[^\n\r]*?(?:Paid\s+to|Merchant)\s*:\s*(?P<description>[^\n\r]+)[\n\r]+"
    r"[^\n\r]*?Amount[^\n\r]*?(?:" + CURRENCY + r"\s*)?(?P<amount>" + AMOUNT + r")",
    re.IGNORECASE,
)

ACTION_FIRST = re.compile(
    r"\b(?P<kind>paid|received|sent|transferred|transfer|payment)\b\s+(?:of\s+)?"
    r"(?:" + CURRENCY + r"\s*)?(?P<amount>" + AMOUNT + r")"
    r"[^\n\r]{0,120}?\b(?:on|at)\s+(?P<date>" + DATE_ANY + r")",
    re.IGNORECASE,
)

AMOUNT_ACTION = re.compile(
    CURRENCY + r"\s*(?P<amount>" + AMOUNT + r")\s+"
    r"(?P<kind>sent|paid|transferred|charged|received)\b"
    r"[^\n\r]{0,120}?\b(?:on|at)\s+(?P<date>" + DATE_ANY + r")",
    re.IGNORECASE,
)

PATTERN_TIERS: Tuple[PatternTier, ...] = (
    PatternTier(1, "labeled", 0.95, LABELED, _build_labeled),
    PatternTier(2, "pipe_textual", 0.93, PIPE_TEXTUAL, _build_pipe),
    PatternTier(3, "vendor_arrow", 0.92, VENDOR_ARROW, _build_vendor_arrow),
    PatternTier(4, "pipe_numeric", 0.91, PIPE_NUMERIC, _build_pipe),
    PatternTier(5, "iso_inline", 0.90, ISO_INLINE, _build_inline),
    PatternTier(6, "sms_amount_first", 0.88, SMS_AMOUNT_FIRST, _build_narrative),
    PatternTier(7, "account_debited", 0.87, ACCOUNT_DEBITED, _build_narrative),
    PatternTier(8, "labeled_paid_to", 0.86, LABELED_PAID_TO, _build_paid_to),
    PatternTier(9, "action_first", 0.85, ACTION_FIRST, _build_narrative),
    PatternTier(10, "amount_action", 0.84, AMOUNT_ACTION, _build_narrative),
    PatternTier(11, "fallback", 0.70, FALLBACK_DATE, _build_fallback, fallback=True),
)


# ---------------------------------------------------------------------------
# Balance
# ---------------------------------------------------------------------------

BALANCE = re.compile(
    r"\b(?:(?:avl|avbl|available|closing)\.?\s+)?bal(?:ance)?\b[^\d\n\r]{0,40}?(?P<amount>"
    + AMOUNT
    + r")",
    re.IGNORECASE,
)


def find_balance(window: str) -> Optional[float]:
    """First parseable balance figure in ``window``, as a magnitude."""
    for match in BALANCE.finditer(window):
        value = parse_amount(match.group("amount"))
        if value is not None:
            return abs(value)
    return None

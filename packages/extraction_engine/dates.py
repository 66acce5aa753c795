"""Date normalizer for captured date tokens.

Shapes are tried in a fixed order:

1. Textual month: ``11 Dec 2025``, ``15-Jan-26``, ``13Jan2026``.
2. Numeric day-first: ``12/11/2025`` is 12 November, never December 11.
   Dashes are accepted as well as slashes.
3. ISO: ``2025-12-10``.
4. Direct parse of the raw token.

Two-digit years are expanded by prefixing ``20``. When nothing parses the
current instant is returned with ``estimated=True`` so strict callers can
drop the record instead of trusting a made-up date.
"""

import logging
import re
from datetime import datetime, timezone
from typing import NamedTuple, Optional

import pandas as pd

logger = logging.getLogger(__name__)

MONTHS = {
    "jan": 1,
    "feb": 2,
    "mar": 3,
    "apr": 4,
    "may": 5,
    "jun": 6,
    "jul": 7,
    "aug": 8,
    "sep": 9,
    "oct": 10,
    "nov": 11,
    "dec": 12,
}

# Between day, month and year of a textual date; shared with the pattern tiers.
DATE_SEPARATOR = r"[-/ \t,]{0,2}"

_TEXTUAL = re.compile(
    r"^(\d{1,2})" + DATE_SEPARATOR + r"([A-Za-z]{3,9})" + DATE_SEPARATOR + r"(\d{2,4})$"
)
_DAY_FIRST = re.compile(r"^(\d{1,2})[/-](\d{1,2})[/-](\d{2,4})$")
_ISO = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")


class NormalizedDate(NamedTuple):
    value: datetime
    estimated: bool


def _expand_year(year: str) -> Optional[int]:
    if len(year) == 2:
        return int(f"20{year}")
    if len(year) == 4:
        return int(year)
    return None


def _utc_midnight(year: Optional[int], month: Optional[int], day: int) -> Optional[datetime]:
    if year is None or month is None:
        return None
    try:
        return datetime(year, month, day, tzinfo=timezone.utc)
    except ValueError:
        return None


def _parse_textual(token: str) -> Optional[datetime]:
    match = _TEXTUAL.match(token)
    if not match:
        return None
    day, month_name, year = match.groups()
    month = MONTHS.get(month_name[:3].lower())
    return _utc_midnight(_expand_year(year), month, int(day))


def _parse_day_first(token: str) -> Optional[datetime]:
    match = _DAY_FIRST.match(token)
    if not match:
        return None
    day, month, year = match.groups()
    return _utc_midnight(_expand_year(year), int(month), int(day))


def _parse_iso(token: str) -> Optional[datetime]:
    match = _ISO.match(token)
    if not match:
        return None
    year, month, day = match.groups()
    return _utc_midnight(int(year), int(month), int(day))


def _parse_direct(token: str) -> Optional[datetime]:
    if not token:
        return None
    try:
        parsed = pd.to_datetime(token, dayfirst=True, utc=True, errors="coerce")
    except (ValueError, TypeError, OverflowError):
        return None
    if pd.isna(parsed):
        return None
    return parsed.to_pydatetime()


_PARSERS = (_parse_textual, _parse_day_first, _parse_iso, _parse_direct)


def normalize_date(token: str, now: Optional[datetime] = None) -> NormalizedDate:
    """Convert a date token into a UTC instant.

    Args:
        token: Raw date token as captured by a pattern tier.
        now: Instant to substitute when the token cannot be parsed.
            Defaults to the current UTC time.

    Returns:
        NormalizedDate whose ``estimated`` flag is True when ``value`` is
        the substituted instant rather than a parsed date.
    """
    token = (token or "").strip()
    for parse in _PARSERS:
        value = parse(token)
        if value is not None:
            return NormalizedDate(value, False)

    logger.debug(f"Unparseable date token {token!r}, substituting current time")
    return NormalizedDate(now or datetime.now(timezone.utc), True)

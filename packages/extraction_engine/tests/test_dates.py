from datetime import datetime, timezone

from packages.extraction_engine.dates import normalize_date

FIXED_NOW = datetime(2026, 2, 1, 9, 30, tzinfo=timezone.utc)


def utc(year, month, day):
    return datetime(year, month, day, tzinfo=timezone.utc)


def test_numeric_dates_are_day_first():
    # 12/11/2025 is 12 November, never December 11
    assert normalize_date("12/11/2025").value == utc(2025, 11, 12)
    assert normalize_date("14-01-2026").value == utc(2026, 1, 14)
    assert normalize_date("08/01/26").value == utc(2026, 1, 8)


def test_textual_month_shapes():
    assert normalize_date("11 Dec 2025").value == utc(2025, 12, 11)
    assert normalize_date("15-Jan-26").value == utc(2026, 1, 15)
    assert normalize_date("13Jan2026").value == utc(2026, 1, 13)
    assert normalize_date("1 January 2026").value == utc(2026, 1, 1)


def test_iso_date():
    result = normalize_date("2025-12-10")
    assert result.value == utc(2025, 12, 10)
    assert result.estimated is False


def test_two_digit_year_expands_to_2000s():
    assert normalize_date("21-Dec-25").value.year == 2025


def test_unparseable_token_uses_supplied_now():
    result = normalize_date("99 Foo 2026", now=FIXED_NOW)
    assert result.estimated is True
    assert result.value == FIXED_NOW


def test_empty_token_is_estimated():
    result = normalize_date("", now=FIXED_NOW)
    assert result == (FIXED_NOW, True)


def test_estimated_default_now_is_utc():
    result = normalize_date("garbage")
    assert result.estimated is True
    assert result.value.tzinfo is not None


def test_comma_and_compact_separators():
    assert normalize_date("10 Jan, 2026").value == utc(2026, 1, 10)
    assert normalize_date("05/Mar/2026").value == utc(2026, 3, 5)

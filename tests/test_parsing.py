from datetime import date, datetime, timezone
from decimal import Decimal

from salon.parsing import parse_amount, parse_date


def test_parse_amount_like_parse_float():
    assert parse_amount("40") == Decimal("40")
    assert parse_amount(" 12.50 ") == Decimal("12.50")
    assert parse_amount("30abc") == Decimal("30")
    assert parse_amount(25) == Decimal("25")
    assert parse_amount(0.1) == Decimal("0.1")


def test_parse_amount_accepts_decimal_comma():
    assert parse_amount("40,50") == Decimal("40.50")


def test_parse_amount_rejects_garbage():
    assert parse_amount("abc") is None
    assert parse_amount("") is None
    assert parse_amount(None) is None
    assert parse_amount(True) is None
    assert parse_amount(float("nan")) is None
    assert parse_amount(float("inf")) is None
    assert parse_amount({"v": 1}) is None


def test_parse_date_iso_string():
    assert parse_date("2025-03-05") == date(2025, 3, 5)
    assert parse_date("2025-03-05 14:30:00") == date(2025, 3, 5)


def test_parse_date_passthrough_objects():
    assert parse_date(date(2024, 1, 2)) == date(2024, 1, 2)
    assert parse_date(datetime(2024, 1, 2, 23, 0)) == date(2024, 1, 2)


def test_parse_date_aware_values_use_local_date():
    instant = datetime(2025, 3, 5, 12, 0, tzinfo=timezone.utc)
    assert parse_date(instant) == instant.astimezone().date()
    assert parse_date("2025-03-05T12:00:00.000Z") == instant.astimezone().date()


def test_parse_date_garbage_is_none():
    assert parse_date("not-a-date") is None
    assert parse_date("") is None
    assert parse_date(None) is None
    assert parse_date(20250305) is None


def test_parse_date_rejects_relative_words():
    for word in ["today", "now", " Today ", "yesterday"]:
        assert parse_date(word) is None

"""Unit tests for core/dates.py"""

from datetime import date, datetime, timedelta, timezone

import pytest

from mdblog.core.dates import (
    filename_date, format_post_date, parse_post_date, strip_date_prefix, to_utc_naive,
)


def test_parse_post_date_string_with_offset():
    """The canonical 'YYYY-MM-DD HH:MM:SS +ZZZZ' string parses to an aware datetime."""
    dt = parse_post_date("2023-01-05 10:00:00 +0800")
    assert dt == datetime(2023, 1, 5, 10, 0, tzinfo=timezone(timedelta(hours=8)))
    assert dt.utcoffset() == timedelta(hours=8)


def test_parse_post_date_aware_datetime_passthrough():
    """An aware datetime (as YAML decodes '+08:00' offsets) is returned unchanged."""
    value = datetime(2023, 1, 5, 10, 0, tzinfo=timezone.utc)
    assert parse_post_date(value) is value


@pytest.mark.parametrize("value,match", [
    (datetime(2023, 1, 5, 10, 0), "no UTC offset"),
    (date(2023, 1, 5), "needs a time"),
    ("2023/01/05 10:00", "does not match"),
    ("2023-01-05 10:00:00", "does not match"),
    (20230105, "must be a string"),
])
def test_parse_post_date_rejects(value, match):
    """Naive, date-only, malformed and non-string values raise ValueError."""
    with pytest.raises(ValueError, match=match):
        parse_post_date(value)


def test_format_post_date_round_trip():
    """format_post_date writes the same layout parse_post_date reads."""
    text = "2021-12-31 23:59:59 -0500"
    assert format_post_date(parse_post_date(text)) == text


@pytest.mark.parametrize("name,expected", [
    ("2023-01-05-hello.md", date(2023, 1, 5)),
    ("2023-02-30-bad-day.md", None),
    ("hello.md", None),
    ("2023-01-05.md", None),
])
def test_filename_date(name, expected):
    """Only a valid 'YYYY-MM-DD-' prefix yields a date."""
    assert filename_date(name) == expected


def test_strip_date_prefix():
    assert strip_date_prefix("2023-01-05-rust-borrow-checker") == "rust-borrow-checker"
    assert strip_date_prefix("about") == "about"


def test_to_utc_naive():
    """Aware values are shifted to UTC and made naive; naive and None pass through."""
    aware = datetime(2023, 1, 5, 10, 0, tzinfo=timezone(timedelta(hours=8)))
    assert to_utc_naive(aware) == datetime(2023, 1, 5, 2, 0)
    assert to_utc_naive(datetime(2023, 1, 5)) == datetime(2023, 1, 5)
    assert to_utc_naive(None) is None

from datetime import date, datetime, timezone, timedelta

import pytest
from dateutil import tz

from rentcal.errors import ConfigError, NonNormalizedDateError
from rentcal.utils import css_color_to_hex, normalize_day, parse_reference_date, require_day


def test_normalize_day_passthrough_and_missing():
    assert normalize_day(date(2025, 6, 1)) == date(2025, 6, 1)
    assert normalize_day(None) is None
    assert normalize_day("  ") is None


def test_normalize_day_truncates_naive_datetime():
    assert normalize_day(datetime(2025, 6, 1, 23, 59)) == date(2025, 6, 1)


def test_normalize_day_converts_aware_datetime_first():
    late_evening = datetime(2025, 6, 1, 22, 30, tzinfo=timezone(timedelta(hours=-3)))
    assert normalize_day(late_evening, tz.UTC) == date(2025, 6, 2)
    assert normalize_day(late_evening) == date(2025, 6, 1)


def test_normalize_day_parses_strings():
    assert normalize_day("2025-06-01") == date(2025, 6, 1)
    assert normalize_day("2025-06-01T23:30:00-03:00", tz.UTC) == date(2025, 6, 2)
    assert normalize_day("June 3, 2025") == date(2025, 6, 3)
    with pytest.raises(ValueError):
        normalize_day("not a date")


def test_require_day():
    assert require_day(date(2025, 6, 1)) == date(2025, 6, 1)
    with pytest.raises(NonNormalizedDateError):
        require_day(datetime(2025, 6, 1))
    with pytest.raises(NonNormalizedDateError):
        require_day("2025-06-01")


def test_css_color_to_hex():
    assert css_color_to_hex("#123ABC") == "#123ABC"
    assert css_color_to_hex("gray(50%)") == "#808080"
    assert css_color_to_hex("Navy").lower() == "#000080"
    with pytest.raises(ConfigError):
        css_color_to_hex("blurple")


def test_parse_reference_date():
    assert parse_reference_date("2026-10-19", tz.UTC) == date(2026, 10, 19)
    assert parse_reference_date("'2026-10'", tz.UTC) == date(2026, 10, 1)
    assert isinstance(parse_reference_date("today", tz.UTC), date)
    with pytest.raises(ConfigError):
        parse_reference_date("19/10/2026", tz.UTC)

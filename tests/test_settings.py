import calendar

import pytest

from rentcal.errors import ConfigError
from rentcal.settings import _parse_output_format, _parse_view, _parse_weekday


@pytest.mark.parametrize("raw,expected", [
    ("json", "json"),
    ("YAML", "yaml"),
    (" yaml ", "yaml"),
])
def test_parse_output_format(raw, expected):
    assert _parse_output_format(raw) == expected


@pytest.mark.parametrize("raw", ["yml", "csv", "pdf", ""])
def test_parse_output_format_rejects_unknown(raw):
    with pytest.raises(ConfigError) as excinfo:
        _parse_output_format(raw)
    assert "APP_OUTPUT_FORMAT" in str(excinfo.value)


def test_parse_view():
    assert _parse_view(" Week ") == "week"
    with pytest.raises(ConfigError):
        _parse_view("day")


@pytest.mark.parametrize("raw,expected", [
    ("sunday", calendar.SUNDAY),
    ("Mon", calendar.MONDAY),
    ("6", 6),
])
def test_parse_weekday(raw, expected):
    assert _parse_weekday(raw) == expected


@pytest.mark.parametrize("raw", ["funday", "7", "-1"])
def test_parse_weekday_rejects_bad_values(raw):
    with pytest.raises(ConfigError):
        _parse_weekday(raw)

import os
import calendar
from pathlib import Path

from dateutil import tz
from loguru import logger

from rentcal.errors import ConfigError
from rentcal.export import OUTPUT_FORMATS


_WEEKDAY_NAMES = {name.lower(): idx for idx, name in enumerate(calendar.day_name)}
_WEEKDAY_NAMES.update({name.lower(): idx for idx, name in enumerate(calendar.day_abbr)})


def _parse_weekday(raw: str) -> int:
    """
    Parse a weekday given as a name ("sunday", "Sun") or a calendar-module
    index (0 = Monday ... 6 = Sunday) into the calendar-module index.
    """
    s = raw.strip().lower()
    if s in _WEEKDAY_NAMES:
        return _WEEKDAY_NAMES[s]
    try:
        idx = int(s)
    except ValueError:
        logger.error("Cannot parse weekday from {!r}.", raw)
        raise ConfigError(f"Invalid weekday: '{raw}'")
    if not (0 <= idx <= 6):
        logger.error("Weekday index out of range [0-6]: {!r}", raw)
        raise ConfigError(f"Weekday index out of range: '{raw}'")
    return idx


def _parse_view(raw: str) -> str:
    v = raw.strip().lower()
    if v not in ("month", "week"):
        logger.error("Unknown calendar view {!r}.", raw)
        raise ConfigError(f"CAL_VIEW must be 'month' or 'week', got '{raw}'")
    return v


def _parse_output_format(raw: str) -> str:
    fmt = raw.strip().lower()
    if fmt not in OUTPUT_FORMATS:
        logger.error("Unknown output format {!r}.", raw)
        raise ConfigError(f"APP_OUTPUT_FORMAT must be one of {OUTPUT_FORMATS}, got '{raw}'")
    return fmt


# Project root
BASE_DIR = Path(__file__).resolve().parent.parent

# File paths
CONFIG_PATH   = Path(os.getenv("APP_CONFIG_PATH", str(BASE_DIR / "config.yaml")))
OUTPUT_PATH   = os.getenv("APP_OUTPUT_PATH", "output/layout.json")
OUTPUT_FORMAT = _parse_output_format(os.getenv("APP_OUTPUT_FORMAT", "json"))

TIMEZONE = os.getenv("TZ", "UTC")
TZ_LOCAL = tz.gettz(TIMEZONE) or tz.tzutc()

# Calendar
REFERENCE_DATE = os.getenv("CAL_REFERENCE_DATE", "today")
VIEW           = _parse_view(os.getenv("CAL_VIEW", "month"))
FIRST_WEEKDAY  = _parse_weekday(os.getenv("CAL_FIRST_WEEKDAY", "sunday"))
STATUS_FILTER  = os.getenv("CAL_STATUS_FILTER", "")

from datetime import datetime, date
import re
from loguru import logger
import webcolors
from dateutil import parser as date_parser

from rentcal.errors import NonNormalizedDateError, ConfigError


def css_color_to_hex(name_or_hex: str) -> str:
    """
    Convert a CSS color name, functional gray(%), or hex code to a 6-digit hex code.

    - Leaves valid hex codes unchanged.
    - Parses CSS4 gray(%) syntax.
    - Falls back to standard CSS color names via webcolors.
    """

    if name_or_hex.startswith("#"):
        return name_or_hex

    lower = name_or_hex.lower().strip()

    m_pct = re.fullmatch(r'gray\(\s*([0-9]+(?:\.[0-9]+)?)%\s*\)', lower)
    if m_pct:
        pct = float(m_pct.group(1))
        level = round(255 * pct / 100)
        return f"#{level:02X}{level:02X}{level:02X}"

    try:
        return webcolors.name_to_hex(lower)
    except ValueError:
        logger.error("Unknown CSS color '{}'.", name_or_hex)
        raise ConfigError(f"Unknown color '{name_or_hex}'")


def require_day(value, what: str = "date") -> date:
    """
    Guard for engine inputs: only plain dates are accepted.
    """
    if isinstance(value, datetime) or not isinstance(value, date):
        raise NonNormalizedDateError(value, what)
    return value


def normalize_day(value, tzinfo=None) -> date | None:
    """
    Reduce a date-ish value to a plain calendar day.

    - date values pass through.
    - Aware datetimes are converted to `tzinfo` (when given) before the date
      part is taken; naive datetimes are truncated.
    - Strings are parsed with dateutil.
    - None and empty strings give None (a missing date, reported later).
    """
    if value is None:
        return None
    if isinstance(value, str):
        s = value.strip()
        if not s:
            return None
        value = date_parser.isoparse(s) if re.match(r"\d{4}-\d{2}-\d{2}", s) else date_parser.parse(s)
    if isinstance(value, datetime):
        if value.tzinfo is not None and tzinfo is not None:
            value = value.astimezone(tzinfo)
        return value.date()
    if isinstance(value, date):
        return value
    raise TypeError(f"Cannot normalize {type(value).__name__} {value!r} to a date")


def parse_reference_date(s: str, tzinfo) -> date:
    """
    Parse the reference date for a layout pass.

    Accepts "today", "YYYY-MM-DD" and "YYYY-MM" (the 1st of that month).
    """
    s = s.strip().strip('"').strip("'").lower()
    if s in ("", "today", "now"):
        return datetime.now(tz=tzinfo).date()
    if re.fullmatch(r"\d{4}-\d{2}", s):
        return datetime.strptime(s, "%Y-%m").date()
    try:
        return datetime.strptime(s, "%Y-%m-%d").date()
    except ValueError:
        logger.error("Cannot parse reference date {!r}.", s)
        raise ConfigError(f"Invalid reference date: '{s}'")

import calendar
from datetime import date, timedelta

from dateutil.relativedelta import relativedelta
from loguru import logger

from rentcal.errors import GridRangeError
from rentcal.models import DayCell, Week
from rentcal.utils import require_day

WEEKS_PER_MONTH_GRID = 6
DAYS_PER_WEEK = 7
MONTH_GRID_SIZE = WEEKS_PER_MONTH_GRID * DAYS_PER_WEEK


def build_month_grid(reference_date: date, firstweekday: int = calendar.SUNDAY,
                     today: date | None = None) -> list[DayCell]:
    """
    Build the 42 day cells of the month containing `reference_date`.

    The grid opens with the trailing days of the previous month needed to put
    the 1st in its weekday column, runs through the whole month, then pads
    with days of the following month until six full weeks are filled.

    Every cell must be a valid `date`, so months whose grid would reach
    before 0001-01-01 or past 9999-12-31 raise GridRangeError.
    """
    reference_date = require_day(reference_date, "reference_date")
    year, month = reference_date.year, reference_date.month

    try:
        weeks = calendar.Calendar(firstweekday).monthdatescalendar(year, month)
        days = [d for week in weeks for d in week]
        # monthdatescalendar yields 4 to 6 rows; keep the grid at a fixed height
        while len(days) < MONTH_GRID_SIZE:
            days.append(days[-1] + timedelta(days=1))
    except (ValueError, OverflowError) as e:
        raise GridRangeError(
            f"Cannot build a month grid for {year:04d}-{month:02d}: {e}"
        ) from e

    cells = [
        DayCell(
            day=d,
            in_current_month=(d.month == month),
            weekday_index=i % DAYS_PER_WEEK,
            is_today=(d == today),
        )
        for i, d in enumerate(days)
    ]
    logger.debug("Month grid for {}-{:02d}: {} → {}", year, month, cells[0].day, cells[-1].day)
    return cells


def build_week_grid(reference_date: date, firstweekday: int = calendar.SUNDAY,
                    today: date | None = None) -> list[DayCell]:
    """The seven day cells of the week containing `reference_date`."""
    reference_date = require_day(reference_date, "reference_date")
    offset = (reference_date.weekday() - firstweekday) % DAYS_PER_WEEK
    try:
        start = reference_date - timedelta(days=offset)
        days = [start + timedelta(days=i) for i in range(DAYS_PER_WEEK)]
    except OverflowError as e:
        raise GridRangeError(f"Cannot build a week grid around {reference_date}: {e}") from e
    return [
        DayCell(
            day=d,
            in_current_month=(d.month == reference_date.month),
            weekday_index=i,
            is_today=(d == today),
        )
        for i, d in enumerate(days)
    ]


def group_into_weeks(cells: list[DayCell]) -> list[Week]:
    if len(cells) % DAYS_PER_WEEK:
        raise ValueError(f"Cannot split {len(cells)} cells into whole weeks")
    return [
        Week(index=i // DAYS_PER_WEEK, cells=tuple(cells[i:i + DAYS_PER_WEEK]))
        for i in range(0, len(cells), DAYS_PER_WEEK)
    ]


def shift_month(reference_date: date, months: int) -> date:
    """Previous/next month navigation; the day of month is clamped (Jan 31 + 1 → Feb 28/29)."""
    return require_day(reference_date, "reference_date") + relativedelta(months=months)


def shift_week(reference_date: date, weeks: int) -> date:
    return require_day(reference_date, "reference_date") + timedelta(weeks=weeks)

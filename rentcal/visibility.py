from datetime import date
from typing import Iterable

from rentcal.models import Order, DayCell, Week
from rentcal.utils import require_day


def visible_on(orders: Iterable[Order], day: date) -> list[Order]:
    """
    Orders whose inclusive [start_date, end_date] range covers `day`,
    in input order.
    """
    day = require_day(day, "day")
    return [o for o in orders if o.start_date <= day <= o.end_date]


def visible_in_week(orders: Iterable[Order], week: Week) -> list[Order]:
    """Orders visible on at least one day of `week`: the union of the per-day filters."""
    orders = list(orders)
    seen = set()
    for cell in week:
        for o in visible_on(orders, cell.day):
            seen.add(o.id)
    return [o for o in orders if o.id in seen]


def visible_days(order: Order, cells: Iterable[DayCell]) -> list[DayCell]:
    """The order's range clipped to the grid: cells it is visible on, in grid order."""
    return [c for c in cells if order.start_date <= c.day <= order.end_date]

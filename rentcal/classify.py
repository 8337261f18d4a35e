from typing import Sequence

from rentcal.models import Order, DayCell, DayClassification


def classify_day(order: Order, cell: DayCell, visible: Sequence[DayCell]) -> DayClassification:
    """
    Classify one visible day of an order.

    `visible` is the order's visible-day sequence for the whole grid (see
    `visibility.visible_days`). Start/end refer to the order's true range,
    first/last visible to that range as clipped by the grid, so they differ
    when the order runs off either edge of the displayed month.
    """
    day = cell.day
    if not order.covers(day):
        raise ValueError(f"Order {order.id!r} is not visible on {day}")

    is_start = day == order.start_date
    is_end = day == order.end_date
    # a single-day order is both start and end, never interior
    is_interior = order.start_date < day < order.end_date

    return DayClassification(
        is_range_start=is_start,
        is_range_end=is_end,
        is_interior=is_interior,
        is_first_visible_day=bool(visible) and visible[0].day == day,
        is_last_visible_day=bool(visible) and visible[-1].day == day,
    )


def detect_continuation(order: Order, cell: DayCell) -> tuple[bool, bool]:
    """
    Row-wrap flags for (order, day): (continues_to_next_row, continues_from_prev_row).

    A bar continues to the next row when it is still running on the last
    column of a week, and resumes from the previous row when it was already
    running before the first column.
    """
    if not order.covers(cell.day):
        return False, False
    to_next = cell.is_week_end and cell.day != order.end_date
    from_prev = cell.is_week_start and cell.day != order.start_date
    return to_next, from_prev

from datetime import date
from typing import Iterable

from loguru import logger

from rentcal.logger import LANES
from rentcal.models import Order, Week, LaneAssignment
from rentcal.visibility import visible_in_week, visible_on


def clip_to_week(order: Order, week: Week) -> tuple[date, date] | None:
    """The part of the order's range that falls inside the week, or None."""
    start = max(order.start_date, week.first_day)
    end = min(order.end_date, week.last_day)
    if start > end:
        return None
    return start, end


def _spans_overlap(a: tuple[date, date], b: tuple[date, date]) -> bool:
    # inclusive day ranges: a shared boundary day is an overlap
    return a[0] <= b[1] and b[0] <= a[1]


def assign_week_lanes(week: Week, orders: Iterable[Order]) -> LaneAssignment:
    """
    Greedy interval partitioning of the orders visible in one week.

    Candidates are taken by start date (ties by id) and each lands in the
    lowest lane whose spans it does not intersect inside the week. Processing
    in start order makes the lane count equal to the largest number of orders
    sharing a single day. Lanes are not carried over between weeks.
    """
    candidates = []
    for order in visible_in_week(orders, week):
        span = clip_to_week(order, week)
        if span is not None:
            candidates.append((order, span))
    candidates.sort(key=lambda x: (x[0].start_date, x[0].id))

    layers: list[list[tuple[date, date]]] = []
    assignments: dict[str, int] = {}
    for order, span in candidates:
        placed = False
        for li, layer in enumerate(layers):
            if not any(_spans_overlap(span, other) for other in layer):
                layer.append(span)
                assignments[order.id] = li
                placed = True
                break
        if not placed:
            layers.append([span])
            assignments[order.id] = len(layers) - 1

    for order, span in candidates:
        logger.log(LANES, "  • Week {} lane {}: {} [{}→{}]",
                   week.index, assignments[order.id], order.id, span[0], span[1])

    return LaneAssignment(week_index=week.index, lanes=assignments)


def max_concurrency(week: Week, orders: Iterable[Order]) -> int:
    """Largest number of orders visible on any single day of the week."""
    orders = list(orders)
    return max((len(visible_on(orders, cell.day)) for cell in week), default=0)


def validate_no_overlaps(week: Week, orders: Iterable[Order],
                         assignment: LaneAssignment) -> tuple[bool, str]:
    """
    Check that no two orders sharing a lane intersect inside the week.
    Returns (ok, message).
    """
    by_lane: dict[int, list[tuple[Order, tuple[date, date]]]] = {}
    for order in orders:
        lane = assignment.get(order.id)
        span = clip_to_week(order, week)
        if lane is None or span is None:
            continue
        by_lane.setdefault(lane, []).append((order, span))

    for lane, items in sorted(by_lane.items()):
        items.sort(key=lambda x: x[1][0])
        for (a, sa), (b, sb) in zip(items, items[1:]):
            if _spans_overlap(sa, sb):
                return False, f"Week {week.index} lane {lane}: {a.id} overlaps {b.id}"
    return True, "ok"

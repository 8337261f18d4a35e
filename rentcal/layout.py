import calendar
from datetime import date
from typing import Iterable

from loguru import logger

from rentcal.classify import classify_day, detect_continuation
from rentcal.grid import build_month_grid, build_week_grid, group_into_weeks
from rentcal.lanes import assign_week_lanes
from rentcal.logger import ORDERS
from rentcal.models import (
    Order,
    OrderStatus,
    DayCell,
    DayLayout,
    MonthLayout,
    RenderDescriptor,
)
from rentcal.utils import require_day
from rentcal.validation import partition_orders
from rentcal.visibility import visible_days, visible_on


def filter_by_status(orders: Iterable[Order], statuses: Iterable[OrderStatus] | None) -> list[Order]:
    """Keep orders whose status is in `statuses`; None keeps everything."""
    orders = list(orders)
    if statuses is None:
        return orders
    wanted = set(statuses)
    return [o for o in orders if o.status in wanted]


def build_layout(orders: Iterable[Order], reference_date: date,
                 statuses: Iterable[OrderStatus] | None = None,
                 firstweekday: int = calendar.SUNDAY,
                 today: date | None = None) -> MonthLayout:
    """
    One full layout pass over the month grid containing `reference_date`.

    Malformed orders are excluded and returned in `MonthLayout.rejected`.
    The status filter is applied before grid visibility and lane assignment,
    so changing it may renumber lanes. Nothing is cached between calls.
    """
    reference_date = require_day(reference_date, "reference_date")
    cells = build_month_grid(reference_date, firstweekday, today)
    return _layout_cells(orders, reference_date, cells, statuses)


def build_week_layout(orders: Iterable[Order], reference_date: date,
                      statuses: Iterable[OrderStatus] | None = None,
                      firstweekday: int = calendar.SUNDAY,
                      today: date | None = None) -> MonthLayout:
    """Same pass as build_layout, over the single week containing `reference_date`."""
    reference_date = require_day(reference_date, "reference_date")
    cells = build_week_grid(reference_date, firstweekday, today)
    return _layout_cells(orders, reference_date, cells, statuses)


def _layout_cells(orders, reference_date: date, cells: list[DayCell], statuses) -> MonthLayout:
    valid, rejected = partition_orders(orders)
    participating = filter_by_status(valid, statuses)
    logger.debug("Layout {}: {} orders ({} rejected, {} filtered out)",
                 reference_date, len(participating), len(rejected), len(valid) - len(participating))

    # visible days per order, computed once per pass
    visible = {o.id: visible_days(o, cells) for o in participating}
    on_grid = [o for o in participating if visible[o.id]]

    weeks = group_into_weeks(cells)
    assignments = []
    day_layouts = []
    for week in weeks:
        lanes = assign_week_lanes(week, on_grid)
        assignments.append(lanes)
        for cell in week:
            descriptors = []
            for order in visible_on(on_grid, cell.day):
                cls = classify_day(order, cell, visible[order.id])
                to_next, from_prev = detect_continuation(order, cell)
                descriptors.append(RenderDescriptor(
                    order=order,
                    day=cell.day,
                    lane=lanes[order.id],
                    is_range_start=cls.is_range_start,
                    is_range_end=cls.is_range_end,
                    is_interior=cls.is_interior,
                    is_first_visible_day=cls.is_first_visible_day,
                    is_last_visible_day=cls.is_last_visible_day,
                    continues_to_next_row=to_next,
                    continues_from_prev_row=from_prev,
                ))
            descriptors.sort(key=lambda d: (d.lane, d.order_id))
            if descriptors:
                logger.log(ORDERS, "{}: {}", cell.day, [d.order_id for d in descriptors])
            day_layouts.append(DayLayout(cell=cell, descriptors=tuple(descriptors)))

    return MonthLayout(
        reference_date=reference_date,
        weeks=tuple(weeks),
        lanes=tuple(assignments),
        days=tuple(day_layouts),
        rejected=tuple(rejected),
    )

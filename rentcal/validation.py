from typing import Iterable

from loguru import logger

from rentcal.errors import OrderDataError
from rentcal.models import Order
from rentcal.utils import require_day


def validate_order(order: Order) -> Order:
    """
    Raise OrderDataError for a missing or inverted date range.
    Datetimes are a caller bug and raise NonNormalizedDateError instead.
    """
    if not order.id:
        raise OrderDataError(order.id, "missing id")
    if order.start_date is None:
        raise OrderDataError(order.id, "missing start date")
    if order.end_date is None:
        raise OrderDataError(order.id, "missing end date")
    require_day(order.start_date, f"start_date of order {order.id!r}")
    require_day(order.end_date, f"end_date of order {order.id!r}")
    if order.end_date < order.start_date:
        raise OrderDataError(
            order.id, f"end date {order.end_date} is before start date {order.start_date}"
        )
    return order


def partition_orders(orders: Iterable[Order]) -> tuple[list[Order], list[OrderDataError]]:
    """
    Split orders into (valid, rejected). Rejected orders are never repaired.
    A repeated id is rejected after its first occurrence, since lane maps are keyed by id.
    """
    valid, rejected = [], []
    seen = set()
    for order in orders:
        try:
            validate_order(order)
            if order.id in seen:
                raise OrderDataError(order.id, "duplicate id")
        except OrderDataError as e:
            logger.warning("{}", e)
            rejected.append(e)
            continue
        seen.add(order.id)
        valid.append(order)
    return valid, rejected

import json
from datetime import datetime, date, timedelta

import requests
import yaml
from icalendar import Calendar as iCal
from loguru import logger

from rentcal.errors import OrderDataError, SourceError, ConfigError
from rentcal.logger import ORDERS
from rentcal.models import Order, OrderStatus
from rentcal.status import parse_status
from rentcal.utils import normalize_day

_START_KEYS = ("start", "start_date", "rental_start")
_END_KEYS = ("end", "end_date", "rental_end")


def download_source(source: str, timeout: float = 30) -> bytes:
    """
    Fetch an order feed from a URL or file path.
    """
    try:
        if source.startswith("http"):
            resp = requests.get(source, timeout=timeout)
            resp.raise_for_status()
            return resp.content
        with open(source, "rb") as f:
            return f.read()
    except (requests.RequestException, OSError) as e:
        raise SourceError(f"Cannot read order source {source}: {e}") from e


def _first(record: dict, keys):
    for k in keys:
        if record.get(k) not in (None, ""):
            return record[k]
    return None


def _record_status(raw, order_id) -> OrderStatus:
    if raw in (None, ""):
        return OrderStatus.PENDING
    try:
        return parse_status(raw)
    except ConfigError:
        logger.warning("Order {!r}: unknown status {!r}, treating as pending.", order_id, raw)
        return OrderStatus.PENDING


def order_from_record(record: dict, tzinfo=None) -> Order:
    """
    Build an Order from a plain JSON/YAML record. Raises OrderDataError when
    an id or a date is missing or cannot be parsed.
    """
    order_id = record.get("id")
    if order_id in (None, ""):
        raise OrderDataError(None, f"record without id: {record!r}")
    order_id = str(order_id)

    dates = []
    for label, keys in (("start", _START_KEYS), ("end", _END_KEYS)):
        raw = _first(record, keys)
        try:
            value = normalize_day(raw, tzinfo)
        except (ValueError, TypeError, OverflowError) as e:
            raise OrderDataError(order_id, f"unparsable {label} date {raw!r}: {e}") from e
        if value is None:
            raise OrderDataError(order_id, f"missing {label} date")
        dates.append(value)

    return Order(
        id=order_id,
        start_date=dates[0],
        end_date=dates[1],
        status=_record_status(record.get("status"), order_id),
        customer=record.get("customer"),
        reference=record.get("reference"),
    )


def parse_records(raw: bytes, fmt: str) -> list[dict]:
    """Decode a JSON/YAML feed: a list of records or a mapping with an `orders` list."""
    try:
        if fmt == "json":
            data = json.loads(raw)
        else:
            data = yaml.safe_load(raw)
    except (ValueError, yaml.YAMLError) as e:
        raise SourceError(f"Invalid {fmt} order feed: {e}") from e
    if isinstance(data, dict):
        data = data.get("orders", [])
    if not isinstance(data, list):
        raise SourceError(f"Expected a list of orders, got {type(data).__name__}")
    return data


def orders_from_ics(raw: bytes, tzinfo=None) -> tuple[list[Order], list[OrderDataError]]:
    """
    Each VEVENT is one order. All-day DTEND values are exclusive, so the
    order ends the day before; timed events end on the day DTEND falls on.
    """
    try:
        cal = iCal.from_ical(raw)
    except ValueError as e:
        raise SourceError(f"Invalid iCalendar feed: {e}") from e

    orders, rejected = [], []
    for comp in cal.walk("VEVENT"):
        uid = str(comp.get("UID", "")) or None
        try:
            if uid is None:
                raise OrderDataError(None, f"VEVENT without UID: {comp.get('SUMMARY')!r}")
            if comp.get("DTSTART") is None:
                raise OrderDataError(uid, "missing DTSTART")
            try:
                start_raw = comp.decoded("DTSTART")
                if comp.get("DTEND") is not None:
                    end_raw = comp.decoded("DTEND")
                elif comp.get("DURATION") is not None:
                    end_raw = start_raw + comp.decoded("DURATION")
                else:
                    end_raw = start_raw
                start = normalize_day(start_raw, tzinfo)
                end = normalize_day(end_raw, tzinfo)
            except (ValueError, TypeError, OverflowError) as e:
                raise OrderDataError(uid, f"unparsable date: {e}") from e
            all_day = isinstance(end_raw, date) and not isinstance(end_raw, datetime)
            if all_day and end > start:
                end -= timedelta(days=1)
        except OrderDataError as e:
            rejected.append(e)
            continue

        orders.append(Order(
            id=uid,
            start_date=start,
            end_date=end,
            status=_record_status(comp.get("STATUS"), uid),
            customer=str(comp["SUMMARY"]) if comp.get("SUMMARY") else None,
            reference=str(comp["LOCATION"]) if comp.get("LOCATION") else None,
        ))
    return orders, rejected


def load_orders(sources: list[dict], tzinfo=None) -> tuple[list[Order], list[OrderDataError]]:
    """
    High-level loader: for each configured source, download, decode and
    build Orders. Bad records are collected, bad sources raise SourceError.
    """
    orders, rejected = [], []
    names = [entry.get("name", "<unknown>") for entry in sources]
    logger.debug("Loading {} order sources: {}", len(names), names)
    for entry in sources:
        name = entry.get("name")
        source = entry["source"]
        fmt = entry.get("format", "json")
        logger.debug("Fetching orders {} from {}...", name, source)
        raw = download_source(source)

        if fmt == "ics":
            got, bad = orders_from_ics(raw, tzinfo)
        else:
            got, bad = [], []
            for record in parse_records(raw, fmt):
                if not isinstance(record, dict):
                    bad.append(OrderDataError(None, f"record is not a mapping: {record!r}"))
                    continue
                try:
                    got.append(order_from_record(record, tzinfo))
                except OrderDataError as e:
                    bad.append(e)

        for e in bad:
            logger.warning("{}: {}", name, e)
        for o in got:
            logger.log(ORDERS, "   • {} {}→{} ({})", o.id, o.start_date, o.end_date, o.status.value)
        logger.debug("   • {}: {} orders, {} rejected", name, len(got), len(bad))
        orders.extend(got)
        rejected.extend(bad)

    return sorted(orders, key=lambda o: (o.start_date, o.id)), rejected

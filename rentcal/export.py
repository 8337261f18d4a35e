import json
import os

import yaml
from loguru import logger

from rentcal.errors import ConfigError
from rentcal.models import MonthLayout, RenderDescriptor
from rentcal.status import status_display

OUTPUT_FORMATS = ("json", "yaml")


def descriptor_to_dict(d: RenderDescriptor, overrides=None) -> dict:
    display = status_display(d.order.status, overrides)
    return {
        "order_id": d.order_id,
        "customer": d.order.customer,
        "reference": d.order.reference,
        "status": d.order.status.value,
        "status_label": display.label,
        "status_color": display.color,
        "lane": d.lane,
        "is_range_start": d.is_range_start,
        "is_range_end": d.is_range_end,
        "is_interior": d.is_interior,
        "is_first_visible_day": d.is_first_visible_day,
        "is_last_visible_day": d.is_last_visible_day,
        "continues_to_next_row": d.continues_to_next_row,
        "continues_from_prev_row": d.continues_from_prev_row,
    }


def layout_to_dict(layout: MonthLayout, overrides=None) -> dict:
    """Plain-data form of a layout pass, for a renderer."""
    days_by_date = {dl.day: dl for dl in layout.days}
    weeks = []
    for week, lanes in zip(layout.weeks, layout.lanes):
        weeks.append({
            "index": week.index,
            "lane_count": lanes.lane_count,
            "days": [
                {
                    "date": cell.day.isoformat(),
                    "in_current_month": cell.in_current_month,
                    "is_today": cell.is_today,
                    "weekday_index": cell.weekday_index,
                    "order_count": days_by_date[cell.day].order_count,
                    "lane_count": days_by_date[cell.day].lane_count,
                    "orders": [descriptor_to_dict(d, overrides) for d in days_by_date[cell.day].descriptors],
                }
                for cell in week
            ],
        })
    return {
        "title": layout.header_title,
        "reference_date": layout.reference_date.isoformat(),
        "weeks": weeks,
        "rejected": [{"order_id": e.order_id, "reason": e.reason} for e in layout.rejected],
    }


def write_layout(layout: MonthLayout, path: str, fmt: str = "json", overrides=None) -> str:
    """Write the layout as JSON or YAML. Raises ConfigError for any other format, before touching `path`."""
    if fmt not in OUTPUT_FORMATS:
        logger.error("Unknown output format {!r}.", fmt)
        raise ConfigError(f"Output format must be one of {OUTPUT_FORMATS}, got '{fmt}'")
    data = layout_to_dict(layout, overrides)
    dirname = os.path.dirname(path)
    if dirname:
        os.makedirs(dirname, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        if fmt == "yaml":
            yaml.safe_dump(data, f, sort_keys=False, allow_unicode=True)
        else:
            json.dump(data, f, indent=2, ensure_ascii=False)
    logger.debug("Wrote {} layout to {}", fmt, path)
    return path


def summarize_layout(layout: MonthLayout) -> list[str]:
    """One line per week: date span, lane count and the lane of every order in it."""
    lines = [f"{layout.header_title}: {layout.descriptor_count} descriptors"]
    for week, lanes in zip(layout.weeks, layout.lanes):
        placed = ", ".join(f"{oid}@{lane}" for oid, lane in sorted(lanes.lanes.items(), key=lambda x: (x[1], x[0])))
        lines.append(
            f"  week {week.index} {week.first_day}→{week.last_day}: "
            f"{lanes.lane_count} lane(s) {placed or '-'}"
        )
    return lines

from dataclasses import dataclass, replace
from typing import Iterable

from loguru import logger

from rentcal.errors import ConfigError
from rentcal.models import OrderStatus
from rentcal.utils import css_color_to_hex


@dataclass(frozen=True)
class StatusDisplay:
    label: str
    color: str  # "#RRGGBB"


STATUS_DISPLAY: dict[OrderStatus, StatusDisplay] = {
    OrderStatus.PENDING:   StatusDisplay(label="Pendente",  color="#D97706"),
    OrderStatus.APPROVED:  StatusDisplay(label="Aprovado",  color="#059669"),
    OrderStatus.REJECTED:  StatusDisplay(label="Rejeitado", color="#E11D48"),
    OrderStatus.COMPLETED: StatusDisplay(label="Concluído", color="#2563EB"),
}

# Synonyms seen in order feeds (iCalendar STATUS values, English/Portuguese labels)
_STATUS_ALIASES = {
    "tentative": OrderStatus.PENDING,
    "pendente": OrderStatus.PENDING,
    "confirmed": OrderStatus.APPROVED,
    "aprovado": OrderStatus.APPROVED,
    "cancelled": OrderStatus.REJECTED,
    "canceled": OrderStatus.REJECTED,
    "rejeitado": OrderStatus.REJECTED,
    "done": OrderStatus.COMPLETED,
    "concluído": OrderStatus.COMPLETED,
    "concluido": OrderStatus.COMPLETED,
}


def parse_status(raw) -> OrderStatus:
    """Map a status name (or alias) onto OrderStatus; raises ConfigError when unknown."""
    if isinstance(raw, OrderStatus):
        return raw
    s = str(raw).strip().lower()
    try:
        return OrderStatus(s)
    except ValueError:
        pass
    if s in _STATUS_ALIASES:
        return _STATUS_ALIASES[s]
    raise ConfigError(f"Unknown order status '{raw}'")


def parse_status_filter(raw: str | Iterable[str] | None) -> set[OrderStatus] | None:
    """
    "approved, completed" -> {APPROVED, COMPLETED}. Empty input means no filter (None).
    """
    if raw is None:
        return None
    parts = raw.split(",") if isinstance(raw, str) else list(raw)
    parts = [p.strip() for p in parts if str(p).strip()]
    if not parts:
        return None
    return {parse_status(p) for p in parts}


def status_display(status: OrderStatus, overrides: dict | None = None) -> StatusDisplay:
    display = STATUS_DISPLAY[status]
    if overrides and status in overrides:
        display = overrides[status]
    return display


def build_display_overrides(raw: dict | None) -> dict[OrderStatus, StatusDisplay]:
    """
    Turn the `statuses` config block into display overrides:

        statuses:
          approved: {label: Approved, color: seagreen}
    """
    overrides = {}
    for name, attrs in (raw or {}).items():
        status = parse_status(name)
        if not isinstance(attrs, dict):
            raise ConfigError(f"Status '{name}' must map to a dict of label/color")
        base = STATUS_DISPLAY[status]
        changes = {}
        if "label" in attrs:
            changes["label"] = str(attrs["label"])
        if "color" in attrs:
            changes["color"] = css_color_to_hex(str(attrs["color"]))
        overrides[status] = replace(base, **changes)
        logger.debug("Status display override for {}: {}", status.value, overrides[status])
    return overrides

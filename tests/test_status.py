import pytest

from rentcal.errors import ConfigError
from rentcal.models import OrderStatus
from rentcal.status import (
    STATUS_DISPLAY,
    build_display_overrides,
    parse_status,
    parse_status_filter,
    status_display,
)


def test_every_status_has_display_attributes():
    assert set(STATUS_DISPLAY) == set(OrderStatus)
    assert STATUS_DISPLAY[OrderStatus.APPROVED].label == "Aprovado"
    for display in STATUS_DISPLAY.values():
        assert display.color.startswith("#") and len(display.color) == 7


@pytest.mark.parametrize("raw,expected", [
    ("approved", OrderStatus.APPROVED),
    ("  Completed ", OrderStatus.COMPLETED),
    ("CONFIRMED", OrderStatus.APPROVED),
    ("cancelled", OrderStatus.REJECTED),
    ("Pendente", OrderStatus.PENDING),
    (OrderStatus.REJECTED, OrderStatus.REJECTED),
])
def test_parse_status(raw, expected):
    assert parse_status(raw) is expected


def test_parse_status_unknown():
    with pytest.raises(ConfigError):
        parse_status("archived")


def test_parse_status_filter():
    assert parse_status_filter("") is None
    assert parse_status_filter(None) is None
    assert parse_status_filter(" , ") is None
    assert parse_status_filter("approved, completed") == {OrderStatus.APPROVED, OrderStatus.COMPLETED}
    assert parse_status_filter(["pending"]) == {OrderStatus.PENDING}


def test_display_overrides():
    overrides = build_display_overrides({"approved": {"label": "Approved", "color": "seagreen"}})
    display = status_display(OrderStatus.APPROVED, overrides)
    assert display.label == "Approved"
    assert display.color.lower() == "#2e8b57"
    assert status_display(OrderStatus.PENDING, overrides) == STATUS_DISPLAY[OrderStatus.PENDING]


def test_display_overrides_reject_bad_input():
    with pytest.raises(ConfigError):
        build_display_overrides({"approved": "green"})
    with pytest.raises(ConfigError):
        build_display_overrides({"approved": {"color": "not-a-color"}})

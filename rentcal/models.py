from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum

# Month names for the header, in the same locale as the status labels
MONTH_NAMES = (
    "janeiro", "fevereiro", "março", "abril", "maio", "junho",
    "julho", "agosto", "setembro", "outubro", "novembro", "dezembro",
)


class OrderStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    COMPLETED = "completed"


@dataclass(frozen=True)
class Order:
    """
    A rental order as supplied by the order-data provider.

    The engine never mutates orders. `start_date <= end_date` is checked by
    `rentcal.validation` so that bad records can be reported, not raised
    at construction time.
    """

    id: str
    start_date: date | None
    end_date: date | None
    status: OrderStatus = OrderStatus.PENDING
    customer: str | None = None
    reference: str | None = None

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


@dataclass(frozen=True)
class DayCell:
    day: date
    in_current_month: bool
    weekday_index: int  # 0..6, column within the week row
    is_today: bool = False

    @property
    def is_week_start(self) -> bool:
        return self.weekday_index == 0

    @property
    def is_week_end(self) -> bool:
        return self.weekday_index == 6


@dataclass(frozen=True)
class Week:
    index: int
    cells: tuple[DayCell, ...]

    @property
    def first_day(self) -> date:
        return self.cells[0].day

    @property
    def last_day(self) -> date:
        return self.cells[-1].day

    def __iter__(self):
        return iter(self.cells)

    def __len__(self):
        return len(self.cells)


@dataclass(frozen=True)
class LaneAssignment:
    """Order id -> lane index, valid for one week only."""

    week_index: int
    lanes: dict[str, int] = field(default_factory=dict)

    @property
    def lane_count(self) -> int:
        return max(self.lanes.values()) + 1 if self.lanes else 0

    def get(self, order_id: str) -> int | None:
        return self.lanes.get(order_id)

    def __contains__(self, order_id) -> bool:
        return order_id in self.lanes

    def __getitem__(self, order_id: str) -> int:
        return self.lanes[order_id]

    def __len__(self):
        return len(self.lanes)


@dataclass(frozen=True)
class DayClassification:
    is_range_start: bool
    is_range_end: bool
    is_interior: bool
    is_first_visible_day: bool
    is_last_visible_day: bool


@dataclass(frozen=True)
class RenderDescriptor:
    order: Order
    day: date
    lane: int
    is_range_start: bool
    is_range_end: bool
    is_interior: bool
    is_first_visible_day: bool
    is_last_visible_day: bool
    continues_to_next_row: bool
    continues_from_prev_row: bool

    @property
    def order_id(self) -> str:
        return self.order.id


@dataclass(frozen=True)
class DayLayout:
    cell: DayCell
    descriptors: tuple[RenderDescriptor, ...]

    @property
    def day(self) -> date:
        return self.cell.day

    @property
    def order_count(self) -> int:
        return len({d.order_id for d in self.descriptors})

    @property
    def lane_count(self) -> int:
        """Highest lane used on this day plus one; sizes the cell height."""
        return max((d.lane for d in self.descriptors), default=-1) + 1


@dataclass(frozen=True)
class MonthLayout:
    reference_date: date
    weeks: tuple[Week, ...]
    lanes: tuple[LaneAssignment, ...]
    days: tuple[DayLayout, ...]
    rejected: tuple = ()

    def day(self, value: date) -> DayLayout:
        for day_layout in self.days:
            if day_layout.day == value:
                return day_layout
        raise KeyError(value)

    def descriptors_for(self, order_id: str) -> list[RenderDescriptor]:
        return [d for dl in self.days for d in dl.descriptors if d.order_id == order_id]

    @property
    def header_title(self) -> str:
        """Month and year as a pt-BR long date, e.g. "junho de 2025"."""
        return f"{MONTH_NAMES[self.reference_date.month - 1]} de {self.reference_date.year}"

    @property
    def descriptor_count(self) -> int:
        return sum(len(dl.descriptors) for dl in self.days)

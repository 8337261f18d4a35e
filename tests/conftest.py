import sys
from datetime import date
from pathlib import Path

import pytest

# Ensure project root is on sys.path for tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from rentcal.models import Order, OrderStatus  # noqa: E402


@pytest.fixture
def make_order():
    def _make(order_id, start, end, status=OrderStatus.PENDING, **kwargs):
        return Order(id=order_id, start_date=start, end_date=end, status=status, **kwargs)
    return _make


@pytest.fixture
def june_2025():
    # 30-day month whose 1st falls on a Sunday
    return date(2025, 6, 1)

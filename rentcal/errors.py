class RentcalError(Exception):
    """Base class for every error raised by rentcal."""


class OrderDataError(RentcalError):
    """
    An order failed data-quality checks and was excluded from the layout.
    """

    def __init__(self, order_id, reason: str):
        self.order_id = order_id
        self.reason = reason
        super().__init__(f"Order {order_id!r} rejected: {reason}")


class NonNormalizedDateError(RentcalError, TypeError):
    """A datetime reached the engine where a plain day value is required."""

    def __init__(self, value, what: str = "date"):
        self.value = value
        super().__init__(
            f"{what} must be a plain date, got {type(value).__name__} {value!r}; "
            "normalize it with rentcal.utils.normalize_day first"
        )


class ConfigError(RentcalError):
    pass


class SourceError(RentcalError):
    pass


class GridRangeError(RentcalError, ValueError):
    """The grid for a reference date would run outside the supported date range."""

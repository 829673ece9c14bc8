"""Interest accrual period strategies.

An interest period decides when the next accrual date falls, given the
previous one. The set of strategies is closed: ``InterestPeriod`` is the
union of ``DayOfMonthRange`` and ``FixedLength``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import TypeAlias

from dateutil.relativedelta import relativedelta

from loan_schedule.domain.errors import InvalidArgumentError, ValidationError


class InvalidInterestPeriod(ValidationError):
    """Raised when interest period parameters are invalid."""

    pass


class InvalidAccrualDate(InvalidArgumentError):
    """Raised when a strategy is asked to advance from an undefined date."""

    pass


def _require_date(previous: date | None) -> date:
    if previous is None:
        raise InvalidAccrualDate(
            "previous accrual date must not be None", field="previous"
        )
    if not isinstance(previous, date):
        raise InvalidAccrualDate(
            f"previous accrual date must be a date, got {type(previous).__name__}",
            field="previous",
        )
    return previous


def _past_calendar_end(previous: date) -> InvalidAccrualDate:
    return InvalidAccrualDate(
        f"next accrual date after {previous.isoformat()} is past {date.max.isoformat()}",
        field="previous",
    )


def _ordinal(day: int) -> str:
    if 10 <= day % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")
    return f"{day}{suffix}"


@dataclass(frozen=True, slots=True)
class DayOfMonthRange:
    """
    Calendar period running from one day of the month to another,
    e.g. "26th to 25th".

    The next accrual date is ``end_day`` of the following month, clamped to
    that month's last day (31 -> 30 in April, 31 -> 29 in a leap February).
    """

    start_day: int
    end_day: int

    def __post_init__(self) -> None:
        errors = []
        for field_name in ("start_day", "end_day"):
            value = getattr(self, field_name)
            if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= 31:
                errors.append(
                    {
                        "field": field_name,
                        "message": f"Must be an integer in 1..31, got {value!r}",
                        "code": "INVALID_VALUE",
                    }
                )
        if errors:
            raise InvalidInterestPeriod(errors=errors)

    @classmethod
    def ending_on(cls, payment_day: int) -> DayOfMonthRange:
        """Build the range that ends on ``payment_day`` and starts the day after."""
        start_day = 1 if payment_day >= 31 else payment_day + 1
        return cls(start_day=start_day, end_day=payment_day)

    def next_accrual_date(self, previous: date | None) -> date:
        previous = _require_date(previous)
        try:
            # relativedelta clamps day= to the length of the target month
            return previous + relativedelta(months=1, day=self.end_day)
        except ValueError:
            raise _past_calendar_end(previous) from None

    def describe(self) -> str:
        return f"{_ordinal(self.start_day)} to {_ordinal(self.end_day)}"


@dataclass(frozen=True, slots=True)
class FixedLength:
    """
    Period of a fixed number of days.

    ``offset_days`` is kept for aligning the first period; it does not
    alter the step between accrual dates.
    """

    days: int
    offset_days: int = 0

    def __post_init__(self) -> None:
        if isinstance(self.days, bool) or not isinstance(self.days, int) or self.days <= 0:
            raise InvalidInterestPeriod(
                f"days must be a positive integer, got {self.days!r}", field="days"
            )
        if isinstance(self.offset_days, bool) or not isinstance(self.offset_days, int):
            raise InvalidInterestPeriod(
                f"offset_days must be an integer, got {self.offset_days!r}",
                field="offset_days",
            )

    def next_accrual_date(self, previous: date | None) -> date:
        previous = _require_date(previous)
        try:
            return previous + timedelta(days=self.days)
        except OverflowError:
            raise _past_calendar_end(previous) from None

    def describe(self) -> str:
        if self.offset_days:
            return f"{self.days} days, offset {self.offset_days} days"
        return f"{self.days} days"


InterestPeriod: TypeAlias = DayOfMonthRange | FixedLength


def next_accrual_date(period: InterestPeriod, previous: date | None) -> date:
    """Advance ``period`` from ``previous`` to the next accrual date."""
    match period:
        case DayOfMonthRange() | FixedLength():
            return period.next_accrual_date(previous)
        case _:
            raise InvalidInterestPeriod(
                f"Unsupported interest period: {type(period).__name__}",
                field="interest_period",
            )

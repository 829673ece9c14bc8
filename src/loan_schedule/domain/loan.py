from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Iterator

from dateutil.relativedelta import relativedelta

from loan_schedule.domain.errors import ValidationError
from loan_schedule.domain.interest_period import DayOfMonthRange, FixedLength, InterestPeriod


class InvalidLoanTerms(ValidationError):
    """Raised when loan terms violate an invariant."""

    pass


class AmortizationMethod(str, Enum):
    DIFFERENTIATED = "differentiated"
    ANNUITY = "annuity"

    @property
    def display_name(self) -> str:
        return _METHOD_DISPLAY_NAMES[self]


_METHOD_DISPLAY_NAMES = {
    AmortizationMethod.DIFFERENTIATED: "Differentiated",
    AmortizationMethod.ANNUITY: "Annuity",
}


class RateConvention(str, Enum):
    """How the nominal annual rate is turned into per-period interest."""

    # annual / 12, charged once per period whatever its length
    MONTHLY = "monthly"
    # annual / 365, charged per elapsed day
    ACTUAL_365 = "actual_365"


@dataclass(frozen=True, slots=True)
class LoanTerms:
    """
    Immutable loan terms.

    Validated on construction: an instance that exists is always usable
    by the schedule calculator.
    """

    principal: Decimal
    term_months: int
    annual_rate_percent: Decimal
    interest_period: InterestPeriod
    start_date: date

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """
        Validate loan terms.

        Raises:
            InvalidLoanTerms: If any field is invalid, listing every offending field
        """
        errors: list[dict[str, str]] = []

        # Guardrails: prevent float leakage past boundary
        if not isinstance(self.principal, Decimal):
            errors.append(_error("principal", "Must be Decimal (no floats past the boundary)"))
        elif not self.principal.is_finite() or self.principal <= 0:
            errors.append(_error("principal", "principal must be > 0"))

        if isinstance(self.term_months, bool) or not isinstance(self.term_months, int):
            errors.append(_error("term_months", "Must be an integer"))
        elif self.term_months <= 0:
            errors.append(_error("term_months", "term_months must be > 0"))

        if not isinstance(self.annual_rate_percent, Decimal):
            errors.append(
                _error("annual_rate_percent", "Must be Decimal (no floats past the boundary)")
            )
        elif not self.annual_rate_percent.is_finite() or self.annual_rate_percent < 0:
            errors.append(_error("annual_rate_percent", "annual_rate_percent must be >= 0"))

        if not isinstance(self.interest_period, (DayOfMonthRange, FixedLength)):
            errors.append(
                _error("interest_period", "Must be DayOfMonthRange or FixedLength")
            )

        if not isinstance(self.start_date, date):
            errors.append(_error("start_date", "Must be a date"))

        if not errors:
            errors.extend(self._calendar_errors())

        if errors:
            raise InvalidLoanTerms(errors=errors)

    def _calendar_errors(self) -> list[dict[str, str]]:
        """Every date a calculator can visit must be representable by ``date``."""
        try:
            term_end = self.start_date + relativedelta(months=self.term_months)
        except (ValueError, OverflowError):
            return [
                _error(
                    "term_months",
                    f"Term starting {self.start_date.isoformat()} must end "
                    f"on or before {date.max.isoformat()}",
                )
            ]

        match self.interest_period:
            case FixedLength(days=days):
                span = (term_end - self.start_date).days
                # furthest date reached by the monthly walk and by the day-count walk
                reach = max(days * self.term_months, ((span - 1) // days + 1) * days)
                fits = reach <= (date.max - self.start_date).days
            case _:
                # the day-count walk steps into the month after the term end
                # unless end_day in the term end's month already reaches it
                fits = (term_end.year, term_end.month) < (date.max.year, date.max.month) or (
                    term_end + relativedelta(day=self.interest_period.end_day) >= term_end
                )

        if not fits:
            return [
                _error(
                    "interest_period",
                    f"Accrual dates of a {self.interest_period.describe()} period "
                    f"run past {date.max.isoformat()}",
                )
            ]
        return []


def _error(field: str, message: str) -> dict[str, str]:
    return {"field": field, "message": message, "code": "INVALID_VALUE"}


@dataclass(frozen=True, slots=True)
class Payment:
    """One schedule row. Amounts are kept at internal precision."""

    days_of_borrowing: int
    payment_date: date
    total_payment: Decimal
    interest: Decimal
    principal: Decimal
    remaining_balance: Decimal


@dataclass(frozen=True, slots=True)
class PaymentSchedule:
    method: AmortizationMethod
    convention: RateConvention
    payments: tuple[Payment, ...]

    def __len__(self) -> int:
        return len(self.payments)

    def __iter__(self) -> Iterator[Payment]:
        return iter(self.payments)

    def __getitem__(self, index: int) -> Payment:
        return self.payments[index]

    @property
    def total_paid(self) -> Decimal:
        return sum((p.total_payment for p in self.payments), Decimal("0"))

    @property
    def total_interest(self) -> Decimal:
        return sum((p.interest for p in self.payments), Decimal("0"))

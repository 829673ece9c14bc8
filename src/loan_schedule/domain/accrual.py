"""Accrual period boundaries and day counting.

Turns LoanTerms into the sequence of (start, end) accrual periods the
amortization methods iterate over.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from dateutil.relativedelta import relativedelta

from loan_schedule.domain.interest_period import next_accrual_date
from loan_schedule.domain.loan import LoanTerms, RateConvention


@dataclass(frozen=True, slots=True)
class AccrualPeriod:
    start: date
    end: date

    @property
    def days(self) -> int:
        return days_between(self.start, self.end)


def days_between(start: date, end: date) -> int:
    return (end - start).days


def add_months(start: date, months: int) -> date:
    """Calendar month addition, clamped to the last day of the target month."""
    return start + relativedelta(months=months)


def term_end_date(terms: LoanTerms) -> date:
    return add_months(terms.start_date, terms.term_months)


def monthly_periods(terms: LoanTerms) -> list[AccrualPeriod]:
    """Exactly ``term_months`` periods, dated by walking the interest period."""
    periods = []
    previous = terms.start_date
    for _ in range(terms.term_months):
        current = next_accrual_date(terms.interest_period, previous)
        periods.append(AccrualPeriod(start=previous, end=current))
        previous = current
    return periods


def day_count_periods(terms: LoanTerms) -> list[AccrualPeriod]:
    """
    Walk the interest period until it would cross the term end date.

    The last period is clipped to the term end date, so it may be shorter
    than the others. There is always at least one period.
    """
    end_of_term = term_end_date(terms)
    periods = []
    previous = terms.start_date
    while True:
        current = next_accrual_date(terms.interest_period, previous)
        if current >= end_of_term:
            periods.append(AccrualPeriod(start=previous, end=end_of_term))
            return periods
        periods.append(AccrualPeriod(start=previous, end=current))
        previous = current


def accrual_periods(terms: LoanTerms, convention: RateConvention) -> list[AccrualPeriod]:
    if convention is RateConvention.ACTUAL_365:
        return day_count_periods(terms)
    return monthly_periods(terms)

"""Amortization schedule calculators.

Two methods, each a pure function of (terms, convention, scale):

- differentiated: equal principal share every period, declining total
- annuity: equal total payment every period, growing principal share

Rounding policy:
- Every division and every interest amount is quantized to ``scale``
  fractional digits with ROUND_HALF_UP
- Sums and differences of quantized values are exact, so each row satisfies
  total_payment == interest + principal and balances chain exactly
- The final period always repays the exact remaining balance, which drives
  the last remaining_balance to zero whatever the rounding drift
- Presentation rounding (cents) is left to callers
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import MAX_EMAX, MIN_EMIN, ROUND_HALF_UP, Context, Decimal, localcontext
from types import MappingProxyType
from typing import Callable, Mapping

from loan_schedule.domain.accrual import AccrualPeriod, accrual_periods
from loan_schedule.domain.errors import ValidationError
from loan_schedule.domain.loan import (
    AmortizationMethod,
    LoanTerms,
    Payment,
    PaymentSchedule,
    RateConvention,
)


class InvalidCalculationSettings(ValidationError):
    """Raised when the internal precision or rate convention is unusable."""

    pass


class UnknownAmortizationMethod(ValidationError):
    """Raised when an amortization method name is not registered."""

    pass


MIN_SCALE = 10
DEFAULT_SCALE = 10

_ZERO = Decimal("0")
_ONE = Decimal("1")
_MONTHS_PER_YEAR = Decimal("12")
_DAYS_PER_YEAR = Decimal("365")
_PERCENT = Decimal("100")
_GUARD_DIGITS = 40


def check_scale(scale: int) -> int:
    if isinstance(scale, bool) or not isinstance(scale, int) or scale < MIN_SCALE:
        raise InvalidCalculationSettings(
            f"scale must be an integer >= {MIN_SCALE}, got {scale!r}", field="scale"
        )
    return scale


def _quantize(value: Decimal, scale: int) -> Decimal:
    return value.quantize(Decimal(1).scaleb(-scale), rounding=ROUND_HALF_UP)


def _working_precision(scale: int, terms: LoanTerms, periods: list[AccrualPeriod]) -> int:
    # integer digits of principal x rate x days bound every quantized amount;
    # the guard digits keep (1 + r) ** n - 1 accurate for tiny rates
    magnitudes = (
        terms.principal,
        terms.annual_rate_percent,
        Decimal(max(period.days for period in periods)),
    )
    integer_digits = sum(max(value.adjusted() + 1, 1) for value in magnitudes)
    return scale + integer_digits + _GUARD_DIGITS


def _calculation_context(
    scale: int, terms: LoanTerms, periods: list[AccrualPeriod]
) -> Context:
    return Context(
        prec=_working_precision(scale, terms, periods),
        rounding=ROUND_HALF_UP,
        Emax=MAX_EMAX,
        Emin=MIN_EMIN,
    )


@dataclass(frozen=True, slots=True)
class PeriodicRate:
    """Nominal annual rate normalized to the accrual cadence."""

    convention: RateConvention
    # per month for MONTHLY, per day for ACTUAL_365
    rate: Decimal
    scale: int

    def interest(self, balance: Decimal, days: int) -> Decimal:
        if self.convention is RateConvention.ACTUAL_365:
            return _quantize(balance * self.rate * days, self.scale)
        return _quantize(balance * self.rate, self.scale)

    def per_period(self, periods: list[AccrualPeriod]) -> Decimal:
        """
        Rate of one average period, as used by the annuity formula.

        Under ACTUAL_365 the clipped final period is left out of the average,
        so a short stub does not dilute the rate of the full periods.
        """
        if self.convention is RateConvention.ACTUAL_365:
            full_periods = periods[:-1] or periods
            total_days = sum(period.days for period in full_periods)
            return _quantize(self.rate * total_days / len(full_periods), self.scale)
        return self.rate


def periodic_rate(
    annual_rate_percent: Decimal, convention: RateConvention, scale: int
) -> PeriodicRate:
    if convention is RateConvention.ACTUAL_365:
        divisor = _PERCENT * _DAYS_PER_YEAR
    else:
        divisor = _PERCENT * _MONTHS_PER_YEAR
    return PeriodicRate(
        convention=convention,
        rate=_quantize(annual_rate_percent / divisor, scale),
        scale=scale,
    )


def annuity_payment(principal: Decimal, rate: Decimal, periods: int, scale: int) -> Decimal:
    """
    Constant payment that amortizes ``principal`` over ``periods``:

        payment = P * r(1+r)^n / ((1+r)^n - 1)

    A zero rate is handled as its own branch: payment = P / n.
    """
    if rate == 0:
        return _quantize(principal / periods, scale)
    growth = (_ONE + rate) ** periods
    return _quantize(principal * rate * growth / (growth - _ONE), scale)


def differentiated_schedule(
    terms: LoanTerms,
    *,
    convention: RateConvention = RateConvention.MONTHLY,
    scale: int = DEFAULT_SCALE,
) -> PaymentSchedule:
    """Equal-principal schedule: principal / n each period, last one takes the rest."""
    check_scale(scale)
    periods = accrual_periods(terms, convention)
    with localcontext(_calculation_context(scale, terms, periods)):
        rate = periodic_rate(terms.annual_rate_percent, convention, scale)
        last = len(periods) - 1
        principal_share = _quantize(terms.principal / len(periods), scale)

        payments: list[Payment] = []
        balance = terms.principal
        for index, period in enumerate(periods):
            if index == last:
                interest = _quantize(_ZERO, scale)
                principal = balance
            else:
                interest = rate.interest(balance, period.days)
                principal = principal_share
            balance = balance - principal
            payments.append(
                Payment(
                    days_of_borrowing=period.days,
                    payment_date=period.end,
                    total_payment=principal + interest,
                    interest=interest,
                    principal=principal,
                    remaining_balance=balance,
                )
            )

    return PaymentSchedule(
        method=AmortizationMethod.DIFFERENTIATED,
        convention=convention,
        payments=tuple(payments),
    )


def annuity_schedule(
    terms: LoanTerms,
    *,
    convention: RateConvention = RateConvention.MONTHLY,
    scale: int = DEFAULT_SCALE,
) -> PaymentSchedule:
    """Equal-total schedule: constant payment, last period settles the balance."""
    check_scale(scale)
    periods = accrual_periods(terms, convention)
    with localcontext(_calculation_context(scale, terms, periods)):
        rate = periodic_rate(terms.annual_rate_percent, convention, scale)
        last = len(periods) - 1
        payment = annuity_payment(
            terms.principal, rate.per_period(periods), len(periods), scale
        )

        payments: list[Payment] = []
        balance = terms.principal
        for index, period in enumerate(periods):
            interest = rate.interest(balance, period.days)
            if index == last:
                principal = balance
            else:
                # Unequal day-count periods can push the split outside [0, balance]
                principal = min(max(payment - interest, _ZERO), balance)
            balance = balance - principal
            payments.append(
                Payment(
                    days_of_borrowing=period.days,
                    payment_date=period.end,
                    total_payment=principal + interest,
                    interest=interest,
                    principal=principal,
                    remaining_balance=balance,
                )
            )

    return PaymentSchedule(
        method=AmortizationMethod.ANNUITY,
        convention=convention,
        payments=tuple(payments),
    )


Calculator = Callable[..., PaymentSchedule]

SCHEDULE_CALCULATORS: Mapping[AmortizationMethod, Calculator] = MappingProxyType(
    {
        AmortizationMethod.DIFFERENTIATED: differentiated_schedule,
        AmortizationMethod.ANNUITY: annuity_schedule,
    }
)


def parse_method(value: AmortizationMethod | str) -> AmortizationMethod:
    try:
        return AmortizationMethod(value)
    except ValueError:
        allowed = sorted(method.value for method in AmortizationMethod)
        raise UnknownAmortizationMethod(
            f"method must be one of {allowed}, got {value!r}", field="method"
        ) from None


def parse_convention(value: RateConvention | str) -> RateConvention:
    try:
        return RateConvention(value)
    except ValueError:
        allowed = sorted(convention.value for convention in RateConvention)
        raise InvalidCalculationSettings(
            f"convention must be one of {allowed}, got {value!r}", field="convention"
        ) from None


def get_calculator(method: AmortizationMethod | str) -> Calculator:
    return SCHEDULE_CALCULATORS[parse_method(method)]


def available_methods() -> list[AmortizationMethod]:
    return list(SCHEDULE_CALCULATORS)

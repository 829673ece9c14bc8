from __future__ import annotations

import logging
from dataclasses import dataclass, field

from loan_schedule.domain.amortization import (
    check_scale,
    get_calculator,
    parse_convention,
    parse_method,
)
from loan_schedule.domain.errors import InternalError
from loan_schedule.domain.loan import (
    AmortizationMethod,
    LoanTerms,
    PaymentSchedule,
    RateConvention,
)
from loan_schedule.infra.config import calculation_scale, default_rate_convention

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ScheduleRequest:
    """Terms plus the amortization method to apply to them."""

    terms: LoanTerms
    method: AmortizationMethod | str
    convention: RateConvention | str | None = None  # None -> use case default


@dataclass(frozen=True, slots=True)
class CalculatePaymentSchedule:
    """
    Calculate a repayment schedule using exact decimal arithmetic.

    Settings:
    - scale: internal fractional digits for every division (>= 10)
    - convention: default rate convention when the request names none

    Both default to the environment configuration (see infra.config) and are
    passed explicitly into the calculator, which keeps no state of its own.
    """

    scale: int = field(default_factory=calculation_scale)
    convention: RateConvention = field(default_factory=default_rate_convention)

    def execute(self, req: ScheduleRequest) -> PaymentSchedule:
        """
        Execute the calculation.

        Args:
            req: Loan terms (already validated on construction) and method

        Returns:
            PaymentSchedule whose last remaining_balance is exactly zero

        Raises:
            UnknownAmortizationMethod: If the method is not registered
            InvalidCalculationSettings: If scale or convention is unusable
        """
        method = parse_method(req.method)
        convention = parse_convention(req.convention or self.convention)
        check_scale(self.scale)

        calculator = get_calculator(method)
        schedule = calculator(req.terms, convention=convention, scale=self.scale)

        _check_schedule(schedule)

        logger.info(
            "Payment schedule calculated",
            extra={
                "method": method.value,
                "convention": convention.value,
                "periods": len(schedule),
                "principal": str(req.terms.principal),
                "term_months": req.terms.term_months,
            },
        )

        return schedule


def _check_schedule(schedule: PaymentSchedule) -> None:
    if not schedule.payments:
        raise InternalError("Schedule has no payments", method=schedule.method.value)

    previous = None
    for number, payment in enumerate(schedule.payments, start=1):
        if payment.remaining_balance < 0 or (
            previous is not None and payment.remaining_balance > previous
        ):
            raise InternalError(
                "Remaining balance must be non-increasing and non-negative",
                method=schedule.method.value,
                payment_number=number,
            )
        previous = payment.remaining_balance

    if schedule.payments[-1].remaining_balance != 0:
        raise InternalError(
            "Schedule does not end at zero balance", method=schedule.method.value
        )

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from loan_schedule.adapters.record_loan_terms_source import RecordLoanTermsSource
from loan_schedule.domain.amortization import available_methods
from loan_schedule.domain.errors import ValidationError
from loan_schedule.domain.interest_period import DayOfMonthRange, FixedLength, InterestPeriod
from loan_schedule.domain.loan import LoanTerms, Payment, PaymentSchedule
from loan_schedule.entrypoints.http.dtos.schedule import (
    DayOfMonthRangeDTO,
    FixedLengthDTO,
    MethodDTO,
    MethodsResponseDTO,
    PaymentRowDTO,
    RecordScheduleRequestDTO,
    ScheduleRequestDTO,
    ScheduleResponseDTO,
)
from loan_schedule.use_cases.calculate_payment_schedule import ScheduleRequest

CENTS = Decimal("0.01")


def _money(value: Decimal) -> str:
    return str(value.quantize(CENTS, rounding=ROUND_HALF_UP))


class ScheduleMapper:
    """Maps between REST DTOs and domain models for schedules."""

    @staticmethod
    def to_domain_request(dto: ScheduleRequestDTO) -> ScheduleRequest:
        """
        Converts request DTO to a domain ScheduleRequest.

        Handles string → Decimal conversion at the boundary. LoanTerms and the
        interest period validate themselves on construction.

        Args:
            dto: Request DTO with string monetary values

        Returns:
            ScheduleRequest with validated LoanTerms

        Raises:
            ValidationError: If values cannot be converted or violate invariants
        """
        errors = []

        try:
            principal = Decimal(dto.principal)
        except (InvalidOperation, ValueError):
            errors.append(
                {
                    "field": "principal",
                    "message": f"Must be a valid decimal: {dto.principal}",
                    "code": "INVALID_DECIMAL",
                }
            )
            principal = Decimal("0")  # Placeholder to continue validation

        try:
            annual_rate = Decimal(dto.annual_rate_percent)
        except (InvalidOperation, ValueError):
            errors.append(
                {
                    "field": "annual_rate_percent",
                    "message": f"Must be a valid decimal: {dto.annual_rate_percent}",
                    "code": "INVALID_DECIMAL",
                }
            )
            annual_rate = Decimal("0")  # Placeholder to continue validation

        if errors:
            raise ValidationError(errors=errors)

        terms = LoanTerms(
            principal=principal,
            term_months=dto.term_months,
            annual_rate_percent=annual_rate,
            interest_period=ScheduleMapper.to_domain_period(dto.interest_period),
            start_date=dto.start_date,
        )
        return ScheduleRequest(terms=terms, method=dto.method, convention=dto.convention)

    @staticmethod
    def to_domain_period(dto: DayOfMonthRangeDTO | FixedLengthDTO) -> InterestPeriod:
        if isinstance(dto, DayOfMonthRangeDTO):
            return DayOfMonthRange(start_day=dto.start_day, end_day=dto.end_day)
        return FixedLength(days=dto.days, offset_days=dto.offset_days)

    @staticmethod
    def record_to_domain_request(dto: RecordScheduleRequestDTO) -> ScheduleRequest:
        """Loads terms from a header -> value record via RecordLoanTermsSource."""
        terms = RecordLoanTermsSource(dto.record).load()
        return ScheduleRequest(terms=terms, method=dto.method, convention=dto.convention)

    @staticmethod
    def to_payment_row(number: int, payment: Payment) -> PaymentRowDTO:
        return PaymentRowDTO(
            number=number,
            days_of_borrowing=payment.days_of_borrowing,
            payment_date=payment.payment_date,
            total_payment=_money(payment.total_payment),
            interest=_money(payment.interest),
            principal=_money(payment.principal),
            remaining_balance=_money(payment.remaining_balance),
        )

    @staticmethod
    def to_response(schedule: PaymentSchedule, terms: LoanTerms) -> ScheduleResponseDTO:
        """
        Converts a domain PaymentSchedule to response DTO.

        Rounds every monetary value to cents (presentation precision) and
        renders it as a string.
        """
        return ScheduleResponseDTO(
            method=schedule.method.value,
            method_display_name=schedule.method.display_name,
            convention=schedule.convention.value,
            interest_period=terms.interest_period.describe(),
            payments=[
                ScheduleMapper.to_payment_row(number, payment)
                for number, payment in enumerate(schedule, start=1)
            ],
            total_paid=_money(schedule.total_paid),
            total_interest=_money(schedule.total_interest),
        )

    @staticmethod
    def to_methods_response() -> MethodsResponseDTO:
        return MethodsResponseDTO(
            methods=[
                MethodDTO(value=method.value, display_name=method.display_name)
                for method in available_methods()
            ]
        )

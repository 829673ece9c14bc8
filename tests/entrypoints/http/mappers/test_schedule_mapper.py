"""
Test suite for ScheduleMapper.

The mapper translates between REST DTOs and domain models:
- Converts request DTO to domain ScheduleRequest (str → Decimal, DTO period → strategy)
- Converts domain PaymentSchedule to response DTO (Decimal → str, rounded to cents)
- No business logic, just translation
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from loan_schedule.domain.errors import ValidationError
from loan_schedule.domain.interest_period import DayOfMonthRange, FixedLength
from loan_schedule.domain.loan import (
    AmortizationMethod,
    InvalidLoanTerms,
    LoanTerms,
    Payment,
    PaymentSchedule,
    RateConvention,
)
from loan_schedule.entrypoints.http.dtos.schedule import (
    DayOfMonthRangeDTO,
    FixedLengthDTO,
    RecordScheduleRequestDTO,
    ScheduleRequestDTO,
    ScheduleResponseDTO,
)
from loan_schedule.entrypoints.http.mappers.schedule_mapper import ScheduleMapper
from loan_schedule.use_cases.calculate_payment_schedule import ScheduleRequest


def make_dto(**overrides) -> ScheduleRequestDTO:
    values = {
        "principal": "1000000.00",
        "term_months": 12,
        "annual_rate_percent": "12",
        "start_date": date(2024, 1, 26),
        "interest_period": {"kind": "day_of_month_range", "start_day": 26, "end_day": 25},
        "method": "annuity",
    }
    values.update(overrides)
    return ScheduleRequestDTO.model_validate(values)


# ==============================================================================
# to_domain_request() - DTO → Domain Request
# ==============================================================================


def test_to_domain_request_with_valid_input() -> None:
    """Mapper converts all fields from DTO to domain request."""
    result = ScheduleMapper.to_domain_request(make_dto())

    assert isinstance(result, ScheduleRequest)
    assert result.terms.principal == Decimal("1000000.00")
    assert isinstance(result.terms.annual_rate_percent, Decimal)
    assert result.terms.term_months == 12
    assert result.terms.start_date == date(2024, 1, 26)
    assert result.terms.interest_period == DayOfMonthRange(26, 25)
    assert result.method == "annuity"
    assert result.convention is None


def test_to_domain_request_maps_fixed_length_period() -> None:
    dto = make_dto(
        interest_period={"kind": "fixed_length", "days": 30, "offset_days": 2},
        convention="actual_365",
    )

    result = ScheduleMapper.to_domain_request(dto)

    assert result.terms.interest_period == FixedLength(days=30, offset_days=2)
    assert result.convention == "actual_365"


def test_to_domain_request_rejects_unparsable_decimals() -> None:
    """DTOs built without validation still cannot leak bad decimals into the domain."""
    dto = ScheduleRequestDTO.model_construct(
        principal="1.000.000",
        term_months=12,
        annual_rate_percent="twelve",
        start_date=date(2024, 1, 26),
        interest_period=DayOfMonthRangeDTO(kind="day_of_month_range", start_day=26, end_day=25),
        method="annuity",
        convention=None,
    )

    with pytest.raises(ValidationError) as exc_info:
        ScheduleMapper.to_domain_request(dto)

    assert exc_info.value.fields == ["principal", "annual_rate_percent"]
    assert {error["code"] for error in exc_info.value.errors} == {"INVALID_DECIMAL"}


def test_to_domain_request_surfaces_domain_invariants() -> None:
    with pytest.raises(InvalidLoanTerms) as exc_info:
        ScheduleMapper.to_domain_request(make_dto(principal="0"))

    assert exc_info.value.fields == ["principal"]


def test_to_domain_period_for_each_kind() -> None:
    assert ScheduleMapper.to_domain_period(
        DayOfMonthRangeDTO(kind="day_of_month_range", start_day=1, end_day=31)
    ) == DayOfMonthRange(1, 31)
    assert ScheduleMapper.to_domain_period(
        FixedLengthDTO(kind="fixed_length", days=14)
    ) == FixedLength(14)


def test_record_to_domain_request() -> None:
    dto = RecordScheduleRequestDTO(
        record={
            "Loan amount": "9200000.00",
            "Term, months": 276,
            "Interest rate": "7.45",
            "Payment day": 25,
            "Start date": "22.09.2022",
        },
        method="differentiated",
    )

    result = ScheduleMapper.record_to_domain_request(dto)

    assert result.terms.principal == Decimal("9200000.00")
    assert result.terms.interest_period == DayOfMonthRange(26, 25)
    assert result.method == "differentiated"


# ==============================================================================
# to_response() - Domain → Response DTO
# ==============================================================================


@pytest.fixture
def terms() -> LoanTerms:
    return LoanTerms(
        principal=Decimal("100"),
        term_months=2,
        annual_rate_percent=Decimal("12"),
        interest_period=DayOfMonthRange(26, 25),
        start_date=date(2024, 1, 26),
    )


@pytest.fixture
def schedule() -> PaymentSchedule:
    return PaymentSchedule(
        method=AmortizationMethod.DIFFERENTIATED,
        convention=RateConvention.MONTHLY,
        payments=(
            Payment(
                days_of_borrowing=30,
                payment_date=date(2024, 2, 25),
                total_payment=Decimal("51.0000000000"),
                interest=Decimal("1.0000000000"),
                principal=Decimal("50.0000000000"),
                remaining_balance=Decimal("50.0000000000"),
            ),
            Payment(
                days_of_borrowing=29,
                payment_date=date(2024, 3, 25),
                total_payment=Decimal("50.0049999999"),
                interest=Decimal("0.0050000000"),
                principal=Decimal("49.9999999999"),
                remaining_balance=Decimal("0.0000000001"),
            ),
        ),
    )


def test_to_response_converts_all_fields(schedule: PaymentSchedule, terms: LoanTerms) -> None:
    result = ScheduleMapper.to_response(schedule, terms)

    assert isinstance(result, ScheduleResponseDTO)
    assert result.method == "differentiated"
    assert result.method_display_name == "Differentiated"
    assert result.convention == "monthly"
    assert result.interest_period == "26th to 25th"
    assert [row.number for row in result.payments] == [1, 2]
    assert result.payments[0].payment_date == date(2024, 2, 25)
    assert result.payments[0].days_of_borrowing == 30


def test_to_response_rounds_money_to_cents_half_up(
    schedule: PaymentSchedule, terms: LoanTerms
) -> None:
    """Presentation rounding only: 0.005 → 0.01, 49.9999999999 → 50.00."""
    result = ScheduleMapper.to_response(schedule, terms)

    row = result.payments[1]
    assert row.interest == "0.01"
    assert row.principal == "50.00"
    assert row.total_payment == "50.00"
    assert row.remaining_balance == "0.00"
    assert result.payments[0].total_payment == "51.00"
    assert result.total_paid == "101.00"
    assert result.total_interest == "1.01"


def test_to_methods_response() -> None:
    result = ScheduleMapper.to_methods_response()

    assert [(m.value, m.display_name) for m in result.methods] == [
        ("differentiated", "Differentiated"),
        ("annuity", "Annuity"),
    ]

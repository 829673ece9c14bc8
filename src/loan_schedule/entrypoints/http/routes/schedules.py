from fastapi import APIRouter, Depends

from loan_schedule.entrypoints.http.dependencies import get_calculate_payment_schedule_use_case
from loan_schedule.entrypoints.http.dtos.schedule import (
    MethodsResponseDTO,
    RecordScheduleRequestDTO,
    ScheduleRequestDTO,
    ScheduleResponseDTO,
)
from loan_schedule.entrypoints.http.error_responses import ErrorResponse
from loan_schedule.entrypoints.http.mappers.schedule_mapper import ScheduleMapper
from loan_schedule.use_cases.calculate_payment_schedule import CalculatePaymentSchedule


router = APIRouter(tags=["Schedules"])

ERROR_RESPONSES = {
    422: {"model": ErrorResponse, "description": "Validation error"},
    500: {"model": ErrorResponse, "description": "Internal error"},
}


@router.get(
    "/schedules/methods",
    response_model=MethodsResponseDTO,
    summary="List amortization methods",
)
def list_methods() -> MethodsResponseDTO:
    return ScheduleMapper.to_methods_response()


@router.post(
    "/schedules",
    response_model=ScheduleResponseDTO,
    summary="Calculate repayment schedule",
    description="""
    Calculate a loan repayment schedule.

    ## Monetary Values
    - principal and annual_rate_percent are decimal strings (e.g., "1000000.00", "7.45")
    - Response amounts are strings rounded to cents

    ## Methods
    - differentiated: equal principal share each period, declining payments
    - annuity: equal total payment each period, the last one settles the balance

    ## Rate Conventions
    - monthly: annual rate / 12 per period
    - actual_365: annual rate / 365 per elapsed day; the term end clips the last period

    ## Example
    ```
    POST /v1/schedules
    {
        "principal": "1000000.00",
        "term_months": 12,
        "annual_rate_percent": "12",
        "start_date": "2024-01-26",
        "interest_period": {"kind": "day_of_month_range", "start_day": 26, "end_day": 25},
        "method": "annuity"
    }
    ```
    """,
    responses=ERROR_RESPONSES,
)
def calculate_schedule(
    payload: ScheduleRequestDTO,
    use_case: CalculatePaymentSchedule = Depends(get_calculate_payment_schedule_use_case),
) -> ScheduleResponseDTO:
    """Calculate schedule endpoint following parse → execute → map → return pattern."""
    # 1. Map to domain request (string → Decimal, validated LoanTerms)
    request = ScheduleMapper.to_domain_request(payload)

    # 2. Execute use case
    schedule = use_case.execute(request)

    # 3. Map to response (Decimal → string, rounded to cents)
    return ScheduleMapper.to_response(schedule, request.terms)


@router.post(
    "/schedules/from-record",
    response_model=ScheduleResponseDTO,
    summary="Calculate repayment schedule from a terms record",
    description="""
    Same calculation, with terms given as a header -> value record such as a
    spreadsheet row. Column titles are matched case-insensitively against known
    aliases; the interest period is either a fixed length in days
    ("Interest period, days") or a payment day of month ("Payment day").
    """,
    responses=ERROR_RESPONSES,
)
def calculate_schedule_from_record(
    payload: RecordScheduleRequestDTO,
    use_case: CalculatePaymentSchedule = Depends(get_calculate_payment_schedule_use_case),
) -> ScheduleResponseDTO:
    request = ScheduleMapper.record_to_domain_request(payload)
    schedule = use_case.execute(request)
    return ScheduleMapper.to_response(schedule, request.terms)

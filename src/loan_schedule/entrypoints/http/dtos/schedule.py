from datetime import date
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

DECIMAL_PATTERN = r"^\d+(\.\d+)?$"


class DayOfMonthRangeDTO(BaseModel):
    """Calendar interest period, e.g. from the 26th to the 25th."""

    kind: Literal["day_of_month_range"]
    start_day: int = Field(description="First day of the period", examples=[26], ge=1, le=31)
    end_day: int = Field(
        description="Accrual (payment) day; clamped to short months",
        examples=[25],
        ge=1,
        le=31,
    )


class FixedLengthDTO(BaseModel):
    """Interest period of a fixed number of days."""

    kind: Literal["fixed_length"]
    days: int = Field(description="Period length in days", examples=[30], ge=1)
    offset_days: int = Field(default=0, description="Alignment offset in days", examples=[0])


InterestPeriodDTO = Annotated[
    Union[DayOfMonthRangeDTO, FixedLengthDTO], Field(discriminator="kind")
]


class ScheduleRequestDTO(BaseModel):
    """Request payload for calculating a repayment schedule."""

    principal: str = Field(
        description="Loan amount as decimal string",
        examples=["1000000.00"],
        pattern=DECIMAL_PATTERN,
    )
    term_months: int = Field(description="Loan term in months", examples=[12], ge=1)
    annual_rate_percent: str = Field(
        description="Nominal annual rate in percent as decimal string ('7.45' = 7.45%)",
        examples=["12"],
        pattern=DECIMAL_PATTERN,
    )
    start_date: date = Field(description="Loan issue date", examples=["2024-01-26"])
    interest_period: InterestPeriodDTO
    method: Literal["differentiated", "annuity"] = Field(
        description="Amortization method", examples=["annuity"]
    )
    convention: Literal["monthly", "actual_365"] | None = Field(
        default=None,
        description="Rate convention; server default when omitted",
        examples=["monthly"],
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "principal": "1000000.00",
                "term_months": 12,
                "annual_rate_percent": "12",
                "start_date": "2024-01-26",
                "interest_period": {"kind": "day_of_month_range", "start_day": 26, "end_day": 25},
                "method": "annuity",
                "convention": "monthly",
            }
        }
    )


class RecordScheduleRequestDTO(BaseModel):
    """Loan terms given as a header -> value record (e.g. a spreadsheet row)."""

    record: dict[str, Any] = Field(
        description="Column titles mapped to raw values",
        examples=[
            {
                "Loan amount": "9200000.00",
                "Term, months": 276,
                "Interest rate": "7.45",
                "Payment day": 25,
                "Start date": "22.09.2022",
            }
        ],
    )
    method: Literal["differentiated", "annuity"]
    convention: Literal["monthly", "actual_365"] | None = None


class PaymentRowDTO(BaseModel):
    number: int
    days_of_borrowing: int
    payment_date: date
    total_payment: str
    interest: str
    principal: str
    remaining_balance: str


class ScheduleResponseDTO(BaseModel):
    """Calculated schedule, monetary values rounded to cents."""

    method: str = Field(examples=["annuity"])
    method_display_name: str = Field(examples=["Annuity"])
    convention: str = Field(examples=["monthly"])
    interest_period: str = Field(examples=["26th to 25th"])
    payments: list[PaymentRowDTO]
    total_paid: str = Field(examples=["1066185.46"])
    total_interest: str = Field(examples=["66185.46"])


class MethodDTO(BaseModel):
    value: str
    display_name: str


class MethodsResponseDTO(BaseModel):
    methods: list[MethodDTO]

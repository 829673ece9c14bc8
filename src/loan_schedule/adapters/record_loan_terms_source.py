"""Loan terms from a header -> value record.

A record is what a spreadsheet row or a flat form yields: column titles
mapped to raw cell values. Column titles are matched case-insensitively
against alias lists, and the interest period may be given either as a
fixed length in days or as a payment day of month.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping

from loan_schedule.domain.errors import ValidationError
from loan_schedule.domain.interest_period import DayOfMonthRange, FixedLength, InterestPeriod
from loan_schedule.domain.loan import LoanTerms
from loan_schedule.ports.loan_terms_source import LoanTermsSource

PRINCIPAL_KEYS = ("principal", "loan amount", "amount")
TERM_MONTHS_KEYS = ("term months", "term, months", "term")
ANNUAL_RATE_KEYS = ("annual rate", "interest rate", "rate")
START_DATE_KEYS = ("start date", "issue date", "disbursement date")
PERIOD_DAYS_KEYS = ("interest period, days", "period days", "period")
PERIOD_OFFSET_KEYS = ("period offset, days", "offset days")
PAYMENT_DAY_KEYS = ("payment day", "payment day of month")
PERIOD_START_DAY_KEYS = ("period start day",)

DATE_FORMATS = ("%Y-%m-%d", "%d.%m.%Y")


def _normalize_header(header: Any) -> str:
    return " ".join(str(header).split()).lower()


class RecordLoanTermsSource(LoanTermsSource):
    """
    Maps a header -> value record onto LoanTerms.

    - Collects every missing column before failing
    - Collects every unparsable value before failing
    - A fixed-length period column wins over a payment-day column
    """

    def __init__(self, record: Mapping[Any, Any]) -> None:
        self._values = {
            _normalize_header(header): value
            for header, value in record.items()
            if header is not None
        }

    def load(self) -> LoanTerms:
        self._check_required_columns()

        errors: list[dict[str, str]] = []
        principal = self._decimal("principal", PRINCIPAL_KEYS, errors)
        term_months = self._integer("term_months", TERM_MONTHS_KEYS, errors)
        annual_rate = self._decimal("annual_rate_percent", ANNUAL_RATE_KEYS, errors)
        start_date = self._date("start_date", START_DATE_KEYS, errors)
        interest_period = self._interest_period(errors)

        if errors:
            raise ValidationError(errors=errors)

        return LoanTerms(
            principal=principal,
            term_months=term_months,
            annual_rate_percent=annual_rate,
            interest_period=interest_period,
            start_date=start_date,
        )

    def _check_required_columns(self) -> None:
        required = {
            "principal": PRINCIPAL_KEYS,
            "term_months": TERM_MONTHS_KEYS,
            "annual_rate_percent": ANNUAL_RATE_KEYS,
            "start_date": START_DATE_KEYS,
        }
        missing = [
            {
                "field": field,
                "message": f"Missing column, expected one of {list(keys)}",
                "code": "MISSING_COLUMN",
            }
            for field, keys in required.items()
            if self._find(keys) is None
        ]
        if self._find(PERIOD_DAYS_KEYS) is None and self._find(PAYMENT_DAY_KEYS) is None:
            missing.append(
                {
                    "field": "interest_period",
                    "message": (
                        f"Missing column, expected one of "
                        f"{list(PERIOD_DAYS_KEYS + PAYMENT_DAY_KEYS)}"
                    ),
                    "code": "MISSING_COLUMN",
                }
            )
        if missing:
            raise ValidationError(message="Required columns not found", errors=missing)

    def _find(self, keys: tuple[str, ...]) -> str | None:
        for key in keys:
            if key in self._values:
                return key
        return None

    def _raw(self, keys: tuple[str, ...]) -> Any:
        key = self._find(keys)
        return None if key is None else self._values[key]

    def _decimal(
        self, field: str, keys: tuple[str, ...], errors: list[dict[str, str]]
    ) -> Decimal:
        raw = self._raw(keys)
        if isinstance(raw, Decimal):
            return raw
        try:
            # str() first so floats from spreadsheet cells keep their printed digits
            return Decimal(str(raw).strip().replace(" ", "").replace(",", "."))
        except (InvalidOperation, ValueError):
            errors.append(
                {
                    "field": field,
                    "message": f"Must be a valid decimal: {raw}",
                    "code": "INVALID_DECIMAL",
                }
            )
            return Decimal("0")  # Placeholder to continue validation

    def _integer(
        self, field: str, keys: tuple[str, ...], errors: list[dict[str, str]]
    ) -> int:
        raw = self._raw(keys)
        if isinstance(raw, int) and not isinstance(raw, bool):
            return raw
        try:
            value = Decimal(str(raw).strip())
            if value != value.to_integral_value():
                raise ValueError(raw)
            return int(value)
        except (InvalidOperation, ValueError, OverflowError):
            errors.append(
                {
                    "field": field,
                    "message": f"Must be a valid integer: {raw}",
                    "code": "INVALID_INTEGER",
                }
            )
            return 0  # Placeholder to continue validation

    def _date(
        self, field: str, keys: tuple[str, ...], errors: list[dict[str, str]]
    ) -> date:
        raw = self._raw(keys)
        if isinstance(raw, datetime):
            return raw.date()
        if isinstance(raw, date):
            return raw
        text = str(raw).strip()
        for fmt in DATE_FORMATS:
            try:
                return datetime.strptime(text, fmt).date()
            except ValueError:
                continue
        errors.append(
            {
                "field": field,
                "message": f"Must be a date (YYYY-MM-DD or DD.MM.YYYY): {raw}",
                "code": "INVALID_DATE",
            }
        )
        return date.min  # Placeholder to continue validation

    def _interest_period(self, errors: list[dict[str, str]]) -> InterestPeriod | None:
        if self._find(PERIOD_DAYS_KEYS) is not None:
            days = self._integer("interest_period.days", PERIOD_DAYS_KEYS, errors)
            offset = 0
            if self._find(PERIOD_OFFSET_KEYS) is not None:
                offset = self._integer(
                    "interest_period.offset_days", PERIOD_OFFSET_KEYS, errors
                )
            if errors:
                return None
            return FixedLength(days=days, offset_days=offset)

        payment_day = self._integer("interest_period.end_day", PAYMENT_DAY_KEYS, errors)
        start_day = None
        if self._find(PERIOD_START_DAY_KEYS) is not None:
            start_day = self._integer(
                "interest_period.start_day", PERIOD_START_DAY_KEYS, errors
            )
        if errors:
            return None
        if start_day is None:
            return DayOfMonthRange.ending_on(payment_day)
        return DayOfMonthRange(start_day=start_day, end_day=payment_day)

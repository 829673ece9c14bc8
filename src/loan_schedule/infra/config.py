from __future__ import annotations

import os

from loan_schedule.domain.amortization import (
    DEFAULT_SCALE,
    InvalidCalculationSettings,
    check_scale,
    parse_convention,
)
from loan_schedule.domain.loan import RateConvention

SCALE_ENV = "LOAN_SCHEDULE_SCALE"
RATE_CONVENTION_ENV = "LOAN_SCHEDULE_RATE_CONVENTION"


def calculation_scale() -> int:
    """Internal decimal scale, from LOAN_SCHEDULE_SCALE (default 10, minimum 10)."""
    raw = os.getenv(SCALE_ENV)

    if not raw:
        return DEFAULT_SCALE

    try:
        scale = int(raw)
    except ValueError:
        raise InvalidCalculationSettings(
            f"{SCALE_ENV} must be an integer, got {raw!r}", field="scale"
        ) from None

    return check_scale(scale)


def default_rate_convention() -> RateConvention:
    raw = os.getenv(RATE_CONVENTION_ENV)

    if not raw:
        return RateConvention.MONTHLY

    return parse_convention(raw.strip().lower())

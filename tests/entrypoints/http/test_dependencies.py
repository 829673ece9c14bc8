"""
Unit tests for FastAPI dependency injection functions.

- get_calculate_payment_schedule_use_case() builds the use case from the environment
- No caching: each request gets a fresh instance
"""

from __future__ import annotations

import pytest

from loan_schedule.domain.amortization import InvalidCalculationSettings
from loan_schedule.domain.loan import RateConvention
from loan_schedule.entrypoints.http.dependencies import get_calculate_payment_schedule_use_case
from loan_schedule.infra.config import RATE_CONVENTION_ENV, SCALE_ENV
from loan_schedule.use_cases.calculate_payment_schedule import CalculatePaymentSchedule


def test_factory_returns_use_case(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(SCALE_ENV, raising=False)
    monkeypatch.delenv(RATE_CONVENTION_ENV, raising=False)

    use_case = get_calculate_payment_schedule_use_case()

    assert isinstance(use_case, CalculatePaymentSchedule)
    assert use_case.scale == 10
    assert use_case.convention is RateConvention.MONTHLY


def test_factory_reads_current_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Settings changes are picked up by the next request."""
    monkeypatch.setenv(SCALE_ENV, "16")
    monkeypatch.setenv(RATE_CONVENTION_ENV, "actual_365")

    use_case = get_calculate_payment_schedule_use_case()

    assert use_case.scale == 16
    assert use_case.convention is RateConvention.ACTUAL_365


def test_factory_surfaces_bad_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(SCALE_ENV, "2")

    with pytest.raises(InvalidCalculationSettings):
        get_calculate_payment_schedule_use_case()


def test_factory_creates_fresh_instance_each_call() -> None:
    assert get_calculate_payment_schedule_use_case() is not get_calculate_payment_schedule_use_case()


def test_dependencies_are_not_cached() -> None:
    """Dependencies are not cached with @lru_cache (per-request instances)."""
    assert not hasattr(get_calculate_payment_schedule_use_case, "__wrapped__")

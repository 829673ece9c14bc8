"""
Dependency injection for FastAPI routes.

The schedule use case is stateless; a fresh instance per request picks up
the current environment configuration (scale, default rate convention).
"""

from __future__ import annotations

from loan_schedule.use_cases.calculate_payment_schedule import CalculatePaymentSchedule


def get_calculate_payment_schedule_use_case() -> CalculatePaymentSchedule:
    """
    Factory function that returns a configured CalculatePaymentSchedule use case.

    Returns:
        CalculatePaymentSchedule: Use case configured from the environment

    Raises:
        InvalidCalculationSettings: If the environment holds an unusable setting
    """
    return CalculatePaymentSchedule()

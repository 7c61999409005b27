"""
Core business logic for deadline calculation.
"""

from deadline_calculator.core.calculator import (
    ComputationOverflowError,
    DeadlineCalculator,
    business_days_between,
    calculate_deadline,
)
from deadline_calculator.core.day_classifier import day_of_week_name, is_holiday, is_weekend
from deadline_calculator.core.holiday_provider import HolidayProvider, registry_from_config
from deadline_calculator.core.timeliness import TimelinessFormatter

__all__ = [
    "ComputationOverflowError",
    "DeadlineCalculator",
    "HolidayProvider",
    "TimelinessFormatter",
    "business_days_between",
    "calculate_deadline",
    "day_of_week_name",
    "is_holiday",
    "is_weekend",
    "registry_from_config",
]

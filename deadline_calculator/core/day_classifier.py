"""
Pure predicates classifying a single calendar day.

All checks work on calendar components (year/month/day). Datetimes are
reduced to their date first, so no timezone can shift the classified day.
"""

from datetime import date, datetime
from typing import Optional, Tuple

from deadline_calculator.data.schemas import HolidayRegistry, SimulationReason
from deadline_calculator.i18n import Translator

SATURDAY = 5
SUNDAY = 6


def as_calendar_date(day: date) -> date:
    """Drop any time component from a date or datetime."""
    if isinstance(day, datetime):
        return day.date()
    return day


def is_weekend(day: date) -> bool:
    """True if the day is a Saturday or a Sunday."""
    return as_calendar_date(day).weekday() in (SATURDAY, SUNDAY)


def is_holiday(day: date, holidays: HolidayRegistry) -> Optional[str]:
    """
    Look up a day in the holiday registry.

    Args:
        day: Day to check.
        holidays: Registry snapshot for this computation.

    Returns:
        Name of the first matching exception, or None.
    """
    return holidays.lookup(as_calendar_date(day))


def day_of_week_name(day: date, language: str = "pt") -> str:
    """Localized weekday name, for narration only."""
    return Translator(language).weekday_name(as_calendar_date(day))


def classify_non_business(
    day: date, holidays: HolidayRegistry
) -> Optional[Tuple[SimulationReason, Optional[str]]]:
    """
    Classify a day that cannot end or advance a business-day count.

    The holiday check runs before the weekend check, so a holiday on a
    weekend is narrated as a holiday.

    Args:
        day: Day to classify.
        holidays: Registry snapshot for this computation.

    Returns:
        (HOLIDAY, name) or (WEEKEND, None) for non-business days,
        None for business days.
    """
    holiday_name = is_holiday(day, holidays)
    if holiday_name is not None:
        return SimulationReason.HOLIDAY, holiday_name
    if is_weekend(day):
        return SimulationReason.WEEKEND, None
    return None


def is_business_day(day: date, holidays: HolidayRegistry) -> bool:
    """True if the day is neither a weekend nor a registry holiday."""
    return classify_non_business(day, holidays) is None

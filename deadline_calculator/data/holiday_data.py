"""
Static Brazilian national holidays (2024 only) shipped as an opt-in fallback registry.
"""

from datetime import date
from typing import Tuple

from deadline_calculator.data.schemas import HolidayException, HolidayRegistry

DEFAULT_HOLIDAYS: Tuple[HolidayException, ...] = (
    HolidayException(date=date(2024, 1, 1), name="Confraternização Universal"),
    HolidayException(date=date(2024, 2, 12), name="Carnaval"),
    HolidayException(date=date(2024, 2, 13), name="Carnaval"),
    HolidayException(date=date(2024, 3, 29), name="Paixão de Cristo"),
    HolidayException(date=date(2024, 4, 21), name="Tiradentes"),
    HolidayException(date=date(2024, 5, 1), name="Dia do Trabalho"),
    HolidayException(date=date(2024, 5, 30), name="Corpus Christi"),
    HolidayException(date=date(2024, 9, 7), name="Independência do Brasil"),
    HolidayException(date=date(2024, 10, 12), name="Nossa Senhora Aparecida"),
    HolidayException(date=date(2024, 11, 2), name="Finados"),
    HolidayException(date=date(2024, 11, 15), name="Proclamação da República"),
    HolidayException(date=date(2024, 11, 20), name="Dia da Consciência Negra"),
    HolidayException(date=date(2024, 12, 25), name="Natal"),
    HolidayException(date=date(2025, 1, 1), name="Confraternização Universal"),
)

# Years DEFAULT_HOLIDAYS covers in full
DEFAULT_HOLIDAY_YEARS: Tuple[int, ...] = (2024,)

# Forensic recess window (art. 220 CPC / art. 775-A CLT), inclusive
RECESS_START: Tuple[int, int] = (12, 20)
RECESS_END: Tuple[int, int] = (1, 20)


def default_registry() -> HolidayRegistry:
    """Return the static fallback holidays as a registry."""
    return HolidayRegistry(holidays=DEFAULT_HOLIDAYS)


def is_recess_day(day: date) -> bool:
    """Check whether a date falls inside the 20/12 - 20/01 recess window."""
    month_day = (day.month, day.day)
    return month_day >= RECESS_START or month_day <= RECESS_END

"""
Main deadline calculator logic.
"""

import logging
import math
import re
from datetime import date, datetime, timedelta
from typing import Any, Iterable, List, Optional, Tuple, Union

from deadline_calculator.core.day_classifier import classify_non_business
from deadline_calculator.data.schemas import (
    CountingMode,
    DeadlineRequest,
    DeadlineResult,
    HolidayRegistry,
    SimulationReason,
    SimulationStep,
)
from deadline_calculator.i18n import Translator

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITERATIONS = 10_000
ONE_DAY = timedelta(days=1)

_ISO_DATE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
_DIGITS = re.compile(r"^\d+$", re.ASCII)

HolidaysInput = Union[HolidayRegistry, Iterable, None]


class ComputationOverflowError(RuntimeError):
    """Raised when a computation exceeds its iteration ceiling or date range.

    This points at a malformed holiday registry or an impossible span, not
    at bad user input.
    """

    def __init__(self, message: str, phase: str, limit: int):
        super().__init__(message)
        self.phase = phase
        self.limit = limit


class DeadlineCalculator:
    """Calculates procedural due dates, narrating every day visited."""

    def __init__(
        self,
        language: str = "pt",
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
    ):
        """
        Initialize the deadline calculator.

        Args:
            language: Narration language ('pt' or 'en').
            max_iterations: Maximum number of skipped days per phase before
                the computation is aborted.
        """
        if max_iterations < 1:
            raise ValueError("max_iterations must be at least 1")
        self.translator = Translator(language)
        self.max_iterations = max_iterations

    def calculate(
        self,
        start_date: Any,
        day_count: Any,
        counting_mode: Any = CountingMode.BUSINESS,
        holidays: HolidaysInput = None,
    ) -> DeadlineResult:
        """
        Calculate the final due date of a deadline.

        Invalid input never raises: the result comes back with
        ``valid=False``, no final date, no simulation and a single log
        line explaining the problem.

        Args:
            start_date: Publication/notice date (date or 'YYYY-MM-DD').
            day_count: Non-negative whole number of days.
            counting_mode: CountingMode or its string value.
            holidays: Holiday registry snapshot (or iterable of entries).
                Defaults to no holidays.

        Returns:
            DeadlineResult with final date, log and simulation.

        Raises:
            ComputationOverflowError: If the iteration ceiling is hit.
        """
        t = self.translator
        registry = self._as_registry(holidays)

        start, days, mode, error = self._validate(start_date, day_count, counting_mode)
        if error is not None:
            logger.debug(f"Rejected deadline input: {error}")
            return DeadlineResult(log=[error], valid=False)

        logger.debug(
            f"Calculating deadline: start={start.isoformat()} days={days} "
            f"mode={mode.value} holidays={len(registry)}"
        )

        log: List[str] = [t("calc.log.start", date=t.format_date(start), weekday=t.weekday_name(start))]
        simulation: List[SimulationStep] = [
            SimulationStep(
                date=start,
                label=t("calc.label.start"),
                is_counted=False,
                reason=SimulationReason.START,
            )
        ]

        if days == 0:
            log.append(t("calc.log.zero_days"))
            return self._result(start, days, mode, start, log, simulation)

        if days > (date.max - start).days:
            raise self._overflow("counting", "date_range")

        log.append(
            t("calc.log.start_excluded", date=t.format_date(start), weekday=t.weekday_name(start))
        )
        cursor = self._advance(start, "counting")

        cursor = self._count(cursor, days, mode, registry, log, simulation)
        cursor = self._extend(cursor, registry, log, simulation)

        log.append(t("calc.log.final", date=t.format_date(cursor), weekday=t.weekday_name(cursor)))
        logger.debug(f"Deadline computed: {cursor.isoformat()} after {len(simulation)} steps")
        return self._result(start, days, mode, cursor, log, simulation)

    def calculate_request(self, request: DeadlineRequest) -> DeadlineResult:
        """Calculate a deadline from a validated DeadlineRequest."""
        return self.calculate(
            request.start_date,
            request.day_count,
            request.counting_mode,
            request.holidays,
        )

    def _count(
        self,
        cursor: date,
        days: int,
        mode: CountingMode,
        registry: HolidayRegistry,
        log: List[str],
        simulation: List[SimulationStep],
    ) -> date:
        """
        Walk forward until ``days`` days have been counted.

        The cursor is left on the day that satisfied the last count.
        """
        t = self.translator
        count = 0
        skipped = 0

        while count < days:
            if mode is CountingMode.BUSINESS:
                non_business = classify_non_business(cursor, registry)
                if non_business is not None:
                    skipped += 1
                    if skipped > self.max_iterations:
                        raise self._overflow("counting")
                    self._record_skip(cursor, non_business, log, simulation)
                    cursor = self._advance(cursor, "counting")
                    continue
                reason = SimulationReason.BUSINESS
            else:
                reason = SimulationReason.CALENDAR

            count += 1
            weekday = t.weekday_name(cursor)
            log.append(
                t(
                    f"calc.log.{reason.value}",
                    date=t.format_date(cursor),
                    weekday=weekday,
                    count=count,
                    total=days,
                )
            )
            simulation.append(
                SimulationStep(
                    date=cursor,
                    label=weekday,
                    is_counted=True,
                    count=count,
                    reason=reason,
                )
            )

            if count < days:
                cursor = self._advance(cursor, "counting")

        return cursor

    def _extend(
        self,
        cursor: date,
        registry: HolidayRegistry,
        log: List[str],
        simulation: List[SimulationStep],
    ) -> date:
        """Roll a due date that lands on a non-business day forward."""
        t = self.translator
        extended = 0

        while True:
            non_business = classify_non_business(cursor, registry)
            if non_business is None:
                return cursor

            extended += 1
            if extended > self.max_iterations:
                raise self._overflow("extension")

            reason, holiday_name = non_business
            label = holiday_name if reason is SimulationReason.HOLIDAY else t("calc.label.weekend")
            log.append(
                t(
                    "calc.log.extension",
                    date=t.format_date(cursor),
                    weekday=t.weekday_name(cursor),
                    reason=label,
                )
            )
            simulation.append(
                SimulationStep(date=cursor, label=label, is_counted=False, reason=reason)
            )
            cursor = self._advance(cursor, "extension")

    def _record_skip(
        self,
        day: date,
        non_business: Tuple[SimulationReason, Optional[str]],
        log: List[str],
        simulation: List[SimulationStep],
    ) -> None:
        """Record a holiday or weekend passed over during counting."""
        t = self.translator
        reason, holiday_name = non_business
        formatted = t.format_date(day)
        weekday = t.weekday_name(day)

        if reason is SimulationReason.HOLIDAY:
            log.append(t("calc.log.holiday", date=formatted, weekday=weekday, name=holiday_name))
            label = holiday_name
        else:
            log.append(t("calc.log.weekend", date=formatted, weekday=weekday))
            label = t("calc.label.weekend")

        simulation.append(SimulationStep(date=day, label=label, is_counted=False, reason=reason))

    def _advance(self, day: date, phase: str) -> date:
        """Next calendar day; running past date.max aborts the phase."""
        try:
            return day + ONE_DAY
        except OverflowError:
            raise self._overflow(phase, "date_range") from None

    def _overflow(self, phase: str, kind: str = "overflow") -> ComputationOverflowError:
        """Build (and log) the error for an exceeded iteration ceiling or date range."""
        message = self.translator(
            f"calc.error.{kind}",
            limit=self.max_iterations,
            date=self.translator.format_date(date.max),
            phase=self.translator(f"calc.phase.{phase}"),
        )
        logger.warning(message)
        return ComputationOverflowError(message, phase=phase, limit=self.max_iterations)

    def _validate(
        self, start_date: Any, day_count: Any, counting_mode: Any
    ) -> Tuple[Optional[date], Optional[int], Optional[CountingMode], Optional[str]]:
        """
        Validate raw inputs.

        Returns:
            Tuple of (start, days, mode, error). ``error`` is a prose
            message when any input is invalid, None otherwise.
        """
        t = self.translator

        if _is_blank(start_date) or _is_blank(day_count):
            return None, None, None, t("calc.invalid.missing")

        start, error = self._parse_start_date(start_date)
        if error is not None:
            return None, None, None, error

        days = _parse_day_count(day_count)
        if days is None:
            return None, None, None, t("calc.invalid.day_count", value=day_count)

        if isinstance(counting_mode, str):
            counting_mode = counting_mode.strip().lower()
        try:
            mode = CountingMode(counting_mode)
        except (ValueError, TypeError):
            return None, None, None, t("calc.invalid.counting_mode", value=counting_mode)

        return start, days, mode, None

    def _parse_start_date(self, value: Any) -> Tuple[Optional[date], Optional[str]]:
        """Parse a date or ISO 'YYYY-MM-DD' string."""
        t = self.translator

        if isinstance(value, datetime):
            return value.date(), None
        if isinstance(value, date):
            return value, None
        if not isinstance(value, str):
            return None, t("calc.invalid.date_format", value=value)

        match = _ISO_DATE.match(value.strip())
        if not match:
            return None, t("calc.invalid.date_format", value=value)

        year, month, day = (int(part) for part in match.groups())
        try:
            return date(year, month, day), None
        except ValueError:
            return None, t("calc.invalid.date", value=value)

    def _as_registry(self, holidays: HolidaysInput) -> HolidayRegistry:
        """Accept a registry, an iterable of entries, or None."""
        if holidays is None:
            return HolidayRegistry()
        if isinstance(holidays, HolidayRegistry):
            return holidays
        return HolidayRegistry.from_entries(holidays)

    def _result(
        self,
        start: date,
        days: int,
        mode: CountingMode,
        final_date: date,
        log: List[str],
        simulation: List[SimulationStep],
    ) -> DeadlineResult:
        """Assemble a successful result."""
        return DeadlineResult(
            start_date=start,
            day_count=days,
            counting_mode=mode,
            final_date=final_date,
            log=log,
            simulation=simulation,
            valid=True,
        )


def _is_blank(value: Any) -> bool:
    """True for None or whitespace-only strings."""
    return value is None or (isinstance(value, str) and not value.strip())


def _parse_day_count(value: Any) -> Optional[int]:
    """Return a non-negative int, or None if the value is not one."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value) or not value.is_integer() or value < 0:
            return None
        return int(value)
    if isinstance(value, str) and _DIGITS.match(value.strip()):
        return int(value.strip())
    return None


def calculate_deadline(
    start_date: Any,
    day_count: Any,
    counting_mode: Any = CountingMode.BUSINESS,
    holidays: HolidaysInput = None,
    language: str = "pt",
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> DeadlineResult:
    """Convenience wrapper around DeadlineCalculator.calculate()."""
    calculator = DeadlineCalculator(language=language, max_iterations=max_iterations)
    return calculator.calculate(start_date, day_count, counting_mode, holidays)


def business_days_between(
    start: date, end: date, holidays: Optional[HolidayRegistry] = None
) -> int:
    """
    Count business days in the half-open interval [start, end).

    Args:
        start: First day of the interval.
        end: Day after the last day of the interval.
        holidays: Holiday registry snapshot. Defaults to no holidays.

    Returns:
        Number of days that are neither weekends nor holidays; 0 when
        ``end`` is not after ``start``.
    """
    registry = holidays if holidays is not None else HolidayRegistry()
    count = 0
    current = start
    while current < end:
        if classify_non_business(current, registry) is None:
            count += 1
        current += ONE_DAY
    return count

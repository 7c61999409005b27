"""
Tests for the deadline calculator.
"""

from datetime import date, timedelta

import pytest

from deadline_calculator.core.calculator import (
    ComputationOverflowError,
    DeadlineCalculator,
    business_days_between,
    calculate_deadline,
)
from deadline_calculator.core.day_classifier import is_weekend
from deadline_calculator.core.holiday_provider import HolidayProvider
from deadline_calculator.data.holiday_data import default_registry
from deadline_calculator.data.schemas import (
    CountingMode,
    DeadlineRequest,
    HolidayException,
    HolidayRegistry,
    SimulationReason,
)


@pytest.fixture
def calculator():
    """Create a DeadlineCalculator instance."""
    return DeadlineCalculator(language="pt")


@pytest.fixture
def holidays():
    """Static 2024 national holidays."""
    return default_registry()


@pytest.fixture
def empty():
    """Registry without any holidays."""
    return HolidayRegistry()


def dense_registry(start: date, days: int) -> HolidayRegistry:
    """Registry where every day in a run is a holiday."""
    return HolidayRegistry(
        holidays=tuple(
            HolidayException(date=start + timedelta(days=i), name="Greve")
            for i in range(days)
        )
    )


class TestBusinessDays:
    """Tests for business-day counting."""

    def test_friday_start_five_days(self, calculator, empty):
        """Friday start, 5 business days: weekend skipped, ends next Friday."""
        result = calculator.calculate(date(2024, 3, 1), 5, CountingMode.BUSINESS, empty)

        assert result.valid is True
        assert result.final_date == date(2024, 3, 8)

        reasons = [step.reason for step in result.simulation]
        assert reasons == [
            SimulationReason.START,
            SimulationReason.WEEKEND,
            SimulationReason.WEEKEND,
            SimulationReason.BUSINESS,
            SimulationReason.BUSINESS,
            SimulationReason.BUSINESS,
            SimulationReason.BUSINESS,
            SimulationReason.BUSINESS,
        ]
        # start, exclusion, 2 weekend days, 5 counted days, final
        assert len(result.log) == 10

    def test_holidays_are_skipped(self, calculator, holidays):
        """Proclamação da República and Consciência Negra do not count."""
        result = calculator.calculate(date(2024, 11, 14), 3, CountingMode.BUSINESS, holidays)

        assert result.final_date == date(2024, 11, 21)
        skipped = [
            (step.step_date, step.reason) for step in result.simulation if not step.is_counted
        ]
        assert (date(2024, 11, 15), SimulationReason.HOLIDAY) in skipped
        assert (date(2024, 11, 20), SimulationReason.HOLIDAY) in skipped

    def test_holiday_on_weekend_narrated_as_holiday(self, calculator, holidays):
        """A holiday on a Saturday is tagged as holiday, not weekend."""
        result = calculator.calculate(date(2024, 9, 6), 1, CountingMode.BUSINESS, holidays)

        saturday = result.simulation[1]
        assert saturday.step_date == date(2024, 9, 7)
        assert saturday.reason == SimulationReason.HOLIDAY
        assert saturday.label == "Independência do Brasil"
        assert result.simulation[2].reason == SimulationReason.WEEKEND
        assert result.final_date == date(2024, 9, 9)

    def test_good_friday(self, calculator, holidays):
        """Counting across Paixão de Cristo and the weekend after it."""
        result = calculator.calculate(date(2024, 3, 28), 1, CountingMode.BUSINESS, holidays)
        assert result.final_date == date(2024, 4, 1)

    def test_forensic_recess_as_ordinary_entries(self, calculator):
        """Recess days supplied in the registry suspend the count."""
        recess = HolidayProvider().forensic_recess_registry([2024, 2025])
        result = calculator.calculate(date(2024, 12, 18), 2, CountingMode.BUSINESS, recess)

        assert result.final_date == date(2025, 1, 21)
        counted = [step.step_date for step in result.simulation if step.is_counted]
        assert counted == [date(2024, 12, 19), date(2025, 1, 21)]


class TestCalendarDays:
    """Tests for calendar-day counting."""

    def test_ends_on_holiday_then_weekend(self, calculator, holidays):
        """15 calendar days ending on a Friday holiday roll to Monday."""
        result = calculator.calculate(date(2024, 10, 31), 15, CountingMode.CALENDAR, holidays)

        assert result.final_date == date(2024, 11, 18)
        assert len(result.simulation) == 1 + 15 + 3

        extension = result.simulation[-3:]
        assert [step.step_date for step in extension] == [
            date(2024, 11, 15),
            date(2024, 11, 16),
            date(2024, 11, 17),
        ]
        assert [step.reason for step in extension] == [
            SimulationReason.HOLIDAY,
            SimulationReason.WEEKEND,
            SimulationReason.WEEKEND,
        ]
        assert all(not step.is_counted for step in extension)

    def test_holidays_inside_term_still_count(self, calculator, holidays):
        """Finados (a Saturday) inside the term is counted in calendar mode."""
        result = calculator.calculate(date(2024, 10, 31), 15, CountingMode.CALENDAR, holidays)
        finados = [s for s in result.simulation if s.step_date == date(2024, 11, 2)]
        assert len(finados) == 1
        assert finados[0].is_counted is True
        assert finados[0].reason == SimulationReason.CALENDAR

    def test_landing_day_recorded_again_when_extended(self, calculator, empty):
        """The counted landing day appears again as the first extension step."""
        result = calculator.calculate(date(2024, 3, 1), 1, CountingMode.CALENDAR, empty)

        assert result.final_date == date(2024, 3, 4)
        assert [(s.step_date, s.reason, s.is_counted) for s in result.simulation] == [
            (date(2024, 3, 1), SimulationReason.START, False),
            (date(2024, 3, 2), SimulationReason.CALENDAR, True),
            (date(2024, 3, 2), SimulationReason.WEEKEND, False),
            (date(2024, 3, 3), SimulationReason.WEEKEND, False),
        ]

    def test_long_term_not_limited_by_ceiling(self, empty):
        """The ceiling bounds skipped days, not counted ones."""
        calculator = DeadlineCalculator(max_iterations=3)
        result = calculator.calculate(date(2024, 3, 1), 400, CountingMode.CALENDAR, empty)
        assert result.final_date == date(2025, 4, 7)

    def test_business_never_earlier_than_calendar(self, calculator, empty):
        """Business mode finishes on or after calendar mode."""
        business = calculator.calculate(date(2024, 3, 1), 5, CountingMode.BUSINESS, empty)
        calendar = calculator.calculate(date(2024, 3, 1), 5, CountingMode.CALENDAR, empty)

        assert calendar.final_date == date(2024, 3, 6)
        assert business.final_date >= calendar.final_date


class TestZeroDays:
    """Tests for the zero-day short-circuit."""

    def test_zero_days_returns_start_date(self, calculator, holidays):
        """A 0-day term ends on the start date, even on a holiday."""
        result = calculator.calculate(date(2024, 9, 7), 0, CountingMode.BUSINESS, holidays)

        assert result.final_date == date(2024, 9, 7)
        assert len(result.simulation) == 1
        assert result.simulation[0].reason == SimulationReason.START
        assert len(result.log) == 2
        assert result.log[1] == "Prazo de 0 dias: a data final é igual à data inicial."


class TestInvalidInput:
    """Invalid input is reported, never raised."""

    @pytest.mark.parametrize(
        "start_date,day_count",
        [
            ("2024-03-01", "abc"),
            ("2024-03-01", None),
            (None, 5),
            ("", 5),
            ("01/03/2024", 5),
            ("2024-02-30", 5),
            ("2024-03-01", -1),
            ("2024-03-01", 1.5),
            ("2024-03-01", float("nan")),
            ("2024-03-01", True),
            (20240301, 5),
        ],
    )
    def test_invalid_input(self, calculator, start_date, day_count):
        """Each case yields a single explanatory log line and no result."""
        result = calculator.calculate(start_date, day_count, CountingMode.BUSINESS)

        assert result.valid is False
        assert result.final_date is None
        assert result.simulation == []
        assert len(result.log) == 1
        assert result.log[0].endswith(".")

    def test_invalid_counting_mode(self, calculator):
        """Unknown counting modes are rejected."""
        result = calculator.calculate("2024-03-01", 5, "weekly")
        assert result.valid is False
        assert "weekly" in result.log[0]

    def test_missing_input_message(self, calculator):
        """Missing fields produce the waiting message."""
        result = calculator.calculate(None, None)
        assert result.log == [
            "Aguardando dados válidos: informe a data de início e a quantidade de dias."
        ]

    def test_accepts_string_input(self, calculator, empty):
        """ISO strings and digit strings from forms are accepted."""
        result = calculator.calculate(" 2024-03-01 ", "5", "Business", empty)
        assert result.valid is True
        assert result.final_date == date(2024, 3, 8)
        assert result.counting_mode == CountingMode.BUSINESS

    def test_whole_float_accepted(self, calculator, empty):
        """A float with no fractional part is a valid count."""
        result = calculator.calculate("2024-03-01", 5.0, CountingMode.BUSINESS, empty)
        assert result.final_date == date(2024, 3, 8)


class TestOverflow:
    """Tests for the iteration ceiling."""

    def test_counting_phase_overflow(self):
        """An unbounded run of holidays aborts the counting phase."""
        calculator = DeadlineCalculator(max_iterations=10)
        registry = dense_registry(date(2024, 3, 2), 30)

        with pytest.raises(ComputationOverflowError) as exc_info:
            calculator.calculate(date(2024, 3, 1), 1, CountingMode.BUSINESS, registry)

        assert exc_info.value.phase == "counting"
        assert exc_info.value.limit == 10

    def test_extension_phase_overflow(self):
        """An unbounded run of holidays aborts the extension phase."""
        calculator = DeadlineCalculator(max_iterations=5)
        registry = dense_registry(date(2024, 3, 2), 30)

        with pytest.raises(ComputationOverflowError) as exc_info:
            calculator.calculate(date(2024, 3, 1), 1, CountingMode.CALENDAR, registry)

        assert exc_info.value.phase == "extension"

    def test_start_on_last_representable_day(self, calculator):
        """A term starting on date.max cannot be counted."""
        with pytest.raises(ComputationOverflowError) as exc_info:
            calculator.calculate(date(9999, 12, 31), 1)

        assert exc_info.value.phase == "counting"
        assert "31/12/9999" in str(exc_info.value)

    def test_calendar_count_past_last_day(self, calculator):
        """Counting more days than remain before date.max is rejected."""
        with pytest.raises(ComputationOverflowError):
            calculator.calculate(date(9999, 12, 29), 3, CountingMode.CALENDAR)

    def test_count_reaching_last_day(self, calculator):
        """A count that ends exactly on date.max still completes."""
        result = calculator.calculate(date(9999, 12, 29), 2, CountingMode.BUSINESS)
        assert result.final_date == date(9999, 12, 31)

    def test_business_skip_past_last_day(self, calculator):
        """Skipping a holiday on date.max aborts the counting phase."""
        registry = HolidayRegistry.from_entries(
            [HolidayException(date=date(9999, 12, 31), name="Feriado")]
        )
        with pytest.raises(ComputationOverflowError) as exc_info:
            calculator.calculate(date(9999, 12, 29), 2, CountingMode.BUSINESS, registry)

        assert exc_info.value.phase == "counting"

    def test_extension_past_last_day(self):
        """Rolling a due date off date.max aborts the extension phase."""
        registry = HolidayRegistry.from_entries(
            [HolidayException(date=date(9999, 12, 31), name="Holiday")]
        )
        calculator = DeadlineCalculator(language="en")

        with pytest.raises(ComputationOverflowError) as exc_info:
            calculator.calculate(date(9999, 12, 29), 2, CountingMode.CALENDAR, registry)

        assert exc_info.value.phase == "extension"
        assert "9999-12-31" in str(exc_info.value)

    def test_overflow_is_not_value_error(self):
        """Overflow is distinct from input validation errors."""
        assert not issubclass(ComputationOverflowError, ValueError)
        assert issubclass(ComputationOverflowError, RuntimeError)

    def test_invalid_ceiling(self):
        """The ceiling must be positive."""
        with pytest.raises(ValueError):
            DeadlineCalculator(max_iterations=0)


class TestRegistryHandling:
    """Tests for how the calculator consumes holiday registries."""

    def test_duplicate_dates_first_match_wins(self, calculator):
        """A duplicated date resolves to the first name in registry order."""
        registry = HolidayRegistry.from_entries(
            [(date(2024, 3, 4), "Primeiro"), (date(2024, 3, 4), "Segundo")]
        )
        result = calculator.calculate(date(2024, 3, 1), 1, CountingMode.BUSINESS, registry)

        assert result.final_date == date(2024, 3, 5)
        monday = [s for s in result.simulation if s.step_date == date(2024, 3, 4)]
        assert len(monday) == 1
        assert monday[0].label == "Primeiro"

    def test_accepts_plain_entries(self, calculator):
        """Lists of mappings are accepted as a registry snapshot."""
        result = calculator.calculate(
            "2024-03-01", 1, "business", [{"date": "2024-03-04", "name": "Ponto facultativo"}]
        )
        assert result.final_date == date(2024, 3, 5)

    def test_no_holidays_by_default(self, calculator):
        """Without a registry no holiday is applied."""
        result = calculator.calculate(date(2024, 11, 14), 1)
        assert result.final_date == date(2024, 11, 15)

    def test_calculate_request(self, calculator, holidays):
        """DeadlineRequest is a typed entry point to the same computation."""
        request = DeadlineRequest(
            start_date=date(2024, 11, 14),
            day_count=3,
            counting_mode=CountingMode.BUSINESS,
            holidays=holidays,
        )
        assert calculator.calculate_request(request).final_date == date(2024, 11, 21)


class TestNarration:
    """Tests for the human-readable log."""

    def test_portuguese_log(self, calculator, empty):
        """Portuguese narration uses DD/MM/YYYY and weekday names."""
        result = calculator.calculate(date(2024, 3, 1), 5, CountingMode.BUSINESS, empty)

        assert result.log[0] == "Data de publicação/intimação: 01/03/2024 (sexta-feira)"
        assert result.log[1] == "Dia de início (excluído): 01/03/2024 (sexta-feira)"
        assert result.log[2] == "02/03/2024 (sábado): Final de semana - Não contado"
        assert result.log[4] == "04/03/2024 (segunda-feira): Dia útil 1/5"
        assert result.log[-1] == "Vencimento final: 08/03/2024 (sexta-feira)"

    def test_english_log(self, empty):
        """English narration uses ISO dates."""
        result = calculate_deadline(date(2024, 3, 1), 5, CountingMode.BUSINESS, empty, language="en")

        assert result.log[0] == "Publication/notice date: 2024-03-01 (Friday)"
        assert result.log[-1] == "Final due date: 2024-03-08 (Friday)"

    def test_holiday_and_extension_narration(self, calculator, holidays):
        """Skipped holidays and extensions name the holiday."""
        result = calculator.calculate(date(2024, 10, 31), 15, CountingMode.CALENDAR, holidays)

        assert "15/11/2024 (sexta-feira): Dia corrido 15/15" in result.log
        assert (
            "15/11/2024 (sexta-feira): Vencimento em dia não útil (Proclamação da República). "
            "Prorrogando para o próximo dia útil..."
        ) in result.log


class TestProperties:
    """Invariants over a sweep of start dates."""

    @pytest.mark.parametrize("mode", [CountingMode.BUSINESS, CountingMode.CALENDAR])
    @pytest.mark.parametrize("day_count", [1, 5, 15])
    def test_invariants(self, calculator, holidays, mode, day_count):
        """Start exclusion, monotonic count, valid final day, minimum length."""
        for offset in range(0, 120, 3):
            start = date(2024, 8, 1) + timedelta(days=offset)
            result = calculator.calculate(start, day_count, mode, holidays)

            first = result.simulation[0]
            assert first.reason == SimulationReason.START
            assert first.is_counted is False

            counted = [s for s in result.simulation if s.is_counted]
            assert [s.count for s in counted] == list(range(1, day_count + 1))
            assert counted[0].step_date > start

            assert not is_weekend(result.final_date)
            assert result.final_date not in holidays
            assert len(result.simulation) >= 1 + day_count

    def test_zero_day_identity(self, calculator, holidays):
        """A 0-day term always returns the start date."""
        for offset in range(14):
            start = date(2024, 11, 10) + timedelta(days=offset)
            for mode in CountingMode:
                assert calculator.calculate(start, 0, mode, holidays).final_date == start

    def test_determinism(self, calculator, holidays):
        """Identical inputs produce identical output."""
        first = calculator.calculate(date(2024, 10, 31), 15, CountingMode.BUSINESS, holidays)
        second = calculator.calculate(date(2024, 10, 31), 15, CountingMode.BUSINESS, holidays)

        assert first == second

    def test_result_carries_no_clock(self, calculator):
        """Results are plain data; nothing depends on when they were computed."""
        result = calculator.calculate(date(2024, 3, 1), 1)
        assert "calculation_timestamp" not in result.model_dump()


class TestBusinessDaysBetween:
    """Tests for business_days_between."""

    def test_plain_week(self):
        """Friday to the next Friday (exclusive) holds five business days."""
        assert business_days_between(date(2024, 3, 1), date(2024, 3, 8)) == 5

    def test_with_holidays(self, holidays):
        """Holidays are not business days."""
        assert business_days_between(date(2024, 11, 14), date(2024, 11, 22), holidays) == 4

    def test_reversed_range(self):
        """An empty or reversed interval counts zero."""
        assert business_days_between(date(2024, 3, 8), date(2024, 3, 1)) == 0
        assert business_days_between(date(2024, 3, 1), date(2024, 3, 1)) == 0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

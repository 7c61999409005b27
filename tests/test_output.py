"""
Tests for result export and console formatting.
"""

import csv
import json
from datetime import date

import pytest
from rich.console import Console

from deadline_calculator.core.calculator import DeadlineCalculator
from deadline_calculator.data.holiday_data import default_registry
from deadline_calculator.data.schemas import CountingMode, HolidayException, HolidayRegistry
from deadline_calculator.output.exporter import ResultExporter
from deadline_calculator.output.formatter import ConsoleFormatter


@pytest.fixture
def result():
    return DeadlineCalculator().calculate(
        date(2024, 10, 31), 15, CountingMode.CALENDAR, default_registry()
    )


@pytest.fixture
def console():
    return Console(record=True, width=120)


class TestResultExporter:
    """Tests for JSON export."""

    def test_result_to_dict(self, result):
        data = ResultExporter().result_to_dict(result)

        assert data["valid"] is True
        assert data["request"] == {
            "start_date": "2024-10-31",
            "day_count": 15,
            "counting_mode": "calendar",
        }
        assert data["final_date"] == "2024-11-18"
        assert data["simulation"][0] == {
            "date": "2024-10-31",
            "label": "Dia do começo",
            "is_counted": False,
            "count": None,
            "reason": "start",
        }

    def test_export_json(self, result, tmp_path):
        path = ResultExporter().export_json(result, str(tmp_path / "result.json"))

        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        assert data["final_date"] == "2024-11-18"
        assert data["log"] == result.log
        assert "exported_at" in data["metadata"]

    def test_export_to_directory(self, result, tmp_path):
        exporter = ResultExporter(output_directory=str(tmp_path / "results"))
        path = exporter.export_json(result)
        assert path.startswith(str(tmp_path / "results"))
        assert path.endswith(".json")

    def test_export_csv(self, result, tmp_path):
        """One row per simulated day, below a header row."""
        path = ResultExporter().export_csv(result, str(tmp_path / "simulation.csv"))

        with open(path, encoding="utf-8", newline="") as f:
            rows = list(csv.reader(f))

        assert rows[0] == ["Date", "Label", "Counted", "Count", "Reason"]
        assert len(rows) == 1 + len(result.simulation)
        assert rows[1] == ["2024-10-31", "Dia do começo", "False", "", "start"]
        assert rows[-1] == ["2024-11-17", "Final de semana", "False", "", "weekend"]

    def test_export_both(self, result, tmp_path):
        exporter = ResultExporter(output_directory=str(tmp_path))
        json_path, csv_path = exporter.export_both(result)
        assert json_path.endswith(".json")
        assert csv_path.endswith(".csv")

    def test_invalid_result(self):
        invalid = DeadlineCalculator().calculate("abc", 5)
        data = ResultExporter().result_to_dict(invalid)
        assert data["valid"] is False
        assert data["final_date"] is None
        assert data["simulation"] == []


class TestConsoleFormatter:
    """Tests for Rich console output."""

    def test_print_result(self, result, console):
        ConsoleFormatter(console=console).print_result(result)
        output = console.export_text()

        assert "18/11/2024 (segunda-feira)" in output
        assert "Proclamação da República" in output

    def test_print_invalid_result(self, console):
        invalid = DeadlineCalculator().calculate("2024-02-30", 5)
        ConsoleFormatter(console=console).print_result(invalid)
        assert "não existe no calendário" in console.export_text()

    def test_print_holidays(self, console):
        ConsoleFormatter(language="en", console=console).print_holidays(default_registry())
        output = console.export_text()
        assert "2024-12-25" in output
        assert "Natal" in output

    def test_invalid_input_printed_literally(self, console):
        """Caller text containing square brackets is not read as markup."""
        invalid = DeadlineCalculator().calculate("[bold]2024[/red]", 5)
        ConsoleFormatter(console=console).print_result(invalid)
        assert "[bold]2024[/red]" in console.export_text()

    def test_holiday_names_printed_literally(self, console):
        registry = HolidayRegistry.from_entries(
            [HolidayException(date=date(2024, 6, 3), name="[red]Feriado[/]")]
        )
        ConsoleFormatter(console=console).print_holidays(registry)
        assert "[red]Feriado[/]" in console.export_text()

    def test_error_message_printed_literally(self, console):
        formatter = ConsoleFormatter(console=console)
        formatter.print_error("Invalid date format: [/bold]")
        formatter.print_statement("Processo [1234]")

        output = console.export_text()
        assert "Error: Invalid date format: [/bold]" in output
        assert "Processo [1234]" in output

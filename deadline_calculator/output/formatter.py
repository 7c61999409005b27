"""
Console output formatting using Rich.
"""

from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from deadline_calculator.data.schemas import DeadlineResult, HolidayRegistry, SimulationReason
from deadline_calculator.i18n import Translator

REASON_STYLES = {
    SimulationReason.START: "dim",
    SimulationReason.HOLIDAY: "magenta",
    SimulationReason.WEEKEND: "yellow",
    SimulationReason.BUSINESS: "green",
    SimulationReason.CALENDAR: "green",
}


class ConsoleFormatter:
    """Formats output for console display using Rich."""

    def __init__(self, language: str = "pt", console: Optional[Console] = None):
        """
        Initialize the console formatter.

        Args:
            language: Language used for dates and weekday names.
            console: Optional Rich console (a new one is created otherwise).
        """
        self.console = console or Console()
        self.translator = Translator(language)

    def print_result(self, result: DeadlineResult, show_simulation: bool = True) -> None:
        """
        Print a deadline calculation result.

        Args:
            result: DeadlineResult to display.
            show_simulation: Whether to print the day-by-day table.
        """
        self.console.print()
        self.console.rule("[bold blue]Deadline Calculation Result[/bold blue]")
        self.console.print()

        if not result.valid:
            # The log carries the explanation for rejected input
            for line in result.log:
                self.console.print(Text(line, style="yellow"))
            self.console.print()
            return

        t = self.translator
        summary_table = Table(show_header=False, box=None)
        summary_table.add_column("Label", style="cyan", width=20)
        summary_table.add_column("Value", style="white")

        summary_table.add_row(
            "Start date:",
            f"{t.format_date(result.start_date)} ({t.weekday_name(result.start_date)})",
        )
        summary_table.add_row("Term:", f"{result.day_count} day(s)")
        summary_table.add_row("Counting mode:", result.counting_mode.value.capitalize())
        summary_table.add_row(
            Text("Final due date:", style="bold green"),
            Text(
                f"{t.format_date(result.final_date)} ({t.weekday_name(result.final_date)})",
                style="bold green",
            ),
        )

        self.console.print(Panel(summary_table, title="[bold]Deadline[/bold]"))

        if show_simulation:
            self.print_simulation(result)

        log_text = Text("\n".join(result.log))
        self.console.print(Panel(log_text, title="[bold]Calculation Log[/bold]"))
        self.console.print()

    def print_simulation(self, result: DeadlineResult) -> None:
        """
        Print the day-by-day simulation table.

        Args:
            result: DeadlineResult whose simulation is displayed.
        """
        t = self.translator
        table = Table(title="[bold]Simulation[/bold]")
        table.add_column("Date", style="cyan", width=12)
        table.add_column("Day", style="dim", width=14)
        table.add_column("Label", style="white")
        table.add_column("Counted", justify="center", width=8)
        table.add_column("Count", justify="right", width=6)

        for step in result.simulation:
            style = REASON_STYLES[step.reason]
            table.add_row(
                t.format_date(step.step_date),
                t.weekday_name(step.step_date),
                Text(step.label, style=style),
                "yes" if step.is_counted else "-",
                str(step.count) if step.count is not None else "",
            )

        self.console.print(table)

    def print_holidays(self, registry: HolidayRegistry, title: str = "Holidays") -> None:
        """
        Print a table of holidays.

        Args:
            registry: Registry to display.
            title: Table title.
        """
        t = self.translator
        self.console.print()
        self.console.rule(f"[bold blue]{escape(title)}[/bold blue]")
        self.console.print()

        if len(registry) == 0:
            self.console.print("[dim]No holidays found for this period.[/dim]")
            self.console.print()
            return

        holiday_table = Table()
        holiday_table.add_column("Date", style="cyan", width=12)
        holiday_table.add_column("Day", style="dim", width=14)
        holiday_table.add_column("Name", style="white")

        for holiday in registry.holidays:
            holiday_table.add_row(
                t.format_date(holiday.holiday_date),
                t.weekday_name(holiday.holiday_date),
                Text(holiday.name),
            )

        self.console.print(holiday_table)
        self.console.print()

    def print_statement(self, text: str) -> None:
        """
        Print a generated timeliness statement.

        Args:
            text: Statement text.
        """
        self.console.print()
        self.console.print(Panel(Text(text), title="[bold]Tempestividade[/bold]"))
        self.console.print()

    def print_error(self, message: str) -> None:
        """
        Print an error message.

        Args:
            message: Error message to display.
        """
        self.console.print(f"[bold red]Error:[/bold red] {escape(message)}")

    def print_success(self, message: str) -> None:
        """
        Print a success message.

        Args:
            message: Success message to display.
        """
        self.console.print(f"[bold green]Success:[/bold green] {escape(message)}")

"""
CLI interface for the deadline calculator.
"""

import logging
import sys
from datetime import date, datetime
from typing import Iterable, Optional

import click

from deadline_calculator import __version__
from deadline_calculator.config.manager import ConfigManager
from deadline_calculator.core.calculator import ComputationOverflowError, DeadlineCalculator
from deadline_calculator.core.holiday_provider import registry_from_config, years_spanned
from deadline_calculator.core.timeliness import TimelinessFormatter, suggest_days, suggest_framework
from deadline_calculator.data.loader import HolidayFileLoader
from deadline_calculator.data.schemas import (
    ActType,
    Config,
    CountingMode,
    Framework,
    HolidayRegistry,
    TimelinessRequest,
)
from deadline_calculator.output.exporter import ResultExporter
from deadline_calculator.output.formatter import ConsoleFormatter

logger = logging.getLogger(__name__)

HOLIDAY_SOURCES = ["default", "library", "file", "none"]


def parse_date(date_str: str) -> date:
    """Parse date string in various formats."""
    formats = ["%Y-%m-%d", "%d/%m/%Y", "%d.%m.%Y"]
    for fmt in formats:
        try:
            return datetime.strptime(date_str, fmt).date()
        except ValueError:
            continue
    raise ValueError(
        f"Invalid date format: {date_str}. Use YYYY-MM-DD, DD/MM/YYYY, or DD.MM.YYYY"
    )


def build_registry(
    cfg: Config,
    years: Iterable[int],
    source: Optional[str] = None,
    holiday_file: Optional[str] = None,
    subdivision: Optional[str] = None,
    recess: bool = False,
) -> HolidayRegistry:
    """Apply command-line overrides to the config and resolve the holiday registry."""
    updates = {}
    if holiday_file:
        updates["holiday_file"] = holiday_file
        updates["holiday_source"] = source or "file"
    elif source:
        updates["holiday_source"] = source
    if subdivision:
        updates["subdivision"] = subdivision
    if recess:
        updates["include_forensic_recess"] = True
    return registry_from_config(cfg.model_copy(update=updates), years)


def setup_logging(debug: bool) -> None:
    """Configure root logging for CLI runs."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def holiday_options(func):
    """Shared options selecting the holiday registry."""
    func = click.option(
        "--recess",
        is_flag=True,
        default=False,
        help="Add the forensic recess (20/12 to 20/01) to the holidays",
    )(func)
    func = click.option(
        "--subdivision",
        help="Brazilian state code for library holidays (e.g., SP, RJ)",
    )(func)
    func = click.option(
        "--holiday-file",
        type=click.Path(exists=True),
        help="JSON/YAML file with a list of {date, name} holidays",
    )(func)
    func = click.option(
        "--holidays", "holiday_source",
        type=click.Choice(HOLIDAY_SOURCES),
        default=None,
        help="Holiday source (default: from config)",
    )(func)
    return func


@click.group()
@click.version_option(version=__version__, prog_name="deadline-calc")
def main():
    """Deadline Calculator - Compute Brazilian procedural deadlines."""
    pass


@main.command()
@click.option(
    "--start", "-s",
    required=True,
    help="Publication/notice date (YYYY-MM-DD, DD/MM/YYYY, or DD.MM.YYYY)",
)
@click.option(
    "--days", "-d",
    type=int,
    required=True,
    help="Number of days in the term",
)
@click.option(
    "--mode", "-m",
    type=click.Choice([m.value for m in CountingMode]),
    default=None,
    help="Counting mode (default: from config)",
)
@holiday_options
@click.option(
    "--language", "-l",
    type=click.Choice(["pt", "en"]),
    default=None,
    help="Narration language (default: from config)",
)
@click.option(
    "--no-simulation",
    is_flag=True,
    default=False,
    help="Hide the day-by-day simulation table",
)
@click.option(
    "--output", "-o",
    type=click.Path(),
    help="Output file path (optional)",
)
@click.option(
    "--format", "-f",
    type=click.Choice(["console", "json", "csv", "both"]),
    default="console",
    help="Output format (default: console)",
)
@click.option(
    "--config", "-c",
    type=click.Path(exists=True),
    help="Path to config file (optional)",
)
@click.option("--debug", is_flag=True, default=False, help="Enable debug logging")
def calculate(
    start, days, mode, holiday_source, holiday_file, subdivision, recess,
    language, no_simulation, output, format, config, debug,
):
    """Calculate the final due date of a deadline."""
    setup_logging(debug)
    formatter = ConsoleFormatter()

    try:
        start_date = parse_date(start)

        cfg = ConfigManager(config).load_config()
        language = language or cfg.language
        formatter = ConsoleFormatter(language=language)

        registry = build_registry(
            cfg, years_spanned(start_date, days), holiday_source, holiday_file, subdivision, recess
        )

        calculator = DeadlineCalculator(language=language, max_iterations=cfg.max_iterations)
        result = calculator.calculate(
            start_date, days, mode or cfg.default_counting_mode, registry
        )

        if format in ("console", "both"):
            formatter.print_result(result, show_simulation=not no_simulation)

        if not result.valid:
            sys.exit(1)

        if format in ("json", "csv", "both"):
            exporter = ResultExporter(output_directory=cfg.output_directory)

            if format == "json":
                path = exporter.export_json(result, output)
                formatter.print_success(f"Result saved to {path}")
            elif format == "csv":
                path = exporter.export_csv(result, output)
                formatter.print_success(f"Simulation saved to {path}")
            else:
                json_path, csv_path = exporter.export_both(result)
                formatter.print_success(f"Results saved to:\n  - {json_path}\n  - {csv_path}")

    except ComputationOverflowError as e:
        formatter.print_error(f"Configuration error: {e}")
        sys.exit(2)
    except (ValueError, FileNotFoundError) as e:
        formatter.print_error(str(e))
        sys.exit(1)
    except Exception as e:
        formatter.print_error(f"Unexpected error: {e}")
        if debug:
            logger.exception("Detailed error:")
        sys.exit(1)


@main.command()
@click.option(
    "--year", "-y",
    type=int,
    default=None,
    help="Year to show holidays for (default: current year)",
)
@holiday_options
@click.option(
    "--output", "-o",
    type=click.Path(),
    help="Save the holidays to a JSON/YAML file (optional)",
)
@click.option(
    "--config", "-c",
    type=click.Path(exists=True),
    help="Path to config file (optional)",
)
def holidays(year, holiday_source, holiday_file, subdivision, recess, output, config):
    """List the holidays in effect for a year."""
    formatter = ConsoleFormatter()

    try:
        if year is None:
            year = date.today().year

        cfg = ConfigManager(config).load_config()
        formatter = ConsoleFormatter(language=cfg.language)

        registry = build_registry(cfg, [year], holiday_source, holiday_file, subdivision, recess)
        in_year = HolidayRegistry(
            holidays=tuple(registry.in_range(date(year, 1, 1), date(year, 12, 31)))
        )

        formatter.print_holidays(in_year, title=f"Holidays {year}")

        if output:
            path = HolidayFileLoader().save(in_year, output)
            formatter.print_success(f"Holidays saved to {path}")

    except Exception as e:
        formatter.print_error(f"Error: {e}")
        sys.exit(1)


@main.command()
@click.option(
    "--act", "-a",
    type=click.Choice([a.value for a in ActType]),
    required=True,
    help="Procedural act being filed",
)
@click.option(
    "--notification", "-n",
    required=True,
    help="Publication/notification date (YYYY-MM-DD, DD/MM/YYYY, or DD.MM.YYYY)",
)
@click.option(
    "--framework",
    type=click.Choice([f.value for f in Framework]),
    default=None,
    help="Rule framework (default: detected from --title, else CPC)",
)
@click.option(
    "--days", "-d",
    type=int,
    default=None,
    help="Term length (default: usual term for the act)",
)
@click.option(
    "--mode", "-m",
    type=click.Choice([m.value for m in CountingMode]),
    default=None,
    help="Counting mode (default: from config)",
)
@click.option("--title", "-t", help="Activity title; overrides the act name")
@click.option("--reference", "-r", help="Record reference, e.g. 'fls. 45'")
@holiday_options
@click.option(
    "--config", "-c",
    type=click.Path(exists=True),
    help="Path to config file (optional)",
)
def timeliness(
    act, notification, framework, days, mode, title, reference,
    holiday_source, holiday_file, subdivision, recess, config,
):
    """Generate a timeliness statement for a filing."""
    formatter = ConsoleFormatter()

    try:
        notification_date = parse_date(notification)
        cfg = ConfigManager(config).load_config()

        act_type = ActType(act)
        framework_enum = Framework(framework) if framework else suggest_framework(title)
        term = days if days is not None else suggest_days(act_type, framework_enum, 15)
        counting_mode = CountingMode(mode) if mode else cfg.default_counting_mode

        registry = build_registry(
            cfg, years_spanned(notification_date, term),
            holiday_source, holiday_file, subdivision, recess,
        )

        calculator = DeadlineCalculator(language="pt", max_iterations=cfg.max_iterations)
        result = calculator.calculate(notification_date, term, counting_mode, registry)
        if not result.valid:
            formatter.print_error(result.log[0])
            sys.exit(1)

        request = TimelinessRequest(
            act_type=act_type,
            framework=framework_enum,
            notification_date=notification_date,
            days=term,
            counting_mode=counting_mode,
            deadline_date=result.final_date,
            holidays=registry,
            reference=reference,
            custom_title=title,
        )
        formatter.print_statement(TimelinessFormatter().generate(request))

    except ComputationOverflowError as e:
        formatter.print_error(f"Configuration error: {e}")
        sys.exit(2)
    except Exception as e:
        formatter.print_error(f"Error: {e}")
        sys.exit(1)


@main.command()
@click.option(
    "--host", "-h",
    default=None,
    help="Host to bind to (default: from config or 0.0.0.0)",
)
@click.option(
    "--port", "-p",
    type=int,
    default=None,
    help="Port to bind to (default: from config or 8000)",
)
@click.option(
    "--config", "-c",
    type=click.Path(exists=True),
    help="Path to config file (optional)",
)
def serve(host, port, config):
    """Start the FastAPI server."""
    formatter = ConsoleFormatter()

    try:
        import uvicorn

        cfg = ConfigManager(config).load_config()

        api_host = host or cfg.api_host
        api_port = port or cfg.api_port

        formatter.console.print(f"Starting API server at http://{api_host}:{api_port}")
        formatter.console.print("Press Ctrl+C to stop")
        formatter.console.print()

        uvicorn.run(
            "deadline_calculator.api:app",
            host=api_host,
            port=api_port,
            reload=False,
        )

    except ImportError:
        formatter.print_error("uvicorn is required for the API server. Install it with: pip install uvicorn")
        sys.exit(1)
    except Exception as e:
        formatter.print_error(f"Error starting server: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()

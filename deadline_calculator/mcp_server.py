"""
MCP Server for the Deadline Calculator.

This module provides an MCP (Model Context Protocol) server that exposes
the deadline calculator to Claude Desktop and other MCP clients.

Supports two transport modes:
- stdio: For local Claude Desktop integration
- sse: For HTTP-based integration (Docker, remote servers)
"""

import argparse
import logging
import os
from datetime import date
from typing import List, Optional

from mcp.server.fastmcp import FastMCP

from deadline_calculator.config.manager import ConfigManager
from deadline_calculator.core.calculator import ComputationOverflowError, DeadlineCalculator
from deadline_calculator.core.holiday_provider import (
    HolidayProvider,
    registry_from_config,
    years_spanned,
)
from deadline_calculator.core.timeliness import TimelinessFormatter, suggest_days, suggest_framework
from deadline_calculator.data.schemas import (
    ActType,
    CountingMode,
    Framework,
    HolidayRegistry,
    TimelinessRequest,
)

logger = logging.getLogger(__name__)

# Load configuration
config_manager = ConfigManager()
config = config_manager.load_config()


def _registry(holidays: Optional[List[dict]], years: range, include_recess: bool) -> HolidayRegistry:
    """Caller-supplied holidays, or the configured source."""
    if holidays is not None:
        registry = HolidayRegistry.from_entries(holidays)
        if include_recess:
            recess = HolidayProvider(language=config.language).forensic_recess_registry(years)
            registry = registry.merged(recess)
        return registry
    cfg = config.model_copy(
        update={"include_forensic_recess": include_recess or config.include_forensic_recess}
    )
    return registry_from_config(cfg, years)


def create_mcp_server(host: str = "127.0.0.1", port: int = 8000) -> FastMCP:
    """Create and configure the MCP server with tools."""
    mcp = FastMCP("Deadline Calculator", host=host, port=port)

    @mcp.tool()
    def calculate_deadline(
        start_date: str,
        day_count: int,
        counting_mode: str = "business",
        holidays: Optional[List[dict]] = None,
        include_recess: bool = False,
        language: str = "pt",
    ) -> dict:
        """
        Calculate the final due date of a Brazilian procedural deadline.

        The start day (publication/notice date) is excluded. In business
        mode weekends and holidays are skipped; in both modes a due date
        landing on a weekend or holiday rolls forward to the next business day.

        Args:
            start_date: Publication/notice date in format YYYY-MM-DD (e.g., "2024-11-14")
            day_count: Number of days in the term (e.g., 15)
            counting_mode: "business" (dias úteis) or "calendar" (dias corridos)
            holidays: Optional list of {"date": "YYYY-MM-DD", "name": "..."};
                      omitted means the configured holiday source
            include_recess: Add the forensic recess (20/12 to 20/01) as holidays
            language: Narration language, "pt" or "en"

        Returns:
            Dictionary with:
            - valid: False when the input was rejected (see log)
            - final_date: Due date in YYYY-MM-DD
            - log: Step-by-step narration
            - simulation: One entry per calendar day visited

        Examples:
            >>> calculate_deadline("2024-11-14", 15)
            >>> calculate_deadline("2024-12-10", 10, include_recess=True)
        """
        try:
            start = date.fromisoformat(start_date)
            years = years_spanned(start, day_count)
        except (TypeError, ValueError):
            years = range(date.today().year, date.today().year + 1)

        try:
            registry = _registry(holidays, years, include_recess)
            calculator = DeadlineCalculator(language=language, max_iterations=config.max_iterations)
            result = calculator.calculate(start_date, day_count, counting_mode, registry)
        except ComputationOverflowError as e:
            logger.error(f"Deadline computation overflow: {e}")
            return {"error": f"Configuration error: {e}"}
        except ValueError as e:
            return {"error": str(e)}

        return {
            "valid": result.valid,
            "start_date": result.start_date.isoformat() if result.start_date else None,
            "day_count": result.day_count,
            "counting_mode": result.counting_mode.value if result.counting_mode else None,
            "final_date": result.final_date.isoformat() if result.final_date else None,
            "log": result.log,
            "simulation": [
                step.model_dump(mode="json", by_alias=True) for step in result.simulation
            ],
        }

    @mcp.tool()
    def generate_timeliness_statement(
        act_type: str,
        notification_date: str,
        framework: Optional[str] = None,
        days: Optional[int] = None,
        counting_mode: str = "business",
        reference: Optional[str] = None,
        custom_title: Optional[str] = None,
        include_recess: bool = False,
    ) -> dict:
        """
        Generate the "I. DA TEMPESTIVIDADE" section of a filing.

        Args:
            act_type: One of contestacao, recurso, embargos_declaracao,
                      contrarrazoes_recurso, contrarrazoes_embargos,
                      manifestacao, outros
            notification_date: Publication/notification date (YYYY-MM-DD)
            framework: "CPC", "CLT" or "JEC" (default: detected from custom_title)
            days: Term length (default: usual term for the act)
            counting_mode: "business" or "calendar"
            reference: Record reference, e.g. "fls. 45"
            custom_title: Activity title; overrides the act name
            include_recess: Add the forensic recess as holidays

        Returns:
            Dictionary with the framework, term, deadline and statement text.
        """
        try:
            act = ActType(act_type)
            framework_enum = Framework(framework.upper()) if framework else suggest_framework(custom_title)
            mode = CountingMode(counting_mode)
            notified = date.fromisoformat(notification_date)
        except ValueError as e:
            return {"error": f"Invalid input: {e}"}

        term = days if days is not None else suggest_days(act, framework_enum, 15)
        years = years_spanned(notified, term)

        try:
            registry = _registry(None, years, include_recess)
            result = DeadlineCalculator(max_iterations=config.max_iterations).calculate(
                notified, term, mode, registry
            )
            if not result.valid:
                return {"error": result.log[0]}

            text = TimelinessFormatter().generate(
                TimelinessRequest(
                    act_type=act,
                    framework=framework_enum,
                    notification_date=notified,
                    days=term,
                    counting_mode=mode,
                    deadline_date=result.final_date,
                    holidays=registry,
                    reference=reference,
                    custom_title=custom_title,
                )
            )
        except ComputationOverflowError as e:
            logger.error(f"Deadline computation overflow: {e}")
            return {"error": f"Configuration error: {e}"}
        except ValueError as e:
            return {"error": str(e)}

        return {
            "framework": framework_enum.value,
            "days": term,
            "deadline_date": result.final_date.isoformat(),
            "text": text,
        }

    @mcp.tool()
    def get_holidays(year: int, include_recess: bool = False) -> dict:
        """
        Get the holidays in effect for a year from the configured source.

        Args:
            year: Year to get holidays for (e.g., 2024)
            include_recess: Add the forensic recess (20/12 to 20/01)

        Returns:
            Dictionary with the year, holiday count and holiday list.
        """
        if year < 1900 or year > 2100:
            return {"error": "Year must be between 1900 and 2100"}

        try:
            registry = _registry(None, range(year, year + 1), include_recess)
            in_year = registry.in_range(date(year, 1, 1), date(year, 12, 31))
        except Exception as e:
            logger.error(f"Error fetching holidays: {e}")
            return {"error": f"Error fetching holidays: {str(e)}"}

        return {
            "year": year,
            "source": config.holiday_source,
            "holiday_count": len(in_year),
            "holidays": [
                {"date": h.holiday_date.isoformat(), "name": h.name} for h in in_year
            ],
        }

    return mcp


def main():
    """Run the MCP server with configurable transport.

    Transport can be set via:
    - Command line: --transport sse --port 8080
    - Environment: MCP_TRANSPORT=sse MCP_PORT=8080 MCP_HOST=0.0.0.0
    """
    parser = argparse.ArgumentParser(description="Deadline Calculator MCP Server")
    parser.add_argument(
        "--transport",
        choices=["stdio", "sse"],
        default=os.environ.get("MCP_TRANSPORT", "stdio"),
        help="Transport mode: stdio (default) or sse for HTTP",
    )
    parser.add_argument(
        "--host",
        default=os.environ.get("MCP_HOST", os.environ.get("FASTMCP_HOST", "0.0.0.0")),
        help="Host to bind to (SSE mode only, default: 0.0.0.0)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=int(os.environ.get("MCP_PORT", os.environ.get("FASTMCP_PORT", "8080"))),
        help="Port to listen on (SSE mode only, default: 8080)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args()

    # Configure logging
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger.info(f"Starting Deadline Calculator MCP server ({args.transport})")

    mcp = create_mcp_server(host=args.host, port=args.port)

    if args.transport == "sse":
        mcp.run(transport="sse")
    else:
        mcp.run(transport="stdio")


if __name__ == "__main__":
    main()

"""
FastAPI REST API for the deadline calculator.
"""

import logging
from datetime import date
from typing import Iterable, List, Optional, Union

from fastapi import FastAPI, HTTPException, Query
from pydantic import BaseModel, Field

from deadline_calculator import __version__
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
    HolidayException,
    HolidayRegistry,
    TimelinessRequest,
)

logger = logging.getLogger(__name__)

# Load configuration
config_manager = ConfigManager()
config = config_manager.load_config()

timeliness_formatter = TimelinessFormatter()


# API Models
class CalculateRequest(BaseModel):
    """Request model for deadline calculation.

    Fields are loosely typed; invalid form input comes back in the result
    log with ``valid=false``.
    """

    start_date: Optional[str] = Field(None, description="Publication/notice date (YYYY-MM-DD)")
    day_count: Optional[Union[int, str]] = Field(None, description="Number of days in the term")
    counting_mode: Optional[str] = Field(None, description="business or calendar (default: config)")
    holidays: Optional[List[HolidayException]] = Field(
        None, description="Holiday snapshot; omitted means the configured source"
    )
    include_recess: bool = Field(False, description="Add forensic recess entries")
    language: Optional[str] = Field(None, description="Narration language: pt or en")


class SimulationStepResponse(BaseModel):
    """One simulated day."""

    date: date
    label: str
    is_counted: bool
    count: Optional[int]
    reason: str


class CalculateResponse(BaseModel):
    """Response model for deadline calculation."""

    valid: bool
    start_date: Optional[date]
    day_count: Optional[int]
    counting_mode: Optional[str]
    final_date: Optional[date]
    log: List[str]
    simulation: List[SimulationStepResponse]


class TimelinessApiRequest(BaseModel):
    """Request model for a timeliness statement."""

    act_type: ActType = Field(..., description="Procedural act being filed")
    notification_date: date = Field(..., description="Publication/notification date")
    framework: Optional[Framework] = Field(None, description="Rule framework (default: from title)")
    days: Optional[int] = Field(None, ge=0, description="Term length (default: usual term)")
    counting_mode: CountingMode = Field(CountingMode.BUSINESS, description="Counting mode")
    start_date: Optional[date] = Field(None, description="First counted day (labor framework)")
    deadline_date: Optional[date] = Field(None, description="Due date (default: computed)")
    holidays: Optional[List[HolidayException]] = Field(None, description="Holiday snapshot")
    include_recess: bool = Field(False, description="Add forensic recess entries")
    reference: Optional[str] = Field(None, description="Record reference")
    custom_title: Optional[str] = Field(None, description="Activity title")


class TimelinessResponse(BaseModel):
    """Response model for a timeliness statement."""

    framework: Framework
    days: int
    deadline_date: date
    text: str


class HolidayResponse(BaseModel):
    """Response model for a single holiday."""

    date: date
    name: str


def resolve_registry(
    entries: Optional[List[HolidayException]],
    years: Iterable[int],
    include_recess: bool,
) -> HolidayRegistry:
    """Use the caller's snapshot when given, otherwise the configured source."""
    years = list(years)
    if entries is not None:
        registry = HolidayRegistry.from_entries(entries)
        if include_recess:
            recess = HolidayProvider(language=config.language).forensic_recess_registry(years)
            registry = registry.merged(recess)
        return registry

    cfg = config.model_copy(
        update={"include_forensic_recess": include_recess or config.include_forensic_recess}
    )
    return registry_from_config(cfg, years)


def _years_for(start: Optional[date], day_count: int) -> range:
    """Years a computation may touch."""
    if start is None:
        year = date.today().year
        return range(year, year + 1)
    return years_spanned(start, day_count)


def _guess_start(value: Optional[str]) -> Optional[date]:
    try:
        return date.fromisoformat(value) if value else None
    except ValueError:
        return None


def _guess_days(value) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


# FastAPI app
app = FastAPI(
    title="Deadline Calculator API",
    description="Compute Brazilian procedural deadlines with an auditable calculation log",
    version=__version__,
)


@app.get("/")
async def root():
    """API root endpoint with basic info."""
    return {
        "name": "Deadline Calculator API",
        "version": __version__,
        "endpoints": {
            "POST /calculate": "Calculate a deadline",
            "POST /timeliness": "Generate a timeliness statement",
            "GET /holidays/{year}": "Get holidays for a year",
        },
    }


@app.post("/calculate", response_model=CalculateResponse)
async def calculate_deadline(request: CalculateRequest):
    """
    Calculate the final due date of a deadline.

    Invalid input is reported with ``valid=false`` and an explanation in
    ``log``; a holiday list that makes the computation diverge yields 422.
    """
    try:
        registry = resolve_registry(
            request.holidays,
            _years_for(_guess_start(request.start_date), _guess_days(request.day_count)),
            request.include_recess,
        )
        calculator = DeadlineCalculator(
            language=request.language or config.language,
            max_iterations=config.max_iterations,
        )
        result = calculator.calculate(
            request.start_date,
            request.day_count,
            request.counting_mode or config.default_counting_mode,
            registry,
        )
    except ComputationOverflowError as e:
        raise HTTPException(status_code=422, detail=f"Configuration error: {e}")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return CalculateResponse(
        valid=result.valid,
        start_date=result.start_date,
        day_count=result.day_count,
        counting_mode=result.counting_mode.value if result.counting_mode else None,
        final_date=result.final_date,
        log=result.log,
        simulation=[
            SimulationStepResponse(
                date=step.step_date,
                label=step.label,
                is_counted=step.is_counted,
                count=step.count,
                reason=step.reason.value,
            )
            for step in result.simulation
        ],
    )


@app.post("/timeliness", response_model=TimelinessResponse)
async def generate_timeliness(request: TimelinessApiRequest):
    """
    Generate the timeliness section of a filing.

    When ``deadline_date`` is omitted it is computed from the notification
    date, the term and the holiday snapshot.
    """
    framework = request.framework or suggest_framework(request.custom_title)
    days = request.days if request.days is not None else suggest_days(request.act_type, framework, 15)

    try:
        registry = resolve_registry(
            request.holidays,
            _years_for(request.notification_date, days),
            request.include_recess,
        )

        deadline_date = request.deadline_date
        if deadline_date is None:
            calculator = DeadlineCalculator(language="pt", max_iterations=config.max_iterations)
            result = calculator.calculate(
                request.notification_date, days, request.counting_mode, registry
            )
            deadline_date = result.final_date

        statement_request = TimelinessRequest(
            act_type=request.act_type,
            framework=framework,
            notification_date=request.notification_date,
            start_date=request.start_date,
            days=days,
            counting_mode=request.counting_mode,
            deadline_date=deadline_date,
            holidays=registry,
            reference=request.reference,
            custom_title=request.custom_title,
        )
        text = timeliness_formatter.generate(statement_request)
    except ComputationOverflowError as e:
        raise HTTPException(status_code=422, detail=f"Configuration error: {e}")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return TimelinessResponse(
        framework=framework,
        days=days,
        deadline_date=deadline_date,
        text=text,
    )


@app.get("/holidays/{year}", response_model=List[HolidayResponse])
async def get_holidays(
    year: int,
    source: Optional[str] = Query(None, description="default, library, file or none"),
    subdivision: Optional[str] = Query(None, description="Brazilian state code (library source)"),
    recess: bool = Query(False, description="Include forensic recess entries"),
):
    """
    Get the holidays in effect for a year.

    Args:
        year: Year (e.g., 2024, 2025)
    """
    if year < 1900 or year > 2100:
        raise HTTPException(
            status_code=400,
            detail="Year must be between 1900 and 2100",
        )

    updates = {"include_forensic_recess": recess or config.include_forensic_recess}
    if source:
        updates["holiday_source"] = source
    if subdivision:
        updates["subdivision"] = subdivision

    try:
        cfg = config.model_validate({**config.model_dump(), **updates})
        registry = registry_from_config(cfg, [year])
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error fetching holidays: {e}")
        raise HTTPException(status_code=500, detail=f"Error fetching holidays: {str(e)}")

    return [
        HolidayResponse(date=h.holiday_date, name=h.name)
        for h in registry.in_range(date(year, 1, 1), date(year, 12, 31))
    ]


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}

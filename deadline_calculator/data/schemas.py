"""
Data models for the deadline calculator using Pydantic.
"""

from datetime import date, datetime
from enum import Enum
from typing import Iterable, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CountingMode(str, Enum):
    """How days are counted toward a deadline."""

    BUSINESS = "business"  # Dias úteis: weekends and holidays are skipped
    CALENDAR = "calendar"  # Dias corridos: every day counts


class SimulationReason(str, Enum):
    """Why a day in the simulation was (or was not) counted."""

    START = "start"
    HOLIDAY = "holiday"
    WEEKEND = "weekend"
    BUSINESS = "business"
    CALENDAR = "calendar"


class Framework(str, Enum):
    """Procedural rule frameworks."""

    CPC = "CPC"  # Código de Processo Civil
    CLT = "CLT"  # Consolidação das Leis do Trabalho
    JEC = "JEC"  # Juizados Especiais Cíveis (Lei 9.099/95)


class ActType(str, Enum):
    """Procedural acts a timeliness statement can refer to."""

    CONTESTACAO = "contestacao"
    RECURSO = "recurso"
    EMBARGOS_DECLARACAO = "embargos_declaracao"
    CONTRARRAZOES_RECURSO = "contrarrazoes_recurso"
    CONTRARRAZOES_EMBARGOS = "contrarrazoes_embargos"
    MANIFESTACAO = "manifestacao"
    OUTROS = "outros"


class HolidayException(BaseModel):
    """A single date excluded from business-day counting."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    holiday_date: date = Field(..., alias="date", description="Calendar date of the exception")
    name: str = Field(..., min_length=1, description="Human-readable label")

    @field_validator("holiday_date", mode="before")
    @classmethod
    def strip_time(cls, v):
        """Reduce datetimes to their calendar date."""
        if isinstance(v, datetime):
            return v.date()
        return v


HolidayEntry = Union[HolidayException, dict, Tuple[date, str]]


class HolidayRegistry(BaseModel):
    """Ordered, immutable snapshot of holiday exceptions.

    Duplicate dates are kept as supplied; lookups resolve to the first
    entry in registry order.
    """

    model_config = ConfigDict(frozen=True)

    holidays: Tuple[HolidayException, ...] = Field(
        default_factory=tuple, description="Holiday exceptions in registry order"
    )

    @classmethod
    def from_entries(cls, entries: Iterable[HolidayEntry]) -> "HolidayRegistry":
        """
        Build a registry from exceptions, mappings or (date, name) pairs.

        Args:
            entries: Iterable of HolidayException, {"date", "name"} dicts,
                or (date, name) tuples.

        Returns:
            New HolidayRegistry preserving the input order.
        """
        items = []
        for entry in entries:
            if isinstance(entry, HolidayException):
                items.append(entry)
            elif isinstance(entry, dict):
                items.append(HolidayException(**entry))
            else:
                holiday_date, name = entry
                items.append(HolidayException(date=holiday_date, name=name))
        return cls(holidays=tuple(items))

    def lookup(self, day: date) -> Optional[str]:
        """Return the name of the first exception on ``day``, if any."""
        for holiday in self.holidays:
            if holiday.holiday_date == day:
                return holiday.name
        return None

    def in_range(self, start: date, end: date) -> List[HolidayException]:
        """
        List exceptions within an inclusive date range.

        Args:
            start: First day of the range.
            end: Last day of the range.

        Returns:
            Exceptions ordered by date, one per date (first match wins).
        """
        seen = {}
        for holiday in self.holidays:
            if start <= holiday.holiday_date <= end and holiday.holiday_date not in seen:
                seen[holiday.holiday_date] = holiday
        return [seen[d] for d in sorted(seen)]

    def merged(self, other: "HolidayRegistry") -> "HolidayRegistry":
        """Return a new registry with this registry's entries first."""
        return HolidayRegistry(holidays=self.holidays + other.holidays)

    @property
    def dates(self) -> List[date]:
        """Distinct holiday dates in ascending order."""
        return sorted({h.holiday_date for h in self.holidays})

    def __len__(self) -> int:
        return len(self.holidays)

    def __contains__(self, day: object) -> bool:
        return isinstance(day, date) and self.lookup(day) is not None


class SimulationStep(BaseModel):
    """One calendar day visited while computing a deadline."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    step_date: date = Field(..., alias="date", description="Day being evaluated")
    label: str = Field(..., description="Holiday name, weekend label, weekday name or start label")
    is_counted: bool = Field(..., description="Whether this day incremented the count")
    count: Optional[int] = Field(default=None, ge=1, description="Running count when counted")
    reason: SimulationReason = Field(..., description="Classification of the day")


class DeadlineRequest(BaseModel):
    """Well-typed request for a deadline computation."""

    start_date: date = Field(..., description="Publication/notice date that triggers the term")
    day_count: int = Field(..., ge=0, description="Number of days in the term")
    counting_mode: CountingMode = Field(
        default=CountingMode.BUSINESS, description="Business or calendar days"
    )
    holidays: HolidayRegistry = Field(
        default_factory=HolidayRegistry, description="Holiday snapshot in effect"
    )


class DeadlineResult(BaseModel):
    """Complete result of a deadline computation."""

    start_date: Optional[date] = Field(default=None, description="Validated start date")
    day_count: Optional[int] = Field(default=None, description="Validated day count")
    counting_mode: Optional[CountingMode] = Field(default=None, description="Counting mode used")
    final_date: Optional[date] = Field(default=None, description="Computed due date")
    log: List[str] = Field(default_factory=list, description="Narration of the computation")
    simulation: List[SimulationStep] = Field(
        default_factory=list, description="One step per calendar day visited"
    )
    valid: bool = Field(default=True, description="False when the input was rejected")


class TimelinessRequest(BaseModel):
    """Input for the timeliness statement generator."""

    act_type: ActType = Field(..., description="Procedural act being filed")
    framework: Framework = Field(default=Framework.CPC, description="Applicable rule framework")
    notification_date: date = Field(..., description="Publication/notification/joinder date")
    start_date: Optional[date] = Field(
        default=None, description="First counted day; defaults to the next business day"
    )
    days: int = Field(..., ge=0, description="Term length in days")
    counting_mode: CountingMode = Field(default=CountingMode.BUSINESS, description="Counting mode")
    deadline_date: date = Field(..., description="Final due date")
    holidays: HolidayRegistry = Field(
        default_factory=HolidayRegistry, description="Holiday snapshot for suspensions"
    )
    reference: Optional[str] = Field(default=None, description="Record reference, e.g. 'fls. 45'")
    custom_title: Optional[str] = Field(default=None, description="Overrides the act name")

    @field_validator("deadline_date")
    @classmethod
    def validate_date_range(cls, v: date, info) -> date:
        """Ensure deadline_date is not before notification_date."""
        if "notification_date" in info.data and v < info.data["notification_date"]:
            raise ValueError("deadline_date must be after or equal to notification_date")
        return v


class Config(BaseModel):
    """Configuration for the deadline calculator."""

    language: str = Field(default="pt", description="Narration language: pt or en")
    default_counting_mode: CountingMode = Field(
        default=CountingMode.BUSINESS, description="Counting mode when none is given"
    )
    holiday_source: str = Field(
        default="library", description="Holiday source: library, default, file or none"
    )
    holiday_file: Optional[str] = Field(default=None, description="JSON/YAML holiday file")
    subdivision: Optional[str] = Field(
        default=None, description="Brazilian state code for library holidays (e.g. SP)"
    )
    include_forensic_recess: bool = Field(
        default=False, description="Add 20/12-20/01 recess entries to the registry"
    )
    max_iterations: int = Field(
        default=10_000, ge=1, description="Iteration ceiling per computation phase"
    )
    output_directory: str = Field(default="results", description="Directory for output files")
    api_host: str = Field(default="0.0.0.0", description="API server host")
    api_port: int = Field(default=8000, ge=1, le=65535, description="API server port")

    @field_validator("holiday_source")
    @classmethod
    def validate_holiday_source(cls, v: str) -> str:
        """Ensure the holiday source is known."""
        v = v.lower().strip()
        if v not in ("default", "library", "file", "none"):
            raise ValueError("holiday_source must be one of: default, library, file, none")
        return v

    @field_validator("language")
    @classmethod
    def validate_language(cls, v: str) -> str:
        """Ensure the narration language is supported."""
        v = v.lower().strip()
        if v not in ("pt", "en"):
            raise ValueError("language must be 'pt' or 'en'")
        return v

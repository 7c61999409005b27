"""
Data models and schemas for the deadline calculator.
"""

from deadline_calculator.data.schemas import (
    ActType,
    Config,
    CountingMode,
    DeadlineRequest,
    DeadlineResult,
    Framework,
    HolidayException,
    HolidayRegistry,
    SimulationReason,
    SimulationStep,
    TimelinessRequest,
)

__all__ = [
    "ActType",
    "Config",
    "CountingMode",
    "DeadlineRequest",
    "DeadlineResult",
    "Framework",
    "HolidayException",
    "HolidayRegistry",
    "SimulationReason",
    "SimulationStep",
    "TimelinessRequest",
]

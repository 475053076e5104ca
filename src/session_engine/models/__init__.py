"""Data models for the session engine."""

from session_engine.models.athlete import Baseline, PerformanceMetrics, TimeTrial
from session_engine.models.catalog import MODALITIES, UNITS, Modality
from session_engine.models.enums import (
    DayStatus,
    DayType,
    PaceSource,
    Phase,
    PlanShape,
    is_max_effort_day,
)
from session_engine.models.interval import Interval, TargetPace
from session_engine.models.session import (
    PerformanceMetricsUpdate,
    SessionContext,
    SessionRecord,
    SessionResult,
)
from session_engine.models.workout import Block, WorkoutDefinition

__all__ = [
    "MODALITIES",
    "UNITS",
    "Baseline",
    "Block",
    "DayStatus",
    "DayType",
    "Interval",
    "Modality",
    "PaceSource",
    "PerformanceMetrics",
    "PerformanceMetricsUpdate",
    "Phase",
    "PlanShape",
    "SessionContext",
    "SessionRecord",
    "SessionResult",
    "TargetPace",
    "TimeTrial",
    "WorkoutDefinition",
    "is_max_effort_day",
]

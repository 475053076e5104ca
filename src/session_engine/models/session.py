"""Session result models — the aggregator's output and history rows."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from session_engine.models.enums import DEFAULT_PROGRAM_VERSION


@dataclass(frozen=True)
class SessionContext:
    """Identifies who a session is for and which program day it covers."""

    user_id: str
    day_number: int
    day_type: str | None
    modality: str
    session_date: date
    workout_id: int | None = None
    program_version: str = DEFAULT_PROGRAM_VERSION
    program_day_number: int | None = None


@dataclass(frozen=True)
class SessionResult:
    """Aggregated outcome of one completed session. Immutable once built.

    Paces are in baseline units per minute.
    """

    context: SessionContext
    total_output: float
    average_pace: float
    target_pace: float | None
    performance_ratio: float | None
    intervals_completed: int
    total_intervals: int
    average_heart_rate: float | None = None
    peak_heart_rate: float | None = None
    perceived_exertion: int | None = None


@dataclass(frozen=True)
class PerformanceMetricsUpdate:
    """New sample for the storage-side rolling statistics."""

    user_id: str
    day_type: str
    modality: str
    new_ratio: float | None
    new_pace: float | None
    is_max_effort: bool


@dataclass(frozen=True)
class SessionRecord:
    """A completed session read back from storage for history display."""

    id: int | None
    user_id: str
    day_type: str | None
    modality: str | None
    session_date: date | None
    total_output: float | None = None
    actual_pace: float | None = None
    target_pace: float | None = None
    performance_ratio: float | None = None
    program_day: int | None = None

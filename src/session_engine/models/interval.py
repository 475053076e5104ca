"""Interval and target pace — the planner's unit of output."""

from __future__ import annotations

from dataclasses import dataclass

from session_engine.models.enums import PaceSource


@dataclass(frozen=True)
class TargetPace:
    """Computed pacing goal for one interval.

    ``pace`` is in the baseline's units per minute. ``intensity_percent`` is
    the applied multiplier as a whole percentage of baseline.
    """

    pace: float
    units: str
    intensity_percent: int
    baseline: float
    source: PaceSource


@dataclass(frozen=True)
class Interval:
    """A single work segment, optionally followed by rest.

    Durations are in seconds. ``target_pace`` is filled by the pace
    calculator; ``work_completed`` / ``completed`` are set by the session
    timer only.
    """

    id: int
    duration: int
    rest_duration: int = 0
    day_type: str | None = None
    description: str = "Workout"
    block_number: int | None = None
    round_number: int | None = None
    pace_range: tuple[float, float] | None = None
    pace_progression: str | None = None
    is_max_effort: bool = False
    tower_index: int | None = None
    target_pace: TargetPace | None = None
    work_completed: bool = False
    completed: bool = False

    @property
    def total_seconds(self) -> int:
        """Work plus rest time."""
        return self.duration + self.rest_duration

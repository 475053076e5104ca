"""Workout definition — the stored training day a session is planned from."""

from __future__ import annotations

from dataclasses import dataclass, field

from session_engine.models.enums import (
    DEFAULT_REST_DURATION_S,
    DEFAULT_ROUNDS,
    DEFAULT_WORK_DURATION_S,
)


@dataclass(frozen=True)
class Block:
    """One parameterized sub-segment of a training day.

    Durations are in seconds. ``pace_range`` is a (min, max) multiplier pair
    applied to the user's baseline rate.
    """

    block_number: int
    work_duration: int = DEFAULT_WORK_DURATION_S
    rest_duration: int = DEFAULT_REST_DURATION_S
    rounds: int = DEFAULT_ROUNDS
    pace_range: tuple[float, float] | None = None
    pace_progression: str | None = None
    work_duration_increment: int | None = None
    rest_duration_increment: int | None = None
    is_max_effort: bool = False


@dataclass(frozen=True)
class WorkoutDefinition:
    """Immutable training day fetched for a session.

    ``day_type`` is the raw stored tag. Legacy and demo workouts carry no
    day type and are described by ``duration_min`` / ``description`` only.
    """

    day_number: int
    day_type: str | None = None
    blocks: tuple[Block, ...] = field(default_factory=tuple)
    total_work_time: int | None = None   # seconds, overrides the interval sum
    id: int | None = None
    duration_min: float | None = None
    description: str = ""
    workout_type: str | None = None      # demo label (EMOM, AMRAP, ...)

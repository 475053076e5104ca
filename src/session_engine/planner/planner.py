"""IntervalPlanner — expands a workout definition into ordered intervals.

Each PlanShape has one generator. Generators receive a single block and the
shared id counter, so interval ids run sequentially across blocks in block
order, then round order. Planning is a pure function of the definition.
"""

from __future__ import annotations

import itertools
from typing import Callable, Iterator

import numpy as np

from session_engine.math.rounding import round_half_up
from session_engine.models.enums import (
    ASCENDING_DEFAULT_INCREMENT_S,
    ATOMIC_DEFAULT_REST_S,
    ATOMIC_REST_FRACTION,
    ATOMIC_WORK_FRACTION,
    DEMO_DURATION_MIN,
    DESCENDING_DEFAULT_INCREMENT_S,
    FALLBACK_WORK_TIME_S,
    INFINITY_DEFAULT_PACE_RANGE,
    INFINITY_PACE_PROGRESSION,
    TOWER_DEFAULT_REST_S,
    TOWER_MULTIPLIERS,
    DayType,
    PlanShape,
)
from session_engine.models.interval import Interval
from session_engine.models.workout import Block, WorkoutDefinition
from session_engine.planner.day_types import display_name, shape_for

Generator = Callable[[Block, str, str, Iterator[int]], list[Interval]]

# Day types that make a continuous interval max-effort regardless of the block
_CONTINUOUS_MAX_EFFORT = frozenset({DayType.TIME_TRIAL.value, DayType.ANAEROBIC.value})


class IntervalPlanner:
    """Plans interval sequences for workout definitions.

    Usage::

        planner = IntervalPlanner()
        intervals = planner.plan(workout)
    """

    def plan(self, workout: WorkoutDefinition) -> tuple[Interval, ...]:
        """Expand *workout* into its ordered interval sequence.

        Algorithm:
        1. No day type (legacy/demo workout): one interval of
           ``duration_min`` minutes (20 by default).
        2. Resolve the day type's PlanShape and run its generator over
           every block in block order.
        3. If no block produced anything, emit one fallback interval of
           ``total_work_time`` seconds (1200 by default).

        Args:
            workout: The stored training day.

        Returns:
            Intervals in execution order, never empty.
        """
        day_type = workout.day_type
        if not day_type:
            return (self._untyped_interval(workout),)

        generator = _GENERATORS[shape_for(day_type)]
        label = display_name(day_type)
        ids = itertools.count(1)

        intervals: list[Interval] = []
        for block in sorted(workout.blocks, key=lambda b: b.block_number):
            intervals.extend(generator(block, day_type, label, ids))

        if not intervals:
            intervals.append(Interval(
                id=1,
                duration=workout.total_work_time or FALLBACK_WORK_TIME_S,
                day_type=day_type,
                description=label,
            ))
        return tuple(intervals)

    def _untyped_interval(self, workout: WorkoutDefinition) -> Interval:
        minutes = workout.duration_min or DEMO_DURATION_MIN
        return Interval(
            id=1,
            duration=round_half_up(minutes * 60),
            description=workout.description or "Workout",
        )


def plan_intervals(workout: WorkoutDefinition) -> tuple[Interval, ...]:
    """Module-level shortcut for ``IntervalPlanner().plan(workout)``."""
    return IntervalPlanner().plan(workout)


def total_work_seconds(intervals: tuple[Interval, ...] | list[Interval]) -> int:
    """Sum of work durations; rest is excluded."""
    return sum(i.duration for i in intervals)


def display_work_seconds(
    workout: WorkoutDefinition,
    intervals: tuple[Interval, ...] | list[Interval],
) -> int:
    """Work time shown to the user — the stored override wins when present."""
    if workout.total_work_time:
        return workout.total_work_time
    return total_work_seconds(intervals)


# ---------------------------------------------------------------------------
# Generators, one per PlanShape
# ---------------------------------------------------------------------------


def _continuous(block: Block, day_type: str, label: str, ids: Iterator[int]) -> list[Interval]:
    """One unbroken work interval per block, no rest."""
    return [Interval(
        id=next(ids),
        duration=block.work_duration,
        rest_duration=0,
        day_type=day_type,
        description=label,
        block_number=block.block_number,
        round_number=1,
        pace_range=block.pace_range,
        is_max_effort=day_type in _CONTINUOUS_MAX_EFFORT or block.is_max_effort,
    )]


def _towers(block: Block, day_type: str, label: str, ids: Iterator[int]) -> list[Interval]:
    """Five-step pyramid: 0.5x, 1x, 1.5x, 2x, 2.5x the block's work time."""
    rest = block.rest_duration or TOWER_DEFAULT_REST_S
    return [
        Interval(
            id=next(ids),
            duration=round_half_up(block.work_duration * multiplier),
            rest_duration=rest,
            day_type=day_type,
            description=f"{label} - Tower {index + 1}",
            block_number=block.block_number,
            round_number=index + 1,
            pace_range=block.pace_range,
            tower_index=index,
        )
        for index, multiplier in enumerate(TOWER_MULTIPLIERS)
    ]


def _atomic(block: Block, day_type: str, label: str, ids: Iterator[int]) -> list[Interval]:
    """Short bursts: 30% of the work time, 20% of the rest time."""
    work = round_half_up(block.work_duration * ATOMIC_WORK_FRACTION)
    rest = round_half_up((block.rest_duration or ATOMIC_DEFAULT_REST_S) * ATOMIC_REST_FRACTION)
    return [
        Interval(
            id=next(ids),
            duration=work,
            rest_duration=rest,
            day_type=day_type,
            description=f"{label} - Burst {i + 1}",
            block_number=block.block_number,
            round_number=i + 1,
            pace_range=block.pace_range,
        )
        for i in range(block.rounds)
    ]


def _infinity(block: Block, day_type: str, label: str, ids: Iterator[int]) -> list[Interval]:
    """Constant work/rest with a pace multiplier rising linearly over rounds."""
    low, high = block.pace_range or INFINITY_DEFAULT_PACE_RANGE
    # linspace with one point returns the start value: single round = min
    multipliers = np.linspace(low, high, num=max(block.rounds, 0))
    intervals: list[Interval] = []
    for i, multiplier in enumerate(multipliers):
        m = float(multiplier)
        intervals.append(Interval(
            id=next(ids),
            duration=block.work_duration,
            rest_duration=block.rest_duration,
            day_type=day_type,
            description=f"{label} - Round {i + 1}",
            block_number=block.block_number,
            round_number=i + 1,
            pace_range=(m, m),
            pace_progression=INFINITY_PACE_PROGRESSION,
        ))
    return intervals


def _ascending(block: Block, day_type: str, label: str, ids: Iterator[int]) -> list[Interval]:
    """Work time grows by a fixed increment each round; rest is constant."""
    increment = block.work_duration_increment or ASCENDING_DEFAULT_INCREMENT_S
    return [
        Interval(
            id=next(ids),
            duration=block.work_duration + increment * i,
            rest_duration=block.rest_duration,
            day_type=day_type,
            description=f"{label} - Round {i + 1}",
            block_number=block.block_number,
            round_number=i + 1,
            pace_range=block.pace_range,
        )
        for i in range(block.rounds)
    ]


def _descending_devour(block: Block, day_type: str, label: str, ids: Iterator[int]) -> list[Interval]:
    """Constant work; rest shrinks by a fixed increment each round, floored at 0."""
    increment = abs(block.rest_duration_increment or DESCENDING_DEFAULT_INCREMENT_S)
    return [
        Interval(
            id=next(ids),
            duration=block.work_duration,
            rest_duration=max(0, block.rest_duration - increment * i),
            day_type=day_type,
            description=f"{label} - Round {i + 1}",
            block_number=block.block_number,
            round_number=i + 1,
            pace_range=block.pace_range,
        )
        for i in range(block.rounds)
    ]


def _standard(block: Block, day_type: str, label: str, ids: Iterator[int]) -> list[Interval]:
    """Repeated constant work/rest rounds carrying the block's pacing as-is."""
    return [
        Interval(
            id=next(ids),
            duration=block.work_duration,
            rest_duration=block.rest_duration,
            day_type=day_type,
            description=f"{label} - Round {i + 1}",
            block_number=block.block_number,
            round_number=i + 1,
            pace_range=block.pace_range,
            pace_progression=block.pace_progression,
            is_max_effort=block.is_max_effort,
        )
        for i in range(block.rounds)
    ]


_GENERATORS: dict[PlanShape, Generator] = {
    PlanShape.CONTINUOUS: _continuous,
    PlanShape.TOWERS: _towers,
    PlanShape.ATOMIC: _atomic,
    PlanShape.INFINITY: _infinity,
    PlanShape.ASCENDING: _ascending,
    PlanShape.DESCENDING_DEVOUR: _descending_devour,
    PlanShape.STANDARD: _standard,
}

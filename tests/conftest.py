"""Shared test fixtures: workouts, baselines, metrics and stores."""

from __future__ import annotations

from datetime import date

import pytest

from session_engine.models.athlete import Baseline, PerformanceMetrics
from session_engine.models.workout import Block, WorkoutDefinition
from session_engine.timer.tick_source import ManualTickSource
from store_client.memory import InMemoryDataStore

USER_ID = "user-1"
TODAY = date(2026, 3, 14)


@pytest.fixture
def echo_bike_baseline() -> Baseline:
    """40 cal/min on the Echo bike (a 400 cal time trial)."""
    return Baseline(modality="echo_bike", rate=40.0, units="cal", recorded_on=date(2026, 1, 10))


@pytest.fixture
def interval_workout() -> WorkoutDefinition:
    """Day 12: 3 x (60s work / 30s rest) at 0.85-0.95 of baseline."""
    return WorkoutDefinition(
        id=112,
        day_number=12,
        day_type="interval",
        blocks=(
            Block(block_number=1, work_duration=60, rest_duration=30, rounds=3, pace_range=(0.85, 0.95)),
        ),
    )


@pytest.fixture
def towers_workout() -> WorkoutDefinition:
    return WorkoutDefinition(
        id=120,
        day_number=20,
        day_type="towers",
        blocks=(Block(block_number=1, work_duration=60, rest_duration=0),),
    )


@pytest.fixture
def time_trial_workout() -> WorkoutDefinition:
    return WorkoutDefinition(
        id=101,
        day_number=1,
        day_type="time_trial",
        blocks=(Block(block_number=1, work_duration=600),),
    )


@pytest.fixture
def interval_metrics() -> PerformanceMetrics:
    return PerformanceMetrics(
        user_id=USER_ID,
        day_type="interval",
        modality="echo_bike",
        rolling_avg_ratio=1.04,
        learned_max_pace=None,
    )


@pytest.fixture
def ticks() -> ManualTickSource:
    return ManualTickSource()


@pytest.fixture
def store(
    interval_workout: WorkoutDefinition,
    towers_workout: WorkoutDefinition,
    time_trial_workout: WorkoutDefinition,
    echo_bike_baseline: Baseline,
) -> InMemoryDataStore:
    """Connected in-memory store seeded with three days and one baseline."""
    memory = InMemoryDataStore(workouts=[interval_workout, towers_workout, time_trial_workout])
    memory.add_baseline(USER_ID, echo_bike_baseline)
    return memory

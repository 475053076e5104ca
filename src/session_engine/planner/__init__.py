"""Interval planner — expands workout definitions into timed intervals."""

from session_engine.planner.day_types import color, display_name, shape_for
from session_engine.planner.demo import demo_baseline, demo_workout
from session_engine.planner.planner import (
    IntervalPlanner,
    display_work_seconds,
    plan_intervals,
    total_work_seconds,
)

__all__ = [
    "IntervalPlanner",
    "color",
    "demo_baseline",
    "demo_workout",
    "display_name",
    "display_work_seconds",
    "plan_intervals",
    "shape_for",
    "total_work_seconds",
]

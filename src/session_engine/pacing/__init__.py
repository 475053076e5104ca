"""Pace calculator — per-interval target paces from baselines and metrics."""

from session_engine.pacing.baseline import baseline_from_time_trial, time_trial_record
from session_engine.pacing.pace_calculator import (
    annotate_targets,
    calculate_targets,
    target_pace,
)

__all__ = [
    "annotate_targets",
    "baseline_from_time_trial",
    "calculate_targets",
    "target_pace",
    "time_trial_record",
]

"""Storage row serialization for session results, metrics updates and time trials.

Converts frozen models into the flat JSON-compatible dicts the data store
accepts. All functions are pure (no I/O).
"""

from __future__ import annotations

import json

from session_engine.models.athlete import TimeTrial
from session_engine.models.session import PerformanceMetricsUpdate, SessionResult


def to_session_row(result: SessionResult) -> dict:
    """Convert a SessionResult to a ``workout_sessions`` row."""
    context = result.context
    return {
        "user_id": context.user_id,
        "program_day": context.day_number,
        "program_version": context.program_version,
        "program_day_number": (
            context.program_day_number
            if context.program_day_number is not None
            else context.day_number
        ),
        "workout_id": context.workout_id,
        "day_type": context.day_type,
        "date": context.session_date.isoformat(),
        "completed": True,
        "total_output": result.total_output,
        "actual_pace": result.average_pace,
        "target_pace": result.target_pace,
        "performance_ratio": result.performance_ratio,
        "modality": context.modality,
        "average_heart_rate": result.average_heart_rate,
        "peak_heart_rate": result.peak_heart_rate,
        "perceived_exertion": result.perceived_exertion,
        "workout_data": {
            "intervals_completed": result.intervals_completed,
            "total_intervals": result.total_intervals,
        },
    }


def to_session_row_string(result: SessionResult, indent: int = 2) -> str:
    return json.dumps(to_session_row(result), indent=indent)


def to_metrics_update_params(update: PerformanceMetricsUpdate) -> dict:
    """Parameters for the storage-side metrics blending procedure."""
    return {
        "p_user_id": update.user_id,
        "p_day_type": update.day_type,
        "p_modality": update.modality,
        "p_performance_ratio": update.new_ratio,
        "p_actual_pace": update.new_pace,
        "p_is_max_effort": update.is_max_effort,
    }


def to_time_trial_row(trial: TimeTrial) -> dict:
    return {
        "user_id": trial.user_id,
        "modality": trial.modality,
        "date": trial.trial_date.isoformat(),
        "total_output": trial.total_output,
        "units": trial.units,
        "calculated_rpm": trial.calculated_rpm,
        "duration_seconds": trial.duration_seconds,
        "is_current": trial.is_current,
    }

"""Pure functions mapping data store rows to session engine models.

No I/O. Takes raw row dicts as returned by the REST backend and returns
frozen models. Missing or malformed optional values map to None/defaults.
"""

from __future__ import annotations

import json
from datetime import date
from typing import Any, Optional

from session_engine.models.athlete import Baseline, PerformanceMetrics, TimeTrial
from session_engine.models.enums import (
    DEFAULT_REST_DURATION_S,
    DEFAULT_ROUNDS,
    DEFAULT_WORK_DURATION_S,
    MAX_BLOCKS,
    TIME_TRIAL_DURATION_S,
)
from session_engine.models.session import SessionRecord
from session_engine.models.workout import Block, WorkoutDefinition


def map_workout_row(row: dict[str, Any]) -> WorkoutDefinition:
    """Map a ``workouts`` row (with block_1_params .. block_4_params)."""
    blocks: list[Block] = []
    for number in range(1, MAX_BLOCKS + 1):
        block = map_block_params(row.get(f"block_{number}_params"), number)
        if block is not None:
            blocks.append(block)

    return WorkoutDefinition(
        id=row.get("id"),
        day_number=int(row.get("day_number") or 0),
        day_type=row.get("day_type") or None,
        blocks=tuple(blocks),
        total_work_time=_optional_int(row.get("total_work_time")),
        duration_min=_optional_float(row.get("duration")),
        description=row.get("description") or "",
        workout_type=row.get("workout_type"),
    )


def map_block_params(params: Any, block_number: int) -> Optional[Block]:
    """Map one block's parameter object; empty or missing params -> None.

    Zero or missing durations and rounds fall back to the defaults.
    """
    if isinstance(params, str):
        try:
            params = json.loads(params)
        except ValueError:
            return None
    if not isinstance(params, dict) or not params:
        return None

    return Block(
        block_number=block_number,
        work_duration=_optional_int(params.get("workDuration")) or DEFAULT_WORK_DURATION_S,
        rest_duration=_optional_int(params.get("restDuration")) or DEFAULT_REST_DURATION_S,
        rounds=_optional_int(params.get("rounds")) or DEFAULT_ROUNDS,
        pace_range=_pace_range(params.get("paceRange")),
        pace_progression=params.get("paceProgression") or None,
        work_duration_increment=_optional_int(params.get("workDurationIncrement")),
        rest_duration_increment=_optional_int(params.get("restDurationIncrement")),
        is_max_effort=bool(params.get("isMaxEffort", False)),
    )


def map_baseline_row(row: dict[str, Any], modality: str) -> Optional[Baseline]:
    """Map a ``time_trials`` row; rows without a calculated rate -> None."""
    rate = _optional_float(row.get("calculated_rpm"))
    if not rate:
        return None
    return Baseline(
        modality=row.get("modality") or modality,
        rate=rate,
        units=row.get("units") or "",
        recorded_on=parse_date(row.get("date")),
    )


def map_time_trial_row(row: dict[str, Any]) -> TimeTrial:
    """Map a ``time_trials`` row; ``created_at`` stands in for a missing date."""
    return TimeTrial(
        user_id=str(row.get("user_id") or ""),
        modality=row.get("modality") or "",
        total_output=_optional_float(row.get("total_output")) or 0.0,
        units=row.get("units") or "",
        calculated_rpm=_optional_float(row.get("calculated_rpm")) or 0.0,
        trial_date=parse_date(row.get("date")) or parse_date(row.get("created_at")),
        duration_seconds=_optional_int(row.get("duration_seconds")) or TIME_TRIAL_DURATION_S,
        is_current=bool(row.get("is_current", False)),
    )


def map_metrics_row(row: dict[str, Any]) -> PerformanceMetrics:
    return PerformanceMetrics(
        user_id=str(row.get("user_id") or ""),
        day_type=row.get("day_type") or "",
        modality=row.get("modality") or "",
        rolling_avg_ratio=_optional_float(row.get("rolling_avg_ratio")),
        learned_max_pace=_optional_float(row.get("learned_max_pace")),
    )


def map_session_row(row: dict[str, Any]) -> SessionRecord:
    """Map a ``workout_sessions`` row; ``created_at`` stands in for a missing date."""
    return SessionRecord(
        id=row.get("id"),
        user_id=str(row.get("user_id") or ""),
        day_type=row.get("day_type"),
        modality=row.get("modality"),
        session_date=parse_date(row.get("date")) or parse_date(row.get("created_at")),
        total_output=_optional_float(row.get("total_output")),
        actual_pace=_optional_float(row.get("actual_pace")),
        target_pace=_optional_float(row.get("target_pace")),
        performance_ratio=_optional_float(row.get("performance_ratio")),
        program_day=_optional_int(_first_present(row, "program_day", "day_number", "workout_day")),
    )


def parse_date(value: Any) -> Optional[date]:
    """Parse YYYY-MM-DD or an ISO timestamp; anything else -> None."""
    if isinstance(value, date):
        return value
    if not value or not isinstance(value, str):
        return None
    text = value.strip()[:10]
    try:
        return date.fromisoformat(text)
    except ValueError:
        return None


# ---------------------------------------------------------------------------
# Internal converters (None in, None out)
# ---------------------------------------------------------------------------


def _pace_range(value: Any) -> Optional[tuple[float, float]]:
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        return None
    low, high = (_optional_float(v) for v in value)
    if low is None or high is None:
        return None
    return (low, high)


def _optional_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _optional_int(value: Any) -> Optional[int]:
    number = _optional_float(value)
    return int(round(number)) if number is not None else None


def _first_present(row: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if row.get(key) is not None:
            return row[key]
    return None

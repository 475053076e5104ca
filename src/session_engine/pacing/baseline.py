"""Time-trial baselines — units per minute from a 10-minute maximal effort."""

from __future__ import annotations

from datetime import date

from session_engine.errors import ValidationError
from session_engine.models.athlete import Baseline, TimeTrial
from session_engine.models.catalog import UNITS
from session_engine.models.enums import TIME_TRIAL_DURATION_S


def baseline_from_time_trial(
    total_output: float,
    units: str,
    modality: str,
    duration_seconds: int = TIME_TRIAL_DURATION_S,
    recorded_on: date | None = None,
) -> Baseline:
    """Convert a time-trial score into a per-minute baseline.

    A 10-minute trial scoring 455 cal gives a baseline of 45.5 cal/min.

    Raises:
        ValidationError: score is not a positive number, or units are unknown.
    """
    if isinstance(total_output, bool) or not isinstance(total_output, (int, float)):
        raise ValidationError("total_output", total_output, "must be a number")
    if total_output <= 0:
        raise ValidationError("total_output", total_output, "must be positive")
    if units not in UNITS:
        raise ValidationError("units", units, f"must be one of {sorted(UNITS)}")
    if duration_seconds <= 0:
        raise ValidationError("duration_seconds", duration_seconds, "must be positive")

    return Baseline(
        modality=modality,
        rate=total_output / (duration_seconds / 60),
        units=units,
        recorded_on=recorded_on,
    )


def time_trial_record(
    user_id: str,
    baseline: Baseline,
    total_output: float,
    duration_seconds: int = TIME_TRIAL_DURATION_S,
) -> TimeTrial:
    """Build the stored record for a time trial that produced *baseline*."""
    return TimeTrial(
        user_id=user_id,
        modality=baseline.modality,
        total_output=total_output,
        units=baseline.units,
        calculated_rpm=baseline.rate,
        trial_date=baseline.recorded_on or date.today(),
        duration_seconds=duration_seconds,
        is_current=True,
    )

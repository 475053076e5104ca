"""Demonstration workout and baselines used when no data store is available."""

from __future__ import annotations

from datetime import date

from session_engine.models.athlete import Baseline
from session_engine.models.workout import WorkoutDefinition

_DEMO_WORKOUT_TYPES = ("EMOM", "AMRAP", "Conditioning")

# Typical 10-minute time-trial rates by modality (units per minute)
_DEMO_BASELINES: dict[str, tuple[float, str]] = {
    "c2_row_erg": (45.5, "cal"),
    "echo_bike": (38.2, "cal"),
    "assault_bike": (42.1, "cal"),
    "c2_bike_erg": (35.8, "watts"),
    "c2_ski_erg": (28.5, "cal"),
    "outdoor_run": (6.2, "mph"),
    "motorized_treadmill": (6.5, "mph"),
}
_DEFAULT_DEMO_BASELINE = (40.0, "cal")


def demo_workout(day_number: int) -> WorkoutDefinition:
    """Untyped sample workout; 15-24 minutes depending on the day."""
    workout_type = _DEMO_WORKOUT_TYPES[day_number % len(_DEMO_WORKOUT_TYPES)]
    return WorkoutDefinition(
        id=day_number,
        day_number=day_number,
        workout_type=workout_type,
        duration_min=15 + (day_number % 10),
        description=f"{workout_type} workout for Day {day_number}",
    )


def demo_baseline(modality: str, today: date | None = None) -> Baseline:
    rate, units = _DEMO_BASELINES.get(modality, _DEFAULT_DEMO_BASELINE)
    return Baseline(
        modality=modality,
        rate=rate,
        units=units,
        recorded_on=today or date.today(),
    )

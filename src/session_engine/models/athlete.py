"""Per-user performance inputs: time-trial baselines and learned metrics."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from session_engine.models.enums import TIME_TRIAL_DURATION_S


@dataclass(frozen=True)
class Baseline:
    """Measured output rate for one modality (units per minute)."""

    modality: str
    rate: float
    units: str
    recorded_on: date | None = None


@dataclass(frozen=True)
class PerformanceMetrics:
    """Historical feedback for a (user, day type, modality) triple.

    ``rolling_avg_ratio`` smooths past actual/target pace ratios;
    ``learned_max_pace`` is the best observed max-effort pace.
    """

    user_id: str
    day_type: str
    modality: str
    rolling_avg_ratio: float | None = None
    learned_max_pace: float | None = None


@dataclass(frozen=True)
class TimeTrial:
    """A completed baseline time trial as stored."""

    user_id: str
    modality: str
    total_output: float
    units: str
    calculated_rpm: float
    trial_date: date
    duration_seconds: int = TIME_TRIAL_DURATION_S
    is_current: bool = True

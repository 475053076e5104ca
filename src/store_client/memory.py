"""In-memory DataStore for tests, demos and offline runs."""

from __future__ import annotations

import dataclasses
import itertools
import logging
from datetime import date

from session_engine.models.athlete import Baseline, PerformanceMetrics, TimeTrial
from session_engine.models.enums import PREVIOUS_TRIALS_LIMIT
from session_engine.models.session import (
    PerformanceMetricsUpdate,
    SessionRecord,
    SessionResult,
)
from session_engine.models.workout import WorkoutDefinition
from store_client.base import DataStore
from store_client.blending import blend_metrics
from store_client.exceptions import NotFoundError, StorageError

logger = logging.getLogger(__name__)


class InMemoryDataStore(DataStore):
    """Dict-backed store. Metrics updates are blended locally.

    Usage::

        store = InMemoryDataStore(workouts=[workout])
        store.add_baseline("user-1", Baseline("echo_bike", 38.2, "cal"))
    """

    def __init__(
        self,
        workouts: list[WorkoutDefinition] | None = None,
        connected: bool = True,
    ) -> None:
        self.connected = connected
        self.workouts: dict[int, WorkoutDefinition] = {
            w.day_number: w for w in (workouts or [])
        }
        self.baselines: dict[tuple[str, str], Baseline] = {}
        self.metrics: dict[tuple[str, str, str], PerformanceMetrics] = {}
        self.sessions: list[SessionRecord] = []
        self.time_trials: list[TimeTrial] = []
        self.program_versions: dict[str, str] = {}
        self.program_days: dict[tuple[int, str], int] = {}
        self.current_days: dict[str, int] = {}
        self.metrics_updates: list[PerformanceMetricsUpdate] = []
        self._session_ids = itertools.count(1)

    def is_connected(self) -> bool:
        return self.connected

    # ------------------------------------------------------------------
    # Seeding helpers
    # ------------------------------------------------------------------

    def add_workout(self, workout: WorkoutDefinition) -> None:
        self.workouts[workout.day_number] = workout

    def add_baseline(self, user_id: str, baseline: Baseline) -> None:
        self.baselines[(user_id, baseline.modality)] = baseline

    def add_metrics(self, metrics: PerformanceMetrics) -> None:
        self.metrics[(metrics.user_id, metrics.day_type, metrics.modality)] = metrics

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def fetch_workout_definition(self, day_number: int) -> WorkoutDefinition:
        self._check_connected()
        try:
            return self.workouts[day_number]
        except KeyError:
            raise NotFoundError("workout", day_number) from None

    def fetch_baseline(self, user_id: str, modality: str) -> Baseline:
        self._check_connected()
        try:
            return self.baselines[(user_id, modality)]
        except KeyError:
            raise NotFoundError("baseline", f"{user_id}/{modality}") from None

    def fetch_performance_metrics(
        self, user_id: str, day_type: str, modality: str,
    ) -> PerformanceMetrics:
        self._check_connected()
        try:
            return self.metrics[(user_id, day_type, modality)]
        except KeyError:
            raise NotFoundError(
                "performance metrics", f"{user_id}/{day_type}/{modality}",
            ) from None

    def fetch_completed_sessions(self, user_id: str) -> list[SessionRecord]:
        self._check_connected()
        return [s for s in self.sessions if s.user_id == user_id]

    def fetch_program_version(self, user_id: str) -> str | None:
        self._check_connected()
        return self.program_versions.get(user_id)

    def fetch_program_day_number(self, day_number: int, program_version: str) -> int | None:
        self._check_connected()
        return self.program_days.get((day_number, program_version))

    def fetch_current_day(self, user_id: str) -> int | None:
        self._check_connected()
        return self.current_days.get(user_id)

    def fetch_previous_baselines(
        self, user_id: str, modality: str, limit: int = PREVIOUS_TRIALS_LIMIT,
    ) -> list[TimeTrial]:
        self._check_connected()
        # Later inserts win ties on the same date.
        trials = [t for t in reversed(self.time_trials) if t.user_id == user_id and t.modality == modality]
        trials.sort(key=lambda t: t.trial_date or date.min, reverse=True)
        return trials[:limit]

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def persist_session_result(self, result: SessionResult) -> None:
        self._check_connected()
        context = result.context
        self.sessions.append(SessionRecord(
            id=next(self._session_ids),
            user_id=context.user_id,
            day_type=context.day_type,
            modality=context.modality,
            session_date=context.session_date,
            total_output=result.total_output,
            actual_pace=result.average_pace,
            target_pace=result.target_pace,
            performance_ratio=result.performance_ratio,
            program_day=context.day_number,
        ))
        logger.debug("Stored session %d for %s", len(self.sessions), context.user_id)

    def persist_performance_metrics_update(self, update: PerformanceMetricsUpdate) -> None:
        self._check_connected()
        key = (update.user_id, update.day_type, update.modality)
        self.metrics[key] = blend_metrics(self.metrics.get(key), update)
        self.metrics_updates.append(update)

    def persist_time_trial(self, trial: TimeTrial) -> None:
        self._check_connected()
        self.time_trials = [
            dataclasses.replace(t, is_current=False)
            if t.user_id == trial.user_id and t.modality == trial.modality else t
            for t in self.time_trials
        ]
        self.time_trials.append(trial)
        self.baselines[(trial.user_id, trial.modality)] = Baseline(
            modality=trial.modality,
            rate=trial.calculated_rpm,
            units=trial.units,
            recorded_on=trial.trial_date,
        )

    def _check_connected(self) -> None:
        if not self.connected:
            raise StorageError("Data store is not connected")

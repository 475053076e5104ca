"""DataStore — the narrow read/write contract the session engine depends on."""

from __future__ import annotations

from abc import ABC, abstractmethod

from session_engine.models.athlete import Baseline, PerformanceMetrics, TimeTrial
from session_engine.models.enums import PREVIOUS_TRIALS_LIMIT
from session_engine.models.session import (
    PerformanceMetricsUpdate,
    SessionRecord,
    SessionResult,
)
from session_engine.models.workout import WorkoutDefinition


class DataStore(ABC):
    """Storage collaborator injected into a TrainingSession.

    Lookups raise ``NotFoundError`` when a connected store has no matching
    row and ``StorageError`` when the backend fails. Writes are attempted
    once; retrying is the caller's decision.
    """

    @abstractmethod
    def is_connected(self) -> bool:
        """Whether the store can be used at all (credentials present)."""

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @abstractmethod
    def fetch_workout_definition(self, day_number: int) -> WorkoutDefinition:
        """Training day definition for *day_number*."""

    @abstractmethod
    def fetch_baseline(self, user_id: str, modality: str) -> Baseline:
        """Current time-trial baseline for the user on *modality*."""

    @abstractmethod
    def fetch_performance_metrics(
        self, user_id: str, day_type: str, modality: str,
    ) -> PerformanceMetrics:
        """Learned metrics for one (user, day type, modality)."""

    @abstractmethod
    def fetch_completed_sessions(self, user_id: str) -> list[SessionRecord]:
        """Every completed session of the user, unordered."""

    @abstractmethod
    def fetch_program_version(self, user_id: str) -> str | None:
        """The user's program version ("5-day", "3-day"), if set."""

    @abstractmethod
    def fetch_program_day_number(self, day_number: int, program_version: str) -> int | None:
        """Position of source day *day_number* within *program_version*."""

    @abstractmethod
    def fetch_current_day(self, user_id: str) -> int | None:
        """The program day the user has progressed to, if recorded."""

    @abstractmethod
    def fetch_previous_baselines(
        self, user_id: str, modality: str, limit: int = PREVIOUS_TRIALS_LIMIT,
    ) -> list[TimeTrial]:
        """Up to *limit* time trials on *modality*, newest first."""

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    @abstractmethod
    def persist_session_result(self, result: SessionResult) -> None:
        """Store a completed session."""

    @abstractmethod
    def persist_performance_metrics_update(self, update: PerformanceMetricsUpdate) -> None:
        """Fold a new sample into the stored rolling metrics."""

    @abstractmethod
    def persist_time_trial(self, trial: TimeTrial) -> None:
        """Store a time trial and make it the current baseline."""

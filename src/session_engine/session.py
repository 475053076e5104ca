"""TrainingSession — wires planner, pace calculator, timer and aggregator to a store.

One TrainingSession covers one user on one training day. It fetches the
workout, plans its intervals, paces them for the chosen modality, runs the
timer and finally aggregates and persists the result.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Callable, Iterable

from session_engine.aggregation.aggregator import SessionAggregator, metrics_update_for
from session_engine.errors import PreconditionError
from session_engine.history import (
    HistorySummary,
    program_calendar,
    summarize_history,
    workout_history,
)
from session_engine.models.athlete import Baseline, PerformanceMetrics
from session_engine.models.enums import DEFAULT_PROGRAM_VERSION, DayStatus
from session_engine.models.interval import Interval
from session_engine.models.session import (
    PerformanceMetricsUpdate,
    SessionContext,
    SessionRecord,
    SessionResult,
)
from session_engine.models.workout import WorkoutDefinition
from session_engine.pacing.baseline import baseline_from_time_trial, time_trial_record
from session_engine.pacing.pace_calculator import calculate_targets
from session_engine.planner.demo import demo_baseline, demo_workout
from session_engine.planner.planner import IntervalPlanner, display_work_seconds
from session_engine.timer.session_timer import SessionTimer, StateListener
from session_engine.timer.states import Idle
from session_engine.timer.tick_source import TickSource
from store_client.base import DataStore
from store_client.exceptions import NotFoundError

logger = logging.getLogger(__name__)

_THREE_DAY_PROGRAM = "3-day"


class TrainingSession:
    """Runs a single training day for a single user.

    Usage::

        session = TrainingSession(store, user_id, day_number=12, tick_source=ticks)
        session.load()
        session.select_modality("echo_bike")
        session.start()
        ...
        result = session.submit_results(total_output=312, perceived_exertion=8)
    """

    def __init__(
        self,
        store: DataStore | None,
        user_id: str,
        day_number: int,
        tick_source: TickSource,
        planner: IntervalPlanner | None = None,
        on_change: StateListener | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._store = store
        self.user_id = user_id
        self.day_number = day_number
        self._ticks = tick_source
        self._planner = planner or IntervalPlanner()
        self._on_change = on_change
        self._today = today

        self.workout: WorkoutDefinition | None = None
        self.timer: SessionTimer | None = None
        self.modality: str | None = None
        self.baseline: Baseline | None = None
        self.metrics: PerformanceMetrics | None = None
        self.history: list[SessionRecord] = []
        self.result: SessionResult | None = None
        self._pending_update: PerformanceMetricsUpdate | None = None
        self.demo_mode = False

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    @property
    def connected(self) -> bool:
        return self._store is not None and self._store.is_connected()

    def load(self) -> tuple[Interval, ...]:
        """Fetch the workout and plan its intervals.

        Falls back to a demo workout only when there is no usable store.

        Raises:
            NotFoundError: the connected store has no workout for the day.
            StorageError: the store failed.
        """
        if self.connected:
            self.workout = self._store.fetch_workout_definition(self.day_number)
            self.demo_mode = False
        else:
            logger.warning("No data store connected, using demo workout for day %d", self.day_number)
            self.workout = demo_workout(self.day_number)
            self.demo_mode = True

        intervals = self._planner.plan(self.workout)
        self.timer = SessionTimer(intervals, self._ticks, on_change=self._on_change)
        self.result = None
        self._pending_update = None
        logger.info(
            "Planned %d intervals for day %d (%s)",
            len(intervals),
            self.day_number,
            self.workout.day_type or "untyped",
        )
        return intervals

    def select_modality(self, modality: str) -> None:
        """Choose equipment; loads baseline, metrics and history, then repaces.

        A missing baseline is not an error here; ``start`` refuses to run
        without one.
        """
        timer = self._require_timer("select a modality")
        if not isinstance(timer.state, Idle):
            raise PreconditionError("select a modality", "the session has already started")

        # Nothing changes unless all three loads succeed.
        baseline = self._load_baseline(modality)
        metrics = self._load_metrics(modality)
        history = self._load_history(modality)

        self.modality = modality
        self.baseline = baseline
        self.metrics = metrics
        self.history = history
        self.recalculate_targets()

    def update_baseline(self, baseline: Baseline) -> None:
        """Swap in a fresh baseline (e.g. after a new time trial) and repace."""
        self.baseline = baseline
        self.recalculate_targets()

    def update_metrics(self, metrics: PerformanceMetrics | None) -> None:
        self.metrics = metrics
        self.recalculate_targets()

    def recalculate_targets(self) -> None:
        """Recompute every interval's target pace from current inputs."""
        timer = self._require_timer("calculate targets")
        targets = calculate_targets(
            timer.intervals, self.baseline, self.metrics, self.day_type,
        )
        timer.retarget(targets)

    # ------------------------------------------------------------------
    # Timer controls
    # ------------------------------------------------------------------

    def start(self) -> None:
        self._require_timer("start").start(self.modality, self.baseline)

    def pause(self) -> None:
        self._require_timer("pause").pause()

    def resume(self) -> None:
        self._require_timer("resume").resume()

    def skip_to_end(self) -> None:
        self._require_timer("skip to end").skip_to_end()

    def complete(self) -> None:
        self._require_timer("complete").complete()

    def reset(self) -> None:
        self._require_timer("reset").reset()
        self.result = None
        self._pending_update = None

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------

    def submit_results(
        self,
        total_output: Any,
        average_heart_rate: Any = None,
        peak_heart_rate: Any = None,
        perceived_exertion: Any = None,
    ) -> SessionResult:
        """Aggregate the finished session and persist it.

        A session is submitted once. The result is kept as soon as its row
        is stored, so a failed metrics update cannot be resubmitted into a
        second row. ``send_pending_metrics_update`` sends it again.

        Raises:
            PreconditionError: the session is not completed, has no modality,
                or was already submitted.
            ValidationError: total output is invalid.
            StorageError: the store rejected the write (not retried).
        """
        timer = self._require_timer("submit results")
        if self.result is not None:
            raise PreconditionError("submit results", "results already submitted")
        if not timer.is_completed:
            raise PreconditionError("submit results", "the session is not completed")
        if not self.modality:
            raise PreconditionError("submit results", "no modality selected")

        context = self._build_context()
        result = SessionAggregator(context).finalize(
            timer.intervals,
            total_output,
            average_heart_rate,
            peak_heart_rate,
            perceived_exertion,
        )

        if not self.connected:
            logger.warning("Demo mode: session result for day %d not saved", self.day_number)
            self.result = result
            return result

        self._store.persist_session_result(result)
        self.result = result

        update = metrics_update_for(result)
        if update is None:
            logger.info("No performance ratio measured; metrics not updated")
            return result
        self._pending_update = update
        self.send_pending_metrics_update()
        return result

    def send_pending_metrics_update(self) -> None:
        """Send the metrics update left over from a failed submission.

        Does nothing when no update is pending.

        Raises:
            StorageError: the store rejected the write again.
        """
        if self._pending_update is None:
            return
        self._store.persist_performance_metrics_update(self._pending_update)
        self._pending_update = None

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    @property
    def day_type(self) -> str | None:
        return self.workout.day_type if self.workout is not None else None

    @property
    def total_work_seconds(self) -> int:
        timer = self._require_timer("read work time")
        return display_work_seconds(self.workout, timer.intervals)

    def history_summary(self) -> HistorySummary:
        return summarize_history(self.history)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_timer(self, action: str) -> SessionTimer:
        if self.timer is None:
            raise PreconditionError(action, "no workout loaded")
        return self.timer

    def _load_baseline(self, modality: str) -> Baseline | None:
        if not self.connected:
            return demo_baseline(modality, self._today())
        try:
            return self._store.fetch_baseline(self.user_id, modality)
        except NotFoundError:
            logger.warning("No baseline for %s; a time trial is needed first", modality)
            return None

    def _load_metrics(self, modality: str) -> PerformanceMetrics | None:
        if not self.connected or not self.day_type:
            return None
        try:
            return self._store.fetch_performance_metrics(self.user_id, self.day_type, modality)
        except NotFoundError:
            logger.info("No performance metrics yet for %s/%s", self.day_type, modality)
            return None

    def _load_history(self, modality: str) -> list[SessionRecord]:
        if not self.connected or not self.day_type:
            return []
        sessions = self._store.fetch_completed_sessions(self.user_id)
        return workout_history(sessions, modality, self.day_type)

    def _build_context(self) -> SessionContext:
        program_version = DEFAULT_PROGRAM_VERSION
        program_day_number = self.day_number
        if self.connected:
            program_version = self._store.fetch_program_version(self.user_id) or DEFAULT_PROGRAM_VERSION
            if program_version == _THREE_DAY_PROGRAM:
                mapped = self._store.fetch_program_day_number(self.day_number, program_version)
                if mapped is not None:
                    program_day_number = mapped

        return SessionContext(
            user_id=self.user_id,
            day_number=self.day_number,
            day_type=self.day_type,
            modality=self.modality or "",
            session_date=self._today(),
            workout_id=self.workout.id if self.workout is not None else None,
            program_version=program_version,
            program_day_number=program_day_number,
        )


def record_time_trial(
    store: DataStore,
    user_id: str,
    modality: str,
    total_output: float,
    units: str,
    today: date | None = None,
) -> Baseline:
    """Turn a 10-minute time-trial score into a stored baseline.

    Raises:
        ValidationError: invalid score or units.
        StorageError: the store rejected the write.
    """
    baseline = baseline_from_time_trial(
        total_output, units, modality, recorded_on=today or date.today(),
    )
    store.persist_time_trial(time_trial_record(user_id, baseline, total_output))
    return baseline


def load_program_calendar(
    store: DataStore,
    user_id: str,
    day_numbers: Iterable[int],
) -> dict[int, DayStatus]:
    """Completed/current/available/locked status for each program day.

    Raises:
        StorageError: the store failed.
    """
    current_day = store.fetch_current_day(user_id)
    sessions = store.fetch_completed_sessions(user_id)
    return program_calendar(day_numbers, sessions, current_day)

"""TimeTrialSession: the 10-minute maximal-effort countdown that sets a baseline.

The countdown is a SessionTimer over one max-effort interval, so start,
pause, resume, skip and reset behave exactly like a training day. The
score entered afterwards becomes the new baseline for the modality.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Callable

from session_engine.aggregation.validation import parse_total_output
from session_engine.errors import PreconditionError
from session_engine.math.rounding import round_half_up
from session_engine.models.athlete import Baseline, TimeTrial
from session_engine.models.enums import TIME_TRIAL_DURATION_S, DayType
from session_engine.models.interval import Interval
from session_engine.session import record_time_trial
from session_engine.timer.session_timer import SessionTimer, StateListener
from session_engine.timer.states import Idle
from session_engine.timer.tick_source import TickSource
from store_client.base import DataStore

logger = logging.getLogger(__name__)


def time_trial_interval(duration_seconds: int = TIME_TRIAL_DURATION_S) -> Interval:
    return Interval(
        id=1,
        duration=duration_seconds,
        day_type=DayType.TIME_TRIAL.value,
        description="Time Trial",
        is_max_effort=True,
    )


class TimeTrialSession:
    """Runs one baseline time trial for one user on one modality.

    Usage::

        trial = TimeTrialSession(store, user_id, "echo_bike", ticks)
        trial.start()
        ...
        baseline = trial.submit_score(455, "cal")
    """

    def __init__(
        self,
        store: DataStore | None,
        user_id: str,
        modality: str,
        tick_source: TickSource,
        on_change: StateListener | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._store = store
        self.user_id = user_id
        self.modality = modality
        self._today = today
        self.timer = SessionTimer(
            [time_trial_interval()], tick_source, on_change=on_change, needs_baseline=False,
        )
        self.baseline: Baseline | None = None

    @property
    def connected(self) -> bool:
        return self._store is not None and self._store.is_connected()

    @property
    def seconds_remaining(self) -> int:
        return self.timer.seconds_remaining

    @property
    def progress_percent(self) -> int:
        """Share of the 10 minutes elapsed; 100 once finished or skipped."""
        if self.timer.is_completed:
            return 100
        return round_half_up(self.timer.elapsed_work_seconds / TIME_TRIAL_DURATION_S * 100)

    def select_modality(self, modality: str) -> None:
        if not isinstance(self.timer.state, Idle):
            raise PreconditionError("select a modality", "the time trial has already started")
        self.modality = modality

    def start(self) -> None:
        self.timer.start(self.modality, None)

    def pause(self) -> None:
        self.timer.pause()

    def resume(self) -> None:
        self.timer.resume()

    def skip_to_end(self) -> None:
        self.timer.skip_to_end()

    def reset(self) -> None:
        """Back to a full 10 minutes; a computed baseline is discarded."""
        self.timer.reset()
        self.baseline = None

    def submit_score(self, total_output: Any, units: str) -> Baseline:
        """Store the trial score and return the baseline it sets.

        Raises:
            PreconditionError: the countdown is not finished, the score was
                already submitted, or no data store is connected.
            ValidationError: invalid score or units.
            StorageError: the store rejected the write.
        """
        if not self.timer.is_completed:
            raise PreconditionError("submit time trial", "the time trial is not completed")
        if self.baseline is not None:
            raise PreconditionError("submit time trial", "score already submitted")
        if not self.connected:
            raise PreconditionError("submit time trial", "no data store connected")

        score = parse_total_output(total_output)
        self.baseline = record_time_trial(
            self._store, self.user_id, self.modality, score, units, today=self._today(),
        )
        logger.info(
            "Time trial on %s: %.1f %s/min", self.modality, self.baseline.rate, self.baseline.units,
        )
        return self.baseline

    def previous_baselines(self) -> list[TimeTrial]:
        """Recent trials on this modality, newest first; empty when offline."""
        if not self.connected:
            return []
        return self._store.fetch_previous_baselines(self.user_id, self.modality)

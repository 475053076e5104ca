"""SessionTimer — work/rest countdown state machine over planned intervals.

States: Idle -> Running <-> Paused -> Completed, with reset() from anywhere
back to Idle. The timer exclusively owns interval completion flags; callers
drive it only through its transition methods.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Callable, Sequence

from session_engine.errors import InvalidTransitionError, PreconditionError
from session_engine.math.rounding import round_half_up
from session_engine.models.athlete import Baseline
from session_engine.models.enums import Phase
from session_engine.models.interval import Interval, TargetPace
from session_engine.timer.states import (
    Completed,
    Idle,
    Paused,
    Running,
    TimerState,
    state_name,
)
from session_engine.timer.tick_source import TickSource

logger = logging.getLogger(__name__)

StateListener = Callable[[TimerState], None]


class SessionTimer:
    """Runs an interval sequence one tick per second.

    Usage::

        timer = SessionTimer(intervals, ManualTickSource())
        timer.start("echo_bike", baseline)
        ...
        timer.pause(); timer.resume(); timer.skip_to_end()
    """

    def __init__(
        self,
        intervals: Sequence[Interval],
        tick_source: TickSource,
        on_change: StateListener | None = None,
        needs_baseline: bool = True,
    ) -> None:
        if not intervals:
            raise ValueError("SessionTimer needs at least one interval")
        self._intervals: list[Interval] = [_cleared(i) for i in intervals]
        self._ticks = tick_source
        self._on_change = on_change
        self._needs_baseline = needs_baseline
        self._elapsed_work_seconds = 0
        self._state: TimerState = self._initial_state()

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def state(self) -> TimerState:
        return self._state

    @property
    def intervals(self) -> tuple[Interval, ...]:
        return tuple(self._intervals)

    @property
    def is_completed(self) -> bool:
        return isinstance(self._state, Completed)

    @property
    def interval_index(self) -> int:
        if isinstance(self._state, Completed):
            return len(self._intervals)
        return self._state.interval_index

    @property
    def current_interval(self) -> Interval | None:
        """Interval being worked or rested; None once completed."""
        if isinstance(self._state, Completed):
            return None
        return self._intervals[self._state.interval_index]

    @property
    def current_target(self) -> TargetPace | None:
        interval = self.current_interval
        return interval.target_pace if interval is not None else None

    @property
    def phase(self) -> Phase | None:
        if isinstance(self._state, Completed):
            return None
        return self._state.phase

    @property
    def seconds_remaining(self) -> int:
        if isinstance(self._state, Completed):
            return 0
        return self._state.seconds_remaining

    @property
    def elapsed_work_seconds(self) -> int:
        """Work-phase seconds ticked since the last reset."""
        return self._elapsed_work_seconds

    @property
    def progress_percent(self) -> int:
        done = sum(1 for i in self._intervals if i.completed)
        return round_half_up(done / len(self._intervals) * 100)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def start(self, modality: str | None, baseline: Baseline | None) -> None:
        """Idle -> Running. Needs a modality and a baseline for it.

        A timer built with ``needs_baseline=False`` (a time trial) starts
        without a baseline.

        Raises:
            InvalidTransitionError: the timer is not idle.
            PreconditionError: no modality, or no baseline for it.
        """
        self._require(Idle, "start")
        if not modality:
            raise PreconditionError("start", "no modality selected")
        if baseline is None and self._needs_baseline:
            raise PreconditionError(
                "start", f"no baseline for {modality}; complete a time trial first",
            )

        self._ticks.start(self.tick)
        self._enter_work(0)
        logger.info("Session started: %d intervals on %s", len(self._intervals), modality)
        self._notify()

    def tick(self) -> None:
        """Advance one second. Ignored unless running."""
        state = self._state
        if not isinstance(state, Running):
            return

        if state.phase == Phase.WORK:
            self._elapsed_work_seconds += 1
        remaining = state.seconds_remaining - 1
        if remaining > 0:
            self._state = dataclasses.replace(state, seconds_remaining=remaining)
        else:
            self._complete_phase(state)
        self._notify()

    def pause(self) -> None:
        """Running -> Paused, freezing the remaining time."""
        state = self._require(Running, "pause")
        self._ticks.stop()
        self._state = Paused(state.phase, state.interval_index, state.seconds_remaining)
        logger.debug("Paused at interval %d, %ds left", state.interval_index, state.seconds_remaining)
        self._notify()

    def resume(self) -> None:
        """Paused -> Running from the frozen remaining time."""
        state = self._require(Paused, "resume")
        self._state = Running(state.phase, state.interval_index, state.seconds_remaining)
        self._ticks.start(self.tick)
        logger.debug("Resumed at interval %d, %ds left", state.interval_index, state.seconds_remaining)
        self._notify()

    def skip_to_end(self) -> None:
        """Mark every interval done and complete immediately.

        Leaves the same aggregate state as natural completion, whatever the
        phase at the time of the call.
        """
        if isinstance(self._state, Completed):
            raise InvalidTransitionError("skip to end", state_name(self._state))
        self._intervals = [
            dataclasses.replace(i, work_completed=True, completed=True)
            for i in self._intervals
        ]
        self._finish(skipped=True)

    complete = skip_to_end

    def reset(self) -> None:
        """Any state -> Idle with all flags and counters cleared."""
        self._ticks.stop()
        self._intervals = [_cleared(i) for i in self._intervals]
        self._elapsed_work_seconds = 0
        self._state = self._initial_state()
        logger.debug("Session reset")
        self._notify()

    def retarget(self, targets: Sequence[TargetPace | None]) -> None:
        """Replace every interval's target pace, keeping completion flags."""
        if len(targets) != len(self._intervals):
            raise ValueError(
                f"Expected {len(self._intervals)} targets, got {len(targets)}"
            )
        self._intervals = [
            dataclasses.replace(interval, target_pace=target)
            for interval, target in zip(self._intervals, targets)
        ]

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _complete_phase(self, state: Running) -> None:
        index = state.interval_index
        interval = self._intervals[index]

        if state.phase == Phase.WORK and interval.rest_duration > 0:
            self._intervals[index] = dataclasses.replace(interval, work_completed=True)
            self._state = Running(Phase.REST, index, interval.rest_duration)
            return

        self._intervals[index] = dataclasses.replace(
            interval, work_completed=True, completed=True,
        )
        self._enter_work(index + 1)

    def _enter_work(self, index: int) -> None:
        """Run the work phase of interval *index*, passing over empty phases.

        A zero-second phase is complete on entry, so it never costs a tick
        or counts toward elapsed work time.
        """
        while index < len(self._intervals):
            interval = self._intervals[index]
            if interval.duration > 0:
                self._state = Running(Phase.WORK, index, interval.duration)
                return
            if interval.rest_duration > 0:
                self._intervals[index] = dataclasses.replace(interval, work_completed=True)
                self._state = Running(Phase.REST, index, interval.rest_duration)
                return
            self._intervals[index] = dataclasses.replace(
                interval, work_completed=True, completed=True,
            )
            index += 1
        self._finish(skipped=False)

    def _finish(self, skipped: bool) -> None:
        self._ticks.stop()
        self._state = Completed(skipped=skipped)
        logger.info(
            "Session completed (%s), %d intervals",
            "skipped" if skipped else "natural",
            len(self._intervals),
        )
        if skipped:
            self._notify()

    def _require(self, expected: type, action: str):
        if not isinstance(self._state, expected):
            raise InvalidTransitionError(action, state_name(self._state))
        return self._state

    def _initial_state(self) -> Idle:
        return Idle(Phase.WORK, 0, self._intervals[0].duration)

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(self._state)


def _cleared(interval: Interval) -> Interval:
    return dataclasses.replace(interval, work_completed=False, completed=False)

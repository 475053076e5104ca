"""Session timer — tick-driven work/rest state machine."""

from session_engine.timer.session_timer import SessionTimer
from session_engine.timer.states import Completed, Idle, Paused, Running, TimerState
from session_engine.timer.tick_source import (
    ManualTickSource,
    SchedulerTickSource,
    SerializedTickSource,
    TickSource,
)

__all__ = [
    "Completed",
    "Idle",
    "ManualTickSource",
    "Paused",
    "Running",
    "SchedulerTickSource",
    "SerializedTickSource",
    "SessionTimer",
    "TickSource",
    "TimerState",
]

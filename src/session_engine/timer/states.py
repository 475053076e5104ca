"""Session timer states — a tagged union of frozen records."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from session_engine.models.enums import Phase


@dataclass(frozen=True)
class Idle:
    """Not started (or reset). Points at the first interval's work phase."""

    phase: Phase
    interval_index: int
    seconds_remaining: int


@dataclass(frozen=True)
class Running:
    """Counting down; one tick per elapsed second."""

    phase: Phase
    interval_index: int
    seconds_remaining: int


@dataclass(frozen=True)
class Paused:
    """Countdown frozen at ``seconds_remaining``."""

    phase: Phase
    interval_index: int
    seconds_remaining: int


@dataclass(frozen=True)
class Completed:
    """Every interval done; waiting for the user's results."""

    skipped: bool = False


TimerState = Union[Idle, Running, Paused, Completed]


def state_name(state: TimerState) -> str:
    return type(state).__name__.lower()

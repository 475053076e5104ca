"""Tick sources — the periodic timer that drives a SessionTimer.

A tick source calls its callback once per period between ``start`` and
``stop``. The timer starts it on start/resume and stops it on pause,
completion and reset.
"""

from __future__ import annotations

import itertools
import logging
import queue
from abc import ABC, abstractmethod
from typing import Callable

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.schedulers.base import BaseScheduler

logger = logging.getLogger(__name__)

TickCallback = Callable[[], None]

_job_ids = itertools.count(1)


class TickSource(ABC):
    """Abstract periodic tick provider."""

    @abstractmethod
    def start(self, on_tick: TickCallback) -> None:
        """Begin calling *on_tick* once per period."""

    @abstractmethod
    def stop(self) -> None:
        """Stop ticking. Safe to call when already stopped."""

    @property
    @abstractmethod
    def active(self) -> bool:
        """Whether ticks are currently being delivered."""


class ManualTickSource(TickSource):
    """Deterministic tick source; ticks only when ``fire`` is called."""

    def __init__(self) -> None:
        self._callback: TickCallback | None = None
        self.start_count = 0
        self.stop_count = 0

    def start(self, on_tick: TickCallback) -> None:
        self._callback = on_tick
        self.start_count += 1

    def stop(self) -> None:
        if self._callback is not None:
            self.stop_count += 1
        self._callback = None

    @property
    def active(self) -> bool:
        return self._callback is not None

    def fire(self, count: int = 1) -> int:
        """Deliver up to *count* ticks; returns how many were delivered.

        Stops early if the receiver stops the source (e.g. on completion).
        """
        fired = 0
        for _ in range(count):
            if self._callback is None:
                break
            self._callback()
            fired += 1
        return fired


class SchedulerTickSource(TickSource):
    """Wall-clock ticks from an APScheduler interval job.

    Ticks arrive on the scheduler's worker thread. Wrap this source in a
    SerializedTickSource when user input is handled on another thread.
    """

    def __init__(
        self,
        interval_seconds: float = 1.0,
        scheduler: BaseScheduler | None = None,
    ) -> None:
        self._interval_seconds = interval_seconds
        self._scheduler = scheduler or BackgroundScheduler()
        self._job_id = f"session-tick-{next(_job_ids)}"
        self._job = None

    def start(self, on_tick: TickCallback) -> None:
        if self._job is not None:
            return
        if not self._scheduler.running:
            self._scheduler.start()
        self._job = self._scheduler.add_job(
            on_tick,
            "interval",
            seconds=self._interval_seconds,
            id=self._job_id,
            max_instances=1,
        )
        logger.debug("Tick job %s started (%.2fs)", self._job_id, self._interval_seconds)

    def stop(self) -> None:
        if self._job is None:
            return
        try:
            self._job.remove()
        except JobLookupError:
            logger.debug("Tick job %s already removed", self._job_id)
        self._job = None
        logger.debug("Tick job %s stopped", self._job_id)

    @property
    def active(self) -> bool:
        return self._job is not None

    def shutdown(self) -> None:
        """Stop ticking and shut the scheduler down."""
        self.stop()
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)


class SerializedTickSource(TickSource):
    """Forwards ticks from another source into a caller-owned queue.

    The queue consumer runs each queued callable on its own thread, so ticks
    and user commands are applied one at a time. Ticks queued before the
    last ``stop`` are dropped on delivery.
    """

    def __init__(self, inner: TickSource, events: "queue.Queue[TickCallback]") -> None:
        self._inner = inner
        self._events = events
        self._generation = 0

    def start(self, on_tick: TickCallback) -> None:
        generation = self._generation

        def deliver() -> None:
            if generation == self._generation:
                on_tick()

        self._inner.start(lambda: self._events.put(deliver))

    def stop(self) -> None:
        self._generation += 1
        self._inner.stop()

    @property
    def active(self) -> bool:
        return self._inner.active

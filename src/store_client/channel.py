"""Caller-owned notification channel for store connection changes."""

from __future__ import annotations

import logging
from typing import Callable

logger = logging.getLogger(__name__)

ConnectionListener = Callable[[bool], None]


class ConnectionChannel:
    """Fan-out of connected/disconnected events to subscribers.

    Usage::

        channel = ConnectionChannel()
        unsubscribe = channel.subscribe(lambda connected: ...)
        store = RestDataStore(url, channel=channel)
        ...
        unsubscribe()
    """

    def __init__(self) -> None:
        self._listeners: list[ConnectionListener] = []

    def subscribe(self, listener: ConnectionListener) -> Callable[[], None]:
        """Register *listener*; returns a callable that removes it again."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def publish(self, connected: bool) -> None:
        logger.debug("Connection changed: connected=%s", connected)
        for listener in list(self._listeners):
            listener(connected)

    def __len__(self) -> int:
        return len(self._listeners)

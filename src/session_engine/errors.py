"""Exception hierarchy for the session engine."""

from __future__ import annotations

from typing import Any


class SessionEngineError(Exception):
    """Base exception for all session_engine errors."""


class PreconditionError(SessionEngineError):
    """An action was attempted before its requirements were met.

    The session state is left unchanged.
    """

    def __init__(self, action: str, reason: str) -> None:
        super().__init__(f"Cannot {action}: {reason}")
        self.action = action
        self.reason = reason


class InvalidTransitionError(PreconditionError):
    """The session timer does not allow this transition from its current state."""

    def __init__(self, action: str, state_name: str) -> None:
        super().__init__(action, f"timer is {state_name}")
        self.state_name = state_name


class ValidationError(SessionEngineError):
    """A user-entered result value is malformed."""

    def __init__(self, field: str, value: Any, reason: str) -> None:
        super().__init__(f"Invalid {field} {value!r}: {reason}")
        self.field = field
        self.value = value
        self.reason = reason

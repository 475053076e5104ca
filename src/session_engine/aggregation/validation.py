"""Parsing of user-entered session results.

The total output is required and rejects the whole submission when bad.
Optional fields are parsed independently and come back as None when
invalid, so one bad field never blocks saving the session.
"""

from __future__ import annotations

import logging
import math
from typing import Any

from session_engine.errors import ValidationError
from session_engine.models.enums import MAX_HEART_RATE_BPM, RPE_MAX, RPE_MIN

logger = logging.getLogger(__name__)


def parse_total_output(value: Any) -> float:
    """Parse the required total output (e.g. calories, meters).

    Raises:
        ValidationError: absent, non-numeric or negative.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError("total_output", value, "a total output value is required")
    number = _to_float(value)
    if number is None:
        raise ValidationError("total_output", value, "must be a number")
    if number < 0:
        raise ValidationError("total_output", value, "must not be negative")
    return number


def parse_heart_rate(value: Any, field: str = "heart_rate") -> float | None:
    """Heart rate in bpm, or None when absent or outside (0, 220]."""
    if _is_blank(value):
        return None
    number = _to_float(value)
    if number is None or number <= 0 or number > MAX_HEART_RATE_BPM:
        logger.warning("Dropping invalid %s: %r", field, value)
        return None
    return number


def parse_rpe(value: Any) -> int | None:
    """Rate of perceived exertion as an integer 1-10, or None."""
    if _is_blank(value):
        return None
    number = _to_float(value)
    if number is None or not number.is_integer():
        logger.warning("Dropping invalid perceived_exertion: %r", value)
        return None
    rpe = int(number)
    if not RPE_MIN <= rpe <= RPE_MAX:
        logger.warning("Dropping out-of-range perceived_exertion: %r", value)
        return None
    return rpe


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _to_float(value: Any) -> float | None:
    """Finite float from a number or numeric string; None otherwise."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number

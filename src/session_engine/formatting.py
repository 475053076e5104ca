"""Display helpers for clock and duration text."""

from __future__ import annotations


def format_clock(seconds: int) -> str:
    """Countdown clock text: 95 -> "01:35". Minutes are not wrapped at 60."""
    seconds = max(int(seconds), 0)
    minutes, secs = divmod(seconds, 60)
    return f"{minutes:02d}:{secs:02d}"


def format_duration(total_seconds: int | None) -> str:
    """Whole-workout duration: "0 min", "45 min", "1h", "1h 15min"."""
    if not total_seconds:
        return "0 min"
    minutes = int(total_seconds) // 60
    if minutes < 60:
        return f"{minutes} min"
    hours, remaining = divmod(minutes, 60)
    return f"{hours}h {remaining}min" if remaining else f"{hours}h"

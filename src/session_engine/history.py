"""Workout history: past sessions, their summary and the program calendar.

Filtering and ordering are plain Python; the summary uses pandas for the
EWMA ratio trend, the same smoothing used for the stored rolling ratio.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from typing import Collection, Iterable

import pandas as pd

from session_engine.models.enums import FIRST_PROGRAM_DAY, HISTORY_TREND_SPAN, DayStatus
from session_engine.models.session import SessionRecord


@dataclass(frozen=True)
class HistorySummary:
    """Aggregate view of a filtered session history."""

    session_count: int
    best_pace: float | None = None
    mean_ratio: float | None = None
    ratio_trend: float | None = None    # EWMA of performance ratios, oldest -> newest
    last_session_date: date | None = None


def matches_history(record: SessionRecord, modality: str | None, day_type: str | None) -> bool:
    """True when *record* was done on the same modality and day type."""
    return record.modality == modality and record.day_type == day_type


def workout_history(
    records: Iterable[SessionRecord],
    modality: str | None,
    day_type: str | None,
) -> list[SessionRecord]:
    """Matching sessions, most recent first. Undated sessions sort last."""
    matching = [r for r in records if matches_history(r, modality, day_type)]
    return sorted(matching, key=lambda r: r.session_date or date.min, reverse=True)


def summarize_history(
    records: Iterable[SessionRecord],
    span: int = HISTORY_TREND_SPAN,
) -> HistorySummary:
    """Summarize already-filtered sessions.

    Args:
        records: Sessions for one day type and modality.
        span: EWMA span for the ratio trend.

    Returns:
        HistorySummary; numeric fields are None when no data backs them.
    """
    rows = [
        {
            "date": pd.Timestamp(r.session_date) if r.session_date else pd.NaT,
            "pace": r.actual_pace,
            "ratio": r.performance_ratio,
        }
        for r in records
    ]
    if not rows:
        return HistorySummary(session_count=0)

    frame = pd.DataFrame(rows, columns=["date", "pace", "ratio"])
    frame["pace"] = pd.to_numeric(frame["pace"], errors="coerce")
    frame["ratio"] = pd.to_numeric(frame["ratio"], errors="coerce")
    frame = frame.sort_values("date", kind="stable", na_position="first")

    ratios = frame["ratio"].dropna()
    trend = None
    if not ratios.empty:
        trend = float(ratios.ewm(span=span, adjust=False).mean().iloc[-1])

    last_date = frame["date"].dropna()
    return HistorySummary(
        session_count=len(frame),
        best_pace=_optional(frame["pace"].max()),
        mean_ratio=_optional(ratios.mean()) if not ratios.empty else None,
        ratio_trend=trend,
        last_session_date=last_date.iloc[-1].date() if not last_date.empty else None,
    )


def _optional(value) -> float | None:
    if value is None:
        return None
    value = float(value)
    return None if math.isnan(value) else value


# ---------------------------------------------------------------------------
# Program calendar
# ---------------------------------------------------------------------------


def completed_day_numbers(records: Iterable[SessionRecord]) -> frozenset[int]:
    """Program days with at least one completed session."""
    return frozenset(r.program_day for r in records if r.program_day is not None)


def day_status(
    day_number: int,
    completed_days: Collection[int],
    current_day: int | None,
) -> DayStatus:
    """Status of one program day.

    A completed day stays completed even past the current day. Otherwise
    days before the user's current day are open to catch up on and days
    after it are locked. A user with no current day starts at day 1.
    """
    current = current_day or FIRST_PROGRAM_DAY
    if day_number in completed_days:
        return DayStatus.COMPLETED
    if day_number == current:
        return DayStatus.CURRENT
    if day_number < current:
        return DayStatus.AVAILABLE
    return DayStatus.LOCKED


def program_calendar(
    day_numbers: Iterable[int],
    records: Iterable[SessionRecord],
    current_day: int | None,
) -> dict[int, DayStatus]:
    """Status of every day in *day_numbers*, keyed by day number."""
    completed = completed_day_numbers(records)
    return {day: day_status(day, completed, current_day) for day in day_numbers}

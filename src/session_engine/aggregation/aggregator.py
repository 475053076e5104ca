"""Session aggregator — turns finished intervals plus entered values into a result.

The performance ratio compares the pace the user actually held (total
output over work minutes) with the mean target pace of the session:

    average_pace      = total_output / (work_seconds / 60)
    performance_ratio = average_pace / mean(target paces)

The ratio is only defined when both paces are positive.
"""

from __future__ import annotations

from typing import Any, Sequence

from session_engine.aggregation.validation import (
    parse_heart_rate,
    parse_rpe,
    parse_total_output,
)
from session_engine.models.enums import is_max_effort_day
from session_engine.models.interval import Interval
from session_engine.models.session import (
    PerformanceMetricsUpdate,
    SessionContext,
    SessionResult,
)
from session_engine.planner.planner import total_work_seconds


class SessionAggregator:
    """Builds SessionResults for one session context.

    Usage::

        aggregator = SessionAggregator(context)
        result = aggregator.finalize(timer.intervals, "312", rpe="8")
        update = metrics_update_for(result)
    """

    def __init__(self, context: SessionContext) -> None:
        self.context = context

    def finalize(
        self,
        intervals: Sequence[Interval],
        entered_output: Any,
        entered_heart_rate_avg: Any = None,
        entered_heart_rate_peak: Any = None,
        entered_rpe: Any = None,
    ) -> SessionResult:
        """Aggregate a completed session.

        Args:
            intervals: The timer's intervals with completion flags and targets.
            entered_output: Total output typed by the user (required).
            entered_heart_rate_avg: Optional average heart rate (bpm).
            entered_heart_rate_peak: Optional peak heart rate (bpm).
            entered_rpe: Optional RPE, integer 1-10.

        Returns:
            An immutable SessionResult.

        Raises:
            ValidationError: total output is absent, non-numeric or negative.
        """
        total_output = parse_total_output(entered_output)

        average_pace = calculate_average_pace(total_output, intervals)
        target_pace = average_target_pace(intervals)
        ratio = performance_ratio(average_pace, target_pace)

        return SessionResult(
            context=self.context,
            total_output=total_output,
            average_pace=average_pace,
            target_pace=target_pace,
            performance_ratio=ratio,
            intervals_completed=sum(1 for i in intervals if i.completed),
            total_intervals=len(intervals),
            average_heart_rate=parse_heart_rate(entered_heart_rate_avg, "average_heart_rate"),
            peak_heart_rate=parse_heart_rate(entered_heart_rate_peak, "peak_heart_rate"),
            perceived_exertion=parse_rpe(entered_rpe),
        )


def calculate_average_pace(total_output: float, intervals: Sequence[Interval]) -> float:
    """Output per work minute; rest time excluded. 0 when there is no work time."""
    work_minutes = total_work_seconds(intervals) / 60
    if work_minutes <= 0:
        return 0.0
    return total_output / work_minutes


def average_target_pace(intervals: Sequence[Interval]) -> float | None:
    """Mean target pace over intervals that have one."""
    paces = [i.target_pace.pace for i in intervals if i.target_pace is not None]
    if not paces:
        return None
    return sum(paces) / len(paces)


def performance_ratio(average_pace: float, target_pace: float | None) -> float | None:
    if target_pace is None or target_pace <= 0 or average_pace <= 0:
        return None
    return average_pace / target_pace


def metrics_update_for(result: SessionResult) -> PerformanceMetricsUpdate | None:
    """New metrics sample for max-effort days or when a ratio was measured."""
    context = result.context
    if not context.day_type or not context.modality:
        return None
    is_max_effort = is_max_effort_day(context.day_type)
    if not is_max_effort and result.performance_ratio is None:
        return None
    return PerformanceMetricsUpdate(
        user_id=context.user_id,
        day_type=context.day_type,
        modality=context.modality,
        new_ratio=result.performance_ratio,
        new_pace=result.average_pace,
        is_max_effort=is_max_effort,
    )

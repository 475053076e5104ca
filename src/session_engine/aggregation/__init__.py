"""Session aggregator — result records and performance metric samples."""

from session_engine.aggregation.aggregator import (
    SessionAggregator,
    average_target_pace,
    calculate_average_pace,
    metrics_update_for,
    performance_ratio,
)

__all__ = [
    "SessionAggregator",
    "average_target_pace",
    "calculate_average_pace",
    "metrics_update_for",
    "performance_ratio",
]

"""Serialization of engine results into data store rows."""

from session_engine.serialization.rows import (
    to_metrics_update_params,
    to_session_row,
    to_session_row_string,
    to_time_trial_row,
)

__all__ = [
    "to_metrics_update_params",
    "to_session_row",
    "to_session_row_string",
    "to_time_trial_row",
]

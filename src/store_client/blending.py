"""Rolling performance metric blending, applied on the storage side."""

from __future__ import annotations

from session_engine.models.athlete import PerformanceMetrics
from session_engine.models.enums import ROLLING_RATIO_ALPHA
from session_engine.models.session import PerformanceMetricsUpdate


def blend_metrics(
    existing: PerformanceMetrics | None,
    update: PerformanceMetricsUpdate,
    alpha: float = ROLLING_RATIO_ALPHA,
) -> PerformanceMetrics:
    """Fold one session sample into the stored metrics.

    rolling_avg_ratio is an exponentially weighted average
    (``alpha * new + (1 - alpha) * old``); the first sample is taken as-is.
    learned_max_pace keeps the best pace seen on max-effort days.
    """
    old_ratio = existing.rolling_avg_ratio if existing is not None else None
    old_max = existing.learned_max_pace if existing is not None else None

    ratio = old_ratio
    if update.new_ratio is not None:
        ratio = update.new_ratio if old_ratio is None else (
            alpha * update.new_ratio + (1 - alpha) * old_ratio
        )

    learned_max = old_max
    if update.is_max_effort and update.new_pace and update.new_pace > 0:
        learned_max = update.new_pace if old_max is None else max(old_max, update.new_pace)

    return PerformanceMetrics(
        user_id=update.user_id,
        day_type=update.day_type,
        modality=update.modality,
        rolling_avg_ratio=ratio,
        learned_max_pace=learned_max,
    )

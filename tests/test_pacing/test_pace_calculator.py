"""Tests for target pace calculation."""

from __future__ import annotations

import pytest

from session_engine.models.athlete import Baseline, PerformanceMetrics
from session_engine.models.enums import PaceSource
from session_engine.models.interval import Interval
from session_engine.pacing.pace_calculator import annotate_targets, calculate_targets, target_pace


def _make_interval(**kwargs) -> Interval:
    defaults = dict(id=1, duration=60, rest_duration=30, day_type="interval")
    defaults.update(kwargs)
    return Interval(**defaults)


def _make_metrics(ratio: float | None = None, learned_max: float | None = None, day_type: str = "interval") -> PerformanceMetrics:
    return PerformanceMetrics(
        user_id="user-1",
        day_type=day_type,
        modality="echo_bike",
        rolling_avg_ratio=ratio,
        learned_max_pace=learned_max,
    )


class TestBaselineOnly:
    def test_midpoint_of_pace_range(self, echo_bike_baseline: Baseline) -> None:
        target = target_pace(_make_interval(pace_range=(0.85, 0.95)), echo_bike_baseline, None, "interval")
        assert target.pace == pytest.approx(36.0)
        assert target.intensity_percent == 90
        assert target.units == "cal"
        assert target.baseline == 40.0
        assert target.source == PaceSource.BASELINE_ONLY

    def test_no_pace_range_is_full_baseline(self, echo_bike_baseline: Baseline) -> None:
        target = target_pace(_make_interval(), echo_bike_baseline, None, "interval")
        assert target.pace == pytest.approx(40.0)
        assert target.intensity_percent == 100

    def test_metrics_without_ratio_ignored(self, echo_bike_baseline: Baseline) -> None:
        target = target_pace(_make_interval(pace_range=(0.8, 0.8)), echo_bike_baseline, _make_metrics(), "interval")
        assert target.pace == pytest.approx(32.0)
        assert target.source == PaceSource.BASELINE_ONLY


class TestMetricsAdjusted:
    def test_ratio_scales_multiplier(
        self, echo_bike_baseline: Baseline, interval_metrics: PerformanceMetrics
    ) -> None:
        target = target_pace(
            _make_interval(pace_range=(0.85, 0.95)), echo_bike_baseline, interval_metrics, "interval",
        )
        # 40 * 0.9 * 1.04
        assert target.pace == pytest.approx(37.44)
        assert target.intensity_percent == 94
        assert target.source == PaceSource.METRICS_ADJUSTED

    def test_worked_example(self, echo_bike_baseline: Baseline) -> None:
        target = target_pace(
            _make_interval(pace_range=(0.8, 0.9)), echo_bike_baseline, _make_metrics(ratio=1.1), "interval",
        )
        # 40 * 0.85 * 1.1; 93.5% rounds half-up
        assert target.pace == pytest.approx(37.4)
        assert target.intensity_percent == 94
        assert target.source == PaceSource.METRICS_ADJUSTED

    def test_intensity_rounds_half_up(self, echo_bike_baseline: Baseline) -> None:
        target = target_pace(
            _make_interval(pace_range=(0.5, 0.5)), echo_bike_baseline, _make_metrics(ratio=1.25), "interval",
        )
        # 0.625 -> 62.5% -> 63
        assert target.intensity_percent == 63


class TestLearnedMax:
    def test_max_effort_day_uses_learned_max(self, echo_bike_baseline: Baseline) -> None:
        metrics = _make_metrics(ratio=0.9, learned_max=47.3, day_type="anaerobic")
        target = target_pace(
            _make_interval(day_type="anaerobic", pace_range=(0.7, 0.8)), echo_bike_baseline, metrics, "anaerobic",
        )
        assert target.pace == 47.3
        assert target.intensity_percent == 100
        assert target.source == PaceSource.LEARNED_MAX

    def test_max_effort_interval_flag(self, echo_bike_baseline: Baseline) -> None:
        metrics = _make_metrics(learned_max=45.0)
        target = target_pace(_make_interval(is_max_effort=True), echo_bike_baseline, metrics, "interval")
        assert target.pace == 45.0
        assert target.source == PaceSource.LEARNED_MAX

    def test_max_effort_without_learned_max_falls_back(self, echo_bike_baseline: Baseline) -> None:
        metrics = _make_metrics(ratio=1.1, day_type="time_trial")
        target = target_pace(_make_interval(day_type="time_trial"), echo_bike_baseline, metrics, "time_trial")
        assert target.pace == pytest.approx(44.0)
        assert target.source == PaceSource.METRICS_ADJUSTED

    def test_learned_max_ignored_on_regular_days(self, echo_bike_baseline: Baseline) -> None:
        metrics = _make_metrics(learned_max=50.0)
        target = target_pace(_make_interval(), echo_bike_baseline, metrics, "interval")
        assert target.pace == pytest.approx(40.0)


class TestMissingBaseline:
    def test_no_baseline_no_target(self, interval_metrics: PerformanceMetrics) -> None:
        assert target_pace(_make_interval(), None, interval_metrics, "interval") is None

    def test_calculate_targets_all_none(self) -> None:
        intervals = [_make_interval(id=n) for n in (1, 2, 3)]
        assert calculate_targets(intervals, None, None, "interval") == (None, None, None)


class TestBatch:
    def test_targets_follow_interval_order(self, echo_bike_baseline: Baseline) -> None:
        intervals = [
            _make_interval(id=1, pace_range=(0.8, 0.8)),
            _make_interval(id=2, pace_range=(0.9, 0.9)),
        ]
        targets = calculate_targets(intervals, echo_bike_baseline, None, "infinity")
        assert [t.pace for t in targets] == pytest.approx([32.0, 36.0])

    def test_annotate_returns_copies(self, echo_bike_baseline: Baseline) -> None:
        intervals = [_make_interval(pace_range=(0.9, 0.9))]
        annotated = annotate_targets(intervals, echo_bike_baseline, None, "interval")
        assert intervals[0].target_pace is None
        assert annotated[0].target_pace.pace == pytest.approx(36.0)

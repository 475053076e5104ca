"""Tests for InMemoryDataStore, metric blending and the connection channel."""

from __future__ import annotations

from datetime import date

import pytest

from session_engine.models.athlete import PerformanceMetrics, TimeTrial
from session_engine.models.session import PerformanceMetricsUpdate
from store_client.blending import blend_metrics
from store_client.channel import ConnectionChannel
from store_client.exceptions import NotFoundError, StorageError
from store_client.memory import InMemoryDataStore


def _make_update(ratio: float | None, pace: float, max_effort: bool = False) -> PerformanceMetricsUpdate:
    return PerformanceMetricsUpdate(
        user_id="user-1",
        day_type="anaerobic" if max_effort else "interval",
        modality="echo_bike",
        new_ratio=ratio,
        new_pace=pace,
        is_max_effort=max_effort,
    )


def _make_trial(trial_date: date, rate: float = 40.0, modality: str = "echo_bike") -> TimeTrial:
    return TimeTrial(
        user_id="user-1", modality=modality, total_output=rate * 10, units="cal",
        calculated_rpm=rate, trial_date=trial_date,
    )


class TestBlendMetrics:
    def test_first_sample_taken_as_is(self) -> None:
        metrics = blend_metrics(None, _make_update(1.1, 40.0))
        assert metrics.rolling_avg_ratio == pytest.approx(1.1)
        assert metrics.learned_max_pace is None

    def test_exponential_weighting(self) -> None:
        existing = PerformanceMetrics("user-1", "interval", "echo_bike", rolling_avg_ratio=1.0)
        metrics = blend_metrics(existing, _make_update(1.2, 40.0))
        assert metrics.rolling_avg_ratio == pytest.approx(0.3 * 1.2 + 0.7 * 1.0)

    def test_missing_ratio_keeps_old(self) -> None:
        existing = PerformanceMetrics("user-1", "anaerobic", "echo_bike", rolling_avg_ratio=0.95)
        metrics = blend_metrics(existing, _make_update(None, 44.0, max_effort=True))
        assert metrics.rolling_avg_ratio == 0.95
        assert metrics.learned_max_pace == 44.0

    def test_learned_max_keeps_best(self) -> None:
        existing = PerformanceMetrics("user-1", "anaerobic", "echo_bike", learned_max_pace=46.0)
        metrics = blend_metrics(existing, _make_update(None, 44.0, max_effort=True))
        assert metrics.learned_max_pace == 46.0


class TestInMemoryDataStore:
    def test_missing_rows_raise_not_found(self) -> None:
        store = InMemoryDataStore()
        with pytest.raises(NotFoundError):
            store.fetch_workout_definition(1)
        with pytest.raises(NotFoundError):
            store.fetch_baseline("user-1", "rower")
        with pytest.raises(NotFoundError):
            store.fetch_performance_metrics("user-1", "interval", "rower")

    def test_disconnected_store_fails(self) -> None:
        store = InMemoryDataStore(connected=False)
        assert not store.is_connected()
        with pytest.raises(StorageError):
            store.fetch_completed_sessions("user-1")

    def test_metrics_updates_are_blended(self) -> None:
        store = InMemoryDataStore()
        store.persist_performance_metrics_update(_make_update(1.0, 40.0))
        store.persist_performance_metrics_update(_make_update(1.2, 41.0))
        metrics = store.fetch_performance_metrics("user-1", "interval", "echo_bike")
        assert metrics.rolling_avg_ratio == pytest.approx(1.06)
        assert len(store.metrics_updates) == 2

    def test_time_trial_becomes_baseline(self) -> None:
        store = InMemoryDataStore()
        store.persist_time_trial(TimeTrial(
            user_id="user-1", modality="rower", total_output=455.0, units="cal",
            calculated_rpm=45.5, trial_date=date(2026, 1, 5),
        ))
        baseline = store.fetch_baseline("user-1", "rower")
        assert baseline.rate == 45.5
        assert baseline.recorded_on == date(2026, 1, 5)

    def test_program_lookups(self) -> None:
        store = InMemoryDataStore()
        assert store.fetch_program_version("user-1") is None
        store.program_versions["user-1"] = "3-day"
        store.program_days[(12, "3-day")] = 7
        assert store.fetch_program_version("user-1") == "3-day"
        assert store.fetch_program_day_number(12, "3-day") == 7
        assert store.fetch_program_day_number(13, "3-day") is None

    def test_current_day(self) -> None:
        store = InMemoryDataStore()
        assert store.fetch_current_day("user-1") is None
        store.current_days["user-1"] = 25
        assert store.fetch_current_day("user-1") == 25

    def test_previous_baselines_newest_first_and_limited(self) -> None:
        store = InMemoryDataStore()
        for day in range(1, 8):
            store.persist_time_trial(_make_trial(date(2026, 1, day), rate=30.0 + day))
        store.persist_time_trial(_make_trial(date(2026, 1, 9), modality="c2_ski_erg"))

        trials = store.fetch_previous_baselines("user-1", "echo_bike")
        assert [t.trial_date.day for t in trials] == [7, 6, 5, 4, 3]
        assert [t.is_current for t in trials] == [True, False, False, False, False]
        assert len(store.fetch_previous_baselines("user-1", "echo_bike", limit=2)) == 2
        assert store.fetch_previous_baselines("user-2", "echo_bike") == []


class TestConnectionChannel:
    def test_publish_and_unsubscribe(self) -> None:
        channel = ConnectionChannel()
        seen: list[bool] = []
        unsubscribe = channel.subscribe(seen.append)
        channel.publish(True)
        unsubscribe()
        channel.publish(False)
        assert seen == [True]
        assert len(channel) == 0

    def test_unsubscribe_twice_is_harmless(self) -> None:
        channel = ConnectionChannel()
        unsubscribe = channel.subscribe(lambda connected: None)
        unsubscribe()
        unsubscribe()
        assert len(channel) == 0

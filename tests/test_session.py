"""Tests for TrainingSession — full orchestration against an in-memory store."""

from __future__ import annotations

from datetime import date
from unittest.mock import MagicMock

import pytest

from session_engine.errors import PreconditionError, ValidationError
from session_engine.models.athlete import Baseline, PerformanceMetrics
from session_engine.models.enums import DayStatus, PaceSource
from session_engine.models.session import SessionRecord
from session_engine.session import TrainingSession, load_program_calendar, record_time_trial
from session_engine.timer.states import Completed, Running
from session_engine.timer.tick_source import ManualTickSource
from store_client.exceptions import NotFoundError, StorageError
from store_client.memory import InMemoryDataStore

USER_ID = "user-1"
TODAY = date(2026, 3, 14)


def _make_session(store, day_number: int = 12, ticks: ManualTickSource | None = None) -> TrainingSession:
    return TrainingSession(
        store, USER_ID, day_number, ticks or ManualTickSource(), today=lambda: TODAY,
    )


class TestLoad:
    def test_plans_stored_workout(self, store: InMemoryDataStore) -> None:
        session = _make_session(store)
        intervals = session.load()
        assert len(intervals) == 3
        assert session.day_type == "interval"
        assert not session.demo_mode
        assert session.total_work_seconds == 180

    def test_missing_workout_propagates(self, store: InMemoryDataStore) -> None:
        with pytest.raises(NotFoundError):
            _make_session(store, day_number=99).load()

    def test_no_store_uses_demo_workout(self) -> None:
        session = _make_session(None, day_number=12)
        intervals = session.load()
        assert session.demo_mode
        assert len(intervals) == 1
        assert intervals[0].duration == 17 * 60

    def test_disconnected_store_uses_demo_workout(self, store: InMemoryDataStore) -> None:
        store.connected = False
        session = _make_session(store)
        session.load()
        assert session.demo_mode

    def test_actions_before_load(self, store: InMemoryDataStore) -> None:
        session = _make_session(store)
        with pytest.raises(PreconditionError):
            session.start()
        with pytest.raises(PreconditionError):
            session.select_modality("echo_bike")


class TestSelectModality:
    def test_targets_use_baseline_and_metrics(
        self, store: InMemoryDataStore, interval_metrics: PerformanceMetrics
    ) -> None:
        store.add_metrics(interval_metrics)
        session = _make_session(store)
        session.load()
        session.select_modality("echo_bike")
        target = session.timer.intervals[0].target_pace
        assert target.pace == pytest.approx(37.44)
        assert target.intensity_percent == 94
        assert target.source == PaceSource.METRICS_ADJUSTED

    def test_no_metrics_is_baseline_only(self, store: InMemoryDataStore) -> None:
        session = _make_session(store)
        session.load()
        session.select_modality("echo_bike")
        assert session.metrics is None
        assert session.timer.intervals[0].target_pace.pace == pytest.approx(36.0)

    def test_missing_baseline_blocks_start(self, store: InMemoryDataStore) -> None:
        session = _make_session(store)
        session.load()
        session.select_modality("c2_row_erg")
        assert session.baseline is None
        assert all(i.target_pace is None for i in session.timer.intervals)
        with pytest.raises(PreconditionError, match="time trial"):
            session.start()

    def test_switching_modality_repaces(self, store: InMemoryDataStore) -> None:
        session = _make_session(store)
        session.load()
        session.select_modality("c2_row_erg")
        session.select_modality("echo_bike")
        assert session.timer.intervals[0].target_pace is not None

    def test_failed_switch_keeps_previous_modality(self, store: InMemoryDataStore) -> None:
        store.add_baseline(USER_ID, Baseline(modality="c2_row_erg", rate=60.0, units="cal"))
        session = _make_session(store)
        session.load()
        session.select_modality("echo_bike")

        store.fetch_completed_sessions = MagicMock(side_effect=StorageError("history unavailable", status_code=503))
        with pytest.raises(StorageError):
            session.select_modality("c2_row_erg")

        assert session.modality == "echo_bike"
        assert session.baseline.rate == 40.0
        assert session.timer.intervals[0].target_pace.baseline == 40.0

    def test_cannot_switch_after_start(self, store: InMemoryDataStore) -> None:
        session = _make_session(store)
        session.load()
        session.select_modality("echo_bike")
        session.start()
        with pytest.raises(PreconditionError):
            session.select_modality("c2_row_erg")

    def test_history_loaded_newest_first(self, store: InMemoryDataStore) -> None:
        store.sessions.extend([
            SessionRecord(1, USER_ID, "interval", "echo_bike", date(2026, 1, 1), performance_ratio=1.0),
            SessionRecord(2, USER_ID, "interval", "echo_bike", date(2026, 2, 1), performance_ratio=1.1),
            SessionRecord(3, USER_ID, "towers", "echo_bike", date(2026, 2, 2)),
            SessionRecord(4, "someone-else", "interval", "echo_bike", date(2026, 2, 3)),
        ])
        session = _make_session(store)
        session.load()
        session.select_modality("echo_bike")
        assert [r.id for r in session.history] == [2, 1]
        assert session.history_summary().session_count == 2

    def test_demo_baseline_when_disconnected(self) -> None:
        session = _make_session(None)
        session.load()
        session.select_modality("echo_bike")
        assert session.baseline.rate == 38.2
        session.start()
        assert isinstance(session.timer.state, Running)


class TestRunAndSubmit:
    def test_full_session_persists_result_and_metrics(
        self, store: InMemoryDataStore, interval_metrics: PerformanceMetrics
    ) -> None:
        store.add_metrics(interval_metrics)
        ticks = ManualTickSource()
        session = _make_session(store, ticks=ticks)
        session.load()
        session.select_modality("echo_bike")
        session.start()
        assert ticks.fire(1000) == 270
        assert session.timer.state == Completed(skipped=False)

        result = session.submit_results("117", "150", "171", "8")
        assert result.average_pace == pytest.approx(39.0)
        assert result.target_pace == pytest.approx(37.44)
        assert result.performance_ratio == pytest.approx(39.0 / 37.44)
        assert result.perceived_exertion == 8
        assert result.context.session_date == TODAY
        assert result.context.workout_id == 112

        assert len(store.sessions) == 1
        assert store.sessions[0].performance_ratio == pytest.approx(result.performance_ratio)
        blended = store.fetch_performance_metrics(USER_ID, "interval", "echo_bike")
        assert blended.rolling_avg_ratio == pytest.approx(0.3 * (39.0 / 37.44) + 0.7 * 1.04)

    def test_skip_then_submit(self, store: InMemoryDataStore) -> None:
        session = _make_session(store)
        session.load()
        session.select_modality("echo_bike")
        session.start()
        session.skip_to_end()
        result = session.submit_results(90)
        assert result.intervals_completed == result.total_intervals == 3

    def test_submit_before_completion(self, store: InMemoryDataStore) -> None:
        session = _make_session(store)
        session.load()
        session.select_modality("echo_bike")
        session.start()
        with pytest.raises(PreconditionError):
            session.submit_results(90)
        assert store.sessions == []

    def test_invalid_output_not_persisted(self, store: InMemoryDataStore) -> None:
        session = _make_session(store)
        session.load()
        session.select_modality("echo_bike")
        session.complete()
        with pytest.raises(ValidationError):
            session.submit_results("n/a")
        assert store.sessions == []

    def test_time_trial_day_learns_max_pace(self, store: InMemoryDataStore) -> None:
        session = _make_session(store, day_number=1)
        session.load()
        session.select_modality("echo_bike")
        session.start()
        session.skip_to_end()
        session.submit_results(430)
        metrics = store.fetch_performance_metrics(USER_ID, "time_trial", "echo_bike")
        assert metrics.learned_max_pace == pytest.approx(43.0)

    def test_regular_day_without_ratio_skips_metrics(self, store: InMemoryDataStore) -> None:
        session = _make_session(store)
        session.load()
        session.select_modality("echo_bike")
        session.complete()
        session.submit_results(0)
        assert len(store.sessions) == 1
        assert store.metrics_updates == []

    def test_three_day_program_recorded(self, store: InMemoryDataStore) -> None:
        store.program_versions[USER_ID] = "3-day"
        store.program_days[(12, "3-day")] = 7
        session = _make_session(store)
        session.load()
        session.select_modality("echo_bike")
        session.complete()
        result = session.submit_results(100)
        assert result.context.program_version == "3-day"
        assert result.context.program_day_number == 7

    def test_default_program_version(self, store: InMemoryDataStore) -> None:
        session = _make_session(store)
        session.load()
        session.select_modality("echo_bike")
        session.complete()
        result = session.submit_results(100)
        assert result.context.program_version == "5-day"
        assert result.context.program_day_number == 12

    def test_storage_failure_propagates(self, store: InMemoryDataStore) -> None:
        session = _make_session(store)
        session.load()
        session.select_modality("echo_bike")
        session.complete()
        store.persist_session_result = MagicMock(side_effect=StorageError("write failed", status_code=503))
        with pytest.raises(StorageError):
            session.submit_results(100)
        assert session.result is None

    def test_second_submit_rejected(
        self, store: InMemoryDataStore, interval_metrics: PerformanceMetrics
    ) -> None:
        store.add_metrics(interval_metrics)
        session = _make_session(store)
        session.load()
        session.select_modality("echo_bike")
        session.start()
        session.skip_to_end()
        first = session.submit_results(150)

        with pytest.raises(PreconditionError, match="already submitted"):
            session.submit_results(150)
        assert session.result is first
        assert len(store.sessions) == 1
        assert len(store.metrics_updates) == 1

    def test_failed_metrics_write_is_not_resubmitted(
        self, store: InMemoryDataStore, interval_metrics: PerformanceMetrics
    ) -> None:
        store.add_metrics(interval_metrics)
        session = _make_session(store)
        session.load()
        session.select_modality("echo_bike")
        session.complete()
        persist_update = store.persist_performance_metrics_update
        store.persist_performance_metrics_update = MagicMock(side_effect=StorageError("rpc failed", status_code=500))

        with pytest.raises(StorageError):
            session.submit_results(117)
        assert session.result is not None
        with pytest.raises(PreconditionError):
            session.submit_results(117)
        assert len(store.sessions) == 1

        store.persist_performance_metrics_update = persist_update
        session.send_pending_metrics_update()
        session.send_pending_metrics_update()
        assert len(store.metrics_updates) == 1

    def test_demo_mode_does_not_persist(self) -> None:
        session = _make_session(None)
        session.load()
        session.select_modality("c2_row_erg")
        session.complete()
        result = session.submit_results(300)
        assert result.context.day_type is None
        assert session.result is result

    def test_reset_clears_result(self, store: InMemoryDataStore) -> None:
        session = _make_session(store)
        session.load()
        session.select_modality("echo_bike")
        session.complete()
        session.submit_results(100)
        session.reset()
        assert session.result is None
        assert not session.timer.is_completed


class TestRecordTimeTrial:
    def test_new_baseline_stored_and_used(self, store: InMemoryDataStore) -> None:
        baseline = record_time_trial(store, USER_ID, "c2_row_erg", 455, "cal", today=TODAY)
        assert baseline.rate == pytest.approx(45.5)
        assert store.time_trials[0].duration_seconds == 600

        session = _make_session(store)
        session.load()
        session.select_modality("c2_row_erg")
        assert session.timer.intervals[0].target_pace.pace == pytest.approx(45.5 * 0.9)

    def test_invalid_score_not_stored(self, store: InMemoryDataStore) -> None:
        with pytest.raises(ValidationError):
            record_time_trial(store, USER_ID, "c2_row_erg", 0, "cal")
        assert store.time_trials == []


class TestProgramCalendar:
    def test_completed_session_marks_its_day(self, store: InMemoryDataStore) -> None:
        store.current_days[USER_ID] = 13
        session = _make_session(store)
        session.load()
        session.select_modality("echo_bike")
        session.complete()
        session.submit_results(100)

        calendar = load_program_calendar(store, USER_ID, range(11, 15))
        assert calendar == {
            11: DayStatus.AVAILABLE,
            12: DayStatus.COMPLETED,
            13: DayStatus.CURRENT,
            14: DayStatus.LOCKED,
        }

    def test_new_user_starts_at_day_one(self) -> None:
        calendar = load_program_calendar(InMemoryDataStore(), USER_ID, [1, 2])
        assert calendar == {1: DayStatus.CURRENT, 2: DayStatus.LOCKED}

"""REST data store client for a PostgREST-style backend.

Reads use ``?column=eq.value`` filters and retry with exponential backoff on
HTTP 429. Writes are sent once: a failed write raises StorageError and the
caller decides whether to try again.
"""

from __future__ import annotations

import logging
import time
from typing import Any

import requests

from session_engine.models.athlete import Baseline, PerformanceMetrics, TimeTrial
from session_engine.models.enums import PREVIOUS_TRIALS_LIMIT
from session_engine.models.session import (
    PerformanceMetricsUpdate,
    SessionRecord,
    SessionResult,
)
from session_engine.models.workout import WorkoutDefinition
from session_engine.serialization.rows import (
    to_metrics_update_params,
    to_session_row,
    to_time_trial_row,
)
from store_client.base import DataStore
from store_client.channel import ConnectionChannel
from store_client.exceptions import NotFoundError, StorageError, StorageRateLimitError
from store_client.mapper import (
    map_baseline_row,
    map_metrics_row,
    map_session_row,
    map_time_trial_row,
    map_workout_row,
)

logger = logging.getLogger(__name__)

_MAX_RETRIES = 3
_BASE_BACKOFF_S = 2
_DEFAULT_TIMEOUT_S = 10.0


class RestDataStore(DataStore):
    """DataStore backed by a REST API with key-based auth."""

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        session: requests.Session | None = None,
        channel: ConnectionChannel | None = None,
        timeout: float = _DEFAULT_TIMEOUT_S,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._session = session or requests.Session()
        self._channel = channel
        self._timeout = timeout

    # ------------------------------------------------------------------
    # Connection
    # ------------------------------------------------------------------

    def is_connected(self) -> bool:
        return bool(self._api_key)

    def set_api_key(self, api_key: str) -> None:
        self._api_key = api_key
        logger.info("API key %s", "set" if api_key else "cleared")
        if self._channel is not None:
            self._channel.publish(self.is_connected())

    def clear_api_key(self) -> None:
        self.set_api_key("")

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def fetch_workout_definition(self, day_number: int) -> WorkoutDefinition:
        rows = self._get("workouts", {"day_number": f"eq.{day_number}"})
        if not rows:
            raise NotFoundError("workout", day_number)
        return map_workout_row(rows[0])

    def fetch_baseline(self, user_id: str, modality: str) -> Baseline:
        rows = self._get("time_trials", {
            "user_id": f"eq.{user_id}",
            "modality": f"eq.{modality}",
            "is_current": "eq.true",
        })
        baseline = map_baseline_row(rows[0], modality) if rows else None
        if baseline is None:
            raise NotFoundError("baseline", f"{user_id}/{modality}")
        return baseline

    def fetch_performance_metrics(
        self, user_id: str, day_type: str, modality: str,
    ) -> PerformanceMetrics:
        rows = self._get("performance_metrics", {
            "user_id": f"eq.{user_id}",
            "day_type": f"eq.{day_type}",
            "modality": f"eq.{modality}",
        })
        if not rows:
            raise NotFoundError("performance metrics", f"{user_id}/{day_type}/{modality}")
        return map_metrics_row(rows[0])

    def fetch_completed_sessions(self, user_id: str) -> list[SessionRecord]:
        rows = self._get("workout_sessions", {"user_id": f"eq.{user_id}"})
        return [map_session_row(row) for row in rows]

    def fetch_program_version(self, user_id: str) -> str | None:
        rows = self._get("users", {"id": f"eq.{user_id}", "select": "program_version"})
        if not rows:
            return None
        return rows[0].get("program_version") or None

    def fetch_program_day_number(self, day_number: int, program_version: str) -> int | None:
        rows = self._get("program_days", {
            "source_day_number": f"eq.{day_number}",
            "program_version": f"eq.{program_version}",
        })
        if not rows or rows[0].get("program_day_number") is None:
            return None
        return int(rows[0]["program_day_number"])

    def fetch_current_day(self, user_id: str) -> int | None:
        rows = self._get("users", {"id": f"eq.{user_id}", "select": "current_day"})
        if not rows or rows[0].get("current_day") is None:
            return None
        return int(rows[0]["current_day"])

    def fetch_previous_baselines(
        self, user_id: str, modality: str, limit: int = PREVIOUS_TRIALS_LIMIT,
    ) -> list[TimeTrial]:
        rows = self._get("time_trials", {
            "user_id": f"eq.{user_id}",
            "modality": f"eq.{modality}",
            "order": "created_at.desc",
            "limit": str(limit),
        })
        return [map_time_trial_row(row) for row in rows]

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def persist_session_result(self, result: SessionResult) -> None:
        self._post("workout_sessions", to_session_row(result))
        logger.info(
            "Saved session day=%d type=%s ratio=%s",
            result.context.day_number,
            result.context.day_type,
            result.performance_ratio,
        )

    def persist_performance_metrics_update(self, update: PerformanceMetricsUpdate) -> None:
        self._post("rpc/update_performance_metrics", to_metrics_update_params(update))
        logger.info(
            "Updated metrics %s/%s (max_effort=%s)",
            update.day_type,
            update.modality,
            update.is_max_effort,
        )

    def persist_time_trial(self, trial: TimeTrial) -> None:
        self._post("time_trials", to_time_trial_row(trial))
        logger.info("Saved time trial %s: %.2f %s/min", trial.modality, trial.calculated_rpm, trial.units)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _headers(self, extra: dict[str, str] | None = None) -> dict[str, str]:
        if not self._api_key:
            raise StorageError("No API key available")
        headers = {
            "apikey": self._api_key,
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }
        if extra:
            headers.update(extra)
        return headers

    def _get(self, endpoint: str, params: dict[str, str]) -> list[dict[str, Any]]:
        """GET with retry + exponential backoff on 429."""
        url = f"{self._base_url}/rest/v1/{endpoint}"
        headers = self._headers()
        for attempt in range(_MAX_RETRIES):
            response = self._send("GET", url, headers=headers, params=params)
            if response.status_code == 429:
                wait = _BASE_BACKOFF_S * (2 ** attempt)
                logger.warning(
                    "Rate limited (attempt %d/%d), retrying in %ds",
                    attempt + 1,
                    _MAX_RETRIES,
                    wait,
                )
                time.sleep(wait)
                continue
            self._raise_for_status("GET", endpoint, response)
            data = response.json() if response.content else []
            if isinstance(data, dict):
                return [data]
            return list(data or [])

        raise StorageRateLimitError(f"Rate limited after {_MAX_RETRIES} retries: GET {endpoint}")

    def _post(self, endpoint: str, payload: dict[str, Any]) -> None:
        url = f"{self._base_url}/rest/v1/{endpoint}"
        headers = self._headers({"Prefer": "return=minimal"})
        response = self._send("POST", url, headers=headers, json=payload)
        self._raise_for_status("POST", endpoint, response)

    def _send(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        try:
            return self._session.request(method, url, timeout=self._timeout, **kwargs)
        except requests.RequestException as exc:
            raise StorageError(f"{method} {url} failed: {exc}") from exc

    @staticmethod
    def _raise_for_status(method: str, endpoint: str, response: requests.Response) -> None:
        if response.status_code < 400:
            return
        body = (response.text or "")[:500]
        logger.warning("%s %s -> %s body=%s", method, endpoint, response.status_code, body)
        if response.status_code == 429:
            raise StorageRateLimitError(f"{method} {endpoint} rate limited")
        raise StorageError(
            f"HTTP {response.status_code}: {response.reason}",
            status_code=response.status_code,
        )

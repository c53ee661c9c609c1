"""/queued_jobs 엔드포인트 테스트."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from runner_scaler.api import create_app
from runner_scaler.cache import QueuedJobsCache
from runner_scaler.github_api import DecodeError, UpstreamStatusError


def _client(*results: int | Exception) -> tuple[TestClient, list[int]]:
    """results를 순서대로 반환하는 recompute로 앱을 만든다. 두 번째 값은 호출 기록."""
    pending = list(results)
    calls: list[int] = []

    def recompute() -> int:
        calls.append(1)
        result = pending.pop(0)
        if isinstance(result, Exception):
            raise result
        return result

    cache = QueuedJobsCache(recompute, ttl_sec=60)
    return TestClient(create_app(cache)), calls


class TestQueuedJobsEndpoint:
    def test_success(self) -> None:
        client, calls = _client(3)

        resp = client.get("/queued_jobs")

        assert resp.status_code == 200
        assert resp.headers["content-type"] == "application/json"
        assert resp.json() == {"queued_jobs": 3}
        assert len(calls) == 1

    def test_cached_within_ttl(self) -> None:
        client, calls = _client(3)

        assert client.get("/queued_jobs").json() == {"queued_jobs": 3}
        assert client.get("/queued_jobs").json() == {"queued_jobs": 3}
        assert len(calls) == 1

    @pytest.mark.parametrize(
        "error",
        [
            UpstreamStatusError("repos", 401, "401 Unauthorized", "https://api.github.com/orgs/acme/repos"),
            DecodeError("error decoding workflow runs: bad"),
        ],
    )
    def test_upstream_error_returns_500_text(self, error: Exception) -> None:
        client, _ = _client(error)

        resp = client.get("/queued_jobs")

        assert resp.status_code == 500
        assert resp.headers["content-type"].startswith("text/plain")
        assert resp.text == f"error counting queued jobs: {error}"

    def test_error_then_recovery(self) -> None:
        client, calls = _client(
            UpstreamStatusError("repos", 502, "502 Bad Gateway", "https://api.github.com/orgs/acme/repos"),
            5,
        )

        assert client.get("/queued_jobs").status_code == 500
        resp = client.get("/queued_jobs")
        assert resp.status_code == 200
        assert resp.json() == {"queued_jobs": 5}
        assert len(calls) == 2

    def test_unknown_path(self) -> None:
        client, calls = _client()

        assert client.get("/").status_code == 404
        assert calls == []

"""공통 fixture."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
import yaml

_CONFIG_ENV_VARS = (
    "GITHUB_URL",
    "GITHUB_ORGANIZATION",
    "GITHUB_RUNNER_SCALER_CACHE_TIMEOUT",
    "PORT",
)


@pytest.fixture(autouse=True)
def _clear_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """호스트 환경변수가 설정 로딩 테스트에 섞이지 않도록 제거한다."""
    for name in _CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture()
def sample_config_data() -> dict[str, Any]:
    """테스트용 config dict."""
    return {
        "github": {
            "base_url": "https://api.github.com",
            "organization": "acme",
            "token_env_var": "GITHUB_TOKEN",
            "request_timeout_sec": 5,
        },
        "cache": {"ttl_sec": 30},
        "server": {"host": "127.0.0.1", "port": 9000},
    }


@pytest.fixture()
def tmp_config_file(tmp_path: Path, sample_config_data: dict[str, Any]) -> Path:
    """임시 YAML 설정 파일."""
    config_path = tmp_path / "config.yaml"
    config_path.write_text(yaml.dump(sample_config_data), encoding="utf-8")
    return config_path


@pytest.fixture()
def sample_repos() -> list[dict[str, Any]]:
    """GET /orgs/acme/repos 응답 샘플."""
    return [
        {"id": 1, "name": "api", "full_name": "acme/api", "private": False},
        {"id": 2, "name": "web", "full_name": "acme/web", "private": True},
    ]


@pytest.fixture()
def runs_payload() -> Callable[..., dict[str, Any]]:
    """GET /repos/{repo}/actions/runs 응답 샘플."""

    def _payload(*statuses: str) -> dict[str, Any]:
        return {
            "total_count": len(statuses),
            "workflow_runs": [
                {"id": i, "name": "CI", "status": status} for i, status in enumerate(statuses)
            ],
        }

    return _payload

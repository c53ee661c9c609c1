"""GitHub REST API 동기 클라이언트.

조직의 repo 목록과 repo별 workflow run 목록을 조회한다.
- public GitHub / GitHub Enterprise(/api/v3) URL 자동 판별
- 재시도 없음: 실패는 호출자에게 그대로 전파
- pagination 없음: 첫 페이지만 읽는다
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
import orjson
from pydantic import TypeAdapter, ValidationError

from runner_scaler.config import PUBLIC_GITHUB_API_URL, GitHubConfig
from runner_scaler.models import Repository, WorkflowRun, WorkflowRunsPage

logger = logging.getLogger(__name__)

_REPOSITORY_LIST = TypeAdapter(list[Repository])


def build_api_url(base_url: str, endpoint: str) -> str:
    """base_url에 맞는 API 경로를 만든다.

    public GitHub는 base_url 바로 아래, Enterprise는 /api/v3 아래에 API가 있다.
    """
    root = base_url.rstrip("/")
    if base_url.startswith(PUBLIC_GITHUB_API_URL):
        return f"{root}/{endpoint}"
    return f"{root}/api/v3/{endpoint}"


# ── 에러 ───────────────────────────────────────────────


class GitHubApiError(Exception):
    """GitHub API 호출 실패 (공통 부모)."""


class TransportError(GitHubApiError):
    """연결/DNS/TLS/타임아웃 등 upstream 도달 실패."""


class UpstreamStatusError(GitHubApiError):
    """200이 아닌 응답."""

    def __init__(self, what: str, status_code: int, status: str, url: str):
        self.status_code = status_code
        self.status = status
        self.url = url
        super().__init__(f"error fetching {what}: {status}")


class DecodeError(GitHubApiError):
    """응답 본문이 JSON이 아니거나 기대한 형태가 아님."""


# ── 클라이언트 ─────────────────────────────────────────


class GitHubApiClient:
    """GitHub REST API 동기 클라이언트."""

    def __init__(
        self,
        base_url: str,
        token: str,
        *,
        timeout_sec: float = 30.0,
        user_agent: str = "github-runner-scaler/0.1.0",
    ) -> None:
        self._base_url = base_url
        self._client = httpx.Client(
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
                "User-Agent": user_agent,
            },
            timeout=timeout_sec,
        )

    @classmethod
    def from_config(cls, config: GitHubConfig) -> GitHubApiClient:
        return cls(
            config.base_url,
            config.token(),
            timeout_sec=config.request_timeout_sec,
            user_agent=config.user_agent,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    def _get_json(self, endpoint: str, what: str) -> Any:
        """GET 요청 후 JSON 본문을 반환한다."""
        url = build_api_url(self._base_url, endpoint)
        try:
            resp = self._client.get(url)
        except httpx.DecodingError as exc:
            # Content-Encoding과 본문이 맞지 않음
            logger.warning(
                "Undecodable body fetching %s: %s",
                url,
                exc,
                extra={"event_code": "UPSTREAM_ERROR"},
            )
            raise DecodeError(f"error decoding {what}: {exc}") from exc
        except httpx.RequestError as exc:
            logger.warning(
                "Transport error fetching %s: %s",
                url,
                exc,
                extra={"event_code": "UPSTREAM_ERROR"},
            )
            raise TransportError(f"error fetching {what}: {exc}") from exc

        logger.debug("GET %s -> %d", url, resp.status_code)

        if resp.status_code != 200:
            status = f"{resp.status_code} {resp.reason_phrase}".strip()
            logger.warning(
                "Unexpected status fetching %s: %s",
                url,
                status,
                extra={"event_code": "UPSTREAM_ERROR", "status_code": resp.status_code},
            )
            raise UpstreamStatusError(what, resp.status_code, status, url)

        try:
            return orjson.loads(resp.content)
        except orjson.JSONDecodeError as exc:
            raise DecodeError(f"error decoding {what}: {exc}") from exc

    def list_repositories(self, org: str) -> list[Repository]:
        """GET /orgs/{org}/repos — org의 repo 목록 (첫 페이지)."""
        data = self._get_json(f"orgs/{org}/repos", "repos")
        try:
            return _REPOSITORY_LIST.validate_python(data)
        except ValidationError as exc:
            raise DecodeError(f"error decoding repos: {exc}") from exc

    def list_workflow_runs(self, repo_full_name: str) -> list[WorkflowRun]:
        """GET /repos/{owner}/{repo}/actions/runs — workflow run 목록 (첫 페이지)."""
        data = self._get_json(f"repos/{repo_full_name}/actions/runs", "workflow runs")
        try:
            page = WorkflowRunsPage.model_validate(data)
        except ValidationError as exc:
            raise DecodeError(f"error decoding workflow runs: {exc}") from exc
        return page.workflow_runs

    def close(self) -> None:
        """httpx.Client를 종료한다."""
        self._client.close()

    def __enter__(self) -> GitHubApiClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

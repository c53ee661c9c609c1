"""GitHub REST API 응답 모델 (Pydantic).

필요한 필드만 선언하고 나머지 필드는 무시한다.
"""

from __future__ import annotations

from pydantic import BaseModel

QUEUED_STATUS = "queued"


class Repository(BaseModel):
    """GET /orgs/{org}/repos 응답 항목."""

    full_name: str


class WorkflowRun(BaseModel):
    """GET /repos/{owner}/{repo}/actions/runs 응답의 workflow_runs 항목.

    status는 열린 문자열 집합이다 (queued, in_progress, completed, ...).
    """

    status: str | None = None

    @property
    def is_queued(self) -> bool:
        return self.status == QUEUED_STATUS


class WorkflowRunsPage(BaseModel):
    total_count: int | None = None
    workflow_runs: list[WorkflowRun]

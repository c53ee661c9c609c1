"""조직 전체의 queued workflow run 집계.

repo 목록 → repo별 workflow run 목록 → status == "queued" 카운트.
하나라도 실패하면 부분 합계 없이 전체가 실패한다.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterator

from runner_scaler.github_api import GitHubApiClient
from runner_scaler.models import Repository, WorkflowRun

logger = logging.getLogger(__name__)


def iter_workflow_runs(
    client: GitHubApiClient, org: str
) -> Iterator[tuple[Repository, list[WorkflowRun]]]:
    """org의 repo를 upstream 반환 순서대로 순회하며 (repo, runs)를 yield한다.

    에러는 해당 repo를 순회하는 시점에 그대로 전파된다.
    """
    repos = client.list_repositories(org)
    logger.debug("Listed %d repositories for %s", len(repos), org, extra={"org": org})
    for repo in repos:
        yield repo, client.list_workflow_runs(repo.full_name)


def count_queued_jobs(client: GitHubApiClient, org: str) -> int:
    """org 전체에서 queued 상태인 workflow run 수를 센다.

    Raises:
        GitHubApiError: repo 목록 또는 어느 한 repo의 run 목록 조회 실패
    """
    start = time.monotonic()
    total = 0
    for _repo, runs in iter_workflow_runs(client, org):
        total += sum(1 for run in runs if run.is_queued)

    duration_ms = (time.monotonic() - start) * 1000
    logger.info(
        "Counted %d queued jobs in %s",
        total,
        org,
        extra={"org": org, "queued_jobs": total, "duration_ms": round(duration_ms, 1)},
    )
    return total

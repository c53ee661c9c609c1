"""FastAPI HTTP 엔드포인트.

GET /queued_jobs → {"queued_jobs": N}
집계 실패 시 500 + 에러 텍스트 (stale 값을 대신 반환하지 않는다).
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from runner_scaler.cache import QueuedJobsCache
from runner_scaler.github_api import GitHubApiError


def create_app(cache: QueuedJobsCache) -> FastAPI:
    app = FastAPI(title="github-runner-scaler", version="0.1.0")
    app.state.cache = cache

    @app.exception_handler(GitHubApiError)
    async def _github_api_error(request: Request, exc: GitHubApiError) -> PlainTextResponse:
        return PlainTextResponse(f"error counting queued jobs: {exc}", status_code=500)

    # sync 핸들러: threadpool에서 실행되어 동시 요청이 캐시 락에서 직렬화된다
    @app.get("/queued_jobs")
    def queued_jobs(request: Request) -> dict[str, int]:
        return {"queued_jobs": request.app.state.cache.get()}

    return app

"""click CLI 엔트리포인트.

github-runner-scaler serve 명령으로 /queued_jobs 엔드포인트를 띄웁니다.
"""

from __future__ import annotations

import functools
import logging
from pathlib import Path

import click
import orjson
import uvicorn

from runner_scaler.aggregator import count_queued_jobs
from runner_scaler.api import create_app
from runner_scaler.cache import QueuedJobsCache
from runner_scaler.config import load_config
from runner_scaler.github_api import GitHubApiClient, GitHubApiError
from runner_scaler.logging_config import setup_logging

logger = logging.getLogger(__name__)

_config_option = click.option(
    "--config",
    "config_path",
    default=None,
    type=click.Path(exists=True, path_type=Path),
    help="설정 파일 경로 (기본: 프로젝트 루트 config.yaml, 없으면 환경변수만 사용)",
)


@click.group()
@click.version_option(version="0.1.0", prog_name="github-runner-scaler")
def main() -> None:
    """GitHub Runner Scaler - org 전체의 queued GitHub Actions job 수를 제공합니다."""


@main.command()
@_config_option
@click.option("--host", default=None, help="바인드 주소 (기본: server.host)")
@click.option("--port", default=None, type=int, help="포트 (기본: server.port / PORT)")
@click.option("--json-log/--no-json-log", default=True, help="JSON 로그 포맷 (기본: 활성)")
def serve(config_path: Path | None, host: str | None, port: int | None, json_log: bool) -> None:
    """GET /queued_jobs HTTP 서버를 실행합니다.

    캐시 TTL 안에서는 upstream을 호출하지 않고 마지막 집계값을 반환합니다.
    """
    setup_logging(json_format=json_log)
    config = load_config(config_path)

    try:
        client = GitHubApiClient.from_config(config.github)
    except RuntimeError as exc:
        raise click.ClickException(str(exc)) from exc

    recompute = functools.partial(count_queued_jobs, client, config.github.organization)
    cache = QueuedJobsCache(recompute, ttl_sec=config.cache.ttl_sec)
    app = create_app(cache)

    bind_host = host or config.server.host
    bind_port = port or config.server.port
    logger.info(
        "Starting server on port %s with cache timeout of %d seconds...",
        bind_port,
        config.cache.ttl_sec,
        extra={"org": config.github.organization},
    )
    try:
        uvicorn.run(app, host=bind_host, port=bind_port, log_config=None)
    finally:
        client.close()


@main.command()
@_config_option
def count(config_path: Path | None) -> None:
    """캐시 없이 한 번 집계하고 결과를 JSON으로 출력합니다."""
    setup_logging(json_format=False, level=logging.WARNING)
    config = load_config(config_path)

    try:
        with GitHubApiClient.from_config(config.github) as client:
            total = count_queued_jobs(client, config.github.organization)
    except (RuntimeError, GitHubApiError) as exc:
        raise click.ClickException(f"error counting queued jobs: {exc}") from exc

    click.echo(orjson.dumps({"queued_jobs": total}).decode())

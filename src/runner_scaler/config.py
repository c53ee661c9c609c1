"""YAML 설정 로딩 + Pydantic 모델."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[2] / "config.yaml"

PUBLIC_GITHUB_API_URL = "https://api.github.com"


# ── 설정 모델 ──────────────────────────────────────────


class GitHubConfig(BaseModel):
    base_url: str = PUBLIC_GITHUB_API_URL
    organization: str
    token_env_var: str = "GITHUB_TOKEN"
    request_timeout_sec: float = Field(default=30.0, gt=0)
    user_agent: str = "github-runner-scaler/0.1.0"

    @field_validator("organization")
    @classmethod
    def organization_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("organization must not be empty")
        return v

    def token(self) -> str:
        """token_env_var 환경변수에서 액세스 토큰을 읽는다."""
        token = os.environ.get(self.token_env_var, "")
        if not token:
            raise RuntimeError(f"환경변수 {self.token_env_var}이 설정되지 않았습니다")
        return token


class CacheConfig(BaseModel):
    ttl_sec: float = Field(default=60.0, ge=0)


class ServerConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = Field(default=8080, ge=1, le=65535)


class AppConfig(BaseModel):
    """애플리케이션 전체 설정."""

    github: GitHubConfig
    cache: CacheConfig = Field(default_factory=CacheConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)


# ── 로딩 ───────────────────────────────────────────────


def load_config(path: Path | None = None) -> AppConfig:
    """YAML 설정 파일을 로딩하고 Pydantic 모델로 검증한다.

    환경변수 우선순위: 시스템 환경변수 > .env 파일 > config.yaml 기본값
    기본 경로의 config.yaml이 없으면 환경변수만으로 구성한다.
    """
    config_path = path or _DEFAULT_CONFIG_PATH

    # .env 파일 로딩: config.yaml과 같은 디렉터리의 .env를 탐색
    dotenv_path = config_path.parent / ".env"
    load_dotenv(dotenv_path=dotenv_path, override=False)

    raw: dict = {}
    if path is not None or config_path.exists():
        with open(config_path) as f:
            raw = yaml.safe_load(f)
        if raw is None:
            raise ValueError(f"Empty config file: {config_path}")

    # 환경변수 오버라이드
    if base_url := os.environ.get("GITHUB_URL"):
        raw.setdefault("github", {})
        raw["github"]["base_url"] = base_url

    if org := os.environ.get("GITHUB_ORGANIZATION"):
        raw.setdefault("github", {})
        raw["github"]["organization"] = org

    if timeout := os.environ.get("GITHUB_RUNNER_SCALER_CACHE_TIMEOUT"):
        try:
            ttl_sec = int(timeout)
        except ValueError:
            ttl_sec = None
        if ttl_sec is None or ttl_sec < 0:
            logger.warning(
                "Invalid GITHUB_RUNNER_SCALER_CACHE_TIMEOUT: %r - using configured value",
                timeout,
            )
        else:
            raw.setdefault("cache", {})
            raw["cache"]["ttl_sec"] = ttl_sec

    if port := os.environ.get("PORT"):
        raw.setdefault("server", {})
        raw["server"]["port"] = port

    return AppConfig.model_validate(raw)

"""runner_scaler 로거 설정.

서버는 한 줄짜리 JSON 로그를, count 같은 대화형 명령은 사람이 읽는 포맷을 쓴다.
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import Any

# logger.*(..., extra={...})로 넘겨 받아 JSON에 싣는 키
_EXTRA_FIELDS = ("event_code", "org", "repo", "status_code", "queued_jobs", "duration_ms")

_PLAIN_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class JsonFormatter(logging.Formatter):
    """레코드 하나를 JSON 객체 한 줄로 직렬화한다 (None인 extra는 생략)."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.now(tz=UTC).strftime("%Y-%m-%dT%H:%M:%SZ"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(
            (key, getattr(record, key))
            for key in _EXTRA_FIELDS
            if getattr(record, key, None) is not None
        )
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False)


def setup_logging(*, json_format: bool = True, level: int = logging.INFO) -> None:
    """runner_scaler 로거에 stderr 핸들러 하나를 붙인다.

    여러 번 호출해도 핸들러는 하나만 남는다.

    Args:
        json_format: True면 JsonFormatter, False면 평문 포맷
        level: 로거와 핸들러 레벨
    """
    package_logger = logging.getLogger("runner_scaler")
    package_logger.setLevel(level)
    package_logger.handlers.clear()

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(JsonFormatter() if json_format else logging.Formatter(_PLAIN_FORMAT))
    package_logger.addHandler(handler)

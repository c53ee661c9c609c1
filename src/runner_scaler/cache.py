"""queued job 카운트 TTL 캐시.

단일 락으로 get 전체를 감싼다. stale 상태에서 들어온 첫 호출자가 락을 쥔 채
재계산하고, 그동안 다른 호출자는 락에서 대기하다가 새 값을 받는다 (single-flight).
- 재계산 실패 시 엔트리는 그대로 두고 예외를 전파한다
- 백그라운드 갱신 없음: 만료 후 첫 호출자가 재계산 지연을 부담한다
"""

from __future__ import annotations

import enum
import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)


class CacheState(enum.Enum):
    FRESH = "fresh"
    STALE = "stale"
    RECOMPUTING = "recomputing"


@dataclass(frozen=True)
class CacheEntry:
    """마지막으로 성공한 집계 결과.

    computed_at이 None이면 아직 한 번도 성공하지 않은 초기 상태(항상 stale).
    """

    count: int = 0
    computed_at: float | None = None


class QueuedJobsCache:
    """recompute 결과를 ttl_sec 동안 재사용하는 캐시."""

    def __init__(
        self,
        recompute: Callable[[], int],
        *,
        ttl_sec: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._recompute = recompute
        self._ttl_sec = ttl_sec
        self._clock = clock
        self._lock = threading.Lock()
        self._entry = CacheEntry()
        self._recomputing = False

    @property
    def ttl_sec(self) -> float:
        return self._ttl_sec

    @property
    def entry(self) -> CacheEntry:
        return self._entry

    @property
    def state(self) -> CacheState:
        if self._recomputing:
            return CacheState.RECOMPUTING
        return CacheState.FRESH if self._is_fresh(self._entry) else CacheState.STALE

    def _is_fresh(self, entry: CacheEntry) -> bool:
        if entry.computed_at is None:
            return False
        return self._clock() - entry.computed_at < self._ttl_sec

    def get(self) -> int:
        """fresh면 캐시 값을, stale이면 재계산한 값을 반환한다.

        Raises:
            recompute가 던진 예외를 그대로 전파한다 (엔트리는 변경되지 않음).
        """
        with self._lock:
            entry = self._entry
            if self._is_fresh(entry):
                logger.debug(
                    "Returning cached result",
                    extra={"event_code": "CACHE_HIT", "queued_jobs": entry.count},
                )
                return entry.count

            self._recomputing = True
            try:
                count = self._recompute()
            except Exception as exc:
                logger.error(
                    "Cache refresh failed: %s",
                    exc,
                    extra={"event_code": "CACHE_REFRESH_FAILED"},
                )
                raise
            finally:
                self._recomputing = False

            self._entry = CacheEntry(count=count, computed_at=self._clock())
            logger.info(
                "Cache refreshed",
                extra={"event_code": "CACHE_REFRESHED", "queued_jobs": count},
            )
            return count

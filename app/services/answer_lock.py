"""
답변 단위 락 (중복 실행 방지)

큐는 at-least-once 이므로 같은 answer_id 작업이 동시에 두 번 돌 수 있다.
작업 시작 전 answer:{id}:lock 을 잡고, 못 잡으면 중복으로 보고 건너뛴다.
- Redis: SET NX EX (TTL은 작업 최대 시간보다 길게), 해제는 내 토큰일 때만 DEL
- Local: 프로세스 내부 set + threading.Lock (단일 워커/테스트용)
"""

from __future__ import annotations

import logging
import threading
import uuid
from contextlib import contextmanager

import redis

logger = logging.getLogger(__name__)

LOG_LOCK_SKIP = "[LOCK] answer_id=%s already locked, skipping"
LOG_LOCK_ACQUIRED = "[LOCK] answer_id=%s acquired"
LOG_LOCK_RELEASED = "[LOCK] answer_id=%s released"

DEFAULT_LOCK_TTL_SECONDS = 1800  # 30분

# 내 토큰일 때만 삭제 (TTL 만료 후 다른 작업이 잡은 락을 지우지 않도록)
_RELEASE_SCRIPT = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
end
return 0
"""


class AnswerLock:

    def acquire(self, answer_id: int) -> bool:
        raise NotImplementedError

    def release(self, answer_id: int) -> None:
        raise NotImplementedError

    @contextmanager
    def hold(self, answer_id: int):
        acquired = self.acquire(answer_id)
        try:
            yield acquired
        finally:
            if acquired:
                self.release(answer_id)


class LocalAnswerLock(AnswerLock):

    def __init__(self):
        self._guard = threading.Lock()
        self._held: set[int] = set()

    def acquire(self, answer_id: int) -> bool:
        with self._guard:
            if answer_id in self._held:
                logger.info(LOG_LOCK_SKIP, answer_id)
                return False
            self._held.add(answer_id)
        logger.debug(LOG_LOCK_ACQUIRED, answer_id)
        return True

    def release(self, answer_id: int) -> None:
        with self._guard:
            self._held.discard(answer_id)
        logger.debug(LOG_LOCK_RELEASED, answer_id)

    def is_locked(self, answer_id: int) -> bool:
        with self._guard:
            return answer_id in self._held


class RedisAnswerLock(AnswerLock):

    def __init__(self, client: redis.Redis, ttl_seconds: int = DEFAULT_LOCK_TTL_SECONDS):
        self.client = client
        self.ttl_seconds = ttl_seconds
        self._tokens: dict[int, str] = {}
        self._release = client.register_script(_RELEASE_SCRIPT)

    @staticmethod
    def key(answer_id: int) -> str:
        return f"answer:{answer_id}:lock"

    def acquire(self, answer_id: int) -> bool:
        token = uuid.uuid4().hex
        try:
            ok = self.client.set(self.key(answer_id), token, nx=True, ex=self.ttl_seconds)
        except redis.RedisError as e:
            # Redis 장애 시 락 없이 진행 (원래 동작과 동일)
            logger.warning("[LOCK] redis acquire failed answer_id=%s, proceeding unlocked: %s", answer_id, e)
            return True
        if not ok:
            logger.info(LOG_LOCK_SKIP, answer_id)
            return False
        self._tokens[answer_id] = token
        logger.debug(LOG_LOCK_ACQUIRED, answer_id)
        return True

    def release(self, answer_id: int) -> None:
        token = self._tokens.pop(answer_id, None)
        if token is None:
            return
        try:
            self._release(keys=[self.key(answer_id)], args=[token])
            logger.debug(LOG_LOCK_RELEASED, answer_id)
        except redis.RedisError as e:
            # TTL 만료 시 자동 해제
            logger.warning("[LOCK] redis release failed answer_id=%s: %s", answer_id, e)


def build_answer_lock(settings) -> AnswerLock:
    backend = (settings.answer_lock_backend or "redis").lower()
    if backend == "redis":
        client = redis.Redis.from_url(
            settings.redis_url,
            decode_responses=True,
            socket_timeout=5,
            socket_connect_timeout=5,
        )
        return RedisAnswerLock(client, ttl_seconds=settings.answer_lock_ttl_sec)
    if backend == "local":
        return LocalAnswerLock()
    raise ValueError(f"unknown ANSWER_LOCK_BACKEND: {settings.answer_lock_backend}")

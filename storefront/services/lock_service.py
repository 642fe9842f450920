import threading
import time
import uuid
import weakref
from contextlib import contextmanager

import redis

from storefront.domain.errors import ConcurrentModification, LockUnavailable
from storefront.utils.retry import redis_retry
from storefront.utils.settings import REDIS_URL, LOCK_BACKEND, LOCK_TTL_SECONDS, LOCK_WAIT_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

#compare-and-delete, only the owner of the token may release
_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""

_POLL_INTERVAL = 0.05


class LockService:
    """
    Per-user mutex around cart, checkout and order commit.

    Backed by Redis so that all API workers share it:
    - SET key token NX EX ttl to acquire
    - Lua compare-and-delete to release
    The TTL frees a lock left behind by a crashed worker.
    """

    def __init__(self, url: str | None = None, ttl: int = LOCK_TTL_SECONDS, wait: float = LOCK_WAIT_SECONDS):
        self.redis = redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )
        self.ttl = ttl
        self.wait = wait

    @staticmethod
    def _key(user_id: int) -> str:
        return f"user:{user_id}:lock"

    @redis_retry()
    def acquire_user_lock(self, user_id: int, token: str) -> bool:
        return bool(self.redis.set(name=self._key(user_id), value=token, nx=True, ex=self.ttl))

    @redis_retry()
    def release_user_lock(self, user_id: int, token: str) -> bool:
        res = self.redis.eval(_RELEASE_LUA, 1, self._key(user_id), token)
        return bool(res)

    @contextmanager
    def user_lock(self, user_id: int):
        token = uuid.uuid4().hex
        deadline = time.monotonic() + self.wait

        while not self._try_acquire(user_id, token):
            if time.monotonic() >= deadline:
                logger.warning(f"Lock for user {user_id} not acquired within {self.wait}s")
                raise ConcurrentModification("Another operation on this cart is in progress")
            time.sleep(_POLL_INTERVAL)

        try:
            yield
        finally:
            self._release(user_id, token)

    def _try_acquire(self, user_id: int, token: str) -> bool:
        try:
            return self.acquire_user_lock(user_id, token)
        except redis.RedisError as exc:
            logger.error(f"Lock backend unavailable for user {user_id}: {exc!r}")
            raise LockUnavailable("Lock backend unavailable") from exc

    def _release(self, user_id: int, token: str) -> None:
        try:
            released = self.release_user_lock(user_id, token)
        except redis.RedisError:
            # work under the lock is already done, the TTL frees the key
            logger.error(f"Lock for user {user_id} not released, expires in {self.ttl}s", exc_info=True)
            return
        if not released:
            logger.warning(f"Lock for user {user_id} expired before release")


class LocalLockService:
    """
    In-process variant for a single worker (and the test suite).
    One threading.Lock per user id, created on first use and dropped
    once nobody holds or waits on it.
    """

    def __init__(self, wait: float = LOCK_WAIT_SECONDS):
        self.wait = wait
        self._locks = weakref.WeakValueDictionary()
        self._guard = threading.Lock()

    def _lock_for(self, user_id: int) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(user_id)
            if lock is None:
                lock = self._locks[user_id] = threading.Lock()
            return lock

    @contextmanager
    def user_lock(self, user_id: int):
        lock = self._lock_for(user_id)
        if not lock.acquire(timeout=self.wait):
            logger.warning(f"Lock for user {user_id} not acquired within {self.wait}s")
            raise ConcurrentModification("Another operation on this cart is in progress")
        try:
            yield
        finally:
            lock.release()


_lock_service = None


def get_lock_service():
    global _lock_service
    if _lock_service is None:
        if LOCK_BACKEND == "local":
            _lock_service = LocalLockService()
        else:
            _lock_service = LockService()
    return _lock_service

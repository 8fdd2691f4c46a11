from contextlib import contextmanager
import threading
import time
import uuid
from portal.settings import settings
from portal.store.redis_conn import get_redis

_RELEASE_SCRIPT = """
if redis.call("get", KEYS[1]) == ARGV[1] then
    return redis.call("del", KEYS[1])
else
    return 0
end
"""

@contextmanager
def registry_lock(name: str, ttl_ms: int = 0, attempts: int = 50, wait_sec: float = 0.1):
    """
    Distributed lock to ensure single-writer per registry across processes.
    """
    r = get_redis()
    key = f"lock:registry:{name}"
    token = uuid.uuid4().hex
    ttl_ms = int(ttl_ms or settings.REGISTRY_LOCK_TTL_MS)
    acquired = r.set(key, token, px=ttl_ms, nx=True)

    try:
        if not acquired:
            for _ in range(attempts):
                time.sleep(wait_sec)
                if r.set(key, token, px=ttl_ms, nx=True):
                    acquired = True
                    break

            if not acquired:
                raise RuntimeError(f"Could not acquire lock for registry {name}")

        yield
    finally:
        if acquired:
            # Release only if we own it (the TTL may have handed it to someone else)
            r.eval(_RELEASE_SCRIPT, 1, key, token)


def redis_lock_factory(name: str):
    return lambda: registry_lock(name)


def local_lock_factory():
    """Process-local single writer (in-memory backend)."""
    lock = threading.RLock()
    return lambda: lock

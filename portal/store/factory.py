from dataclasses import dataclass
from typing import Callable, Optional

from portal.core.application_registry import ApplicationRegistry
from portal.core.user_registry import UserRegistry
from portal.settings import settings
from portal.store.memory import InMemoryApplicationStore, InMemoryUserStore
from portal.store.redis_repo import RedisApplicationStore, RedisUserStore
from portal.utils.lock import redis_lock_factory
from portal.utils.time import utc_now

BACKENDS = ("memory", "redis")


@dataclass
class Registries:
    applications: ApplicationRegistry
    users: UserRegistry


def build_registries(backend: Optional[str] = None, clock: Callable = utc_now) -> Registries:
    backend = (backend or settings.STORE_BACKEND or "memory").lower()
    if backend not in BACKENDS:
        raise ValueError(f"Unknown STORE_BACKEND {backend!r} (expected one of {', '.join(BACKENDS)})")

    if backend == "redis":
        return Registries(
            applications=ApplicationRegistry(
                RedisApplicationStore(), clock=clock, lock_factory=redis_lock_factory("applications")
            ),
            users=UserRegistry(RedisUserStore(), clock=clock, lock_factory=redis_lock_factory("users")),
        )

    return Registries(
        applications=ApplicationRegistry(InMemoryApplicationStore(), clock=clock),
        users=UserRegistry(InMemoryUserStore(), clock=clock),
    )

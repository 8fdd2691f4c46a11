"""
User Registry
-------------
Account lifecycle for applicants:

    ACTIVE --block(1..3 days)--> BLOCKED --window lapses / unblock()--> ACTIVE
    ACTIVE | BLOCKED --delete()--> DELETED   (terminal, soft delete)

A lapsed block is noticed lazily: the next authenticate()/check_access()
flips the record back to ACTIVE. release_expired_blocks() does the same
eagerly for the background sweep.
"""
import uuid
from datetime import timedelta
from typing import Callable, ContextManager, Dict, List, Optional

from portal.core.errors import ConflictError, NotFoundError
from portal.core.state_machine import UserStatus
from portal.core.validation import check_block_request, check_user_fields
from portal.observability.logging import log
from portal.settings import settings
from portal.store.base import UserStore
from portal.store.models import AuthResult, User
from portal.utils.lock import local_lock_factory
from portal.utils.time import utc_now

AUTH_OK = "OK"
AUTH_BLOCKED = "BLOCKED"
AUTH_DELETED = "DELETED"


class UserRegistry:
    def __init__(
        self,
        store: UserStore,
        clock: Callable = utc_now,
        lock_factory: Optional[Callable[[], ContextManager]] = None,
        block_min_days: Optional[int] = None,
        block_max_days: Optional[int] = None,
    ):
        self._store = store
        self._clock = clock
        self._lock = lock_factory or local_lock_factory()
        self._block_min = settings.BLOCK_MIN_DAYS if block_min_days is None else int(block_min_days)
        self._block_max = settings.BLOCK_MAX_DAYS if block_max_days is None else int(block_max_days)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def get_by_id(self, user_id: str) -> User:
        user = self._store.get(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def get_by_email(self, email: str) -> User:
        user = self._store.get_by_email(email)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def list_all(self) -> List[User]:
        return self._store.list_all()

    def list_by_status(self, status) -> List[User]:
        status = UserStatus(status)
        return [u for u in self._store.list_all() if u.status == status]

    def count_by_status(self) -> Dict[str, int]:
        counts = {s.value: 0 for s in UserStatus}
        for u in self._store.list_all():
            counts[u.status.value] += 1
        return counts

    def search(self, query: str) -> List[User]:
        users = self._store.list_all()
        if not query:
            return users
        needle = query.lower()
        return [
            u for u in users
            if needle in (u.firstName or "").lower()
            or needle in (u.lastName or "").lower()
            or needle in (u.email or "").lower()
            or query in (u.phoneNumber or "")
        ]

    # ------------------------------------------------------------------
    # Registration / login
    # ------------------------------------------------------------------
    def create(self, first_name: str, last_name: str, email: str, phone_number: str) -> User:
        check_user_fields(first_name, last_name, email, phone_number)
        with self._lock():
            if self._store.get_by_email(email) is not None:
                raise ConflictError("User with this email already exists")
            user = User(
                id=self._new_id(),
                email=email,
                firstName=first_name,
                lastName=last_name,
                phoneNumber=phone_number,
                status=UserStatus.ACTIVE,
                createdAt=self._clock(),
            )
            self._store.add(user)

        log(event="user_created", userId=user.id, email=email)
        return user

    def authenticate(self, email: str) -> AuthResult:
        """
        Login by email. Credentials are not verified here.
        A refused login leaves lastLoginAt untouched.
        """
        with self._lock():
            user = self.get_by_email(email)
            result = self._evaluate_access(user)
            if result.ok:
                user.lastLoginAt = self._clock()
                self._store.save(user)

        log(event="user_login", userId=user.id, outcome=result.status)
        return result

    def check_access(self, user_id: str) -> AuthResult:
        """Same gate as authenticate(), by id and without recording a login."""
        with self._lock():
            user = self.get_by_id(user_id)
            return self._evaluate_access(user)

    # ------------------------------------------------------------------
    # Admin actions
    # ------------------------------------------------------------------
    def block(self, user_id: str, reason: str, duration_days: int) -> User:
        check_block_request(reason, duration_days, self._block_min, self._block_max)
        with self._lock():
            user = self.get_by_id(user_id)
            self._ensure_not_deleted(user)
            user.status = UserStatus.BLOCKED
            user.blockedUntil = self._clock() + timedelta(days=duration_days)
            user.blockReason = reason
            self._store.save(user)

        log(event="user_blocked", userId=user.id, durationDays=duration_days, blockedUntil=user.blockedUntil)
        return user

    def unblock(self, user_id: str) -> User:
        """Lift a block. Also accepted for ACTIVE users (no-op apart from the write)."""
        with self._lock():
            user = self.get_by_id(user_id)
            self._ensure_not_deleted(user)
            user.status = UserStatus.ACTIVE
            user.clear_block()
            self._store.save(user)

        log(event="user_unblocked", userId=user.id)
        return user

    def delete(self, user_id: str) -> User:
        with self._lock():
            user = self.get_by_id(user_id)
            if user.status == UserStatus.DELETED:
                return user
            user.status = UserStatus.DELETED
            user.clear_block()
            self._store.save(user)

        log(event="user_deleted", userId=user.id)
        return user

    def release_expired_blocks(self) -> List[User]:
        released = []
        with self._lock():
            now = self._clock()
            for user in self._store.list_all():
                if user.status == UserStatus.BLOCKED and self._block_lapsed(user, now):
                    user.status = UserStatus.ACTIVE
                    user.clear_block()
                    self._store.save(user)
                    released.append(user)

        if released:
            log(event="user_blocks_released", count=len(released), userIds=[u.id for u in released])
        return released

    # ------------------------------------------------------------------
    def _evaluate_access(self, user: User) -> AuthResult:
        # Caller holds the lock; a lapsed block is written back here
        if user.status == UserStatus.DELETED:
            return AuthResult(status=AUTH_DELETED, user=user)

        if user.status == UserStatus.BLOCKED:
            if not self._block_lapsed(user, self._clock()):
                return AuthResult(
                    status=AUTH_BLOCKED,
                    user=user,
                    blockedUntil=user.blockedUntil,
                    blockReason=user.blockReason,
                )
            user.status = UserStatus.ACTIVE
            user.clear_block()
            self._store.save(user)
            log(event="user_block_expired", userId=user.id)

        return AuthResult(status=AUTH_OK, user=user)

    @staticmethod
    def _block_lapsed(user: User, now) -> bool:
        # A block without an end date is treated as already lapsed
        return user.blockedUntil is None or user.blockedUntil <= now

    @staticmethod
    def _ensure_not_deleted(user: User) -> None:
        if user.status == UserStatus.DELETED:
            raise ConflictError("User has been deleted")

    def _new_id(self) -> str:
        while True:
            candidate = uuid.uuid4().hex[:12]
            if self._store.get(candidate) is None:
                return candidate

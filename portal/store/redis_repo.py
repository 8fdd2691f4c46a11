import json
from dataclasses import asdict, fields as dc_fields
from datetime import datetime
from enum import Enum
from typing import List, Optional

from portal.core.errors import ConflictError
from portal.observability.logging import log
from portal.store.base import ApplicationStore, UserStore
from portal.store.models import Application, User
from portal.store.redis_conn import get_redis
from portal.utils.time import parse_iso, to_iso

APPLICATION_PREFIX = "application:"
APPLICATION_INDEX = "applications:index"  # RPUSH ids, keeps insertion order

USER_PREFIX = "user:"
USER_INDEX = "users:index"
USER_EMAIL_PREFIX = "user:email:"  # email -> user id, claimed with SET NX

APPLICATION_TIME_FIELDS = ("createdAt", "updatedAt")
USER_TIME_FIELDS = ("createdAt", "lastLoginAt", "blockedUntil")


def _json_safe(obj):
    if isinstance(obj, datetime):
        return to_iso(obj)
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, dict):
        return {k: _json_safe(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_json_safe(v) for v in obj]
    return obj


def _dump(record) -> str:
    return json.dumps(_json_safe(asdict(record)))


def _filter_kwargs(cls, data: dict, record_id: str) -> dict:
    """
    Drop undeclared fields so cls(**kwargs) never explodes on documents
    written by an older (or newer) build.
    """
    allowed = {f.name for f in dc_fields(cls)}
    dropped = [k for k in data if k not in allowed]
    if dropped:
        log(event="record_fields_dropped", kind=cls.__name__, id=record_id, dropped=sorted(dropped))
    return {k: v for k, v in data.items() if k in allowed}


def _load(cls, raw: Optional[str], time_fields):
    if not raw:
        return None
    data = json.loads(raw)
    data = _filter_kwargs(cls, data, str(data.get("id", "")))
    for name in time_fields:
        if name in data:
            data[name] = parse_iso(data[name])
    return cls(**data)


class _RedisStore:
    def __init__(self, redis=None):
        self._redis = redis

    def _r(self):
        return self._redis if self._redis is not None else get_redis()


class RedisApplicationStore(_RedisStore, ApplicationStore):
    def _key(self, application_id: str) -> str:
        return f"{APPLICATION_PREFIX}{application_id}"

    def add(self, application: Application) -> None:
        r = self._r()
        r.set(self._key(application.id), _dump(application))
        r.rpush(APPLICATION_INDEX, application.id)

    def get(self, application_id: str) -> Optional[Application]:
        raw = self._r().get(self._key(application_id))
        return _load(Application, raw, APPLICATION_TIME_FIELDS)

    def save(self, application: Application) -> None:
        self._r().set(self._key(application.id), _dump(application))

    def list_all(self) -> List[Application]:
        r = self._r()
        ids = r.lrange(APPLICATION_INDEX, 0, -1) or []
        if not ids:
            return []
        out = []
        for raw in r.mget([self._key(i) for i in ids]):
            app = _load(Application, raw, APPLICATION_TIME_FIELDS)
            if app is not None:
                out.append(app)
        return out


class RedisUserStore(_RedisStore, UserStore):
    def _key(self, user_id: str) -> str:
        return f"{USER_PREFIX}{user_id}"

    def _email_key(self, email: str) -> str:
        return f"{USER_EMAIL_PREFIX}{email}"

    def add(self, user: User) -> None:
        r = self._r()
        # Uniqueness is decided by whoever claims the email key first
        if not r.set(self._email_key(user.email), user.id, nx=True):
            raise ConflictError("User with this email already exists")
        r.set(self._key(user.id), _dump(user))
        r.rpush(USER_INDEX, user.id)

    def get(self, user_id: str) -> Optional[User]:
        raw = self._r().get(self._key(user_id))
        return _load(User, raw, USER_TIME_FIELDS)

    def get_by_email(self, email: str) -> Optional[User]:
        user_id = self._r().get(self._email_key(email))
        return self.get(user_id) if user_id else None

    def save(self, user: User) -> None:
        self._r().set(self._key(user.id), _dump(user))

    def list_all(self) -> List[User]:
        r = self._r()
        ids = r.lrange(USER_INDEX, 0, -1) or []
        if not ids:
            return []
        out = []
        for raw in r.mget([self._key(i) for i in ids]):
            user = _load(User, raw, USER_TIME_FIELDS)
            if user is not None:
                out.append(user)
        return out

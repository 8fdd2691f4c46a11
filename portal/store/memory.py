import copy
from typing import Dict, List, Optional

from portal.core.errors import ConflictError
from portal.store.base import ApplicationStore, UserStore
from portal.store.models import Application, User


class InMemoryApplicationStore(ApplicationStore):
    """Process-local storage; everything is gone on restart."""

    def __init__(self):
        self._rows: Dict[str, Application] = {}

    def add(self, application: Application) -> None:
        self._rows[application.id] = copy.deepcopy(application)

    def get(self, application_id: str) -> Optional[Application]:
        row = self._rows.get(application_id)
        return copy.deepcopy(row) if row is not None else None

    def save(self, application: Application) -> None:
        self._rows[application.id] = copy.deepcopy(application)

    def list_all(self) -> List[Application]:
        return [copy.deepcopy(a) for a in self._rows.values()]


class InMemoryUserStore(UserStore):
    def __init__(self):
        self._rows: Dict[str, User] = {}
        self._by_email: Dict[str, str] = {}

    def add(self, user: User) -> None:
        if user.email in self._by_email:
            raise ConflictError("User with this email already exists")
        self._rows[user.id] = copy.deepcopy(user)
        self._by_email[user.email] = user.id

    def get(self, user_id: str) -> Optional[User]:
        row = self._rows.get(user_id)
        return copy.deepcopy(row) if row is not None else None

    def get_by_email(self, email: str) -> Optional[User]:
        user_id = self._by_email.get(email)
        return self.get(user_id) if user_id else None

    def save(self, user: User) -> None:
        self._rows[user.id] = copy.deepcopy(user)

    def list_all(self) -> List[User]:
        return [copy.deepcopy(u) for u in self._rows.values()]

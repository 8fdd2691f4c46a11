"""
Repository interfaces the registries are written against.

Contract shared by every implementation:
- get*/list* hand out copies; a change is visible only after save().
- get*/get_by_email return None when absent (registries turn that into NotFoundError).
- list_all() preserves insertion order.
"""
from abc import ABC, abstractmethod
from typing import List, Optional

from portal.store.models import Application, User


class ApplicationStore(ABC):
    @abstractmethod
    def add(self, application: Application) -> None:
        ...

    @abstractmethod
    def get(self, application_id: str) -> Optional[Application]:
        ...

    @abstractmethod
    def save(self, application: Application) -> None:
        ...

    @abstractmethod
    def list_all(self) -> List[Application]:
        ...


class UserStore(ABC):
    @abstractmethod
    def add(self, user: User) -> None:
        """Insert a new user. Raises ConflictError when the email is taken."""

    @abstractmethod
    def get(self, user_id: str) -> Optional[User]:
        ...

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[User]:
        ...

    @abstractmethod
    def save(self, user: User) -> None:
        ...

    @abstractmethod
    def list_all(self) -> List[User]:
        ...

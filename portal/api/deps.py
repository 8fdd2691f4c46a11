from typing import Optional

from portal.core.application_registry import ApplicationRegistry
from portal.core.user_registry import UserRegistry
from portal.store.factory import Registries, build_registries

_registries: Optional[Registries] = None


def get_registries() -> Registries:
    """Process-wide registries, built on first use from settings.STORE_BACKEND."""
    global _registries
    if _registries is None:
        _registries = build_registries()
    return _registries


def get_application_registry() -> ApplicationRegistry:
    return get_registries().applications


def get_user_registry() -> UserRegistry:
    return get_registries().users

from datetime import datetime, timedelta, timezone

import pytest

from portal.core.application_registry import ApplicationRegistry
from portal.core.user_registry import UserRegistry
from portal.store.memory import InMemoryApplicationStore, InMemoryUserStore
from portal.store.models import ApplicantProfile, IdentityDocuments


class FakeClock:
    """Deterministic clock; advance() simulates time passing."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 1, 15, 10, 0, tzinfo=timezone.utc))


@pytest.fixture
def applications(clock):
    return ApplicationRegistry(InMemoryApplicationStore(), clock=clock, min_applicant_age=18)


@pytest.fixture
def users(clock):
    return UserRegistry(InMemoryUserStore(), clock=clock, block_min_days=1, block_max_days=3)


def make_profile(**overrides) -> ApplicantProfile:
    data = dict(
        firstName="John",
        lastName="Doe",
        dateOfBirth="1990-01-01",
        gender="male",
        nationalId="12345678",
        address="123 Main St",
        city="Gaborone",
        postalCode="00000",
        emergencyContact="Jane Doe",
        emergencyPhone="+267 71234567",
        travelReason="Tourism",
    )
    data.update(overrides)
    return ApplicantProfile(**data)


def make_documents(**overrides) -> IdentityDocuments:
    data = dict(
        selfieImage="data:image/jpeg;base64,selfie",
        idFrontImage="data:image/jpeg;base64,front",
        idBackImage="data:image/jpeg;base64,back",
    )
    data.update(overrides)
    return IdentityDocuments(**data)


@pytest.fixture
def profile_factory():
    return make_profile


@pytest.fixture
def documents_factory():
    return make_documents

from unittest.mock import patch

from portal.core.state_machine import ApplicationStatus, UserStatus
from portal.store.factory import build_registries
from scripts import seed_demo_data as seed_script


def test_seed_script_is_idempotent(capsys):
    registries = build_registries("memory")

    with patch.object(seed_script, "build_registries", return_value=registries):
        assert seed_script.main() == {"users": 4, "applications": 3}
        assert seed_script.main() == {"users": 0, "applications": 0}

    assert "OK: seeded 4 users and 3 applications" in capsys.readouterr().out
    assert registries.applications.count_by_status() == {"PENDING": 1, "APPROVED": 1, "REJECTED": 1}

    sarah = registries.users.get_by_email("sarah.williams@example.com")
    assert sarah.status == UserStatus.BLOCKED
    assert sarah.blockReason == "Multiple invalid document submissions"

    michael = registries.users.get_by_email("michael.johnson@example.com")
    (rejected,) = registries.applications.list_for_user(michael.id)
    assert rejected.status == ApplicationStatus.REJECTED
    assert rejected.feedback.startswith("National ID verification failed")

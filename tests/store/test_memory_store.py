import pytest

from portal.core.errors import ConflictError
from portal.store.memory import InMemoryApplicationStore, InMemoryUserStore
from portal.store.models import Application, User


def test_application_store_hands_out_copies():
    store = InMemoryApplicationStore()
    store.add(Application(id="a1", userId="u1", city="Gaborone"))

    fetched = store.get("a1")
    fetched.city = "Maun"
    assert store.get("a1").city == "Gaborone"

    store.save(fetched)
    assert store.get("a1").city == "Maun"
    assert store.get("missing") is None


def test_application_store_keeps_insertion_order():
    store = InMemoryApplicationStore()
    for i in ("c", "a", "b"):
        store.add(Application(id=i, userId="u1"))
    store.save(Application(id="c", userId="u1", city="Maun"))
    assert [a.id for a in store.list_all()] == ["c", "a", "b"]


def test_user_store_email_index():
    store = InMemoryUserStore()
    store.add(User(id="u1", email="john.doe@example.com"))

    assert store.get_by_email("john.doe@example.com").id == "u1"
    assert store.get_by_email("JOHN.DOE@example.com") is None
    with pytest.raises(ConflictError):
        store.add(User(id="u2", email="john.doe@example.com"))
    assert [u.id for u in store.list_all()] == ["u1"]

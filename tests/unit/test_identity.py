import pytest

from fanportal.errors import InvalidInput
from fanportal.identity import ANONYMOUS, IdentityStore, is_anonymous, parse_role
from fanportal.models import UserRole


@pytest.fixture
def identity(storage):
    with storage.session_scope() as db:
        yield IdentityStore(db)


def test_unknown_caller_is_guest(identity):
    assert identity.get_role("nobody") == UserRole.guest
    assert identity.get_role(None) == UserRole.guest
    assert identity.get_role(ANONYMOUS) == UserRole.guest
    assert not identity.is_admin("nobody")


def test_set_role_and_reassign(identity):
    identity.set_role("alice", UserRole.user)
    assert identity.get_role("alice") == UserRole.user
    identity.set_role("alice", UserRole.admin)
    assert identity.is_admin("alice")


def test_anonymous_cannot_hold_a_role(identity):
    with pytest.raises(InvalidInput):
        identity.set_role(ANONYMOUS, UserRole.admin)
    with pytest.raises(InvalidInput):
        identity.set_role("", UserRole.user)


def test_profile_absent_until_saved(identity):
    assert identity.get_profile("alice") is None
    assert identity.get_profile(None) is None

    identity.save_profile("alice", "Alice")
    profile = identity.get_profile("alice")
    assert profile.name == "Alice"
    assert profile.role == "guest"

    identity.set_role("alice", UserRole.admin)
    identity.save_profile("alice", "Alice A.")
    profile = identity.get_profile("alice")
    assert profile.name == "Alice A."
    assert profile.role == "admin"


@pytest.mark.parametrize("value, expected", [
    ("admin", UserRole.admin),
    ("user", UserRole.user),
    (UserRole.guest, UserRole.guest),
])
def test_parse_role(value, expected):
    assert parse_role(value) is expected


def test_parse_role_rejects_unknown():
    with pytest.raises(InvalidInput):
        parse_role("superuser")


def test_is_anonymous():
    assert is_anonymous(None)
    assert is_anonymous("anonymous")
    assert not is_anonymous("alice")

import itertools
import pytest

from fanportal.identity import IdentityStore
from fanportal.models import UserRole
from fanportal.service import PortalService
from fanportal.storage import Storage

ADMIN = "admin-principal"
FAN = "fan-principal"
STRANGER = "stranger-principal"


@pytest.fixture
def clock():
    """A deterministic clock: every call returns a later timestamp (ns)."""
    ticks = itertools.count(start=1_700_000_000_000_000_000, step=1_000_000)
    return lambda: next(ticks)


@pytest.fixture(scope="function")
def storage():
    """Provides a Storage instance connected to an in-memory SQLite database for each test function."""
    storage = Storage(db_url="sqlite:///:memory:")
    storage.init_db()
    yield storage


@pytest.fixture
def service(storage, clock):
    """A bootstrapped service with one admin and one registered user."""
    service = PortalService(storage, clock=clock)
    service.bootstrap()
    with storage.session_scope() as db:
        identity = IdentityStore(db)
        identity.set_role(ADMIN, UserRole.admin)
        identity.set_role(FAN, UserRole.user)
    return service


@pytest.fixture
def admin():
    return ADMIN


@pytest.fixture
def fan():
    return FAN


@pytest.fixture
def stranger():
    """A signed-in caller with no role assignment, i.e. a guest."""
    return STRANGER

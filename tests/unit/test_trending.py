import pytest

from fanportal.errors import InvalidInput, NotFound
from fanportal.trending import TrendingCurator


@pytest.fixture
def curator(storage, clock):
    with storage.session_scope() as session:
        yield TrendingCurator(session, clock)


def test_remove_is_visible_in_the_same_session(curator):
    first = curator.add(1, "article")
    second = curator.add(2, "rumor")

    curator.remove(first)
    with pytest.raises(NotFound):
        curator.get(first)
    assert [t.id for t in curator.list_all()] == [second]


def test_remove_missing_raises_not_found(curator):
    with pytest.raises(NotFound):
        curator.remove(5)


def test_add_stamps_curation_time(curator):
    first = curator.add(1, "discussion")
    second = curator.add(1, "discussion")
    assert curator.get(second).timestamp > curator.get(first).timestamp


def test_add_rejects_unknown_type(curator):
    with pytest.raises(InvalidInput):
        curator.add(1, "podcast")
    assert curator.list_all() == []

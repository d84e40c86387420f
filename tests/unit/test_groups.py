import pytest

from fanportal.errors import Conflict, InvalidInput, NotFound
from fanportal.groups import GroupStore
from fanportal.schemas import Album, Discography, GroupData, GroupNews, Member, Schedule, Setlist, Single


@pytest.fixture
def groups(storage):
    with storage.session_scope() as db:
        yield GroupStore(db)


@pytest.fixture
def akb():
    return GroupData(
        name="AKB48",
        member_count=1,
        formation_date=1_134_000_000_000_000_000,
        base_location="Akihabara",
        theater_location="AKB48 Theater",
        members=[Member(full_name="Oguri Yui", nickname="Yuiyui", birthdate=1, generation="Team 8", team="A")],
        schedules=[Schedule(date=2, event="Theater show", location="Akihabara")],
        news=[GroupNews(id=1, title="Anniversary", content="...", date=3)],
        discography=Discography(
            albums=[Album(title="Set List", release_date=4, tracks=["Aitakatta"])],
            singles=[Single(title="Heavy Rotation", release_date=5, tracks=["Heavy Rotation", "Lucky Seven"])],
        ),
        setlists=[Setlist(title="Team A 6th Stage", tracks=["Pajama Drive"])],
    )


def test_create_and_get_round_trip(groups, akb):
    groups.create(akb)
    assert groups.get("AKB48") == akb


def test_create_duplicate_name_conflicts(groups, akb):
    groups.create(GroupData(name="AKB48"))
    with pytest.raises(Conflict):
        groups.create(akb)
    assert groups.get("AKB48").member_count == 0


def test_update_replaces_whole_aggregate(groups, akb):
    groups.create(akb)
    replacement = GroupData(name="AKB48", member_count=0, base_location="Tokyo")
    groups.update(replacement)

    stored = groups.get("AKB48")
    assert stored.members == []
    assert stored.discography == Discography()
    assert stored.base_location == "Tokyo"


def test_member_count_is_not_derived(groups, akb):
    akb.member_count = 48
    groups.create(akb)
    assert groups.get("AKB48").member_count == 48
    assert len(groups.get("AKB48").members) == 1


def test_update_missing_group_not_found(groups):
    with pytest.raises(NotFound):
        groups.update(GroupData(name="SKE48"))


def test_delete_is_hard(groups, akb):
    groups.create(akb)
    groups.delete("AKB48")
    with pytest.raises(NotFound):
        groups.get("AKB48")
    # The name is free again
    groups.create(GroupData(name="AKB48"))


def test_delete_missing_group_not_found(groups):
    with pytest.raises(NotFound):
        groups.delete("NMB48")


def test_list_all(groups):
    assert groups.list_all() == []
    groups.create(GroupData(name="SKE48"))
    groups.create(GroupData(name="AKB48"))
    assert sorted(g.name for g in groups.list_all()) == ["AKB48", "SKE48"]


@pytest.mark.parametrize("group", [
    GroupData(name=""),
    GroupData(name="  "),
    GroupData(name="JKT48", member_count=-1),
])
def test_invalid_groups_rejected(groups, group):
    with pytest.raises(InvalidInput):
        groups.create(group)


def test_group_data_from_dict_tolerates_missing_sections():
    group = GroupData.from_dict({"name": "HKT48"})
    assert group == GroupData(name="HKT48")

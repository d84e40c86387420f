"""
Group aggregate store

A group is keyed by its name and bundles members, schedules, news,
discography and setlists. Writers send the whole aggregate; there are no
partial updates, so the last write of a group wins.
"""
from typing import List
import logging
from sqlalchemy.orm import Session

from fanportal.errors import Conflict, InvalidInput, NotFound
from fanportal.models import Group
from fanportal.schemas import GroupData

log = logging.getLogger(__name__)

AGGREGATE_FIELDS = (
    'member_count', 'formation_date', 'base_location', 'theater_location',
    'members', 'schedules', 'news', 'discography', 'setlists',
)


def _validate(group: GroupData) -> None:
    if not (group.name or '').strip():
        raise InvalidInput("Group name must not be empty")
    if group.member_count < 0:
        raise InvalidInput("member_count must not be negative")


def _to_data(row: Group) -> GroupData:
    data = {'name': row.name}
    for name in AGGREGATE_FIELDS:
        data[name] = getattr(row, name)
    return GroupData.from_dict(data)


class GroupStore:
    """Group CRUD"""

    def __init__(self, db: Session):
        self.db = db

    def _write(self, row: Group, group: GroupData) -> None:
        values = group.to_dict()
        for name in AGGREGATE_FIELDS:
            setattr(row, name, values[name])

    def create(self, group: GroupData) -> None:
        _validate(group)
        if self.db.get(Group, group.name) is not None:
            raise Conflict(f"Group '{group.name}' already exists")
        row = Group(name=group.name)
        self._write(row, group)
        self.db.add(row)
        self.db.flush()
        log.info(f"Created group '{group.name}'")

    def update(self, group: GroupData) -> None:
        """Replaces the stored aggregate with group as a whole."""
        _validate(group)
        row = self.db.get(Group, group.name)
        if row is None:
            raise NotFound(f"Group '{group.name}' does not exist")
        self._write(row, group)
        log.info(f"Replaced group '{group.name}'")

    def delete(self, name: str) -> None:
        row = self.db.get(Group, name)
        if row is None:
            raise NotFound(f"Group '{name}' does not exist")
        self.db.delete(row)
        self.db.flush()
        log.info(f"Deleted group '{name}'")

    def get(self, name: str) -> GroupData:
        row = self.db.get(Group, name)
        if row is None:
            raise NotFound(f"Group '{name}' does not exist")
        return _to_data(row)

    def list_all(self) -> List[GroupData]:
        return [_to_data(row) for row in self.db.query(Group).order_by(Group.name).all()]

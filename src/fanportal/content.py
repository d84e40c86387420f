"""
Content stores

Articles, rumors and discussions share one lifecycle (create, update, archive,
restore, list). ContentStore implements it once; a ContentKind describes the
per-type differences.
"""
from dataclasses import dataclass
from typing import Any, Callable, Dict, FrozenSet, List, Optional, Tuple
import logging
from sqlalchemy.orm import Session

from fanportal.errors import InvalidInput, NotFound
from fanportal.models import Article, Rumor, Discussion, Status, UserRole
from fanportal.storage import now_ns

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContentKind:
    name: str
    model: type
    date_field: str
    filter_field: str
    filter_mode: str  # 'substring' or 'equals'
    mutable_fields: Tuple[str, ...]
    create_roles: FrozenSet[UserRole]
    author_field: Optional[str] = None


ARTICLES = ContentKind(
    name="article",
    model=Article,
    date_field="date",
    filter_field="title",
    filter_mode="substring",
    mutable_fields=("title", "content", "image"),
    create_roles=frozenset({UserRole.admin}),
)

RUMORS = ContentKind(
    name="rumor",
    model=Rumor,
    date_field="date",
    filter_field="status",
    filter_mode="equals",
    mutable_fields=("title", "content", "status"),
    create_roles=frozenset({UserRole.admin}),
)

# Discussion creation is community-facing
DISCUSSIONS = ContentKind(
    name="discussion",
    model=Discussion,
    date_field="timestamp",
    filter_field="category",
    filter_mode="equals",
    mutable_fields=("title", "content", "category"),
    create_roles=frozenset({UserRole.admin, UserRole.user}),
    author_field="author",
)

CONTENT_KINDS = {kind.name: kind for kind in (ARTICLES, RUMORS, DISCUSSIONS)}

REQUIRED_TEXT_FIELDS = ("title", "content")


def parse_status(status: Any) -> Status:
    if isinstance(status, Status):
        return status
    try:
        return Status(status)
    except ValueError:
        raise InvalidInput(f"Unknown rumor status: {status!r}")


class ContentStore:
    """CRUD and archive lifecycle for one content kind"""

    def __init__(self, db: Session, kind: ContentKind, clock: Callable[[], int] = now_ns):
        self.db = db
        self.kind = kind
        self.model = kind.model
        self.clock = clock

    def _clean(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        cleaned = dict(fields)
        for name in REQUIRED_TEXT_FIELDS:
            if name in cleaned and not (cleaned[name] or '').strip():
                raise InvalidInput(f"{self.kind.name} {name} must not be empty")
        if 'status' in cleaned:
            cleaned['status'] = parse_status(cleaned['status']).value
        if 'category' in cleaned and cleaned['category'] is None:
            cleaned['category'] = ''
        return cleaned

    def create(self, fields: Dict[str, Any], author: Optional[str] = None) -> int:
        """
        Inserts a new record and returns its id.

        Args:
            fields: values for the kind's mutable fields
            author: the creating caller, stored on kinds that track authorship
        """
        unknown = set(fields) - set(self.kind.mutable_fields)
        if unknown:
            raise InvalidInput(f"Unknown {self.kind.name} fields: {sorted(unknown)}")
        missing = [name for name in REQUIRED_TEXT_FIELDS if name not in fields]
        if missing:
            raise InvalidInput(f"{self.kind.name} requires {missing}")

        values = self._clean(fields)
        values[self.kind.date_field] = self.clock()
        values['archived'] = False
        if self.kind.author_field:
            values[self.kind.author_field] = author

        record = self.model(**values)
        self.db.add(record)
        self.db.flush()  # assigns the id
        log.info(f"Created {self.kind.name} #{record.id}")
        return record.id

    def get(self, item_id: int):
        """Returns the record regardless of its archived flag."""
        record = self.db.get(self.model, item_id)
        if record is None:
            raise NotFound(f"{self.kind.name} #{item_id} does not exist")
        return record

    def list_all(self) -> List[Any]:
        return self.db.query(self.model).order_by(self.model.id).all()

    def list_unarchived(self) -> List[Any]:
        return (
            self.db.query(self.model)
            .filter(self.model.archived.is_(False))
            .order_by(self.model.id)
            .all()
        )

    def filter(self, value: Any, case_sensitive: bool = False) -> List[Any]:
        """
        Unarchived records matching value on the kind's filter field.
        No match yields an empty list.
        """
        column = getattr(self.model, self.kind.filter_field)
        query = self.db.query(self.model).filter(self.model.archived.is_(False))

        if self.kind.filter_field == 'status':
            try:
                value = parse_status(value).value
            except InvalidInput:
                return []
            return query.filter(column == value).order_by(self.model.id).all()

        # SQLite's LIKE and lower() only fold ASCII, so text matching runs in Python
        fold = (lambda text: text) if case_sensitive else (lambda text: text.casefold())
        needle = fold(value or '')
        if self.kind.filter_mode == 'substring':
            matches = lambda field: needle in fold(field)
        else:
            matches = lambda field: needle == fold(field)
        rows = query.order_by(self.model.id).all()
        return [row for row in rows if matches(getattr(row, self.kind.filter_field) or '')]

    def update(self, item_id: int, fields: Dict[str, Any]) -> None:
        """Replaces the supplied mutable fields. id, date and author never change."""
        unknown = set(fields) - set(self.kind.mutable_fields)
        if unknown:
            raise InvalidInput(f"Fields {sorted(unknown)} of {self.kind.name} cannot be updated")
        record = self.get(item_id)
        for name, value in self._clean(fields).items():
            setattr(record, name, value)
        log.info(f"Updated {self.kind.name} #{item_id}")

    def set_archived(self, item_id: int, archived: bool) -> None:
        """Archives or restores a record. Repeating the same call is a no-op."""
        record = self.get(item_id)
        if record.archived == archived:
            return
        record.archived = archived
        log.info(f"{'Archived' if archived else 'Restored'} {self.kind.name} #{item_id}")

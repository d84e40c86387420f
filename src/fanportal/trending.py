"""
Trending curator

An admin-managed list of pointers to content. Entries are never checked
against the content they name, so they may dangle once that content is
archived; readers drop such entries (see homepage.resolve_trending).
"""
from typing import Callable, List
import logging
from sqlalchemy.orm import Session

from fanportal.content import CONTENT_KINDS
from fanportal.errors import InvalidInput, NotFound
from fanportal.models import Trending
from fanportal.storage import now_ns

log = logging.getLogger(__name__)


class TrendingCurator:
    """Trending CRUD"""

    def __init__(self, db: Session, clock: Callable[[], int] = now_ns):
        self.db = db
        self.clock = clock

    def add(self, content_id: int, content_type: str) -> int:
        if content_type not in CONTENT_KINDS:
            raise InvalidInput(
                f"Unknown content type {content_type!r}, expected one of {sorted(CONTENT_KINDS)}"
            )
        entry = Trending(content_id=content_id, content_type=content_type, timestamp=self.clock())
        self.db.add(entry)
        self.db.flush()
        log.info(f"Trending #{entry.id} -> {content_type} #{content_id}")
        return entry.id

    def remove(self, trending_id: int) -> None:
        entry = self.get(trending_id)
        self.db.delete(entry)
        self.db.flush()
        log.info(f"Trending #{trending_id} removed")

    def get(self, trending_id: int) -> Trending:
        entry = self.db.get(Trending, trending_id)
        if entry is None:
            raise NotFound(f"trending #{trending_id} does not exist")
        return entry

    def list_all(self) -> List[Trending]:
        return self.db.query(Trending).order_by(Trending.id).all()

"""
Comment store

Comments point at content through a bare content_id. Article, rumor and
discussion ids are not unique across kinds, so comments on equal ids of
different kinds share one thread; callers know which page they render.
"""
from typing import Callable, List
import logging
from sqlalchemy.orm import Session

from fanportal.errors import InvalidInput, NotFound
from fanportal.models import Comment
from fanportal.storage import now_ns

log = logging.getLogger(__name__)


class CommentStore:
    """Comment CRUD"""

    def __init__(self, db: Session, clock: Callable[[], int] = now_ns):
        self.db = db
        self.clock = clock

    def add(self, content_id: int, content: str, author: str) -> int:
        if not (content or '').strip():
            raise InvalidInput("Comment must not be empty")
        comment = Comment(
            content_id=content_id,
            content=content,
            author=author,
            timestamp=self.clock(),
            archived=False,
        )
        self.db.add(comment)
        self.db.flush()
        log.info(f"Comment #{comment.id} added to content {content_id} by '{author}'")
        return comment.id

    def get(self, comment_id: int) -> Comment:
        comment = self.db.get(Comment, comment_id)
        if comment is None:
            raise NotFound(f"comment #{comment_id} does not exist")
        return comment

    def by_content_id(self, content_id: int) -> List[Comment]:
        """All comments on content_id, archived ones included."""
        return (
            self.db.query(Comment)
            .filter(Comment.content_id == content_id)
            .order_by(Comment.id)
            .all()
        )

    def list_unarchived(self) -> List[Comment]:
        return self.db.query(Comment).filter(Comment.archived.is_(False)).order_by(Comment.id).all()

    def list_all(self) -> List[Comment]:
        return self.db.query(Comment).order_by(Comment.id).all()

    def update(self, comment_id: int, content: str) -> None:
        if not (content or '').strip():
            raise InvalidInput("Comment must not be empty")
        self.get(comment_id).content = content

    def set_archived(self, comment_id: int, archived: bool) -> None:
        comment = self.get(comment_id)
        if comment.archived != archived:
            comment.archived = archived
            log.info(f"{'Archived' if archived else 'Restored'} comment #{comment_id}")

from contextlib import contextmanager
from typing import Any, Callable, Collection, Dict, Iterator, List, Optional, Union
import logging
import threading
from sqlalchemy.orm import Session

from fanportal.comments import CommentStore
from fanportal.config import SettingsManager
from fanportal.content import ARTICLES, RUMORS, DISCUSSIONS, ContentKind, ContentStore
from fanportal.errors import InvalidInput, Unauthorized
from fanportal.groups import GroupStore
from fanportal.homepage import HomepageAggregator
from fanportal.identity import IdentityStore, is_anonymous, parse_role
from fanportal.models import Article, Comment, Discussion, Rumor, Status, Trending, UserRole
from fanportal.schemas import (
    CreateArticleRequest, CreateDiscussionRequest, CreateRumorRequest,
    GroupData, HomepageContent, UserProfileData,
)
from fanportal.storage import Storage, now_ns
from fanportal.trending import TrendingCurator

log = logging.getLogger(__name__)

ADMIN_ONLY = frozenset({UserRole.admin})
MEMBERS = frozenset({UserRole.admin, UserRole.user})


class PortalService:
    """
    The operation surface of the portal.

    Every call runs under one process-wide lock and inside one session, so
    calls never interleave and each observes a single consistent state.
    """

    def __init__(self, storage: Storage, settings: Optional[SettingsManager] = None,
                 clock: Callable[[], int] = now_ns):
        self.storage = storage
        self.settings = settings or SettingsManager(storage.Session)
        self.clock = clock
        self._lock = threading.RLock()

    def bootstrap(self):
        """Creates the schema, seeds default settings and grants bootstrap admins."""
        with self._lock:
            self.storage.init_db()
            self.settings.ensure_defaults()
            self.settings.load_settings()
            admins = self.settings.get('auth.bootstrap_admins', [])
            with self.storage.session_scope() as db:
                identity = IdentityStore(db)
                for principal in admins:
                    if identity.get_role(principal) != UserRole.admin:
                        identity.set_role(principal, UserRole.admin)
                        log.info(f"Bootstrapped admin '{principal}'")

    @contextmanager
    def _transaction(self) -> Iterator[Session]:
        with self._lock:
            with self.storage.session_scope() as db:
                yield db

    def _require(self, db: Session, caller: Optional[str], roles: Collection[UserRole], action: str) -> UserRole:
        role = IdentityStore(db).get_role(caller)
        if role not in roles:
            log.warning(f"Denied {action} for '{caller}' with role {role.value}")
            raise Unauthorized(f"{action} requires one of {sorted(r.value for r in roles)}")
        return role

    # --- Identity & roles ---

    def get_caller_user_role(self, caller: Optional[str]) -> UserRole:
        with self._transaction() as db:
            return IdentityStore(db).get_role(caller)

    def assign_caller_user_role(self, caller: Optional[str], user: str, role: Union[UserRole, str]) -> None:
        with self._transaction() as db:
            self._require(db, caller, ADMIN_ONLY, "assign role")
            IdentityStore(db).set_role(user, parse_role(role))

    def is_caller_admin(self, caller: Optional[str]) -> bool:
        with self._transaction() as db:
            return IdentityStore(db).is_admin(caller)

    def get_caller_user_profile(self, caller: Optional[str]) -> Optional[UserProfileData]:
        with self._transaction() as db:
            return IdentityStore(db).get_profile(caller)

    def save_caller_user_profile(self, caller: Optional[str], profile: UserProfileData) -> None:
        """
        Creates or updates the caller's own profile. A guest saving a profile
        registers as a user when auth.register_on_profile is enabled.
        The role carried by profile is ignored.
        """
        if is_anonymous(caller):
            raise Unauthorized("Anonymous callers cannot save a profile")
        if not (profile.name or '').strip():
            raise InvalidInput("Profile name must not be empty")
        with self._transaction() as db:
            identity = IdentityStore(db)
            identity.save_profile(caller, profile.name)
            if identity.get_role(caller) == UserRole.guest and self.settings.get('auth.register_on_profile', True):
                identity.set_role(caller, UserRole.user)

    def get_user_profile(self, user: str) -> Optional[UserProfileData]:
        with self._transaction() as db:
            return IdentityStore(db).get_profile(user)

    # --- Shared content lifecycle ---

    def _create(self, caller: Optional[str], kind: ContentKind, fields: Dict[str, Any]) -> int:
        with self._transaction() as db:
            self._require(db, caller, kind.create_roles, f"create {kind.name}")
            return ContentStore(db, kind, self.clock).create(fields, author=caller)

    def _get(self, kind: ContentKind, item_id: int):
        with self._transaction() as db:
            return ContentStore(db, kind).get(item_id)

    def _list_all(self, kind: ContentKind) -> List[Any]:
        with self._transaction() as db:
            return ContentStore(db, kind).list_all()

    def _list_unarchived(self, kind: ContentKind) -> List[Any]:
        with self._transaction() as db:
            return ContentStore(db, kind).list_unarchived()

    def _filter(self, kind: ContentKind, value: Any) -> List[Any]:
        with self._transaction() as db:
            case_sensitive = self.settings.get('content.case_sensitive_filters', False)
            return ContentStore(db, kind).filter(value, case_sensitive=case_sensitive)

    def _update(self, caller: Optional[str], kind: ContentKind, item_id: int, fields: Dict[str, Any]) -> None:
        with self._transaction() as db:
            self._require(db, caller, ADMIN_ONLY, f"update {kind.name}")
            ContentStore(db, kind).update(item_id, fields)

    def _set_archived(self, caller: Optional[str], kind: ContentKind, item_id: int, archived: bool) -> None:
        action = f"{'archive' if archived else 'restore'} {kind.name}"
        with self._transaction() as db:
            self._require(db, caller, ADMIN_ONLY, action)
            ContentStore(db, kind).set_archived(item_id, archived)

    # --- Articles ---

    def create_article(self, caller: Optional[str], request: CreateArticleRequest) -> int:
        return self._create(caller, ARTICLES, {
            'title': request.title, 'content': request.content, 'image': request.image,
        })

    def get_article(self, article_id: int) -> Article:
        return self._get(ARTICLES, article_id)

    def get_all_articles(self) -> List[Article]:
        return self._list_all(ARTICLES)

    def get_unarchived_articles(self) -> List[Article]:
        return self._list_unarchived(ARTICLES)

    def filter_articles_by_title(self, title: str) -> List[Article]:
        return self._filter(ARTICLES, title)

    def update_article(self, caller: Optional[str], article_id: int, title: str,
                       image: Optional[str], content: str) -> None:
        """Replaces title, image and content. Passing image=None removes the image."""
        self._update(caller, ARTICLES, article_id, {'title': title, 'image': image, 'content': content})

    def archive_article(self, caller: Optional[str], article_id: int) -> None:
        self._set_archived(caller, ARTICLES, article_id, True)

    def restore_article(self, caller: Optional[str], article_id: int) -> None:
        self._set_archived(caller, ARTICLES, article_id, False)

    # --- Rumors ---

    def create_rumor(self, caller: Optional[str], request: CreateRumorRequest) -> int:
        return self._create(caller, RUMORS, {
            'title': request.title, 'content': request.content,
            'status': request.status if request.status is not None else Status.waiting,
        })

    def get_rumor(self, rumor_id: int) -> Rumor:
        return self._get(RUMORS, rumor_id)

    def get_all_rumors(self) -> List[Rumor]:
        return self._list_all(RUMORS)

    def get_unarchived_rumors(self) -> List[Rumor]:
        return self._list_unarchived(RUMORS)

    def filter_rumors_by_status(self, status: Union[Status, str]) -> List[Rumor]:
        return self._filter(RUMORS, status)

    def update_rumor(self, caller: Optional[str], rumor_id: int, title: str, content: str,
                     status: Union[Status, str]) -> None:
        self._update(caller, RUMORS, rumor_id, {'title': title, 'content': content, 'status': status})

    def archive_rumor(self, caller: Optional[str], rumor_id: int) -> None:
        self._set_archived(caller, RUMORS, rumor_id, True)

    def restore_rumor(self, caller: Optional[str], rumor_id: int) -> None:
        self._set_archived(caller, RUMORS, rumor_id, False)

    # --- Discussions ---

    def create_discussion(self, caller: Optional[str], request: CreateDiscussionRequest) -> int:
        return self._create(caller, DISCUSSIONS, {
            'title': request.title, 'content': request.content, 'category': request.category,
        })

    def get_discussion(self, discussion_id: int) -> Discussion:
        return self._get(DISCUSSIONS, discussion_id)

    def get_all_discussions(self) -> List[Discussion]:
        return self._list_all(DISCUSSIONS)

    def get_unarchived_discussions(self) -> List[Discussion]:
        return self._list_unarchived(DISCUSSIONS)

    def filter_discussions_by_category(self, category: str) -> List[Discussion]:
        return self._filter(DISCUSSIONS, category)

    def update_discussion(self, caller: Optional[str], discussion_id: int, title: str,
                          category: str, content: str) -> None:
        self._update(caller, DISCUSSIONS, discussion_id,
                     {'title': title, 'category': category, 'content': content})

    def archive_discussion(self, caller: Optional[str], discussion_id: int) -> None:
        self._set_archived(caller, DISCUSSIONS, discussion_id, True)

    def restore_discussion(self, caller: Optional[str], discussion_id: int) -> None:
        self._set_archived(caller, DISCUSSIONS, discussion_id, False)

    # --- Comments ---

    def add_comment(self, caller: Optional[str], content_id: int, content: str) -> int:
        with self._transaction() as db:
            self._require(db, caller, MEMBERS, "add comment")
            return CommentStore(db, self.clock).add(content_id, content, author=caller)

    def get_comment(self, comment_id: int) -> Comment:
        with self._transaction() as db:
            return CommentStore(db).get(comment_id)

    def get_comments_by_content_id(self, content_id: int) -> List[Comment]:
        with self._transaction() as db:
            return CommentStore(db).by_content_id(content_id)

    def get_unarchived_comments(self) -> List[Comment]:
        with self._transaction() as db:
            return CommentStore(db).list_unarchived()

    def get_all_comments(self) -> List[Comment]:
        with self._transaction() as db:
            return CommentStore(db).list_all()

    def update_comment(self, caller: Optional[str], comment_id: int, content: str) -> None:
        """Only the comment's author or an admin may edit it."""
        with self._transaction() as db:
            store = CommentStore(db)
            comment = store.get(comment_id)
            if is_anonymous(caller) or comment.author != caller:
                self._require(db, caller, ADMIN_ONLY, "edit another user's comment")
            store.update(comment_id, content)

    def archive_comment(self, caller: Optional[str], comment_id: int) -> None:
        with self._transaction() as db:
            self._require(db, caller, ADMIN_ONLY, "archive comment")
            CommentStore(db).set_archived(comment_id, True)

    def restore_comment(self, caller: Optional[str], comment_id: int) -> None:
        with self._transaction() as db:
            self._require(db, caller, ADMIN_ONLY, "restore comment")
            CommentStore(db).set_archived(comment_id, False)

    # --- Trending ---

    def add_trending(self, caller: Optional[str], content_id: int, content_type: str) -> int:
        with self._transaction() as db:
            self._require(db, caller, ADMIN_ONLY, "add trending")
            return TrendingCurator(db, self.clock).add(content_id, content_type)

    def remove_trending(self, caller: Optional[str], trending_id: int) -> None:
        with self._transaction() as db:
            self._require(db, caller, ADMIN_ONLY, "remove trending")
            TrendingCurator(db).remove(trending_id)

    def get_trending(self, trending_id: int) -> Trending:
        with self._transaction() as db:
            return TrendingCurator(db).get(trending_id)

    def get_all_trending(self) -> List[Trending]:
        with self._transaction() as db:
            return TrendingCurator(db).list_all()

    # --- Groups ---

    def create_group(self, caller: Optional[str], group: GroupData) -> None:
        with self._transaction() as db:
            self._require(db, caller, ADMIN_ONLY, "create group")
            GroupStore(db).create(group)

    def update_group(self, caller: Optional[str], group: GroupData) -> None:
        with self._transaction() as db:
            self._require(db, caller, ADMIN_ONLY, "update group")
            GroupStore(db).update(group)

    def delete_group(self, caller: Optional[str], name: str) -> None:
        with self._transaction() as db:
            self._require(db, caller, ADMIN_ONLY, "delete group")
            GroupStore(db).delete(name)

    def get_group(self, name: str) -> GroupData:
        with self._transaction() as db:
            return GroupStore(db).get(name)

    def get_all_groups(self) -> List[GroupData]:
        with self._transaction() as db:
            return GroupStore(db).list_all()

    # --- Homepage ---

    def get_homepage_content(self) -> HomepageContent:
        with self._transaction() as db:
            return HomepageAggregator(db).build()

"""
Request and response shapes exchanged with the portal service.

Content records themselves are returned as ORM objects (see models.py); the
shapes here cover requests, the Group aggregate and the homepage payload.
"""
from dataclasses import dataclass, field, asdict
from typing import List, Optional, Dict, Any

from fanportal.models import Article, Rumor, Discussion, Trending, Status


@dataclass
class CreateArticleRequest:
    title: str
    content: str
    image: Optional[str] = None


@dataclass
class CreateRumorRequest:
    title: str
    content: str
    status: Status = Status.waiting


@dataclass
class CreateDiscussionRequest:
    title: str
    content: str
    category: str = ''


@dataclass
class UserProfileData:
    name: str
    role: str = ''


# --- Group aggregate ---

@dataclass
class Member:
    full_name: str
    nickname: str = ''
    birthdate: int = 0
    generation: str = ''
    team: str = ''
    bio: str = ''


@dataclass
class Schedule:
    date: int
    event: str
    location: str = ''


@dataclass
class GroupNews:
    id: int
    title: str
    content: str
    date: int


@dataclass
class Album:
    title: str
    release_date: int
    tracks: List[str] = field(default_factory=list)


@dataclass
class Single:
    title: str
    release_date: int
    tracks: List[str] = field(default_factory=list)


@dataclass
class Discography:
    albums: List[Album] = field(default_factory=list)
    singles: List[Single] = field(default_factory=list)


@dataclass
class Setlist:
    title: str
    tracks: List[str] = field(default_factory=list)


@dataclass
class GroupData:
    """
    A whole group aggregate.

    member_count is maintained by the writer and is never derived from members.
    """
    name: str
    member_count: int = 0
    formation_date: int = 0
    base_location: str = ''
    theater_location: str = ''
    members: List[Member] = field(default_factory=list)
    schedules: List[Schedule] = field(default_factory=list)
    news: List[GroupNews] = field(default_factory=list)
    discography: Discography = field(default_factory=Discography)
    setlists: List[Setlist] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GroupData":
        discography = data.get('discography') or {}
        return cls(
            name=data['name'],
            member_count=data.get('member_count', 0),
            formation_date=data.get('formation_date', 0),
            base_location=data.get('base_location', ''),
            theater_location=data.get('theater_location', ''),
            members=[Member(**m) for m in data.get('members', [])],
            schedules=[Schedule(**s) for s in data.get('schedules', [])],
            news=[GroupNews(**n) for n in data.get('news', [])],
            discography=Discography(
                albums=[Album(**a) for a in discography.get('albums', [])],
                singles=[Single(**s) for s in discography.get('singles', [])],
            ),
            setlists=[Setlist(**s) for s in data.get('setlists', [])],
        )


# --- Homepage payload ---

@dataclass(frozen=True)
class TrendingRow:
    item_id: int
    item_type: str
    timestamp: int


@dataclass(frozen=True)
class LatestArticleRow:
    item_id: int
    item_type: str
    upload_date: int


@dataclass
class HomepageContent:
    """
    Everything the homepage renders, read in one consistent pass.

    trending_table and latest_articles_table carry no ordering guarantee;
    consumers sort them (see homepage.latest_first / homepage.trending_first).
    """
    articles: List[Article]
    rumors: List[Rumor]
    discussions: List[Discussion]
    trending: List[Trending]
    trending_table: List[TrendingRow]
    latest_articles_table: List[LatestArticleRow]

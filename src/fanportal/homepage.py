"""
Homepage aggregator

Builds the homepage payload from every store in one session: the unarchived
content of each kind, the raw trending list, and two derived, type-tagged
tables. Nothing is written and nothing is sorted; the tables are ordered by
their readers (latest_first, trending_first).
"""
from typing import Any, Iterable, List, Optional, Tuple
from sqlalchemy.orm import Session

from fanportal.content import ARTICLES, RUMORS, DISCUSSIONS, ContentStore
from fanportal.models import Trending
from fanportal.schemas import HomepageContent, LatestArticleRow, TrendingRow
from fanportal.trending import TrendingCurator


class HomepageAggregator:

    def __init__(self, db: Session):
        self.db = db

    def build(self) -> HomepageContent:
        per_kind = {
            kind.name: (kind, ContentStore(self.db, kind).list_unarchived())
            for kind in (ARTICLES, RUMORS, DISCUSSIONS)
        }
        trending = TrendingCurator(self.db).list_all()

        trending_table = [
            TrendingRow(item_id=entry.content_id, item_type=entry.content_type, timestamp=entry.timestamp)
            for entry in trending
        ]
        latest_articles_table = [
            LatestArticleRow(item_id=item.id, item_type=kind.name, upload_date=getattr(item, kind.date_field))
            for kind, items in per_kind.values()
            for item in items
        ]

        return HomepageContent(
            articles=per_kind[ARTICLES.name][1],
            rumors=per_kind[RUMORS.name][1],
            discussions=per_kind[DISCUSSIONS.name][1],
            trending=trending,
            trending_table=trending_table,
            latest_articles_table=latest_articles_table,
        )


# --- Consumer side: ordering and trending resolution ---

def latest_first(rows: Iterable[LatestArticleRow]) -> List[LatestArticleRow]:
    return sorted(rows, key=lambda row: row.upload_date, reverse=True)


def trending_first(rows: Iterable[Any]) -> List[Any]:
    """Sorts TrendingRow or Trending entries, most recently curated first."""
    return sorted(rows, key=lambda row: row.timestamp, reverse=True)


def resolve_trending(content: HomepageContent, limit: Optional[int] = None) -> List[Tuple[Trending, Any]]:
    """
    Joins trending entries to the unarchived items they point at, newest
    curation first. Entries whose item is archived or missing are dropped.
    """
    items = {
        ARTICLES.name: {a.id: a for a in content.articles},
        RUMORS.name: {r.id: r for r in content.rumors},
        DISCUSSIONS.name: {d.id: d for d in content.discussions},
    }
    resolved = []
    for entry in trending_first(content.trending):
        item = items.get(entry.content_type, {}).get(entry.content_id)
        if item is None:
            continue
        resolved.append((entry, item))
        if limit is not None and len(resolved) >= limit:
            break
    return resolved

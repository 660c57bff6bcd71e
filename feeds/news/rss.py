"""
Space news from RSS/Atom feeds.

Feeds are fetched through the shared fetcher and parsed with feedparser.  Each
configured feed fails on its own; the adapter only degrades when every feed
failed or none produced a usable entry.
"""

import html
import logging
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Sequence

import feedparser
from dateutil.parser import parse as parse_date

from swx.config import NewsFeed
from swx.errors import FetchError
from swx.interfaces import FeedFetcher, SourceAdapter
from swx.models import NewsItem
from swx.taskgroup import SettledGroup


logger = logging.getLogger(__name__)

SUMMARY_LENGTH = 150

_TAG_RE = re.compile(r"<[^>]*>")

# Timezone abbreviations seen in RSS pubDate fields
TZINFOS = {
    "EST": timezone(timedelta(hours=-5)),
    "EDT": timezone(timedelta(hours=-4)),
    "CST": timezone(timedelta(hours=-6)),
    "CDT": timezone(timedelta(hours=-5)),
    "PST": timezone(timedelta(hours=-8)),
    "PDT": timezone(timedelta(hours=-7)),
    "GMT": timezone.utc,
    "UTC": timezone.utc,
}


@dataclass(frozen=True)
class FeedEntry:
    title: str
    link: str
    published_at: Optional[datetime]
    summary: str = ""


def _parse_published(entry) -> Optional[datetime]:
    published = entry.get("published") or entry.get("updated")
    if not published:
        return None
    try:
        dt = parse_date(published, tzinfos=TZINFOS)
    except (ValueError, OverflowError):
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def parse_feed_list(raw: bytes) -> List[FeedEntry]:
    """Parse an RSS/Atom document into entries, skipping untitled ones."""
    feed = feedparser.parse(raw)
    channel_title = (feed.feed.get("title") or "").strip().lower()

    entries = []
    for entry in feed.entries:
        title = (entry.get("title") or "").strip()
        if not title or title.lower() == channel_title:
            continue
        entries.append(FeedEntry(
            title=title,
            link=(entry.get("link") or "").strip(),
            published_at=_parse_published(entry),
            summary=entry.get("summary") or entry.get("description") or "",
        ))
    return entries


def clean_summary(text: str, limit: int = SUMMARY_LENGTH) -> str:
    """Strip markup and truncate to *limit* characters plus an ellipsis."""
    plain = html.unescape(_TAG_RE.sub("", text or "")).strip()
    if not plain:
        return ""
    return plain[:limit] + "..."


class NewsFeedAdapter(SourceAdapter):
    """Collects the first few entries of every configured feed."""

    name = "news"
    label = "Space News Feeds"

    def __init__(
        self,
        fetcher: FeedFetcher,
        feeds: Sequence[NewsFeed],
        timeout: float = 10.0,
        per_feed: int = 3,
    ):
        super().__init__(fetcher, feeds[0].url if feeds else "", timeout)
        self.feeds = list(feeds)
        self.per_feed = per_feed

    def default(self) -> List[NewsItem]:
        return []

    def to_items(self, feed: NewsFeed, entries: Sequence[FeedEntry]) -> List[NewsItem]:
        items = []
        for entry in entries[: self.per_feed]:
            items.append(NewsItem(
                title=entry.title,
                link=entry.link or feed.url,
                date=entry.published_at.isoformat() if entry.published_at else "",
                source=feed.name,
                summary=clean_summary(entry.summary),
            ))
        return items

    async def _one(self, feed: NewsFeed) -> List[NewsItem]:
        raw = await self.fetcher.fetch(feed.url, self.timeout)
        items = self.to_items(feed, parse_feed_list(raw))
        logger.info(f"News from {feed.name}: {len(items)} items")
        return items

    async def collect(self) -> List[NewsItem]:
        if not self.feeds:
            return []

        group = SettledGroup()
        for i, feed in enumerate(self.feeds):
            group.spawn(f"news[{i}] {feed.name}", self._one(feed), default=[])
        outcomes = list((await group.join()).values())

        items: List[NewsItem] = []
        for outcome in outcomes:
            items.extend(outcome.value)

        if not any(outcome.ok for outcome in outcomes):
            first = outcomes[0]
            if isinstance(first.exc, FetchError):
                raise first.exc
            raise FetchError(self.feeds[0].url, first.exc)
        return items

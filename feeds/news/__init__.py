"""
News feed adapter (RSS / Atom via feedparser).
"""

from .rss import NewsFeedAdapter, parse_feed_list, FeedEntry

__all__ = ["NewsFeedAdapter", "parse_feed_list", "FeedEntry"]

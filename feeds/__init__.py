"""
Source adapters, one per upstream feed.
"""

from typing import List

from swx.config import PipelineConfig
from swx.interfaces import FeedFetcher, SourceAdapter

from .noaa import DstIndexAdapter, KpIndexAdapter, SolarFlareAdapter, SolarWindAdapter, XrayFluxAdapter
from .news import NewsFeedAdapter


def build_adapters(config: PipelineConfig, fetcher: FeedFetcher) -> List[SourceAdapter]:
    """Instantiate every adapter from *config*, all sharing one fetcher."""
    ep = config.endpoints
    timeout = config.timeout_s
    return [
        KpIndexAdapter(fetcher, ep.kp, timeout, window=config.kp_window),
        SolarWindAdapter(fetcher, ep.solar_wind, timeout),
        SolarFlareAdapter(
            fetcher, ep.flares, timeout, fallback_url=ep.flares_fallback, window=config.flare_window
        ),
        XrayFluxAdapter(fetcher, ep.xray, timeout),
        DstIndexAdapter(fetcher, ep.dst, timeout),
        NewsFeedAdapter(fetcher, config.news_feeds, timeout, per_feed=config.news_per_feed),
    ]


__all__ = [
    "build_adapters",
    "KpIndexAdapter",
    "SolarWindAdapter",
    "SolarFlareAdapter",
    "XrayFluxAdapter",
    "DstIndexAdapter",
    "NewsFeedAdapter",
]

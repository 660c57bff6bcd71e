"""
Solar flare catalog adapter.

Two catalogs are understood:

* GOES flare list:  ``begin_time``, ``max_time``, ``end_time``, ``max_class``
* DONKI style list: ``beginTime``, ``peakTime``, ``endTime``, ``classType``

The GOES list is primary.  When it fails or is empty the fallback URL is
tried exactly once.
"""

import logging
import re
from typing import List, Optional, Tuple

from swx.decode import Record, to_float
from swx.errors import FetchError, ShapeError
from swx.interfaces import FeedFetcher, JsonFeedAdapter
from swx.models import FlareEvent


logger = logging.getLogger(__name__)

_CLASS_RE = re.compile(r"^\s*([ABCMX])\s*(\d+(?:\.\d+)?)?", re.IGNORECASE)


def split_flare_class(class_type: str) -> Tuple[str, float]:
    """``"M1.5"`` -> ``("M", 1.5)``; anything unrecognised -> ``("", 0.0)``."""
    m = _CLASS_RE.match(class_type or "")
    if not m:
        return "", 0.0
    return m.group(1).upper(), to_float(m.group(2))


class SolarFlareAdapter(JsonFeedAdapter):
    """Keeps the last ``window`` flares."""

    name = "solar_flares"
    label = "NOAA GOES X-ray Flare Catalog"
    required = ("max_class", "classType", "class_type", "begin_time", "beginTime")

    def __init__(
        self,
        fetcher: FeedFetcher,
        url: str,
        timeout: float = 10.0,
        fallback_url: Optional[str] = None,
        window: int = 10,
    ):
        super().__init__(fetcher, url, timeout)
        self.fallback_url = fallback_url
        self.window = window

    def default(self) -> List[FlareEvent]:
        return []

    def normalize(self, records: List[Record]) -> List[FlareEvent]:
        flares = []
        for rec in records:
            class_type = str(rec.get("max_class", "classType", "class_type") or "")
            letter, magnitude = split_flare_class(class_type)
            flares.append(FlareEvent(
                begin_time=rec.get("begin_time", "beginTime"),
                peak_time=rec.get("max_time", "peakTime", "peak_time"),
                end_time=rec.get("end_time", "endTime"),
                class_type=class_type,
                class_letter=letter,
                class_magnitude=magnitude,
            ))
        return flares[-self.window:]

    async def collect(self) -> List[FlareEvent]:
        try:
            flares = self.normalize(self.usable(await self.load(self.url)))
        except (FetchError, ShapeError) as e:
            if not self.fallback_url:
                raise
            logger.warning(f"Primary flare feed failed ({e}), trying fallback")
            flares = []

        if not flares and self.fallback_url:
            flares = self.normalize(self.usable(await self.load(self.fallback_url)))

        logger.info(f"Solar flares: {len(flares)} entries")
        return flares

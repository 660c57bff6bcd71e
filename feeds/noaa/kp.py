"""
Planetary Kp index adapter.

Accepts both shapes NOAA has served for this product:

    [{"time_tag": "...", "kp": 2.33, "estimated_kp": 2.67, ...}, ...]
    [["time_tag", "Kp", "a_running", "station_count"], ["...", "2.33", "7", "8"], ...]
"""

import logging
from typing import List

from swx.decode import Record
from swx.interfaces import FeedFetcher, JsonFeedAdapter
from swx.models import KpReading


logger = logging.getLogger(__name__)


class KpIndexAdapter(JsonFeedAdapter):
    """Keeps the most recent ``window`` Kp readings."""

    name = "kp_index"
    label = "NOAA Space Weather Prediction Center"
    required = ("kp", "kp_index")

    def __init__(self, fetcher: FeedFetcher, url: str, timeout: float = 10.0, window: int = 24):
        super().__init__(fetcher, url, timeout)
        self.window = window

    def default(self) -> List[KpReading]:
        return []

    def normalize(self, records: List[Record]) -> List[KpReading]:
        readings = []
        for rec in records:
            kp = rec.get("kp", "kp_index", index=1)
            # Named feeds without an estimate column carry only the observed value.
            estimated = rec.get("estimated_kp", "kp_fraction", index=None if rec.keyed else 2)
            readings.append(KpReading(
                timestamp=rec.get("time_tag", "timestamp", index=0),
                kp_value=kp,
                estimated_kp=kp if estimated is None else estimated,
            ))

        readings = readings[-self.window:]
        logger.info(f"Kp index: {len(readings)} entries")
        return readings

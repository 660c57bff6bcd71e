"""
Kyoto Dst index adapter.
"""

import logging
from typing import List, Optional

from swx.decode import Record
from swx.interfaces import JsonFeedAdapter
from swx.models import DstReading


logger = logging.getLogger(__name__)


class DstIndexAdapter(JsonFeedAdapter):
    """Keeps only the latest hourly Dst value."""

    name = "dst_index"
    label = "Geomagnetic Storm Monitoring"
    required = ("dst",)

    def default(self) -> Optional[DstReading]:
        return None

    def normalize(self, records: List[Record]) -> Optional[DstReading]:
        if not records:
            return None

        latest = records[-1]
        reading = DstReading(
            timestamp=latest.get("time_tag", "timestamp", index=0),
            dst_nanotesla=latest.get("dst", index=1),
        )
        logger.info(f"Dst index: {reading.dst_nanotesla:g} nT")
        return reading

"""
GOES X-ray flux adapter.

The 7-day product interleaves the short (0.05-0.4 nm) and long (0.1-0.8 nm)
channels.  Flare classes are defined on the long channel, so the latest long
channel row wins; if the feed carries no energy band at all the latest row is
used as-is.
"""

import logging
from typing import List, Optional

from swx.decode import Record
from swx.interfaces import JsonFeedAdapter
from swx.models import XrayReading


logger = logging.getLogger(__name__)

LONG_BAND = "0.1-0.8nm"


class XrayFluxAdapter(JsonFeedAdapter):
    name = "xray_flux"
    label = "NASA GOES Satellite Data"
    required = ("flux",)

    def default(self) -> Optional[XrayReading]:
        return None

    def normalize(self, records: List[Record]) -> Optional[XrayReading]:
        if not records:
            return None

        long_band = [r for r in records if str(r.get("energy") or "").replace(" ", "") == LONG_BAND]
        latest = (long_band or records)[-1]

        reading = XrayReading(
            timestamp=latest.get("time_tag", "timestamp", index=0),
            flux_watts_per_m2=latest.get("flux", index=1),
            energy_band=latest.get("energy"),
        )
        logger.info(f"X-ray flux: {reading.flux_watts_per_m2:.3e} W/m2")
        return reading

"""
Solar wind plasma adapter (density, bulk speed, temperature).
"""

import logging
from typing import List, Optional

from swx.decode import Record
from swx.interfaces import JsonFeedAdapter
from swx.models import WindReading


logger = logging.getLogger(__name__)


class SolarWindAdapter(JsonFeedAdapter):
    """Keeps only the latest plasma reading."""

    name = "solar_wind"
    label = "NOAA DSCOVR Real-Time Solar Wind"
    required = ("density", "speed", "temperature")

    def default(self) -> Optional[WindReading]:
        return None

    def normalize(self, records: List[Record]) -> Optional[WindReading]:
        if not records:
            return None

        latest = records[-1]
        reading = WindReading(
            timestamp=latest.get("time_tag", "timestamp", index=0),
            density=latest.get("density", index=1),
            speed_km_s=latest.get("speed", index=2),
            temperature_k=latest.get("temperature", index=3),
        )
        logger.info(f"Solar wind: {reading.speed_km_s:.0f} km/s, {reading.density:.1f} p/cm3")
        return reading

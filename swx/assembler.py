"""
Snapshot assembly: readings + classifications -> output documents.

The assembler is pure apart from its clock.  Given the same ``FeedReadings``
and the same clock it produces identical documents, and it always produces a
complete document set even when every adapter degraded.
"""

from __future__ import annotations

import random
from datetime import date, datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from .classify import aurora_outlook, dst_storm_level, xray_class
from .meteors import MAX_LEVEL, default_rng, meteor_activity, shower_calendar
from .models import FeedReadings, utcnow

NOAA_DATA = "noaa-data"
AURORA = "aurora"
XRAY_DATA = "xray-data"
DST_DATA = "dst-data"
NEWS = "news"
METEOR = "meteor"
UPDATE_STATUS = "update-status"

#: write order; update-status always goes last
SNAPSHOT_NAMES = [NOAA_DATA, AURORA, XRAY_DATA, DST_DATA, NEWS, METEOR]

PLACEHOLDER_NEWS = {
    "title": "Space Weather Dashboard Live",
    "link": "https://www.swpc.noaa.gov/",
    "source": "Dashboard",
    "summary": "Your enhanced space weather dashboard is now operational with real-time data feeds.",
}


def isoformat(ts: datetime) -> str:
    """ISO-8601 UTC with millisecond precision and a ``Z`` suffix."""
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    ts = ts.astimezone(timezone.utc)
    return ts.strftime("%Y-%m-%dT%H:%M:%S.") + f"{ts.microsecond // 1000:03d}Z"


def current_kp(readings: FeedReadings) -> float:
    return readings.kp_index[-1].kp_value if readings.kp_index else 0.0


class SnapshotAssembler:
    """Builds every snapshot document for one run."""

    def __init__(
        self,
        clock: Callable[[], datetime] = utcnow,
        meteor_seed: Optional[int] = None,
        rng_factory: Optional[Callable[[date], random.Random]] = None,
    ):
        self.clock = clock
        self.meteor_seed = meteor_seed
        # A fresh generator per assembly keeps repeated runs identical.
        self.rng_factory = rng_factory or (lambda day: default_rng(day, meteor_seed))

    # ---------------------------------------------- #
    # Per-domain documents

    def noaa_data(self, r: FeedReadings, updated: str) -> Dict[str, Any]:
        wind: List[Any] = []
        if r.solar_wind is not None:
            w = r.solar_wind
            wind = [w.timestamp or updated, w.density, w.speed_km_s, w.temperature_k]
        return {
            "kpIndex": [[k.timestamp, k.kp_value, k.estimated_kp] for k in r.kp_index],
            "solarWind": wind,
            "solarFlares": [
                {
                    "beginTime": f.begin_time,
                    "peakTime": f.peak_time,
                    "endTime": f.end_time,
                    "classType": f.class_type,
                    "classLetter": f.class_letter,
                    "classMagnitude": f.class_magnitude,
                }
                for f in r.flares
            ],
            "updated": updated,
            "source": "NOAA SWPC",
        }

    def aurora(self, r: FeedReadings, updated: str) -> Dict[str, Any]:
        outlook = aurora_outlook(current_kp(r))
        return {
            "forecast": outlook.forecast,
            "kpIndex": outlook.kp,
            "level": outlook.level,
            "probability": outlook.probability,
            "bestViewing": outlook.best_viewing,
            "updated": updated,
            "source": "NOAA Aurora Forecast",
        }

    def xray(self, r: FeedReadings, updated: str) -> Dict[str, Any]:
        flux = r.xray.flux_watts_per_m2 if r.xray else 0.0
        cls = xray_class(flux)
        return {
            "current": cls.label,
            "numeric": cls.magnitude,
            "class": cls.letter,
            "flux": flux,
            "description": cls.description,
            "updated": updated,
        }

    def dst(self, r: FeedReadings, updated: str) -> Dict[str, Any]:
        value = r.dst.dst_nanotesla if r.dst else 0.0
        storm = dst_storm_level(value)
        return {
            "current": value,
            "stormLevel": storm.level,
            "description": storm.description,
            "updated": updated,
        }

    def news(self, r: FeedReadings, updated: str) -> List[Dict[str, Any]]:
        items = [
            {
                "title": n.title,
                "link": n.link,
                "date": n.date or updated,
                "source": n.source,
                "summary": n.summary,
            }
            for n in r.news
        ]
        if not items:
            items.append({**PLACEHOLDER_NEWS, "date": updated})
        return items

    def meteor(self, now: datetime, updated: str) -> Dict[str, Any]:
        day = now.date()
        outlook = meteor_activity(day, self.rng_factory(day))
        return {
            "current": outlook.current_level,
            "max": MAX_LEVEL,
            "activity": outlook.activity_label,
            "description": outlook.description,
            "showers": shower_calendar(),
            "activeShowers": outlook.active_showers,
            "nextMajorShower": outlook.next_major_shower,
            "updated": updated,
        }

    # ---------------------------------------------- #
    # Whole run

    def assemble(self, readings: FeedReadings) -> Dict[str, Any]:
        """Return ``{snapshot name: document}`` in write order."""
        now = self.clock()
        updated = isoformat(now)
        return {
            NOAA_DATA: self.noaa_data(readings, updated),
            AURORA: self.aurora(readings, updated),
            XRAY_DATA: self.xray(readings, updated),
            DST_DATA: self.dst(readings, updated),
            NEWS: self.news(readings, updated),
            METEOR: self.meteor(now, updated),
        }

    def run_status(self, readings: FeedReadings, documents: Dict[str, Any]) -> Dict[str, Any]:
        now = self.clock()
        wind = readings.solar_wind
        if readings.degraded:
            message = (
                f"Space weather data updated with {len(readings.degraded)} degraded source(s): "
                + ", ".join(readings.degraded)
            )
        else:
            message = "All space weather data updated successfully"
        return {
            "lastUpdate": isoformat(now),
            "status": "success",
            "message": message,
            "timestamp": int(now.timestamp() * 1000),
            "dataSources": list(readings.consulted),
            "degradedSources": list(readings.degraded),
            "metrics": {
                "kpIndex": current_kp(readings),
                "xrayFlux": documents[XRAY_DATA]["current"],
                "dstIndex": documents[DST_DATA]["current"],
                "solarWindSpeed": wind.speed_km_s if wind else 0.0,
                "flareCount": len(readings.flares),
            },
        }

    def error_status(self, message: str) -> Dict[str, Any]:
        now = self.clock()
        return {
            "lastUpdate": isoformat(now),
            "status": "error",
            "message": message,
            "timestamp": int(now.timestamp() * 1000),
        }

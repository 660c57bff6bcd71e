"""
Meteor shower calendar.

There is no live meteor feed behind this: activity is derived from a fixed
table of the major annual showers plus a small bounded jitter.  The jitter is
drawn from an injectable ``random.Random`` so a given date and seed always
produce the same outlook.
"""

from __future__ import annotations

import random
from datetime import date
from typing import List, Optional, Tuple

from .models import MeteorOutlook, MeteorShower

MAX_LEVEL = 10.0
BACKGROUND_LEVEL = 1.0
JITTER = 0.5
# Level added by a ZHR>=100 shower on its peak date.
SHOWER_WEIGHT = 9.0

SHOWERS: List[MeteorShower] = [
    MeteorShower(name="Quadrantids", start=(12, 26), end=(1, 16), peak=(1, 3), zhr=110, rating="Major"),
    MeteorShower(name="Lyrids", start=(4, 14), end=(4, 30), peak=(4, 22), zhr=18, rating="Minor"),
    MeteorShower(name="Eta Aquariids", start=(4, 19), end=(5, 28), peak=(5, 6), zhr=50, rating="Major"),
    MeteorShower(name="Perseids", start=(7, 17), end=(8, 24), peak=(8, 12), zhr=100, rating="Major"),
    MeteorShower(name="Orionids", start=(10, 2), end=(11, 7), peak=(10, 21), zhr=20, rating="Minor"),
    MeteorShower(name="Geminids", start=(12, 4), end=(12, 20), peak=(12, 14), zhr=150, rating="Major"),
]

ACTIVITY_LABELS: List[Tuple[float, str, str]] = [
    (7.0, "High", "Strong shower activity; excellent viewing under dark skies."),
    (4.0, "Moderate", "Noticeable shower activity; several meteors per hour possible."),
    (2.0, "Low", "Some shower meteors alongside the sporadic background."),
    (0.0, "Minimal", "Sporadic background meteors only."),
]

# Non-leap reference year for month/day arithmetic on the table itself.
_REF_YEAR = 2001


def _md(month_day: Tuple[int, int]) -> str:
    return f"{month_day[0]:02d}-{month_day[1]:02d}"


def _ref_ordinal(month_day: Tuple[int, int]) -> int:
    return date(_REF_YEAR, *month_day).toordinal()


def is_active(shower: MeteorShower, day: date) -> bool:
    md = (day.month, day.day)
    if shower.start <= shower.end:
        return shower.start <= md <= shower.end
    # Window wraps over the new year.
    return md >= shower.start or md <= shower.end


def nearest_peak(shower: MeteorShower, day: date) -> date:
    candidates = [date(y, *shower.peak) for y in (day.year - 1, day.year, day.year + 1)]
    return min(candidates, key=lambda p: abs((p - day).days))


def peak_closeness(shower: MeteorShower, day: date) -> float:
    """1.0 on the peak date, falling linearly to 0.0 at the window edges."""
    offset = (day - nearest_peak(shower, day)).days
    peak = _ref_ordinal(shower.peak)
    if offset < 0:
        span = (peak - _ref_ordinal(shower.start)) % 365
    else:
        span = (_ref_ordinal(shower.end) - peak) % 365
    if span == 0:
        return 1.0 if offset == 0 else 0.0
    return min(max(1.0 - abs(offset) / span, 0.0), 1.0)


def next_major_shower(day: date) -> Optional[dict]:
    """The next Major shower peaking strictly after *day*."""
    best = None
    for shower in SHOWERS:
        if shower.rating != "Major":
            continue
        peak = date(day.year, *shower.peak)
        if peak <= day:
            peak = date(day.year + 1, *shower.peak)
        if best is None or peak < best[1]:
            best = (shower, peak)
    if best is None:
        return None
    shower, peak = best
    return {
        "name": shower.name,
        "peak": peak.isoformat(),
        "daysUntil": (peak - day).days,
        "zhr": shower.zhr,
    }


def activity_label(level: float) -> Tuple[str, str]:
    for floor, label, description in ACTIVITY_LABELS:
        if level >= floor:
            return label, description
    return ACTIVITY_LABELS[-1][1], ACTIVITY_LABELS[-1][2]


def shower_calendar() -> List[dict]:
    return [
        {
            "name": s.name,
            "start": _md(s.start),
            "end": _md(s.end),
            "peak": _md(s.peak),
            "zhr": s.zhr,
            "rating": s.rating,
        }
        for s in SHOWERS
    ]


def default_rng(day: date, seed: Optional[int] = None) -> random.Random:
    """RNG seeded from *seed*, or from the date so each day is reproducible."""
    return random.Random(seed if seed is not None else day.toordinal())


def meteor_activity(day: date, rng: Optional[random.Random] = None) -> MeteorOutlook:
    rng = rng or default_rng(day)

    base = BACKGROUND_LEVEL
    active = []
    for shower in SHOWERS:
        if not is_active(shower, day):
            continue
        closeness = peak_closeness(shower, day)
        base += SHOWER_WEIGHT * min(shower.zhr / 100.0, 1.0) * closeness
        peak = nearest_peak(shower, day)
        active.append({
            "name": shower.name,
            "peak": peak.isoformat(),
            "daysFromPeak": (day - peak).days,
            "zhr": shower.zhr,
            "rating": shower.rating,
        })

    level = base + rng.uniform(-JITTER, JITTER)
    level = round(min(max(level, 0.0), MAX_LEVEL), 1)
    label, description = activity_label(level)

    return MeteorOutlook(
        current_level=level,
        activity_label=label,
        description=description,
        active_showers=active,
        next_major_shower=next_major_shower(day),
    )

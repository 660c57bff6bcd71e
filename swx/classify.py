"""
Classifiers: pure mappings from normalized readings to categorical labels.

Every function here is total over finite floats; non-finite input is coerced
to 0.0 before classification.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import List, Tuple

from .decode import to_float
from .models import AuroraOutlook, StormLevel, XrayClass

# ---------------------------------------------- #
# X-ray flare class

# Largest threshold first; the first one met wins.
XRAY_THRESHOLDS: List[Tuple[str, float]] = [
    ("X", 1e-6),
    ("M", 1e-7),
    ("C", 1e-8),
    ("B", 1e-9),
]
XRAY_FLOOR = ("A", 1e-10)


def xray_description(letter: str, magnitude: float) -> str:
    if letter == "X":
        return "Extreme solar flare activity" if magnitude >= 10 else "Major solar flare activity"
    return {
        "M": "Moderate solar flare activity",
        "C": "Minor solar flare activity",
        "B": "Very low solar activity",
        "A": "Background solar activity",
    }.get(letter, "Normal solar activity")


def xray_class(flux: float) -> XrayClass:
    """Classify a GOES long-channel flux (W/m^2) into letter + magnitude."""
    flux = max(to_float(flux), 0.0)

    letter, threshold = XRAY_FLOOR
    for candidate, limit in XRAY_THRESHOLDS:
        if flux >= limit:
            letter, threshold = candidate, limit
            break

    # Halves round up, as in the published class labels.
    magnitude = float(Decimal(flux / threshold).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))
    return XrayClass(
        letter=letter,
        magnitude=magnitude,
        label=f"{letter}{magnitude:.1f}",
        description=xray_description(letter, magnitude),
    )


# ---------------------------------------------- #
# Geomagnetic storm level from Dst

DST_LEVELS: List[Tuple[float, str, str]] = [
    (-100, "Severe", "Severe geomagnetic storm in progress"),
    (-50, "Strong", "Strong geomagnetic storm ongoing"),
    (-30, "Moderate", "Moderate geomagnetic disturbance"),
    (-20, "Minor", "Minor geomagnetic activity"),
]
DST_QUIET = ("Quiet", "Geomagnetic conditions quiet")


def dst_storm_level(dst: float) -> StormLevel:
    dst = to_float(dst)
    for cut, level, description in DST_LEVELS:
        if dst <= cut:
            return StormLevel(level=level, description=description)
    return StormLevel(level=DST_QUIET[0], description=DST_QUIET[1])


# ---------------------------------------------- #
# Aurora


def aurora_level(kp: float) -> str:
    kp = to_float(kp)
    if kp >= 6:
        return "HIGH"
    if kp >= 4:
        return "MODERATE"
    return "LOW"


def aurora_probability(kp: float) -> str:
    return "High" if to_float(kp) >= 5 else "Low"


def best_viewing(kp: float) -> str:
    return "Late evening to early morning" if to_float(kp) >= 4 else "Not favorable"


def aurora_outlook(kp: float) -> AuroraOutlook:
    """Level, probability, viewing window and narrative for the current Kp."""
    kp = to_float(kp)
    level = aurora_level(kp)
    if kp >= 5:
        visibility = "Aurora may be visible at mid-latitudes tonight."
    else:
        visibility = "Aurora activity is quiet."
    oval = "expanded" if kp >= 4 else "near normal"
    # Naive projection: no forecast model, just current + 0.5.
    forecast = (
        f"Current Kp index is {kp:.1f} ({level}). {visibility} "
        f"The auroral oval is {oval} size. "
        f"Next 3 hours forecast: Kp {kp + 0.5:.1f}."
    )
    return AuroraOutlook(
        kp=kp,
        level=level,
        probability=aurora_probability(kp),
        best_viewing=best_viewing(kp),
        visibility=visibility,
        forecast=forecast,
    )

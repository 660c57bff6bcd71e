"""
Core data models for the snapshot pipeline.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .decode import to_float, to_text


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Reading(BaseModel):
    """Base for normalized readings: immutable, numbers always finite."""

    model_config = ConfigDict(frozen=True)

    timestamp: str = ""

    @field_validator("timestamp", mode="before")
    @classmethod
    def _text(cls, v: Any) -> str:
        return to_text(v)


class KpReading(Reading):
    kp_value: float = 0.0
    estimated_kp: float = 0.0

    @field_validator("kp_value", "estimated_kp", mode="before")
    @classmethod
    def _finite(cls, v: Any) -> float:
        return to_float(v)


class WindReading(Reading):
    density: float = 0.0
    speed_km_s: float = 0.0
    temperature_k: float = 0.0

    @field_validator("density", "speed_km_s", "temperature_k", mode="before")
    @classmethod
    def _finite(cls, v: Any) -> float:
        return to_float(v)


class XrayReading(Reading):
    flux_watts_per_m2: float = 0.0
    energy_band: str = ""

    @field_validator("flux_watts_per_m2", mode="before")
    @classmethod
    def _finite(cls, v: Any) -> float:
        return to_float(v)

    @field_validator("energy_band", mode="before")
    @classmethod
    def _band(cls, v: Any) -> str:
        return to_text(v)


class DstReading(Reading):
    dst_nanotesla: float = 0.0

    @field_validator("dst_nanotesla", mode="before")
    @classmethod
    def _finite(cls, v: Any) -> float:
        return to_float(v)


class FlareEvent(BaseModel):
    """One solar flare from either the GOES or the DONKI catalog."""

    model_config = ConfigDict(frozen=True)

    begin_time: str = ""
    peak_time: str = ""
    end_time: str = ""
    class_type: str = ""
    class_letter: str = ""
    class_magnitude: float = 0.0

    @field_validator("begin_time", "peak_time", "end_time", "class_type", "class_letter", mode="before")
    @classmethod
    def _text(cls, v: Any) -> str:
        return to_text(v)

    @field_validator("class_magnitude", mode="before")
    @classmethod
    def _finite(cls, v: Any) -> float:
        return to_float(v)


class NewsItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    link: str
    date: str
    source: str
    summary: str = ""


class AdapterResult(BaseModel):
    """Outcome of one source adapter: its value, or its default when degraded."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    source: str
    value: Any = None
    degraded: bool = False
    error: Optional[str] = None


class FeedReadings(BaseModel):
    """Everything the adapters produced during one run."""

    model_config = ConfigDict(frozen=True)

    kp_index: List[KpReading] = Field(default_factory=list)
    solar_wind: Optional[WindReading] = None
    xray: Optional[XrayReading] = None
    flares: List[FlareEvent] = Field(default_factory=list)
    dst: Optional[DstReading] = None
    news: List[NewsItem] = Field(default_factory=list)
    consulted: List[str] = Field(default_factory=list)
    degraded: List[str] = Field(default_factory=list)


# ---------------------------------------------- #
# Classifications


class XrayClass(BaseModel):
    model_config = ConfigDict(frozen=True)

    letter: str
    magnitude: float
    label: str
    description: str


class StormLevel(BaseModel):
    model_config = ConfigDict(frozen=True)

    level: str
    description: str


class AuroraOutlook(BaseModel):
    model_config = ConfigDict(frozen=True)

    kp: float
    level: str
    probability: str
    best_viewing: str
    visibility: str
    forecast: str


class MeteorShower(BaseModel):
    """Calendar entry for an annual meteor shower (month/day tuples)."""

    model_config = ConfigDict(frozen=True)

    name: str
    start: tuple[int, int]
    end: tuple[int, int]
    peak: tuple[int, int]
    zhr: int
    rating: str


class MeteorOutlook(BaseModel):
    model_config = ConfigDict(frozen=True)

    current_level: float
    activity_label: str
    description: str
    active_showers: List[dict] = Field(default_factory=list)
    next_major_shower: Optional[dict] = None

"""
Configuration loading: config.yaml plus environment overrides.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

SWPC = "https://services.swpc.noaa.gov"


class Endpoints(BaseModel):
    kp: str = f"{SWPC}/products/noaa-planetary-k-index.json"
    solar_wind: str = f"{SWPC}/products/solar-wind/plasma-7-day.json"
    xray: str = f"{SWPC}/json/goes/primary/xrays-7-day.json"
    flares: str = f"{SWPC}/json/goes-xray-flares.json"
    flares_fallback: str = f"{SWPC}/json/solar-flare.json"
    dst: str = f"{SWPC}/products/kyoto-dst.json"


class NewsFeed(BaseModel):
    name: str
    url: str


def _default_news_feeds() -> List[NewsFeed]:
    return [NewsFeed(name="NASA", url="https://www.nasa.gov/rss/dyn/breaking_news.rss")]


class PipelineConfig(BaseModel):
    """Everything one pipeline run needs; passed explicitly, never global."""

    data_dir: Path = Path("data")
    timeout_s: float = Field(default=10.0, gt=0)
    kp_window: int = Field(default=24, ge=1)
    flare_window: int = Field(default=10, ge=1)
    news_per_feed: int = Field(default=3, ge=1)
    meteor_seed: Optional[int] = None
    endpoints: Endpoints = Field(default_factory=Endpoints)
    news_feeds: List[NewsFeed] = Field(default_factory=_default_news_feeds)


def _env_overrides() -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    if os.getenv("SWX_DATA_DIR"):
        overrides["data_dir"] = os.environ["SWX_DATA_DIR"]
    if os.getenv("SWX_TIMEOUT"):
        overrides["timeout_s"] = os.environ["SWX_TIMEOUT"]
    if os.getenv("SWX_METEOR_SEED"):
        overrides["meteor_seed"] = os.environ["SWX_METEOR_SEED"]
    return overrides


def load_config(config_path: Optional[str] = None) -> PipelineConfig:
    """Load configuration from YAML, then apply ``SWX_*`` environment overrides."""
    path = Path(config_path or os.getenv("SWX_CONFIG", "config.yaml"))

    data: Dict[str, Any] = {}
    if path.exists():
        with path.open() as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"{path} must contain a mapping at the top level")
    else:
        logger.warning(f"Config file not found: {path}, using defaults")

    data.update(_env_overrides())
    return PipelineConfig.model_validate(data)

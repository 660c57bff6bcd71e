"""
NOAA SWPC feed adapters.
"""

from .kp import KpIndexAdapter
from .wind import SolarWindAdapter
from .xray import XrayFluxAdapter
from .flares import SolarFlareAdapter
from .dst import DstIndexAdapter

__all__ = ["KpIndexAdapter", "SolarWindAdapter", "XrayFluxAdapter", "SolarFlareAdapter", "DstIndexAdapter"]

"""
Error taxonomy for the snapshot pipeline.

Only ``WriteError`` is fatal to a run. ``FetchError`` and ``ShapeError`` are
absorbed by the source adapters and degrade a single data point to its default.
"""

from __future__ import annotations

from typing import Optional


class SpaceWeatherError(Exception):
    """Base class for all pipeline errors."""


class FetchError(SpaceWeatherError):
    """Network failure, timeout or non-2xx status for one upstream URL."""

    def __init__(self, url: str, cause: Optional[BaseException] = None):
        self.url = url
        self.cause = cause
        detail = f"{type(cause).__name__}: {cause}" if cause is not None else "unknown error"
        super().__init__(f"fetch failed for {url} ({detail})")


class ShapeError(SpaceWeatherError):
    """Upstream payload does not match any known schema."""


class WriteError(SpaceWeatherError):
    """Snapshot could not be persisted."""

    def __init__(self, name: str, cause: Optional[BaseException] = None):
        self.name = name
        self.cause = cause
        super().__init__(f"failed to write snapshot '{name}': {cause}")

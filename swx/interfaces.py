"""
Core interfaces for the snapshot pipeline.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, List, Tuple

from .decode import Record, RowSet, decode_json, decode_rows
from .errors import FetchError, ShapeError
from .models import AdapterResult

logger = logging.getLogger(__name__)


class FeedFetcher(ABC):
    """Retrieves raw bytes for a URL."""

    @abstractmethod
    async def fetch(self, url: str, timeout: float) -> bytes:
        """Return the response body, or raise ``FetchError``."""
        ...


class SnapshotStore(ABC):
    """Persists snapshot documents by name."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name for this store."""
        pass

    @abstractmethod
    async def write(self, name: str, document: Any) -> None:
        """Write *document* under *name*, or raise ``WriteError``."""
        pass


class SourceAdapter(ABC):
    """Fetches one upstream feed and normalizes it.

    Subclasses implement ``default`` and ``collect``.  ``fetch_and_normalize``
    never raises: any fetch, shape or parse problem is logged and turned into a
    degraded result carrying the default value.
    """

    #: key used in FeedReadings and logs
    name: str = "source"
    #: human-readable data source name reported in update-status
    label: str = "Unknown source"

    def __init__(self, fetcher: FeedFetcher, url: str, timeout: float = 10.0):
        self.fetcher = fetcher
        self.url = url
        self.timeout = timeout

    @abstractmethod
    def default(self) -> Any:
        """Value reported when the feed is unavailable."""
        pass

    @abstractmethod
    async def collect(self) -> Any:
        """Fetch and normalize; may raise."""
        pass

    def is_empty(self, value: Any) -> bool:
        return value is None or value == [] or value == ()

    async def fetch_and_normalize(self) -> AdapterResult:
        try:
            value = await self.collect()
        except (FetchError, ShapeError) as e:
            logger.warning(f"Failed to fetch {self.name}: {e}")
            return AdapterResult(source=self.name, value=self.default(), degraded=True, error=str(e))
        except Exception as e:
            logger.error(f"Unexpected error normalizing {self.name}: {e}", exc_info=True)
            return AdapterResult(source=self.name, value=self.default(), degraded=True, error=str(e))

        if self.is_empty(value):
            logger.warning(f"{self.name}: upstream returned no usable rows")
            return AdapterResult(source=self.name, value=self.default(), degraded=True, error="empty feed")
        return AdapterResult(source=self.name, value=value)


class JsonFeedAdapter(SourceAdapter):
    """A source served as JSON rows from a single endpoint.

    Object rows carrying none of ``required`` are dropped.  If rows arrived but
    none survive, the payload is in a schema we don't know and ``ShapeError``
    is raised.
    """

    #: field names of which an object row must carry at least one
    required: Tuple[str, ...] = ()

    async def load(self, url: str) -> RowSet:
        payload = await self.fetcher.fetch(url, self.timeout)
        return decode_rows(decode_json(payload))

    def usable(self, rows: RowSet) -> List[Record]:
        records = rows.records()
        kept = [rec for rec in records if rec.has(*self.required)]
        if records and not kept:
            raise ShapeError(f"no {self.name} row carries any of: {', '.join(self.required)}")
        if len(kept) < len(records):
            logger.debug(f"{self.name}: dropped {len(records) - len(kept)} unrecognised rows")
        return kept

    @abstractmethod
    def normalize(self, records: List[Record]) -> Any:
        """Map usable records to the normalized reading(s)."""
        pass

    async def collect(self) -> Any:
        return self.normalize(self.usable(await self.load(self.url)))

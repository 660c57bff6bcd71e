"""
Pipeline orchestrator: fan out adapters, assemble snapshots, write them.
"""

from __future__ import annotations

import enum
import logging
from typing import Any, Dict, List, Optional

from .assembler import UPDATE_STATUS, SnapshotAssembler
from .config import PipelineConfig
from .interfaces import FeedFetcher, SnapshotStore, SourceAdapter
from .models import AdapterResult, FeedReadings
from .taskgroup import SettledGroup

logger = logging.getLogger(__name__)

# Extra time on top of an adapter's own fetch timeouts before the join gives up on it.
GRACE_S = 1.0

# Adapter name -> FeedReadings field
READING_FIELDS = {
    "kp_index": "kp_index",
    "solar_wind": "solar_wind",
    "xray_flux": "xray",
    "solar_flares": "flares",
    "dst_index": "dst",
    "news": "news",
}


class PipelineState(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    FAULTED = "faulted"


def adapter_deadline(adapter: SourceAdapter) -> float:
    fetches = 2 if getattr(adapter, "fallback_url", None) else 1
    return adapter.timeout * fetches + GRACE_S


class Pipeline:
    """One snapshot run: Idle -> Running -> Completed | Faulted."""

    def __init__(
        self,
        config: PipelineConfig,
        fetcher: FeedFetcher,
        store: SnapshotStore,
        *,
        adapters: Optional[List[SourceAdapter]] = None,
        assembler: Optional[SnapshotAssembler] = None,
    ):
        if adapters is None:
            from feeds import build_adapters

            adapters = build_adapters(config, fetcher)

        self.config = config
        self.fetcher = fetcher
        self.store = store
        self.adapters = adapters
        self.assembler = assembler or SnapshotAssembler(meteor_seed=config.meteor_seed)
        self.state = PipelineState.IDLE
        self.status: Optional[Dict[str, Any]] = None

    async def gather_readings(self) -> FeedReadings:
        """Run every adapter concurrently and merge what they produced."""
        group = SettledGroup()
        for adapter in self.adapters:
            group.spawn(
                adapter.name,
                adapter.fetch_and_normalize(),
                default=adapter.default(),
                timeout=adapter_deadline(adapter),
            )
        settled = await group.join()

        fields: Dict[str, Any] = {}
        consulted: List[str] = []
        degraded: List[str] = []
        for adapter in self.adapters:
            outcome = settled[adapter.name]
            if outcome.ok:
                result: AdapterResult = outcome.value
            else:
                result = AdapterResult(
                    source=adapter.name, value=outcome.value, degraded=True, error=outcome.error
                )

            consulted.append(adapter.label)
            if result.degraded:
                degraded.append(adapter.name)

            field = READING_FIELDS.get(adapter.name)
            if field is None:
                logger.warning(f"No snapshot field for adapter {adapter.name}, ignoring its output")
                continue
            fields[field] = result.value

        return FeedReadings(**fields, consulted=consulted, degraded=degraded)

    async def run(self) -> Dict[str, Any]:
        """Execute the run and return the update-status document that was written."""
        if self.state is not PipelineState.IDLE:
            raise RuntimeError(f"pipeline already {self.state.value}")
        self.state = PipelineState.RUNNING
        logger.info("Fetching space weather data...")

        try:
            readings = await self.gather_readings()
            documents = self.assembler.assemble(readings)
            for name, document in documents.items():
                await self.store.write(name, document)
            status = self.assembler.run_status(readings, documents)
            await self.store.write(UPDATE_STATUS, status)
        except Exception as e:
            self.state = PipelineState.FAULTED
            logger.error(f"Critical error updating data: {e}", exc_info=True)
            self.status = self.assembler.error_status(str(e))
            try:
                await self.store.write(UPDATE_STATUS, self.status)
            except Exception as write_err:
                logger.error(f"Could not write error status: {write_err}")
            return self.status

        self.state = PipelineState.COMPLETED
        self.status = status
        metrics = status["metrics"]
        logger.info(
            "Snapshots written: Kp %.1f, X-ray %s, Dst %s nT, %d flares, %d news items, %d degraded",
            metrics["kpIndex"],
            metrics["xrayFlux"],
            metrics["dstIndex"],
            metrics["flareCount"],
            len(documents["news"]),
            len(readings.degraded),
        )
        return status

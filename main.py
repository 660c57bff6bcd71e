"""
Main entry point: run one space-weather snapshot update.

Scheduling is left to the caller (cron, CI workflow, systemd timer, ...).
"""

import argparse
import asyncio
import logging
import os
import sys
from typing import List, Optional

from dotenv import load_dotenv

from swx.config import PipelineConfig, load_config
from swx.infra.http import HttpClient
from swx.infra.snapshot_store import JsonSnapshotStore
from swx.orchestrator import Pipeline, PipelineState


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Fetch space weather feeds and write JSON snapshots.")
    parser.add_argument("--config", help="path to config.yaml (default: $SWX_CONFIG or ./config.yaml)")
    parser.add_argument("--data-dir", help="snapshot output directory (overrides config)")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser.parse_args(argv)


async def main(argv: Optional[List[str]] = None) -> int:
    """Run the pipeline once; return the process exit code."""
    load_dotenv()
    args = parse_args(argv)

    level = logging.DEBUG if args.verbose else os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(name)s | %(levelname)s | %(message)s"
    )
    logger = logging.getLogger(__name__)

    config = load_config(args.config)
    if args.data_dir:
        config = PipelineConfig.model_validate({**config.model_dump(), "data_dir": args.data_dir})

    logger.info(f"Writing snapshots to {config.data_dir}")
    store = JsonSnapshotStore(config.data_dir)

    async with HttpClient(timeout=config.timeout_s) as http:
        pipeline = Pipeline(config, http, store)
        status = await pipeline.run()

    if pipeline.state is PipelineState.FAULTED:
        logger.error(f"Update failed: {status['message']}")
        return 1
    return 0


def run() -> None:
    """Console-script entry point."""
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()

"""
Fan-out / fan-in over independent coroutines.

``SettledGroup`` runs every spawned coroutine concurrently and ``join`` waits
for all of them.  A task that raises or outlives its timeout settles to its
default value instead of propagating, and never cancels its siblings.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Dict, List, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settled:
    name: str
    value: Any
    ok: bool
    error: Optional[str] = None
    exc: Optional[BaseException] = field(default=None, compare=False, repr=False)


class SettledGroup:
    """Collects named coroutines and joins them as ``Settled`` outcomes."""

    def __init__(self) -> None:
        self._pending: List[tuple] = []
        self._joined = False

    def spawn(self, name: str, aw: Awaitable[Any], default: Any = None, timeout: Optional[float] = None) -> None:
        if self._joined:
            raise RuntimeError("cannot spawn into a group that has already been joined")
        self._pending.append((name, aw, default, timeout))

    async def _settle(self, name: str, aw: Awaitable[Any], default: Any, timeout: Optional[float]) -> Settled:
        try:
            if timeout is not None:
                value = await asyncio.wait_for(aw, timeout)
            else:
                value = await aw
        except asyncio.TimeoutError as e:
            logger.warning(f"{name} timed out after {timeout}s")
            return Settled(name, default, ok=False, error=f"timed out after {timeout}s", exc=e)
        except Exception as e:
            logger.warning(f"{name} failed: {e}")
            return Settled(name, default, ok=False, error=str(e), exc=e)
        return Settled(name, value, ok=True)

    async def join(self) -> Dict[str, Settled]:
        """Wait for every task; results keyed by name in spawn order."""
        self._joined = True
        tasks = [
            asyncio.create_task(self._settle(name, aw, default, timeout), name=f"settle-{name}")
            for name, aw, default, timeout in self._pending
        ]
        results = await asyncio.gather(*tasks)
        return {s.name: s for s in results}

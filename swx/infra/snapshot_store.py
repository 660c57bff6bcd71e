"""
JSON snapshot store: one file per snapshot under a data directory.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Union

from ..errors import WriteError
from ..interfaces import SnapshotStore

logger = logging.getLogger(__name__)


class JsonSnapshotStore(SnapshotStore):
    """Writes ``<data_dir>/<name>.json``, replacing any previous run's file."""

    name = "JsonSnapshotStore"

    def __init__(self, data_dir: Union[str, Path] = "data", indent: int = 2):
        self.data_dir = Path(data_dir)
        self.indent = indent

    def path_for(self, name: str) -> Path:
        return self.data_dir / f"{name}.json"

    async def write(self, name: str, document: Any) -> None:
        target = self.path_for(name)
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            text = json.dumps(document, indent=self.indent, ensure_ascii=False)
            # Write next to the target so the rename stays on one filesystem.
            fd, tmp = tempfile.mkstemp(prefix=f".{name}.", suffix=".tmp", dir=self.data_dir)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(text)
                    f.write("\n")
                os.replace(tmp, target)
            except BaseException:
                if os.path.exists(tmp):
                    os.unlink(tmp)
                raise
        except (OSError, TypeError, ValueError) as e:
            raise WriteError(name, e) from e

        logger.debug(f"Wrote {target} ({len(text)} chars)")

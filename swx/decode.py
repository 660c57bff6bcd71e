"""
Shape reconciliation for untrusted upstream payloads.

NOAA SWPC serves the same quantities as an array of objects on some endpoints
and as an array of arrays (first row = column names) on others, and has moved
endpoints between the two over time.  ``decode_rows`` turns any of these into
one of a small set of tagged variants; adapters then read fields through
``Record.get`` without caring which variant they got.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Union

from .errors import ShapeError


def to_float(value: Any, default: float = 0.0) -> float:
    """Coerce *value* to a finite float, falling back to *default*."""
    if value is None or isinstance(value, bool):
        return default
    try:
        result = float(str(value).strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(result):
        return default
    return result


def to_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def decode_json(payload: Union[bytes, str]) -> Any:
    """Parse a raw payload as JSON, raising ``ShapeError`` on garbage."""
    try:
        if isinstance(payload, bytes):
            payload = payload.decode("utf-8-sig")
        return json.loads(payload)
    except (UnicodeDecodeError, ValueError) as e:
        raise ShapeError(f"payload is not valid JSON: {e}") from e


# ---------------------------------------------- #
# Records


@dataclass(frozen=True)
class Record:
    """One upstream row, keyed or positional."""

    values: Union[Dict[str, Any], Sequence[Any]]
    header: Optional[Dict[str, int]] = None

    @property
    def keyed(self) -> bool:
        """True when fields can be looked up by name."""
        return isinstance(self.values, dict) or bool(self.header)

    def has(self, *names: str) -> bool:
        """True unless this is an object row carrying none of *names*.

        Positional rows always pass since their columns are read by index.
        """
        if not isinstance(self.values, dict):
            return True
        keys = {str(k).lower() for k in self.values}
        return any(name.lower() in keys for name in names)

    def get(self, *names: str, index: Optional[int] = None) -> Any:
        """Return the first present field among *names*, else column *index*."""
        if isinstance(self.values, dict):
            lowered = {str(k).lower(): v for k, v in self.values.items()}
            for name in names:
                if name.lower() in lowered and lowered[name.lower()] not in (None, ""):
                    return lowered[name.lower()]
            return None

        if self.header:
            for name in names:
                pos = self.header.get(name.lower())
                if pos is not None and pos < len(self.values):
                    return self.values[pos]
        if index is not None and index < len(self.values):
            return self.values[index]
        return None


# ---------------------------------------------- #
# Tagged variants


@dataclass(frozen=True)
class NoRows:
    kind: str = "empty"

    def records(self) -> List[Record]:
        return []


@dataclass(frozen=True)
class SingleObject:
    row: Dict[str, Any]
    kind: str = "object"

    def records(self) -> List[Record]:
        return [Record(self.row)]


@dataclass(frozen=True)
class ObjectRows:
    rows: List[Dict[str, Any]]
    kind: str = "object-rows"

    def records(self) -> List[Record]:
        return [Record(row) for row in self.rows]


@dataclass(frozen=True)
class ArrayRows:
    rows: List[Sequence[Any]]
    header: Optional[List[str]] = None
    kind: str = "array-rows"
    _index: Dict[str, int] = field(default_factory=dict, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.header:
            self._index.update({str(name).lower(): i for i, name in enumerate(self.header)})

    def records(self) -> List[Record]:
        return [Record(row, self._index or None) for row in self.rows]


RowSet = Union[NoRows, SingleObject, ObjectRows, ArrayRows]


def _is_header(row: Sequence[Any]) -> bool:
    if not row:
        return False
    for cell in row:
        if not isinstance(cell, str):
            return False
        try:
            float(cell)
            return False
        except ValueError:
            continue
    # A timestamp in the first column means data, not column names.
    return not any(ch.isdigit() for ch in row[0])


def decode_rows(data: Any) -> RowSet:
    """Classify a decoded JSON document into one of the row variants."""
    if data is None:
        return NoRows()
    if isinstance(data, dict):
        return SingleObject(data)
    if not isinstance(data, list):
        raise ShapeError(f"expected list or object, got {type(data).__name__}")
    if not data:
        return NoRows()

    if all(isinstance(row, dict) for row in data):
        return ObjectRows(list(data))

    if all(isinstance(row, (list, tuple)) for row in data):
        if _is_header(data[0]):
            return ArrayRows(list(data[1:]), header=[str(c) for c in data[0]])
        return ArrayRows(list(data))

    raise ShapeError("list mixes objects and arrays")

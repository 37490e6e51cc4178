"""Resolve requested column names against a record set.

Upstream ingestion can hand over records in two shapes:

* keys are the human readable column names (``{"price": 3}``), possibly with
  a leading row that repeats the names as values;
* keys are positional or encoded (``{"A": 3}``) and ``records[0]`` carries the
  names as values (``{"A": "price"}``).

``resolve_columns`` inspects the first record and picks the matching strategy.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Sequence

from vizgen.insights.models import RawRecord

Strategy = Literal["direct", "header"]


@dataclass(frozen=True)
class ColumnResolution:
    strategy: Strategy
    keys: dict[str, str]
    rows: list[RawRecord]


def is_blank_row(row: RawRecord) -> bool:
    return all(value is None for value in row.values())


def _data_rows(records: Sequence[RawRecord]) -> list[RawRecord]:
    return [row for row in records if not is_blank_row(row)]


def is_header_duplicate(row: RawRecord) -> bool:
    """True when every value repeats its own key, e.g. ``{"a": "a", "b": "b"}``."""
    if not row:
        return False
    return all(isinstance(value, str) and value.strip() == key.strip() for key, value in row.items())


def header_lookup(row: RawRecord) -> dict[str, str] | None:
    """Build ``name -> key`` from a header row, or None if it is not one."""
    values = [value for value in row.values() if value is not None]
    if not values:
        return None
    if not all(isinstance(value, str) and value.strip() for value in values):
        return None
    lookup: dict[str, str] = {}
    for key, value in row.items():
        if isinstance(value, str):
            lookup.setdefault(value.strip(), key)
    return lookup


def resolve_columns(records: Sequence[RawRecord], names: Sequence[str]) -> ColumnResolution | None:
    if not records or not names:
        return None

    first = records[0]
    if all(name in first for name in names):
        start = 1 if is_header_duplicate(first) else 0
        return ColumnResolution(
            strategy="direct",
            keys={name: name for name in names},
            rows=_data_rows(records[start:]),
        )

    lookup = header_lookup(first)
    if lookup is None or not all(name in lookup for name in names):
        return None
    return ColumnResolution(
        strategy="header",
        keys={name: lookup[name] for name in names},
        rows=_data_rows(records[1:]),
    )

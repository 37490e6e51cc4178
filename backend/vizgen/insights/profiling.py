from __future__ import annotations

import logging
import math
from typing import Hashable, Sequence

from vizgen.insights.coercion import coerce_number, date_parse_rate
from vizgen.insights.models import ColumnMetadata, DatasetMetadata, RawRecord, RawValue

logger = logging.getLogger("vizgen")

DEFAULT_WINDOW_ROWS = 30
DEFAULT_SAMPLE_SIZE = 5
DEFAULT_DATE_THRESHOLD = 0.8


class EmptyDatasetError(ValueError):
    """Raised when metadata is requested for a dataset without records."""


def _distinct_key(value: RawValue) -> Hashable:
    # bool is an int subclass, keep True and 1 apart.
    if isinstance(value, bool):
        return ("bool", value)
    if isinstance(value, (int, float)):
        if isinstance(value, float) and math.isnan(value):
            return ("nan",)
        return ("number", float(value))
    if value is None:
        return ("null",)
    return ("string", value)


def _infer_column_type(values: list[RawValue], numeric: list[float], date_threshold: float) -> str:
    if numeric:
        return "number"
    non_null = [value for value in values if value is not None]
    if non_null and all(isinstance(value, str) for value in non_null):
        if date_parse_rate(non_null) >= date_threshold:
            return "date"
    return "string"


def build_column_metadata(
    name: str,
    window: Sequence[RawRecord],
    sample_size: int = DEFAULT_SAMPLE_SIZE,
    date_threshold: float = DEFAULT_DATE_THRESHOLD,
) -> ColumnMetadata:
    values = [row.get(name) for row in window]
    numeric = [number for number in (coerce_number(value) for value in values) if number is not None]
    return ColumnMetadata(
        name=str(name),
        type=_infer_column_type(values, numeric, date_threshold),
        sample=values[:sample_size],
        min=min(numeric) if numeric else None,
        max=max(numeric) if numeric else None,
        unique_values=len({_distinct_key(value) for value in values}),
    )


def infer_metadata(
    records: Sequence[RawRecord],
    filename: str,
    window_rows: int = DEFAULT_WINDOW_ROWS,
    sample_size: int = DEFAULT_SAMPLE_SIZE,
    date_threshold: float = DEFAULT_DATE_THRESHOLD,
) -> DatasetMetadata:
    if not records:
        raise EmptyDatasetError(f"No records found in {filename or 'dataset'}.")

    window = records[:window_rows]
    columns = [
        build_column_metadata(name, window, sample_size, date_threshold)
        for name in records[0].keys()
    ]
    logger.debug(
        "infer filename=%s rows=%s columns=%s window=%s",
        filename,
        len(records),
        len(columns),
        len(window),
    )
    return DatasetMetadata(filename=filename, row_count=len(records), columns=columns)

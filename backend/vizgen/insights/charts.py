from __future__ import annotations

import logging
from functools import cmp_to_key
from typing import Sequence

import numpy as np

from vizgen.insights.coercion import coerce_number, is_numeric, label_for
from vizgen.insights.columns import resolve_columns
from vizgen.insights.models import (
    BarPoint,
    DataCommand,
    HistogramBin,
    LinePoint,
    PlotPoint,
    RawRecord,
    RawValue,
    ScatterPoint,
)

logger = logging.getLogger("vizgen")

DEFAULT_BINS = 10
MAX_BINS = 1000


def _number_or_zero(value: RawValue) -> float:
    number = coerce_number(value)
    return 0.0 if number is None else number


def _bin_label(start: float, end: float) -> str:
    return f"{start:.2f} - {end:.2f}"


def build_histogram(rows: Sequence[RawRecord], column: str, bins: int) -> list[HistogramBin]:
    if bins <= 0:
        return []
    numbers = [coerce_number(row.get(column)) for row in rows]
    values = np.array([number for number in numbers if number is not None], dtype=float)
    if values.size == 0:
        return []

    low = float(values.min())
    high = float(values.max())
    if high == low:
        return [
            HistogramBin(
                bin_label=_bin_label(low, high),
                range_start=low,
                range_end=high,
                count=int(values.size),
            )
        ]

    width = (high - low) / bins
    indices = np.clip(np.floor((values - low) / width).astype(int), 0, bins - 1)
    counts = np.bincount(indices, minlength=bins)

    result: list[HistogramBin] = []
    for index in range(bins):
        start = low + index * width
        end = high if index == bins - 1 else low + (index + 1) * width
        result.append(
            HistogramBin(
                bin_label=_bin_label(start, end),
                range_start=start,
                range_end=end,
                count=int(counts[index]),
            )
        )
    return result


def build_bar_chart(rows: Sequence[RawRecord], x_column: str, y_column: str) -> list[BarPoint]:
    pairs = [(row.get(x_column), row.get(y_column)) for row in rows if row.get(x_column) is not None]
    if not pairs:
        return []

    if all(is_numeric(x_value) for x_value, _ in pairs):
        return [
            BarPoint(category=label_for(x_value), value=_number_or_zero(y_value))
            for x_value, y_value in pairs
        ]

    totals: dict[str, float] = {}
    for x_value, y_value in pairs:
        category = label_for(x_value)
        totals[category] = totals.get(category, 0.0) + _number_or_zero(y_value)
    return [BarPoint(category=category, value=total) for category, total in totals.items()]


def _compare_x(left: RawValue, right: RawValue) -> int:
    left_num = coerce_number(left)
    right_num = coerce_number(right)
    if left_num is not None and right_num is not None:
        return (left_num > right_num) - (left_num < right_num)
    left_label = label_for(left)
    right_label = label_for(right)
    return (left_label > right_label) - (left_label < right_label)


def _line_x(value: RawValue) -> str | float:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    return label_for(value)


def build_line_chart(rows: Sequence[RawRecord], x_column: str, y_column: str) -> list[LinePoint]:
    pairs = [(row.get(x_column), row.get(y_column)) for row in rows if row.get(x_column) is not None]
    ordered = sorted(pairs, key=cmp_to_key(lambda left, right: _compare_x(left[0], right[0])))
    return [LinePoint(x=_line_x(x_value), y=_number_or_zero(y_value)) for x_value, y_value in ordered]


def build_scatter_plot(rows: Sequence[RawRecord], x_column: str, y_column: str) -> list[ScatterPoint]:
    points: list[ScatterPoint] = []
    for row in rows:
        x_value = coerce_number(row.get(x_column))
        y_value = coerce_number(row.get(y_column))
        if x_value is None or y_value is None:
            continue
        points.append(ScatterPoint(x=x_value, y=y_value))
    return points


def _required_columns(command: DataCommand, chart_type: str) -> list[str] | None:
    if chart_type == "histogram":
        return [command.source_column] if command.source_column else None
    if chart_type in ("barChart", "lineChart", "scatterPlot"):
        if command.x_column and command.y_column:
            return [command.x_column, command.y_column]
    return None


def build_series(
    records: Sequence[RawRecord],
    command: DataCommand,
    chart_type: str,
    default_bins: int = DEFAULT_BINS,
    max_bins: int = MAX_BINS,
) -> list[PlotPoint]:
    """Shape raw records into plot points for one chart.

    Returns an empty list when the chart type is unknown or the command names
    columns that are missing or cannot be resolved against the records.
    """
    names = _required_columns(command, chart_type)
    if names is None:
        logger.debug("series type=%s skipped reason=missing_columns", chart_type)
        return []

    resolution = resolve_columns(records, names)
    if resolution is None:
        logger.debug("series type=%s skipped reason=unresolved columns=%s", chart_type, names)
        return []

    keys = resolution.keys
    rows = resolution.rows
    points: list[PlotPoint]
    if chart_type == "histogram":
        bins = command.bins if command.bins is not None else default_bins
        if bins > max_bins:
            logger.debug("series type=%s bins=%s clamped_to=%s", chart_type, bins, max_bins)
            bins = max_bins
        points = build_histogram(rows, keys[names[0]], bins)
    elif chart_type == "barChart":
        points = build_bar_chart(rows, keys[names[0]], keys[names[1]])
    elif chart_type == "lineChart":
        points = build_line_chart(rows, keys[names[0]], keys[names[1]])
    else:
        points = build_scatter_plot(rows, keys[names[0]], keys[names[1]])

    logger.debug(
        "series type=%s points=%s strategy=%s rows=%s",
        chart_type,
        len(points),
        resolution.strategy,
        len(rows),
    )
    return points

"""Explicit coercion of raw cell values.

A cell is one of three things: a number, a string or null. Every conversion
below matches on that shape instead of relying on implicit casts, so a value
that cannot be read as a number comes back as ``None`` rather than NaN.
"""

from __future__ import annotations

import math
import re
from typing import Iterable

import pandas as pd

from vizgen.insights.models import RawValue

_DATE_PATTERN = re.compile(
    r"^\d{4}[-/]\d{1,2}([-/]\d{1,2})?([ T]\d{1,2}:\d{2}(:\d{2}(\.\d+)?)?)?(Z|[+-]\d{2}:?\d{2})?$"
    r"|^\d{1,2}[-/]\d{1,2}[-/]\d{4}$"
)


def coerce_number(value: RawValue) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(number):
        return None
    return number


def is_numeric(value: RawValue) -> bool:
    return coerce_number(value) is not None


def looks_like_date(value: RawValue) -> bool:
    if not isinstance(value, str):
        return False
    text = value.strip()
    if not _DATE_PATTERN.match(text):
        return False
    return not pd.isna(pd.to_datetime(text, errors="coerce", utc=True))


def date_parse_rate(values: Iterable[RawValue]) -> float:
    non_null = [value for value in values if value is not None]
    if not non_null:
        return 0.0
    parsed = sum(1 for value in non_null if looks_like_date(value))
    return parsed / len(non_null)


def label_for(value: RawValue) -> str:
    """Text form of a cell, used for categories and lexicographic ordering."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)

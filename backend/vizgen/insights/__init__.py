from vizgen.insights.charts import build_series
from vizgen.insights.columns import ColumnResolution, resolve_columns
from vizgen.insights.models import (
    BarPoint,
    ChartSeries,
    ColumnMetadata,
    Dashboard,
    DashboardResponse,
    DataCommand,
    DatasetMetadata,
    HistogramBin,
    LinePoint,
    MetadataRequest,
    ScatterPoint,
    SeriesRequest,
    Visualization,
)
from vizgen.insights.profiling import EmptyDatasetError, infer_metadata

__all__ = [
    "BarPoint",
    "ChartSeries",
    "ColumnMetadata",
    "ColumnResolution",
    "Dashboard",
    "DashboardResponse",
    "DataCommand",
    "DatasetMetadata",
    "EmptyDatasetError",
    "HistogramBin",
    "LinePoint",
    "MetadataRequest",
    "ScatterPoint",
    "SeriesRequest",
    "Visualization",
    "build_series",
    "infer_metadata",
    "resolve_columns",
]

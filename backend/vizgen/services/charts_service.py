from __future__ import annotations

from typing import Sequence

from vizgen.core.config import settings
from vizgen.insights.charts import build_series
from vizgen.insights.models import ChartSeries, Dashboard, RawRecord, Visualization
from vizgen.services.datasets import load_dataset


def render_visualization(records: Sequence[RawRecord], visualization: Visualization) -> ChartSeries:
    points = build_series(
        records,
        visualization.data_command,
        visualization.type,
        default_bins=settings.histogram_default_bins,
        max_bins=settings.histogram_max_bins,
    )
    return ChartSeries(
        visualization_id=visualization.id,
        type=visualization.type,
        title=visualization.title,
        points=points,
    )


def render_dashboard(records: Sequence[RawRecord], dashboard: Dashboard) -> list[ChartSeries]:
    return [render_visualization(records, visualization) for visualization in dashboard.visualizations]


def dataset_series(dataset_id: str, visualization: Visualization) -> ChartSeries:
    entry = load_dataset(dataset_id)
    return render_visualization(entry.records, visualization)

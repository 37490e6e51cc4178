from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

RawValue = str | int | float | bool | None
RawRecord = dict[str, RawValue]

ChartType = Literal["histogram", "scatterPlot", "barChart", "lineChart"]
CHART_TYPES: tuple[str, ...] = ("histogram", "scatterPlot", "barChart", "lineChart")


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ColumnMetadata(CamelModel):
    name: str
    type: Literal["string", "number", "date"]
    sample: list[Any]
    min: float | None = None
    max: float | None = None
    unique_values: int


class DatasetMetadata(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    filename: str
    row_count: int
    columns: list[ColumnMetadata]


class DataCommand(CamelModel):
    source_column: str | None = None
    x_column: str | None = None
    y_column: str | None = None
    bins: int | None = None


class Visualization(CamelModel):
    id: str
    # Unknown chart types are kept so one bad entry renders empty instead of
    # rejecting the whole dashboard.
    type: str
    data_command: DataCommand = Field(default_factory=DataCommand)
    title: str = ""
    description: str = ""


class Dashboard(CamelModel):
    dashboard_title: str
    visualizations: list[Visualization] = Field(default_factory=list)


class HistogramBin(CamelModel):
    bin_label: str
    range_start: float
    range_end: float
    count: int


class BarPoint(CamelModel):
    category: str
    value: float


class LinePoint(CamelModel):
    x: str | float
    y: float


class ScatterPoint(CamelModel):
    x: float
    y: float


PlotPoint = HistogramBin | BarPoint | LinePoint | ScatterPoint


class ChartSeries(BaseModel):
    visualization_id: str
    type: str
    title: str = ""
    points: list[PlotPoint]


class SeriesRequest(BaseModel):
    records: list[RawRecord]
    visualization: Visualization


class MetadataRequest(BaseModel):
    filename: str
    records: list[RawRecord]


class DashboardResponse(BaseModel):
    dataset_id: str
    dashboard: Dashboard
    charts: list[ChartSeries]

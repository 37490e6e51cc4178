from fastapi import APIRouter

from vizgen.insights.models import ChartSeries, DatasetMetadata, MetadataRequest, SeriesRequest
from vizgen.services.charts_service import render_visualization
from vizgen.services.datasets import describe_records

router = APIRouter(tags=["charts"])


@router.post("/metadata", response_model=DatasetMetadata)
def metadata_endpoint(payload: MetadataRequest) -> DatasetMetadata:
    return describe_records(payload.records, payload.filename)


@router.post("/series", response_model=ChartSeries)
def series_endpoint(payload: SeriesRequest) -> ChartSeries:
    return render_visualization(payload.records, payload.visualization)

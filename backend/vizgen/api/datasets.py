from fastapi import APIRouter, File, Query, UploadFile

from vizgen.insights.models import ChartSeries, DashboardResponse, DatasetMetadata, Visualization
from vizgen.schemas.datasets import DatasetPreview, DatasetSummary, DatasetUploadResponse
from vizgen.services.charts_service import dataset_series
from vizgen.services.datasets import create_dataset, get_dataset, list_datasets, preview_dataset
from vizgen.services.recommendation import generate_dashboard

router = APIRouter(prefix="/datasets", tags=["datasets"])


@router.post("/upload", response_model=DatasetUploadResponse)
def upload_dataset(file: UploadFile = File(...)) -> DatasetUploadResponse:
    return create_dataset(file)


@router.get("", response_model=list[DatasetSummary])
def list_all_datasets() -> list[DatasetSummary]:
    return list_datasets()


@router.get("/{dataset_id}", response_model=DatasetMetadata)
def get_dataset_metadata(dataset_id: str) -> DatasetMetadata:
    return get_dataset(dataset_id)


@router.get("/{dataset_id}/preview", response_model=DatasetPreview)
def preview_dataset_endpoint(
    dataset_id: str,
    limit: int = Query(default=20, ge=1),
) -> DatasetPreview:
    return preview_dataset(dataset_id, limit=limit)


@router.post("/{dataset_id}/dashboard", response_model=DashboardResponse)
def dashboard_endpoint(dataset_id: str) -> DashboardResponse:
    return generate_dashboard(dataset_id)


@router.post("/{dataset_id}/series", response_model=ChartSeries)
def series_endpoint(dataset_id: str, payload: Visualization) -> ChartSeries:
    return dataset_series(dataset_id, payload)

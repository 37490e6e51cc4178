from typing import Any

from pydantic import BaseModel

from vizgen.insights.models import DatasetMetadata


class DatasetUploadResponse(BaseModel):
    dataset_id: str
    created_at: str
    metadata: DatasetMetadata


class DatasetSummary(BaseModel):
    dataset_id: str
    created_at: str
    filename: str
    row_count: int
    nb_columns: int


class DatasetPreview(BaseModel):
    dataset_id: str
    columns: list[str]
    rows: list[dict[str, Any]]
    limit: int

from __future__ import annotations

import io
import json
import logging
import os
import threading
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import pandas as pd
from fastapi import HTTPException, UploadFile, status

from vizgen.core.config import settings
from vizgen.insights.models import Dashboard, DatasetMetadata, RawRecord
from vizgen.insights.profiling import EmptyDatasetError, infer_metadata
from vizgen.schemas.datasets import DatasetPreview, DatasetSummary, DatasetUploadResponse

logger = logging.getLogger("vizgen")

ALLOWED_SUFFIXES = (".csv", ".xlsx")


@dataclass
class DatasetEntry:
    dataset_id: str
    created_at: str
    metadata: DatasetMetadata
    records: tuple[RawRecord, ...]
    dashboard: Dashboard | None = None


_datasets: dict[str, DatasetEntry] = {}
_lock = threading.Lock()


def _validate_filename(filename: str) -> str:
    if not filename:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing filename.")
    if filename != os.path.basename(filename):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid filename.")
    if ".." in Path(filename).parts:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid filename.")
    suffix = Path(filename).suffix.lower()
    if suffix not in ALLOWED_SUFFIXES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only .csv and .xlsx files are allowed.",
        )
    return suffix


def _validate_dataset_id(dataset_id: str) -> None:
    try:
        uuid.UUID(dataset_id)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid dataset_id.") from exc


def _read_upload_bytes(upload: UploadFile, max_bytes: int) -> bytes:
    buffer = io.BytesIO()
    total_bytes = 0
    while True:
        chunk = upload.file.read(1024 * 1024)
        if not chunk:
            break
        total_bytes += len(chunk)
        if total_bytes > max_bytes:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail="File too large.",
            )
        buffer.write(chunk)
    return buffer.getvalue()


def _detect_encoding(sample: bytes) -> str:
    try:
        sample.decode("utf-8")
        return "utf-8"
    except UnicodeDecodeError:
        logger.warning("encoding fallback used: latin-1")
        return "latin-1"


def read_frame(content: bytes, suffix: str) -> pd.DataFrame:
    if suffix == ".xlsx":
        return pd.read_excel(io.BytesIO(content), sheet_name=0, engine="openpyxl")
    encoding = _detect_encoding(content[:65536])
    return pd.read_csv(io.BytesIO(content), encoding=encoding, skip_blank_lines=True)


def frame_to_records(df: pd.DataFrame) -> list[RawRecord]:
    df = df.rename(columns=lambda column: str(column).strip())
    payload = df.to_json(orient="records", date_format="iso", double_precision=15)
    return json.loads(payload)


def create_dataset(upload: UploadFile) -> DatasetUploadResponse:
    filename = upload.filename or ""
    suffix = _validate_filename(filename)
    max_bytes = settings.max_upload_mb * 1024 * 1024
    content = _read_upload_bytes(upload, max_bytes)

    try:
        records = frame_to_records(read_frame(content, suffix))
        metadata = infer_metadata(
            records,
            filename,
            window_rows=settings.metadata_window_rows,
            sample_size=settings.metadata_sample_size,
            date_threshold=settings.date_parse_threshold,
        )
    except (EmptyDatasetError, pd.errors.EmptyDataError) as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No data found in file.") from exc
    except Exception as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Failed to process file: {exc}",
        ) from exc

    entry = DatasetEntry(
        dataset_id=str(uuid.uuid4()),
        created_at=datetime.now(timezone.utc).isoformat(),
        metadata=metadata,
        records=tuple(records),
    )
    with _lock:
        _datasets[entry.dataset_id] = entry

    logger.info(
        "upload dataset_id=%s filename=%s rows=%s columns=%s",
        entry.dataset_id,
        filename,
        metadata.row_count,
        len(metadata.columns),
    )
    return DatasetUploadResponse(
        dataset_id=entry.dataset_id,
        created_at=entry.created_at,
        metadata=metadata,
    )


def describe_records(records: list[RawRecord], filename: str) -> DatasetMetadata:
    try:
        return infer_metadata(
            records,
            filename,
            window_rows=settings.metadata_window_rows,
            sample_size=settings.metadata_sample_size,
            date_threshold=settings.date_parse_threshold,
        )
    except EmptyDatasetError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No data found in file.") from exc


def load_dataset(dataset_id: str) -> DatasetEntry:
    _validate_dataset_id(dataset_id)
    with _lock:
        entry = _datasets.get(dataset_id)
    if entry is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Dataset not found.")
    return entry


def get_dataset(dataset_id: str) -> DatasetMetadata:
    return load_dataset(dataset_id).metadata


def list_datasets() -> list[DatasetSummary]:
    with _lock:
        entries = list(_datasets.values())
    return [
        DatasetSummary(
            dataset_id=entry.dataset_id,
            created_at=entry.created_at,
            filename=entry.metadata.filename,
            row_count=entry.metadata.row_count,
            nb_columns=len(entry.metadata.columns),
        )
        for entry in entries
    ]


def preview_dataset(dataset_id: str, limit: int, max_rows: int | None = None) -> DatasetPreview:
    entry = load_dataset(dataset_id)
    if limit <= 0:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Limit must be positive.")
    if max_rows is None:
        max_rows = settings.preview_max_rows
    limit = min(limit, max_rows)
    rows: list[dict[str, Any]] = [dict(row) for row in entry.records[:limit]]
    return DatasetPreview(
        dataset_id=dataset_id,
        columns=[column.name for column in entry.metadata.columns],
        rows=rows,
        limit=limit,
    )


def store_dashboard(dataset_id: str, dashboard: Dashboard) -> None:
    entry = load_dataset(dataset_id)
    with _lock:
        entry.dashboard = dashboard


def clear_datasets() -> None:
    with _lock:
        _datasets.clear()

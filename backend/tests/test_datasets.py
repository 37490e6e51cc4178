import io

from fastapi.testclient import TestClient
from openpyxl import Workbook

from vizgen.core.config import settings
from vizgen.services.datasets import clear_datasets
from main import app

CSV_CONTENT = (
    "region,sales,day,note\n"
    "North,10,2024-01-01,ok\n"
    "South,5,2024-01-02,\n"
    "North,7,2024-01-03,late\n"
)


def _client() -> TestClient:
    settings.max_upload_mb = 1
    settings.preview_max_rows = 50
    settings.metadata_window_rows = 30
    settings.metadata_sample_size = 5
    settings.histogram_default_bins = 10
    clear_datasets()
    return TestClient(app)


def _upload(client: TestClient, content: bytes, filename: str = "sales.csv", content_type: str = "text/csv"):
    files = {"file": (filename, io.BytesIO(content), content_type)}
    return client.post("/datasets/upload", files=files)


def _upload_dataset(client: TestClient) -> dict:
    response = _upload(client, CSV_CONTENT.encode("utf-8"))
    assert response.status_code == 200
    return response.json()


def test_health() -> None:
    client = _client()
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_upload_csv_infers_metadata() -> None:
    client = _client()
    data = _upload_dataset(client)

    assert data["dataset_id"]
    metadata = data["metadata"]
    assert metadata["filename"] == "sales.csv"
    assert metadata["rowCount"] == 3
    columns = {column["name"]: column for column in metadata["columns"]}
    assert list(columns) == ["region", "sales", "day", "note"]
    assert columns["sales"]["type"] == "number"
    assert columns["sales"]["min"] == 5
    assert columns["sales"]["max"] == 10
    assert columns["region"]["type"] == "string"
    assert columns["region"]["uniqueValues"] == 2
    assert columns["day"]["type"] == "date"
    assert columns["note"]["sample"] == ["ok", None, "late"]


def test_upload_xlsx() -> None:
    client = _client()
    workbook = Workbook()
    sheet = workbook.active
    sheet.append(["product", "units"])
    sheet.append(["pen", 4])
    sheet.append(["ink", 9])
    buffer = io.BytesIO()
    workbook.save(buffer)

    response = _upload(
        client,
        buffer.getvalue(),
        filename="stock.xlsx",
        content_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )

    assert response.status_code == 200
    metadata = response.json()["metadata"]
    assert metadata["rowCount"] == 2
    assert [column["type"] for column in metadata["columns"]] == ["string", "number"]


def test_upload_rejects_bad_files() -> None:
    client = _client()

    assert _upload(client, b"a,b\n1,2\n", filename="data.txt").status_code == 400
    assert _upload(client, b"a,b\n").status_code == 400
    assert _upload(client, b"").status_code == 400

    settings.max_upload_mb = 0
    assert _upload(client, b"a,b\n1,2\n").status_code == 413
    settings.max_upload_mb = 1


def test_get_list_and_preview() -> None:
    client = _client()
    dataset = _upload_dataset(client)
    dataset_id = dataset["dataset_id"]

    metadata = client.get(f"/datasets/{dataset_id}")
    assert metadata.status_code == 200
    assert metadata.json()["rowCount"] == 3

    listing = client.get("/datasets")
    assert listing.status_code == 200
    assert [item["dataset_id"] for item in listing.json()] == [dataset_id]

    preview = client.get(f"/datasets/{dataset_id}/preview", params={"limit": 2})
    assert preview.status_code == 200
    data = preview.json()
    assert data["columns"] == ["region", "sales", "day", "note"]
    assert len(data["rows"]) == 2
    assert data["rows"][0]["region"] == "North"


def test_unknown_and_invalid_dataset_ids() -> None:
    client = _client()

    assert client.get("/datasets/not-a-uuid").status_code == 400
    assert client.get("/datasets/00000000-0000-0000-0000-000000000000").status_code == 404


def test_dataset_series_endpoint() -> None:
    client = _client()
    dataset = _upload_dataset(client)

    payload = {
        "id": "viz-1",
        "type": "barChart",
        "dataCommand": {"xColumn": "region", "yColumn": "sales"},
        "title": "Sales by region",
        "description": "",
    }
    response = client.post(f"/datasets/{dataset['dataset_id']}/series", json=payload)

    assert response.status_code == 200
    data = response.json()
    assert data["visualization_id"] == "viz-1"
    assert data["points"] == [
        {"category": "North", "value": 17.0},
        {"category": "South", "value": 5.0},
    ]


def test_dataset_series_unknown_column_is_empty() -> None:
    client = _client()
    dataset = _upload_dataset(client)

    payload = {"id": "viz-2", "type": "histogram", "dataCommand": {"sourceColumn": "missing"}}
    response = client.post(f"/datasets/{dataset['dataset_id']}/series", json=payload)

    assert response.status_code == 200
    assert response.json()["points"] == []


def test_stateless_series_and_metadata() -> None:
    client = _client()
    records = [{"x": 1, "y": 10}, {"x": 2, "y": 5}, {"x": 3, "y": 20}]

    series = client.post(
        "/series",
        json={
            "records": records,
            "visualization": {
                "id": "h",
                "type": "histogram",
                "dataCommand": {"sourceColumn": "x", "bins": 2},
            },
        },
    )
    assert series.status_code == 200
    assert [point["count"] for point in series.json()["points"]] == [1, 2]
    assert series.json()["points"][1]["binLabel"] == "2.00 - 3.00"

    metadata = client.post("/metadata", json={"filename": "inline.json", "records": records})
    assert metadata.status_code == 200
    assert metadata.json()["rowCount"] == 3

    empty = client.post("/metadata", json={"filename": "inline.json", "records": []})
    assert empty.status_code == 400

from __future__ import annotations

import json
import logging
import re
import time

from fastapi import HTTPException, status
from pydantic import ValidationError

from vizgen.core.config import settings
from vizgen.insights.models import (
    CHART_TYPES,
    ColumnMetadata,
    Dashboard,
    DashboardResponse,
    DatasetMetadata,
    Visualization,
)
from vizgen.llm import provider
from vizgen.services.charts_service import render_dashboard
from vizgen.services.datasets import load_dataset, store_dashboard

logger = logging.getLogger("vizgen")

SYSTEM_PROMPT = "You are a data visualization expert. Always respond with valid JSON."

DASHBOARD_SHAPE = {
    "dashboardTitle": "string",
    "visualizations": [
        {
            "id": "string",
            "type": " | ".join(f'"{chart_type}"' for chart_type in CHART_TYPES),
            "dataCommand": {
                "sourceColumn": "string (histogram only)",
                "xColumn": "string",
                "yColumn": "string",
                "bins": "number (histogram only, optional)",
            },
            "title": "string",
            "description": "string",
        }
    ],
}

_FENCE_PATTERN = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL | re.IGNORECASE)


class RecommendationError(ValueError):
    """Raised when the recommendation answer is not a usable dashboard."""


def _describe_column(column: ColumnMetadata) -> str:
    samples = ", ".join(str(value) for value in column.sample[:3])
    line = f"  - {column.name} ({column.type}): {samples}..."
    if column.min is not None and column.max is not None:
        line += f" range {column.min:g} to {column.max:g};"
    return f"{line} {column.unique_values} distinct in sample"


def build_prompt(metadata: DatasetMetadata) -> list[dict[str, str]]:
    columns = "\n".join(_describe_column(column) for column in metadata.columns)
    prompt = (
        "Based on this dataset metadata, suggest appropriate visualizations "
        "that would best represent the data.\n\n"
        "Dataset Information:\n"
        f"- Filename: {metadata.filename}\n"
        f"- Number of rows: {metadata.row_count}\n"
        "- Columns:\n"
        f"{columns}\n\n"
        "Use column names exactly as listed. "
        "Please provide a JSON response with the following structure:\n"
        f"{json.dumps(DASHBOARD_SHAPE, indent=2)}\n\n"
        "Focus on creating meaningful visualizations that highlight interesting patterns in the data."
    )
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": prompt},
    ]


def parse_dashboard(text: str) -> Dashboard:
    cleaned = text.strip()
    fenced = _FENCE_PATTERN.match(cleaned)
    if fenced:
        cleaned = fenced.group(1)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise RecommendationError("Failed to parse recommendation response as JSON.") from exc
    if not isinstance(data, dict):
        raise RecommendationError("Recommendation response is not a JSON object.")
    title = data.get("dashboardTitle", data.get("dashboard_title"))
    items = data.get("visualizations", [])
    if not isinstance(title, str) or not isinstance(items, list):
        raise RecommendationError("Recommendation response is missing dashboardTitle or visualizations.")

    visualizations = [
        visualization for visualization in (_parse_visualization(index, item) for index, item in enumerate(items))
        if visualization is not None
    ]
    return Dashboard(dashboard_title=title, visualizations=visualizations)


def _parse_visualization(index: int, item: object) -> Visualization | None:
    try:
        return Visualization.model_validate(item)
    except ValidationError as exc:
        logger.warning("visualization index=%s invalid errors=%s", index, exc.error_count())

    if not isinstance(item, dict) or not isinstance(item.get("id"), str) or not isinstance(item.get("type"), str):
        return None
    # Keep the entry so it still shows up, with a command that renders empty.
    return Visualization(
        id=item["id"],
        type=item["type"],
        title=item.get("title") if isinstance(item.get("title"), str) else "",
        description=item.get("description") if isinstance(item.get("description"), str) else "",
    )


def generate_dashboard(dataset_id: str) -> DashboardResponse:
    entry = load_dataset(dataset_id)
    messages = build_prompt(entry.metadata)
    llm_client = provider.get_llm_client()

    llm_start = time.perf_counter()
    llm_response = llm_client.generate(messages)
    llm_ms = int((time.perf_counter() - llm_start) * 1000)

    try:
        dashboard = parse_dashboard(llm_response.text)
    except RecommendationError as exc:
        logger.warning("dashboard dataset_id=%s parse_failed=%s", dataset_id, exc)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc

    store_dashboard(dataset_id, dashboard)
    charts = render_dashboard(entry.records, dashboard)

    logger.info(
        "dashboard dataset_id=%s visualizations=%s empty=%s llm_ms=%s provider=%s model=%s",
        dataset_id,
        len(dashboard.visualizations),
        sum(1 for chart in charts if not chart.points),
        llm_ms,
        settings.llm_provider,
        settings.llm_model,
    )
    return DashboardResponse(dataset_id=dataset_id, dashboard=dashboard, charts=charts)

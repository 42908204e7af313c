"""Schema compression tools: summarize datasets for the planning prompt."""

from __future__ import annotations

import datetime as dt
import json
from typing import Any, Iterable

import numpy as np

from vizpilot.models import TabularDataset
from vizpilot.tools.values import is_missing

SAMPLE_SIZE = 5


def infer_type_tag(value: Any) -> str:
    """Tag a value by its Python type: number, boolean, date or string.

    This is a value-type test; the string ``"42"`` is a string.
    """
    if isinstance(value, (bool, np.bool_)):
        return "boolean"
    if isinstance(value, (int, float, np.integer, np.floating)):
        return "number"
    if isinstance(value, (dt.date, dt.datetime, np.datetime64)):
        return "date"
    return "string"


def _column_type(dataset: TabularDataset, column: str) -> str:
    """Slash-joined type tags of the first non-missing values, in first-seen order."""
    samples: list[Any] = []
    for row in dataset.rows:
        value = row.get(column)
        if is_missing(value):
            continue
        samples.append(value)
        if len(samples) >= SAMPLE_SIZE:
            break

    tags: list[str] = []
    for value in samples:
        tag = infer_type_tag(value)
        if tag not in tags:
            tags.append(tag)
    return "/".join(tags)


def compress_schema(datasets: Iterable[TabularDataset]) -> dict[str, dict]:
    """Return ``{name: {description, rows, columns}}`` for each dataset.

    Args:
        datasets: Datasets to summarize.

    Returns:
        The compressed schema. ``columns`` maps each column to its type tag.
    """
    compressed: dict[str, dict] = {}
    for dataset in datasets:
        n_rows, n_cols = dataset.shape
        compressed[dataset.name] = {
            "description": f"Dataset with {n_rows} rows and {n_cols} columns",
            "rows": n_rows,
            "columns": {col: _column_type(dataset, col) for col in dataset.columns},
        }
    return compressed


def render_prompt_context(schema: dict[str, dict]) -> str:
    """Format a compressed schema as a text block for the LLM."""
    parts = ["DATA SCHEMA:\n"]
    for file_name, file_schema in schema.items():
        columns = file_schema.get("columns", {})
        parts.append(f"File: {file_name}")
        parts.append(f"Description: {file_schema.get('description', '')}")
        parts.append(f"Columns: {', '.join(columns.keys())}")
        parts.append(f"Column Types: {json.dumps(columns, indent=2)}\n")
    return "\n".join(parts) + "\n"

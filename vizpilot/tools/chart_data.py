"""Chart data tools: shape dataset rows into chart-ready series.

Every function here is pure and deterministic; no LLM is involved.
"""

from __future__ import annotations

from typing import Any, Iterable, Optional

import numpy as np

from vizpilot.models import AnalysisPlan, AnalysisResult, BuiltChart, ChartSpec, TabularDataset
from vizpilot.tools.values import is_missing, round_half_up, to_number

HISTOGRAM_BINS = 20
BAR_TOP_N = 15
SCATTER_MAX_POINTS = 500
LINE_MAX_POINTS = 100
RAW_MAX_ROWS = 100
OVERVIEW_SAMPLE_ROWS = 10

# Axis keys the presentation layer reads from each series record.
_AXIS_KEYS = {
    "histogram": ("range", "count"),
    "bar": ("category", "count"),
    "scatter": ("x", "y"),
}


def _numeric_values(rows: Iterable[dict], column: Optional[str]) -> list:
    numbers = (to_number(row.get(column)) for row in rows)
    return [n for n in numbers if n is not None]


def _category(value: Any) -> str:
    return "null" if is_missing(value) else str(value)


# ---------------------------------------------------------------------------
# Per-type series builders
# ---------------------------------------------------------------------------


def _histogram_series(rows: list[dict], spec: ChartSpec) -> list[dict]:
    """Count numeric ``x_col`` values into 20 equal-width bins.

    Bins are half-open except the last, which also holds the maximum, so the
    counts always add up to the number of numeric values. Labels are rounded
    bin bounds and may repeat when the bin width is below 1.
    """
    values = _numeric_values(rows, spec.x_col)
    if not values:
        return []

    lo, hi = min(values), max(values)
    edges = np.linspace(lo, hi, HISTOGRAM_BINS + 1)
    if hi > lo and np.all(np.diff(edges) > 0):
        counts, edges = np.histogram(values, bins=edges)
    else:
        counts = np.zeros(HISTOGRAM_BINS, dtype=int)
        counts[-1] = len(values)
        edges = np.full(HISTOGRAM_BINS + 1, float(lo))

    series = []
    for i in range(HISTOGRAM_BINS):
        start = int(round_half_up(float(edges[i])))
        end = int(round_half_up(float(edges[i + 1])))
        series.append({"range": f"{start}-{end}", "count": int(counts[i])})
    return series


def _bar_series(rows: list[dict], spec: ChartSpec) -> list[dict]:
    """Top categories of ``x_col`` by row count or by summed ``y_col``."""
    groups: dict[str, Any] = {}
    for row in rows:
        key = _category(row.get(spec.x_col))
        if spec.y_col:
            amount = to_number(row.get(spec.y_col))
            groups[key] = groups.get(key, 0) + (1 if amount is None else amount)
        else:
            groups[key] = groups.get(key, 0) + 1

    # sorted() is stable with reverse=True, so ties keep first-seen order
    ranked = sorted(groups.items(), key=lambda item: item[1], reverse=True)
    return [{"category": key, "count": count} for key, count in ranked[:BAR_TOP_N]]


def _scatter_series(rows: list[dict], spec: ChartSpec) -> list[dict]:
    series: list[dict] = []
    for row in rows:
        x = to_number(row.get(spec.x_col))
        y = to_number(row.get(spec.y_col))
        if x is None or y is None:
            continue
        point = {"x": x, "y": y}
        if spec.color_col:
            point["color"] = row.get(spec.color_col)
        series.append(point)
        if len(series) >= SCATTER_MAX_POINTS:
            break
    return series


def _line_series(rows: list[dict], spec: ChartSpec) -> list[dict]:
    """First 100 rows with both axes present; ``x`` is passed through raw."""
    series: list[dict] = []
    for row in rows:
        x = row.get(spec.x_col)
        y = row.get(spec.y_col)
        if is_missing(x) or is_missing(y):
            continue
        series.append({"x": x, "y": to_number(y)})
        if len(series) >= LINE_MAX_POINTS:
            break
    return series


def _box_series(rows: list[dict], spec: ChartSpec) -> list[dict]:
    """Nearest-rank five-number summary of ``y_col`` per ``x_col`` group."""
    groups: dict[str, list] = {}
    for row in rows:
        value = to_number(row.get(spec.y_col))
        if value is None:
            continue
        key = _category(row.get(spec.x_col)) if spec.x_col else "all"
        groups.setdefault(key, []).append(value)

    series = []
    for group, values in groups.items():
        ordered = sorted(values)
        n = len(ordered)
        series.append(
            {
                "group": group,
                "min": ordered[0],
                "q1": ordered[int(n * 0.25)],
                "median": ordered[int(n * 0.5)],
                "q3": ordered[int(n * 0.75)],
                "max": ordered[-1],
            }
        )
    return series


def _raw_series(rows: list[dict], spec: ChartSpec) -> list[dict]:
    return [dict(row) for row in rows[:RAW_MAX_ROWS]]


_BUILDERS = {
    "histogram": _histogram_series,
    "bar": _bar_series,
    "scatter": _scatter_series,
    "line": _line_series,
    "box": _box_series,
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def render_hints(spec: ChartSpec, series: list[dict]) -> dict:
    """Title, type and, for axis-based charts, the series keys to plot."""
    hints = {"title": spec.title, "type": spec.type}
    axis_keys = _AXIS_KEYS.get(spec.type)
    if axis_keys:
        hints["x_axis_key"], hints["y_axis_key"] = axis_keys
    return hints


def build_chart_data(dataset: TabularDataset, spec: ChartSpec) -> tuple[list[dict], dict]:
    """Produce the series a chart needs plus its render hints.

    Violin, heatmap and unrecognized chart types get the first 100 raw rows.
    Missing columns degrade to empty or ``None``-valued series rather than
    raising.

    Args:
        dataset: Source dataset named by ``spec.file``.
        spec: The chart to build.

    Returns:
        Tuple of (series records, render hints).
    """
    builder = _BUILDERS.get(spec.type, _raw_series)
    series = builder(dataset.rows, spec)
    return series, render_hints(spec, series)


def compute_stats(rows: list[dict], column: str) -> dict:
    """Descriptive statistics of one column.

    Numeric columns give mean, median, min, max, count and population
    standard deviation; mean, median and stddev are rounded to 2 decimals
    and the median is ``sorted[n // 2]``. Columns without numeric values
    give ``{"unique", "count"}``. ``count`` is the number of non-missing
    values either way.
    """
    values = [row.get(column) for row in rows if not is_missing(row.get(column))]
    numeric = sorted(n for n in (to_number(v) for v in values) if n is not None)

    if not numeric:
        return {"unique": len(set(values)), "count": len(values)}

    arr = np.asarray(numeric, dtype=float)
    return {
        "mean": round_half_up(float(arr.mean()), 2),
        "median": round_half_up(float(numeric[len(numeric) // 2]), 2),
        "min": numeric[0],
        "max": numeric[-1],
        "count": len(values),
        "stddev": round_half_up(float(arr.std()), 2),
    }


def build_overview(datasets: Iterable[TabularDataset]) -> Optional[AnalysisResult]:
    """Default line charts for every numeric column, built without the LLM.

    A column is numeric when any of its first 10 values is. Each chart plots
    the first 100 rows against a 1-based ``index``.

    Returns:
        An ``AnalysisResult`` or ``None`` when no dataset has a numeric column.
    """
    charts: list[BuiltChart] = []

    for dataset in datasets:
        head = dataset.rows[:OVERVIEW_SAMPLE_ROWS]
        numeric_cols = [
            col for col in dataset.columns
            if any(to_number(row.get(col)) is not None for row in head)
        ]
        if not numeric_cols:
            continue

        line_data = []
        for index, row in enumerate(dataset.rows[:LINE_MAX_POINTS]):
            point: dict[str, Any] = {"index": index + 1}
            for col in numeric_cols:
                value = to_number(row.get(col))
                if value is not None:
                    point[col] = value
            line_data.append(point)

        for col in numeric_cols:
            spec = ChartSpec(
                type="line",
                file=dataset.name,
                title=f"{col} - Line Chart",
                description=f"Trend analysis of {col} from {dataset.name}",
                x_col="index",
                y_col=col,
            )
            charts.append(
                BuiltChart(
                    spec=spec,
                    series=list(line_data),
                    insight=f"Time series visualization of {col} showing {len(line_data)} data points.",
                    render_hints={
                        "title": spec.title,
                        "type": "line",
                        "x_axis_key": "index",
                        "y_axis_key": col,
                    },
                )
            )

    if not charts:
        return None

    plural = "s" if len(charts) > 1 else ""
    return AnalysisResult(
        plan=AnalysisPlan(
            focus="Auto-generated line charts for all numeric columns",
            charts=[chart.spec for chart in charts],
            summary_points=["Automatic visualization of uploaded data"],
        ),
        charts=charts,
        executive_summary=(
            f"Generated {len(charts)} line chart{plural} from your uploaded data files. "
            "These charts show the trends of all numeric columns."
        ),
        insights=["Automatic visualization created for all numeric columns"],
    )

"""Core data models for the VizPilot analysis agent."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from typing import Any, Optional

import pandas as pd
from typing_extensions import TypedDict

CHART_TYPES = ("histogram", "bar", "scatter", "violin", "box", "line", "heatmap")

# Placeholder strings the oracle uses instead of JSON null.
_NULL_COLUMN_NAMES = {"", "null", "none"}


@dataclass(frozen=True)
class TabularDataset:
    """One uploaded file, normalized to ordered rows of scalar values."""

    name: str
    columns: list[str]
    rows: list[dict[str, Any]]

    @property
    def shape(self) -> tuple[int, int]:
        return (len(self.rows), len(self.columns))

    @classmethod
    def from_records(cls, name: str, rows: list[dict[str, Any]]) -> "TabularDataset":
        """Build a dataset whose columns are the keys of the first row."""
        columns = [str(key) for key in rows[0].keys()] if rows else []
        return cls(name=name, columns=columns, rows=[dict(row) for row in rows])

    @classmethod
    def from_frame(cls, name: str, df: pd.DataFrame) -> "TabularDataset":
        """Build a dataset from a DataFrame, mapping NaN/NaT to ``None``."""
        frame = df.copy()
        frame.columns = [str(col) for col in frame.columns]
        frame = frame.astype(object).where(pd.notna(frame), None)
        return cls.from_records(name, frame.to_dict(orient="records"))


def _optional_column(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    if text.lower() in _NULL_COLUMN_NAMES:
        return None
    return text


@dataclass
class ChartSpec:
    """A single visualization requested by the plan."""

    type: str
    file: str
    title: str = ""
    description: str = ""
    x_col: Optional[str] = None
    y_col: Optional[str] = None
    color_col: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: dict) -> "ChartSpec":
        """Coerce one oracle chart object into a spec.

        Unknown chart types are kept as-is; the chart builder falls back to
        raw rows for them. Column names are not checked against any dataset.
        """
        return cls(
            type=str(raw.get("type") or "").strip().lower(),
            file=str(raw.get("file") or "").strip(),
            title=str(raw.get("title") or ""),
            description=str(raw.get("description") or ""),
            x_col=_optional_column(raw.get("x_col")),
            y_col=_optional_column(raw.get("y_col")),
            color_col=_optional_column(raw.get("color_col")),
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class AnalysisPlan:
    """The oracle's visualization plan for one analysis run."""

    focus: str
    charts: list[ChartSpec] = field(default_factory=list)
    summary_points: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, raw: Any, focus: str) -> "AnalysisPlan":
        """Build a plan from parsed oracle JSON.

        ``raw`` may be the requested object or a bare array of charts.
        Entries of ``charts`` that are not objects are dropped.
        """
        if isinstance(raw, list):
            raw = {"charts": raw}
        if not isinstance(raw, dict):
            raw = {}

        raw_charts = raw.get("charts")
        if not isinstance(raw_charts, list):
            raw_charts = []
        charts = [ChartSpec.from_dict(item) for item in raw_charts if isinstance(item, dict)]

        raw_points = raw.get("summary_points")
        if not isinstance(raw_points, list):
            raw_points = []
        summary_points = [str(point) for point in raw_points if point is not None]

        return cls(focus=focus, charts=charts, summary_points=summary_points)


@dataclass
class BuiltChart:
    """A chart spec together with its materialized series and insight."""

    spec: ChartSpec
    series: list[dict]
    insight: str
    render_hints: dict = field(default_factory=dict)


@dataclass
class AnalysisResult:
    """Root artifact of one analysis run."""

    plan: AnalysisPlan
    charts: list[BuiltChart] = field(default_factory=list)
    executive_summary: str = ""
    insights: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Plain JSON-ready mapping; non-JSON cell values such as timestamps become strings."""
        return json.loads(json.dumps(asdict(self), default=str))


@dataclass
class ChatTurn:
    """One message of the follow-up conversation."""

    role: str  # "user" | "assistant"
    content: str


class AnalysisState(TypedDict, total=False):
    """State object shared across all analysis graph nodes."""

    # Input
    focus: str
    datasets: list[TabularDataset]
    lookup: dict[str, TabularDataset]

    # Planning
    schema: Optional[dict]
    plan: Optional[AnalysisPlan]

    # Execution
    charts: list[BuiltChart]
    executive_summary: Optional[str]

    # Traceability
    reasoning_log: list[dict]

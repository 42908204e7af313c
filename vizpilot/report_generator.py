"""Report generator that writes an analysis result as a Markdown report."""

from __future__ import annotations

import os
from typing import Optional

from vizpilot.models import AnalysisResult, BuiltChart, ChatTurn

TABLE_ROWS = 10


def _cell(value) -> str:
    text = "" if value is None else str(value)
    return text.replace("|", "\\|").replace("\n", " ")


def _format_series_table(series: list[dict], max_rows: int = TABLE_ROWS) -> str:
    """Render the first *max_rows* series records as a Markdown table."""
    if not series:
        return "_No data points._\n"

    headers: list[str] = []
    for record in series[:max_rows]:
        for key in record:
            if key not in headers:
                headers.append(key)

    lines = [
        "| " + " | ".join(_cell(h) for h in headers) + " |",
        "|" + "|".join("---" for _ in headers) + "|",
    ]
    for record in series[:max_rows]:
        lines.append("| " + " | ".join(_cell(record.get(h)) for h in headers) + " |")
    if len(series) > max_rows:
        lines.append(f"\n_Showing {max_rows} of {len(series)} records._")
    return "\n".join(lines) + "\n"


def _format_chart(index: int, chart: BuiltChart) -> str:
    spec = chart.spec
    lines = [f"### {index}. {spec.title or spec.type}\n"]
    lines.append(f"- **Type**: {spec.type}")
    lines.append(f"- **Source file**: {spec.file}")
    axes = [
        f"{label}=`{col}`"
        for label, col in (("x", spec.x_col), ("y", spec.y_col), ("color", spec.color_col))
        if col
    ]
    if axes:
        lines.append(f"- **Columns**: {', '.join(axes)}")
    if spec.description:
        lines.append(f"- **Description**: {spec.description}")
    lines.append("")
    lines.append(f"> {chart.insight}\n" if chart.insight else "")
    lines.append(_format_series_table(chart.series))
    return "\n".join(lines)


def generate_report(
    result: AnalysisResult,
    output_dir: str,
    history: Optional[list[ChatTurn]] = None,
) -> str:
    """Generate a Markdown report and save to output_dir/report.md.

    Args:
        result: The analysis result to report on.
        output_dir: Directory to save the report.
        history: Optional chat transcript appended at the end.

    Returns:
        The path to the saved report file.
    """
    os.makedirs(output_dir, exist_ok=True)

    sections: list[str] = []

    sections.append("# Data Analysis Report\n")
    sections.append(f"**Focus**: {result.plan.focus}\n")

    sections.append("## Executive Summary\n")
    sections.append(f"{result.executive_summary or 'No summary generated.'}\n")

    sections.append("## Key Points\n")
    if result.insights:
        for i, insight in enumerate(result.insights, 1):
            sections.append(f"{i}. {insight}")
    else:
        sections.append("No key points generated.")
    sections.append("")

    sections.append("## Charts\n")
    if result.charts:
        for i, chart in enumerate(result.charts, 1):
            sections.append(_format_chart(i, chart))
    else:
        sections.append("No charts were built.\n")

    if history:
        sections.append("## Questions & Answers\n")
        for turn in history:
            speaker = "Q" if turn.role == "user" else "A"
            sections.append(f"**{speaker}**: {turn.content}\n")

    report_content = "\n".join(sections)
    report_path = os.path.join(output_dir, "report.md")
    with open(report_path, "w", encoding="utf-8") as f:
        f.write(report_content)

    return report_path

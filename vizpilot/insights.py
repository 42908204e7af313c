"""Insight agent: natural-language commentary on built charts."""

from __future__ import annotations

import json

from vizpilot.models import BuiltChart, ChartSpec
from vizpilot.oracle import Oracle
from vizpilot.tools.chart_data import compute_stats

SAMPLE_RECORDS = 3


def build_insight_prompt(spec: ChartSpec, series: list[dict], rows: list[dict]) -> str:
    """Prompt for one chart. Axis stats are computed over the full *rows*."""
    stats_x = (
        f"X-column stats: {json.dumps(compute_stats(rows, spec.x_col), default=str)}"
        if spec.x_col
        else ""
    )
    stats_y = (
        f"Y-column stats: {json.dumps(compute_stats(rows, spec.y_col), default=str)}"
        if spec.y_col
        else ""
    )
    sample = json.dumps(series[:SAMPLE_RECORDS], default=str)

    return f"""Generate a brief, data-driven insight (2-3 sentences) for this chart:

Title: {spec.title}
Type: {spec.type}
Description: {spec.description}
{stats_x}
{stats_y}

Sample data: {sample}

Provide only the insight text, no additional formatting."""


def describe_chart(oracle: Oracle, spec: ChartSpec, series: list[dict], rows: list[dict]) -> str:
    """Return the oracle's insight text for one chart, verbatim."""
    return oracle.generate_text(build_insight_prompt(spec, series, rows))


def build_summary_prompt(focus: str, charts: list[BuiltChart]) -> str:
    insights_text = "\n".join(f"- {c.spec.title}: {c.insight}" for c in charts)
    return f"""Based on these analysis results, generate a 3-4 sentence executive summary addressing the focus: "{focus}"

Key Insights:
{insights_text}

Provide only the summary text, no additional formatting."""


def generate_executive_summary(oracle: Oracle, focus: str, charts: list[BuiltChart]) -> str:
    """Summarize all chart insights. Runs even when *charts* is empty."""
    return oracle.generate_text(build_summary_prompt(focus, charts))

"""Planning agent: ask the oracle for a visualization plan."""

from __future__ import annotations

import json
import logging

from vizpilot.errors import JSONExtractionError, JSONParseError, OracleError, PlanningError
from vizpilot.models import CHART_TYPES, AnalysisPlan
from vizpilot.oracle import Oracle
from vizpilot.tools.schema import render_prompt_context

logger = logging.getLogger(__name__)


def build_plan_prompt(schema: dict[str, dict], focus: str, file_names: list[str]) -> str:
    """Return the planning prompt for a compressed schema and user focus."""
    schema_context = render_prompt_context(schema)
    return f"""You are an expert data analyst. Based on the following schema and user focus, create an analysis plan.

{schema_context}
USER FOCUS: {focus}

Available files: {', '.join(file_names)}

Generate a JSON object with this exact structure:
{{
  "focus": {json.dumps(focus)},
  "charts": [
    {{
      "type": "chart_type",
      "x_col": "column_name or null",
      "y_col": "column_name or null",
      "color_col": "column_name or null",
      "file": "filename",
      "title": "Chart title",
      "description": "What this chart shows"
    }}
  ],
  "summary_points": ["insight 1", "insight 2"]
}}

Chart types to choose from: {', '.join(CHART_TYPES)}

Create 3-5 relevant charts that help answer the user's focus. Make sure columns actually exist in the data."""


def plan_analysis(
    oracle: Oracle,
    schema: dict[str, dict],
    focus: str,
    file_names: list[str],
) -> AnalysisPlan:
    """Ask the oracle for an analysis plan.

    Only the JSON shape is checked. Whether files and columns exist is left
    to the execution step.

    Args:
        oracle: Text/JSON oracle.
        schema: Output of ``compress_schema``.
        focus: The user's analysis focus.
        file_names: Names of the loaded datasets.

    Returns:
        The parsed ``AnalysisPlan``; its ``focus`` echoes the user's focus.

    Raises:
        PlanningError: If the oracle call fails or returns no usable JSON.
    """
    prompt = build_plan_prompt(schema, focus, file_names)
    try:
        raw = oracle.generate_json(prompt)
    except (OracleError, JSONExtractionError, JSONParseError) as exc:
        raise PlanningError(f"Planning failed: {exc}") from exc

    plan = AnalysisPlan.from_dict(raw, focus=focus)
    logger.info("Planned %d chart(s) for focus %r", len(plan.charts), focus)
    return plan

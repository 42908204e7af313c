"""Tests for the planning agent."""

from __future__ import annotations

import json
from unittest.mock import MagicMock

import pytest

from vizpilot.errors import JSONExtractionError, OracleError, PlanningError
from vizpilot.oracle import Oracle
from vizpilot.planner import build_plan_prompt, plan_analysis
from vizpilot.tools.schema import compress_schema

PLAN_JSON = {
    "focus": "Find the hero product",
    "charts": [
        {
            "type": "bar",
            "x_col": "product",
            "y_col": "revenue",
            "color_col": None,
            "file": "sales.csv",
            "title": "Revenue by product",
            "description": "Which product sells most",
        },
        {
            "type": "histogram",
            "x_col": "revenue",
            "y_col": None,
            "color_col": None,
            "file": "ghost.csv",
            "title": "Revenue distribution",
            "description": "Spread of revenue",
        },
    ],
    "summary_points": ["Widgets dominate"],
}


def _mock_llm(content: str):
    response = MagicMock()
    response.content = content
    llm = MagicMock()
    llm.invoke.return_value = response
    return llm


class TestBuildPlanPrompt:
    def test_embeds_schema_focus_and_files(self, sales_dataset):
        prompt = build_plan_prompt(compress_schema([sales_dataset]), "Find the hero product", ["sales.csv"])
        assert "DATA SCHEMA:" in prompt
        assert "File: sales.csv" in prompt
        assert "USER FOCUS: Find the hero product" in prompt
        assert "Available files: sales.csv" in prompt
        assert "3-5 relevant charts" in prompt

    def test_lists_all_chart_types(self):
        prompt = build_plan_prompt({}, "focus", [])
        assert "histogram, bar, scatter, violin, box, line, heatmap" in prompt

    def test_focus_with_quotes_is_escaped(self):
        prompt = build_plan_prompt({}, 'the "best" item', [])
        assert '"focus": "the \\"best\\" item"' in prompt


class TestPlanAnalysis:
    def test_parses_plan(self, sales_dataset):
        llm = _mock_llm(f"Here is the plan:\n```json\n{json.dumps(PLAN_JSON)}\n```")
        plan = plan_analysis(
            Oracle(llm), compress_schema([sales_dataset]), "Find the hero product", ["sales.csv"]
        )
        assert [c.title for c in plan.charts] == ["Revenue by product", "Revenue distribution"]
        assert plan.charts[0].y_col == "revenue"
        assert plan.charts[1].y_col is None
        assert plan.summary_points == ["Widgets dominate"]

    def test_unknown_files_are_not_rejected(self):
        llm = _mock_llm(json.dumps(PLAN_JSON))
        plan = plan_analysis(Oracle(llm), {}, "Find the hero product", ["sales.csv"])
        assert plan.charts[1].file == "ghost.csv"

    def test_focus_echoes_user_input(self):
        llm = _mock_llm(json.dumps({**PLAN_JSON, "focus": "rewritten"}))
        plan = plan_analysis(Oracle(llm), {}, "my focus", [])
        assert plan.focus == "my focus"

    def test_non_json_raises_planning_error(self):
        llm = _mock_llm("I'm sorry, I can't do that.")
        with pytest.raises(PlanningError) as exc_info:
            plan_analysis(Oracle(llm), {}, "focus", [])
        assert isinstance(exc_info.value.__cause__, JSONExtractionError)

    def test_oracle_failure_raises_planning_error(self):
        llm = MagicMock()
        llm.invoke.side_effect = ConnectionError("network down")
        with pytest.raises(PlanningError, match="network down") as exc_info:
            plan_analysis(Oracle(llm), {}, "focus", [])
        assert isinstance(exc_info.value.__cause__, OracleError)

"""LangGraph analysis orchestrator: graph nodes and workflow builder.

The workflow is a straight line, compress -> planner -> executor -> summarizer.
Each node takes an AnalysisState dict (and the oracle where needed),
appends a timestamped entry to state["reasoning_log"] and returns the
updated state. Nodes do not catch pipeline errors: any failure propagates
out of ``run_analysis`` so no partial result is ever published.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping, Optional

from vizpilot.insights import describe_chart, generate_executive_summary
from vizpilot.models import AnalysisResult, AnalysisState, BuiltChart, TabularDataset
from vizpilot.oracle import Oracle
from vizpilot.planner import plan_analysis
from vizpilot.tools.chart_data import build_chart_data
from vizpilot.tools.schema import compress_schema

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _timestamp() -> str:
    """Return an ISO-8601 UTC timestamp string."""
    return datetime.now(timezone.utc).isoformat()


def _append_reasoning(state: dict, agent: str, reasoning: str) -> None:
    """Append a reasoning log entry to state."""
    _ensure_list(state, "reasoning_log")
    state["reasoning_log"].append(
        {"timestamp": _timestamp(), "agent": agent, "reasoning": reasoning}
    )


def _ensure_list(state: dict, key: str) -> None:
    """Ensure *key* exists in state as a list."""
    if key not in state or state[key] is None:
        state[key] = []


# ---------------------------------------------------------------------------
# Nodes
# ---------------------------------------------------------------------------


def schema_node(state: AnalysisState) -> AnalysisState:
    """Compress every loaded dataset into the planning schema."""
    datasets = state.get("datasets") or []
    state["schema"] = compress_schema(datasets)
    _append_reasoning(
        state,
        "schema_node",
        f"Compressed schema for {len(state['schema'])} dataset(s).",
    )
    return state


def plan_node(state: AnalysisState, oracle: Oracle) -> AnalysisState:
    """Ask the oracle for a chart plan."""
    datasets = state.get("datasets") or []
    plan = plan_analysis(
        oracle,
        state.get("schema") or {},
        state.get("focus", ""),
        [dataset.name for dataset in datasets],
    )
    state["plan"] = plan
    _append_reasoning(
        state,
        "plan_node",
        f"Plan has {len(plan.charts)} chart(s): "
        + ", ".join(f"{c.type} on {c.file}" for c in plan.charts),
    )
    return state


def execute_node(state: AnalysisState, oracle: Oracle) -> AnalysisState:
    """Build each planned chart in order and describe it.

    Charts naming a file that is not loaded are skipped; the oracle may
    invent file names.
    """
    _ensure_list(state, "charts")
    lookup = state.get("lookup") or {}
    plan = state["plan"]

    for spec in plan.charts:
        dataset = lookup.get(spec.file)
        if dataset is None:
            logger.warning("Skipping chart %r: dataset %r is not loaded", spec.title, spec.file)
            _append_reasoning(
                state,
                "execute_node",
                f"Skipped '{spec.title}': unknown file '{spec.file}'.",
            )
            continue

        series, hints = build_chart_data(dataset, spec)
        insight = describe_chart(oracle, spec, series, dataset.rows)
        state["charts"].append(
            BuiltChart(spec=spec, series=series, insight=insight, render_hints=hints)
        )
        _append_reasoning(
            state,
            "execute_node",
            f"Built {spec.type} chart '{spec.title}' with {len(series)} record(s).",
        )

    return state


def summarize_node(state: AnalysisState, oracle: Oracle) -> AnalysisState:
    """Write the executive summary over all built charts."""
    charts = state.get("charts") or []
    state["executive_summary"] = generate_executive_summary(
        oracle, state.get("focus", ""), charts
    )
    _append_reasoning(
        state,
        "summarize_node",
        f"Executive summary written over {len(charts)} chart(s).",
    )
    return state


# ---------------------------------------------------------------------------
# Graph builder
# ---------------------------------------------------------------------------


def build_graph(oracle: Oracle) -> Any:
    """Build and compile the LangGraph workflow.

    Nodes: compress -> planner -> executor -> summarizer

    Args:
        oracle: The text/JSON oracle used by the LLM-backed nodes.

    Returns:
        A compiled LangGraph ``StateGraph``.
    """
    from functools import partial

    from langgraph.graph import END, START, StateGraph

    graph = StateGraph(AnalysisState)

    graph.add_node("compress", schema_node)
    graph.add_node("planner", partial(plan_node, oracle=oracle))
    graph.add_node("executor", partial(execute_node, oracle=oracle))
    graph.add_node("summarizer", partial(summarize_node, oracle=oracle))

    graph.add_edge(START, "compress")
    graph.add_edge("compress", "planner")
    graph.add_edge("planner", "executor")
    graph.add_edge("executor", "summarizer")
    graph.add_edge("summarizer", END)

    return graph.compile()


def run_analysis(
    oracle: Oracle,
    datasets: Iterable[TabularDataset],
    focus: str,
    lookup: Optional[Mapping[str, TabularDataset]] = None,
) -> AnalysisResult:
    """Run the full compress -> plan -> execute -> summarize pipeline.

    Args:
        oracle: Text/JSON oracle.
        datasets: Datasets described to the planner.
        focus: The user's analysis focus.
        lookup: Name -> dataset map used to resolve ``ChartSpec.file``;
            defaults to the datasets keyed by name.

    Returns:
        The new ``AnalysisResult``.

    Raises:
        PlanningError, OracleError: Propagated unchanged; the run is aborted.
    """
    datasets = list(datasets)
    if lookup is None:
        lookup = {dataset.name: dataset for dataset in datasets}

    initial_state: AnalysisState = {
        "focus": focus,
        "datasets": datasets,
        "lookup": dict(lookup),
        "schema": None,
        "plan": None,
        "charts": [],
        "executive_summary": None,
        "reasoning_log": [],
    }

    final_state = build_graph(oracle).invoke(initial_state)

    plan = final_state["plan"]
    return AnalysisResult(
        plan=plan,
        charts=list(final_state.get("charts") or []),
        executive_summary=final_state.get("executive_summary") or "",
        insights=list(plan.summary_points),
    )

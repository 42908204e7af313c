"""Follow-up question answering grounded in an analysis result."""

from __future__ import annotations

import json
import logging

from vizpilot.errors import OracleError
from vizpilot.models import AnalysisResult, ChatTurn, TabularDataset
from vizpilot.oracle import Oracle

logger = logging.getLogger(__name__)

SAMPLE_ROWS = 2


def build_chat_prompt(
    result: AnalysisResult,
    datasets: list[TabularDataset],
    question: str,
) -> str:
    """Rebuild the full grounding context for one question.

    Nothing from earlier turns is included; every call carries the whole
    analysis again.
    """
    data_context = "\n\n".join(
        f"Chart: {chart.spec.title}\nInsight: {chart.insight}" for chart in result.charts
    )
    files_context = "\n".join(
        f"File: {d.name}, Rows: {d.shape[0]}, Columns: {', '.join(d.columns)}"
        for d in datasets
    )
    sample_data = "\n\n".join(
        f"{d.name} sample:\n{json.dumps(d.rows[:SAMPLE_ROWS], indent=2, default=str)}"
        for d in datasets
    )

    return f"""You are analyzing data. Here's the context from the analysis:

Focus: {result.plan.focus}

Files:
{files_context}

Sample Data:
{sample_data}

Charts and Insights:
{data_context}

Executive Summary: {result.executive_summary}

User question: {question}

Provide a concise, data-driven answer based on the analysis results."""


def ask(
    oracle: Oracle,
    result: AnalysisResult,
    datasets: list[TabularDataset],
    history: list[ChatTurn],
    question: str,
) -> str:
    """Answer *question* and append both turns to *history*.

    A failed oracle call becomes an ``"Error: ..."`` assistant turn instead
    of an exception, so the transcript carries on.

    Returns:
        The assistant's reply (or the error text).
    """
    history.append(ChatTurn(role="user", content=question))
    try:
        answer = oracle.generate_text(build_chat_prompt(result, datasets, question))
    except OracleError as exc:
        logger.warning("Chat turn failed: %s", exc)
        answer = f"Error: {exc.message}"
    history.append(ChatTurn(role="assistant", content=answer))
    return answer

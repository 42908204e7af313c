"""Text and JSON generation contract over a LangChain chat model.

The pipeline only ever talks to the LLM through :class:`Oracle`, so the
provider behind it (OpenAI, Gemini) is interchangeable.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage

from vizpilot.errors import JSONExtractionError, JSONParseError, OracleError

logger = logging.getLogger(__name__)

JSON_INSTRUCTION = (
    "IMPORTANT: Return only valid JSON, no markdown formatting or code blocks. "
    "Start directly with { or ["
)

# Greedy: spans from the first "{" to the last "}" (or "[" to "]").
_JSON_SPAN_RE = re.compile(r"\{[\s\S]*\}|\[[\s\S]*\]")


def message_text(response: Any) -> str:
    """Return the text of an AIMessage-like response."""
    content = getattr(response, "content", response)
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        # Multi-part content blocks (Gemini) come back as a list.
        parts = []
        for part in content:
            if isinstance(part, dict):
                parts.append(str(part.get("text", "")))
            else:
                parts.append(str(part))
        return "".join(parts)
    return "" if content is None else str(content)


def extract_json(text: str) -> Any:
    """Parse the first ``{...}`` or ``[...]`` span found in *text*.

    Raises:
        JSONExtractionError: If the text contains no such span.
        JSONParseError: If the span is not valid JSON.
    """
    match = _JSON_SPAN_RE.search(text or "")
    if not match:
        logger.error("Raw response: %s", text)
        raise JSONExtractionError(text)
    try:
        return json.loads(match.group())
    except json.JSONDecodeError as exc:
        logger.error("Raw response: %s", text)
        raise JSONParseError(f"Invalid JSON in response: {exc}", text) from exc


class Oracle:
    """Opaque text/JSON generator backed by a chat model."""

    def __init__(self, llm: BaseChatModel):
        self.llm = llm

    def generate_text(self, prompt: str) -> str:
        """Send *prompt* as a single user message and return the reply text.

        Raises:
            OracleError: If the model call fails for any reason.
        """
        try:
            response = self.llm.invoke([HumanMessage(content=prompt)])
        except Exception as exc:
            raise OracleError(f"LLM call failed: {exc}") from exc
        return message_text(response)

    def generate_json(self, prompt: str) -> Any:
        """Ask for raw JSON and parse it. No schema validation is done."""
        text = self.generate_text(f"{prompt}\n\n{JSON_INSTRUCTION}")
        return extract_json(text)

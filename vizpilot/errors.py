"""Exception hierarchy for the VizPilot analysis agent.

Every error carries a stable ``code`` so callers (CLI, UI) can map it to a
message without matching on class names.
"""

from __future__ import annotations


class VizPilotError(Exception):
    """Base exception for VizPilot."""

    code = "VIZPILOT_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


class UnsupportedFileType(VizPilotError):
    """Raised when a file extension has no registered parser."""

    code = "UNSUPPORTED_FILE_TYPE"

    def __init__(self, file_name: str):
        self.file_name = file_name
        super().__init__(f"Unsupported file type: {file_name}")


class DatasetLoadError(VizPilotError):
    """Raised when a supported file cannot be read or decoded."""

    code = "DATASET_LOAD_ERROR"


# ---------------------------------------------------------------------------
# Oracle
# ---------------------------------------------------------------------------


class OracleError(VizPilotError):
    """Raised when the LLM call itself fails (transport, auth, rate limit)."""

    code = "ORACLE_ERROR"


class JSONExtractionError(VizPilotError):
    """Raised when no ``{...}`` or ``[...]`` span exists in the oracle text."""

    code = "JSON_EXTRACTION_ERROR"

    def __init__(self, raw_text: str):
        self.raw_text = raw_text
        super().__init__("Failed to extract JSON from response")


class JSONParseError(VizPilotError):
    """Raised when the extracted span is not valid JSON."""

    code = "JSON_PARSE_ERROR"

    def __init__(self, message: str, raw_text: str):
        self.raw_text = raw_text
        super().__init__(message)


class PlanningError(VizPilotError):
    """Raised when no analysis plan could be obtained from the oracle."""

    code = "PLANNING_ERROR"


# ---------------------------------------------------------------------------
# Preconditions
# ---------------------------------------------------------------------------


class PreconditionError(VizPilotError):
    """Raised before any oracle call when an action cannot start."""

    code = "PRECONDITION_FAILED"


class EmptyFocus(PreconditionError):
    code = "EMPTY_FOCUS"

    def __init__(self, message: str = "Please enter an analysis focus"):
        super().__init__(message)


class NoFilesUploaded(PreconditionError):
    code = "NO_FILES_UPLOADED"

    def __init__(self, message: str = "Please upload at least one data file"):
        super().__init__(message)


class NoApiKey(PreconditionError):
    code = "NO_API_KEY"

    def __init__(self, message: str = "Please configure API key first"):
        super().__init__(message)


class NoAnalysisResult(PreconditionError):
    code = "NO_ANALYSIS_RESULT"

    def __init__(self, message: str = "Run an analysis before asking questions"):
        super().__init__(message)

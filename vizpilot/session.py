"""Working set of one user: datasets, current result and chat transcript."""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from vizpilot.chat import ask
from vizpilot.errors import EmptyFocus, NoAnalysisResult, NoApiKey, NoFilesUploaded
from vizpilot.graph import run_analysis
from vizpilot.llm_config import OracleConfig, create_oracle
from vizpilot.models import AnalysisResult, ChatTurn, TabularDataset
from vizpilot.oracle import Oracle
from vizpilot.tools.chart_data import build_overview

logger = logging.getLogger(__name__)


class AnalysisSession:
    """Owns the state that the analysis and chat actions read and replace.

    Only one action runs at a time; callers must not trigger a new run
    while one is in flight.
    """

    def __init__(self, config: Optional[OracleConfig] = None, oracle: Optional[Oracle] = None):
        self.config = config
        self._oracle = oracle
        self.datasets: dict[str, TabularDataset] = {}
        self.result: Optional[AnalysisResult] = None
        self.history: list[ChatTurn] = []

    # -- datasets -------------------------------------------------------

    def add_datasets(self, datasets: Iterable[TabularDataset]) -> None:
        """Add datasets; a dataset with an existing name replaces it."""
        for dataset in datasets:
            self.datasets[dataset.name] = dataset
        self._refresh_overview()

    def remove_dataset(self, name: str) -> None:
        self.datasets.pop(name, None)
        self._refresh_overview()

    def clear(self) -> None:
        self.datasets.clear()
        self.result = None
        self.history = []

    def _refresh_overview(self) -> None:
        """Replace the result with the data overview; the transcript goes with it."""
        if not self.datasets:
            self.result = None
            self.history = []
            return
        overview = build_overview(self.datasets.values())
        if overview is not None:
            self.result = overview
            self.history = []

    # -- oracle ---------------------------------------------------------

    @property
    def oracle(self) -> Oracle:
        """The configured oracle, built on first use.

        Raises:
            NoApiKey: If neither an oracle nor a keyed config was provided.
        """
        if self._oracle is None:
            if self.config is None:
                raise NoApiKey()
            self._oracle = create_oracle(self.config)
        return self._oracle

    # -- actions --------------------------------------------------------

    def run(self, focus: str) -> AnalysisResult:
        """Run a full analysis and replace the current result.

        Preconditions are checked before any oracle call. On failure the
        previous result and transcript are left untouched.

        Raises:
            NoApiKey, NoFilesUploaded, EmptyFocus: Precondition failures.
            PlanningError, OracleError: Pipeline failures.
        """
        oracle = self.oracle
        if not self.datasets:
            raise NoFilesUploaded()
        if not focus or not focus.strip():
            raise EmptyFocus()

        datasets = list(self.datasets.values())
        result = run_analysis(oracle, datasets, focus, lookup=self.datasets)

        self.result = result
        self.history = []
        logger.info("Analysis finished with %d chart(s)", len(result.charts))
        return result

    def ask(self, question: str) -> str:
        """Ask a follow-up question about the current result."""
        if self.result is None:
            raise NoAnalysisResult()
        return ask(self.oracle, self.result, list(self.datasets.values()), self.history, question)

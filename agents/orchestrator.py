"""Orchestrator agent – top-level coordinator for one question-answering run.

Hierarchy
---------
Level 0  OrchestratorAgent   (this module)
Level 1  ResearcherAgent     – searches and stores context in the shared state
Level 1  ExtractorAgent      – answers from the stored context, validated against it

The Orchestrator owns the ``SharedState`` of each run.  It creates a new one
when a run starts, builds every tool and agent of that run around it, and
drops its reference when the next run starts.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from openai import OpenAI

from agents.extractor import ExtractorAgent
from agents.researcher import ResearcherAgent
from agents.validation import ResponseValidationError
from state.shared import SharedState
from tools.search import SearchTool

logger = logging.getLogger(__name__)


class OrchestratorAgent:
    """Coordinates the research → extraction pipeline.

    Parameters
    ----------
    search_factory:
        A callable ``(shared_state) -> SearchTool`` invoked once per run, e.g.
        ``StubSearchTool`` or ``ExaSearchTool``.  Inject a stub here during
        testing.
    client:
        Optional shared OpenAI client.  A new client is created if omitted.
    model:
        Model name forwarded to every sub-agent.
    max_validation_attempts:
        How many answers the ExtractorAgent may produce before the run fails.
    parallel_tool_calls:
        Run the tool calls of a single model turn concurrently.
    """

    def __init__(
        self,
        search_factory: Callable[[SharedState], SearchTool],
        client: OpenAI | None = None,
        model: str = "gpt-4o-mini",
        max_validation_attempts: int = 2,
        parallel_tool_calls: bool = False,
    ):
        self._search_factory = search_factory
        self._client = client
        self._model = model
        self._max_validation_attempts = max_validation_attempts
        self._parallel_tool_calls = parallel_tool_calls
        self._last_state: SharedState | None = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def run(self, question: str, shared_state: SharedState | None = None) -> str:
        """Answer *question* and return a short report.

        A fresh ``SharedState`` is used unless *shared_state* is given, in
        which case the caller keeps ownership and entries from earlier runs
        stay visible.

        Steps
        -----
        1. ResearcherAgent searches; the search tool stores the context.
        2. ExtractorAgent reads the context and answers; its answer is
           validated against the same context.

        Raises ``ResponseValidationError`` if no valid answer was produced.
        """
        state = shared_state if shared_state is not None else SharedState()
        self._last_state = state
        logger.info("Orchestrator: run %s started for %r", state.run_id[:8], question)
        state.set("question", question)

        agent_kwargs: dict[str, Any] = dict(
            client=self._client,
            model=self._model,
            parallel_tool_calls=self._parallel_tool_calls,
        )

        # --- Step 1: Research ---
        logger.info("Orchestrator → Researcher")
        researcher = ResearcherAgent(state, self._search_factory(state), **agent_kwargs)
        finding = researcher.research(question)
        state.set("finding", finding)
        logger.info("Researcher complete: %d source(s)", len(finding["sources"]))

        # --- Step 2: Extraction ---
        logger.info("Orchestrator → Extractor")
        extractor = ExtractorAgent(
            state,
            max_validation_attempts=self._max_validation_attempts,
            **agent_kwargs,
        )
        try:
            answer = extractor.extract(question)
        except ResponseValidationError as exc:
            logger.error("Orchestrator: run %s failed validation: %s", state.run_id[:8], exc)
            raise
        state.set("answer", answer)

        report = self._format_report(question, answer, finding)
        state.set("report", report)
        logger.info("Orchestrator: run %s complete", state.run_id[:8])
        return report

    @property
    def last_state(self) -> SharedState | None:
        """The shared state of the most recent run (useful for inspection / testing)."""
        return self._last_state

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _format_report(question: str, answer: str, finding: dict[str, Any]) -> str:
        lines = [
            f"Question: {question}",
            f"Answer: {answer}",
            "",
            f"Summary: {finding['summary']}",
        ]
        if finding["sources"]:
            lines.append("")
            lines.append("Sources:")
            lines.extend(f"  {i}. {url}" for i, url in enumerate(finding["sources"], start=1))
        return "\n".join(lines)

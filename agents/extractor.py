"""Extractor agent – answers with a span copied from the stored context."""

from __future__ import annotations

import logging
from typing import Any

from agents.base import BaseAgent
from agents.validation import ValidationResult
from state.shared import ABSENT, SharedState
from tools.context import CONTEXT_KEY, QueryContextTool

logger = logging.getLogger(__name__)


class ExtractorAgent(BaseAgent):
    """Agent whose answers must appear verbatim in the run's context.

    ``validate_response`` reads the context stored by earlier tools and
    rejects any answer that is not contained in it.
    """

    system_prompt = (
        "You answer questions using only the background text of this run. "
        "Call 'query_context' to read it. "
        "Reply with the shortest passage copied exactly from that text which "
        "answers the question. Do not paraphrase and do not add anything else."
    )

    def __init__(self, shared_state: SharedState, **kwargs: Any):
        super().__init__(shared_state, tools=[QueryContextTool(shared_state)], **kwargs)

    def extract(self, question: str) -> str:
        """Return a verbatim answer span for *question*."""
        return self.run(f"Question: {question}").strip()

    def validate_response(self, response: str) -> ValidationResult:
        context = self.shared_state.get(CONTEXT_KEY)
        if context is ABSENT:
            return ValidationResult.fail(
                "No context has been stored in this run, so the answer cannot be checked."
            )
        answer = response.strip()
        if not answer:
            return ValidationResult.fail("The answer is empty.")
        if answer not in str(context):
            logger.debug("answer %r not found in context", answer)
            return ValidationResult.fail(
                "The answer must be copied exactly from the stored context."
            )
        return ValidationResult.ok()

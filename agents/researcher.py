"""Researcher agent – gathers context for a question using the search tool."""

from __future__ import annotations

from typing import Any

from agents.base import BaseAgent
from state.shared import SharedState
from tools.context import StoreContextTool
from tools.search import SOURCES_KEY, SearchTool


class ResearcherAgent(BaseAgent):
    """Agent that looks up background material for a single question.

    The search tool writes what it finds into the shared state, so the
    context is available to later agents of the run even though it is
    never passed to them directly.
    """

    system_prompt = (
        "You are a rigorous research assistant. "
        "You will be given a question. "
        "Use the 'search' tool to retrieve relevant information. If you already "
        "know a short passage that answers the question, you may save it with "
        "'store_context' instead. "
        "Summarise what you found in 2–4 sentences and list every source URL "
        "you relied on. Do not invent facts or sources that were not returned "
        "by the search tool. "
        "Format your answer as:\n"
        "SUMMARY: <your summary>\n"
        "SOURCES: <comma-separated list of URLs>"
    )

    def __init__(self, shared_state: SharedState, search_tool: SearchTool, **kwargs: Any):
        tools = [search_tool, StoreContextTool(shared_state)]
        super().__init__(shared_state, tools=tools, **kwargs)

    def research(self, question: str) -> dict[str, Any]:
        """Investigate *question* and return a structured finding dict."""
        raw = self.run(question)

        summary = raw
        sources: list[str] = []

        for line in raw.splitlines():
            if line.startswith("SUMMARY:"):
                summary = line[len("SUMMARY:"):].strip()
            elif line.startswith("SOURCES:"):
                sources = [s.strip() for s in line[len("SOURCES:"):].split(",") if s.strip()]

        for url in self.shared_state.get(SOURCES_KEY) or []:
            if url not in sources:
                sources.append(url)

        return {
            "question": question,
            "summary": summary,
            "sources": sources,
        }

"""Search tools used by ResearcherAgent instances.

Three implementations are provided:

* ``SearchTool``    – base class; subclass and override ``_fetch`` to adapt
                       to any search provider.
* ``ExaSearchTool`` – production search via the Exa neural search API.
* ``StubSearchTool``– deterministic fake results for offline dev / testing.

Besides returning a text block to the model, every search writes what it
found into the run's shared state: the text under ``context``, the raw
results under ``search_results`` and the URLs under ``sources``.
"""

from __future__ import annotations

import logging
import os
from typing import Any

from state.shared import SharedState
from tools.base import BaseTool
from tools.context import CONTEXT_KEY

logger = logging.getLogger(__name__)

RESULTS_KEY = "search_results"
SOURCES_KEY = "sources"


class SearchTool(BaseTool):
    """Generic base class for search tools.

    Subclass and override ``_fetch`` to integrate a provider other than Exa.
    """

    name = "search"
    description = (
        "Search for information relevant to the query. "
        "Returns a list of text excerpts with source URLs."
    )
    parameters = {
        "type": "object",
        "properties": {
            "query": {
                "type": "string",
                "description": "A concise search query (max 10 words).",
            }
        },
        "required": ["query"],
    }

    def __init__(self, shared_state: SharedState, max_results: int = 5):
        super().__init__(shared_state)
        self.max_results = max_results

    def run(self, query: str) -> str:
        """Run *query*, record the results in shared state, return plain text."""
        results = self._fetch(query)[: self.max_results]
        if not results:
            logger.info("search %r: no results", query)
            return "No results found."

        lines: list[str] = []
        for r in results:
            lines.append(f"[{r.get('title', 'No title')}] {r.get('snippet', '')}")
            lines.append(f"URL: {r.get('url', 'N/A')}")
            lines.append("")
        text = "\n".join(lines).strip()

        self.shared_state.set(CONTEXT_KEY, text)
        self.shared_state.set(RESULTS_KEY, results)
        self._record_sources(r.get("url", "") for r in results)
        logger.info("search %r: %d result(s) stored", query, len(results))
        return text

    def _record_sources(self, urls: Any) -> None:
        new_urls = [url for url in urls if url]

        def merge(known: list[str]) -> list[str]:
            merged = list(known)
            for url in new_urls:
                if url not in merged:
                    merged.append(url)
            return merged

        # Parallel searches of one run append to the same list.
        self.shared_state.update(SOURCES_KEY, merge, default=[])

    def _fetch(self, query: str) -> list[dict[str, Any]]:
        """Call the external search API and return normalised result dicts.

        Each dict must contain at least 'title', 'snippet', and 'url'.
        """
        raise NotImplementedError(
            "SearchTool._fetch() must be implemented. "
            "Use ExaSearchTool for the Exa provider or StubSearchTool for offline use."
        )


class ExaSearchTool(SearchTool):
    """Neural search powered by the Exa API (https://exa.ai).

    Environment variable: ``EXA_API_KEY``

    Args:
        shared_state:  The run's shared state.
        api_key:       Exa API key.  Falls back to ``EXA_API_KEY`` env var.
        max_results:   Maximum number of results to return per query (default 5).
        num_sentences: Sentences per highlight excerpt (default 3).
    """

    def __init__(
        self,
        shared_state: SharedState,
        api_key: str | None = None,
        max_results: int = 5,
        num_sentences: int = 3,
    ):
        from exa_py import Exa  # imported lazily so stub mode never needs the package

        super().__init__(shared_state, max_results=max_results)
        self._api_key = api_key or os.environ.get("EXA_API_KEY", "")
        if not self._api_key:
            raise ValueError(
                "Exa API key is required. Set EXA_API_KEY or pass api_key=..."
            )
        self._client = Exa(api_key=self._api_key)
        self.num_sentences = num_sentences

    def _fetch(self, query: str) -> list[dict[str, Any]]:
        """Call Exa's search_and_contents endpoint and normalise results."""
        response = self._client.search_and_contents(
            query,
            num_results=self.max_results,
            highlights={"num_sentences": self.num_sentences},
        )
        results: list[dict[str, Any]] = []
        for r in response.results:
            highlights = getattr(r, "highlights", None) or []
            snippet = " ".join(highlights) if highlights else ""
            results.append(
                {"title": r.title or "", "snippet": snippet, "url": r.url or ""}
            )
        return results


class StubSearchTool(SearchTool):
    """Deterministic stub search tool for offline development and testing.

    Returns plausible-looking but entirely fake results so that the full
    pipeline can be exercised without any API keys.  Pass ``stubs`` to
    control exactly what a search returns.
    """

    _STUBS: list[dict[str, Any]] = [
        {
            "title": "Overview of the topic",
            "snippet": "This article provides a comprehensive introduction to the subject.",
            "url": "https://example.com/overview",
        },
        {
            "title": "Recent advances",
            "snippet": "Researchers have made significant progress in this area over the past five years.",
            "url": "https://example.com/recent-advances",
        },
        {
            "title": "Key challenges",
            "snippet": "Several open problems remain, including scalability and interpretability.",
            "url": "https://example.com/challenges",
        },
    ]

    def __init__(
        self,
        shared_state: SharedState,
        stubs: list[dict[str, Any]] | None = None,
        max_results: int = 5,
    ):
        super().__init__(shared_state, max_results=max_results)
        self._stubs = self._STUBS if stubs is None else stubs
        self.queries: list[str] = []

    def _fetch(self, query: str) -> list[dict[str, Any]]:
        self.queries.append(query)
        return [dict(r) for r in self._stubs]

"""Tests for the tools and how they share data through SharedState."""

from __future__ import annotations

import unittest
from unittest.mock import MagicMock, patch

from state.shared import ABSENT, SharedState
from tools.base import BaseTool
from tools.context import CONTEXT_NOT_FOUND, QueryContextTool, StoreContextTool
from tools.search import ExaSearchTool, SearchTool, StubSearchTool

FRANCE = [
    {
        "title": "France",
        "snippet": "Paris is the capital of France",
        "url": "https://example.com/france",
    }
]


class TestBaseTool(unittest.TestCase):
    def test_run_not_implemented(self):
        with self.assertRaises(NotImplementedError):
            BaseTool(SharedState()).run()

    def test_schema(self):
        schema = StoreContextTool(SharedState()).schema()
        self.assertEqual(schema["type"], "function")
        self.assertEqual(schema["function"]["name"], "store_context")
        self.assertEqual(schema["function"]["parameters"]["required"], ["context"])


class TestContextTools(unittest.TestCase):
    def setUp(self):
        self.state = SharedState()
        self.store = StoreContextTool(self.state)
        self.query = QueryContextTool(self.state)

    def test_query_before_store(self):
        self.assertEqual(self.query.run(), CONTEXT_NOT_FOUND)
        self.assertIs(self.state.get("context"), ABSENT)

    def test_store_then_query(self):
        self.store.run(context="Paris is the capital of France")
        self.assertEqual(self.query.run(), "Paris is the capital of France")

    def test_call_forwards_to_run(self):
        result = self.store(context="abc")
        self.assertIn("3 characters", result)
        self.assertEqual(self.state.get("context"), "abc")

    def test_tools_with_other_state_are_isolated(self):
        self.store.run(context="one")
        other = QueryContextTool(SharedState())
        self.assertEqual(other.run(), CONTEXT_NOT_FOUND)


class TestStubSearchTool(unittest.TestCase):
    def setUp(self):
        self.state = SharedState()

    def test_returns_string_with_urls(self):
        result = StubSearchTool(self.state).run(query="anything")
        self.assertIsInstance(result, str)
        self.assertIn("https://example.com", result)

    def test_records_query(self):
        tool = StubSearchTool(self.state)
        tool.run(query="ocean acidification")
        self.assertEqual(tool.queries, ["ocean acidification"])

    def test_stores_context_and_sources(self):
        text = StubSearchTool(self.state, stubs=FRANCE).run(query="capital of France")
        self.assertEqual(self.state.get("context"), text)
        self.assertIn("Paris is the capital of France", text)
        self.assertEqual(self.state.get("sources"), ["https://example.com/france"])
        self.assertEqual(self.state.get("search_results"), FRANCE)

    def test_sources_accumulate_without_duplicates(self):
        StubSearchTool(self.state, stubs=FRANCE).run(query="q1")
        StubSearchTool(self.state).run(query="q2")
        StubSearchTool(self.state, stubs=FRANCE).run(query="q3")
        sources = self.state.get("sources")
        self.assertEqual(sources[0], "https://example.com/france")
        self.assertEqual(len(sources), len(set(sources)))
        self.assertEqual(len(sources), 4)

    def test_no_results(self):
        result = StubSearchTool(self.state, stubs=[]).run(query="nothing")
        self.assertEqual(result, "No results found.")
        self.assertNotIn("context", self.state)

    def test_max_results(self):
        StubSearchTool(self.state, max_results=1).run(query="q")
        self.assertEqual(len(self.state.get("search_results")), 1)

    def test_query_context_sees_search_output(self):
        StubSearchTool(self.state, stubs=FRANCE).run(query="q")
        self.assertIn("Paris", QueryContextTool(self.state).run())


class TestSearchToolBase(unittest.TestCase):
    def test_fetch_not_implemented(self):
        with self.assertRaises(NotImplementedError):
            SearchTool(SharedState()).run(query="q")


class TestExaSearchTool(unittest.TestCase):
    def test_requires_api_key(self):
        fake_exa = MagicMock()
        with patch.dict("sys.modules", {"exa_py": fake_exa}), patch.dict(
            "os.environ", {"EXA_API_KEY": ""}
        ):
            with self.assertRaises(ValueError):
                ExaSearchTool(SharedState())

    def test_normalises_results(self):
        hit = MagicMock()
        hit.title = "France"
        hit.url = "https://example.com/france"
        hit.highlights = ["Paris is the capital", "of France"]
        fake_exa = MagicMock()
        fake_exa.Exa.return_value.search_and_contents.return_value.results = [hit]

        state = SharedState()
        with patch.dict("sys.modules", {"exa_py": fake_exa}):
            tool = ExaSearchTool(state, api_key="key")
            text = tool.run(query="capital of France")

        fake_exa.Exa.assert_called_once_with(api_key="key")
        self.assertIn("Paris is the capital of France", text)
        self.assertEqual(state.get("sources"), ["https://example.com/france"])


if __name__ == "__main__":
    unittest.main(verbosity=2)

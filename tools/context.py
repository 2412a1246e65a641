"""Tools that pass context to one another through the shared state."""

from __future__ import annotations

from state.shared import ABSENT
from tools.base import BaseTool

CONTEXT_KEY = "context"

CONTEXT_NOT_FOUND = "Context not found. Please call store_context or search first."


class StoreContextTool(BaseTool):
    name = "store_context"
    description = (
        "Save a piece of background text so that later steps can refer to it. "
        "Replaces any previously stored context."
    )
    parameters = {
        "type": "object",
        "properties": {
            "context": {
                "type": "string",
                "description": "The text to remember for the rest of this run.",
            }
        },
        "required": ["context"],
    }

    def run(self, context: str) -> str:
        self.shared_state.set(CONTEXT_KEY, context)
        return f"Context stored ({len(context)} characters)."


class QueryContextTool(BaseTool):
    """Return the context stored earlier in the run.

    A missing context is reported back to the model as a plain message so it
    can call the prerequisite tool and try again.
    """

    name = "query_context"
    description = "Return the background text stored earlier in this run."

    def run(self) -> str:
        context = self.shared_state.get(CONTEXT_KEY)
        if context is ABSENT:
            return CONTEXT_NOT_FOUND
        return str(context)

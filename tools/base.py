"""Base class for tools that agents can call."""

from __future__ import annotations

from typing import Any

from state.shared import SharedState


class BaseTool:
    """A callable unit of work with a declared input schema.

    Subclasses set ``name``, ``description`` and ``parameters`` (a JSON
    schema object) and implement ``run``.  Every tool receives the run's
    ``SharedState`` at construction time; it may read and write entries but
    never replaces or discards the store itself.
    """

    name: str = ""
    description: str = ""
    parameters: dict[str, Any] = {"type": "object", "properties": {}}

    def __init__(self, shared_state: SharedState):
        self.shared_state = shared_state

    def run(self, **kwargs: Any) -> str:
        raise NotImplementedError(f"{type(self).__name__}.run() must be implemented.")

    def schema(self) -> dict[str, Any]:
        """Return the OpenAI function-calling definition for this tool."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            },
        }

    def __call__(self, **kwargs: Any) -> str:
        return self.run(**kwargs)

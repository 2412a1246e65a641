"""Base agent class shared by all agents in the hierarchy."""

from __future__ import annotations

import json
import logging
import os
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Iterable

from openai import OpenAI

from agents.validation import ResponseValidationError, ValidationResult
from state.shared import SharedState
from tools.base import BaseTool

logger = logging.getLogger(__name__)


class BaseAgent:
    """Common interface and helpers for every agent in the hierarchy.

    Subclasses set ``system_prompt`` and pass the tools they need.  Calling
    ``run()`` sends a user message, handles tool calls, checks the final text
    with ``validate_response()`` and returns it.

    Every agent is built with the run's ``SharedState``; the tools it is
    given must have been built with the same instance.
    """

    system_prompt: str = ""

    def __init__(
        self,
        shared_state: SharedState,
        tools: Iterable[BaseTool] = (),
        client: OpenAI | None = None,
        model: str = "gpt-4o-mini",
        max_validation_attempts: int = 2,
        max_tool_rounds: int = 1,
        parallel_tool_calls: bool = False,
        max_tool_workers: int = 8,
    ):
        if max_validation_attempts < 1:
            raise ValueError("max_validation_attempts must be at least 1")
        self.shared_state = shared_state
        self.tools = list(tools)
        self.client = client or OpenAI(api_key=os.environ.get("OPENAI_API_KEY", ""))
        self.model = model
        self.max_validation_attempts = max_validation_attempts
        self.max_tool_rounds = max_tool_rounds
        self.parallel_tool_calls = parallel_tool_calls
        self.max_tool_workers = max_tool_workers
        self._tool_registry = {tool.name: tool for tool in self.tools}

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _chat(self, messages: list[dict[str, Any]]) -> Any:
        kwargs: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
        }
        if self.tools:
            kwargs["tools"] = [tool.schema() for tool in self.tools]
            kwargs["tool_choice"] = "auto"
        return self.client.chat.completions.create(**kwargs)

    def _invoke_tool(self, tool_call: Any) -> str:
        fn_name = tool_call.function.name
        tool = self._tool_registry.get(fn_name)
        if tool is None:
            return f"Error: unknown tool '{fn_name}'"
        try:
            fn_args = json.loads(tool_call.function.arguments or "{}")
            result = tool(**fn_args)
        except Exception as exc:  # noqa: BLE001
            logger.warning("%s: tool %s failed: %s", type(self).__name__, fn_name, exc)
            return f"Error: {exc}"
        return json.dumps(result) if not isinstance(result, str) else result

    def _handle_tool_calls(
        self,
        messages: list[dict[str, Any]],
        response: Any,
    ) -> list[dict[str, Any]]:
        """Append tool-call results to the message list and return it."""
        choice = response.choices[0]
        messages.append(choice.message.model_dump(exclude_unset=True))

        tool_calls = list(choice.message.tool_calls or [])
        if self.parallel_tool_calls and len(tool_calls) > 1:
            with ThreadPoolExecutor(
                max_workers=min(len(tool_calls), self.max_tool_workers)
            ) as executor:
                results = list(executor.map(self._invoke_tool, tool_calls))
        else:
            results = [self._invoke_tool(tool_call) for tool_call in tool_calls]

        for tool_call, result in zip(tool_calls, results):
            messages.append(
                {
                    "role": "tool",
                    "tool_call_id": tool_call.id,
                    "content": result,
                }
            )
        return messages

    def _complete(self, messages: list[dict[str, Any]]) -> str:
        """Get a text reply, handling up to ``max_tool_rounds`` rounds of tool calls."""
        response = self._chat(messages)
        choice = response.choices[0]

        rounds = 0
        while (
            choice.finish_reason == "tool_calls"
            and self._tool_registry
            and rounds < self.max_tool_rounds
        ):
            messages = self._handle_tool_calls(messages, response)
            response = self._chat(messages)
            choice = response.choices[0]
            rounds += 1

        return choice.message.content or ""

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    def validate_response(self, response: str) -> ValidationResult:
        """Check a final response before it is returned.  Accepts everything."""
        return ValidationResult.ok()

    def run(self, user_message: str) -> str:
        """Send *user_message* and return a response that passed validation.

        A rejected response is sent back to the model together with the
        rejection reason.  Raises ``ResponseValidationError`` once
        ``max_validation_attempts`` responses have been rejected.
        """
        messages: list[dict[str, Any]] = [
            {"role": "system", "content": self.system_prompt},
            {"role": "user", "content": user_message},
        ]

        for attempt in range(1, self.max_validation_attempts + 1):
            text = self._complete(messages)
            result = self.validate_response(text)
            if result:
                return text

            logger.warning(
                "%s: response rejected (attempt %d/%d): %s",
                type(self).__name__,
                attempt,
                self.max_validation_attempts,
                result.reason,
            )
            messages.append({"role": "assistant", "content": text})
            messages.append(
                {
                    "role": "user",
                    "content": f"Your previous answer was rejected: {result.reason} "
                    "Please try again.",
                }
            )

        raise ResponseValidationError(result, text, self.max_validation_attempts)

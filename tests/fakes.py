"""Fake OpenAI ChatCompletion objects shared by the test suites."""

from __future__ import annotations

import json
from unittest.mock import MagicMock


def make_text_response(content: str) -> MagicMock:
    """Return a minimal fake ChatCompletion whose first choice is a text reply."""
    msg = MagicMock()
    msg.content = content
    msg.tool_calls = None
    msg.model_dump.return_value = {"role": "assistant", "content": content}

    choice = MagicMock()
    choice.finish_reason = "stop"
    choice.message = msg

    resp = MagicMock()
    resp.choices = [choice]
    return resp


def make_tool_calls_response(calls: list[tuple[str, dict]]) -> MagicMock:
    """Return a fake ChatCompletion that requests each ``(name, args)`` tool call."""
    tool_calls = []
    dumped = []
    for idx, (tool_name, tool_args) in enumerate(calls, start=1):
        call_id = f"call_{idx}"
        tool_call = MagicMock()
        tool_call.id = call_id
        tool_call.function.name = tool_name
        tool_call.function.arguments = json.dumps(tool_args)
        tool_calls.append(tool_call)
        dumped.append(
            {"id": call_id, "function": {"name": tool_name, "arguments": json.dumps(tool_args)}}
        )

    msg = MagicMock()
    msg.content = None
    msg.tool_calls = tool_calls
    msg.model_dump.return_value = {"role": "assistant", "tool_calls": dumped}

    choice = MagicMock()
    choice.finish_reason = "tool_calls"
    choice.message = msg

    resp = MagicMock()
    resp.choices = [choice]
    return resp


def make_tool_call_response(tool_name: str, tool_args: dict) -> MagicMock:
    return make_tool_calls_response([(tool_name, tool_args)])


def fake_client(responses: list[MagicMock]) -> MagicMock:
    client = MagicMock()
    client.chat.completions.create.side_effect = responses
    return client


def sent_messages(client: MagicMock, call_index: int = -1) -> list[dict]:
    """Messages passed to the given ``chat.completions.create`` call."""
    call = client.chat.completions.create.call_args_list[call_index]
    return call.kwargs["messages"]

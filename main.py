"""Entry point for the shared-state question answering pipeline.

Usage
-----
    # With real API keys (Exa for search, OpenAI for LLM):
    export OPENAI_API_KEY=sk-...
    export EXA_API_KEY=...
    python main.py "What is the capital of France?"

    # Stub search (no Exa key required, OpenAI still used):
    python main.py --stub "What is the capital of France?"
"""

from __future__ import annotations

import argparse
import logging
import os
import sys

from dotenv import load_dotenv

from agents import OrchestratorAgent, ResponseValidationError
from tools import ExaSearchTool, StubSearchTool


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Question answering with run-scoped shared state",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "question",
        help="The question to answer.",
    )
    parser.add_argument(
        "--stub",
        action="store_true",
        default=False,
        help=(
            "Use the StubSearchTool instead of a real search API. "
            "Useful for offline testing."
        ),
    )
    parser.add_argument(
        "--model",
        default="gpt-4o-mini",
        help="OpenAI model name to use for all agents (default: gpt-4o-mini).",
    )
    parser.add_argument(
        "--max-validation-attempts",
        type=int,
        default=2,
        dest="max_validation_attempts",
        help="Answers the extractor may produce before giving up (default: 2).",
    )
    parser.add_argument(
        "--parallel-tools",
        action="store_true",
        default=False,
        dest="parallel_tools",
        help="Run the tool calls of one model turn concurrently.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        default=False,
        help="Enable debug-level logging.",
    )
    return parser


def missing_keys(stub: bool) -> list[str]:
    """Return the API key variables this configuration needs but lacks."""
    required = ["OPENAI_API_KEY"] if stub else ["OPENAI_API_KEY", "EXA_API_KEY"]
    return [name for name in required if not os.environ.get(name)]


def build_orchestrator(args: argparse.Namespace) -> OrchestratorAgent:
    return OrchestratorAgent(
        search_factory=StubSearchTool if args.stub else ExaSearchTool,
        model=args.model,
        max_validation_attempts=args.max_validation_attempts,
        parallel_tool_calls=args.parallel_tools,
    )


def main(argv: list[str] | None = None) -> None:
    load_dotenv()
    args = build_arg_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    missing = missing_keys(args.stub)
    if missing:
        hint = "" if args.stub else " Use --stub for offline search."
        sys.exit(f"Error: {', '.join(missing)} not set.{hint}")

    orchestrator = build_orchestrator(args)
    try:
        report = orchestrator.run(args.question)
    except ResponseValidationError as exc:
        sys.exit(f"Error: {exc}")

    print(report)


if __name__ == "__main__":
    main()

from __future__ import annotations

import argparse
import logging
from dataclasses import replace
from typing import List, Optional, Sequence

from .config import AgentSettings
from .pipeline import Orchestrator, StopReason
from .renderer import ConsoleRenderer
from .schemas import STATUS_OK, HistoryEntry, ToolEntry, UserEntry


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Chat with a directive-driven agent.")
    parser.add_argument("--model", help="Ollama model id (defaults to AGENTLOOP_MODEL)")
    parser.add_argument("--host", help="Ollama server URL (defaults to OLLAMA_HOST)")
    parser.add_argument("--system-prompt", help="System instruction placed at the top of every prompt")
    parser.add_argument("--max-plan-steps", type=int, help="Cap on plan steps per turn")
    parser.add_argument("--max-batch-passes", type=int, help="Cap on batch passes per turn")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def settings_from_args(args: argparse.Namespace, base: Optional[AgentSettings] = None) -> AgentSettings:
    settings = base or AgentSettings.from_env()
    overrides = {
        "model": args.model,
        "host": args.host,
        "system_prompt": args.system_prompt,
        "max_plan_steps": args.max_plan_steps,
        "max_batch_passes": args.max_batch_passes,
    }
    return replace(settings, **{key: value for key, value in overrides.items() if value is not None})


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = build_parser().parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    settings = settings_from_args(args)
    orchestrator = Orchestrator.from_settings(
        settings,
        renderer=ConsoleRenderer(),
        verbose=args.verbose,
    )

    history: List[HistoryEntry] = []
    print(f"Chatting with {settings.model}. Type 'quit' to leave.")
    while True:
        try:
            line = input("> ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nExiting.")
            break
        if not line:
            continue
        if line.lower() in {"quit", "exit"}:
            print("Goodbye.")
            break

        start = len(history) + 1
        turn = orchestrator.chat([*history, UserEntry(content=line)])
        history = turn.history

        print(f"\n{turn.final_text}\n")
        if args.verbose:
            tools = [entry for entry in turn.history[start:] if isinstance(entry, ToolEntry)]
            for entry in tools:
                detail = entry.output if entry.status == STATUS_OK else entry.error
                print(f"[Tool {entry.id}] {entry.status}: {detail}")
            if turn.stop_reason is not StopReason.COMPLETE:
                print(f"[Stopped] {turn.stop_reason.value}")
            if turn.pending:
                print("[Pending] " + ", ".join(turn.pending))


if __name__ == "__main__":
    main()

from __future__ import annotations

import json
from typing import Any, Iterable, List, Optional

from .prompt_texts import (
    ASSISTANT_CUE,
    CAPABILITIES_HEADER,
    DIRECTIVE_FORMATS,
    EMPTY_HISTORY,
    HISTORY_HEADER,
    NO_CAPABILITIES,
)
from .registry import Capability
from .schemas import STATUS_OK, AssistantEntry, HistoryEntry, ToolEntry, UserEntry


def build_preamble(capabilities: Iterable[Capability], system_prompt: Optional[str] = None) -> str:
    sections: List[str] = []
    if system_prompt:
        sections.append(f"System: {system_prompt}")
    sections.append(_format_capabilities(capabilities))
    sections.append(DIRECTIVE_FORMATS)
    return "\n\n".join(sections)


def build_prompt(
    history: Iterable[HistoryEntry],
    capabilities: Iterable[Capability],
    system_prompt: Optional[str] = None,
) -> str:
    """Full prompt for one generation call: preamble, whole history, assistant cue."""
    lines = [format_entry(entry) for entry in history]
    return (
        f"{build_preamble(capabilities, system_prompt)}\n\n"
        f"{HISTORY_HEADER}\n"
        f"{chr(10).join(lines) or EMPTY_HISTORY}\n\n"
        f"{ASSISTANT_CUE}"
    )


def format_entry(entry: HistoryEntry) -> str:
    if isinstance(entry, UserEntry):
        return f"User: {entry.content}"
    if isinstance(entry, AssistantEntry):
        return f"Assistant: {entry.content}"
    if isinstance(entry, ToolEntry):
        if entry.status == STATUS_OK:
            observed = _dump(entry.output)
        else:
            observed = f"Error: {entry.error}"
        return f"Tool Observation (Task ID: {entry.id}, Status: {entry.status}): {observed}"
    raise TypeError(f"Unsupported history entry: {entry!r}")


def _format_capabilities(capabilities: Iterable[Capability]) -> str:
    lines = [CAPABILITIES_HEADER]
    for cap in capabilities:
        description = cap.description or (
            f"The '{cap.kind}' capability. Provide necessary parameters in the 'params' field of the Task directive"
        )
        lines.append(f"- {cap.kind}: {description}. Use the following signature: {cap.signature}")
    if len(lines) == 1:
        lines.append(NO_CAPABILITIES)
    return "\n".join(lines)


def _dump(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)


__all__ = ["build_preamble", "build_prompt", "format_entry"]

from __future__ import annotations

from typing import Any, Iterable, Iterator, List, Mapping, Sequence, Union

from .schemas import (
    ActionResult,
    AssistantEntry,
    HistoryEntry,
    ToolEntry,
    UserEntry,
    history_entry_from_json,
)


HistoryInput = Union[str, Iterable[Union[HistoryEntry, Mapping[str, Any]]]]


class History:
    """Append-only conversation log; the only input used to rebuild prompts."""

    def __init__(self, entries: Iterable[HistoryEntry] = ()) -> None:
        self._entries: List[HistoryEntry] = list(entries)

    @classmethod
    def from_input(cls, source: HistoryInput) -> "History":
        """Seed from a user message, or from a prior history (entries or their JSON)."""
        if isinstance(source, str):
            return cls([UserEntry(content=source)])
        entries: List[HistoryEntry] = []
        for item in source:
            if isinstance(item, (UserEntry, AssistantEntry, ToolEntry)):
                entries.append(item)
            elif isinstance(item, Mapping):
                entries.append(history_entry_from_json(item))
            else:
                raise TypeError(f"Unsupported history entry: {item!r}")
        return cls(entries)

    def add_user(self, content: str) -> UserEntry:
        return self._add(UserEntry(content=content))

    def add_assistant(self, content: str) -> AssistantEntry:
        return self._add(AssistantEntry(content=content))

    def add_tool(self, result: ActionResult) -> ToolEntry:
        return self._add(ToolEntry.from_result(result))

    @property
    def entries(self) -> Sequence[HistoryEntry]:
        return tuple(self._entries)

    def to_list(self) -> List[HistoryEntry]:
        return list(self._entries)

    def to_json(self) -> List[dict]:
        return [entry.to_json() for entry in self._entries]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[HistoryEntry]:
        return iter(tuple(self._entries))

    def _add(self, entry):
        self._entries.append(entry)
        return entry


__all__ = ["History", "HistoryInput"]

from __future__ import annotations

import json
import logging
from typing import Any, Mapping, Optional, Protocol

from .schemas import DisplayRequest


class Renderer(Protocol):
    """What the orchestrator needs from a UI layer. Keyed by DisplayRequest id."""

    def mount(self, display: DisplayRequest) -> None: ...

    def update(self, display: DisplayRequest) -> None: ...

    def unmount(self, display_id: str) -> None: ...

    def emit(self, event: Mapping[str, Any]) -> None: ...


class LoggingRenderer:
    """Renderer that only logs; handy for headless hosts."""

    def __init__(self, logger: Optional[logging.Logger] = None, level: int = logging.INFO) -> None:
        self.logger = logger or logging.getLogger(__name__)
        self.level = level

    def mount(self, display: DisplayRequest) -> None:
        self.logger.log(self.level, "[UI Mount] %s (%s): %s", display.id, display.type, _dump(display.props))

    def update(self, display: DisplayRequest) -> None:
        self.logger.log(self.level, "[UI Update] %s (%s): %s", display.id, display.type, _dump(display.props))

    def unmount(self, display_id: str) -> None:
        self.logger.log(self.level, "[UI Unmount] %s", display_id)

    def emit(self, event: Mapping[str, Any]) -> None:
        self.logger.log(
            self.level,
            "[UI Event] %s %s: %s",
            event.get("id"),
            event.get("name"),
            _dump(event.get("payload")),
        )


class ConsoleRenderer:
    """Prints display activity to stdout, for interactive sessions."""

    def mount(self, display: DisplayRequest) -> None:
        print(f"[UI Mount] {display.id} ({display.type}): {_dump(display.props)}")

    def update(self, display: DisplayRequest) -> None:
        print(f"[UI Update] {display.id} ({display.type}): {_dump(display.props)}")

    def unmount(self, display_id: str) -> None:
        print(f"[UI Unmount] {display_id}")

    def emit(self, event: Mapping[str, Any]) -> None:
        print(f"[UI Event] {event.get('id')} {event.get('name')}: {_dump(event.get('payload'))}")


def _dump(value: Any) -> str:
    return json.dumps(value, default=str)


__all__ = ["ConsoleRenderer", "LoggingRenderer", "Renderer"]

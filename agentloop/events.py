from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional


class EventType(str, Enum):
    LLM_RESPONSE = "llm_response"
    PARSED_DIRECTIVES = "parsed_directives"
    PLAN = "plan"
    TASK_START = "task_start"
    TASK_RESULT = "task_result"
    UI_DIRECTIVE = "ui_directive"
    AGENT_END = "agent_end"


@dataclass(frozen=True)
class AgentEvent:
    type: EventType
    data: Any


EventCallback = Callable[[AgentEvent], None]


def emit(callback: Optional[EventCallback], event_type: EventType, data: Any) -> None:
    if callback is not None:
        callback(AgentEvent(type=event_type, data=data))


__all__ = ["AgentEvent", "EventCallback", "EventType", "emit"]

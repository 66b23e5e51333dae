from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union


STATUS_OK = "ok"
STATUS_ERROR = "error"


@dataclass(frozen=True)
class ActionRequest:
    id: str
    kind: str
    params: Dict[str, Any] = field(default_factory=dict)
    depends_on: Optional[List[str]] = None

    def to_json(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "id": self.id,
            "kind": self.kind,
            "params": self.params,
        }
        if self.depends_on is not None:
            payload["dependsOn"] = list(self.depends_on)
        return payload

    @classmethod
    def from_json(cls, payload: Mapping[str, Any]) -> "ActionRequest":
        depends_on = payload.get("dependsOn")
        return cls(
            id=payload["id"],
            kind=payload["kind"],
            params=dict(payload.get("params") or {}),
            depends_on=list(depends_on) if depends_on is not None else None,
        )


@dataclass(frozen=True)
class ActionResult:
    id: str
    status: str
    output: Any = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == STATUS_OK

    def to_json(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"id": self.id, "status": self.status}
        if self.status == STATUS_OK:
            payload["output"] = self.output
        if self.error is not None:
            payload["error"] = self.error
        return payload

    @classmethod
    def from_json(cls, payload: Mapping[str, Any]) -> "ActionResult":
        return cls(
            id=payload["id"],
            status=payload["status"],
            output=payload.get("output"),
            error=payload.get("error"),
        )


@dataclass(frozen=True)
class DisplayRequest:
    """Renderable component description handed to the renderer untouched."""

    id: str
    type: str
    props: Any = field(default_factory=dict)
    events: Optional[List[str]] = None

    def to_json(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"id": self.id, "type": self.type, "props": self.props}
        if self.events is not None:
            payload["events"] = list(self.events)
        return payload

    @classmethod
    def from_json(cls, payload: Mapping[str, Any]) -> "DisplayRequest":
        events = payload.get("events")
        return cls(
            id=payload["id"],
            type=payload["type"],
            props=payload.get("props", {}),
            events=list(events) if events is not None else None,
        )


@dataclass(frozen=True)
class Plan:
    """Requests stepped one at a time, with a generation call after each step."""

    requests: Sequence[ActionRequest]

    def to_json(self) -> Dict[str, Any]:
        return {"tasks": [request.to_json() for request in self.requests]}


@dataclass
class ParsedDirectives:
    raw_text: str
    requests: List[ActionRequest] = field(default_factory=list)
    displays: List[DisplayRequest] = field(default_factory=list)
    plan: Optional[Plan] = None

    def to_json(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "rawText": self.raw_text,
            "tasks": [request.to_json() for request in self.requests],
            "ui": [display.to_json() for display in self.displays],
        }
        if self.plan is not None:
            payload["thinking"] = self.plan.to_json()
        return payload


# History -----------------------------------------------------------------------

@dataclass(frozen=True)
class UserEntry:
    content: str
    timestamp: float = field(default_factory=time.time, compare=False)
    role: str = field(default="user", init=False)

    def to_json(self) -> Dict[str, Any]:
        return {"role": self.role, "content": self.content, "timestamp": self.timestamp}


@dataclass(frozen=True)
class AssistantEntry:
    content: str
    timestamp: float = field(default_factory=time.time, compare=False)
    role: str = field(default="assistant", init=False)

    def to_json(self) -> Dict[str, Any]:
        return {"role": self.role, "content": self.content, "timestamp": self.timestamp}


@dataclass(frozen=True)
class ToolEntry:
    id: str
    status: str
    output: Any = None
    error: Optional[str] = None
    timestamp: float = field(default_factory=time.time, compare=False)
    role: str = field(default="tool", init=False)

    @classmethod
    def from_result(cls, result: ActionResult) -> "ToolEntry":
        return cls(id=result.id, status=result.status, output=result.output, error=result.error)

    def to_json(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "role": self.role,
            "id": self.id,
            "status": self.status,
            "timestamp": self.timestamp,
        }
        if self.status == STATUS_OK:
            payload["output"] = self.output
        else:
            payload["error"] = self.error
        return payload


HistoryEntry = Union[UserEntry, AssistantEntry, ToolEntry]


def history_entry_from_json(payload: Mapping[str, Any]) -> HistoryEntry:
    role = payload.get("role")
    stamp = payload.get("timestamp")
    extra: Dict[str, Any] = {"timestamp": stamp} if isinstance(stamp, (int, float)) else {}
    if role == "user":
        return UserEntry(content=str(payload.get("content", "")), **extra)
    if role == "assistant":
        return AssistantEntry(content=str(payload.get("content", "")), **extra)
    if role == "tool":
        return ToolEntry(
            id=str(payload["id"]),
            status=str(payload["status"]),
            output=payload.get("output"),
            error=payload.get("error"),
            **extra,
        )
    raise ValueError(f"Unknown history role: {role!r}")


__all__ = [
    "STATUS_OK",
    "STATUS_ERROR",
    "ActionRequest",
    "ActionResult",
    "DisplayRequest",
    "Plan",
    "ParsedDirectives",
    "UserEntry",
    "AssistantEntry",
    "ToolEntry",
    "HistoryEntry",
    "history_entry_from_json",
]

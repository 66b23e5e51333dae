"""
Directive extraction.

Generated text may embed fenced blocks such as

    ```Task
    {"id": "t1", "kind": "callApi", "params": {"url": "https://example.org"}}
    ```

tagged ``Task``, ``Ui`` or ``Thinking``. ``extract_directives`` pulls them out
into structured requests while leaving the original text untouched. Broken
blocks are logged and skipped; they never abort extraction of the others.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .schemas import ActionRequest, DisplayRequest, ParsedDirectives, Plan


logger = logging.getLogger(__name__)


TASK = "Task"
UI = "Ui"
THINKING = "Thinking"

DIRECTIVE_PATTERN = re.compile(
    r"```[ \t]*(Task|Ui|Thinking)[ \t]*\r?\n((?:(?!```).)*?)\s*```",
    re.DOTALL,
)


class ExtractionError(ValueError):
    """Raised when a directive block cannot be turned into a structured request."""


# Wire models -------------------------------------------------------------------

class TaskDirective(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str = Field(min_length=1)
    kind: str = Field(min_length=1)
    params: Optional[Dict[str, Any]] = None
    depends_on: Optional[List[str]] = Field(default=None, alias="dependsOn")

    def to_request(self) -> ActionRequest:
        return ActionRequest(
            id=self.id,
            kind=self.kind,
            params=self.params or {},
            depends_on=self.depends_on,
        )


class UiDirective(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str = Field(min_length=1)
    type: str = Field(min_length=1)
    props: Any = Field(default_factory=dict)
    events: Optional[List[str]] = None

    def to_display(self) -> DisplayRequest:
        return DisplayRequest(id=self.id, type=self.type, props=self.props, events=self.events)


class ThinkingDirective(BaseModel):
    model_config = ConfigDict(extra="ignore")

    tasks: List[Any]


# Extraction ----------------------------------------------------------------------

def extract_directives(text: str) -> ParsedDirectives:
    """Return every well-formed directive in ``text``, in order of appearance."""
    parsed = ParsedDirectives(raw_text=text)
    for match in DIRECTIVE_PATTERN.finditer(text or ""):
        tag, body = match.group(1), match.group(2).strip()
        try:
            payload = _load_payload(tag, body)
            if tag == TASK:
                parsed.requests.append(_coerce_task(payload))
            elif tag == UI:
                parsed.displays.append(_coerce_ui(payload))
            else:
                # last plan wins
                parsed.plan = _coerce_plan(payload)
        except ExtractionError as exc:
            logger.warning("Dropping %s directive: %s", tag, exc)
    return parsed


def format_directive(tag: str, payload: Mapping[str, Any]) -> str:
    """Render ``payload`` as a fenced directive block the extractor accepts."""
    if tag not in {TASK, UI, THINKING}:
        raise ValueError(f"Unknown directive tag: {tag!r}")
    return f"```{tag}\n{json.dumps(payload, separators=(',', ':'))}\n```"


def _load_payload(tag: str, body: str) -> Dict[str, Any]:
    try:
        payload = json.loads(body)
    except json.JSONDecodeError as exc:
        raise ExtractionError(f"invalid JSON ({exc.msg}): {body[:200]}") from exc
    if not isinstance(payload, dict):
        raise ExtractionError(f"{tag} payload must be a JSON object")
    return payload


def _coerce_task(payload: Any) -> ActionRequest:
    try:
        return TaskDirective.model_validate(payload).to_request()
    except ValidationError as exc:
        raise ExtractionError(_summarize(exc)) from exc


def _coerce_ui(payload: Any) -> DisplayRequest:
    try:
        return UiDirective.model_validate(payload).to_display()
    except ValidationError as exc:
        raise ExtractionError(_summarize(exc)) from exc


def _coerce_plan(payload: Any) -> Plan:
    try:
        directive = ThinkingDirective.model_validate(payload)
    except ValidationError as exc:
        raise ExtractionError(_summarize(exc)) from exc
    steps: List[ActionRequest] = []
    for index, item in enumerate(directive.tasks):
        try:
            steps.append(_coerce_task(item))
        except ExtractionError as exc:
            logger.warning("Dropping plan step %s: %s", index, exc)
    return Plan(requests=steps)


def _summarize(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ())) or "<root>"
        parts.append(f"{location}: {error.get('msg', 'invalid')}")
    return "; ".join(parts)


__all__ = [
    "TASK",
    "UI",
    "THINKING",
    "ExtractionError",
    "TaskDirective",
    "UiDirective",
    "ThinkingDirective",
    "extract_directives",
    "format_directive",
]

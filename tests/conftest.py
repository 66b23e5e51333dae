# tests/conftest.py
# Shared pytest fixtures for all tests under tests/:
#   - scripted_generator: generator returning canned replies and recording prompts
#   - recording_renderer: renderer that remembers what was mounted
#   - make_capability: build a Capability around a plain function

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping

import pytest


# ---------- Ensure project root is importable ----------
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from agentloop.registry import Capability  # noqa: E402
from agentloop.schemas import DisplayRequest  # noqa: E402


class ScriptedGenerator:
    """Returns the scripted replies in order; fails loudly when asked for more."""

    def __init__(self, replies: List[str]) -> None:
        self.replies = list(replies)
        self.prompts: List[str] = []

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if len(self.prompts) > len(self.replies):
            raise AssertionError(f"Generator called {len(self.prompts)} times; only {len(self.replies)} scripted")
        return self.replies[len(self.prompts) - 1]

    @property
    def calls(self) -> int:
        return len(self.prompts)


class RecordingRenderer:
    def __init__(self) -> None:
        self.mounted: List[DisplayRequest] = []
        self.updated: List[DisplayRequest] = []
        self.unmounted: List[str] = []
        self.events: List[Mapping[str, Any]] = []

    def mount(self, display: DisplayRequest) -> None:
        self.mounted.append(display)

    def update(self, display: DisplayRequest) -> None:
        self.updated.append(display)

    def unmount(self, display_id: str) -> None:
        self.unmounted.append(display_id)

    def emit(self, event: Mapping[str, Any]) -> None:
        self.events.append(event)


@pytest.fixture
def scripted_generator() -> Callable[..., ScriptedGenerator]:
    def _make(*replies: str) -> ScriptedGenerator:
        return ScriptedGenerator(list(replies))

    return _make


@pytest.fixture
def recording_renderer() -> RecordingRenderer:
    return RecordingRenderer()


@pytest.fixture
def make_capability() -> Callable[..., Capability]:
    """
    Build a capability whose handler records every params dict it receives
    on ``capability.handler.calls``.
    """

    def _make(kind: str, fn: Callable[[Dict[str, Any]], Any] = lambda params: {"ok": True}) -> Capability:
        calls: List[Dict[str, Any]] = []

        def handler(params: Dict[str, Any], context: Any) -> Any:
            calls.append(params)
            return fn(params)

        handler.calls = calls  # type: ignore[attr-defined]
        return Capability(kind=kind, description=f"{kind} for tests", signature="any", handler=handler)

    return _make

from __future__ import annotations

import pytest

from agentloop import cli
from agentloop.config import AgentSettings
from agentloop.pipeline import Orchestrator, StopReason, TurnResult
from agentloop.renderer import ConsoleRenderer
from agentloop.schemas import AssistantEntry, ToolEntry


def test_settings_from_args_overrides_only_given_flags():
    args = cli.build_parser().parse_args(["--model", "llama3", "--max-plan-steps", "3"])
    base = AgentSettings(host="http://h:1", max_batch_passes=7)

    settings = cli.settings_from_args(args, base=base)

    assert settings.model == "llama3"
    assert settings.max_plan_steps == 3
    assert settings.host == "http://h:1"
    assert settings.max_batch_passes == 7


class FakeOrchestrator:
    def __init__(self):
        self.inputs = []

    def chat(self, user_input):
        self.inputs.append(list(user_input))
        reply = AssistantEntry(content=f"reply {len(self.inputs)}")
        tool = ToolEntry(id=f"t{len(self.inputs)}", status="ok", output={"n": len(self.inputs)})
        return TurnResult(
            history=[*user_input, tool, reply],
            final_text=reply.content,
            displays=[],
            pending=["late"] if len(self.inputs) == 2 else [],
            results={},
            stop_reason=StopReason.STALLED if len(self.inputs) == 2 else StopReason.COMPLETE,
        )


@pytest.fixture
def fake_repl(monkeypatch):
    fake = FakeOrchestrator()

    def from_settings(cls, settings, **kwargs):
        fake.kwargs = kwargs
        return fake

    monkeypatch.setattr(Orchestrator, "from_settings", classmethod(from_settings))
    monkeypatch.setattr(cli.logging, "basicConfig", lambda **kwargs: None)

    def feed(*lines):
        pending = list(lines)

        def fake_input(prompt=""):
            if not pending:
                raise EOFError
            return pending.pop(0)

        monkeypatch.setattr("builtins.input", fake_input)

    return fake, feed


def test_repl_carries_history_between_turns(fake_repl, capsys):
    fake, feed = fake_repl
    feed("first", "", "second", "quit")

    cli.main(["--model", "m"])

    assert len(fake.inputs) == 2
    assert [entry.role for entry in fake.inputs[1]] == ["user", "tool", "assistant", "user"]
    out = capsys.readouterr().out
    assert "Chatting with m." in out
    assert "reply 1" in out and "reply 2" in out
    assert "Goodbye." in out
    assert "[Tool" not in out
    assert isinstance(fake.kwargs["renderer"], ConsoleRenderer)


def test_verbose_repl_shows_this_turns_tools_and_stop(fake_repl, capsys):
    fake, feed = fake_repl
    feed("first", "second")

    cli.main(["--verbose"])

    out = capsys.readouterr().out
    assert out.count("[Tool t1] ok") == 1
    assert "[Tool t2] ok: {'n': 2}" in out
    assert "[Stopped] stalled" in out
    assert "[Pending] late" in out
    assert "Exiting." in out

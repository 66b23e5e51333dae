from __future__ import annotations

from agentloop.prompt_builders import build_preamble, build_prompt, format_entry
from agentloop.registry import Capability
from agentloop.schemas import AssistantEntry, ToolEntry, UserEntry


def _cap(kind, description="Fetch things", signature="url: string"):
    return Capability(kind=kind, description=description, signature=signature, handler=lambda p, c: None)


def test_preamble_lists_capabilities_and_formats():
    preamble = build_preamble([_cap("callApi")], system_prompt="You are helpful.")

    assert preamble.startswith("System: You are helpful.")
    assert "Capabilities (for use with the 'Task' directive):" in preamble
    assert "- callApi: Fetch things. Use the following signature: url: string" in preamble
    for tag in ("```Task", "```Ui", "```Thinking"):
        assert tag in preamble


def test_preamble_without_capabilities_or_system_prompt():
    preamble = build_preamble([])

    assert not preamble.startswith("System:")
    assert "- No capabilities are currently available." in preamble


def test_missing_description_gets_generic_text():
    preamble = build_preamble([_cap("mystery", description="")])
    assert "- mystery: The 'mystery' capability." in preamble


def test_entries_render_by_role():
    assert format_entry(UserEntry(content="hi")) == "User: hi"
    assert format_entry(AssistantEntry(content="hello")) == "Assistant: hello"
    assert (
        format_entry(ToolEntry(id="t1", status="ok", output={"city": "Paris", "ok": True}))
        == 'Tool Observation (Task ID: t1, Status: ok): {"city":"Paris","ok":true}'
    )
    assert (
        format_entry(ToolEntry(id="t2", status="error", error="timeout"))
        == "Tool Observation (Task ID: t2, Status: error): Error: timeout"
    )


def test_prompt_ends_with_assistant_cue_and_keeps_order():
    history = [UserEntry(content="one"), AssistantEntry(content="two"), UserEntry(content="three")]
    prompt = build_prompt(history, [_cap("k")])

    assert prompt.endswith("\n\nAssistant:")
    assert "Interaction History:\nUser: one\nAssistant: two\nUser: three\n\nAssistant:" in prompt


def test_prompt_is_deterministic():
    history = [UserEntry(content="x"), ToolEntry(id="a", status="ok", output=[1, "é"])]
    assert build_prompt(history, [_cap("k")]) == build_prompt(list(history), [_cap("k")])
    assert '[1,"é"]' in build_prompt(history, [])


def test_empty_history_placeholder():
    assert "Interaction History:\n(no prior interaction)" in build_prompt([], [])

from __future__ import annotations

import pytest
from ollama import ResponseError

from agentloop.adapter import GeneratorError, OllamaGenerator


class FakeClient:
    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    def chat(self, model, messages, options=None):
        self.calls.append({"model": model, "messages": list(messages), "options": options})
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        if isinstance(outcome, str):
            return {"message": {"role": "assistant", "content": outcome}}
        return outcome


def _generator(client, **kwargs):
    generator = OllamaGenerator("test-model", **kwargs)
    generator.client = client
    return generator


def test_returns_stripped_content():
    client = FakeClient("  Hello.\n")
    generator = _generator(client, temperature=0.2)

    assert generator.generate("prompt") == "Hello."
    assert client.calls[0]["model"] == "test-model"
    assert client.calls[0]["messages"] == [{"role": "user", "content": "prompt"}]
    assert client.calls[0]["options"] == {"temperature": 0.2}


def test_empty_reply_is_retried_with_nudge():
    client = FakeClient("", "second try")

    assert _generator(client).generate("p") == "second try"
    assert client.calls[1]["messages"][-1]["role"] == "system"
    assert client.calls[0]["options"] is None


def test_raw_text_recovered_from_response_error():
    client = FakeClient(ResponseError("error parsing tool call: raw='plain answer', err=bad"))
    assert _generator(client).generate("p") == "plain answer"


def test_gives_up_after_max_attempts():
    client = FakeClient("", "", ResponseError("server exploded"))

    with pytest.raises(GeneratorError, match="after 3 attempts"):
        _generator(client).generate("p")
    assert len(client.calls) == 3


def test_response_object_with_message_attribute():
    class Message:
        def model_dump(self, exclude_none=False):
            return {"role": "assistant", "content": ["from ", "object "]}

    class Response:
        message = Message()

    assert _generator(FakeClient(Response())).generate("p") == "from object"


def test_raw_marker_without_text_counts_as_empty():
    client = FakeClient(ResponseError("tool call failed: raw=''"), "fallback")
    assert _generator(client).generate("p") == "fallback"

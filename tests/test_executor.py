from __future__ import annotations

import logging

from agentloop.executor import ActionRunner, DispatchError, RuntimeContext
from agentloop.registry import Capability, CapabilityRegistry
from agentloop.schemas import ActionRequest


def test_runs_registered_capability(make_capability):
    cap = make_capability("double", lambda params: params["n"] * 2)
    runner = ActionRunner([cap])

    result = runner.run_task(ActionRequest(id="d", kind="double", params={"n": 21}))

    assert result.ok and result.output == 42
    assert cap.handler.calls == [{"n": 21}]


def test_unknown_kind_is_an_error_result():
    result = ActionRunner([]).run_task(ActionRequest(id="u", kind="nope"))

    assert result.status == "error"
    assert result.error == "No capability registered for kind: nope"
    assert result.output is None


def test_handler_exception_message_is_kept(make_capability):
    def fail(params):
        raise ValueError("bad input")

    result = ActionRunner([make_capability("f", fail)]).run_task(ActionRequest(id="f1", kind="f"))

    assert result.status == "error" and result.error == "bad input"


def test_handler_exception_without_message_uses_class_name(make_capability):
    def fail(params):
        raise KeyError()

    result = ActionRunner([make_capability("f", fail)]).run_task(ActionRequest(id="f1", kind="f"))

    assert result.error == "KeyError"


def test_handler_gets_a_copy_of_params_and_the_context():
    seen = {}

    def handler(params, context):
        params["mutated"] = True
        seen["context"] = context
        return None

    context = RuntimeContext(extras={"tenant": "t1"})
    request = ActionRequest(id="c", kind="ctx", params={"a": 1})
    ActionRunner([Capability("ctx", "", "", handler)], context=context).run_task(request)

    assert request.params == {"a": 1}
    assert seen["context"].extras["tenant"] == "t1"


def test_accepts_registry_and_logs_when_verbose(make_capability, caplog):
    registry = CapabilityRegistry().register(make_capability("k"))
    runner = ActionRunner(registry, verbose=True)

    with caplog.at_level(logging.DEBUG, logger="agentloop.executor"):
        runner.run_task(ActionRequest(id="v", kind="k", params={"x": 1}))

    assert any("Running v (k)" in rec.message for rec in caplog.records)


def test_dispatch_error_is_a_lookup_error():
    assert issubclass(DispatchError, LookupError)

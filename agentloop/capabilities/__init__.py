"""Built-in capabilities: callApi, compute and delay."""

from typing import List

from ..registry import Capability
from .call_api import CALL_API, CallApiParams, call_api
from .compute import COMPUTE, ComputeParams, compute
from .delay import DELAY, DelayParams, delay


def default_capabilities() -> List[Capability]:
    return [CALL_API, COMPUTE, DELAY]


__all__ = [
    "CALL_API",
    "COMPUTE",
    "DELAY",
    "CallApiParams",
    "ComputeParams",
    "DelayParams",
    "call_api",
    "compute",
    "delay",
    "default_capabilities",
]

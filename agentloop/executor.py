from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Union

import requests

from .registry import Capability, CapabilityRegistry
from .schemas import STATUS_ERROR, STATUS_OK, ActionRequest, ActionResult


def _sleep_ms(ms: float) -> None:
    time.sleep(max(0.0, float(ms)) / 1000.0)


@dataclass(frozen=True)
class RuntimeContext:
    """
    Shared, read-only services passed to every capability call.
    Hosts swap these out for sandboxing or tests.
    """
    fetch: Callable[..., Any] = requests.request
    wait: Callable[[float], None] = _sleep_ms
    extras: Mapping[str, Any] = field(default_factory=dict)


class DispatchError(LookupError):
    """Raised when no capability is registered for a request's kind."""


class ActionRunner:
    """Runs one action request through its registered capability."""

    def __init__(
        self,
        capabilities: Union[CapabilityRegistry, Iterable[Capability]],
        *,
        context: Optional[RuntimeContext] = None,
        verbose: bool = False,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        registry = (
            capabilities
            if isinstance(capabilities, CapabilityRegistry)
            else CapabilityRegistry(capabilities)
        )
        self.capabilities: Dict[str, Capability] = {cap.kind: cap for cap in registry.all()}
        self.context = context or RuntimeContext()
        self.verbose = verbose
        self.logger = logger or logging.getLogger(__name__)

    def run_task(self, request: ActionRequest) -> ActionResult:
        if self.verbose:
            self.logger.debug(
                "Running %s (%s) with params:\n%s",
                request.id,
                request.kind,
                json.dumps(request.params, indent=2, default=str),
            )
        try:
            capability = self._resolve(request.kind)
        except DispatchError as exc:
            if self.verbose:
                self.logger.debug("Request %s failed: %s", request.id, exc)
            return ActionResult(id=request.id, status=STATUS_ERROR, error=str(exc))
        try:
            output = capability.run(request.params, self.context)
        except Exception as exc:  # noqa: BLE001 - surface handler failure details
            if self.verbose:
                self.logger.debug("Request %s raised error: %s", request.id, exc)
            return ActionResult(
                id=request.id,
                status=STATUS_ERROR,
                error=str(exc) or exc.__class__.__name__,
            )
        if self.verbose:
            self.logger.debug(
                "Request %s result:\n%s",
                request.id,
                json.dumps(output, indent=2, default=str),
            )
        return ActionResult(id=request.id, status=STATUS_OK, output=output)

    def _resolve(self, kind: str) -> Capability:
        capability = self.capabilities.get(kind)
        if capability is None:
            raise DispatchError(f"No capability registered for kind: {kind}")
        return capability


__all__ = ["ActionRunner", "DispatchError", "RuntimeContext"]

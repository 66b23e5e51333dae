from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterable, List, Mapping, Optional

if TYPE_CHECKING:
    from .executor import RuntimeContext


Handler = Callable[[Dict[str, Any], "RuntimeContext"], Any]


@dataclass(frozen=True)
class Capability:
    """
    One action kind the generator may request through a Task directive.
    description/signature are shown to the model in the prompt preamble.
    """
    kind: str
    description: str
    signature: str
    handler: Handler

    def run(self, params: Mapping[str, Any], context: "RuntimeContext") -> Any:
        return self.handler(dict(params), context)


class CapabilityRegistry:
    """Catalog of capabilities keyed by kind. Later registrations replace earlier ones."""

    def __init__(self, capabilities: Optional[Iterable[Capability]] = None) -> None:
        self._capabilities: Dict[str, Capability] = {}
        if capabilities:
            self.register_all(capabilities)

    def register(self, capability: Capability) -> "CapabilityRegistry":
        self._capabilities[capability.kind] = capability
        return self

    def register_all(self, capabilities: Iterable[Capability]) -> "CapabilityRegistry":
        for capability in capabilities:
            self.register(capability)
        return self

    def get(self, kind: str) -> Optional[Capability]:
        return self._capabilities.get(kind)

    def has(self, kind: str) -> bool:
        return kind in self._capabilities

    def all(self) -> List[Capability]:
        return list(self._capabilities.values())

    def kinds(self) -> List[str]:
        return list(self._capabilities)

    def __len__(self) -> int:
        return len(self._capabilities)


__all__ = ["Capability", "CapabilityRegistry", "Handler"]

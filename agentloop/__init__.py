"""Directive-driven orchestration of a text generator and pluggable actions."""

from .adapter import Generator, GeneratorError, OllamaGenerator
from .capabilities import default_capabilities
from .config import AgentSettings
from .directives import ExtractionError, extract_directives, format_directive
from .events import AgentEvent, EventType
from .executor import ActionRunner, DispatchError, RuntimeContext
from .history import History
from .pipeline import Orchestrator, StopReason, TurnResult
from .registry import Capability, CapabilityRegistry
from .renderer import ConsoleRenderer, LoggingRenderer, Renderer
from .schemas import (
    ActionRequest,
    ActionResult,
    AssistantEntry,
    DisplayRequest,
    ParsedDirectives,
    Plan,
    ToolEntry,
    UserEntry,
)
from .task_queue import DependencyQueue, QueueInvariantError

__all__ = [
    "ActionRequest",
    "ActionResult",
    "ActionRunner",
    "AgentEvent",
    "AgentSettings",
    "AssistantEntry",
    "Capability",
    "CapabilityRegistry",
    "ConsoleRenderer",
    "DependencyQueue",
    "DispatchError",
    "DisplayRequest",
    "EventType",
    "ExtractionError",
    "Generator",
    "GeneratorError",
    "History",
    "LoggingRenderer",
    "OllamaGenerator",
    "Orchestrator",
    "ParsedDirectives",
    "Plan",
    "QueueInvariantError",
    "Renderer",
    "RuntimeContext",
    "StopReason",
    "ToolEntry",
    "TurnResult",
    "UserEntry",
    "default_capabilities",
    "extract_directives",
    "format_directive",
]

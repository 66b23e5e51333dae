from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence, Set, Union

from .adapter import Generator, OllamaGenerator
from .capabilities import default_capabilities
from .config import DEFAULT_MAX_BATCH_PASSES, DEFAULT_MAX_PLAN_STEPS, AgentSettings
from .directives import extract_directives
from .events import EventCallback, EventType, emit
from .executor import ActionRunner, RuntimeContext
from .history import History, HistoryInput
from .prompt_builders import build_prompt
from .registry import Capability, CapabilityRegistry
from .renderer import Renderer
from .schemas import (
    ActionRequest,
    ActionResult,
    DisplayRequest,
    HistoryEntry,
    ParsedDirectives,
    Plan,
)
from .task_queue import DependencyQueue


logger = logging.getLogger(__name__)


class StopReason(str, Enum):
    COMPLETE = "complete"
    STALLED = "stalled"
    BATCH_PASS_CAP = "batch_pass_cap"
    PLAN_STEP_CAP = "plan_step_cap"


@dataclass
class TurnResult:
    history: List[HistoryEntry]
    final_text: str
    displays: List[DisplayRequest]
    pending: List[str]
    results: Dict[str, ActionResult]
    stop_reason: StopReason = StopReason.COMPLETE

    def to_json(self) -> Dict[str, Any]:
        return {
            "history": [entry.to_json() for entry in self.history],
            "finalText": self.final_text,
            "ui": [display.to_json() for display in self.displays],
            "pending": list(self.pending),
            "results": {key: result.to_json() for key, result in self.results.items()},
            "stopReason": self.stop_reason.value,
        }


@dataclass
class _Turn:
    """Everything one chat() call owns; nothing here is shared between calls."""

    history: History
    queue: DependencyQueue = field(default_factory=DependencyQueue)
    surfaced: Set[str] = field(default_factory=set)
    # first-seen order, keyed by display id
    displays: Dict[str, DisplayRequest] = field(default_factory=dict)
    final_text: str = ""
    plan_steps: int = 0
    batch_passes: int = 0
    stop_reason: StopReason = StopReason.COMPLETE


class Orchestrator:
    """
    Drives generate -> parse -> execute -> observe cycles for one user turn.

    Replies without a plan are run as a batch: every request is queued and
    drained in dependency order, then the generator sees all new results in
    one follow-up call. A Thinking plan is stepped instead, one request per
    generation call. Both loops are capped and stop with a warning.
    """

    def __init__(
        self,
        generator: Generator,
        capabilities: Union[CapabilityRegistry, Iterable[Capability]] = (),
        *,
        renderer: Optional[Renderer] = None,
        system_prompt: Optional[str] = None,
        context: Optional[RuntimeContext] = None,
        max_plan_steps: int = DEFAULT_MAX_PLAN_STEPS,
        max_batch_passes: int = DEFAULT_MAX_BATCH_PASSES,
        on_event: Optional[EventCallback] = None,
        verbose: bool = False,
    ) -> None:
        registry = (
            capabilities
            if isinstance(capabilities, CapabilityRegistry)
            else CapabilityRegistry(capabilities)
        )
        self.generator = generator
        self.capabilities: Sequence[Capability] = tuple(registry.all())
        self.runner = ActionRunner(self.capabilities, context=context, verbose=verbose)
        self.renderer = renderer
        self.system_prompt = system_prompt
        self.max_plan_steps = max(1, max_plan_steps)
        self.max_batch_passes = max(1, max_batch_passes)
        self.on_event = on_event
        self.verbose = verbose

    @classmethod
    def from_settings(
        cls,
        settings: AgentSettings,
        *,
        generator: Optional[Generator] = None,
        capabilities: Optional[Iterable[Capability]] = None,
        renderer: Optional[Renderer] = None,
        on_event: Optional[EventCallback] = None,
        verbose: bool = False,
    ) -> "Orchestrator":
        if generator is None:
            generator = OllamaGenerator(settings.model, host=settings.host, verbose=verbose)
        return cls(
            generator,
            default_capabilities() if capabilities is None else capabilities,
            renderer=renderer,
            system_prompt=settings.system_prompt,
            context=RuntimeContext(extras={"http_timeout": settings.http_timeout}),
            max_plan_steps=settings.max_plan_steps,
            max_batch_passes=settings.max_batch_passes,
            on_event=on_event,
            verbose=verbose,
        )

    def chat(self, user_input: HistoryInput) -> TurnResult:
        """
        Run one turn. ``user_input`` is a message, or a prior history ending in
        the new user entry. Generator errors propagate; action errors land in
        the history as failed tool entries.
        """
        turn = _Turn(history=History.from_input(user_input))

        parsed: Optional[ParsedDirectives] = self._generate(turn)
        while parsed is not None:
            if parsed.plan is not None:
                parsed = self._step_plan(turn, parsed.plan)
            else:
                parsed = self._run_batch(turn, parsed.requests)

        if self.renderer is not None:
            for display in turn.displays.values():
                self.renderer.mount(display)

        result = TurnResult(
            history=turn.history.to_list(),
            final_text=turn.final_text,
            displays=list(turn.displays.values()),
            pending=turn.queue.pending_ids(),
            results=turn.queue.results(),
            stop_reason=turn.stop_reason,
        )
        emit(self.on_event, EventType.AGENT_END, result)
        return result

    def build_prompt(self, history: Iterable[HistoryEntry]) -> str:
        return build_prompt(history, self.capabilities, self.system_prompt)

    # ------------------------------------------------------------------
    # Generating / Parsing
    # ------------------------------------------------------------------
    def _generate(self, turn: _Turn) -> ParsedDirectives:
        prompt = self.build_prompt(turn.history)
        if self.verbose:
            logger.debug("Generation prompt:\n%s", prompt)
        text = self.generator.generate(prompt)
        turn.history.add_assistant(text)
        turn.final_text = text
        emit(self.on_event, EventType.LLM_RESPONSE, text)

        parsed = extract_directives(text)
        emit(self.on_event, EventType.PARSED_DIRECTIVES, parsed)
        for display in parsed.displays:
            if display.id in turn.displays:
                logger.debug("Display %s already seen this turn; keeping the first", display.id)
                continue
            turn.displays[display.id] = display
            emit(self.on_event, EventType.UI_DIRECTIVE, display)
        if parsed.plan is not None and parsed.requests:
            logger.info(
                "Reply carries a plan; ignoring %d standalone task(s): %s",
                len(parsed.requests),
                ", ".join(request.id for request in parsed.requests),
            )
        return parsed

    # ------------------------------------------------------------------
    # PlanStepping
    # ------------------------------------------------------------------
    def _step_plan(self, turn: _Turn, plan: Plan) -> Optional[ParsedDirectives]:
        """Returns the reply to hand over to batch mode, or None when the turn is over."""
        emit(self.on_event, EventType.PLAN, plan)
        steps = deque(plan.requests)
        while steps:
            if turn.plan_steps >= self.max_plan_steps:
                logger.warning(
                    "Plan reached maximum steps (%d); %d step(s) left unexecuted.",
                    self.max_plan_steps,
                    len(steps),
                )
                turn.stop_reason = StopReason.PLAN_STEP_CAP
                return None
            request = steps.popleft()
            if not turn.queue.enqueue(request):
                logger.debug("Plan step %s already has a result; skipping", request.id)
                continue
            turn.plan_steps += 1
            result = self._execute(turn, request)
            turn.surfaced.add(result.id)

            followup = self._generate(turn)
            if followup.plan is not None:
                # last plan wins
                steps = deque(followup.plan.requests)
                emit(self.on_event, EventType.PLAN, followup.plan)
            elif followup.requests:
                return followup
        return None

    # ------------------------------------------------------------------
    # BatchExecuting / Observing
    # ------------------------------------------------------------------
    def _run_batch(self, turn: _Turn, requests: Sequence[ActionRequest]) -> Optional[ParsedDirectives]:
        """Returns a reply carrying a plan to hand over, or None when the turn is over."""
        turn.queue.enqueue(requests)
        while True:
            if turn.batch_passes >= self.max_batch_passes:
                logger.warning(
                    "Agent reached maximum batch passes (%d); %d request(s) still pending.",
                    self.max_batch_passes,
                    len(turn.queue.pending_ids()),
                )
                turn.stop_reason = StopReason.BATCH_PASS_CAP
                return None
            turn.batch_passes += 1

            executed = self._drain(turn)
            fresh = [result for result in executed if result.id not in turn.surfaced]
            if not fresh:
                if not turn.queue.is_finished():
                    logger.warning(
                        "Agent loop stalled: no request ready and %d still pending (%s).",
                        len(turn.queue.pending_ids()),
                        ", ".join(turn.queue.pending_ids()),
                    )
                    turn.stop_reason = StopReason.STALLED
                return None
            turn.surfaced.update(result.id for result in fresh)

            followup = self._generate(turn)
            if followup.plan is not None:
                return followup
            if followup.requests:
                turn.queue.enqueue(followup.requests)
            elif turn.queue.is_finished():
                return None

    def _drain(self, turn: _Turn) -> List[ActionResult]:
        executed: List[ActionResult] = []
        while True:
            request = turn.queue.next_ready()
            if request is None:
                return executed
            executed.append(self._execute(turn, request))

    def _execute(self, turn: _Turn, request: ActionRequest) -> ActionResult:
        emit(self.on_event, EventType.TASK_START, request)
        result = self.runner.run_task(request)
        turn.queue.complete(result)
        turn.history.add_tool(result)
        emit(self.on_event, EventType.TASK_RESULT, result)
        return result


__all__ = ["Orchestrator", "StopReason", "TurnResult"]

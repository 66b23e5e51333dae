from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional


logger = logging.getLogger(__name__)


DEFAULT_MODEL = "gpt-oss:20b"
DEFAULT_MAX_PLAN_STEPS = 10
DEFAULT_MAX_BATCH_PASSES = 5
DEFAULT_HTTP_TIMEOUT = 30.0


@dataclass(frozen=True)
class AgentSettings:
    model: str = DEFAULT_MODEL
    host: Optional[str] = None
    system_prompt: Optional[str] = None
    max_plan_steps: int = DEFAULT_MAX_PLAN_STEPS
    max_batch_passes: int = DEFAULT_MAX_BATCH_PASSES
    http_timeout: float = DEFAULT_HTTP_TIMEOUT

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AgentSettings":
        env = os.environ if environ is None else environ
        return cls(
            model=env.get("AGENTLOOP_MODEL") or DEFAULT_MODEL,
            host=env.get("OLLAMA_HOST") or None,
            system_prompt=env.get("AGENTLOOP_SYSTEM_PROMPT") or None,
            max_plan_steps=_read_cap(env, "AGENTLOOP_MAX_PLAN_STEPS", DEFAULT_MAX_PLAN_STEPS),
            max_batch_passes=_read_cap(env, "AGENTLOOP_MAX_BATCH_PASSES", DEFAULT_MAX_BATCH_PASSES),
            http_timeout=_read_float(env, "AGENTLOOP_HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT),
        )


def _read_cap(env: Mapping[str, str], name: str, default: int) -> int:
    raw = (env.get(name) or "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer, using %s", name, raw, default)
        return default
    return max(1, value)


def _read_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = (env.get(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not a number, using %s", name, raw, default)
        return default


__all__ = [
    "AgentSettings",
    "DEFAULT_HTTP_TIMEOUT",
    "DEFAULT_MAX_BATCH_PASSES",
    "DEFAULT_MAX_PLAN_STEPS",
    "DEFAULT_MODEL",
]

from __future__ import annotations

import time
from typing import Any, Dict, Union

from pydantic import BaseModel, Field

from ..executor import RuntimeContext
from ..registry import Capability


class DelayParams(BaseModel):
    ms: Union[int, float] = Field(ge=0, description="Milliseconds to wait")


def delay(params: Dict[str, Any], context: RuntimeContext) -> Dict[str, Any]:
    request = DelayParams.model_validate(params)
    context.wait(request.ms)
    return {"waited": request.ms, "completedAt": int(time.time() * 1000)}


DELAY = Capability(
    kind="delay",
    description="Wait for the given number of milliseconds before continuing",
    signature="ms: number",
    handler=delay,
)


__all__ = ["DELAY", "DelayParams", "delay"]

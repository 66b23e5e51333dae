from __future__ import annotations

import re
from typing import Any, Dict, List, Literal

from pydantic import BaseModel, Field

from ..executor import RuntimeContext
from ..registry import Capability


PLACEHOLDER = re.compile(r"\{(\w+)\}")


class ComputeParams(BaseModel):
    operation: Literal["add", "subtract", "multiply", "divide", "average", "format"]
    values: List[float] = Field(default_factory=list)
    format: str = ""
    value: Any = None


def compute(params: Dict[str, Any], context: RuntimeContext) -> Dict[str, Any]:
    request = ComputeParams.model_validate(params)
    values = [_as_number(v) for v in request.values]
    op = request.operation

    if op == "add":
        result: Any = sum(values)
    elif op == "subtract":
        result = values[0] - sum(values[1:]) if values else 0
    elif op == "multiply":
        result = 1
        for v in values:
            result *= v
    elif op == "divide":
        if len(values) < 2 or values[1] == 0:
            raise ValueError("Division requires at least two values and divisor cannot be zero")
        result = values[0] / values[1]
    elif op == "average":
        result = sum(values) / len(values) if values else 0
    else:
        result = _format(request.format, request.value)
    return {"result": result}


def _as_number(value: float) -> Any:
    # keep integral inputs integral so add/multiply of ints stay ints
    return int(value) if float(value).is_integer() else value


def _format(template: str, value: Any) -> str:
    lookup = value if isinstance(value, dict) else {}

    def replace(match: "re.Match[str]") -> str:
        key = match.group(1)
        return str(lookup[key]) if key in lookup else ""

    return PLACEHOLDER.sub(replace, template)


COMPUTE = Capability(
    kind="compute",
    description="Perform simple arithmetic operations and string formatting",
    signature=(
        'operation: "add" | "subtract" | "multiply" | "divide" | "average" | "format", '
        "values?: number[], format?: string, value?: object"
    ),
    handler=compute,
)


__all__ = ["COMPUTE", "ComputeParams", "compute"]

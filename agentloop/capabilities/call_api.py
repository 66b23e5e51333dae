from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from ..executor import RuntimeContext
from ..registry import Capability


DEFAULT_TIMEOUT = 30.0


class CallApiParams(BaseModel):
    url: str = Field(description="Absolute URL to call")
    method: str = Field(default="GET", description="HTTP method")
    body: Optional[Any] = Field(default=None, description="JSON request body")
    headers: Dict[str, str] = Field(default_factory=dict)


def call_api(params: Dict[str, Any], context: RuntimeContext) -> Dict[str, Any]:
    request = CallApiParams.model_validate(params)
    headers = {"Content-Type": "application/json", **request.headers}
    kwargs: Dict[str, Any] = {
        "headers": headers,
        "timeout": context.extras.get("http_timeout", DEFAULT_TIMEOUT),
    }
    if request.body is not None:
        kwargs["json"] = request.body
    response = context.fetch(request.method.upper(), request.url, **kwargs)
    try:
        payload = response.json()
    except ValueError:
        payload = None
    return {"status": response.status_code, "json": payload}


CALL_API = Capability(
    kind="callApi",
    description="Make an HTTP request to an external JSON API and return its status and body",
    signature='url: string, method?: "GET" | "POST" | "PUT" | "DELETE", body?: object, headers?: object',
    handler=call_api,
)


__all__ = ["CALL_API", "CallApiParams", "call_api"]

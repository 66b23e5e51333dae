from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Mapping, Optional, Protocol

import ollama
from ollama import ResponseError


logger = logging.getLogger(__name__)

RAW_REPLY = re.compile(r"raw='([^']*)'")
EMPTY_REPLY_NUDGE = "Please provide a response based on the supplied context."


class Generator(Protocol):
    def generate(self, prompt: str) -> str: ...


class GeneratorError(RuntimeError):
    """Raised when the language model fails to provide any text."""


class OllamaGenerator:
    """Prompt-in, text-out wrapper around an Ollama chat model."""

    def __init__(
        self,
        model: str,
        *,
        host: Optional[str] = None,
        temperature: Optional[float] = None,
        options: Optional[Mapping[str, Any]] = None,
        max_attempts: int = 3,
        verbose: bool = False,
    ) -> None:
        self.model = model
        self.options = dict(options or {})
        if temperature is not None:
            self.options.setdefault("temperature", temperature)
        self.max_attempts = max(1, max_attempts)
        self.verbose = verbose
        self.client = ollama.Client(host=host)

    def generate(self, prompt: str) -> str:
        messages: List[Dict[str, str]] = [{"role": "user", "content": prompt}]

        if self.verbose:
            logger.debug("Prompt:\n%s", prompt)

        last = ""
        for idx in range(self.max_attempts):
            last = self._reply_text(messages)
            if self.verbose:
                logger.debug("Attempt %s raw response: %s", idx + 1, last)
            if last:
                return last
            messages.append({"role": "system", "content": EMPTY_REPLY_NUDGE})

        raise GeneratorError(
            f"Model '{self.model}' failed to return text after {self.max_attempts} attempts. "
            f"Last output: {last or '<none>'}"
        )

    def _reply_text(self, messages: List[Dict[str, str]]) -> str:
        """
        One chat call, reduced to its text. When the server chokes on a reply it
        took for a tool call, the plain text is still quoted as raw='...' in the
        ResponseError, so it is recovered from there.
        """
        try:
            response = self.client.chat(model=self.model, messages=messages, options=self.options or None)
        except ResponseError as exc:
            found = RAW_REPLY.search(str(exc))
            return found.group(1).strip() if found else ""

        message = response.get("message") if isinstance(response, dict) else getattr(response, "message", None)
        if hasattr(message, "model_dump"):
            message = message.model_dump(exclude_none=True)
        content = message.get("content") if isinstance(message, dict) else None
        if isinstance(content, list):
            content = "".join(str(chunk) for chunk in content)
        return str(content or "").strip()


__all__ = ["Generator", "GeneratorError", "OllamaGenerator"]

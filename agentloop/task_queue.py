from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Union

from .schemas import ActionRequest, ActionResult


logger = logging.getLogger(__name__)


class QueueInvariantError(RuntimeError):
    """Raised when a result is recorded for a request that is not pending."""


class DependencyQueue:
    """
    Pending/completed bookkeeping for action requests.

    A request is ready once every id in its ``depends_on`` has a result,
    whatever the status of that result. Ids that already have a result are
    never scheduled again, even when the same request is enqueued twice.
    """

    def __init__(self) -> None:
        self._requests: Dict[str, ActionRequest] = {}
        self._results: Dict[str, ActionResult] = {}
        # dicts keep insertion order; values are unused
        self._pending: Dict[str, None] = {}

    def enqueue(self, requests: Union[ActionRequest, Iterable[ActionRequest]]) -> List[str]:
        """Register requests as pending and return the ids actually scheduled."""
        batch = [requests] if isinstance(requests, ActionRequest) else list(requests)
        scheduled: List[str] = []
        for request in batch:
            self._requests[request.id] = request
            if request.id in self._results:
                logger.debug("Request %s already has a result; not rescheduling", request.id)
                continue
            self._pending.setdefault(request.id, None)
            scheduled.append(request.id)
        return scheduled

    def next_ready(self) -> Optional[ActionRequest]:
        for request_id in self._pending:
            request = self._requests[request_id]
            if all(dep in self._results for dep in request.depends_on or ()):
                return request
        return None

    def complete(self, result: ActionResult) -> None:
        if result.id not in self._pending:
            raise QueueInvariantError(f"Request {result.id!r} is not pending")
        self._results[result.id] = result
        del self._pending[result.id]

    def is_finished(self) -> bool:
        return not self._pending

    def has_result(self, request_id: str) -> bool:
        return request_id in self._results

    def get(self, request_id: str) -> Optional[ActionRequest]:
        return self._requests.get(request_id)

    def pending_ids(self) -> List[str]:
        return list(self._pending)

    def results(self) -> Dict[str, ActionResult]:
        return dict(self._results)


__all__ = ["DependencyQueue", "QueueInvariantError"]

"""Load bookkeeping for the presentation layer.

Each load carries a request id; only the response for the most recently
issued id is applied, so a slow load that finishes after a newer one was
started can never overwrite fresher state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class LoadSession(Generic[T]):
    latest_id: int = 0
    data: Optional[T] = None
    error: Optional[BaseException] = None
    loading: bool = False

    def begin(self) -> int:
        self.latest_id += 1
        self.loading = True
        return self.latest_id

    def is_current(self, request_id: int) -> bool:
        return request_id == self.latest_id

    def apply(self, request_id: int, payload: T) -> bool:
        if not self.is_current(request_id):
            logger.debug("dropping stale load response %d (latest %d)", request_id, self.latest_id)
            return False
        self.data = payload
        self.error = None
        self.loading = False
        return True

    def fail(self, request_id: int, exc: BaseException) -> bool:
        if not self.is_current(request_id):
            logger.debug("dropping stale load failure %d (latest %d)", request_id, self.latest_id)
            return False
        self.error = exc
        self.loading = False
        return True

    async def refresh(self, loader: Callable[[], Awaitable[T]]) -> bool:
        request_id = self.begin()
        try:
            payload = await loader()
        except Exception as exc:
            logger.exception("load %d failed", request_id)
            self.fail(request_id, exc)
            return False
        return self.apply(request_id, payload)

    def load(self, loader: Callable[[], T]) -> bool:
        """Synchronous counterpart of :meth:`refresh`."""
        request_id = self.begin()
        try:
            payload = loader()
        except Exception as exc:
            logger.exception("load %d failed", request_id)
            self.fail(request_id, exc)
            return False
        return self.apply(request_id, payload)


def session_state(store: Any, key: str) -> LoadSession:
    """Fetch (or create) the LoadSession kept under ``key`` in a mapping-like store."""
    if key not in store:
        store[key] = LoadSession()
    return store[key]

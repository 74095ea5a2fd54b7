"""
Single-flight guard for expensive, user-triggered operations.

Keys are ``(operation, source)`` tuples. A key is claimed synchronously,
with no ``await`` between the check and the claim, so a second trigger
arriving while the first is in flight is rejected before any backend
call is issued.
"""

import threading
from contextlib import contextmanager
from typing import Hashable, Iterator, Set

from mcp_sync.core.exceptions import OperationInProgressError
from mcp_sync.utils.logging import get_logger

logger = get_logger(__name__)


class SingleFlight:
    """Keyed in-flight registry."""

    def __init__(self):
        self._in_flight: Set[Hashable] = set()
        self._lock = threading.Lock()

    def try_acquire(self, key: Hashable) -> bool:
        """Claim ``key``; return False if it is already in flight."""
        with self._lock:
            if key in self._in_flight:
                return False
            self._in_flight.add(key)
            return True

    def release(self, key: Hashable) -> None:
        """Release a claimed key."""
        with self._lock:
            self._in_flight.discard(key)

    def is_running(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._in_flight

    @contextmanager
    def guard(self, key: Hashable) -> Iterator[None]:
        """
        Hold ``key`` for the duration of the block.

        Raises:
            OperationInProgressError: If the key is already held
        """
        if not self.try_acquire(key):
            logger.warning(f"Rejected duplicate trigger for {key}")
            raise OperationInProgressError(
                f"Operation already in progress: {_describe_key(key)}",
                details={"key": list(key) if isinstance(key, tuple) else key},
            )
        try:
            yield
        finally:
            self.release(key)


def _describe_key(key: Hashable) -> str:
    if isinstance(key, tuple):
        return " ".join(getattr(part, "value", str(part)) for part in key)
    return str(key)

"""Fixed-window rate limiting keyed by client identity.

Counts live in an injected counter store so limiter state can be isolated per
application (and per test) instead of living in module globals.
"""

import logging
import math
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from fastapi import Request

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of consuming one unit from a rate window.

    Attributes:
        allowed: Whether the request is within the cap
        limit: The cap for the window
        remaining: Units left in the current window
        reset_after: Seconds until the current window ends
    """

    allowed: bool
    limit: int
    remaining: int
    reset_after: int


class InMemoryCounterStore:
    """Process-local hit counters keyed by (limiter, client, window index)."""

    def __init__(self) -> None:
        self._counts: dict[tuple[str, str, int], int] = {}
        self._lock = threading.Lock()

    def increment(self, namespace: str, client_id: str, window: int) -> int:
        """Add a hit and return the new count for the window."""
        key = (namespace, client_id, window)
        with self._lock:
            self._prune(namespace, window)
            self._counts[key] = self._counts.get(key, 0) + 1
            return self._counts[key]

    def decrement(self, namespace: str, client_id: str, window: int) -> int:
        """Remove a hit, never going below zero, and return the new count."""
        key = (namespace, client_id, window)
        with self._lock:
            count = max(self._counts.get(key, 0) - 1, 0)
            if count:
                self._counts[key] = count
            else:
                self._counts.pop(key, None)
            return count

    def get(self, namespace: str, client_id: str, window: int) -> int:
        with self._lock:
            return self._counts.get((namespace, client_id, window), 0)

    def _prune(self, namespace: str, current_window: int) -> None:
        stale = [k for k in self._counts if k[0] == namespace and k[2] < current_window]
        for key in stale:
            del self._counts[key]


class FixedWindowRateLimiter:
    """Caps hits per client within fixed, wall-clock aligned windows."""

    def __init__(
        self,
        name: str,
        max_requests: int,
        window_seconds: int,
        store: InMemoryCounterStore | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the limiter.

        Args:
            name: Namespace for this limiter's counters
            max_requests: Hits allowed per client per window
            window_seconds: Window length in seconds
            store: Counter store (a private one is created if omitted)
            clock: Time source returning epoch seconds

        Raises:
            ValueError: If max_requests or window_seconds is not positive
        """
        if max_requests <= 0:
            raise ValueError("max_requests must be positive")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")

        self.name = name
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.store = store if store is not None else InMemoryCounterStore()
        self._clock = clock

    def _current_window(self) -> tuple[int, int]:
        now = self._clock()
        window = int(now // self.window_seconds)
        reset_after = math.ceil((window + 1) * self.window_seconds - now)
        return window, max(reset_after, 1)

    def consume(self, client_id: str) -> RateLimitDecision:
        """Count a hit for a client.

        Args:
            client_id: Client identity (usually the client address)

        Returns:
            RateLimitDecision: Whether the hit fits within the window cap
        """
        window, reset_after = self._current_window()
        count = self.store.increment(self.name, client_id, window)
        allowed = count <= self.max_requests

        if not allowed:
            logger.warning(
                f"Rate limit '{self.name}' exceeded for client {client_id} "
                f"({count}/{self.max_requests})"
            )

        return RateLimitDecision(
            allowed=allowed,
            limit=self.max_requests,
            remaining=max(self.max_requests - count, 0),
            reset_after=reset_after,
        )

    def release(self, client_id: str) -> None:
        """Give back a hit counted in the current window.

        Used to leave successful requests out of the count.
        """
        window, _ = self._current_window()
        self.store.decrement(self.name, client_id, window)


def resolve_client_id(request: Request, trusted_proxy_hops: int = 0) -> str:
    """Derive the client identity used for rate limiting.

    With no trusted proxies the socket peer address is used. With N trusted
    hops, the address N positions from the right of the X-Forwarded-For chain
    (with the peer appended) is used, clamped to the leftmost entry.

    Args:
        request: The incoming request
        trusted_proxy_hops: Number of reverse proxies in front of the service

    Returns:
        str: Client address, or "unknown" if none is available
    """
    peer = request.client.host if request.client else "unknown"
    if trusted_proxy_hops <= 0:
        return peer

    forwarded = request.headers.get("x-forwarded-for", "")
    chain = [addr.strip() for addr in forwarded.split(",") if addr.strip()]
    chain.append(peer)

    index = max(len(chain) - 1 - trusted_proxy_hops, 0)
    return chain[index]

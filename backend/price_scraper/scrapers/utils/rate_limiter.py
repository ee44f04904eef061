"""Token bucket rate limiter for per-client request limiting."""

import asyncio
import time
from typing import Dict, Optional


class TokenBucket:
    """Token bucket algorithm implementation for rate limiting.

    The bucket starts full and refills at a constant rate.
    Each request consumes one token.
    """

    def __init__(self, rate: float, capacity: float):
        """Initialize token bucket.

        Args:
            rate: Tokens per second (e.g., 100 / 900 = 100 per 15 minutes)
            capacity: Maximum tokens in bucket (burst capacity)
        """
        self.rate = rate  # tokens per second
        self.capacity = capacity
        self.tokens = capacity
        self.last_refill = time.monotonic()
        self._lock = asyncio.Lock()

    def _refill(self) -> None:
        """Refill tokens based on elapsed time since last refill."""
        now = time.monotonic()
        elapsed = now - self.last_refill
        self.tokens = min(self.capacity, self.tokens + elapsed * self.rate)
        self.last_refill = now

    async def try_acquire(self, tokens: float = 1.0) -> bool:
        """Take tokens if available without waiting.

        Args:
            tokens: Number of tokens to acquire (default 1.0)

        Returns:
            True if the tokens were taken, False if the bucket is short
        """
        async with self._lock:
            self._refill()
            if self.tokens >= tokens:
                self.tokens -= tokens
                return True
            return False

    def retry_after(self, tokens: float = 1.0) -> float:
        """Seconds until enough tokens will have refilled."""
        missing = max(0.0, tokens - self.tokens)
        return missing / self.rate if self.rate > 0 else float("inf")


class ClientRateLimiter:
    """Per-client rate limiter using token bucket algorithm.

    Each client key (normally the remote IP) gets its own bucket allowing
    ``max_requests`` per ``window_seconds`` with the full allowance
    available as a burst.  A bucket left idle for a whole window has fully
    refilled, so it is dropped and recreated on the client's next request.
    """

    def __init__(self, max_requests: int, window_seconds: float):
        """Initialize rate limiter with empty bucket dictionary."""
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._buckets: Dict[str, TokenBucket] = {}
        self._last_sweep = time.monotonic()

    def _get_bucket(self, client: str) -> TokenBucket:
        if client not in self._buckets:
            rate = self.max_requests / self.window_seconds
            self._buckets[client] = TokenBucket(rate=rate, capacity=float(self.max_requests))
        return self._buckets[client]

    def prune(self, now: Optional[float] = None) -> int:
        """Drop buckets idle for at least one window.

        Returns:
            Number of buckets removed
        """
        now = time.monotonic() if now is None else now
        idle = [
            client
            for client, bucket in self._buckets.items()
            if now - bucket.last_refill >= self.window_seconds
        ]
        for client in idle:
            del self._buckets[client]
        self._last_sweep = now
        return len(idle)

    async def allow(self, client: str) -> bool:
        """Record a request from client and report whether it is allowed."""
        now = time.monotonic()
        if now - self._last_sweep >= self.window_seconds:
            self.prune(now)
        return await self._get_bucket(client).try_acquire()

    def retry_after(self, client: str) -> int:
        """Whole seconds the client should wait before its next request."""
        return max(1, int(self._get_bucket(client).retry_after() + 0.999))

    def reset(self) -> None:
        """Forget all clients."""
        self._buckets.clear()

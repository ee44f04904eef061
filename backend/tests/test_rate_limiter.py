"""Tests for the per-client token bucket rate limiter."""

from price_scraper.scrapers.utils.rate_limiter import ClientRateLimiter, TokenBucket


class TestTokenBucket:

    async def test_starts_full_then_refuses(self):
        bucket = TokenBucket(rate=0.001, capacity=2)
        assert await bucket.try_acquire()
        assert await bucket.try_acquire()
        assert not await bucket.try_acquire()

    def test_retry_after_reflects_rate(self):
        bucket = TokenBucket(rate=0.5, capacity=1)
        bucket.tokens = 0
        assert bucket.retry_after() == 2.0


class TestClientRateLimiter:

    async def test_clients_are_isolated(self):
        limiter = ClientRateLimiter(max_requests=1, window_seconds=900)

        assert await limiter.allow("10.0.0.1")
        assert not await limiter.allow("10.0.0.1")
        assert await limiter.allow("10.0.0.2")

    async def test_retry_after_is_whole_seconds(self):
        limiter = ClientRateLimiter(max_requests=1, window_seconds=900)
        await limiter.allow("10.0.0.1")
        assert limiter.retry_after("10.0.0.1") >= 1

    async def test_reset_forgets_clients(self):
        limiter = ClientRateLimiter(max_requests=1, window_seconds=900)
        await limiter.allow("10.0.0.1")
        limiter.reset()
        assert await limiter.allow("10.0.0.1")

    async def test_idle_client_bucket_is_pruned(self):
        limiter = ClientRateLimiter(max_requests=1, window_seconds=900)
        await limiter.allow("10.0.0.1")
        await limiter.allow("10.0.0.2")
        limiter._buckets["10.0.0.1"].last_refill -= 900

        assert limiter.prune() == 1
        assert "10.0.0.1" not in limiter._buckets
        assert "10.0.0.2" in limiter._buckets

    async def test_allow_sweeps_idle_buckets_once_per_window(self):
        limiter = ClientRateLimiter(max_requests=1, window_seconds=900)
        await limiter.allow("10.0.0.1")
        limiter._buckets["10.0.0.1"].last_refill -= 900
        limiter._last_sweep -= 900

        assert await limiter.allow("10.0.0.2")

        assert list(limiter._buckets) == ["10.0.0.2"]

    async def test_pruned_client_starts_with_full_allowance(self):
        limiter = ClientRateLimiter(max_requests=1, window_seconds=900)
        await limiter.allow("10.0.0.1")
        assert not await limiter.allow("10.0.0.1")
        limiter._buckets["10.0.0.1"].last_refill -= 900

        limiter.prune()

        assert await limiter.allow("10.0.0.1")

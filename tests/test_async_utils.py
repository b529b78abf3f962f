"""Tests for async_utils.py: gather, background tasks, CircuitBreaker, timeouts."""

import asyncio
import time

import pytest

from idloc_search.shared.async_utils import (
    CircuitBreaker,
    gather_with_errors,
    run_in_background,
    timeout_with_fallback,
)
from idloc_search.shared.exceptions import RateLimitError

# ============================================================
# gather_with_errors
# ============================================================


class TestGatherWithErrors:
    @pytest.mark.asyncio
    async def test_argument_order(self):
        async def delayed(value, delay):
            await asyncio.sleep(delay)
            return value

        results = await gather_with_errors(delayed("slow", 0.02), delayed("fast", 0))
        assert results == ["slow", "fast"]

    @pytest.mark.asyncio
    async def test_with_exceptions_returned(self):
        async def ok():
            return 1

        async def fail():
            raise ValueError("boom")

        results = await gather_with_errors(ok(), fail(), return_exceptions=True)
        assert results[0] == 1
        assert isinstance(results[1], ValueError)

    @pytest.mark.asyncio
    async def test_empty(self):
        assert await gather_with_errors() == []


# ============================================================
# run_in_background
# ============================================================


class TestRunInBackground:
    @pytest.mark.asyncio
    async def test_runs_without_awaiting(self):
        done = asyncio.Event()

        async def job():
            done.set()

        task = run_in_background(job(), name="job")
        await asyncio.wait_for(done.wait(), timeout=1.0)
        await task
        assert task.get_name() == "job"

    @pytest.mark.asyncio
    async def test_failure_does_not_propagate(self):
        async def job():
            raise RuntimeError("background failure")

        task = run_in_background(job())
        await asyncio.sleep(0)
        await asyncio.sleep(0)
        assert task.done()
        assert isinstance(task.exception(), RuntimeError)


# ============================================================
# CircuitBreaker
# ============================================================


class TestCircuitBreaker:
    @pytest.mark.asyncio
    async def test_closed_state_allows_calls(self):
        cb = CircuitBreaker(failure_threshold=3)
        async with cb:
            pass

    @pytest.mark.asyncio
    async def test_open_rejects_calls(self):
        cb = CircuitBreaker(failure_threshold=1, recovery_timeout=60.0)

        with pytest.raises(RuntimeError):
            async with cb:
                raise RuntimeError("fail")

        assert cb.state == "open"
        with pytest.raises(RateLimitError):
            async with cb:
                pass

    @pytest.mark.asyncio
    async def test_success_decrements_failure_count(self):
        cb = CircuitBreaker(failure_threshold=5)
        cb._failure_count = 3

        async with cb:
            pass

        assert cb._failure_count == 2

    @pytest.mark.asyncio
    async def test_half_open_recovery(self):
        cb = CircuitBreaker(failure_threshold=1, recovery_timeout=0.01)

        with pytest.raises(RuntimeError):
            async with cb:
                raise RuntimeError("fail")

        await asyncio.sleep(0.02)

        async with cb:
            pass

        assert cb.state == "closed"

    def test_is_open_property(self):
        cb = CircuitBreaker()
        assert cb.is_open is False

        cb._state = "open"
        cb._last_failure_time = time.monotonic()
        assert cb.is_open is True


# ============================================================
# timeout_with_fallback
# ============================================================


class TestTimeoutWithFallback:
    @pytest.mark.asyncio
    async def test_success_returns_result(self):
        async def fast():
            return "ok"

        assert await timeout_with_fallback(fast(), timeout=1.0, fallback="default") == "ok"

    @pytest.mark.asyncio
    async def test_timeout_returns_callable_fallback(self):
        async def slow():
            await asyncio.sleep(10)

        assert await timeout_with_fallback(slow(), timeout=0.01, fallback=dict) == {}

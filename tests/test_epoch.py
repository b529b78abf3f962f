"""Tests for epoch.py - superseding in-flight flows."""

import asyncio

import pytest

from idloc_search.application.search.epoch import QueryEpoch
from idloc_search.shared.exceptions import NetworkError


class TestQueryEpoch:
    def test_begin_supersedes(self):
        epoch = QueryEpoch()
        first = epoch.begin("a")
        second = epoch.begin("b")
        assert second.number == first.number + 1
        assert not epoch.is_current(first)
        assert epoch.is_current(second)

    def test_commit_current(self):
        epoch = QueryEpoch()
        token = epoch.begin()
        assert epoch.commit(token, "value")
        assert epoch.result == "value"

    def test_commit_stale_discarded(self):
        epoch = QueryEpoch()
        stale = epoch.begin()
        current = epoch.begin()
        epoch.commit(current, "new")
        assert not epoch.commit(stale, "old")
        assert epoch.result == "new"


class TestRun:
    async def test_returns_value_when_current(self):
        epoch = QueryEpoch()

        async def work():
            return 42

        assert await epoch.run(epoch.begin(), work()) == 42

    async def test_superseded_result_dropped(self):
        """A flow started before a newer one never overwrites its result."""
        epoch = QueryEpoch()
        gate = asyncio.Event()

        async def slow():
            await gate.wait()
            return "old"

        async def fast():
            return "new"

        first = asyncio.create_task(epoch.run(epoch.begin("slow"), slow()))
        await asyncio.sleep(0)
        assert await epoch.run(epoch.begin("fast"), fast()) == "new"

        gate.set()
        assert await first is None
        assert epoch.result == "new"

    async def test_superseded_error_dropped(self):
        epoch = QueryEpoch()
        gate = asyncio.Event()

        async def failing():
            await gate.wait()
            raise NetworkError("late failure")

        first = asyncio.create_task(epoch.run(epoch.begin(), failing()))
        await asyncio.sleep(0)
        epoch.begin()
        gate.set()
        assert await first is None

    async def test_current_error_raised(self):
        epoch = QueryEpoch()

        async def failing():
            raise NetworkError("boom")

        with pytest.raises(NetworkError):
            await epoch.run(epoch.begin(), failing())

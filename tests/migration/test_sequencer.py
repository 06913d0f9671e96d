"""Tests for fixturespine.migration.sequencer."""

import asyncio

import pytest

from fixturespine.migration.sequencer import sequence
from fixturespine.migration.tasks import Task, TaskOutcome


def _recording_task(name, calls, result=TaskOutcome.APPLIED):
    async def fn(context, logger):
        calls.append((name, context, logger))
        return result

    return Task(name=name, fn=fn)


class TestSequence:
    """Strictly ordered, fail-fast execution."""

    @pytest.mark.asyncio
    async def test_runs_tasks_in_order_with_shared_context_and_logger(self, logger):
        calls = []
        context = object()
        tasks = [_recording_task(name, calls) for name in ("a", "b", "c")]

        await sequence(tasks, context, logger)

        assert [name for name, _, _ in calls] == ["a", "b", "c"]
        assert all(ctx is context and log is logger for _, ctx, log in calls)

    @pytest.mark.asyncio
    async def test_collects_results(self, logger):
        calls = []
        tasks = [
            _recording_task("a", calls, TaskOutcome.APPLIED),
            _recording_task("b", calls, TaskOutcome.ALREADY_SATISFIED),
        ]

        results = await sequence(tasks, None, logger)

        assert results == [TaskOutcome.APPLIED, TaskOutcome.ALREADY_SATISFIED]

    @pytest.mark.asyncio
    async def test_empty_list_resolves_to_empty_results(self, logger):
        assert await sequence([], None, logger) == []

    @pytest.mark.asyncio
    async def test_first_failure_propagates_and_skips_the_rest(self, logger):
        calls = []

        async def boom(context, logger):
            calls.append("boom")
            raise RuntimeError("store unavailable")

        tasks = [_recording_task("a", calls), Task("boom", boom), _recording_task("c", calls)]

        with pytest.raises(RuntimeError, match="store unavailable"):
            await sequence(tasks, None, logger)

        assert [c if isinstance(c, str) else c[0] for c in calls] == ["a", "boom"]

    @pytest.mark.asyncio
    async def test_next_task_starts_only_after_previous_finishes(self, logger):
        events = []

        async def slow(context, logger):
            events.append("slow:start")
            for _ in range(3):
                await asyncio.sleep(0)
            events.append("slow:end")

        async def fast(context, logger):
            events.append("fast")

        await sequence([Task("slow", slow), Task("fast", fast)], None, logger)

        assert events == ["slow:start", "slow:end", "fast"]


"""Tests for the result-collecting asynchronous trigger."""

from __future__ import annotations

import asyncio
import unittest

from evented.events import Events


class TriggerThenTests(unittest.IsolatedAsyncioTestCase):
    """Validate aggregation order, failure propagation and once handling."""

    async def test_collects_plain_and_awaitable_results(self) -> None:
        events = Events()
        seen: list[str] = []

        def first(arg: str) -> int:
            seen.append(arg)
            return 1

        async def second(arg: str) -> int:
            seen.append(arg)
            await asyncio.sleep(0)
            return 2

        events.on("e", first).on("e", second)

        results = await events.trigger_then("e", "payload")

        self.assertEqual(results, [1, 2])
        self.assertEqual(seen, ["payload", "payload"])

    async def test_results_follow_invocation_not_completion_order(self) -> None:
        events = Events()

        async def slow() -> str:
            await asyncio.sleep(0.01)
            return "slow"

        async def fast() -> str:
            return "fast"

        events.on("e", slow).on("e", fast)

        self.assertEqual(await events.trigger_then("e"), ["slow", "fast"])

    async def test_names_flattened_in_order(self) -> None:
        events = Events()
        events.on("b", lambda: "b1")
        events.on("a", lambda: "a1").on("a", lambda: "a2")

        results = await events.trigger_then("a b")

        self.assertEqual(results, ["a1", "a2", "b1"])

    async def test_no_listeners_resolves_empty(self) -> None:
        events = Events()
        self.assertEqual(await events.trigger_then("nothing"), [])
        self.assertEqual(await events.trigger_then(""), [])

    async def test_synchronous_failure_rejects_aggregate(self) -> None:
        events = Events()
        later: list[int] = []

        def broken() -> None:
            raise RuntimeError("boom")

        events.on("e", broken).on("e", lambda: later.append(1))

        with self.assertRaises(RuntimeError) as ctx:
            await events.trigger_then("e")

        self.assertEqual(str(ctx.exception), "boom")
        self.assertEqual(later, [])

    async def test_asynchronous_failure_rejects_aggregate(self) -> None:
        events = Events()

        async def broken() -> None:
            await asyncio.sleep(0)
            raise ValueError("async boom")

        events.on("e", lambda: 1).on("e", broken)

        with self.assertRaisesRegex(ValueError, "async boom"):
            await events.trigger_then("e")

    async def test_first_failure_wins(self) -> None:
        events = Events()

        async def fails_fast() -> None:
            raise KeyError("first")

        async def fails_slow() -> None:
            await asyncio.sleep(0.01)
            raise ValueError("second")

        events.on("e", fails_slow).on("e", fails_fast)

        with self.assertRaises(KeyError):
            await events.trigger_then("e")
        await asyncio.sleep(0.02)

    async def test_in_flight_results_keep_running_after_failure(self) -> None:
        events = Events()
        finished = asyncio.Event()

        async def slow() -> str:
            await asyncio.sleep(0.01)
            finished.set()
            return "done"

        async def broken() -> None:
            raise RuntimeError("boom")

        events.on("e", slow).on("e", broken)

        with self.assertRaises(RuntimeError):
            await events.trigger_then("e")
        self.assertFalse(finished.is_set())

        await asyncio.wait_for(finished.wait(), timeout=1)

    async def test_awaitables_are_scheduled_before_aggregation(self) -> None:
        events = Events()
        started: list[str] = []
        gate = asyncio.Event()

        async def waiter() -> str:
            started.append("waiter")
            await gate.wait()
            return "released"

        async def opener() -> str:
            started.append("opener")
            gate.set()
            return "opened"

        events.on("e", waiter).on("e", opener)

        results = await asyncio.wait_for(events.trigger_then("e"), timeout=1)

        self.assertEqual(results, ["released", "opened"])
        self.assertEqual(started, ["waiter", "opener"])

    async def test_once_listener_removed_only_when_invoked(self) -> None:
        events = Events()
        calls: list[int] = []

        async def handler() -> str:
            calls.append(1)
            return "once"

        events.once("e", handler)
        self.assertEqual(events.listener_count("e"), 1)

        self.assertEqual(await events.trigger_then("e"), ["once"])
        self.assertEqual(await events.trigger_then("e"), [])
        self.assertEqual(calls, [1])

    async def test_multi_name_once_delivers_once_per_collection(self) -> None:
        events = Events()
        calls: list[int] = []

        def handler() -> str:
            calls.append(1)
            return "hit"

        events.once("a b", handler)

        results = await events.trigger_then("a b")

        self.assertEqual(results, ["hit", "hit"])
        self.assertEqual(calls, [1])

    async def test_multi_name_async_once_is_awaited_once(self) -> None:
        events = Events()
        calls: list[int] = []

        async def handler() -> str:
            calls.append(1)
            return "hit"

        events.once("a b", handler)

        results = await events.trigger_then("a b")

        self.assertEqual(results, ["hit", None])
        self.assertEqual(calls, [1])

    async def test_listener_added_during_collection_waits_for_next_call(self) -> None:
        events = Events()

        def late() -> str:
            return "late"

        def register_late() -> str:
            events.on("e", late)
            return "registered"

        events.on("e", register_late)

        self.assertEqual(await events.trigger_then("e"), ["registered"])
        self.assertEqual(await events.trigger_then("e"), ["registered", "late"])
        self.assertEqual(events.listener_count("e"), 3)

    async def test_listener_removed_during_collection_still_runs(self) -> None:
        events = Events()
        calls: list[str] = []

        async def victim() -> str:
            calls.append("victim")
            return "victim"

        def remove_victim() -> str:
            events.off("e", victim)
            return "removed"

        events.on("e", remove_victim).on("e", victim)

        self.assertEqual(await events.trigger_then("e"), ["removed", "victim"])
        self.assertEqual(await events.trigger_then("e"), ["removed"])
        self.assertEqual(calls, ["victim"])

    async def test_listener_removed_mid_flight_still_completes(self) -> None:
        events = Events()

        async def handler() -> str:
            await asyncio.sleep(0)
            return "completed"

        events.on("e", handler)
        pending = asyncio.ensure_future(events.trigger_then("e"))
        await asyncio.sleep(0)
        events.off("e", handler)

        self.assertEqual(await pending, ["completed"])

    async def test_context_and_keywords_forwarded(self) -> None:
        events = Events()
        owner = object()
        events.on("e", lambda ctx, value, *, scale: (ctx, value * scale), owner)

        results = await events.trigger_then("e", 2, scale=3)

        self.assertEqual(results, [(owner, 6)])


if __name__ == "__main__":
    unittest.main()

"""Tests for tracked sends and the cleanup drain."""

from __future__ import annotations

import asyncio
import unittest

from eventrelay.bus import EventBus
from eventrelay.payload import EventPayload

EVENT_NAME = "ASYNC_EVENT"


class CleanupTests(unittest.IsolatedAsyncioTestCase):
    """Validate pending-work accounting across tracked sends."""

    async def test_cleanup_waits_for_tracked_send(self) -> None:
        bus = EventBus()
        calls: list[str] = []

        async def slow(event: EventPayload) -> bool:
            await asyncio.sleep(0.05)
            calls.append(event.id)
            return True

        bus.subscribe(EVENT_NAME, slow)

        async def indirect() -> None:
            bus.send(EventPayload(EVENT_NAME, {}), True)

        # The caller does not wait for delivery.
        await indirect()
        self.assertEqual(bus.ongoing, 1)

        await bus.cleanup()

        self.assertEqual(bus.ongoing, 0)
        self.assertEqual(len(calls), 1)

    async def test_drain_completeness_with_varying_delays(self) -> None:
        bus = EventBus()
        delays = [0.03, 0.0, 0.02, 0.01, 0.04]
        calls: list[float] = []

        async def handler(event: EventPayload) -> bool:
            await asyncio.sleep(event.data["delay"])
            calls.append(event.data["delay"])
            return True

        bus.subscribe(EVENT_NAME, handler)
        for delay in delays:
            bus.send(EventPayload(EVENT_NAME, {"delay": delay}), track=True)

        self.assertEqual(bus.ongoing, len(delays))

        await bus.cleanup()

        self.assertEqual(bus.ongoing, 0)
        self.assertEqual(sorted(calls), sorted(delays))

    async def test_tracked_sends_leave_pending_when_settled(self) -> None:
        bus = EventBus()
        bus.subscribe(EVENT_NAME, lambda event: True)

        bus.send(EventPayload(EVENT_NAME), track=True)
        self.assertEqual(bus.ongoing, 1)

        await asyncio.sleep(0.01)
        self.assertEqual(bus.ongoing, 0)

    async def test_untracked_sends_are_not_counted(self) -> None:
        bus = EventBus()
        gate = asyncio.Event()

        async def blocked(event: EventPayload) -> bool:
            await gate.wait()
            return True

        bus.subscribe(EVENT_NAME, blocked)
        bus.send(EventPayload(EVENT_NAME))

        self.assertEqual(bus.ongoing, 0)
        # Nothing tracked, so cleanup returns even though the handler is blocked.
        await asyncio.wait_for(bus.cleanup(), 1)
        gate.set()
        await asyncio.sleep(0.01)

    async def test_cleanup_never_raises_on_handler_failure(self) -> None:
        bus = EventBus()

        async def failing(event: EventPayload) -> bool:
            await asyncio.sleep(0)
            raise RuntimeError("boom")

        bus.subscribe(EVENT_NAME, failing)
        bus.send(EventPayload(EVENT_NAME), track=True)

        await bus.cleanup()
        self.assertEqual(bus.ongoing, 0)

    async def test_cleanup_is_idempotent(self) -> None:
        bus = EventBus()
        await bus.cleanup()
        await bus.cleanup()
        self.assertEqual(bus.ongoing, 0)

    async def test_sends_after_cleanup_started_stay_tracked(self) -> None:
        bus = EventBus()
        late_gate = asyncio.Event()

        async def first(event: EventPayload) -> bool:
            if event.data.get("late"):
                await late_gate.wait()
                return True
            await asyncio.sleep(0.01)
            # Enqueue a new tracked send while cleanup is draining.
            bus.send(EventPayload(EVENT_NAME, {"late": True}), track=True)
            return True

        bus.subscribe(EVENT_NAME, first)
        bus.send(EventPayload(EVENT_NAME), track=True)

        await asyncio.wait_for(bus.cleanup(), 1)
        self.assertEqual(bus.ongoing, 1)

        late_gate.set()
        await bus.cleanup()
        self.assertEqual(bus.ongoing, 0)


if __name__ == "__main__":
    unittest.main()

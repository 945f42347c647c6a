"""End-to-end scenarios through the process-wide bus."""

from __future__ import annotations

import unittest

from eventrelay import Event, Settlement, get_event_bus

EVENT_NAME = "E"
CLIENT_CREATED = "CLIENT_CREATED_EVENT"


class ClientCreatedEvent(Event):
    def __init__(self, data: dict[str, str]) -> None:
        super().__init__(CLIENT_CREATED, data)


class IntegrationTests(unittest.IsolatedAsyncioTestCase):
    """Subscribe, publish, and unsubscribe against the global bus."""

    async def asyncTearDown(self) -> None:
        bus = get_event_bus()
        bus.unsubscribe_all(EVENT_NAME)
        bus.unsubscribe_all(CLIENT_CREATED)
        await bus.cleanup()

    async def test_subscribe_publish_unsubscribe_cycle(self) -> None:
        bus = get_event_bus()

        def h1(event: Event) -> bool:
            return True

        def h2(event: Event) -> bool:
            return False

        bus.subscribe(EVENT_NAME, h1)
        bus.subscribe(EVENT_NAME, h2)

        self.assertEqual(
            await bus.publish(Event(EVENT_NAME, {"value": 1})),
            [Settlement.fulfill(True), Settlement.fulfill(False)],
        )

        bus.unsubscribe(EVENT_NAME, h1)
        self.assertEqual(
            await bus.publish(Event(EVENT_NAME, {"value": 2})),
            [Settlement.fulfill(False)],
        )

        bus.unsubscribe_all(EVENT_NAME)
        self.assertIsNone(await bus.publish(Event(EVENT_NAME, {"value": 3})))

    async def test_payload_subclass_reaches_every_handler(self) -> None:
        bus = get_event_bus()
        log_lines: list[str] = []
        queued: list[dict[str, str]] = []

        def logger(event: ClientCreatedEvent) -> bool:
            log_lines.append(f"Client {event.data['name']} ({event.data['email']}) created!")
            return True

        async def send_to_queue(event: ClientCreatedEvent) -> bool:
            queued.append(event.data)
            return True

        bus.subscribe(CLIENT_CREATED, logger)
        bus.subscribe(CLIENT_CREATED, send_to_queue)

        resolved = await bus.publish(
            ClientCreatedEvent({"name": "John Doe", "email": "john@gmail.com"})
        )

        self.assertEqual(log_lines, ["Client John Doe (john@gmail.com) created!"])
        self.assertEqual(queued, [{"name": "John Doe", "email": "john@gmail.com"}])
        self.assertEqual(resolved, [Settlement.fulfill(True), Settlement.fulfill(True)])


if __name__ == "__main__":
    unittest.main()

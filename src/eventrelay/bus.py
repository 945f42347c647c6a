"""Event bus for decoupled component communication.

Usage:
    bus = get_event_bus()

    async def on_user_created(event):
        print(f"Welcome {event.data['name']}")
        return True

    bus.subscribe("user.created", on_user_created)

    # Wait for every handler and inspect the outcome
    report = await bus.publish(EventPayload("user.created", {"name": "Ada"}))

    # Or fire and forget, keeping the task around for shutdown
    bus.send(EventPayload("user.created", {"name": "Bob"}), track=True)
    await bus.cleanup()
"""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import Any

from .config import BusConfig
from .dispatcher import EventDispatcher, SettlementReport
from .drivers import EventDriver, LocalEventDriver
from .exceptions import DriverNotFoundError, EventRelayError
from .handler import Handler, describe_handler
from .payload import EventPayload
from .task_manager import TaskManager

LOGGER = logging.getLogger(__name__)


class EventBus:
    """Routes subscriptions and deliveries to named drivers.

    Every bus starts with a ``LocalEventDriver`` registered under ``"local"``.
    Operations accept an optional ``driver`` keyword; when omitted the
    configured default driver is used.
    """

    def __init__(self, config: BusConfig | None = None) -> None:
        self._config = config or BusConfig()
        self._drivers: dict[str, EventDriver] = {}
        self._tasks = TaskManager()
        self.register(LocalEventDriver())

    @property
    def default_driver(self) -> str:
        return self._config.default_driver

    @property
    def drivers(self) -> tuple[str, ...]:
        """Names of the registered drivers."""
        return tuple(self._drivers)

    @property
    def ongoing(self) -> int:
        """Number of tracked ``send`` operations that have not settled yet."""
        return self._tasks.pending_count

    # -------------------------------------------------------------------------
    # Drivers
    # -------------------------------------------------------------------------

    def register(self, driver: EventDriver) -> None:
        """Register ``driver`` under its name, replacing any previous one."""
        replaced = driver.name in self._drivers
        self._drivers[driver.name] = driver
        LOGGER.debug(
            "bus.driver.registered",
            extra={
                "event": "bus.driver.registered",
                "driver": driver.name,
                "replaced": replaced,
            },
        )

    def _resolve(self, driver: str | None) -> EventDriver:
        name = driver if driver is not None else self._config.default_driver
        resolved = self._drivers.get(name)
        if resolved is None:
            raise DriverNotFoundError(name)
        return resolved

    # -------------------------------------------------------------------------
    # Subscription
    # -------------------------------------------------------------------------

    def subscribe(
        self, event_name: str, handler: Handler, *, driver: str | None = None
    ) -> bool:
        """Subscribe ``handler`` to ``event_name``.

        Args:
            event_name: Event to listen for (e.g., "user.created")
            handler: Sync or async callable receiving the payload
            driver: Driver name, defaults to the configured default

        Returns:
            ``False`` if this exact handler was already subscribed
        """
        target = self._resolve(driver)
        dispatcher = target.get(event_name)
        if dispatcher is None:
            target.set(event_name, EventDispatcher(event_name))
            # Re-read so a backend that kept an earlier entry wins.
            dispatcher = target.get(event_name)
            if dispatcher is None:
                raise EventRelayError(
                    f"Driver {target.name!r} did not store a dispatcher for {event_name!r}."
                )

        registered = dispatcher.register(handler)
        LOGGER.debug(
            "bus.subscribe",
            extra={
                "event": "bus.subscribe",
                "driver": target.name,
                "event_name": event_name,
                "handler": describe_handler(handler),
                "registered": registered,
            },
        )
        return registered

    def unsubscribe(
        self, event_name: str, handler: Handler, *, driver: str | None = None
    ) -> bool:
        """Remove ``handler`` from ``event_name``; ``False`` if it was not subscribed."""
        dispatcher = self._resolve(driver).get(event_name)
        if dispatcher is None:
            return False
        removed = dispatcher.unregister(handler)
        LOGGER.debug(
            "bus.unsubscribe",
            extra={
                "event": "bus.unsubscribe",
                "event_name": event_name,
                "handler": describe_handler(handler),
                "removed": removed,
            },
        )
        return removed

    def unsubscribe_all(self, event_name: str, *, driver: str | None = None) -> bool:
        """Remove every handler of ``event_name``; ``False`` if there were none."""
        dispatcher = self._resolve(driver).get(event_name)
        if dispatcher is None:
            return False
        return dispatcher.unregister_all()

    def has_subscribers(self, event_name: str, *, driver: str | None = None) -> bool:
        """Return whether at least one handler listens to ``event_name``."""
        dispatcher = self._resolve(driver).get(event_name)
        return dispatcher is not None and len(dispatcher) > 0

    # -------------------------------------------------------------------------
    # Delivery
    # -------------------------------------------------------------------------

    async def publish(
        self, payload: EventPayload[Any], *, driver: str | None = None
    ) -> SettlementReport | None:
        """Deliver ``payload`` and wait for every handler.

        Returns:
            One settlement per handler in subscription order, or ``None`` when
            nothing is listening to ``payload.name``
        """
        dispatcher = self._resolve(driver).get(payload.name)
        if dispatcher is None:
            LOGGER.debug(
                "bus.publish.no_dispatcher",
                extra={"event": "bus.publish.no_dispatcher", "event_name": payload.name},
            )
            return None
        return await dispatcher.dispatch(payload)

    def send(
        self,
        payload: EventPayload[Any],
        track: bool = False,
        *,
        driver: str | None = None,
    ) -> None:
        """Deliver ``payload`` in the background without waiting.

        Handler failures go to the driver's error hook. With ``track=True``
        the background task is counted by ``ongoing`` and awaited by
        ``cleanup()``. Must be called while an event loop is running.
        """
        target = self._resolve(driver)
        dispatcher = target.get(payload.name)
        if dispatcher is None:
            return

        loop = asyncio.get_running_loop()
        task = loop.create_task(
            self._deliver(target, dispatcher, payload),
            name=f"eventrelay.send:{payload.name}:{payload.id}",
        )
        self._tasks.add(task, tracked=track)

    async def _deliver(
        self,
        target: EventDriver,
        dispatcher: EventDispatcher,
        payload: EventPayload[Any],
    ) -> None:
        report = await dispatcher.dispatch(payload)
        if not report:
            return
        for settlement in report:
            if not settlement.rejected or settlement.reason is None:
                continue
            LOGGER.warning(
                "bus.send.handler_failed",
                extra={
                    "event": "bus.send.handler_failed",
                    "driver": target.name,
                    "event_name": payload.name,
                    "payload_id": payload.id,
                    "error_type": type(settlement.reason).__name__,
                    "error": str(settlement.reason),
                },
            )
            try:
                target.error(settlement.reason)
            except Exception as exc:
                LOGGER.warning(
                    "bus.send.error_hook_failed",
                    extra={
                        "event": "bus.send.error_hook_failed",
                        "driver": target.name,
                        "error_type": type(exc).__name__,
                        "error": str(exc),
                    },
                )

    async def cleanup(self) -> None:
        """Wait until every tracked ``send`` pending right now has settled.

        Never raises for handler failures. A handler that never finishes
        blocks this call forever; there is no timeout at this layer.
        """
        drained = await self._tasks.drain()
        if drained:
            LOGGER.debug(
                "bus.cleanup.drained",
                extra={"event": "bus.cleanup.drained", "count": drained},
            )


# =============================================================================
# Global Instance
# =============================================================================

_event_bus: EventBus | None = None
_event_bus_lock = threading.Lock()


def get_event_bus() -> EventBus:
    """Get or create the process-wide event bus instance."""
    global _event_bus
    if _event_bus is None:
        with _event_bus_lock:
            if _event_bus is None:
                _event_bus = EventBus()
    return _event_bus

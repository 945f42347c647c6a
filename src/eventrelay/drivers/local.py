"""In-memory driver backed by a plain dict."""

from __future__ import annotations

import logging

from ..dispatcher import EventDispatcher
from .base import EventDriver

LOGGER = logging.getLogger(__name__)


class LocalEventDriver(EventDriver):
    """Process-local dispatcher registry, registered on every bus as ``"local"``."""

    def __init__(self, name: str = "local") -> None:
        super().__init__(name)
        self._dispatchers: dict[str, EventDispatcher] = {}

    def set(self, event_name: str, dispatcher: EventDispatcher) -> None:
        if event_name in self._dispatchers:
            return
        self._dispatchers[event_name] = dispatcher
        LOGGER.debug(
            "driver.dispatcher.set",
            extra={
                "event": "driver.dispatcher.set",
                "driver": self.name,
                "event_name": event_name,
            },
        )

    def get(self, event_name: str) -> EventDispatcher | None:
        return self._dispatchers.get(event_name)

    def has(self, event_name: str) -> bool:
        return event_name in self._dispatchers

    def size(self) -> int:
        return len(self._dispatchers)

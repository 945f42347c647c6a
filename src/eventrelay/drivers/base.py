"""Driver interface: a named registry of dispatchers.

A driver maps event names to ``EventDispatcher`` objects. The bus routes
every operation to a driver by name, so a different storage backend only
needs to satisfy this contract.

Usage:
    class ShardedDriver(EventDriver):
        def __init__(self):
            super().__init__("sharded")
            ...

    bus.register(ShardedDriver())
    bus.subscribe("order.placed", handler, driver="sharded")
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable

from ..dispatcher import EventDispatcher


ErrorCallback = Callable[[BaseException], None]


class EventDriver(ABC):
    """Base class for dispatcher registries."""

    def __init__(self, name: str) -> None:
        if not isinstance(name, str) or not name.strip():
            raise ValueError("Driver name must be a non-empty string.")
        self._name = name
        self._error_callback: ErrorCallback | None = None

    @property
    def name(self) -> str:
        """Routing key used by the bus."""
        return self._name

    @abstractmethod
    def set(self, event_name: str, dispatcher: EventDispatcher) -> None:
        """Store ``dispatcher`` under ``event_name`` unless one is already stored."""

    @abstractmethod
    def get(self, event_name: str) -> EventDispatcher | None:
        """Return the dispatcher for ``event_name`` or ``None``."""

    @abstractmethod
    def has(self, event_name: str) -> bool:
        """Return whether a dispatcher is stored for ``event_name``."""

    @abstractmethod
    def size(self) -> int:
        """Return the number of stored dispatchers."""

    def on_error(self, callback: ErrorCallback | None) -> None:
        """Install the callback receiving fire-and-forget failures.

        Only one callback is kept; passing ``None`` removes it.
        """
        self._error_callback = callback

    def error(self, exc: BaseException) -> None:
        """Forward ``exc`` to the error callback, if any."""
        if self._error_callback is None:
            return
        self._error_callback(exc)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self._name!r}, size={self.size()})"

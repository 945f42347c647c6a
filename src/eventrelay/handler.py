"""Handler capability type and the optional class-based handler base.

A handler is anything callable with a single payload argument that returns a
``bool`` or an awaitable resolving to one:

    def audit(event): ...
    async def notify(event): ...

    class SendWelcomeMail(EventHandler):
        async def handle(self, event):
            ...
            return True

Handlers are always compared by identity, so two instances of
``SendWelcomeMail`` are two separate registrations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import Any

from .payload import EventPayload

Handler = Callable[[EventPayload[Any]], bool | Awaitable[bool]]


class EventHandler(ABC):
    """Base class for handlers that prefer a ``handle`` method."""

    @abstractmethod
    def handle(self, event: EventPayload[Any]) -> bool | Awaitable[bool]:
        """Handle the event, returning (or resolving to) a success flag."""

    def __call__(self, event: EventPayload[Any]) -> bool | Awaitable[bool]:
        return self.handle(event)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} at {id(self):#x}>"


def describe_handler(handler: Any) -> str:
    """Return a short human readable name for logs."""
    name = getattr(handler, "__qualname__", None) or getattr(handler, "__name__", None)
    if name:
        return str(name)
    return type(handler).__name__

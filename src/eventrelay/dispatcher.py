"""Per-event handler registry and fan-out.

An ``EventDispatcher`` serves exactly one event name. Dispatching starts
every registered handler, waits for all of them, and reports one
``Settlement`` per handler in registration order. A failing handler never
stops its siblings.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
import inspect
import logging
from typing import Any, Literal

from .exceptions import HandlerValidationError
from .handler import Handler, describe_handler
from .payload import EventPayload

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settlement:
    """Outcome of one handler for one dispatch."""

    status: Literal["fulfilled", "rejected"]
    value: bool | None = None
    reason: BaseException | None = None

    @classmethod
    def fulfill(cls, value: bool) -> Settlement:
        return cls(status="fulfilled", value=value)

    @classmethod
    def reject(cls, reason: BaseException) -> Settlement:
        return cls(status="rejected", reason=reason)

    @property
    def fulfilled(self) -> bool:
        return self.status == "fulfilled"

    @property
    def rejected(self) -> bool:
        return self.status == "rejected"


SettlementReport = list[Settlement]


class EventDispatcher:
    """Ordered, identity-unique set of handlers for a single event name."""

    def __init__(self, name: str) -> None:
        if not isinstance(name, str) or not name.strip():
            raise ValueError("Dispatcher name must be a non-empty string.")
        self._name = name
        self._handlers: list[Handler] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def handlers(self) -> tuple[Handler, ...]:
        """Snapshot of the registered handlers in call order."""
        return tuple(self._handlers)

    def __len__(self) -> int:
        return len(self._handlers)

    def __contains__(self, handler: object) -> bool:
        return self._index_of(handler) != -1

    def __repr__(self) -> str:
        return f"EventDispatcher(name={self._name!r}, handlers={len(self._handlers)})"

    def _index_of(self, handler: object) -> int:
        for index, registered in enumerate(self._handlers):
            if registered is handler:
                return index
        return -1

    def register(self, handler: Handler) -> bool:
        """Append ``handler``; return ``False`` if this exact object is already registered."""
        if not callable(handler):
            raise HandlerValidationError(
                f"Handler for {self._name!r} must be callable, got {type(handler).__name__}."
            )
        if self._index_of(handler) != -1:
            return False
        self._handlers.append(handler)
        return True

    def unregister(self, handler: Handler) -> bool:
        """Remove ``handler``; return ``False`` if it was not registered."""
        index = self._index_of(handler)
        if index == -1:
            return False
        del self._handlers[index]
        return True

    def unregister_all(self) -> bool:
        """Drop every handler; return ``False`` if there was nothing to drop."""
        if not self._handlers:
            return False
        self._handlers.clear()
        return True

    async def dispatch(self, payload: EventPayload[Any]) -> SettlementReport | None:
        """Deliver ``payload`` to every handler and collect their outcomes.

        Returns ``None`` when nothing was delivered: the payload belongs to a
        different event or no handler is registered.
        """
        if payload.name != self._name:
            LOGGER.debug(
                "dispatcher.mismatch",
                extra={
                    "event": "dispatcher.mismatch",
                    "dispatcher": self._name,
                    "payload_name": payload.name,
                },
            )
            return None

        handlers = list(self._handlers)
        if not handlers:
            return None

        # gather() keeps results positional, so the report follows
        # registration order whatever the completion order.
        return list(
            await asyncio.gather(*(self._settle(handler, payload) for handler in handlers))
        )

    async def _settle(self, handler: Handler, payload: EventPayload[Any]) -> Settlement:
        try:
            result = handler(payload)
            if inspect.isawaitable(result):
                result = await result
        except asyncio.CancelledError as exc:
            # Cancellation aimed at this dispatch propagates; a handler that
            # merely raised it (or awaited a cancelled future) is a failure.
            task = asyncio.current_task()
            if task is not None and task.cancelling():
                raise
            return self._reject(handler, payload, exc)
        except Exception as exc:
            return self._reject(handler, payload, exc)
        return Settlement.fulfill(bool(result))

    def _reject(
        self, handler: Handler, payload: EventPayload[Any], exc: BaseException
    ) -> Settlement:
        LOGGER.debug(
            "dispatcher.handler.rejected",
            extra={
                "event": "dispatcher.handler.rejected",
                "dispatcher": self._name,
                "handler": describe_handler(handler),
                "payload_id": payload.id,
                "error_type": type(exc).__name__,
                "error": str(exc),
            },
        )
        return Settlement.reject(exc)

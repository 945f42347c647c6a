"""Domain exception hierarchy for the event relay bus."""

from __future__ import annotations


class EventRelayError(RuntimeError):
    """Base class for all event relay errors."""


class DriverNotFoundError(EventRelayError):
    """Raised when an operation names a driver that was never registered."""

    def __init__(self, driver_name: str) -> None:
        super().__init__(f"Event driver {driver_name!r} not found.")
        self.driver_name = driver_name


class HandlerValidationError(EventRelayError):
    """Raised when a non-callable is registered as an event handler."""


class ConfigValidationError(EventRelayError):
    """Raised when configuration cannot be validated safely."""

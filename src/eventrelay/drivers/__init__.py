"""Dispatcher registries the bus can route to."""

from .base import ErrorCallback, EventDriver
from .local import LocalEventDriver

__all__ = ["ErrorCallback", "EventDriver", "LocalEventDriver"]

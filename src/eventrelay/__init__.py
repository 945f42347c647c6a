"""In-process publish/subscribe event bus with pluggable drivers."""

from __future__ import annotations

from importlib import import_module
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .bus import EventBus, get_event_bus
    from .config import BusConfig, load_bus_config, load_config
    from .dispatcher import EventDispatcher, Settlement, SettlementReport
    from .drivers import EventDriver, LocalEventDriver
    from .exceptions import (
        ConfigValidationError,
        DriverNotFoundError,
        EventRelayError,
        HandlerValidationError,
    )
    from .handler import EventHandler, Handler
    from .logging_utils import configure_logging
    from .payload import Event, EventPayload

__version__ = "0.1.0"

_EXPORTS: dict[str, str] = {
    "BusConfig": ".config",
    "ConfigValidationError": ".exceptions",
    "DriverNotFoundError": ".exceptions",
    "Event": ".payload",
    "EventBus": ".bus",
    "EventDispatcher": ".dispatcher",
    "EventDriver": ".drivers",
    "EventHandler": ".handler",
    "EventPayload": ".payload",
    "EventRelayError": ".exceptions",
    "Handler": ".handler",
    "HandlerValidationError": ".exceptions",
    "LocalEventDriver": ".drivers",
    "Settlement": ".dispatcher",
    "SettlementReport": ".dispatcher",
    "configure_logging": ".logging_utils",
    "get_event_bus": ".bus",
    "load_bus_config": ".config",
    "load_config": ".config",
}

__all__ = sorted(_EXPORTS)


def __getattr__(name: str) -> Any:
    """Lazily import symbols so ``import eventrelay`` stays cheap."""
    module_name = _EXPORTS.get(name)
    if module_name is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    return getattr(import_module(module_name, __name__), name)

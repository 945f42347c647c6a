"""Immutable event payloads."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Generic, TypeVar
from uuid import uuid4

D = TypeVar("D")


def _new_id() -> str:
    return uuid4().hex


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, eq=False)
class EventPayload(Generic[D]):
    """One occurrence of a named event.

    ``data`` is opaque to the bus. ``id`` and ``issued_at`` are filled in at
    construction and never change afterwards. Payloads compare and hash by
    identity, whatever ``data`` holds.
    """

    name: str
    data: D = field(default_factory=dict)  # type: ignore[assignment]
    id: str = field(default_factory=_new_id)
    issued_at: datetime = field(default_factory=_utc_now)

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValueError("Event name must be a non-empty string.")

    def to_dict(self) -> dict[str, Any]:
        """Return a plain dict view, mostly useful for logging."""
        return {
            "id": self.id,
            "name": self.name,
            "data": self.data,
            "issued_at": self.issued_at.isoformat(),
        }


# Short alias used by application code: ``Event("user.created", {...})``.
Event = EventPayload

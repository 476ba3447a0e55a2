"""Domain events primitives for the modular monolith."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from typing import Any, ClassVar, Dict
from uuid import UUID, uuid4

_ENVELOPE_FIELDS = frozenset({"aggregate_id", "event_id", "occurred_on"})


@dataclass(frozen=True)
class DomainEvent:
    """Base domain event (immutable).

    Subclasses declare ``event_type`` (the routing key used by the bus),
    ``aggregate_key`` (the name the aggregate id takes in the payload)
    and add their payload fields as keyword-only dataclass fields.
    """

    event_type: ClassVar[str] = "domain.event"
    aggregate_key: ClassVar[str] = "aggregate_id"

    aggregate_id: str
    event_id: UUID = field(default_factory=uuid4)
    occurred_on: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def payload(self) -> Dict[str, Any]:
        """Return the event-specific data, keyed for consumers."""
        data: Dict[str, Any] = {self.aggregate_key: self.aggregate_id}
        for f in fields(self):
            if f.name not in _ENVELOPE_FIELDS:
                data[f.name] = getattr(self, f.name)
        return data

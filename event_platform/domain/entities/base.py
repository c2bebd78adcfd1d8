"""
Base classes for domain entities.

Pure Python classes with no framework dependencies.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import UUID, uuid4


def utc_now() -> datetime:
    """Return current UTC timestamp."""
    return datetime.now(timezone.utc)


@dataclass
class DomainEvent(ABC):
    """
    Base class for all domain events.

    Events are named in past tense and dispatched after the change that
    raised them has been committed.
    """
    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=utc_now)

    @property
    @abstractmethod
    def event_type(self) -> str:
        """Return the type name of this event."""
        pass

    def to_dict(self) -> Dict[str, Any]:
        """Serialize event to dictionary for publishing."""
        return {
            'event_id': str(self.event_id),
            'event_type': self.event_type,
            'occurred_at': self.occurred_at.isoformat(),
            'data': self._get_event_data()
        }

    @abstractmethod
    def _get_event_data(self) -> Dict[str, Any]:
        """Return event-specific data for serialization."""
        pass


@dataclass
class Entity(ABC):
    """
    Base class for entities, compared by identifier rather than by value.
    """
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=utc_now)
    updated_at: Optional[datetime] = field(default=None)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Entity):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def mark_updated(self) -> None:
        """Mark entity as updated with current timestamp."""
        self.updated_at = utc_now()


@dataclass(eq=False)
class AggregateRoot(Entity):
    """
    Entry point of an aggregate.

    Collects domain events raised by its methods until the application layer
    drains them with ``clear_domain_events`` after a commit.
    """
    _domain_events: List[DomainEvent] = field(default_factory=list, repr=False, compare=False)

    def add_domain_event(self, event: DomainEvent) -> None:
        """Queue a domain event to be dispatched after persistence."""
        self._domain_events.append(event)

    def clear_domain_events(self) -> List[DomainEvent]:
        """Clear and return all pending domain events."""
        events = self._domain_events.copy()
        self._domain_events.clear()
        return events

    @property
    def domain_events(self) -> List[DomainEvent]:
        """Return pending domain events (read-only view)."""
        return self._domain_events.copy()


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for immutable objects defined by their attributes.

    Subclasses are declared with ``@dataclass(frozen=True)``.
    """

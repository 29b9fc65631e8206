"""
Aseel Digital Twin — Stores
Twin and event store interfaces, with in-memory implementations.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Union

from ..core.events import BirdEvent, BirdEventType
from ..core.twin import DigitalTwin


class TwinStore(ABC):
    """Keyed storage of the latest twin snapshot per bird."""

    @abstractmethod
    def get(self, bird_id: str) -> Optional[DigitalTwin]:
        """Latest snapshot for a bird, None if unknown."""
        pass

    @abstractmethod
    def save(self, twin: DigitalTwin) -> None:
        """Insert or replace the snapshot for twin.bird_id."""
        pass

    @abstractmethod
    def list_by_owner(self, owner_id: str) -> List[DigitalTwin]:
        """Active (not soft-deleted) twins for an owner."""
        pass


class EventStore(ABC):
    """Append-only event log."""

    @abstractmethod
    def append(self, event: BirdEvent) -> None:
        pass

    @abstractmethod
    def latest(self, bird_id: str, event_type: Union[BirdEventType, str]) -> Optional[BirdEvent]:
        """Most recent event of a type for a bird, None if there is none."""
        pass


class InMemoryTwinStore(TwinStore):
    """Dictionary-backed twin store, keeps soft-deleted twins."""

    def __init__(self):
        self.twins: Dict[str, DigitalTwin] = {}

    def get(self, bird_id: str) -> Optional[DigitalTwin]:
        return self.twins.get(bird_id)

    def save(self, twin: DigitalTwin) -> None:
        self.twins[twin.bird_id] = twin

    def list_by_owner(self, owner_id: str) -> List[DigitalTwin]:
        return [t for t in self.twins.values() if t.owner_id == owner_id and not t.is_deleted]

    def __len__(self) -> int:
        return len(self.twins)


class InMemoryEventStore(EventStore):
    """List-backed event log with per-bird lookup for inspection."""

    def __init__(self):
        self.events: List[BirdEvent] = []

    def append(self, event: BirdEvent) -> None:
        self.events.append(event)

    def events_for(self, bird_id: str) -> List[BirdEvent]:
        """Events logged for one bird, oldest first."""
        return [e for e in self.events if e.bird_id == bird_id]

    def latest(self, bird_id: str, event_type: Union[BirdEventType, str]) -> Optional[BirdEvent]:
        matches = [e for e in self.events_for(bird_id) if e.event_type == event_type]
        return max(matches, key=lambda e: e.event_date) if matches else None

    def __len__(self) -> int:
        return len(self.events)

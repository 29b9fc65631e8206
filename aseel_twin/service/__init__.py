"""
Aseel Digital Twin — Service Module
Stores and the orchestration service that persists engine results.
"""

from .store import TwinStore, EventStore, InMemoryTwinStore, InMemoryEventStore
from .twin_service import DigitalTwinService, BirthRecord, BatchResult, ManualGrading, EVENT_SCORE_DELTAS

__all__ = [
    # Stores
    "TwinStore",
    "EventStore",
    "InMemoryTwinStore",
    "InMemoryEventStore",

    # Service
    "DigitalTwinService",
    "BirthRecord",
    "BatchResult",
    "ManualGrading",
    "EVENT_SCORE_DELTAS",
]

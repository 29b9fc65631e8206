"""
Aseel Digital Twin — Bird Events
Append-only facts recorded against a twin (audit trail).
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Union
from enum import Enum
import uuid


class BirdEventType(str, Enum):
    """Kinds of facts that can be logged for a bird."""
    STAGE_TRANSITION = "STAGE_TRANSITION"
    WEIGHT_RECORDED = "WEIGHT_RECORDED"
    TRAIT_RECORDED = "TRAIT_RECORDED"

    # Performance
    FIGHT_WIN = "FIGHT_WIN"
    FIGHT_LOSS = "FIGHT_LOSS"
    FIGHT_DRAW = "FIGHT_DRAW"
    SHOW_RESULT = "SHOW_RESULT"

    # Health
    INJURY = "INJURY"
    RECOVERY = "RECOVERY"
    VACCINATION = "VACCINATION"

    # Breeding
    BREEDING_SUCCESS = "BREEDING_SUCCESS"
    BREEDING_FAILURE = "BREEDING_FAILURE"

    MORPHOLOGY_GRADING = "MORPHOLOGY_GRADING"

    @classmethod
    def parse(cls, value: Union["BirdEventType", str, None]) -> Optional["BirdEventType"]:
        """Resolve a stored event type, None if it is not recognised."""
        if isinstance(value, cls):
            return value
        if not value:
            return None
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            return None


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class BirdEvent:
    """
    A single immutable fact about a bird.

    event_type keeps unrecognised strings verbatim so that events written
    by newer clients survive a round trip.
    """
    bird_id: str
    event_type: Union[BirdEventType, str]
    event_date: datetime = field(default_factory=utc_now)
    owner_id: Optional[str] = None
    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    age_days_at_event: Optional[int] = None
    lifecycle_stage_at_event: Optional[str] = None

    title: str = ""
    description: Optional[str] = None

    # Payloads
    numeric_value: Optional[float] = None
    string_value: Optional[str] = None

    # Score impact deltas
    morphology_delta: Optional[int] = None
    performance_delta: Optional[int] = None
    health_delta: Optional[int] = None
    market_delta: Optional[int] = None

    def __post_init__(self):
        known = BirdEventType.parse(self.event_type)
        if known is not None:
            object.__setattr__(self, "event_type", known)

    @property
    def known_type(self) -> Optional[BirdEventType]:
        return BirdEventType.parse(self.event_type)

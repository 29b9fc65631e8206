"""
Aseel Digital Twin — Twin Snapshot
The single identity record for one physical bird.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Optional, TYPE_CHECKING
from enum import Enum
import logging

from .events import utc_now
from .stages import LifecycleStage

if TYPE_CHECKING:
    from ..genetics.alleles import GeneticProfile

logger = logging.getLogger(__name__)


class Gender(str, Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"


class HealthStatus(str, Enum):
    """Health status values as persisted on the twin."""
    HEALTHY = "HEALTHY"
    OK = "OK"
    RECOVERING = "RECOVERING"
    INJURED = "INJURED"
    SICK = "SICK"


class BreedingStatus(str, Enum):
    NONE = "NONE"
    ACTIVE = "ACTIVE"
    PROVEN = "PROVEN"
    RETIRED = "RETIRED"


class CertificationLevel(str, Enum):
    NONE = "NONE"
    REGISTERED = "REGISTERED"
    VERIFIED = "VERIFIED"
    CHAMPION = "CHAMPION"


FIT_STATUSES = (HealthStatus.HEALTHY.value, HealthStatus.OK.value)
ACTIVE_INJURY_STATUSES = (HealthStatus.INJURED.value, HealthStatus.SICK.value)


def normalize_label(value: Optional[str]) -> str:
    """Upper-case a stored enum-like string; None becomes ''."""
    return value.strip().upper() if value else ""


@dataclass(frozen=True)
class DigitalTwin:
    """
    Immutable snapshot of a bird's Digital Twin.

    Engines never mutate a twin: every update goes through with_changes(),
    which returns a new snapshot. Enum-like fields hold plain strings so
    values written by older or newer clients are preserved.
    """
    twin_id: str
    bird_id: str
    owner_id: str

    # Identity
    registry_id: Optional[str] = None
    bird_name: Optional[str] = None
    base_breed: str = "Aseel"
    strain_type: Optional[str] = None

    # Lifecycle
    birth_date: Optional[datetime] = None
    gender: Optional[str] = None
    age_days: Optional[int] = None
    lifecycle_stage: str = LifecycleStage.CHICK.name
    maturity_score: Optional[int] = None

    # Morphology
    weight_kg: Optional[float] = None
    height_cm: Optional[float] = None
    bone_density_score: Optional[int] = None
    morphology_score: Optional[int] = None

    # Genetics
    sire_id: Optional[str] = None
    dam_id: Optional[str] = None
    generation_depth: int = 0
    inbreeding_coefficient: Optional[float] = None
    genetic_purity_score: Optional[int] = None
    total_offspring: int = 0
    genetic_profile: Optional["GeneticProfile"] = None
    genetics_score: Optional[int] = None

    # Performance
    total_fights: int = 0
    fight_wins: int = 0
    total_shows: int = 0
    show_wins: int = 0
    best_placement: Optional[int] = None
    aggression_index: Optional[int] = None
    endurance_score: Optional[int] = None
    intelligence_score: Optional[int] = None
    performance_score: Optional[int] = None

    # Health
    current_health_status: str = HealthStatus.HEALTHY.value
    vaccination_count: int = 0
    injury_count: int = 0
    stamina_score: Optional[int] = None
    health_score: Optional[int] = None

    # Breeding
    breeding_status: str = BreedingStatus.NONE.value
    total_breeding_attempts: int = 0
    successful_breedings: int = 0

    # Market
    certification_level: str = CertificationLevel.NONE.value
    valuation_score: Optional[int] = None
    estimated_value: Optional[float] = None

    # Audit
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)
    is_deleted: bool = False
    deleted_at: Optional[datetime] = None

    def with_changes(self, **changes) -> "DigitalTwin":
        """Return a copy of this snapshot with the given fields replaced."""
        return replace(self, **changes)

    def soft_deleted(self, now: Optional[datetime] = None) -> "DigitalTwin":
        now = now or utc_now()
        return self.with_changes(is_deleted=True, deleted_at=now, updated_at=now)

    def stage(self) -> Optional[LifecycleStage]:
        """Resolve the stored stage name; unknown names give None."""
        stage = LifecycleStage.from_name(self.lifecycle_stage)
        if stage is None and self.lifecycle_stage:
            logger.warning(f"{self.bird_id}: unknown lifecycle stage '{self.lifecycle_stage}'")
        return stage

    @property
    def is_male(self) -> bool:
        # Gender defaults to male when not recorded
        return normalize_label(self.gender) != Gender.FEMALE.value

    @property
    def health_label(self) -> str:
        return normalize_label(self.current_health_status)

    @property
    def is_fit(self) -> bool:
        return self.health_label in FIT_STATUSES

    @property
    def is_registered(self) -> bool:
        return normalize_label(self.certification_level) not in ("", CertificationLevel.NONE.value)

    @property
    def is_verified(self) -> bool:
        return normalize_label(self.certification_level) in (
            CertificationLevel.VERIFIED.value, CertificationLevel.CHAMPION.value)

    @property
    def is_champion(self) -> bool:
        return normalize_label(self.certification_level) == CertificationLevel.CHAMPION.value

    @property
    def fight_win_rate(self) -> float:
        return self.fight_wins / self.total_fights if self.total_fights > 0 else 0.0

    @property
    def show_win_rate(self) -> float:
        return self.show_wins / self.total_shows if self.total_shows > 0 else 0.0

    @property
    def breeding_success_rate(self) -> float:
        if self.total_breeding_attempts <= 0:
            return 0.0
        return self.successful_breedings / self.total_breeding_attempts

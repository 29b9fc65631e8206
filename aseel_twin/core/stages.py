"""
Aseel Digital Twin — Lifecycle Stages
Seven-stage life taxonomy with age windows and capability gates.
"""

from dataclasses import dataclass
from typing import Dict, Optional
from enum import Enum

from ..config import LIFECYCLE, LifecycleConfig


class LifecycleStage(Enum):
    """Biological life stages of an Aseel bird, in age order."""
    EGG = 0
    CHICK = 1
    GROWER = 2
    PRE_ADULT = 3
    ADULT_FIGHTER = 4
    BREEDER_PRIME = 5
    SENIOR = 6

    @property
    def ordinal(self) -> int:
        return self.value

    @property
    def spec(self) -> "StageSpec":
        return STAGE_SPECS[self]

    @property
    def display_name(self) -> str:
        return self.spec.display_name

    @property
    def min_days(self) -> int:
        return self.spec.min_days

    @property
    def max_days(self) -> Optional[int]:
        return self.spec.max_days

    @property
    def can_measure_morphology(self) -> bool:
        return self.spec.can_measure_morphology

    @property
    def can_measure_performance(self) -> bool:
        return self.spec.can_measure_performance

    @property
    def is_breeding_eligible(self) -> bool:
        return self.spec.is_breeding_eligible

    @property
    def has_decline_factors(self) -> bool:
        return self.spec.has_decline_factors

    @property
    def is_show_eligible(self) -> bool:
        return self.spec.is_show_eligible

    @classmethod
    def from_name(cls, name: Optional[str]) -> Optional["LifecycleStage"]:
        """Look up a stage by its stored name. Unknown names give None."""
        if not name:
            return None
        return cls.__members__.get(name.strip().upper())


@dataclass(frozen=True)
class StageSpec:
    """Static parameters for one lifecycle stage."""
    display_name: str
    min_days: int
    max_days: Optional[int]   # None = open-ended

    can_measure_morphology: bool = False
    can_measure_performance: bool = False
    is_breeding_eligible: bool = False
    has_decline_factors: bool = False
    is_show_eligible: bool = False


def _build_stage_specs(config: LifecycleConfig) -> Dict[LifecycleStage, StageSpec]:
    return {
        LifecycleStage.EGG: StageSpec(
            display_name="Egg",
            min_days=0,
            max_days=config.egg_incubation_days,
        ),
        LifecycleStage.CHICK: StageSpec(
            display_name="Chick",
            min_days=0,
            max_days=config.grower_start_days,
        ),
        LifecycleStage.GROWER: StageSpec(
            display_name="Grower",
            min_days=config.grower_start_days,
            max_days=config.pre_adult_start_days,
            can_measure_morphology=True,
        ),
        LifecycleStage.PRE_ADULT: StageSpec(
            display_name="Pre-Adult",
            min_days=config.pre_adult_start_days,
            max_days=config.adult_fighter_start_days,
            can_measure_morphology=True,
        ),
        LifecycleStage.ADULT_FIGHTER: StageSpec(
            display_name="Adult Fighter",
            min_days=config.adult_fighter_start_days,
            max_days=config.breeder_prime_start_days,
            can_measure_morphology=True,
            can_measure_performance=True,
            is_show_eligible=True,
        ),
        LifecycleStage.BREEDER_PRIME: StageSpec(
            display_name="Breeder Prime",
            min_days=config.breeder_prime_start_days,
            max_days=config.senior_start_days,
            can_measure_morphology=True,
            can_measure_performance=True,
            is_breeding_eligible=True,
            is_show_eligible=True,
        ),
        LifecycleStage.SENIOR: StageSpec(
            display_name="Senior",
            min_days=config.senior_start_days,
            max_days=None,
            can_measure_morphology=True,
            can_measure_performance=True,
            is_breeding_eligible=True,
            has_decline_factors=True,
        ),
    }


STAGE_SPECS: Dict[LifecycleStage, StageSpec] = _build_stage_specs(LIFECYCLE)


def stage_specs(config: LifecycleConfig = LIFECYCLE) -> Dict[LifecycleStage, StageSpec]:
    """Stage table for a lifecycle config. Non-default configs get their own age windows."""
    if config is LIFECYCLE:
        return STAGE_SPECS
    return _build_stage_specs(config)


def stage_from_age(age_days: int, is_male: bool, is_egg: bool = False,
                   config: LifecycleConfig = LIFECYCLE) -> LifecycleStage:
    """
    Resolve the lifecycle stage for an age in days.

    Hens enter BREEDER_PRIME at female_breeder_start_days, ahead of cocks,
    so that branch is checked before the generic adult thresholds.
    """
    if age_days < 0:
        raise ValueError(f"age_days must be non-negative, got {age_days}")

    if is_egg and age_days <= config.egg_incubation_days:
        return LifecycleStage.EGG
    if age_days < config.grower_start_days:
        return LifecycleStage.CHICK
    if age_days < config.pre_adult_start_days:
        return LifecycleStage.GROWER
    if age_days < config.adult_fighter_start_days:
        return LifecycleStage.PRE_ADULT
    if not is_male and config.female_breeder_start_days <= age_days < config.senior_start_days:
        return LifecycleStage.BREEDER_PRIME
    if age_days < config.breeder_prime_start_days:
        return LifecycleStage.ADULT_FIGHTER
    if age_days < config.senior_start_days:
        return LifecycleStage.BREEDER_PRIME
    return LifecycleStage.SENIOR


def next_stage(stage: LifecycleStage) -> Optional[LifecycleStage]:
    """Stage following the given one, None at the terminal stage."""
    if stage.ordinal + 1 >= len(LifecycleStage):
        return None
    return LifecycleStage(stage.ordinal + 1)


def days_until_next_transition(age_days: int, is_male: bool, is_egg: bool = False,
                               config: LifecycleConfig = LIFECYCLE) -> Optional[int]:
    """
    Days until this bird enters its next stage, None if terminal.

    Counts to the age this bird actually leaves its current stage rather than
    the next stage's generic entry age: an egg counts to hatch day
    (egg_incubation_days) and a hen in ADULT_FIGHTER counts to
    female_breeder_start_days (540 by default, not 730).
    """
    current = stage_from_age(age_days, is_male, is_egg, config)
    following = next_stage(current)
    if following is None:
        return None

    specs = stage_specs(config)
    if current == LifecycleStage.EGG:
        threshold = config.egg_incubation_days
    elif following == LifecycleStage.BREEDER_PRIME and not is_male:
        threshold = config.female_breeder_start_days
    else:
        threshold = specs[following].min_days
    return max(0, threshold - age_days)

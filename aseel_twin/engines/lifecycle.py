"""
Aseel Digital Twin — Lifecycle Engine

7-stage lifecycle state machine for Aseel birds:
- Current stage from birth date and gender
- Stage transition detection, logged as BirdEvents
- Capability gates (what can be measured at each stage)
- Next-transition prediction
- Decline factors for Senior birds
- Maturity score against the breed standard
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional
import logging

from ..config import LIFECYCLE, LifecycleConfig
from ..core.events import BirdEvent, BirdEventType, utc_now
from ..core.stages import (
    LifecycleStage,
    stage_from_age,
    stage_specs,
    next_stage,
    days_until_next_transition,
)
from ..core.twin import DigitalTwin

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransitionInfo:
    """What happens at a bird's next stage transition."""
    current_stage: LifecycleStage
    next_stage: LifecycleStage
    days_remaining: int
    current_age_days: int
    capabilities_unlocked: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class LifecycleUpdate:
    """Result of evaluating a twin: the new snapshot plus any emitted events."""
    twin: DigitalTwin
    events: List[BirdEvent] = field(default_factory=list)

    @property
    def stage_changed(self) -> bool:
        return any(e.known_type == BirdEventType.STAGE_TRANSITION for e in self.events)


def age_in_days(birth_date: datetime, now: datetime) -> int:
    """Whole days elapsed since birth. A future birth date is rejected."""
    age_days = (now - birth_date).days
    if age_days < 0:
        raise ValueError(f"birth date {birth_date.isoformat()} is after {now.isoformat()}")
    return age_days


def format_age(age_days: int) -> str:
    """Format an age in days the way breeders talk about it."""
    if age_days < 0:
        raise ValueError(f"age_days must be non-negative, got {age_days}")
    if age_days < 7:
        return f"{age_days} days"
    if age_days < 30:
        return f"{age_days // 7} weeks"
    if age_days < 365:
        months = age_days // 30
        weeks = (age_days % 30) // 7
        return f"{months} months {weeks} weeks" if weeks > 0 else f"{months} months"

    years = age_days // 365
    months = (age_days % 365) // 30
    year_label = f"{years} year{'s' if years > 1 else ''}"
    if months > 0:
        return f"{year_label} {months} month{'s' if months > 1 else ''}"
    return year_label


def maturity_score(twin: DigitalTwin, stage: LifecycleStage, age_days: int,
                   config: LifecycleConfig = LIFECYCLE) -> int:
    """
    How close a bird is to the breed standard for its current stage (0-100).

    - Up to 40 points from progress through the stage's age window
    - Up to 30 points from weight relative to the stage ideal
    - Up to 30 points from the morphology score
    """
    window = stage_specs(config)[stage]
    stage_min = window.min_days
    stage_max = window.max_days if window.max_days is not None else stage_min + config.open_stage_window_days
    span = stage_max - stage_min
    progress = (age_days - stage_min) / span if span > 0 else 1.0
    progress = max(0.0, min(1.0, progress))

    score = int(progress * config.maturity_age_points)

    if twin.weight_kg is not None:
        ideal = config.ideal_weight(stage.name, twin.is_male)
        if ideal > 0:
            ratio = max(config.weight_ratio_min, min(config.weight_ratio_max, twin.weight_kg / ideal))
            score += int(round((1.0 - abs(1.0 - ratio)) * config.maturity_weight_points, 6))

    if twin.morphology_score is not None:
        score += int(round(twin.morphology_score * config.maturity_morphology_factor, 6))

    return max(0, min(100, score))


class WeightRating(Enum):
    """Weight against the breed-standard ideal for the bird's stage."""
    EXCELLENT = "Excellent"
    GOOD = "Good"
    FAIR = "Fair"
    UNDERWEIGHT = "Underweight"
    OVERWEIGHT = "Overweight"

    @property
    def display_name(self) -> str:
        return self.value

    @property
    def morphology_delta(self) -> int:
        return WEIGHT_RATING_DELTAS[self]

    @property
    def is_anomaly(self) -> bool:
        return self in (WeightRating.UNDERWEIGHT, WeightRating.OVERWEIGHT)


WEIGHT_RATING_DELTAS: Dict[WeightRating, int] = {
    WeightRating.EXCELLENT: 2,
    WeightRating.GOOD: 1,
    WeightRating.FAIR: 0,
    WeightRating.UNDERWEIGHT: -1,
    WeightRating.OVERWEIGHT: -1,
}


@dataclass(frozen=True)
class WeightEvaluation:
    rating: WeightRating
    weight_grams: int
    expected_grams: int
    deviation_percent: float   # signed, negative = lighter than ideal


def rate_weight(weight_grams: float, stage: LifecycleStage, is_male: bool,
                config: LifecycleConfig = LIFECYCLE) -> Optional[WeightEvaluation]:
    """Rate a weight against the stage ideal. None when the stage has no ideal."""
    ideal_kg = config.ideal_weight(stage.name, is_male)
    if ideal_kg <= 0:
        return None

    expected = ideal_kg * 1000.0
    deviation = (weight_grams - expected) / expected

    rating = None
    for limit, name in config.weight_rating_bands:
        if round(abs(deviation), 6) <= limit:
            rating = WeightRating[name]
            break
    if rating is None:
        rating = WeightRating.UNDERWEIGHT if deviation < 0 else WeightRating.OVERWEIGHT

    return WeightEvaluation(
        rating=rating,
        weight_grams=int(round(weight_grams)),
        expected_grams=int(round(expected)),
        deviation_percent=round(deviation * 100, 1),
    )


def new_capabilities(current: LifecycleStage, following: LifecycleStage) -> List[str]:
    """Capability labels that flip from locked to unlocked between two stages."""
    capabilities = []

    if not current.can_measure_morphology and following.can_measure_morphology:
        capabilities.append("Morphology Assessment Unlocked")
        capabilities.append("Weight Tracking Active")
    performance_unlocked = not current.can_measure_performance and following.can_measure_performance
    if performance_unlocked:
        capabilities.append("Performance Metrics Unlocked")
        capabilities.append("Show Eligibility Granted")
    if not performance_unlocked and not current.is_show_eligible and following.is_show_eligible:
        capabilities.append("Show Eligibility Granted")
    if not current.is_breeding_eligible and following.is_breeding_eligible:
        capabilities.append("Breeding Eligibility Granted")
    if not current.has_decline_factors and following.has_decline_factors:
        capabilities.append("Senior Phase - Decline Factors Active")

    return capabilities


class LifecycleEngine:
    """
    Lifecycle state machine for Digital Twin birds.

    The engine holds no per-bird state. Stage-transition events are returned
    from evaluate() and, when an on_event callback is set, also handed to it
    by update_lifecycle(). Persisting twins and events is the caller's job.
    """

    def __init__(self, config: LifecycleConfig = LIFECYCLE,
                 on_event: Optional[Callable[[BirdEvent], None]] = None):
        self.config = config
        self.on_event = on_event

    def evaluate(self, twin: DigitalTwin, now: Optional[datetime] = None) -> LifecycleUpdate:
        """Compute the updated snapshot and the events it implies."""
        if twin.birth_date is None:
            return LifecycleUpdate(twin=twin)

        now = now or utc_now()
        age_days = age_in_days(twin.birth_date, now)
        new_stage = stage_from_age(age_days, twin.is_male, config=self.config)
        old_stage = twin.lifecycle_stage

        events = []
        if LifecycleStage.from_name(old_stage) != new_stage:
            events.append(BirdEvent(
                bird_id=twin.bird_id,
                owner_id=twin.owner_id,
                event_type=BirdEventType.STAGE_TRANSITION,
                event_date=now,
                title=f"Stage: {new_stage.display_name}",
                description=f"Transitioned from {old_stage} to {new_stage.name} at {age_days} days old",
                age_days_at_event=age_days,
                lifecycle_stage_at_event=new_stage.name,
                string_value=f"{old_stage}->{new_stage.name}",
            ))
            logger.info(f"{twin.bird_id}: {old_stage} -> {new_stage.name} at {age_days} days")

        stamina = twin.stamina_score
        if new_stage.has_decline_factors:
            current = stamina if stamina is not None else self.config.default_stamina
            stamina = max(self.config.senior_stamina_floor,
                          int(current * self.config.senior_stamina_decay))

        updated = twin.with_changes(
            lifecycle_stage=new_stage.name,
            age_days=age_days,
            maturity_score=maturity_score(twin, new_stage, age_days, self.config),
            stamina_score=stamina,
            updated_at=now,
        )
        return LifecycleUpdate(twin=updated, events=events)

    def update_lifecycle(self, twin: DigitalTwin, now: Optional[datetime] = None) -> DigitalTwin:
        """
        Update a bird's lifecycle stage based on current age.

        Returns the twin unchanged when it has no birth date.
        """
        result = self.evaluate(twin, now)
        if self.on_event is not None:
            for event in result.events:
                self.on_event(event)
        return result.twin

    def update_all(self, twins: Iterable[DigitalTwin], now: Optional[datetime] = None) -> List[DigitalTwin]:
        """Update a batch of twins against the same clock reading."""
        now = now or utc_now()
        return [self.update_lifecycle(twin, now) for twin in twins]

    def get_next_transition_info(self, twin: DigitalTwin,
                                 now: Optional[datetime] = None) -> Optional[TransitionInfo]:
        """Information about the next stage transition, None if none is ahead."""
        if twin.birth_date is None:
            return None

        now = now or utc_now()
        age_days = age_in_days(twin.birth_date, now)
        current = stage_from_age(age_days, twin.is_male, config=self.config)
        following = next_stage(current)
        if following is None:
            return None
        days_remaining = days_until_next_transition(age_days, twin.is_male, config=self.config)
        if days_remaining is None:
            return None

        return TransitionInfo(
            current_stage=current,
            next_stage=following,
            days_remaining=days_remaining,
            current_age_days=age_days,
            capabilities_unlocked=new_capabilities(current, following),
        )

    def evaluate_weight(self, twin: DigitalTwin,
                        weight_grams: Optional[float] = None) -> Optional[WeightEvaluation]:
        """Rate a weight (default: the stored one) against the twin's stored stage."""
        stage = twin.stage()
        if weight_grams is None and twin.weight_kg is not None:
            weight_grams = twin.weight_kg * 1000.0
        if stage is None or weight_grams is None:
            return None
        return rate_weight(weight_grams, stage, twin.is_male, self.config)

    # ------------------------------------------------------------------
    # Capability gates
    # ------------------------------------------------------------------

    def can_measure_morphology(self, twin: DigitalTwin) -> bool:
        stage = twin.stage()
        return stage.can_measure_morphology if stage else False

    def can_measure_performance(self, twin: DigitalTwin) -> bool:
        stage = twin.stage()
        return stage.can_measure_performance if stage else False

    def is_breeding_eligible(self, twin: DigitalTwin) -> bool:
        if not twin.is_fit:
            return False
        stage = twin.stage()
        return stage.is_breeding_eligible if stage else False

    def is_show_eligible(self, twin: DigitalTwin) -> bool:
        if not twin.is_fit:
            return False
        stage = twin.stage()
        return stage.is_show_eligible if stage else False

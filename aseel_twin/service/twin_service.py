"""
Aseel Digital Twin — Twin Service

Orchestration layer between the pure engines and the stores:
- Creates twins from birth records
- Runs lifecycle + valuation updates and persists the results
- Logs bird events and applies their score impact
- Rates recorded weights and applies expert morphology grading
- Batch updates an owner's flock, isolating per-bird failures
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Union
import logging
import uuid

from ..core.events import BirdEvent, BirdEventType, utc_now
from ..core.stages import LifecycleStage, stage_from_age
from ..core.twin import DigitalTwin, Gender
from ..engines.lifecycle import LifecycleEngine, TransitionInfo, WeightEvaluation, age_in_days
from ..engines.valuation import ValuationEngine
from ..genetics.alleles import GeneticProfile
from .store import TwinStore, EventStore

logger = logging.getLogger(__name__)


# Score deltas stamped on logged events, keyed by event type
EVENT_SCORE_DELTAS: Dict[BirdEventType, Dict[str, int]] = {
    BirdEventType.FIGHT_WIN: {"performance_delta": 5, "market_delta": 3},
    BirdEventType.FIGHT_LOSS: {"performance_delta": -2, "market_delta": -1},
    BirdEventType.VACCINATION: {"health_delta": 2},
    BirdEventType.INJURY: {"health_delta": -5},
    BirdEventType.RECOVERY: {"health_delta": 3},
}


@dataclass(frozen=True)
class BirthRecord:
    """Initial facts about a bird, supplied once when its twin is created."""
    bird_id: str
    birth_date: Optional[datetime] = None
    gender: Optional[str] = None
    breed: str = "Aseel"
    name: Optional[str] = None
    weight_grams: Optional[float] = None
    height_cm: Optional[float] = None
    registry_id: Optional[str] = None
    strain_type: Optional[str] = None
    sire_id: Optional[str] = None
    dam_id: Optional[str] = None
    genetic_profile: Optional[GeneticProfile] = None


@dataclass(frozen=True)
class ManualGrading:
    """Expert morphology measurements. Fields left as None keep the stored value."""
    weight_grams: Optional[float] = None
    height_cm: Optional[float] = None
    bone_density_score: Optional[int] = None
    notes: Optional[str] = None


@dataclass
class BatchResult:
    """Outcome of a flock-wide lifecycle update."""
    processed: int = 0
    transitions: int = 0
    errors: int = 0
    failed_bird_ids: List[str] = field(default_factory=list)


class DigitalTwinService:
    """Creates, updates and records events for Digital Twins."""

    def __init__(self, twin_store: TwinStore, event_store: EventStore,
                 lifecycle_engine: Optional[LifecycleEngine] = None,
                 valuation_engine: Optional[ValuationEngine] = None):
        self.twin_store = twin_store
        self.event_store = event_store
        self.lifecycle = lifecycle_engine or LifecycleEngine()
        self.valuation = valuation_engine or ValuationEngine()

    # =========================================================================
    # CREATION
    # =========================================================================

    def create_twin(self, record: BirthRecord, owner_id: str, now: Optional[datetime] = None) -> DigitalTwin:
        """
        Create the Digital Twin for a bird.

        Returns the existing twin unchanged if the bird already has one.
        A record without a birth date is treated as an unhatched egg.
        """
        existing = self.twin_store.get(record.bird_id)
        if existing is not None:
            return existing

        now = now or utc_now()
        is_male = (record.gender or "").strip().upper() != Gender.FEMALE.value

        if record.birth_date is not None:
            age_days = age_in_days(record.birth_date, now)
            stage = stage_from_age(age_days, is_male, config=self.lifecycle.config)
        else:
            age_days = None
            stage = LifecycleStage.EGG

        twin = DigitalTwin(
            twin_id=str(uuid.uuid4()),
            bird_id=record.bird_id,
            owner_id=owner_id,
            registry_id=record.registry_id,
            bird_name=record.name or None,
            base_breed=record.breed,
            strain_type=record.strain_type,
            birth_date=record.birth_date,
            gender=Gender.MALE.value if is_male else Gender.FEMALE.value,
            age_days=age_days,
            lifecycle_stage=stage.name,
            weight_kg=record.weight_grams / 1000.0 if record.weight_grams is not None else None,
            height_cm=record.height_cm,
            sire_id=record.sire_id,
            dam_id=record.dam_id,
            generation_depth=1 if (record.sire_id or record.dam_id) else 0,
            genetic_profile=record.genetic_profile,
            created_at=now,
            updated_at=now,
        )
        twin = self.lifecycle.evaluate(twin, now).twin
        twin = self.valuation.compute_full_valuation(twin, now)
        self.twin_store.save(twin)

        self.event_store.append(BirdEvent(
            bird_id=twin.bird_id,
            owner_id=owner_id,
            event_type=BirdEventType.STAGE_TRANSITION,
            event_date=now,
            title="Digital Twin Created",
            description=f"Digital Twin initialized from birth record. Stage: {stage.display_name}",
            age_days_at_event=age_days,
            lifecycle_stage_at_event=stage.name,
        ))
        logger.info(f"Created twin {twin.twin_id} for {twin.bird_id} ({stage.name})")
        return twin

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def get_twin(self, bird_id: str) -> Optional[DigitalTwin]:
        """Active twin for a bird, None if missing or soft-deleted."""
        twin = self.twin_store.get(bird_id)
        if twin is None or twin.is_deleted:
            return None
        return twin

    def update_lifecycle(self, bird_id: str, now: Optional[datetime] = None) -> Optional[DigitalTwin]:
        """Run the lifecycle and full valuation for one bird and persist the result."""
        twin = self.get_twin(bird_id)
        if twin is None:
            return None

        now = now or utc_now()
        result = self.lifecycle.evaluate(twin, now)
        for event in result.events:
            self.event_store.append(event)

        updated = self.valuation.compute_full_valuation(result.twin, now)
        self.twin_store.save(updated)
        self._log_weight_anomaly(updated, now)
        return updated

    def update_all_lifecycles(self, owner_id: str, now: Optional[datetime] = None) -> BatchResult:
        """
        Update every active twin of an owner.

        A failure on one bird is logged and counted; the rest of the flock
        is still processed.
        """
        now = now or utc_now()
        result = BatchResult()

        for twin in self.twin_store.list_by_owner(owner_id):
            try:
                previous_stage = twin.lifecycle_stage
                updated = self.update_lifecycle(twin.bird_id, now)
                result.processed += 1
                if updated is not None and updated.lifecycle_stage != previous_stage:
                    result.transitions += 1
            except Exception:
                logger.exception(f"Lifecycle update failed for {twin.bird_id}")
                result.errors += 1
                result.failed_bird_ids.append(twin.bird_id)

        logger.info(f"Owner {owner_id}: processed {result.processed} twins, "
                    f"{result.transitions} transitions, {result.errors} errors")
        return result

    def get_transition_info(self, bird_id: str, now: Optional[datetime] = None) -> Optional[TransitionInfo]:
        twin = self.get_twin(bird_id)
        if twin is None:
            return None
        return self.lifecycle.get_next_transition_info(twin, now)

    # =========================================================================
    # EVENTS
    # =========================================================================

    def record_event(self, bird_id: str, event_type: Union[BirdEventType, str],
                     numeric_value: Optional[float] = None,
                     string_value: Optional[str] = None,
                     title: Optional[str] = None,
                     description: Optional[str] = None,
                     now: Optional[datetime] = None) -> Optional[DigitalTwin]:
        """
        Log an event for a bird and apply its score impact.

        Weight events carry grams in numeric_value, show results carry the
        placement. Returns the updated twin, None if the bird is unknown.
        """
        twin = self.get_twin(bird_id)
        if twin is None:
            logger.warning(f"Cannot record {event_type} for unknown bird {bird_id}")
            return None

        now = now or utc_now()
        known = BirdEventType.parse(event_type)
        deltas = EVENT_SCORE_DELTAS.get(known, {})

        if known == BirdEventType.WEIGHT_RECORDED and numeric_value is not None:
            evaluation = self.lifecycle.evaluate_weight(twin, numeric_value)
            if evaluation is not None:
                deltas = dict(deltas, morphology_delta=evaluation.rating.morphology_delta)
                string_value = string_value or evaluation.rating.name
                description = description or (
                    f"Weight recorded: {evaluation.weight_grams}g. "
                    f"Expected: {evaluation.expected_grams}g. "
                    f"Rating: {evaluation.rating.display_name} ({evaluation.deviation_percent}%)"
                )

        event = BirdEvent(
            bird_id=bird_id,
            owner_id=twin.owner_id,
            event_type=event_type,
            event_date=now,
            title=title or _default_title(known, event_type, numeric_value),
            description=description,
            age_days_at_event=twin.age_days,
            lifecycle_stage_at_event=twin.lifecycle_stage,
            numeric_value=numeric_value,
            string_value=string_value,
            **deltas,
        )
        self.event_store.append(event)

        updated = self.valuation.process_event_impact(twin, event, now)
        self.twin_store.save(updated)
        return updated

    def submit_manual_grading(self, bird_id: str, grading: ManualGrading,
                              now: Optional[datetime] = None) -> Optional[DigitalTwin]:
        """
        Apply an expert's morphology measurements and re-run full valuation.

        Logs a MORPHOLOGY_GRADING event carrying the new morphology score.
        Returns the graded twin, None if the bird is unknown.
        """
        twin = self.get_twin(bird_id)
        if twin is None:
            logger.warning(f"Cannot grade unknown bird {bird_id}")
            return None

        now = now or utc_now()
        changes = {"updated_at": now}
        if grading.weight_grams is not None:
            changes["weight_kg"] = grading.weight_grams / 1000.0
        if grading.height_cm is not None:
            changes["height_cm"] = grading.height_cm
        if grading.bone_density_score is not None:
            changes["bone_density_score"] = grading.bone_density_score

        graded = self.valuation.compute_full_valuation(twin.with_changes(**changes), now)
        self.twin_store.save(graded)

        description = f"Expert grading submitted. Score: {graded.morphology_score}/100"
        if grading.notes:
            description += f". {grading.notes}"
        self.event_store.append(BirdEvent(
            bird_id=bird_id,
            owner_id=twin.owner_id,
            event_type=BirdEventType.MORPHOLOGY_GRADING,
            event_date=now,
            title="Manual Grading Completed",
            description=description,
            age_days_at_event=twin.age_days,
            lifecycle_stage_at_event=twin.lifecycle_stage,
            numeric_value=graded.morphology_score,
        ))
        logger.info(f"{bird_id}: manual grading, morphology {twin.morphology_score} -> {graded.morphology_score}")
        return graded

    def _log_weight_anomaly(self, twin: DigitalTwin, now: datetime):
        """Log an UNDERWEIGHT/OVERWEIGHT reading, at most once per cooldown window."""
        evaluation: Optional[WeightEvaluation] = self.lifecycle.evaluate_weight(twin)
        if evaluation is None or not evaluation.rating.is_anomaly:
            return

        recent = self.event_store.latest(twin.bird_id, BirdEventType.TRAIT_RECORDED)
        cooldown = timedelta(days=self.lifecycle.config.weight_anomaly_cooldown_days)
        if recent is not None and recent.event_date > now - cooldown:
            return

        self.event_store.append(BirdEvent(
            bird_id=twin.bird_id,
            owner_id=twin.owner_id,
            event_type=BirdEventType.TRAIT_RECORDED,
            event_date=now,
            title=f"Weight {evaluation.rating.display_name}",
            description=(f"Current: {evaluation.weight_grams}g, Expected: {evaluation.expected_grams}g "
                         f"({evaluation.deviation_percent}% deviation)"),
            age_days_at_event=twin.age_days,
            lifecycle_stage_at_event=twin.lifecycle_stage,
            numeric_value=evaluation.weight_grams,
            string_value=evaluation.rating.name,
        ))
        logger.warning(f"{twin.bird_id}: weight {evaluation.rating.name} "
                       f"({evaluation.weight_grams}g vs {evaluation.expected_grams}g)")

    def delete_twin(self, bird_id: str, now: Optional[datetime] = None) -> bool:
        """Soft-delete a twin. Returns False if there was nothing to delete."""
        twin = self.get_twin(bird_id)
        if twin is None:
            return False
        self.twin_store.save(twin.soft_deleted(now))
        logger.info(f"Soft-deleted twin for {bird_id}")
        return True


def _default_title(known: Optional[BirdEventType], raw_type, numeric_value: Optional[float]) -> str:
    if known == BirdEventType.WEIGHT_RECORDED and numeric_value is not None:
        return f"Weight: {int(numeric_value)}g"
    if known == BirdEventType.SHOW_RESULT and numeric_value is not None:
        return f"Show placement: {int(numeric_value)}"
    if known == BirdEventType.FIGHT_WIN:
        return "Fight Won"
    if known == BirdEventType.FIGHT_LOSS:
        return "Fight Lost"
    if known is None:
        return str(raw_type)
    return known.value.replace("_", " ").title()

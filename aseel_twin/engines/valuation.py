"""
Aseel Digital Twin — Valuation Engine

Multi-factor scoring and market valuation:

    valuation = morphology x 0.4 + genetics x 0.3 + performance x 0.2 + health x 0.1

Each component is 0-100. The composite is adjusted by market multipliers
(certification, proven breeder, show record, injury, senior decline),
clamped to 0-100, and converted to an estimated market value.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence, Tuple
import logging
import math

from ..config import (
    VALUATION, MARKET, LIFECYCLE,
    ValuationConfig, MarketPolicy, LifecycleConfig,
)
from ..core.events import BirdEvent, BirdEventType, utc_now
from ..core.twin import (
    DigitalTwin,
    HealthStatus,
    BreedingStatus,
    ACTIVE_INJURY_STATUSES,
    normalize_label,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ComponentScores:
    """The four independent component scores of a valuation."""
    morphology: int
    genetics: int
    performance: int
    health: int


def _points(value: float) -> int:
    """Truncate a sub-score to whole points, ignoring float noise."""
    return int(round(value, 6))


def _round_score(value: float) -> int:
    """Round half up to whole points, ignoring float noise (50 x 1.15 gives 58)."""
    return int(math.floor(round(value, 6) + 0.5))


def _clamp(score: float, low: int = 0, high: int = 100) -> int:
    return max(low, min(high, int(score)))


def _band(value: float, bands: Sequence[Tuple[float, int]], default: int = 0) -> int:
    """Points for the first (minimum, points) band the value reaches."""
    for minimum, points in bands:
        if value >= minimum:
            return points
    return default


class ValuationEngine:
    """
    Computes component scores, composite valuation and market value.

    Pure: every method takes a twin snapshot and returns a new one.
    """

    def __init__(self, config: ValuationConfig = VALUATION,
                 market: MarketPolicy = MARKET,
                 lifecycle_config: LifecycleConfig = LIFECYCLE):
        self.config = config
        self.market = market
        self.lifecycle_config = lifecycle_config

    # =========================================================================
    # FULL VALUATION
    # =========================================================================

    def compute_full_valuation(self, twin: DigitalTwin, now: Optional[datetime] = None) -> DigitalTwin:
        """Recompute every component score, the composite and the market value."""
        components = self.compute_components(twin)
        composite = self.composite_score(components)
        final_score = self.apply_market(composite, twin)

        logger.debug(f"{twin.bird_id}: components={components} composite={composite} final={final_score}")

        return twin.with_changes(
            morphology_score=components.morphology,
            genetics_score=components.genetics,
            performance_score=components.performance,
            health_score=components.health,
            valuation_score=final_score,
            estimated_value=self.estimate_market_value(final_score, twin),
            updated_at=now or utc_now(),
        )

    def compute_components(self, twin: DigitalTwin) -> ComponentScores:
        return ComponentScores(
            morphology=self.morphology_score(twin),
            genetics=self.genetics_score(twin),
            performance=self.performance_score(twin),
            health=self.health_score(twin),
        )

    def composite_score(self, components: ComponentScores) -> int:
        """Weighted sum of the four components, in whole points."""
        cfg = self.config
        weighted = (components.morphology * cfg.weight_morphology +
                    components.genetics * cfg.weight_genetics +
                    components.performance * cfg.weight_performance +
                    components.health * cfg.weight_health)
        return _clamp(_points(weighted))

    def stored_composite(self, twin: DigitalTwin) -> int:
        """
        Composite from the scores already stored on the twin.

        A twin that was never graded for morphology has no composite (0);
        other missing components count as neutral.
        """
        if twin.morphology_score is None:
            return 0
        neutral = self.config.neutral_component_score
        return self.composite_score(ComponentScores(
            morphology=twin.morphology_score,
            genetics=twin.genetics_score if twin.genetics_score is not None else neutral,
            performance=twin.performance_score if twin.performance_score is not None else neutral,
            health=twin.health_score if twin.health_score is not None else neutral,
        ))

    def apply_market(self, composite: int, twin: DigitalTwin) -> int:
        return _clamp(_round_score(composite * self.market_multiplier(twin)))

    def quick_revaluate(self, twin: DigitalTwin) -> DigitalTwin:
        """Re-score just the valuation when component scores are already set."""
        final_score = self.apply_market(self.stored_composite(twin), twin)
        return twin.with_changes(
            valuation_score=final_score,
            estimated_value=self.estimate_market_value(final_score, twin),
        )

    # =========================================================================
    # COMPONENT SCORES
    # =========================================================================

    def morphology_score(self, twin: DigitalTwin) -> int:
        """Weight against the stage ideal, bone density and height."""
        cfg = self.config
        score = cfg.morphology_base

        if twin.weight_kg is not None:
            stage = twin.stage()
            if stage is not None:
                ideal = self.lifecycle_config.ideal_weight(stage.name, twin.is_male)
                if ideal > 0:
                    ratio = twin.weight_kg / ideal
                    points = cfg.weight_ratio_fallback_points
                    for low, high, band_points in cfg.weight_ratio_bands:
                        if low <= ratio <= high:
                            points = band_points
                            break
                    score += points

        if twin.bone_density_score is not None:
            score += _points(twin.bone_density_score * cfg.bone_density_factor)

        if twin.height_cm is not None:
            low, high = cfg.ideal_height_cm_male if twin.is_male else cfg.ideal_height_cm_female
            score += cfg.height_in_band_points if low <= twin.height_cm <= high else cfg.height_out_of_band_points

        return _clamp(score)

    def genetics_score(self, twin: DigitalTwin) -> int:
        """Lineage depth, inbreeding (lower is better), purity and proven offspring."""
        cfg = self.config
        score = cfg.genetics_base
        score += _band(twin.generation_depth, cfg.generation_depth_bands)

        coi = twin.inbreeding_coefficient
        if coi is None:
            score += cfg.inbreeding_unknown_points
        else:
            for ceiling, points in cfg.inbreeding_bands:
                if coi < ceiling:
                    score += points
                    break

        if twin.genetic_purity_score is not None:
            score += _points(twin.genetic_purity_score * cfg.genetic_purity_factor)

        score += _band(twin.total_offspring, cfg.offspring_bands)
        return _clamp(score)

    def performance_score(self, twin: DigitalTwin) -> int:
        cfg = self.config
        score = cfg.performance_base

        if twin.total_fights > 0:
            score += _points(twin.fight_win_rate * cfg.fight_win_rate_points)
        if twin.total_shows > 0:
            score += _points(twin.show_win_rate * cfg.show_win_rate_points)

        if twin.aggression_index is not None:
            score += _points(twin.aggression_index * cfg.aggression_factor)
        if twin.endurance_score is not None:
            score += _points(twin.endurance_score * cfg.endurance_factor)
        if twin.intelligence_score is not None:
            score += _points(twin.intelligence_score * cfg.intelligence_factor)

        return _clamp(score)

    def health_score(self, twin: DigitalTwin) -> int:
        cfg = self.config
        score = cfg.health_base
        # Unrecognised statuses contribute nothing
        score += cfg.health_status_points.get(twin.health_label, 0)
        score += _band(twin.vaccination_count, cfg.vaccination_bands)
        score -= _band(twin.injury_count, cfg.injury_penalty_bands)

        if twin.stamina_score is not None:
            score += _points(twin.stamina_score * cfg.stamina_factor)

        return _clamp(score)

    # =========================================================================
    # MARKET
    # =========================================================================

    def market_multiplier(self, twin: DigitalTwin) -> float:
        """Product of every market adjustment that applies to this bird."""
        policy = self.market
        multiplier = policy.certification_multipliers.get(normalize_label(twin.certification_level), 1.0)

        if (normalize_label(twin.breeding_status) == BreedingStatus.PROVEN.value
                and twin.successful_breedings >= policy.proven_breeder_min_successes):
            multiplier *= policy.proven_breeder_multiplier

        if twin.show_wins >= policy.show_record_min_wins:
            multiplier *= policy.show_record_multiplier

        if twin.health_label in ACTIVE_INJURY_STATUSES:
            multiplier *= policy.active_injury_multiplier

        stage = twin.stage()
        if stage is not None and stage.has_decline_factors:
            multiplier *= policy.senior_decline_multiplier

        return multiplier

    def estimate_market_value(self, score: int, twin: DigitalTwin) -> float:
        """Estimated price in the policy currency for a final valuation score."""
        policy = self.market
        base_value = policy.value_floor
        for minimum, value in policy.value_bands:
            if score >= minimum:
                base_value = value
                break

        within_band = 1.0 + (score % policy.band_width) * policy.band_step
        gender_factor = policy.male_value_factor if twin.is_male else policy.female_value_factor
        return base_value * within_band * gender_factor

    # =========================================================================
    # INCREMENTAL UPDATES
    # =========================================================================

    def process_event_impact(self, twin: DigitalTwin, event: BirdEvent,
                             now: Optional[datetime] = None) -> DigitalTwin:
        """
        Apply one newly logged event to the twin.

        Only the counters and the component score the event touches are
        recomputed. The other components keep their stored values; the
        composite and market multiplier are then reapplied.
        """
        updated = twin
        event_type = event.known_type

        if event_type == BirdEventType.WEIGHT_RECORDED:
            if event.numeric_value is not None:
                # Payload is grams
                updated = updated.with_changes(weight_kg=event.numeric_value / 1000.0)
            updated = updated.with_changes(morphology_score=self.morphology_score(updated))

        elif event_type == BirdEventType.FIGHT_WIN:
            updated = updated.with_changes(total_fights=twin.total_fights + 1,
                                           fight_wins=twin.fight_wins + 1)
            updated = updated.with_changes(performance_score=self.performance_score(updated))

        elif event_type in (BirdEventType.FIGHT_LOSS, BirdEventType.FIGHT_DRAW):
            updated = updated.with_changes(total_fights=twin.total_fights + 1)
            updated = updated.with_changes(performance_score=self.performance_score(updated))

        elif event_type == BirdEventType.INJURY:
            updated = updated.with_changes(injury_count=twin.injury_count + 1,
                                           current_health_status=HealthStatus.INJURED.value)
            updated = updated.with_changes(health_score=self.health_score(updated))

        elif event_type == BirdEventType.RECOVERY:
            updated = updated.with_changes(current_health_status=HealthStatus.HEALTHY.value)
            updated = updated.with_changes(health_score=self.health_score(updated))

        elif event_type == BirdEventType.VACCINATION:
            updated = updated.with_changes(vaccination_count=twin.vaccination_count + 1)
            updated = updated.with_changes(health_score=self.health_score(updated))

        elif event_type == BirdEventType.BREEDING_SUCCESS:
            updated = updated.with_changes(
                total_breeding_attempts=twin.total_breeding_attempts + 1,
                successful_breedings=twin.successful_breedings + 1,
                breeding_status=BreedingStatus.PROVEN.value,
            )

        elif event_type == BirdEventType.BREEDING_FAILURE:
            updated = updated.with_changes(total_breeding_attempts=twin.total_breeding_attempts + 1)

        elif event_type == BirdEventType.SHOW_RESULT:
            placement = int(event.numeric_value) if event.numeric_value is not None else None
            placed = placement is not None and placement <= self.config.show_win_max_placement
            placements = [p for p in (twin.best_placement, placement) if p is not None]
            updated = updated.with_changes(
                total_shows=twin.total_shows + 1,
                show_wins=twin.show_wins + 1 if placed else twin.show_wins,
                best_placement=min(placements) if placements else None,
            )

        elif event_type is None:
            logger.warning(f"{twin.bird_id}: no score impact for unknown event type '{event.event_type}'")

        final_score = self.apply_market(self.stored_composite(updated), updated)
        return updated.with_changes(
            valuation_score=final_score,
            estimated_value=self.estimate_market_value(final_score, updated),
            updated_at=now or utc_now(),
        )

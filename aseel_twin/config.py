"""
Aseel Digital Twin — Configuration
Stage thresholds, breed standards, scoring weights, and market policy.
"""

from dataclasses import dataclass, field
from typing import Dict, Tuple
import math


@dataclass
class LifecycleConfig:
    """Age thresholds and breed-standard growth targets."""

    # Stage entry ages (days since hatch)
    egg_incubation_days: int = 21
    grower_start_days: int = 45
    pre_adult_start_days: int = 180
    adult_fighter_start_days: int = 270
    breeder_prime_start_days: int = 730
    senior_start_days: int = 1460

    # Hens enter breeder status earlier than cocks
    female_breeder_start_days: int = 540

    # Senior decline (applied once per lifecycle update)
    senior_stamina_decay: float = 0.95
    senior_stamina_floor: int = 20
    default_stamina: int = 50

    # Maturity scoring
    open_stage_window_days: int = 365
    maturity_age_points: int = 40
    maturity_weight_points: int = 30
    maturity_morphology_factor: float = 0.3
    weight_ratio_min: float = 0.5
    weight_ratio_max: float = 1.5

    # Ideal weight (kg) per stage name: (male, female)
    ideal_weight_kg: Dict[str, Tuple[float, float]] = field(default_factory=lambda: {
        "EGG": (0.055, 0.055),        # ~55g egg
        "CHICK": (0.2, 0.15),
        "GROWER": (1.5, 1.2),
        "PRE_ADULT": (2.5, 2.0),
        "ADULT_FIGHTER": (3.5, 2.5),
        "BREEDER_PRIME": (4.0, 2.8),
        "SENIOR": (3.8, 2.6),         # Expected mass loss
    })

    # Weight rating: (max |deviation| from the stage ideal, rating name), first match wins.
    # Larger deviations rate UNDERWEIGHT or OVERWEIGHT.
    weight_rating_bands: Tuple[Tuple[float, str], ...] = (
        (0.10, "EXCELLENT"),
        (0.20, "GOOD"),
        (0.30, "FAIR"),
    )

    # Repeat weight anomalies within this many days are not logged again
    weight_anomaly_cooldown_days: int = 7

    def ideal_weight(self, stage_name: str, is_male: bool) -> float:
        """Ideal weight in kg for a stage, 0.0 if the stage is unknown."""
        weights = self.ideal_weight_kg.get(stage_name)
        if weights is None:
            return 0.0
        return weights[0] if is_male else weights[1]


@dataclass
class ValuationConfig:
    """Component weights and scoring bands for the valuation model."""

    # Composite weights, must sum to 1.0
    weight_morphology: float = 0.4
    weight_genetics: float = 0.3
    weight_performance: float = 0.2
    weight_health: float = 0.1

    # Component base scores
    morphology_base: int = 50
    genetics_base: int = 40
    performance_base: int = 30
    health_base: int = 60

    # Neutral values used when a stored component is missing
    neutral_component_score: int = 50

    # Morphology: (low ratio, high ratio, points), first match wins
    weight_ratio_bands: Tuple[Tuple[float, float, int], ...] = (
        (0.9, 1.1, 25),
        (0.8, 1.2, 20),
        (0.7, 1.3, 15),
        (0.6, 1.4, 10),
    )
    weight_ratio_fallback_points: int = 5
    bone_density_factor: float = 0.15
    height_in_band_points: int = 10
    height_out_of_band_points: int = 5
    ideal_height_cm_male: Tuple[float, float] = (55.0, 75.0)
    ideal_height_cm_female: Tuple[float, float] = (45.0, 60.0)

    # Genetics: (minimum, points), first match wins
    generation_depth_bands: Tuple[Tuple[int, int], ...] = ((5, 20), (3, 15), (1, 10))
    inbreeding_bands: Tuple[Tuple[float, int], ...] = (
        (0.03, 20),   # Very low inbreeding
        (0.06, 15),
        (0.12, 10),
        (0.25, 5),
    )
    inbreeding_unknown_points: int = 10
    genetic_purity_factor: float = 0.1
    offspring_bands: Tuple[Tuple[int, int], ...] = ((10, 10), (5, 7), (1, 5))

    # Performance
    fight_win_rate_points: int = 30
    show_win_rate_points: int = 15
    aggression_factor: float = 0.1
    endurance_factor: float = 0.1
    intelligence_factor: float = 0.05
    show_win_max_placement: int = 3      # Placing 1st-3rd counts as a show win

    # Health
    health_status_points: Dict[str, int] = field(default_factory=lambda: {
        "HEALTHY": 20,
        "OK": 20,
        "RECOVERING": 10,
        "INJURED": -10,
        "SICK": -20,
    })
    vaccination_bands: Tuple[Tuple[int, int], ...] = ((5, 10), (3, 7), (1, 4))
    injury_penalty_bands: Tuple[Tuple[int, int], ...] = ((5, 20), (3, 10), (1, 5))
    stamina_factor: float = 0.1

    def __post_init__(self):
        """Reject weight sets that do not sum to 1.0."""
        total = self.total_weight
        if not math.isclose(total, 1.0, abs_tol=1e-9):
            raise ValueError(f"Valuation weights must sum to 1.0, got {total}")

    @property
    def total_weight(self) -> float:
        return (self.weight_morphology + self.weight_genetics +
                self.weight_performance + self.weight_health)


@dataclass
class MarketPolicy:
    """
    Market assumptions for the Aseel premium market (Andhra/Telangana).

    The within-band step and the gender factor are modelled market
    behaviour, not breed constants. Override per market.
    """
    currency: str = "INR"

    certification_multipliers: Dict[str, float] = field(default_factory=lambda: {
        "CHAMPION": 1.5,
        "VERIFIED": 1.3,
        "REGISTERED": 1.1,
    })
    proven_breeder_multiplier: float = 1.2
    proven_breeder_min_successes: int = 3
    show_record_multiplier: float = 1.15
    show_record_min_wins: int = 3
    active_injury_multiplier: float = 0.7
    senior_decline_multiplier: float = 0.85

    # (minimum score, base value), first match wins
    value_bands: Tuple[Tuple[int, float], ...] = (
        (90, 100000.0),   # Champion grade
        (70, 30000.0),    # Premium grade
        (50, 10000.0),    # Standard grade
        (30, 3000.0),     # Utility grade
    )
    value_floor: float = 1000.0
    band_width: int = 20
    band_step: float = 0.05

    male_value_factor: float = 1.0
    female_value_factor: float = 0.6


@dataclass
class StructureConfig:
    """Aseel Structural Index (ASI) weights, targets and warning floors."""

    weights: Dict[str, float] = field(default_factory=lambda: {
        "neck_length": 0.15,
        "leg_length": 0.15,
        "bone_thickness": 0.15,
        "chest_depth": 0.15,
        "feather_tightness": 0.10,
        "posture_angle": 0.10,
        "tail_carriage": 0.10,
        "body_width": 0.10,
    })

    # Breed-ideal targets for "ideally high" traits
    targets: Dict[str, float] = field(default_factory=lambda: {
        "neck_length": 0.8,
        "leg_length": 0.75,
        "bone_thickness": 0.8,
        "chest_depth": 0.8,
        "feather_tightness": 0.8,
        "posture_angle": 0.8,
        "body_width": 0.7,
    })

    # Low tail carriage is the breed standard
    tail_carriage_threshold: float = 0.3
    tail_carriage_ceiling: float = 0.7

    floors: Dict[str, float] = field(default_factory=lambda: {
        "neck_length": 0.4,
        "leg_length": 0.4,
        "bone_thickness": 0.5,
        "chest_depth": 0.5,
        "feather_tightness": 0.5,
        "posture_angle": 0.5,
        "body_width": 0.4,
    })

    warnings: Dict[str, str] = field(default_factory=lambda: {
        "neck_length": "Short neck: reduced reach and upright carriage",
        "leg_length": "Short legs: below Aseel standing height",
        "bone_thickness": "Light bone: frame lacks Aseel substance",
        "chest_depth": "Shallow chest: weak breast development",
        "feather_tightness": "Loose feathering: Aseel plumage should be hard and tight",
        "posture_angle": "Low posture: stance should be upright",
        "tail_carriage": "High tail carriage: Aseel tail should be carried low",
        "body_width": "Narrow body: insufficient shoulder width",
    })


@dataclass
class BreedingConfig:
    """Genetics prediction parameters."""
    default_sample_size: int = 1000
    max_sample_size: int = 100000
    prediction_confidence: float = 0.85
    dominance_table_version: str = "2024.1"


# Default configurations
LIFECYCLE = LifecycleConfig()
VALUATION = ValuationConfig()
MARKET = MarketPolicy()
STRUCTURE = StructureConfig()
BREEDING = BreedingConfig()

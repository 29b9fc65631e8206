"""
Aseel Digital Twin — Lifecycle, Valuation and Genetics Engine

Models one Aseel bird's Digital Twin through its biological life,
scores it against the breed standard and the premium market, and
predicts offspring plumage from parental genotypes.
"""

__version__ = "1.0.0"

from .config import (
    LIFECYCLE,
    VALUATION,
    MARKET,
    STRUCTURE,
    BREEDING,
    LifecycleConfig,
    ValuationConfig,
    MarketPolicy,
    StructureConfig,
    BreedingConfig,
)

from .core import (
    LifecycleStage,
    stage_from_age,
    next_stage,
    days_until_next_transition,
    BirdEvent,
    BirdEventType,
    DigitalTwin,
)

from .engines import (
    LifecycleEngine,
    ValuationEngine,
    StructureProfile,
    calculate_asi,
)

from .genetics import (
    GeneticProfile,
    predict_phenotype,
    predict_locus_offspring,
    predict_offspring_distribution,
    BreedingSimulator,
)

__all__ = [
    # Version info
    "__version__",

    # Config
    "LIFECYCLE",
    "VALUATION",
    "MARKET",
    "STRUCTURE",
    "BREEDING",
    "LifecycleConfig",
    "ValuationConfig",
    "MarketPolicy",
    "StructureConfig",
    "BreedingConfig",

    # Core
    "LifecycleStage",
    "stage_from_age",
    "next_stage",
    "days_until_next_transition",
    "BirdEvent",
    "BirdEventType",
    "DigitalTwin",

    # Engines
    "LifecycleEngine",
    "ValuationEngine",
    "StructureProfile",
    "calculate_asi",

    # Genetics
    "GeneticProfile",
    "predict_phenotype",
    "predict_locus_offspring",
    "predict_offspring_distribution",
    "BreedingSimulator",
]

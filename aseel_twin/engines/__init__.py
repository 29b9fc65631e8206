"""
Aseel Digital Twin — Engines
Lifecycle state machine, valuation scoring, and structural index.
"""

from .lifecycle import (
    LifecycleEngine,
    LifecycleUpdate,
    TransitionInfo,
    WeightRating,
    WeightEvaluation,
    format_age,
    maturity_score,
    new_capabilities,
    rate_weight,
)
from .valuation import ValuationEngine, ComponentScores
from .structure import StructureProfile, calculate_asi

__all__ = [
    # Lifecycle
    "LifecycleEngine",
    "LifecycleUpdate",
    "TransitionInfo",
    "WeightRating",
    "WeightEvaluation",
    "format_age",
    "maturity_score",
    "new_capabilities",
    "rate_weight",

    # Valuation
    "ValuationEngine",
    "ComponentScores",

    # Structure
    "StructureProfile",
    "calculate_asi",
]

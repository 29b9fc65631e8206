"""
Aseel Digital Twin — Core Module
Stage taxonomy, twin snapshot, and event records.
"""

from .stages import (
    LifecycleStage,
    StageSpec,
    STAGE_SPECS,
    stage_specs,
    stage_from_age,
    next_stage,
    days_until_next_transition,
)
from .events import BirdEvent, BirdEventType
from .twin import (
    DigitalTwin,
    Gender,
    HealthStatus,
    BreedingStatus,
    CertificationLevel,
)

__all__ = [
    # Stages
    "LifecycleStage",
    "StageSpec",
    "STAGE_SPECS",
    "stage_specs",
    "stage_from_age",
    "next_stage",
    "days_until_next_transition",

    # Events
    "BirdEvent",
    "BirdEventType",

    # Twin
    "DigitalTwin",
    "Gender",
    "HealthStatus",
    "BreedingStatus",
    "CertificationLevel",
]

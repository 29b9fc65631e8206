"""
Aseel Digital Twin — Structural Index

Aseel Structural Index (ASI): a 0-100 score of how closely a bird's frame
matches the breed standard, computed from eight normalized body traits.
"""

from dataclasses import dataclass, fields
from typing import List, Tuple

from ..config import STRUCTURE, StructureConfig


@dataclass(frozen=True)
class StructureProfile:
    """Body-frame traits, each normalized to 0.0-1.0."""
    neck_length: float
    leg_length: float
    bone_thickness: float
    chest_depth: float
    feather_tightness: float
    posture_angle: float
    tail_carriage: float
    body_width: float


def _unit(value: float) -> float:
    return max(0.0, min(1.0, float(value)))


def ideally_high(value: float, target: float) -> float:
    """Linear up to the breed target, saturating at 1.0 once reached."""
    if target <= 0:
        return 1.0
    return min(value / target, 1.0)


def ideally_low(value: float, threshold: float) -> float:
    """Full marks at or below the threshold, decaying linearly to 0 at 1.0."""
    if value <= threshold:
        return 1.0
    if threshold >= 1.0:
        return 0.0
    return max(0.0, (1.0 - value) / (1.0 - threshold))


def calculate_asi(profile: StructureProfile, config: StructureConfig = STRUCTURE) -> Tuple[int, List[str]]:
    """
    Score a structure profile against the breed standard.

    Returns (score, warnings). Trait values outside 0-1 are clamped first.
    Each trait below its floor adds a warning; tail carriage warns when it
    is carried above its ceiling instead.
    """
    total = 0.0
    warnings = []

    for trait in fields(StructureProfile):
        name = trait.name
        value = _unit(getattr(profile, name))

        if name == "tail_carriage":
            shaped = ideally_low(value, config.tail_carriage_threshold)
            if value > config.tail_carriage_ceiling:
                warnings.append(config.warnings[name])
        else:
            shaped = ideally_high(value, config.targets[name])
            if value < config.floors[name]:
                warnings.append(config.warnings[name])

        total += shaped * config.weights[name]

    score = max(0, min(100, int(round(total * 100))))
    return score, warnings

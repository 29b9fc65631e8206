"""
Aseel Digital Twin — Breeding Simulator

Single-offspring genotype sampling and Monte-Carlo offspring phenotype
distributions. The only stochastic part of the engine; every simulator
owns its own seedable random.Random.
"""

from collections import Counter
from typing import Dict, List, Optional, Tuple
import random
import logging

from ..config import BREEDING, BreedingConfig
from .alleles import Locus, GeneticProfile
from .dominance import PhenotypePrediction, predict_phenotype

logger = logging.getLogger(__name__)


class BreedingSimulator:
    """Draws offspring genotypes by independent assortment, one allele per parent per locus."""

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self.random = random.Random(seed)

    def breed_one(self, sire: GeneticProfile, dam: GeneticProfile) -> GeneticProfile:
        alleles = {}
        for locus in Locus:
            from_sire = self.random.choice(sire.pair(locus))
            from_dam = self.random.choice(dam.pair(locus))
            alleles[locus.field_name] = (from_sire, from_dam)
        return GeneticProfile(**alleles)

    def breed_clutch(self, sire: GeneticProfile, dam: GeneticProfile, count: int) -> List[GeneticProfile]:
        if count < 0:
            raise ValueError(f"count must be non-negative, got {count}")
        return [self.breed_one(sire, dam) for _ in range(count)]


def predict_offspring_distribution(sire: GeneticProfile, dam: GeneticProfile,
                                   sample_size: int = BREEDING.default_sample_size,
                                   seed: Optional[int] = None,
                                   simulator: Optional[BreedingSimulator] = None,
                                   config: BreedingConfig = BREEDING,
                                   ) -> List[Tuple[PhenotypePrediction, float]]:
    """
    Monte-Carlo estimate of offspring colour classes.

    Samples sample_size offspring, tallies them by local type and returns
    (representative prediction, probability) pairs, most likely first.
    Pass seed (or a pre-seeded simulator) for a reproducible result.
    """
    if sample_size <= 0:
        raise ValueError(f"sample_size must be positive, got {sample_size}")
    if sample_size > config.max_sample_size:
        raise ValueError(f"sample_size {sample_size} exceeds the cap of {config.max_sample_size}")

    simulator = simulator or BreedingSimulator(seed)
    counts: Counter = Counter()
    representatives: Dict[str, PhenotypePrediction] = {}

    for _ in range(sample_size):
        prediction = predict_phenotype(simulator.breed_one(sire, dam), config.prediction_confidence)
        key = prediction.suggested_local_type
        counts[key] += 1
        representatives.setdefault(key, prediction)

    # Ties keep first-seen order
    distribution = [(representatives[key], count / sample_size) for key, count in counts.items()]
    distribution.sort(key=lambda item: item[1], reverse=True)
    logger.debug(f"Offspring distribution over {sample_size} samples: "
                 f"{[(p.suggested_local_type, round(prob, 3)) for p, prob in distribution]}")
    return distribution

"""
Aseel Digital Twin — Genetics Module
Allele model, dominance table, local colour taxonomy, and breeding simulation.
"""

from .alleles import (
    Locus,
    AlleleE,
    AlleleS,
    AlleleB,
    AlleleCo,
    AllelePg,
    AlleleMl,
    AlleleMo,
    AlleleBl,
    GeneticProfile,
)
from .dominance import (
    DominanceMode,
    LocusRule,
    DOMINANCE_RULES,
    LocalType,
    PhenotypePrediction,
    resolve_locus,
    predict_phenotype,
    map_to_local_type,
    predict_locus_offspring,
    predict_all_loci_offspring,
)
from .breeding import BreedingSimulator, predict_offspring_distribution

__all__ = [
    # Alleles
    "Locus",
    "AlleleE",
    "AlleleS",
    "AlleleB",
    "AlleleCo",
    "AllelePg",
    "AlleleMl",
    "AlleleMo",
    "AlleleBl",
    "GeneticProfile",

    # Dominance
    "DominanceMode",
    "LocusRule",
    "DOMINANCE_RULES",
    "LocalType",
    "PhenotypePrediction",
    "resolve_locus",
    "predict_phenotype",
    "map_to_local_type",
    "predict_locus_offspring",
    "predict_all_loci_offspring",

    # Breeding
    "BreedingSimulator",
    "predict_offspring_distribution",
]

"""
Aseel Digital Twin — Alleles and Genetic Profiles
Eight independent colour/pattern loci, each carried as a diploid pair.
"""

from dataclasses import dataclass, replace
from typing import Dict, Tuple, Type
from enum import Enum


class Locus(Enum):
    """Plumage loci tracked on a genetic profile."""
    E = "e_locus"      # Base colour
    S = "s_locus"      # Silver / gold
    B = "b_locus"      # Barring
    CO = "co_locus"    # Columbian restriction
    PG = "pg_locus"    # Pattern gene
    ML = "ml_locus"    # Melanotic
    MO = "mo_locus"    # Mottling
    BL = "bl_locus"    # Blue dilution

    @property
    def field_name(self) -> str:
        return self.value

    @property
    def allele_type(self) -> Type[Enum]:
        return LOCUS_ALLELES[self]


class AlleleE(Enum):
    EXTENDED = "E"
    BIRCHEN = "ER"
    DOMINANT_WHEATEN = "eWh"
    WILD_TYPE = "e+"
    BROWN = "eb"


class AlleleS(Enum):
    SILVER = "S"
    GOLD = "s+"


class AlleleB(Enum):
    BARRED = "B"
    NOT_BARRED = "b+"


class AlleleCo(Enum):
    COLUMBIAN = "Co"
    NON_COLUMBIAN = "co+"


class AllelePg(Enum):
    PATTERNED = "Pg"
    NON_PATTERNED = "pg+"


class AlleleMl(Enum):
    MELANOTIC = "Ml"
    NON_MELANOTIC = "ml+"


class AlleleMo(Enum):
    MOTTLED = "mo"
    NON_MOTTLED = "Mo+"


class AlleleBl(Enum):
    BLUE = "Bl"
    NON_BLUE = "bl+"


LOCUS_ALLELES: Dict[Locus, Type[Enum]] = {
    Locus.E: AlleleE,
    Locus.S: AlleleS,
    Locus.B: AlleleB,
    Locus.CO: AlleleCo,
    Locus.PG: AllelePg,
    Locus.ML: AlleleMl,
    Locus.MO: AlleleMo,
    Locus.BL: AlleleBl,
}

AllelePair = Tuple[Enum, Enum]


@dataclass(frozen=True)
class GeneticProfile:
    """
    Diploid genotype across all eight loci.

    Pair order is kept as recorded; phenotype resolution treats
    (a, b) and (b, a) the same. Defaults describe a wild-type bird.
    """
    e_locus: Tuple[AlleleE, AlleleE] = (AlleleE.WILD_TYPE, AlleleE.WILD_TYPE)
    s_locus: Tuple[AlleleS, AlleleS] = (AlleleS.GOLD, AlleleS.GOLD)
    b_locus: Tuple[AlleleB, AlleleB] = (AlleleB.NOT_BARRED, AlleleB.NOT_BARRED)
    co_locus: Tuple[AlleleCo, AlleleCo] = (AlleleCo.NON_COLUMBIAN, AlleleCo.NON_COLUMBIAN)
    pg_locus: Tuple[AllelePg, AllelePg] = (AllelePg.NON_PATTERNED, AllelePg.NON_PATTERNED)
    ml_locus: Tuple[AlleleMl, AlleleMl] = (AlleleMl.NON_MELANOTIC, AlleleMl.NON_MELANOTIC)
    mo_locus: Tuple[AlleleMo, AlleleMo] = (AlleleMo.NON_MOTTLED, AlleleMo.NON_MOTTLED)
    bl_locus: Tuple[AlleleBl, AlleleBl] = (AlleleBl.NON_BLUE, AlleleBl.NON_BLUE)

    def __post_init__(self):
        for locus in Locus:
            pair = getattr(self, locus.field_name)
            if len(pair) != 2:
                raise ValueError(f"{locus.name} locus needs exactly two alleles, got {len(pair)}")
            expected = locus.allele_type
            for allele in pair:
                if not isinstance(allele, expected):
                    raise TypeError(f"{locus.name} locus expects {expected.__name__}, got {allele!r}")
            object.__setattr__(self, locus.field_name, tuple(pair))

    def pair(self, locus: Locus) -> AllelePair:
        return getattr(self, locus.field_name)

    def with_pair(self, locus: Locus, alleles: AllelePair) -> "GeneticProfile":
        """Return a copy with one locus replaced."""
        return replace(self, **{locus.field_name: tuple(alleles)})

    def to_dict(self) -> Dict[str, Tuple[str, str]]:
        """Short allele symbols per locus, e.g. {'E': ('E', 'e+'), ...}."""
        return {locus.name: tuple(a.value for a in self.pair(locus)) for locus in Locus}

"""
Aseel Digital Twin — Trait Dominance Table

Mendelian dominance rules for the eight plumage loci and the mapping from
resolved phenotypes to the traditional Andhra/Telangana colour names.

Dominance per locus:
- E  (base colour): EXTENDED > BIRCHEN > DOMINANT_WHEATEN > WILD_TYPE > brown
- S  (silver/gold): SILVER > GOLD
- B  (barring): BARRED > NOT_BARRED
- Co (columbian): COLUMBIAN > NON_COLUMBIAN
- Pg (pattern): PATTERNED > NON_PATTERNED
- Ml (melanotic): MELANOTIC > NON_MELANOTIC
- Mo (mottling): recessive, expressed only when homozygous
- Bl (blue): incomplete dominance, Bl/Bl = Splash, Bl/bl+ = Blue
"""

from collections import Counter
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple
from enum import Enum, auto

from ..config import BREEDING
from .alleles import (
    Locus,
    AlleleE, AlleleS, AlleleB, AlleleCo, AllelePg, AlleleMl, AlleleMo, AlleleBl,
    AllelePair,
    GeneticProfile,
)


class DominanceMode(Enum):
    DOMINANT = auto()      # First allele in priority order present in either slot wins
    INCOMPLETE = auto()    # Homozygous, heterozygous and absent each have a label
    RECESSIVE = auto()     # Expressed only when both slots hold the allele


@dataclass(frozen=True)
class LocusRule:
    """How one locus resolves a diploid pair to a phenotype label."""
    mode: DominanceMode
    # DOMINANT: ordered (allele, label) pairs; INCOMPLETE/RECESSIVE: the single key allele
    priority: Tuple[Tuple[Enum, str], ...]
    default_label: str
    heterozygous_label: Optional[str] = None


# =============================================================================
# RULE TABLE
# =============================================================================

DOMINANCE_RULES: Dict[Locus, LocusRule] = {
    Locus.E: LocusRule(
        mode=DominanceMode.DOMINANT,
        priority=(
            (AlleleE.EXTENDED, "Extended Black"),
            (AlleleE.BIRCHEN, "Birchen"),
            (AlleleE.DOMINANT_WHEATEN, "Wheaten"),
            (AlleleE.WILD_TYPE, "Wild Type"),
        ),
        default_label="Brown",
    ),
    Locus.S: LocusRule(
        mode=DominanceMode.DOMINANT,
        priority=((AlleleS.SILVER, "Silver"),),
        default_label="Gold",
    ),
    Locus.B: LocusRule(
        mode=DominanceMode.DOMINANT,
        priority=((AlleleB.BARRED, "Barred"),),
        default_label="Non-Barred",
    ),
    Locus.CO: LocusRule(
        mode=DominanceMode.DOMINANT,
        priority=((AlleleCo.COLUMBIAN, "Columbian"),),
        default_label="Non-Columbian",
    ),
    Locus.PG: LocusRule(
        mode=DominanceMode.DOMINANT,
        priority=((AllelePg.PATTERNED, "Patterned"),),
        default_label="Non-Patterned",
    ),
    Locus.ML: LocusRule(
        mode=DominanceMode.DOMINANT,
        priority=((AlleleMl.MELANOTIC, "Melanotic"),),
        default_label="Non-Melanotic",
    ),
    Locus.MO: LocusRule(
        mode=DominanceMode.RECESSIVE,
        priority=((AlleleMo.MOTTLED, "Mottled"),),
        default_label="Non-Mottled",
    ),
    Locus.BL: LocusRule(
        mode=DominanceMode.INCOMPLETE,
        priority=((AlleleBl.BLUE, "Splash"),),
        default_label="Non-Blue",
        heterozygous_label="Blue",
    ),
}

DOMINANCE_TABLE_VERSION = BREEDING.dominance_table_version


def resolve_locus(locus: Locus, pair: AllelePair) -> str:
    """Phenotype label for one locus; order of the pair does not matter."""
    rule = DOMINANCE_RULES[locus]
    first, second = pair

    if rule.mode == DominanceMode.DOMINANT:
        for allele, label in rule.priority:
            if first == allele or second == allele:
                return label
        return rule.default_label

    key, label = rule.priority[0]
    if rule.mode == DominanceMode.RECESSIVE:
        return label if first == key and second == key else rule.default_label

    # Homozygous is checked before heterozygous
    if first == key and second == key:
        return label
    if first == key or second == key:
        return rule.heterozygous_label
    return rule.default_label


# =============================================================================
# COMPOSITE PHENOTYPE
# =============================================================================

@dataclass(frozen=True)
class PhenotypePrediction:
    """Resolved plumage of one genotype plus its local colour name."""
    base_color: str
    silver_gold: str
    blue_effect: str
    mottled: bool
    barred: bool
    columbian: bool
    melanotic: bool
    suggested_local_type: str
    confidence: float


class LocalType(Enum):
    """Traditional Aseel colour classes."""
    KAKI = "Kaki"              # Solid black
    SETHU = "Sethu"            # White / very light
    DEGA = "Dega"              # Red, eagle coloured
    SAVALA = "Savala"          # Black with markings
    PARLA = "Parla"            # Barred
    NEMALI = "Nemali"          # Peacock gold
    POOLA = "Poola"            # Mottled
    NALLA_BORA = "Nalla Bora"  # Dark melanotic
    ABRASU = "Abrasu"          # Light gold
    KOKKIRAYI = "Kokkirayi"    # Blue
    PINGALA = "Pingala"        # Splash
    KOWJU = "Kowju"            # Tricolour
    MAILA = "Maila"            # Mixed


# Ordered, first match wins. Each rule reads the resolved PhenotypePrediction
# fields (local type not yet assigned).
LOCAL_TYPE_RULES: Tuple[Tuple[LocalType, Callable[[PhenotypePrediction], bool]], ...] = (
    (LocalType.KAKI, lambda p: p.base_color == "Extended Black" and p.blue_effect == "Non-Blue" and not p.mottled),
    (LocalType.SETHU, lambda p: p.base_color == "Wheaten" and p.silver_gold == "Silver"),
    (LocalType.DEGA, lambda p: p.base_color == "Wild Type" and p.silver_gold == "Gold" and not p.melanotic),
    (LocalType.SAVALA, lambda p: p.base_color == "Extended Black" and not p.mottled and p.barred),
    (LocalType.PARLA, lambda p: p.barred and p.base_color == "Extended Black"),
    (LocalType.NEMALI, lambda p: p.base_color == "Wheaten" and p.silver_gold == "Gold"),
    (LocalType.POOLA, lambda p: p.mottled),
    (LocalType.NALLA_BORA, lambda p: p.melanotic and p.base_color == "Extended Black"),
    (LocalType.ABRASU, lambda p: p.base_color == "Wheaten"),
    (LocalType.KOKKIRAYI, lambda p: p.blue_effect == "Blue"),
    (LocalType.PINGALA, lambda p: p.blue_effect == "Splash"),
    (LocalType.KOWJU, lambda p: p.base_color == "Birchen"),
)


def map_to_local_type(prediction: PhenotypePrediction) -> LocalType:
    for local_type, matches in LOCAL_TYPE_RULES:
        if matches(prediction):
            return local_type
    return LocalType.MAILA


def predict_phenotype(profile: GeneticProfile,
                      confidence: float = BREEDING.prediction_confidence) -> PhenotypePrediction:
    """Resolve every locus of a genotype and name the local colour class."""
    resolved = PhenotypePrediction(
        base_color=resolve_locus(Locus.E, profile.e_locus),
        silver_gold=resolve_locus(Locus.S, profile.s_locus),
        blue_effect=resolve_locus(Locus.BL, profile.bl_locus),
        mottled=resolve_locus(Locus.MO, profile.mo_locus) == "Mottled",
        barred=resolve_locus(Locus.B, profile.b_locus) == "Barred",
        columbian=resolve_locus(Locus.CO, profile.co_locus) == "Columbian",
        melanotic=resolve_locus(Locus.ML, profile.ml_locus) == "Melanotic",
        suggested_local_type="",
        confidence=confidence,
    )
    local_type = map_to_local_type(resolved)
    return PhenotypePrediction(
        base_color=resolved.base_color,
        silver_gold=resolved.silver_gold,
        blue_effect=resolved.blue_effect,
        mottled=resolved.mottled,
        barred=resolved.barred,
        columbian=resolved.columbian,
        melanotic=resolved.melanotic,
        suggested_local_type=local_type.name,
        confidence=confidence,
    )


# =============================================================================
# PUNNETT SQUARES
# =============================================================================

def punnett_square(sire: Sequence[Enum], dam: Sequence[Enum]) -> List[AllelePair]:
    """All four gamete combinations of two diploid parents."""
    return [(s, d) for s in sire for d in dam]


def predict_locus_offspring(locus: Locus, sire: AllelePair, dam: AllelePair) -> Dict[str, float]:
    """
    Offspring phenotype frequencies at one locus from a 2x2 Punnett square.

    Loci assort independently and none is treated as sex-linked, so
    swapping sire and dam gives the same distribution.
    """
    cells = punnett_square(sire, dam)
    counts = Counter(resolve_locus(locus, cell) for cell in cells)
    return {label: count / len(cells) for label, count in counts.items()}


def predict_all_loci_offspring(sire: GeneticProfile,
                               dam: GeneticProfile) -> Dict[Locus, Dict[str, float]]:
    """Per-locus Punnett distributions for every tracked locus."""
    return {locus: predict_locus_offspring(locus, sire.pair(locus), dam.pair(locus)) for locus in Locus}

"""
Test: Genetics
Verifies locus dominance, local colour mapping, Punnett squares and
Monte-Carlo offspring prediction.
"""

import itertools

import pytest
from aseel_twin.config import BREEDING
from aseel_twin.genetics.alleles import (
    Locus,
    AlleleE,
    AlleleS,
    AlleleB,
    AlleleMl,
    AlleleMo,
    AlleleBl,
    GeneticProfile,
)
from aseel_twin.genetics.dominance import (
    LocalType,
    resolve_locus,
    predict_phenotype,
    predict_locus_offspring,
    predict_all_loci_offspring,
)
from aseel_twin.genetics.breeding import BreedingSimulator, predict_offspring_distribution


KAKI_COCK = GeneticProfile(e_locus=(AlleleE.EXTENDED, AlleleE.EXTENDED))
HET_EXTENDED = GeneticProfile(e_locus=(AlleleE.EXTENDED, AlleleE.WILD_TYPE))
WILD_HEN = GeneticProfile()


# =============================================================================
# LOCUS DOMINANCE
# =============================================================================

class TestLocusDominance:
    """Tests for per-locus phenotype resolution."""

    @pytest.mark.parametrize("pair,expected", [
        ((AlleleE.EXTENDED, AlleleE.BROWN), "Extended Black"),
        ((AlleleE.WILD_TYPE, AlleleE.BIRCHEN), "Birchen"),
        ((AlleleE.DOMINANT_WHEATEN, AlleleE.WILD_TYPE), "Wheaten"),
        ((AlleleE.WILD_TYPE, AlleleE.BROWN), "Wild Type"),
        ((AlleleE.BROWN, AlleleE.BROWN), "Brown"),
    ])
    def test_e_locus_priority(self, pair, expected):
        assert resolve_locus(Locus.E, pair) == expected

    def test_blue_incomplete_dominance(self):
        assert resolve_locus(Locus.BL, (AlleleBl.BLUE, AlleleBl.BLUE)) == "Splash"
        assert resolve_locus(Locus.BL, (AlleleBl.NON_BLUE, AlleleBl.BLUE)) == "Blue"
        assert resolve_locus(Locus.BL, (AlleleBl.NON_BLUE, AlleleBl.NON_BLUE)) == "Non-Blue"

    def test_mottling_recessive(self):
        assert resolve_locus(Locus.MO, (AlleleMo.MOTTLED, AlleleMo.MOTTLED)) == "Mottled"
        assert resolve_locus(Locus.MO, (AlleleMo.MOTTLED, AlleleMo.NON_MOTTLED)) == "Non-Mottled"

    def test_pair_order_irrelevant(self):
        """Every locus resolves (a, b) and (b, a) identically."""
        for locus in Locus:
            for a, b in itertools.product(locus.allele_type, repeat=2):
                assert resolve_locus(locus, (a, b)) == resolve_locus(locus, (b, a))


# =============================================================================
# COMPOSITE PHENOTYPE
# =============================================================================

class TestPredictPhenotype:
    """Tests for local colour classification."""

    def test_wild_type_is_dega(self):
        prediction = predict_phenotype(WILD_HEN)
        assert prediction.base_color == "Wild Type"
        assert prediction.silver_gold == "Gold"
        assert prediction.suggested_local_type == LocalType.DEGA.name
        assert prediction.confidence == BREEDING.prediction_confidence

    @pytest.mark.parametrize("overrides,expected", [
        (dict(e_locus=(AlleleE.EXTENDED, AlleleE.EXTENDED)), LocalType.KAKI),
        (dict(e_locus=(AlleleE.DOMINANT_WHEATEN, AlleleE.WILD_TYPE),
              s_locus=(AlleleS.SILVER, AlleleS.GOLD)), LocalType.SETHU),
        (dict(e_locus=(AlleleE.DOMINANT_WHEATEN, AlleleE.WILD_TYPE)), LocalType.NEMALI),
        (dict(e_locus=(AlleleE.EXTENDED, AlleleE.EXTENDED),
              b_locus=(AlleleB.BARRED, AlleleB.NOT_BARRED),
              bl_locus=(AlleleBl.BLUE, AlleleBl.NON_BLUE)), LocalType.SAVALA),
        (dict(e_locus=(AlleleE.EXTENDED, AlleleE.EXTENDED),
              mo_locus=(AlleleMo.MOTTLED, AlleleMo.MOTTLED)), LocalType.POOLA),
        (dict(e_locus=(AlleleE.EXTENDED, AlleleE.EXTENDED),
              ml_locus=(AlleleMl.MELANOTIC, AlleleMl.NON_MELANOTIC),
              bl_locus=(AlleleBl.BLUE, AlleleBl.NON_BLUE)), LocalType.NALLA_BORA),
        (dict(e_locus=(AlleleE.EXTENDED, AlleleE.EXTENDED),
              bl_locus=(AlleleBl.BLUE, AlleleBl.NON_BLUE)), LocalType.KOKKIRAYI),
        (dict(e_locus=(AlleleE.BROWN, AlleleE.BROWN),
              bl_locus=(AlleleBl.BLUE, AlleleBl.BLUE)), LocalType.PINGALA),
        (dict(e_locus=(AlleleE.BIRCHEN, AlleleE.BROWN)), LocalType.KOWJU),
        (dict(s_locus=(AlleleS.SILVER, AlleleS.SILVER)), LocalType.MAILA),
    ])
    def test_local_type_rules(self, overrides, expected):
        assert predict_phenotype(GeneticProfile(**overrides)).suggested_local_type == expected.name

    def test_first_matching_rule_wins(self):
        """A barred non-blue black bird is KAKI because that rule comes first."""
        profile = GeneticProfile(e_locus=(AlleleE.EXTENDED, AlleleE.EXTENDED),
                                 b_locus=(AlleleB.BARRED, AlleleB.BARRED))
        prediction = predict_phenotype(profile)
        assert prediction.barred
        assert prediction.suggested_local_type == LocalType.KAKI.name


# =============================================================================
# PUNNETT SQUARES
# =============================================================================

class TestPunnett:
    """Tests for exact per-locus offspring distributions."""

    def test_heterozygous_extended_cross(self):
        result = predict_locus_offspring(
            Locus.E, (AlleleE.EXTENDED, AlleleE.WILD_TYPE), (AlleleE.WILD_TYPE, AlleleE.WILD_TYPE))
        assert result == {"Extended Black": 0.5, "Wild Type": 0.5}

    def test_blue_cross(self):
        het = (AlleleBl.BLUE, AlleleBl.NON_BLUE)
        assert predict_locus_offspring(Locus.BL, het, het) == {"Splash": 0.25, "Blue": 0.5, "Non-Blue": 0.25}

    def test_mottled_carriers(self):
        het = (AlleleMo.MOTTLED, AlleleMo.NON_MOTTLED)
        assert predict_locus_offspring(Locus.MO, het, het) == {"Mottled": 0.25, "Non-Mottled": 0.75}

    def test_sire_dam_symmetry(self):
        """Swapping parents never changes a locus distribution."""
        for locus in Locus:
            pairs = list(itertools.product(locus.allele_type, repeat=2))
            for sire, dam in itertools.product(pairs, repeat=2):
                assert predict_locus_offspring(locus, sire, dam) == predict_locus_offspring(locus, dam, sire)

    def test_probabilities_sum_to_one(self):
        result = predict_locus_offspring(
            Locus.E, (AlleleE.BIRCHEN, AlleleE.BROWN), (AlleleE.DOMINANT_WHEATEN, AlleleE.WILD_TYPE))
        assert sum(result.values()) == pytest.approx(1.0)

    def test_all_loci(self):
        result = predict_all_loci_offspring(HET_EXTENDED, WILD_HEN)
        assert set(result) == set(Locus)
        assert result[Locus.E] == {"Extended Black": 0.5, "Wild Type": 0.5}
        assert result[Locus.S] == {"Gold": 1.0}


# =============================================================================
# BREEDING SIMULATION
# =============================================================================

class TestBreedingSimulator:
    """Tests for offspring sampling and Monte-Carlo distributions."""

    def test_offspring_alleles_come_from_parents(self):
        simulator = BreedingSimulator(seed=3)
        for chick in simulator.breed_clutch(HET_EXTENDED, WILD_HEN, 50):
            from_sire, from_dam = chick.e_locus
            assert from_sire in HET_EXTENDED.e_locus
            assert from_dam == AlleleE.WILD_TYPE

    def test_seeded_clutches_match(self):
        first = BreedingSimulator(seed=11).breed_clutch(HET_EXTENDED, HET_EXTENDED, 20)
        second = BreedingSimulator(seed=11).breed_clutch(HET_EXTENDED, HET_EXTENDED, 20)
        assert first == second

    def test_seeded_distribution_reproducible(self):
        first = predict_offspring_distribution(HET_EXTENDED, WILD_HEN, sample_size=1000, seed=42)
        second = predict_offspring_distribution(HET_EXTENDED, WILD_HEN, sample_size=1000, seed=42)
        assert first == second

    def test_distribution_shape(self):
        result = predict_offspring_distribution(HET_EXTENDED, WILD_HEN, sample_size=1000, seed=1)
        probabilities = [p for _, p in result]

        assert probabilities == sorted(probabilities, reverse=True)
        assert sum(probabilities) == pytest.approx(1.0)

        by_type = {prediction.suggested_local_type: p for prediction, p in result}
        assert set(by_type) == {"KAKI", "DEGA"}
        assert by_type["KAKI"] == pytest.approx(0.5, abs=0.05)

    def test_homozygous_parents_breed_true(self):
        result = predict_offspring_distribution(KAKI_COCK, KAKI_COCK, sample_size=200, seed=5)
        assert len(result) == 1
        prediction, probability = result[0]
        assert prediction.suggested_local_type == "KAKI"
        assert probability == 1.0

    @pytest.mark.parametrize("sample_size", [0, -10, BREEDING.max_sample_size + 1])
    def test_sample_size_bounds(self, sample_size):
        with pytest.raises(ValueError):
            predict_offspring_distribution(KAKI_COCK, WILD_HEN, sample_size=sample_size)


class TestGeneticProfile:

    def test_rejects_wrong_allele_type(self):
        with pytest.raises(TypeError):
            GeneticProfile(e_locus=(AlleleS.SILVER, AlleleS.GOLD))

    def test_with_pair(self):
        profile = WILD_HEN.with_pair(Locus.BL, (AlleleBl.BLUE, AlleleBl.BLUE))
        assert profile.pair(Locus.BL) == (AlleleBl.BLUE, AlleleBl.BLUE)
        assert WILD_HEN.pair(Locus.BL) == (AlleleBl.NON_BLUE, AlleleBl.NON_BLUE)

    def test_to_dict(self):
        assert HET_EXTENDED.to_dict()["E"] == ("E", "e+")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

"""
Unit tests for the chromosome representation (Subtask 1.3).

Tests cover:
- Active gene bookkeeping per implementation group
- Aggregate scores and similarity
- Genetic operators
- Fitness cache invalidation
- Dictionary and vector encodings
"""

import random

import pytest

from src.optimizer.core.alleles import Allele
from src.optimizer.core.catalog import (
    ImplementationGroup,
    Category,
    Function,
    get_gene,
    genes_for,
)
from src.optimizer.core.chromosome import Chromosome, FitnessScores


def _scores(fitness: float = 0.5) -> FitnessScores:
    return FitnessScores(
        goal_coverage=1.0,
        similarity=1.0,
        global_maturity=0.5,
        constraint_coverage=1.0,
        feasible=True,
        fitness=fitness,
    )


class TestChromosomeGenes:
    """Test suite for gene access."""

    @pytest.mark.parametrize("group", list(ImplementationGroup))
    def test_every_active_gene_has_one_allele(self, group):
        chromosome = Chromosome(group)
        assert set(chromosome.genes) == set(genes_for(group))
        assert all(isinstance(allele, Allele) for allele in chromosome.genes.values())

    def test_default_allele(self):
        chromosome = Chromosome(ImplementationGroup.IG1, default=Allele.L67)
        assert set(chromosome.genes.values()) == {Allele.L67}

    def test_initial_alleles_by_name(self):
        chromosome = Chromosome(ImplementationGroup.IG1, alleles={"PR_AC_CSC_4_7": Allele.L100})
        assert chromosome.get_allele("PR_AC_CSC_4_7") is Allele.L100
        assert chromosome.get_allele_value(get_gene("PR_AC_CSC_4_7")) == 1.0

    def test_write_to_inactive_gene_is_ignored(self):
        chromosome = Chromosome(ImplementationGroup.IG1)
        chromosome.update_allele("ID_RM_9D_8", Allele.L100)
        assert not chromosome.is_active("ID_RM_9D_8")
        assert len(chromosome.genes) == 47

    def test_read_of_inactive_gene_is_rejected(self):
        chromosome = Chromosome(ImplementationGroup.IG1)
        with pytest.raises(KeyError):
            chromosome.get_allele("ID_RM_9D_8")

    def test_invalid_arguments(self):
        with pytest.raises(TypeError):
            Chromosome(1)
        chromosome = Chromosome(ImplementationGroup.IG1)
        with pytest.raises(TypeError):
            chromosome.update_allele("PR_AC_CSC_4_7", 0.67)
        with pytest.raises(KeyError):
            chromosome.update_allele("UNKNOWN", Allele.L0)

    def test_randomize_uses_only_domain_values(self):
        chromosome = Chromosome(ImplementationGroup.IG3)
        chromosome.randomize(random.Random(7))
        assert set(chromosome.genes.values()) <= set(Allele.ordered())
        assert len(set(chromosome.genes.values())) > 1


class TestChromosomeScores:
    """Test suite for aggregate scores."""

    @pytest.mark.parametrize("group", list(ImplementationGroup))
    def test_asset_score_extremes(self, group):
        assert Chromosome(group, default=Allele.L100).asset_score() == 1.0
        assert Chromosome(group, default=Allele.L0).asset_score() == 0.0

    def test_category_score_is_mean_of_active_genes(self):
        chromosome = Chromosome(ImplementationGroup.IG1)
        genes = [g for g in chromosome.active_genes if g.category is Category.PR_AC]
        chromosome.update_allele(genes[0], Allele.L100)
        assert chromosome.category_score(Category.PR_AC) == pytest.approx(1.0 / len(genes))

    def test_function_score(self):
        chromosome = Chromosome(ImplementationGroup.IG1, default=Allele.L67)
        assert chromosome.function_score(Function.PROTECT) == pytest.approx(0.67)

    def test_score_of_inactive_grouping_is_zero(self):
        chromosome = Chromosome(ImplementationGroup.IG1, default=Allele.L100)
        assert chromosome.function_score(Function.RECOVER) == 0.0

    def test_similarity(self):
        baseline = Chromosome(ImplementationGroup.IG1, default=Allele.L33)
        assert baseline.similarity_to(baseline.clone()) == 1.0
        low = Chromosome(ImplementationGroup.IG1, default=Allele.L0)
        high = Chromosome(ImplementationGroup.IG1, default=Allele.L100)
        assert low.similarity_to(high) == 0.0
        assert baseline.similarity_to(low) == pytest.approx(0.67)

    def test_similarity_requires_same_scope(self):
        with pytest.raises(ValueError):
            Chromosome(ImplementationGroup.IG1).similarity_to(Chromosome(ImplementationGroup.IG2))

    def test_differences_from(self):
        baseline = Chromosome(ImplementationGroup.IG1, default=Allele.L33)
        changed = baseline.clone()
        changed.update_allele("PR_AC_CSC_4_7", Allele.L67)
        assert changed.differences_from(baseline) == {
            get_gene("PR_AC_CSC_4_7"): (Allele.L33, Allele.L67)
        }


class TestGeneticOperators:
    """Test suite for mutation and crossover."""

    def test_zero_mutation_rate_changes_nothing(self):
        chromosome = Chromosome(ImplementationGroup.IG1)
        before = chromosome.clone()
        assert chromosome.mutate(0.0, random.Random(1)) == 0
        assert chromosome == before

    def test_full_mutation_changes_every_gene(self):
        chromosome = Chromosome(ImplementationGroup.IG1, default=Allele.L33)
        assert chromosome.mutate(1.0, random.Random(1)) == 47
        assert Allele.L33 not in chromosome.genes.values()

    def test_uniform_crossover_exchanges_genes(self):
        low = Chromosome(ImplementationGroup.IG1, default=Allele.L0)
        high = Chromosome(ImplementationGroup.IG1, default=Allele.L100)
        child1, child2 = low.uniform_crossover(high, random.Random(3))
        for gene in low.active_genes:
            # Each position keeps one allele from each parent
            assert {child1.get_allele(gene), child2.get_allele(gene)} == {Allele.L0, Allele.L100}
        assert child1 != low and child2 != high
        # Parents are untouched
        assert set(low.genes.values()) == {Allele.L0}

    def test_operators_are_seed_deterministic(self):
        a = Chromosome(ImplementationGroup.IG2)
        b = Chromosome(ImplementationGroup.IG2)
        a.mutate(0.3, random.Random(11))
        b.mutate(0.3, random.Random(11))
        assert a == b


class TestFitnessCache:
    """Test suite for cached fitness handling."""

    def test_write_invalidates_scores(self):
        chromosome = Chromosome(ImplementationGroup.IG1)
        chromosome.scores = _scores()
        assert chromosome.evaluated
        chromosome.update_allele("PR_AC_CSC_4_7", Allele.L100)
        assert not chromosome.evaluated
        assert chromosome.fitness == 0.0
        assert not chromosome.feasible

    def test_writing_same_allele_keeps_scores(self):
        chromosome = Chromosome(ImplementationGroup.IG1)
        chromosome.scores = _scores()
        chromosome.update_allele("PR_AC_CSC_4_7", Allele.L0)
        assert chromosome.evaluated

    def test_clone_is_independent(self):
        chromosome = Chromosome(ImplementationGroup.IG1)
        chromosome.scores = _scores(0.8)
        copy = chromosome.clone()
        assert copy.fitness == 0.8
        copy.update_allele("PR_AC_CSC_4_7", Allele.L100)
        assert chromosome.get_allele("PR_AC_CSC_4_7") is Allele.L0
        assert chromosome.evaluated


class TestEncodings:
    """Test suite for serialization."""

    def test_dict_round_trip(self):
        chromosome = Chromosome(ImplementationGroup.IG2)
        chromosome.randomize(random.Random(5))
        chromosome.scores = _scores()
        restored = Chromosome.from_dict(chromosome.to_dict())
        assert restored == chromosome
        assert restored.scores == chromosome.scores

    def test_vector_infers_group_from_length(self):
        chromosome = Chromosome.from_vector([2] * 107)
        assert chromosome.implementation_group is ImplementationGroup.IG2
        assert set(chromosome.genes.values()) == {Allele.L67}
        assert chromosome.to_vector() == [2] * 107

    def test_vector_length_validation(self):
        with pytest.raises(ValueError):
            Chromosome.from_vector([0] * 50)
        with pytest.raises(ValueError):
            Chromosome.from_vector([0] * 47, ImplementationGroup.IG2)

    def test_vector_value_validation(self):
        with pytest.raises(ValueError):
            Chromosome.from_vector([0] * 46 + [4])

    def test_identity(self):
        a = Chromosome(ImplementationGroup.IG1)
        b = Chromosome(ImplementationGroup.IG1)
        assert a.chromosome_id == b.chromosome_id
        assert hash(a) == hash(b)
        b.update_allele("PR_AC_CSC_4_7", Allele.L33)
        assert a.chromosome_id != b.chromosome_id

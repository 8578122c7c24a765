"""
Unit tests for population management (Subtask 4.1).

Tests cover:
- Seeded initialization with deduplication and truncation
- Feasible-first ranking and elitism
- Selection methods
- Statistics and bounded history
"""

import random

import pytest

from src.optimizer.core.alleles import Allele
from src.optimizer.core.catalog import ImplementationGroup
from src.optimizer.core.chromosome import Chromosome, FitnessScores
from src.optimizer.core.config import (
    OptimizerConfig,
    EvolutionParameters,
    LoggingConfig,
    create_test_config,
)
from src.optimizer.core.population import Population, Individual


def _evaluated(default: Allele, fitness: float, feasible: bool = True) -> Chromosome:
    chromosome = Chromosome(ImplementationGroup.IG1, default=default)
    chromosome.scores = FitnessScores(
        goal_coverage=1.0 if feasible else 0.0,
        similarity=1.0,
        global_maturity=default.value,
        constraint_coverage=1.0 if feasible else 0.5,
        feasible=feasible,
        fitness=fitness,
    )
    return chromosome


def _population(config: OptimizerConfig, chromosomes) -> Population:
    population = Population(config, random.Random(1))
    population.individuals = [Individual(chromosome=c) for c in chromosomes]
    return population


class TestInitialization:
    """Test suite for population initialization."""

    def test_random_fill(self, test_config):
        population = Population(test_config, random.Random(1))
        population.initialize(ImplementationGroup.IG1)
        assert len(population) == test_config.evolution.population_size
        assert all(not ind.evaluated for ind in population.individuals)

    def test_seeds_come_first_and_are_deduplicated(self, test_config, ig1_baseline):
        population = Population(test_config, random.Random(1))
        population.initialize(ImplementationGroup.IG1, [ig1_baseline, ig1_baseline.clone()])
        assert population.individuals[0].chromosome == ig1_baseline
        assert population.individuals[1].chromosome != ig1_baseline
        assert len(population) == test_config.evolution.population_size

    def test_seeds_are_truncated(self):
        config = OptimizerConfig(evolution=EvolutionParameters(population_size=2, elite_size=1))
        seeds = [Chromosome(ImplementationGroup.IG1, default=a) for a in Allele.ordered()]
        population = Population(config, random.Random(1))
        population.initialize(ImplementationGroup.IG1, seeds)
        assert [ind.chromosome for ind in population.individuals] == seeds[:2]

    def test_seeds_are_copied(self, test_config, ig1_baseline):
        population = Population(test_config, random.Random(1))
        population.initialize(ImplementationGroup.IG1, [ig1_baseline])
        population.individuals[0].chromosome.update_allele("PR_AC_CSC_4_7", Allele.L100)
        assert ig1_baseline.get_allele("PR_AC_CSC_4_7") is Allele.L33

    def test_seed_determinism(self, test_config):
        a = Population(test_config, random.Random(9))
        b = Population(test_config, random.Random(9))
        a.initialize(ImplementationGroup.IG2)
        b.initialize(ImplementationGroup.IG2)
        assert [i.id for i in a.individuals] == [i.id for i in b.individuals]


class TestRanking:
    """Test suite for ranking and elitism."""

    def test_feasible_outrank_infeasible(self, test_config):
        infeasible = _evaluated(Allele.L100, 0.99, feasible=False)
        weak = _evaluated(Allele.L0, 0.1)
        strong = _evaluated(Allele.L33, 0.5)
        population = _population(test_config, [infeasible, weak, strong])

        ranked = [ind.chromosome for ind in population.rank()]
        assert ranked == [strong, weak, infeasible]
        assert population.best().chromosome is strong

    def test_elite(self):
        config = OptimizerConfig(evolution=EvolutionParameters(population_size=3, elite_size=2))
        chromosomes = [_evaluated(Allele.L0, 0.1), _evaluated(Allele.L33, 0.9), _evaluated(Allele.L67, 0.5)]
        population = _population(config, chromosomes)
        assert [ind.fitness for ind in population.get_elite()] == [0.9, 0.5]

    def test_replace_population_ages_individuals(self, test_config):
        population = _population(test_config, [_evaluated(Allele.L0, 0.1)])
        survivor = population.individuals[0]
        population.replace_population([survivor])
        assert population.generation == 1
        assert survivor.age == 1
        assert survivor.chromosome.generation == 1

    def test_replace_tail_keeps_elites(self):
        config = OptimizerConfig(evolution=EvolutionParameters(population_size=4, elite_size=1))
        chromosomes = [_evaluated(a, 0.5) for a in Allele.ordered()]
        population = _population(config, chromosomes)
        immigrants = [Individual(chromosome=Chromosome(ImplementationGroup.IG1)) for _ in range(10)]
        population.replace_tail(immigrants)
        assert len(population) == 4
        assert population.individuals[0].chromosome is chromosomes[0]
        assert population.individuals[1] is immigrants[0]


class TestSelection:
    """Test suite for parent selection."""

    @pytest.mark.parametrize("method", ["tournament", "roulette", "rank"])
    def test_methods_return_members(self, method):
        config = create_test_config()
        config.evolution.selection_method = method
        chromosomes = [_evaluated(a, 0.2 + 0.2 * i) for i, a in enumerate(Allele.ordered())]
        population = _population(config, chromosomes)
        parents = population.select_parents(6)
        assert len(parents) == 6
        assert all(p in population.individuals for p in parents)

    def test_full_tournament_picks_best(self):
        config = OptimizerConfig(evolution=EvolutionParameters(
            population_size=3, elite_size=1, tournament_size=3
        ))
        best = _evaluated(Allele.L0, 0.1)
        population = _population(config, [
            best, _evaluated(Allele.L33, 0.9, feasible=False), _evaluated(Allele.L67, 0.05)
        ])
        assert all(p.chromosome is best for p in population.select_parents(4))

    def test_tournament_larger_than_population(self):
        config = create_test_config()
        config.evolution.tournament_size = 20
        population = _population(config, [_evaluated(Allele.L0, 0.1), _evaluated(Allele.L33, 0.2)])
        assert population.select_parents(1)[0].fitness == 0.2

    def test_roulette_with_zero_fitness(self):
        config = create_test_config()
        config.evolution.selection_method = "roulette"
        population = _population(config, [_evaluated(Allele.L0, 0.0), _evaluated(Allele.L33, 0.0)])
        assert len(population.select_parents(3)) == 3


class TestStatistics:
    """Test suite for statistics and history."""

    def test_statistics(self, test_config):
        population = _population(test_config, [
            _evaluated(Allele.L0, 0.2),
            _evaluated(Allele.L33, 0.6),
            _evaluated(Allele.L67, 0.4, feasible=False),
        ])
        stats = population.calculate_statistics()
        assert stats["best_fitness"] == 0.6
        assert stats["worst_fitness"] == 0.2
        assert stats["avg_fitness"] == pytest.approx(0.4)
        assert stats["feasible_ratio"] == pytest.approx(2 / 3)
        assert stats["unique_ratio"] == 1.0

    def test_statistics_ignore_unevaluated(self, test_config):
        population = _population(test_config, [Chromosome(ImplementationGroup.IG1)])
        assert population.calculate_statistics() == {}

    def test_history_is_bounded(self):
        config = create_test_config()
        config.logging = LoggingConfig(history_size=3, metrics_export=False)
        population = _population(config, [_evaluated(Allele.L0, 0.2)])
        for _ in range(5):
            population.record_history()
        assert len(population.history) == 3
        assert "timestamp" in population.history[-1]

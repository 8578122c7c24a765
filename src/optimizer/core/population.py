"""
Population Management for the Maturity Optimizer.

This module manages populations of individuals (chromosomes) throughout
the evolution process, including initialization, feasible-first ranking,
selection, and statistics tracking.
"""

from typing import List, Optional, Dict, Any, Sequence, Tuple
from dataclasses import dataclass, field
import random
from datetime import datetime

import numpy as np

from src.optimizer.core.catalog import ImplementationGroup
from src.optimizer.core.chromosome import Chromosome
from src.optimizer.core.config import OptimizerConfig


@dataclass
class Individual:
    """
    Represents an individual in the population.

    An individual wraps a chromosome and tracks lineage metadata. Fitness
    lives on the chromosome itself, written by the fitness evaluator.
    """

    chromosome: Chromosome
    age: int = 0
    parent_ids: List[str] = field(default_factory=list)

    @property
    def id(self) -> str:
        """Get the individual's unique identifier."""
        return self.chromosome.chromosome_id

    @property
    def fitness(self) -> float:
        return self.chromosome.fitness

    @property
    def feasible(self) -> bool:
        return self.chromosome.feasible

    @property
    def evaluated(self) -> bool:
        return self.chromosome.evaluated

    @property
    def rank_key(self) -> Tuple[bool, float]:
        """Feasible individuals outrank infeasible ones; fitness breaks ties."""
        return (self.feasible, self.fitness)

    def increment_age(self) -> None:
        """Increment the individual's age by one generation."""
        self.age += 1

    def to_dict(self) -> Dict[str, Any]:
        """Convert individual to dictionary representation."""
        return {
            "chromosome": self.chromosome.to_dict(),
            "age": self.age,
            "parent_ids": self.parent_ids,
        }


class Population:
    """
    Manages a population of individuals in the genetic algorithm.

    All randomness is drawn from the ``rng`` handed in by the engine so a run
    is reproducible from its seed.
    """

    def __init__(self, config: OptimizerConfig, rng: random.Random, generation: int = 0):
        """Initialize an empty population."""
        self.config = config
        self.rng = rng
        self.individuals: List[Individual] = []
        self.generation = generation
        self.statistics: Dict[str, Any] = {}
        self.history: List[Dict[str, Any]] = []

    def __len__(self) -> int:
        return len(self.individuals)

    def initialize(self, implementation_group: ImplementationGroup, seeds: Sequence[Chromosome] = ()) -> None:
        """
        Fill the population with seed chromosomes followed by random ones.

        Duplicate seeds are dropped and seeds beyond the population size are
        discarded.
        """
        size = self.config.evolution.population_size
        seen = set()
        for seed in seeds:
            if len(self.individuals) >= size:
                break
            if seed.chromosome_id in seen:
                continue
            seen.add(seed.chromosome_id)
            self.individuals.append(Individual(chromosome=seed.clone()))

        while len(self.individuals) < size:
            self.individuals.append(Individual(chromosome=self.random_chromosome(implementation_group)))

        for individual in self.individuals:
            individual.chromosome.generation = self.generation

    def random_chromosome(self, implementation_group: ImplementationGroup) -> Chromosome:
        """Chromosome with a uniformly random allele on every active gene."""
        chromosome = Chromosome(implementation_group)
        chromosome.randomize(self.rng)
        return chromosome

    def rank(self) -> List[Individual]:
        """Individuals sorted best first by (feasible, fitness)."""
        return sorted(self.individuals, key=lambda ind: ind.rank_key, reverse=True)

    def best(self) -> Optional[Individual]:
        if not self.individuals:
            return None
        return max(self.individuals, key=lambda ind: ind.rank_key)

    def select_parents(self, num_parents: int) -> List[Individual]:
        """Select parents for reproduction using configured selection method."""
        method = self.config.evolution.selection_method

        if method == "tournament":
            return self._tournament_selection(num_parents)
        elif method == "roulette":
            return self._roulette_selection(num_parents)
        elif method == "rank":
            return self._rank_selection(num_parents)
        else:
            raise ValueError(f"Unknown selection method: {method}")

    def _tournament_selection(self, num_parents: int) -> List[Individual]:
        """Select parents using tournament selection over the feasible-first order."""
        parents = []
        tournament_size = min(self.config.evolution.tournament_size, len(self.individuals))

        for _ in range(num_parents):
            tournament = self.rng.sample(self.individuals, tournament_size)
            parents.append(max(tournament, key=lambda ind: ind.rank_key))

        return parents

    def _roulette_selection(self, num_parents: int) -> List[Individual]:
        """Select parents with probability proportional to fitness."""
        weights = [ind.fitness for ind in self.individuals]
        if sum(weights) <= 0:
            return [self.rng.choice(self.individuals) for _ in range(num_parents)]
        return self.rng.choices(self.individuals, weights=weights, k=num_parents)

    def _rank_selection(self, num_parents: int) -> List[Individual]:
        """Select parents using linear rank-based probabilities."""
        ranked = self.rank()
        n = len(ranked)
        probabilities = [(2 - i / n) / n for i in range(n)]
        return self.rng.choices(ranked, weights=probabilities, k=num_parents)

    def get_elite(self) -> List[Individual]:
        """Get the elite individuals to preserve."""
        return self.rank()[:self.config.evolution.elite_size]

    def replace_population(self, new_individuals: List[Individual]) -> None:
        """Replace current population with new individuals."""
        self.individuals = new_individuals

        self.generation += 1
        for ind in self.individuals:
            ind.chromosome.generation = self.generation
            ind.increment_age()

    def replace_tail(self, replacements: List[Individual]) -> None:
        """Overwrite the last individuals, leaving elites at the front untouched."""
        if not replacements:
            return
        keep = max(self.config.evolution.elite_size, len(self.individuals) - len(replacements))
        for individual in replacements:
            individual.chromosome.generation = self.generation
        self.individuals = self.individuals[:keep] + replacements[:len(self.individuals) - keep]

    def calculate_statistics(self) -> Dict[str, Any]:
        """Calculate population statistics over evaluated individuals."""
        evaluated = [ind for ind in self.individuals if ind.evaluated]
        if not evaluated:
            return {}

        fitnesses = np.array([ind.fitness for ind in evaluated])
        coverage = np.array([ind.chromosome.scores.goal_coverage for ind in evaluated])
        maturity = np.array([ind.chromosome.scores.global_maturity for ind in evaluated])
        feasible = np.array([ind.feasible for ind in evaluated], dtype=bool)

        stats = {
            "generation": self.generation,
            "population_size": len(self.individuals),
            "evaluated_count": len(evaluated),
            "best_fitness": float(fitnesses.max()),
            "worst_fitness": float(fitnesses.min()),
            "avg_fitness": float(fitnesses.mean()),
            "median_fitness": float(np.median(fitnesses)),
            "fitness_std": float(fitnesses.std()),
            "best_goal_coverage": float(coverage.max()),
            "avg_global_maturity": float(maturity.mean()),
            "feasible_ratio": float(feasible.mean()),
            "unique_ratio": len({ind.id for ind in self.individuals}) / len(self.individuals),
        }

        self.statistics = stats
        return stats

    def record_history(self) -> Dict[str, Any]:
        """Record current population statistics in a bounded history."""
        entry = {
            **self.calculate_statistics(),
            "timestamp": datetime.now().isoformat()
        }
        self.history.append(entry)

        max_history = self.config.logging.history_size
        if len(self.history) > max_history:
            self.history = self.history[-max_history:]
        return entry

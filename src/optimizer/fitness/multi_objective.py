"""
Multi-objective fitness evaluation for maturity chromosomes.

Combines goal compliance, similarity to the current state and global
maturity into one scalar with fixed weights, and applies the hard
constraint penalty.
"""

from typing import Dict, Optional, Tuple

from src.optimizer.core.chromosome import Chromosome, FitnessScores
from src.optimizer.core.config import FitnessConfig
from src.optimizer.fitness.base import FitnessMetrics
from src.optimizer.fitness.compliance import GoalComplianceFitness, ConstraintFeasibility
from src.optimizer.fitness.similarity import SimilarityFitness
from src.optimizer.fitness.maturity import GlobalMaturityFitness
from src.optimizer.goals.strategic import StrategicGoals


class MultiObjectiveFitness:
    """
    Weighted aggregation of the three optimizer objectives.

    ``fitness = w_goals * coverage + w_similarity * similarity + w_maturity * maturity``

    Chromosomes violating a constraint are marked infeasible and their
    fitness is scaled down by ``penalty_factor`` times the share of
    constraint satisfaction they are missing.
    """

    def __init__(
        self,
        strategic_goals: StrategicGoals,
        baseline: Chromosome,
        config: Optional[FitnessConfig] = None
    ):
        """
        Initialize the evaluator.

        Args:
            strategic_goals: Goals and constraints of the asset
            baseline: Current state of the asset
            config: Weights and penalty settings
        """
        if strategic_goals is None or baseline is None:
            raise ValueError("strategic_goals and baseline are required")
        if baseline.implementation_group != strategic_goals.implementation_group:
            raise ValueError(
                f"Baseline scope {baseline.implementation_group.name} does not match "
                f"goals scope {strategic_goals.implementation_group.name}"
            )

        self.config = config or FitnessConfig()
        self.strategic_goals = strategic_goals
        self.compliance = GoalComplianceFitness(strategic_goals, graded=self.config.graded_coverage)
        self.feasibility = ConstraintFeasibility(strategic_goals)
        self.similarity = SimilarityFitness(baseline)
        self.maturity = GlobalMaturityFitness()

    @property
    def weights(self) -> Dict[str, float]:
        return {
            self.compliance.name: self.config.goal_coverage_weight,
            self.similarity.name: self.config.similarity_weight,
            self.maturity.name: self.config.global_maturity_weight,
        }

    def evaluate_objectives(self, chromosome: Chromosome) -> Dict[str, float]:
        """Evaluate each objective independently."""
        return {
            self.compliance.name: self.compliance.evaluate(chromosome),
            self.similarity.name: self.similarity.evaluate(chromosome),
            self.maturity.name: self.maturity.evaluate(chromosome),
        }

    def combine(self, objectives: Dict[str, float]) -> float:
        """Weighted sum of objective scores."""
        return sum(objectives[name] * weight for name, weight in self.weights.items())

    def evaluate(self, chromosome: Chromosome) -> FitnessScores:
        """
        Compute every fitness component of a chromosome without storing it.

        Safe to call from worker threads.
        """
        objectives = self.evaluate_objectives(chromosome)
        combined = self.combine(objectives)

        feasible = self.feasibility.is_feasible(chromosome)
        constraint_coverage = self.feasibility.evaluate(chromosome)
        if not feasible:
            combined *= 1.0 - self.config.penalty_factor * (1.0 - constraint_coverage)

        return FitnessScores(
            goal_coverage=objectives[self.compliance.name],
            similarity=objectives[self.similarity.name],
            global_maturity=objectives[self.maturity.name],
            constraint_coverage=constraint_coverage,
            feasible=feasible,
            fitness=combined,
        )

    def apply(self, chromosome: Chromosome) -> FitnessScores:
        """Evaluate a chromosome and cache the scores on it."""
        scores = self.evaluate(chromosome)
        chromosome.scores = scores
        return scores

    def is_converged(self, chromosome: Chromosome) -> bool:
        """A chromosome is a solution when it is feasible and meets every goal."""
        return self.feasibility.is_feasible(chromosome) and self.compliance.all_satisfied(chromosome)

    def calculate_metrics(self, chromosome: Chromosome) -> FitnessMetrics:
        scores = self.evaluate(chromosome)
        return FitnessMetrics(
            score=scores.fitness,
            details={
                "breakdown": scores.to_dict(),
                "weights": self.weights,
                "objective_metrics": {
                    objective.name: objective.calculate_metrics(chromosome)
                    for objective in (self.compliance, self.feasibility, self.similarity, self.maturity)
                },
            }
        )


def rank_key(chromosome: Chromosome) -> Tuple[bool, float]:
    """Sort key: feasible individuals first, then by fitness (use with reverse=True)."""
    return (chromosome.feasible, chromosome.fitness)

"""
Fitness functions for maturity chromosomes.

Goal compliance, similarity to the current state and global maturity are
combined by ``MultiObjectiveFitness``; constraint feasibility is evaluated
separately and penalizes the combined score.
"""

from src.optimizer.fitness.base import (
    FitnessFunction,
    FitnessMetrics
)

from src.optimizer.fitness.compliance import (
    GoalComplianceFitness,
    ConstraintFeasibility
)

from src.optimizer.fitness.similarity import SimilarityFitness

from src.optimizer.fitness.maturity import GlobalMaturityFitness

from src.optimizer.fitness.multi_objective import (
    MultiObjectiveFitness,
    rank_key
)

__all__ = [
    # Base classes
    "FitnessFunction",
    "FitnessMetrics",

    # Objectives
    "GoalComplianceFitness",
    "ConstraintFeasibility",
    "SimilarityFitness",
    "GlobalMaturityFitness",

    # Aggregation
    "MultiObjectiveFitness",
    "rank_key",
]

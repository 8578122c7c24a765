"""
Global maturity objective.

Rewards a higher overall cybersecurity level for the asset.
"""

from src.optimizer.core.catalog import categories_for, functions_for
from src.optimizer.core.chromosome import Chromosome
from src.optimizer.fitness.base import FitnessFunction, FitnessMetrics


class GlobalMaturityFitness(FitnessFunction):
    """Mean allele value over every active gene."""

    name = "global_maturity"

    def evaluate(self, chromosome: Chromosome) -> float:
        return self.clamp(chromosome.asset_score())

    def calculate_metrics(self, chromosome: Chromosome) -> FitnessMetrics:
        group = chromosome.implementation_group
        return FitnessMetrics(
            score=self.evaluate(chromosome),
            details={
                "functions": {f.name: chromosome.function_score(f) for f in functions_for(group)},
                "categories": {c.name: chromosome.category_score(c) for c in categories_for(group)},
            }
        )

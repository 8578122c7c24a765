"""
Similarity to the current state.

Favors solutions that change as little as possible of what the asset already
has in place.
"""

from src.optimizer.core.chromosome import Chromosome
from src.optimizer.fitness.base import FitnessFunction, FitnessMetrics


class SimilarityFitness(FitnessFunction):
    """Inverted mean absolute allele difference against a baseline."""

    name = "similarity"

    def __init__(self, baseline: Chromosome):
        self.baseline = baseline.clone()

    def evaluate(self, chromosome: Chromosome) -> float:
        return self.clamp(chromosome.similarity_to(self.baseline))

    def calculate_metrics(self, chromosome: Chromosome) -> FitnessMetrics:
        changed = chromosome.differences_from(self.baseline)
        return FitnessMetrics(
            score=self.evaluate(chromosome),
            details={
                "changed_genes": len(changed),
                "active_genes": len(chromosome.active_genes),
            }
        )

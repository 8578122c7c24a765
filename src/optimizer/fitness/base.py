"""
Base classes for fitness evaluation in the maturity optimizer.

This module provides the abstract base class shared by every objective that
scores a chromosome.
"""

from abc import ABC, abstractmethod
from typing import Dict, Any, List
from dataclasses import dataclass

from src.optimizer.core.chromosome import Chromosome


@dataclass
class FitnessMetrics:
    """Score of one objective plus a breakdown of how it was reached."""
    score: float  # Objective score [0, 1]
    details: Dict[str, Any]


class FitnessFunction(ABC):
    """
    Abstract base class for fitness objectives.

    Objectives are pure: evaluating a chromosome never modifies it, so they
    can be evaluated concurrently.
    """

    name: str = "objective"

    @abstractmethod
    def evaluate(self, chromosome: Chromosome) -> float:
        """
        Evaluate a chromosome and return a score.

        Args:
            chromosome: The chromosome to evaluate

        Returns:
            Score between 0 and 1, where 1 is optimal
        """
        pass

    @abstractmethod
    def calculate_metrics(self, chromosome: Chromosome) -> FitnessMetrics:
        """
        Calculate detailed metrics for a chromosome.

        Args:
            chromosome: The chromosome to analyze

        Returns:
            Detailed metrics including score and breakdown
        """
        pass

    def evaluate_batch(self, chromosomes: List[Chromosome]) -> List[float]:
        return [self.evaluate(c) for c in chromosomes]

    @staticmethod
    def clamp(value: float, min_val: float = 0.0, max_val: float = 1.0) -> float:
        """Clamp a value to [min_val, max_val]."""
        return max(min_val, min(max_val, value))

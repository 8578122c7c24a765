"""
Allele Domain for the Maturity Optimizer.

This module defines the four discrete maturity levels a gene can take and the
relational lookups used to translate a goal threshold into a concrete allele.
"""

from typing import Optional, List
from enum import Enum
import math


# Tolerance used when comparing aggregated scores against thresholds.
# Means of 0.33/0.67 are not exactly representable in binary.
SCORE_TOLERANCE = 1e-6


class Allele(Enum):
    """Discrete maturity levels, ordered from lowest to highest."""
    L0 = 0.0
    L33 = 0.33
    L67 = 0.67
    L100 = 1.0

    @property
    def index(self) -> int:
        """Position of this allele in the total order (0-3)."""
        return _ORDERED.index(self)

    @classmethod
    def from_index(cls, index: int) -> "Allele":
        """Get the allele at a position of the total order."""
        if not 0 <= index < len(_ORDERED):
            raise ValueError(f"Allele index out of range 0-{len(_ORDERED) - 1}: {index}")
        return _ORDERED[index]

    @classmethod
    def from_value(cls, value: float) -> "Allele":
        """Get the allele whose maturity value equals ``value``."""
        allele = nearest_equal(value)
        if allele is None:
            raise ValueError(f"{value} is not a valid allele value")
        return allele

    @classmethod
    def ordered(cls) -> List["Allele"]:
        """All alleles in ascending order."""
        return list(_ORDERED)

    @classmethod
    def minimum(cls) -> "Allele":
        return _ORDERED[0]

    @classmethod
    def maximum(cls) -> "Allele":
        return _ORDERED[-1]

    def __lt__(self, other: "Allele") -> bool:
        if not isinstance(other, Allele):
            return NotImplemented
        return self.value < other.value

    def __le__(self, other: "Allele") -> bool:
        if not isinstance(other, Allele):
            return NotImplemented
        return self.value <= other.value

    def __gt__(self, other: "Allele") -> bool:
        if not isinstance(other, Allele):
            return NotImplemented
        return self.value > other.value

    def __ge__(self, other: "Allele") -> bool:
        if not isinstance(other, Allele):
            return NotImplemented
        return self.value >= other.value


_ORDERED = (Allele.L0, Allele.L33, Allele.L67, Allele.L100)


def value(allele: Allele) -> float:
    """Numeric maturity level of an allele."""
    return allele.value


class ComparisonOperator(Enum):
    """Relational operators usable in goals and constraints."""
    LESS = "<"
    LESS_OR_EQUAL = "<="
    EQUAL = "="
    GREATER = ">"
    GREATER_OR_EQUAL = ">="

    def compare(self, score: float, threshold: float) -> bool:
        """Evaluate ``score <operator> threshold``."""
        equal = math.isclose(score, threshold, abs_tol=SCORE_TOLERANCE)
        if self is ComparisonOperator.EQUAL:
            return equal
        if self is ComparisonOperator.LESS:
            return score < threshold and not equal
        if self is ComparisonOperator.LESS_OR_EQUAL:
            return score < threshold or equal
        if self is ComparisonOperator.GREATER:
            return score > threshold and not equal
        return score > threshold or equal

    def nearest_allele(self, threshold: float) -> Optional[Allele]:
        """Allele closest to ``threshold`` that satisfies this operator."""
        return _LOOKUPS[self](threshold)


def nearest_less(threshold: float) -> Optional[Allele]:
    """Largest allele strictly below ``threshold``, or None."""
    candidates = [a for a in _ORDERED if ComparisonOperator.LESS.compare(a.value, threshold)]
    return candidates[-1] if candidates else None


def nearest_less_or_equal(threshold: float) -> Optional[Allele]:
    """Largest allele at or below ``threshold``, or None."""
    candidates = [a for a in _ORDERED if ComparisonOperator.LESS_OR_EQUAL.compare(a.value, threshold)]
    return candidates[-1] if candidates else None


def nearest_equal(threshold: float) -> Optional[Allele]:
    """Allele equal to ``threshold``, or None."""
    for allele in _ORDERED:
        if ComparisonOperator.EQUAL.compare(allele.value, threshold):
            return allele
    return None


def nearest_greater(threshold: float) -> Optional[Allele]:
    """Smallest allele strictly above ``threshold``, or None."""
    for allele in _ORDERED:
        if ComparisonOperator.GREATER.compare(allele.value, threshold):
            return allele
    return None


def nearest_greater_or_equal(threshold: float) -> Optional[Allele]:
    """Smallest allele at or above ``threshold``, or None."""
    for allele in _ORDERED:
        if ComparisonOperator.GREATER_OR_EQUAL.compare(allele.value, threshold):
            return allele
    return None


_LOOKUPS = {
    ComparisonOperator.LESS: nearest_less,
    ComparisonOperator.LESS_OR_EQUAL: nearest_less_or_equal,
    ComparisonOperator.EQUAL: nearest_equal,
    ComparisonOperator.GREATER: nearest_greater,
    ComparisonOperator.GREATER_OR_EQUAL: nearest_greater_or_equal,
}

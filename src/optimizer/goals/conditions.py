"""
Conditions used by strategic goals and constraints.

A condition is a relational operator plus a threshold in [0, 1] that an
aggregated maturity score (gene, category, function or whole asset) is
tested against.
"""

from typing import Dict, Any, Optional, Union
from dataclasses import dataclass
from enum import Enum
import math

from src.optimizer.core.alleles import ComparisonOperator, Allele, SCORE_TOLERANCE
from src.optimizer.core.catalog import Gene, Category, Function, GeneKey


class Granularity(Enum):
    """Level a condition is attached to."""
    ASSET = "asset"
    FUNCTION = "function"
    CATEGORY = "category"
    GENE = "gene"

    @classmethod
    def of(cls, key: Optional[GeneKey]) -> "Granularity":
        """Granularity implied by a goal key."""
        if key is None:
            return cls.ASSET
        if isinstance(key, Function):
            return cls.FUNCTION
        if isinstance(key, Category):
            return cls.CATEGORY
        if isinstance(key, Gene):
            return cls.GENE
        raise TypeError(f"Unsupported goal key: {key!r}")


class ConditionKind(Enum):
    """Soft goals feed fitness; hard constraints decide feasibility."""
    GOAL = "goal"
    CONSTRAINT = "constraint"


# Partial credit ceiling for strict operators evaluated at the domain edge
_STRICT_CREDIT = 0.99


@dataclass(frozen=True)
class Condition:
    """Relational requirement ``score <operator> threshold``."""
    operator: ComparisonOperator
    threshold: float

    def __post_init__(self):
        if not isinstance(self.operator, ComparisonOperator):
            raise TypeError(f"operator must be a ComparisonOperator, got {self.operator!r}")
        if not 0.0 <= self.threshold <= 1.0:
            raise ValueError(f"threshold must be within [0, 1], got {self.threshold}")

    def is_satisfied_by(self, score: float) -> bool:
        return self.operator.compare(score, self.threshold)

    def satisfaction_degree(self, score: float) -> float:
        """
        Graded satisfaction of this condition.

        Returns 1.0 when satisfied. Otherwise returns a linear partial credit
        in [0, 1) that grows as ``score`` approaches the threshold, which gives
        the search a gradient towards unsatisfied conditions.
        """
        if self.is_satisfied_by(score):
            return 1.0

        t = self.threshold
        op = self.operator
        if op is ComparisonOperator.LESS:
            if _close(t, 1.0):
                credit = _STRICT_CREDIT
            else:
                credit = _STRICT_CREDIT * (1.0 - score) / (1.0 - t)
        elif op is ComparisonOperator.LESS_OR_EQUAL:
            credit = (1.0 - score) / (1.0 - t)
        elif op is ComparisonOperator.EQUAL:
            credit = (1.0 - score) / (1.0 - t) if score > t else score / t
        elif op is ComparisonOperator.GREATER:
            if _close(t, 0.0):
                credit = _STRICT_CREDIT
            else:
                credit = _STRICT_CREDIT * score / t
        else:
            credit = score / t

        return max(0.0, min(credit, 1.0 - SCORE_TOLERANCE))

    def target_allele(self) -> Optional[Allele]:
        """Allele nearest to the threshold that satisfies this condition."""
        return self.operator.nearest_allele(self.threshold)

    def to_dict(self) -> Dict[str, Any]:
        return {"operator": self.operator.value, "threshold": self.threshold}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Condition":
        return cls(ComparisonOperator(data["operator"]), float(data["threshold"]))

    @classmethod
    def parse(cls, operator: Union[str, ComparisonOperator], threshold: float) -> "Condition":
        """Build a condition from an operator symbol or member name."""
        if isinstance(operator, str):
            try:
                operator = ComparisonOperator(operator)
            except ValueError:
                operator = ComparisonOperator[operator.upper()]
        return cls(operator, float(threshold))

    def __str__(self) -> str:
        return f"{self.operator.value} {self.threshold}"


def _close(a: float, b: float) -> bool:
    return math.isclose(a, b, abs_tol=SCORE_TOLERANCE)

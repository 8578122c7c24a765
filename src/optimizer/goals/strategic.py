"""
Strategic goals and constraints for an asset.

``StrategicGoals`` holds the soft goals and hard constraints declared for one
implementation group. Goals contribute to fitness; constraints decide whether
a chromosome is feasible at all.
"""

from typing import Dict, Any, List, Optional, Iterator, Tuple
from dataclasses import dataclass
import logging

from src.optimizer.core.catalog import (
    ImplementationGroup,
    GeneKey,
    applies_to,
    get_gene,
    get_category,
    get_function,
)
from src.optimizer.core.chromosome import Chromosome
from src.optimizer.goals.conditions import Condition, ConditionKind, Granularity


logger = logging.getLogger("optimizer.goals")


@dataclass(frozen=True)
class StrategicEntry:
    """A registered goal or constraint."""
    kind: ConditionKind
    granularity: Granularity
    key: Optional[GeneKey]
    condition: Condition

    @property
    def key_name(self) -> Optional[str]:
        return None if self.key is None else self.key.name

    def score(self, chromosome: Chromosome) -> float:
        """Score of the chromosome at this entry's granularity."""
        if self.granularity is Granularity.GENE:
            return chromosome.get_allele_value(self.key)
        if self.granularity is Granularity.CATEGORY:
            return chromosome.category_score(self.key)
        if self.granularity is Granularity.FUNCTION:
            return chromosome.function_score(self.key)
        return chromosome.asset_score()

    def is_satisfied_by(self, chromosome: Chromosome) -> bool:
        return self.condition.is_satisfied_by(self.score(chromosome))

    def satisfaction_degree(self, chromosome: Chromosome) -> float:
        return self.condition.satisfaction_degree(self.score(chromosome))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "level": self.granularity.value,
            "key": self.key_name,
            **self.condition.to_dict(),
        }

    def __str__(self) -> str:
        target = "asset" if self.key is None else self.key.name
        return f"{self.kind.value} {self.granularity.value} {target} {self.condition}"


class StrategicGoals:
    """
    Container of goals and constraints for one implementation group.

    At most one goal and one constraint are kept per (granularity, key); a
    later registration overwrites the earlier one. Keys that do not apply to
    the implementation group are dropped without error.
    """

    def __init__(self, implementation_group: ImplementationGroup):
        if not isinstance(implementation_group, ImplementationGroup):
            raise TypeError(f"implementation_group must be an ImplementationGroup, got {implementation_group!r}")
        self.implementation_group = implementation_group
        self._entries: Dict[ConditionKind, Dict[Tuple[Granularity, Optional[GeneKey]], StrategicEntry]] = {
            ConditionKind.GOAL: {},
            ConditionKind.CONSTRAINT: {},
        }

    # Registration

    def add_goal(self, condition: Condition, key: Optional[GeneKey] = None) -> bool:
        """
        Register a soft goal on a gene, category, function or (key=None) the asset.

        Returns:
            True if the goal was stored, False if the key does not apply
        """
        return self._add(ConditionKind.GOAL, condition, key)

    def add_constraint(self, condition: Condition, key: Optional[GeneKey] = None) -> bool:
        """Register a hard constraint. Same semantics as ``add_goal``."""
        return self._add(ConditionKind.CONSTRAINT, condition, key)

    def add(self, kind: ConditionKind, condition: Condition, key: Optional[GeneKey] = None) -> bool:
        return self._add(kind, condition, key)

    def _add(self, kind: ConditionKind, condition: Condition, key: Optional[GeneKey]) -> bool:
        if not isinstance(condition, Condition):
            raise TypeError(f"condition must be a Condition, got {condition!r}")
        granularity = Granularity.of(key)
        if not applies_to(key, self.implementation_group):
            logger.debug(
                "Ignoring %s on %s: not applicable to %s",
                kind.value, key.name, self.implementation_group.name
            )
            return False
        self._entries[kind][(granularity, key)] = StrategicEntry(kind, granularity, key, condition)
        return True

    def remove_goal(self, key: Optional[GeneKey] = None) -> bool:
        return self._entries[ConditionKind.GOAL].pop((Granularity.of(key), key), None) is not None

    def remove_constraint(self, key: Optional[GeneKey] = None) -> bool:
        return self._entries[ConditionKind.CONSTRAINT].pop((Granularity.of(key), key), None) is not None

    def clear(self) -> None:
        for entries in self._entries.values():
            entries.clear()

    # Queries

    def get_goal(self, key: Optional[GeneKey] = None) -> Optional[Condition]:
        entry = self._entries[ConditionKind.GOAL].get((Granularity.of(key), key))
        return entry.condition if entry else None

    def get_constraint(self, key: Optional[GeneKey] = None) -> Optional[Condition]:
        entry = self._entries[ConditionKind.CONSTRAINT].get((Granularity.of(key), key))
        return entry.condition if entry else None

    @property
    def goals(self) -> List[StrategicEntry]:
        return list(self._entries[ConditionKind.GOAL].values())

    @property
    def constraints(self) -> List[StrategicEntry]:
        return list(self._entries[ConditionKind.CONSTRAINT].values())

    def entries(self, granularity: Optional[Granularity] = None) -> List[StrategicEntry]:
        """Goals followed by constraints, optionally filtered by granularity."""
        result = self.goals + self.constraints
        if granularity is not None:
            result = [entry for entry in result if entry.granularity is granularity]
        return result

    def __iter__(self) -> Iterator[StrategicEntry]:
        return iter(self.entries())

    def count_goals(self) -> int:
        return len(self._entries[ConditionKind.GOAL])

    def count_constraints(self) -> int:
        return len(self._entries[ConditionKind.CONSTRAINT])

    def count_defined(self) -> int:
        """Number of registered goals and constraints."""
        return self.count_goals() + self.count_constraints()

    def __len__(self) -> int:
        return self.count_defined()

    # Evaluation

    def goals_satisfied_by(self, chromosome: Chromosome) -> bool:
        return all(entry.is_satisfied_by(chromosome) for entry in self.goals)

    def constraints_satisfied_by(self, chromosome: Chromosome) -> bool:
        return all(entry.is_satisfied_by(chromosome) for entry in self.constraints)

    def is_satisfied_by(self, chromosome: Chromosome) -> bool:
        """True when every goal and every constraint holds."""
        self._check_scope(chromosome)
        return self.goals_satisfied_by(chromosome) and self.constraints_satisfied_by(chromosome)

    def unsatisfied_by(self, chromosome: Chromosome) -> List[StrategicEntry]:
        return [entry for entry in self.entries() if not entry.is_satisfied_by(chromosome)]

    def _check_scope(self, chromosome: Chromosome) -> None:
        if chromosome.implementation_group != self.implementation_group:
            raise ValueError(
                f"Chromosome scope {chromosome.implementation_group.name} does not match "
                f"goals scope {self.implementation_group.name}"
            )

    # Serialization

    def to_dict(self) -> Dict[str, Any]:
        return {
            "implementation_group": self.implementation_group.name,
            "goals": [entry.to_dict() for entry in self.goals],
            "constraints": [entry.to_dict() for entry in self.constraints],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StrategicGoals":
        strategic_goals = cls(ImplementationGroup[data["implementation_group"]])
        for kind, field_name in ((ConditionKind.GOAL, "goals"), (ConditionKind.CONSTRAINT, "constraints")):
            for item in data.get(field_name, []):
                key = resolve_key(Granularity(item["level"]), item.get("key"))
                strategic_goals.add(kind, Condition.parse(item["operator"], item["threshold"]), key)
        return strategic_goals

    def __repr__(self) -> str:
        return (
            f"StrategicGoals(group={self.implementation_group.name}, "
            f"goals={self.count_goals()}, constraints={self.count_constraints()})"
        )


def resolve_key(granularity: Granularity, name: Optional[str]) -> Optional[GeneKey]:
    """Resolve a key name for a granularity. Raises KeyError for unknown names."""
    if granularity is Granularity.ASSET:
        return None
    if name is None:
        raise KeyError(f"A key is required for {granularity.value}-level conditions")
    if granularity is Granularity.GENE:
        return get_gene(name)
    if granularity is Granularity.CATEGORY:
        return get_category(name)
    return get_function(name)

"""
Strategic goals, constraints and goal-directed seeding.
"""

from src.optimizer.goals.conditions import Condition, ConditionKind, Granularity
from src.optimizer.goals.strategic import StrategicGoals, StrategicEntry, resolve_key
from src.optimizer.goals.seeding import CandidateSeeder, MAX_CANDIDATES

__all__ = [
    "Condition",
    "ConditionKind",
    "Granularity",
    "StrategicGoals",
    "StrategicEntry",
    "resolve_key",
    "CandidateSeeder",
    "MAX_CANDIDATES",
]

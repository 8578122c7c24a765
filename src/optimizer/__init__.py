"""
Maturity Optimizer.

Genetic algorithm that plans the cybersecurity maturity of an asset: given
its current maturity per outcome (gene) and strategic goals and constraints
at gene, category, function or asset level, it searches for a target state
that meets the goals while changing as little as possible.
"""

from src.optimizer.core import (
    Allele,
    ComparisonOperator,
    ImplementationGroup,
    Function,
    Category,
    Gene,
    Chromosome,
    OptimizerConfig,
    EvolutionEngine,
    EvolutionResult,
    ProgressEvent,
    run_evolution,
)
from src.optimizer.goals import Condition, StrategicGoals, CandidateSeeder
from src.optimizer.cases import CaseDefinition

__version__ = "1.0.0"

__all__ = [
    "Allele",
    "ComparisonOperator",
    "ImplementationGroup",
    "Function",
    "Category",
    "Gene",
    "Chromosome",
    "OptimizerConfig",
    "EvolutionEngine",
    "EvolutionResult",
    "ProgressEvent",
    "run_evolution",
    "Condition",
    "StrategicGoals",
    "CandidateSeeder",
    "CaseDefinition",
]

"""
Optimizer Core Module - Genetic Algorithm Components.

This module contains the allele domain, the gene catalog, chromosome
representation, configuration, population management, progress events and
the main evolution engine.
"""

from src.optimizer.core.alleles import (
    Allele,
    ComparisonOperator,
    SCORE_TOLERANCE
)

from src.optimizer.core.catalog import (
    ImplementationGroup,
    Function,
    Category,
    Gene,
    all_genes,
    get_gene,
    genes_for,
    categories_for,
    functions_for
)

from src.optimizer.core.chromosome import (
    Chromosome,
    FitnessScores
)

from src.optimizer.core.config import (
    OptimizerConfig,
    EvolutionParameters,
    FitnessConfig,
    LoggingConfig,
    ParallelizationConfig,
    GOAL_COVERAGE_WEIGHT,
    SIMILARITY_WEIGHT,
    GLOBAL_MATURITY_WEIGHT,
    create_default_config,
    create_test_config,
    create_production_config
)

from src.optimizer.core.population import (
    Population,
    Individual
)

from src.optimizer.core.events import (
    ProgressEvent,
    EventIdGenerator,
    EventClock
)

from src.optimizer.core.engine import (
    EvolutionEngine,
    EvolutionResult,
    TerminationReason,
    run_evolution
)

__all__ = [
    # Allele domain
    "Allele",
    "ComparisonOperator",
    "SCORE_TOLERANCE",

    # Gene catalog
    "ImplementationGroup",
    "Function",
    "Category",
    "Gene",
    "all_genes",
    "get_gene",
    "genes_for",
    "categories_for",
    "functions_for",

    # Chromosome representation
    "Chromosome",
    "FitnessScores",

    # Configuration
    "OptimizerConfig",
    "EvolutionParameters",
    "FitnessConfig",
    "LoggingConfig",
    "ParallelizationConfig",
    "GOAL_COVERAGE_WEIGHT",
    "SIMILARITY_WEIGHT",
    "GLOBAL_MATURITY_WEIGHT",
    "create_default_config",
    "create_test_config",
    "create_production_config",

    # Population management
    "Population",
    "Individual",

    # Progress events
    "ProgressEvent",
    "EventIdGenerator",
    "EventClock",

    # Engine
    "EvolutionEngine",
    "EvolutionResult",
    "TerminationReason",
    "run_evolution"
]

"""
Optimizer Configuration Module.

This module defines configuration classes for the maturity optimizer,
including evolution parameters, fitness weights, and run settings.
"""

from typing import Optional, Dict, Any, Literal
from pydantic import BaseModel, Field, ConfigDict, field_validator, model_validator
from datetime import timedelta
import os


# Reference weights of the three objectives. Goal compliance dominates; the
# other two only break ties between equally compliant solutions.
GOAL_COVERAGE_WEIGHT = 0.94
SIMILARITY_WEIGHT = 0.05
GLOBAL_MATURITY_WEIGHT = 0.01


class EvolutionParameters(BaseModel):
    """Parameters controlling the genetic algorithm evolution process."""

    model_config = ConfigDict(validate_assignment=True)

    # Population parameters
    population_size: int = Field(
        default=100,
        ge=1,
        le=10000,
        description="Number of individuals in the population"
    )
    generations: int = Field(
        default=1000,
        ge=1,
        description="Maximum number of generations to evolve"
    )

    # Genetic operators
    mutation_rate: float = Field(
        default=0.02,
        ge=0.0,
        le=1.0,
        description="Probability of mutation for each gene"
    )
    crossover_rate: float = Field(
        default=0.9,
        ge=0.0,
        le=1.0,
        description="Probability of crossover between parents"
    )

    # Selection parameters
    elite_size: int = Field(
        default=2,
        ge=1,
        description="Number of best individuals copied unchanged to the next generation"
    )
    tournament_size: int = Field(
        default=3,
        ge=1,
        description="Number of individuals in tournament selection"
    )
    selection_method: Literal["tournament", "roulette", "rank"] = Field(
        default="tournament",
        description="Selection method for choosing parents"
    )

    # Stagnation handling
    stagnation_generations: Optional[int] = Field(
        default=None,
        ge=1,
        description="Generations without improvement before injecting random immigrants"
    )
    immigration_rate: float = Field(
        default=0.2,
        ge=0.0,
        le=0.9,
        description="Share of the population replaced by immigrants on stagnation"
    )

    @field_validator('elite_size')
    def validate_elite_size(cls, v, info):
        """Ensure elite size does not exceed population size."""
        if 'population_size' in info.data and v > info.data['population_size']:
            raise ValueError('Elite size must not exceed population size')
        return v


class FitnessConfig(BaseModel):
    """Configuration for fitness evaluation."""

    model_config = ConfigDict(validate_assignment=True)

    goal_coverage_weight: float = Field(
        default=GOAL_COVERAGE_WEIGHT,
        ge=0.0,
        le=1.0,
        description="Weight of the goal compliance objective"
    )
    similarity_weight: float = Field(
        default=SIMILARITY_WEIGHT,
        ge=0.0,
        le=1.0,
        description="Weight of the similarity-to-current-state objective"
    )
    global_maturity_weight: float = Field(
        default=GLOBAL_MATURITY_WEIGHT,
        ge=0.0,
        le=1.0,
        description="Weight of the global maturity objective"
    )
    penalty_factor: float = Field(
        default=0.5,
        ge=0.0,
        le=1.0,
        description="Fitness penalty applied in proportion to unmet constraints"
    )
    graded_coverage: bool = Field(
        default=True,
        description="Give partial credit to unmet goals; False counts only fully met goals"
    )

    @model_validator(mode="after")
    def validate_weights(self) -> "FitnessConfig":
        """Objective weights must add up to 1."""
        total = self.goal_coverage_weight + self.similarity_weight + self.global_maturity_weight
        if abs(total - 1.0) > 1e-6:
            raise ValueError(f"Objective weights must sum to 1.0, got {total}")
        return self


class LoggingConfig(BaseModel):
    """Configuration for logging and progress reporting."""

    enable_logging: bool = Field(
        default=True,
        description="Enable evolution progress logging"
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level"
    )
    log_interval: int = Field(
        default=100,
        ge=1,
        description="Generations between progress log lines"
    )
    progress_interval: int = Field(
        default=1,
        ge=1,
        description="Generations between progress events sent to listeners"
    )
    history_size: int = Field(
        default=100,
        ge=1,
        description="Number of generation statistics kept in memory"
    )
    metrics_export: bool = Field(
        default=True,
        description="Export progress metrics to logfire"
    )


class ParallelizationConfig(BaseModel):
    """Configuration for parallel fitness evaluation."""

    enable_parallel: bool = Field(
        default=False,
        description="Evaluate fitness on a thread pool"
    )
    num_workers: Optional[int] = Field(
        default=None,
        ge=1,
        description="Number of parallel workers (None for auto)"
    )


class OptimizerConfig(BaseModel):
    """Main configuration class for the optimizer."""

    model_config = ConfigDict(
        validate_assignment=True,
        extra='forbid'
    )

    # Sub-configurations
    evolution: EvolutionParameters = Field(
        default_factory=EvolutionParameters,
        description="Evolution parameters"
    )
    fitness: FitnessConfig = Field(
        default_factory=FitnessConfig,
        description="Fitness evaluation configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging and progress configuration"
    )
    parallelization: ParallelizationConfig = Field(
        default_factory=ParallelizationConfig,
        description="Parallel processing configuration"
    )

    # General settings
    random_seed: Optional[int] = Field(
        default=None,
        description="Random seed for reproducibility"
    )
    max_runtime: Optional[timedelta] = Field(
        default=None,
        description="Maximum wall-clock time for evolution"
    )
    results_dir: Optional[str] = Field(
        default=None,
        description="Directory where the final result is written (None to skip)"
    )

    @classmethod
    def from_env(cls) -> "OptimizerConfig":
        """Create configuration from environment variables."""
        config_dict = {}

        # Evolution parameters from env
        if pop_size := os.getenv("OPTIMIZER_POPULATION_SIZE"):
            config_dict.setdefault("evolution", {})["population_size"] = int(pop_size)
        if generations := os.getenv("OPTIMIZER_GENERATIONS"):
            config_dict.setdefault("evolution", {})["generations"] = int(generations)
        if mutation_rate := os.getenv("OPTIMIZER_MUTATION_RATE"):
            config_dict.setdefault("evolution", {})["mutation_rate"] = float(mutation_rate)
        if crossover_rate := os.getenv("OPTIMIZER_CROSSOVER_RATE"):
            config_dict.setdefault("evolution", {})["crossover_rate"] = float(crossover_rate)
        if elite_size := os.getenv("OPTIMIZER_ELITE_SIZE"):
            config_dict.setdefault("evolution", {})["elite_size"] = int(elite_size)

        # Parallelization from env
        if num_workers := os.getenv("OPTIMIZER_NUM_WORKERS"):
            config_dict.setdefault("parallelization", {})["num_workers"] = int(num_workers)

        # General settings
        if random_seed := os.getenv("OPTIMIZER_RANDOM_SEED"):
            config_dict["random_seed"] = int(random_seed)
        if max_seconds := os.getenv("OPTIMIZER_MAX_SECONDS"):
            config_dict["max_runtime"] = timedelta(seconds=float(max_seconds))
        if results_dir := os.getenv("OPTIMIZER_RESULTS_DIR"):
            config_dict["results_dir"] = results_dir

        return cls(**config_dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return self.model_dump(mode="json")

    def save(self, filepath: str) -> None:
        """Save configuration to JSON file."""
        with open(filepath, 'w') as f:
            f.write(self.model_dump_json(indent=2))

    @classmethod
    def load(cls, filepath: str) -> "OptimizerConfig":
        """Load configuration from JSON file."""
        with open(filepath, 'r') as f:
            return cls.model_validate_json(f.read())

    def validate_consistency(self) -> None:
        """Validate configuration consistency across components."""
        if self.evolution.elite_size > self.evolution.population_size:
            raise ValueError(
                f"Elite size ({self.evolution.elite_size}) must not exceed "
                f"population size ({self.evolution.population_size})"
            )

        if self.evolution.tournament_size > self.evolution.population_size:
            raise ValueError(
                f"Tournament size ({self.evolution.tournament_size}) must not exceed "
                f"population size ({self.evolution.population_size})"
            )

        if self.max_runtime is not None and self.max_runtime.total_seconds() <= 0:
            raise ValueError("Maximum runtime must be positive")


# Convenience functions
def create_default_config() -> OptimizerConfig:
    """Create a default configuration suitable for most use cases."""
    return OptimizerConfig()


def create_test_config() -> OptimizerConfig:
    """Create a configuration suitable for testing (smaller, faster, seeded)."""
    return OptimizerConfig(
        evolution=EvolutionParameters(
            population_size=20,
            generations=50,
            mutation_rate=0.05,
            crossover_rate=0.9,
            elite_size=2,
            tournament_size=3
        ),
        logging=LoggingConfig(
            log_interval=10,
            metrics_export=False
        ),
        parallelization=ParallelizationConfig(
            enable_parallel=False  # Disable for deterministic tests
        ),
        random_seed=42
    )


def create_production_config() -> OptimizerConfig:
    """Create a configuration suitable for production use."""
    return OptimizerConfig(
        evolution=EvolutionParameters(
            population_size=100,
            generations=20000,
            mutation_rate=0.01,
            crossover_rate=0.9,
            elite_size=5,
            tournament_size=4,
            stagnation_generations=200
        ),
        logging=LoggingConfig(
            log_interval=100,
            progress_interval=10,
            metrics_export=True
        ),
        parallelization=ParallelizationConfig(
            enable_parallel=True
        ),
        max_runtime=timedelta(minutes=5)
    )

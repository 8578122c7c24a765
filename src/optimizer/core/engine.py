"""
Genetic Algorithm Engine for the Maturity Optimizer.

This module implements the engine that evolves maturity assignments for one
asset: it seeds and randomizes the first generation, evaluates fitness,
breeds new generations and stops on convergence, exhaustion or cancellation.
"""

import os
import time
import random
import asyncio
from typing import List, Optional, Dict, Any, Iterable
from dataclasses import dataclass
from datetime import datetime
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
import logging
from pathlib import Path
import json

import logfire

from src.optimizer.core.chromosome import Chromosome, FitnessScores
from src.optimizer.core.config import OptimizerConfig, create_default_config
from src.optimizer.core.events import ProgressEvent, ProgressListener, EventIdGenerator, EventClock
from src.optimizer.core.population import Population, Individual
from src.optimizer.fitness.multi_objective import MultiObjectiveFitness, rank_key
from src.optimizer.goals.seeding import CandidateSeeder
from src.optimizer.goals.strategic import StrategicGoals


class TerminationReason(Enum):
    """Why a run stopped."""
    CONVERGED = "converged"
    MAX_GENERATIONS = "max_generations"
    MAX_RUNTIME = "max_runtime"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class EvolutionResult:
    """Outcome of a completed run."""
    best_chromosome: Chromosome
    converged: bool
    generations: int
    elapsed_seconds: float
    termination_reason: TerminationReason
    total_evaluations: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "best_chromosome": self.best_chromosome.to_dict(),
            "converged": self.converged,
            "generations": self.generations,
            "elapsed_seconds": self.elapsed_seconds,
            "termination_reason": self.termination_reason.value,
            "total_evaluations": self.total_evaluations,
        }


class EvolutionEngine:
    """
    Main engine for running the maturity optimization.

    Orchestrates seeding, fitness evaluation, feasible-first selection,
    uniform crossover, per-gene mutation, elitism and termination.
    """

    def __init__(
        self,
        config: OptimizerConfig,
        current_state: Chromosome,
        strategic_goals: StrategicGoals,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the engine. Invalid arguments fail here, not at run time.

        Args:
            config: Optimizer configuration
            current_state: Current maturity of the asset; also the similarity baseline
            strategic_goals: Goals and constraints, possibly empty
            logger: Optional logger instance
        """
        if not isinstance(config, OptimizerConfig):
            raise TypeError(f"config must be an OptimizerConfig, got {type(config).__name__}")
        if not isinstance(current_state, Chromosome):
            raise TypeError(f"current_state must be a Chromosome, got {type(current_state).__name__}")
        if not isinstance(strategic_goals, StrategicGoals):
            raise TypeError(f"strategic_goals must be StrategicGoals, got {type(strategic_goals).__name__}")
        if current_state.implementation_group != strategic_goals.implementation_group:
            raise ValueError(
                f"Current state scope {current_state.implementation_group.name} does not match "
                f"goals scope {strategic_goals.implementation_group.name}"
            )

        self.config = config
        self.current_state = current_state.clone()
        self.strategic_goals = strategic_goals
        self.implementation_group = current_state.implementation_group
        self.logger = logger or self._setup_logger()

        self.fitness = MultiObjectiveFitness(strategic_goals, self.current_state, config.fitness)
        self.seeder = CandidateSeeder(strategic_goals)
        self.rng = random.Random(config.random_seed)
        self.event_ids = EventIdGenerator()
        self.event_clock = EventClock()

        # State tracking
        self.current_population: Optional[Population] = None
        self.best_chromosome: Optional[Chromosome] = None
        self.result: Optional[EvolutionResult] = None
        self.total_evaluations = 0
        self.stagnation_counter = 0
        self._listeners: List[ProgressListener] = []
        self._cancelled = False
        self._start: Optional[float] = None
        self.executor: Optional[ThreadPoolExecutor] = None

    def _setup_logger(self) -> logging.Logger:
        """Setup default logger."""
        logger = logging.getLogger("optimizer.engine")
        logger.setLevel(getattr(logging, self.config.logging.log_level))

        if not logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            logger.addHandler(handler)

        return logger

    # Listeners

    def add_progress_listener(self, listener: ProgressListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_progress_listener(self, listener: ProgressListener) -> bool:
        try:
            self._listeners.remove(listener)
            return True
        except ValueError:
            return False

    def cancel(self) -> None:
        """Ask a running evolution to stop after the current generation."""
        self._cancelled = True

    # Run

    async def evolve(self) -> EvolutionResult:
        """
        Run the genetic algorithm until it converges, is exhausted or cancelled.

        Returns:
            The run outcome; the best chromosome is the best seen across all
            generations, feasible individuals first
        """
        evolution = self.config.evolution
        with logfire.span("Maturity evolution",
                          implementation_group=self.implementation_group.name,
                          population_size=evolution.population_size,
                          generations=evolution.generations,
                          goals=self.strategic_goals.count_goals(),
                          constraints=self.strategic_goals.count_constraints()):

            # Every run replays the same random stream for a given seed
            self.rng = random.Random(self.config.random_seed)
            self._start = time.monotonic()
            self._cancelled = False
            self.result = None
            self.best_chromosome = None
            self.total_evaluations = 0
            self.stagnation_counter = 0
            self.logger.info(
                f"Starting evolution for {self.implementation_group.name} "
                f"with population size {evolution.population_size}"
            )

            if self.config.parallelization.enable_parallel:
                num_workers = self.config.parallelization.num_workers or os.cpu_count()
                self.executor = ThreadPoolExecutor(max_workers=num_workers)

            try:
                self.current_population = self._initialize_population()
                generation = 0
                while True:
                    with logfire.span("Generation", generation=generation):
                        await self._evaluate_population()
                        converged = self._update_best()
                        self.current_population.record_history()

                        generations_run = generation + 1
                        reason = self._termination_reason(converged, generations_run)

                        if generation % self.config.logging.log_interval == 0 or reason is not None:
                            self._log_progress(generation)
                        if reason is not None or generation % self.config.logging.progress_interval == 0:
                            self._emit_progress(generation, converged)

                        if reason is not None:
                            break

                        self._create_next_generation()
                        if self._detect_stagnation():
                            self._handle_stagnation()

                    generation += 1
                    # Let other tasks (and cancel requests) run between generations
                    await asyncio.sleep(0)
            finally:
                if self.executor:
                    self.executor.shutdown(wait=True)
                    self.executor = None

            self.result = EvolutionResult(
                best_chromosome=self.best_chromosome.clone(),
                converged=converged,
                generations=generations_run,
                elapsed_seconds=self._elapsed(),
                termination_reason=reason,
                total_evaluations=self.total_evaluations,
            )

            if self.config.results_dir:
                self._save_final_results()

            self.logger.info(
                f"Evolution finished after {generations_run} generations in "
                f"{self.result.elapsed_seconds:.2f}s ({reason.value})"
            )
            return self.result

    def _initialize_population(self) -> Population:
        """Seed the first generation and fill it with random chromosomes."""
        with logfire.span("Initialize Population"):
            seeds = self.seeder.generate(self.current_state)
            population = Population(self.config, self.rng, generation=0)
            population.initialize(self.implementation_group, seeds)
            self.logger.info(
                f"Initialized population with {len(population)} individuals "
                f"({min(len(seeds), len(population))} seeded)"
            )
            return population

    async def _evaluate_population(self) -> None:
        """Evaluate fitness for all individuals whose cached scores are stale."""
        population = self.current_population
        with logfire.span("Evaluate Population", size=len(population)):
            unevaluated = [ind.chromosome for ind in population.individuals if not ind.evaluated]

            if not unevaluated:
                return

            if self.executor:
                loop = asyncio.get_running_loop()
                # gather keeps submission order, so results stay seed-deterministic
                scores = await asyncio.gather(*(
                    loop.run_in_executor(self.executor, self.fitness.evaluate, chromosome)
                    for chromosome in unevaluated
                ))
            else:
                scores = [self.fitness.evaluate(chromosome) for chromosome in unevaluated]

            for chromosome, chromosome_scores in zip(unevaluated, scores):
                chromosome.scores = chromosome_scores

            self.total_evaluations += len(unevaluated)
            if self.config.logging.metrics_export:
                logfire.debug("Evaluated {count} individuals",
                              count=len(unevaluated),
                              total_evaluations=self.total_evaluations)

    def _update_best(self) -> bool:
        """
        Track the best chromosome seen so far.

        A converged individual always takes precedence, so a run never
        reports an unconverged best when a solution was produced.

        Returns:
            Whether the best chromosome is a solution
        """
        ranked = self.current_population.rank()
        solution = next((ind for ind in ranked if self.fitness.is_converged(ind.chromosome)), None)
        if solution is not None:
            self.best_chromosome = solution.chromosome.clone()
            return True

        leader = ranked[0].chromosome
        if self.best_chromosome is None or rank_key(leader) > rank_key(self.best_chromosome):
            self.best_chromosome = leader.clone()
            self.stagnation_counter = 0
        else:
            self.stagnation_counter += 1
        return False

    def _termination_reason(self, converged: bool, generations_run: int) -> Optional[TerminationReason]:
        if converged:
            return TerminationReason.CONVERGED
        if generations_run >= self.config.evolution.generations:
            return TerminationReason.MAX_GENERATIONS
        if self.config.max_runtime is not None and self._elapsed() >= self.config.max_runtime.total_seconds():
            self.logger.info("Terminating due to runtime limit")
            return TerminationReason.MAX_RUNTIME
        if self._cancelled:
            self.logger.info("Terminating on cancellation request")
            return TerminationReason.CANCELLED
        return None

    def _create_next_generation(self) -> None:
        """Create the next generation of individuals."""
        with logfire.span("Create Next Generation"):
            evolution = self.config.evolution
            population = self.current_population

            # Preserve elite unchanged
            new_individuals = [
                Individual(chromosome=ind.chromosome.clone(), age=ind.age)
                for ind in population.get_elite()
            ]

            while len(new_individuals) < evolution.population_size:
                parents = population.select_parents(2)
                child1 = parents[0].chromosome.clone()
                child2 = parents[1].chromosome.clone()

                if self.rng.random() < evolution.crossover_rate:
                    child1, child2 = child1.uniform_crossover(child2, self.rng)

                for child in (child1, child2):
                    child.mutate(evolution.mutation_rate, self.rng)
                    new_individuals.append(Individual(
                        chromosome=child,
                        parent_ids=[p.id for p in parents]
                    ))

            # Trim to exact population size
            population.replace_population(new_individuals[:evolution.population_size])

    def _detect_stagnation(self) -> bool:
        limit = self.config.evolution.stagnation_generations
        return limit is not None and self.stagnation_counter >= limit

    def _handle_stagnation(self) -> None:
        """Replace the tail of the population with random immigrants."""
        self.logger.warning(f"Stagnation detected after {self.stagnation_counter} generations")

        with logfire.span("Handle Stagnation"):
            population = self.current_population
            num_random = int(len(population) * self.config.evolution.immigration_rate)
            immigrants = [
                Individual(chromosome=population.random_chromosome(self.implementation_group))
                for _ in range(num_random)
            ]
            population.replace_tail(immigrants)
            self.stagnation_counter = 0

    def _emit_progress(self, generation: int, converged: bool) -> None:
        if not self._listeners:
            return
        max_runtime = self.config.max_runtime
        event = ProgressEvent(
            timestamp=self.event_clock.now(),
            event_id=self.event_ids.next_id(),
            generation=generation,
            elapsed_seconds=self._elapsed(),
            total_seconds=max_runtime.total_seconds() if max_runtime is not None else None,
            best_chromosome=self.best_chromosome.clone(),
            converged=converged,
        )
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                self.logger.exception(f"Progress listener {listener!r} failed at generation {generation}")

    def _log_progress(self, generation: int) -> None:
        """Log evolution progress."""
        if not self.config.logging.enable_logging:
            return
        stats = self.current_population.statistics

        self.logger.info(
            f"Generation {generation}: "
            f"Best: {stats.get('best_fitness', 0):.4f}, "
            f"Avg: {stats.get('avg_fitness', 0):.4f}, "
            f"Feasible: {stats.get('feasible_ratio', 0):.2f}, "
            f"Unique: {stats.get('unique_ratio', 0):.2f}"
        )

        if self.config.logging.metrics_export:
            metrics = {
                "evolution_generation": generation,
                **{k: v for k, v in stats.items() if k != "generation"},
            }
            logfire.info("Evolution Progress", **metrics)

    def _elapsed(self) -> float:
        return time.monotonic() - self._start if self._start is not None else 0.0

    def _save_final_results(self) -> None:
        """Save final evolution results."""
        results_dir = Path(self.config.results_dir)
        results_dir.mkdir(parents=True, exist_ok=True)

        results = {
            "config": self.config.to_dict(),
            "strategic_goals": self.strategic_goals.to_dict(),
            "current_state": self.current_state.to_dict(),
            **self.result.to_dict(),
            "changed_genes": {
                gene.name: {"from": before.value, "to": after.value}
                for gene, (before, after) in self.result.best_chromosome.differences_from(self.current_state).items()
            },
            "evolution_history": self.current_population.history,
            "finished_at": datetime.now().isoformat(),
        }

        results_file = results_dir / "final_results.json"
        with open(results_file, 'w') as f:
            json.dump(results, f, indent=2)

        self.logger.info(f"Saved final results to {results_dir}")

    def run(self) -> EvolutionResult:
        """Run to completion on a private event loop, for threads and synchronous callers."""
        return asyncio.run(self.evolve())

    def evaluate_single(self, chromosome: Chromosome) -> FitnessScores:
        """Evaluate a single chromosome (useful for testing)."""
        return self.fitness.evaluate(chromosome)

    # Accessors, valid once a run has completed

    def _require_result(self) -> EvolutionResult:
        if self.result is None:
            raise RuntimeError("Evolution has not completed yet; call evolve() first")
        return self.result

    def get_best_chromosome(self) -> Chromosome:
        return self._require_result().best_chromosome.clone()

    def has_converged(self) -> bool:
        return self._require_result().converged

    def get_required_generations(self) -> int:
        return self._require_result().generations

    def get_required_time(self) -> float:
        """Elapsed wall-clock seconds of the completed run."""
        return self._require_result().elapsed_seconds


def run_evolution(
    current_state: Chromosome,
    strategic_goals: StrategicGoals,
    config: Optional[OptimizerConfig] = None,
    listeners: Iterable[ProgressListener] = ()
) -> EvolutionResult:
    """Build an engine and run it to completion from synchronous code."""
    engine = EvolutionEngine(config or create_default_config(), current_state, strategic_goals)
    for listener in listeners:
        engine.add_progress_listener(listener)
    return engine.run()

"""Optimization endpoints."""

from datetime import timedelta

from fastapi import APIRouter, HTTPException
from fastapi.concurrency import run_in_threadpool
import logfire

from src.api.v1.schemas import (
    OptimizationRequest,
    OptimizationResponse,
    ScoresSchema,
    GeneChangeSchema,
)
from src.core.config import settings
from src.optimizer.core.catalog import functions_for
from src.optimizer.core.engine import EvolutionEngine

router = APIRouter()


@router.post("/optimizations", response_model=OptimizationResponse)
async def create_optimization(request: OptimizationRequest) -> OptimizationResponse:
    """Run the optimizer on a case and return the best target state found."""
    if request.population_size and request.population_size > settings.max_population_size:
        raise HTTPException(
            status_code=422,
            detail=f"population_size must not exceed {settings.max_population_size}"
        )
    if request.generations and request.generations > settings.max_generations:
        raise HTTPException(
            status_code=422,
            detail=f"generations must not exceed {settings.max_generations}"
        )

    case = request.case
    config = settings.optimizer_config(
        population_size=request.population_size,
        generations=request.generations,
        mutation_rate=request.mutation_rate,
        crossover_rate=request.crossover_rate,
        elite_size=request.elite_size,
    )
    config.random_seed = request.random_seed
    if request.max_seconds is not None:
        config.max_runtime = timedelta(seconds=request.max_seconds)
    config.validate_consistency()

    current_state, strategic_goals = case.build()

    with logfire.span("Optimization request", case=case.name, group=case.implementation_group):
        engine = EvolutionEngine(config, current_state, strategic_goals)
        # Generations are CPU-bound; keep them off the server's event loop
        result = await run_in_threadpool(engine.run)

    best = result.best_chromosome
    return OptimizationResponse(
        name=case.name,
        implementation_group=best.implementation_group.name,
        converged=result.converged,
        generations=result.generations,
        elapsed_seconds=result.elapsed_seconds,
        termination_reason=result.termination_reason.value,
        asset_score=best.asset_score(),
        function_scores={
            function.value: best.function_score(function)
            for function in functions_for(best.implementation_group)
        },
        scores=ScoresSchema(**best.scores.to_dict()),
        best_state={gene.name: allele.value for gene, allele in best.genes.items()},
        changed_genes=[
            GeneChangeSchema(gene=gene.name, current=before.value, target=after.value)
            for gene, (before, after) in best.differences_from(current_state).items()
        ],
        unsatisfied=[str(entry) for entry in strategic_goals.unsatisfied_by(best)],
    )

"""Request and response models for the v1 API."""

from typing import Dict, List, Optional
from pydantic import BaseModel, Field

from src.optimizer.cases import CaseDefinition


class CategorySchema(BaseModel):
    code: str
    name: str
    genes: List[str]


class FunctionSchema(BaseModel):
    code: str
    name: str
    categories: List[CategorySchema]


class CatalogResponse(BaseModel):
    implementation_group: str
    gene_count: int
    functions: List[FunctionSchema]


class OptimizationRequest(BaseModel):
    """A case plus optional overrides of the service's evolution defaults."""
    case: CaseDefinition
    population_size: Optional[int] = Field(default=None, ge=1)
    generations: Optional[int] = Field(default=None, ge=1)
    mutation_rate: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    crossover_rate: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    elite_size: Optional[int] = Field(default=None, ge=1)
    random_seed: Optional[int] = None
    max_seconds: Optional[float] = Field(default=None, gt=0)


class ScoresSchema(BaseModel):
    goal_coverage: float
    similarity: float
    global_maturity: float
    constraint_coverage: float
    feasible: bool
    fitness: float


class GeneChangeSchema(BaseModel):
    gene: str
    current: float
    target: float


class OptimizationResponse(BaseModel):
    name: str
    implementation_group: str
    converged: bool
    generations: int
    elapsed_seconds: float
    termination_reason: str
    asset_score: float
    function_scores: Dict[str, float]
    scores: ScoresSchema
    best_state: Dict[str, float]
    changed_genes: List[GeneChangeSchema]
    unsatisfied: List[str]

"""
Case files for the maturity optimizer.

A case bundles everything needed to run one optimization: the asset's
implementation group, its current maturity per gene, and the strategic goals
and constraints. Cases are pydantic models so they validate on load and
serialize to JSON for the API and for files on disk.
"""

from typing import Dict, Any, List, Optional, Literal, Tuple
from pydantic import BaseModel, Field, ConfigDict, field_validator, model_validator

from src.optimizer.core.alleles import Allele, ComparisonOperator
from src.optimizer.core.catalog import ImplementationGroup, get_gene
from src.optimizer.core.chromosome import Chromosome
from src.optimizer.goals.conditions import Condition, ConditionKind, Granularity
from src.optimizer.goals.strategic import StrategicGoals, resolve_key


class ConditionDefinition(BaseModel):
    """One goal or constraint as written in a case file."""

    model_config = ConfigDict(extra='forbid')

    level: Literal["asset", "function", "category", "gene"] = Field(
        default="asset",
        description="Granularity the condition is attached to"
    )
    key: Optional[str] = Field(
        default=None,
        description="Gene name, category code/name or function code/name; omitted for the asset"
    )
    operator: str = Field(
        description="Relational operator: <, <=, =, >, >= (or LESS, GREATER_OR_EQUAL, ...)"
    )
    threshold: float = Field(
        ge=0.0,
        le=1.0,
        description="Maturity level the score is compared against"
    )

    @field_validator('operator')
    def validate_operator(cls, v):
        """Normalize the operator to its symbol."""
        try:
            return ComparisonOperator(v).value
        except ValueError:
            pass
        try:
            return ComparisonOperator[v.upper()].value
        except KeyError:
            raise ValueError(f"Unknown operator: {v}") from None

    @model_validator(mode="after")
    def validate_key(self) -> "ConditionDefinition":
        """Non-asset conditions need a key that exists in the catalog."""
        if self.level == "asset":
            self.key = None
            return self
        try:
            resolve_key(Granularity(self.level), self.key)
        except KeyError as e:
            raise ValueError(str(e).strip("'\"")) from None
        return self

    def to_condition(self) -> Condition:
        return Condition.parse(self.operator, self.threshold)


class CaseDefinition(BaseModel):
    """An optimization case: scope, current state, goals and constraints."""

    model_config = ConfigDict(extra='forbid')

    name: str = Field(
        default="case",
        description="Human-readable case name"
    )
    implementation_group: Literal["IG1", "IG2", "IG3"] = Field(
        default="IG1",
        description="Implementation group of the asset"
    )
    default_level: float = Field(
        default=0.0,
        description="Allele of genes missing from current_state"
    )
    current_state: Dict[str, float] = Field(
        default_factory=dict,
        description="Current maturity level per gene name"
    )
    goals: List[ConditionDefinition] = Field(default_factory=list)
    constraints: List[ConditionDefinition] = Field(default_factory=list)

    @field_validator('implementation_group', mode='before')
    def normalize_group(cls, v):
        if isinstance(v, int) and not isinstance(v, bool):
            return ImplementationGroup(v).name
        if isinstance(v, str):
            return v.upper()
        return v

    @field_validator('default_level')
    def validate_default_level(cls, v):
        Allele.from_value(v)
        return v

    @field_validator('current_state')
    def validate_current_state(cls, v):
        """Every entry must name a catalog gene and hold an allele value."""
        for gene_name, level in v.items():
            try:
                get_gene(gene_name)
            except KeyError:
                raise ValueError(f"Unknown gene: {gene_name}") from None
            Allele.from_value(level)
        return v

    @property
    def group(self) -> ImplementationGroup:
        return ImplementationGroup[self.implementation_group]

    def build_current_state(self) -> Chromosome:
        """Chromosome of the current state. Genes inactive for the group are ignored."""
        chromosome = Chromosome(self.group, default=Allele.from_value(self.default_level))
        for gene_name, level in self.current_state.items():
            chromosome.update_allele(gene_name, Allele.from_value(level))
        return chromosome

    def build_strategic_goals(self) -> StrategicGoals:
        """Goals and constraints. Keys inapplicable to the group are dropped."""
        strategic_goals = StrategicGoals(self.group)
        for kind, definitions in ((ConditionKind.GOAL, self.goals), (ConditionKind.CONSTRAINT, self.constraints)):
            for definition in definitions:
                key = resolve_key(Granularity(definition.level), definition.key)
                strategic_goals.add(kind, definition.to_condition(), key)
        return strategic_goals

    def build(self) -> Tuple[Chromosome, StrategicGoals]:
        return self.build_current_state(), self.build_strategic_goals()

    @classmethod
    def from_objects(cls, current_state: Chromosome, strategic_goals: StrategicGoals, name: str = "case") -> "CaseDefinition":
        """Describe an in-memory chromosome and goal set as a case."""
        if current_state.implementation_group != strategic_goals.implementation_group:
            raise ValueError("Current state and goals belong to different implementation groups")
        data = strategic_goals.to_dict()
        return cls(
            name=name,
            implementation_group=current_state.implementation_group.name,
            current_state={gene.name: allele.value for gene, allele in current_state.genes.items()},
            goals=data["goals"],
            constraints=data["constraints"],
        )

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")

    def save(self, filepath: str) -> None:
        """Save case to JSON file."""
        with open(filepath, 'w') as f:
            f.write(self.model_dump_json(indent=2))

    @classmethod
    def load(cls, filepath: str) -> "CaseDefinition":
        """Load case from JSON file."""
        with open(filepath, 'r') as f:
            return cls.model_validate_json(f.read())

"""
Chromosome Representation for the Maturity Optimizer.

This module defines the solution representation used by the genetic
algorithm: one allele per gene active for the asset's implementation group,
plus the fitness components cached by the fitness evaluator.
"""

from typing import List, Dict, Any, Optional, Union, Mapping, Sequence, Tuple
from dataclasses import dataclass
import random
import json
import hashlib

from src.optimizer.core.alleles import Allele
from src.optimizer.core.catalog import (
    Gene,
    Category,
    Function,
    ImplementationGroup,
    genes_for,
    genes_for_category,
    genes_for_function,
    get_gene,
)


GeneRef = Union[Gene, str]


@dataclass(frozen=True)
class FitnessScores:
    """Fitness components written by the fitness evaluator."""
    goal_coverage: float
    similarity: float
    global_maturity: float
    constraint_coverage: float
    feasible: bool
    fitness: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "goal_coverage": self.goal_coverage,
            "similarity": self.similarity,
            "global_maturity": self.global_maturity,
            "constraint_coverage": self.constraint_coverage,
            "feasible": self.feasible,
            "fitness": self.fitness,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FitnessScores":
        return cls(
            goal_coverage=data["goal_coverage"],
            similarity=data["similarity"],
            global_maturity=data["global_maturity"],
            constraint_coverage=data.get("constraint_coverage", 1.0),
            feasible=data.get("feasible", True),
            fitness=data["fitness"],
        )


class Chromosome:
    """
    Chromosome representing one maturity assignment for an asset.

    Every gene active for ``implementation_group`` holds exactly one allele.
    Inactive genes are never stored; writes to them are ignored.
    """

    def __init__(
        self,
        implementation_group: ImplementationGroup,
        alleles: Optional[Mapping[GeneRef, Allele]] = None,
        default: Allele = Allele.L0
    ):
        """
        Initialize a chromosome with every active gene set to ``default``.

        Args:
            implementation_group: Scope selecting the active genes
            alleles: Optional initial alleles, keyed by gene or gene name
            default: Allele used for genes not present in ``alleles``
        """
        if not isinstance(implementation_group, ImplementationGroup):
            raise TypeError(f"implementation_group must be an ImplementationGroup, got {implementation_group!r}")

        self.implementation_group = implementation_group
        self._active: Tuple[Gene, ...] = tuple(genes_for(implementation_group))
        self._genes: Dict[Gene, Allele] = {gene: default for gene in self._active}
        self.scores: Optional[FitnessScores] = None
        self.generation: int = 0

        for gene, allele in (alleles or {}).items():
            self.update_allele(gene, allele)

    # Gene access

    @property
    def genes(self) -> Dict[Gene, Allele]:
        """Copy of the gene to allele mapping."""
        return dict(self._genes)

    @property
    def active_genes(self) -> List[Gene]:
        return list(self._active)

    def is_active(self, gene: GeneRef) -> bool:
        return _resolve(gene) in self._genes

    def update_allele(self, gene: GeneRef, allele: Allele) -> None:
        """Set one gene's allele. No-op when the gene is inactive for this scope."""
        if not isinstance(allele, Allele):
            raise TypeError(f"allele must be an Allele, got {allele!r}")
        gene = _resolve(gene)
        if gene not in self._genes:
            return
        if self._genes[gene] is not allele:
            self._genes[gene] = allele
            self.invalidate()

    def get_allele(self, gene: GeneRef) -> Allele:
        gene = _resolve(gene)
        try:
            return self._genes[gene]
        except KeyError:
            raise KeyError(
                f"Gene {gene.name} is not active for {self.implementation_group.name}"
            ) from None

    def get_allele_value(self, gene: GeneRef) -> float:
        return self.get_allele(gene).value

    def set_genes(self, genes: Mapping[GeneRef, Allele]) -> None:
        """Overwrite alleles from a mapping, ignoring inactive genes."""
        for gene, allele in genes.items():
            self.update_allele(gene, allele)

    def randomize(self, rng: Optional[random.Random] = None) -> None:
        """Assign a uniformly random allele to every active gene."""
        rng = rng or random
        alleles = Allele.ordered()
        for gene in self._active:
            self._genes[gene] = rng.choice(alleles)
        self.invalidate()

    # Aggregate scores

    def category_score(self, category: Category) -> float:
        """Mean allele value over the active genes of a category."""
        return self._mean(genes_for_category(category, self.implementation_group))

    def function_score(self, function: Function) -> float:
        """Mean allele value over the active genes of a function."""
        return self._mean(genes_for_function(function, self.implementation_group))

    def asset_score(self) -> float:
        """Mean allele value over every active gene."""
        return self._mean(self._active)

    def _mean(self, genes: Sequence[Gene]) -> float:
        if not genes:
            return 0.0
        return sum(self._genes[gene].value for gene in genes) / len(genes)

    def similarity_to(self, other: "Chromosome") -> float:
        """
        Closeness to another chromosome of the same scope.

        Computed as the mean of ``1 - |a - b|`` over active genes, so 1.0 means
        identical and 0.0 means every gene sits at the opposite extreme.
        """
        self._check_scope(other)
        if not self._active:
            return 1.0
        total = sum(
            1.0 - abs(self._genes[gene].value - other._genes[gene].value)
            for gene in self._active
        )
        return min(1.0, total / len(self._active))

    def differences_from(self, other: "Chromosome") -> Dict[Gene, Tuple[Allele, Allele]]:
        """Genes whose allele differs from ``other``, as ``{gene: (other, self)}``."""
        self._check_scope(other)
        return {
            gene: (other._genes[gene], allele)
            for gene, allele in self._genes.items()
            if other._genes[gene] is not allele
        }

    def same_genes(self, other: "Chromosome") -> bool:
        return self.implementation_group == other.implementation_group and self._genes == other._genes

    # Genetic operators

    def mutate(self, mutation_rate: float, rng: Optional[random.Random] = None) -> int:
        """
        Mutate each gene with probability ``mutation_rate``.

        A mutated gene always receives a different allele.

        Returns:
            Number of genes changed
        """
        rng = rng or random
        changed = 0
        alleles = Allele.ordered()
        for gene in self._active:
            if rng.random() < mutation_rate:
                current = self._genes[gene]
                self._genes[gene] = rng.choice([a for a in alleles if a is not current])
                changed += 1
        if changed:
            self.invalidate()
        return changed

    def uniform_crossover(
        self,
        other: "Chromosome",
        rng: Optional[random.Random] = None
    ) -> Tuple["Chromosome", "Chromosome"]:
        """Exchange each gene between two parents with probability 0.5."""
        self._check_scope(other)
        rng = rng or random
        child1 = self.clone()
        child2 = other.clone()
        swapped = False
        for gene in self._active:
            if rng.random() < 0.5:
                child1._genes[gene] = other._genes[gene]
                child2._genes[gene] = self._genes[gene]
                swapped = True
        if swapped:
            child1.invalidate()
            child2.invalidate()
        return child1, child2

    # Fitness cache

    @property
    def evaluated(self) -> bool:
        return self.scores is not None

    @property
    def fitness(self) -> float:
        return self.scores.fitness if self.scores else 0.0

    @property
    def feasible(self) -> bool:
        return self.scores.feasible if self.scores else False

    def invalidate(self) -> None:
        """Drop cached fitness after the allele map changed."""
        self.scores = None

    # Identity and serialization

    @property
    def chromosome_id(self) -> str:
        """Content hash of the scope and allele assignment."""
        content = json.dumps(
            [self.implementation_group.name] + [a.index for a in (self._genes[g] for g in self._active)]
        )
        return hashlib.sha256(content.encode()).hexdigest()[:16]

    def to_vector(self) -> List[int]:
        """Allele indexes (0-3) of the active genes, in catalog order."""
        return [self._genes[gene].index for gene in self._active]

    @classmethod
    def from_vector(cls, vector: Sequence[int], implementation_group: Optional[ImplementationGroup] = None) -> "Chromosome":
        """
        Build a chromosome from allele indexes in catalog order.

        The implementation group is inferred from the vector length when not given.
        """
        if implementation_group is None:
            implementation_group = _group_for_length(len(vector))
        active = genes_for(implementation_group)
        if len(vector) != len(active):
            raise ValueError(
                f"Vector length {len(vector)} does not match {len(active)} genes "
                f"of {implementation_group.name}"
            )
        chromosome = cls(implementation_group)
        for position, (gene, index) in enumerate(zip(active, vector)):
            try:
                chromosome._genes[gene] = Allele.from_index(int(index))
            except ValueError:
                raise ValueError(f"Value in position {position} is out of the range 0-3: {index}") from None
        return chromosome

    def to_dict(self) -> Dict[str, Any]:
        """Convert chromosome to dictionary representation."""
        return {
            "chromosome_id": self.chromosome_id,
            "implementation_group": self.implementation_group.name,
            "generation": self.generation,
            "genes": {gene.name: allele.value for gene, allele in self._genes.items()},
            "scores": self.scores.to_dict() if self.scores else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Chromosome":
        """Create chromosome from dictionary representation."""
        chromosome = cls(ImplementationGroup[data["implementation_group"]])
        for name, level in data.get("genes", {}).items():
            chromosome.update_allele(name, Allele.from_value(level))
        chromosome.generation = data.get("generation", 0)
        if data.get("scores"):
            chromosome.scores = FitnessScores.from_dict(data["scores"])
        return chromosome

    def clone(self) -> "Chromosome":
        """Create an independent copy, including cached scores."""
        copy = Chromosome.__new__(Chromosome)
        copy.implementation_group = self.implementation_group
        copy._active = self._active
        copy._genes = dict(self._genes)
        copy.scores = self.scores
        copy.generation = self.generation
        return copy

    def _check_scope(self, other: "Chromosome") -> None:
        if other.implementation_group != self.implementation_group:
            raise ValueError(
                f"Chromosomes belong to different implementation groups: "
                f"{self.implementation_group.name} and {other.implementation_group.name}"
            )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Chromosome):
            return NotImplemented
        return self.same_genes(other)

    def __hash__(self) -> int:
        return hash(self.chromosome_id)

    def __repr__(self) -> str:
        """String representation of chromosome."""
        return (
            f"Chromosome(id={self.chromosome_id[:8]}, group={self.implementation_group.name}, "
            f"asset_score={self.asset_score():.3f}, fitness={self.fitness:.4f})"
        )


def _resolve(gene: GeneRef) -> Gene:
    return get_gene(gene) if isinstance(gene, str) else gene


def _group_for_length(length: int) -> ImplementationGroup:
    for group in ImplementationGroup:
        if len(genes_for(group)) == length:
            return group
    sizes = ", ".join(str(len(genes_for(g))) for g in ImplementationGroup)
    raise ValueError(f"Incorrect vector length {length}. It should be one of: {sizes}")

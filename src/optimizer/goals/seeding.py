"""
Goal-directed candidate seeding.

Builds a handful of chromosomes that move the current state towards the
declared goals and constraints. They are injected into the first generation
next to random individuals to speed up convergence; they carry no guarantee
of feasibility.
"""

from typing import List, Optional

import logfire

from src.optimizer.core.alleles import Allele, ComparisonOperator, SCORE_TOLERANCE
from src.optimizer.core.chromosome import Chromosome
from src.optimizer.core.catalog import genes_for_category, genes_for_function, genes_for
from src.optimizer.goals.conditions import Granularity
from src.optimizer.goals.strategic import StrategicGoals, StrategicEntry


MAX_CANDIDATES = 5


class CandidateSeeder:
    """Synthesizes goal-satisfying starting points from the current state."""

    def __init__(self, strategic_goals: StrategicGoals):
        if strategic_goals is None:
            raise ValueError("strategic_goals is required")
        self.strategic_goals = strategic_goals

    def generate(self, current_state: Chromosome) -> List[Chromosome]:
        """
        Generate seed candidates for the first generation.

        Candidate 0 is always a copy of ``current_state``. Up to four more are
        added: one applying every gene-level condition, then one each driving
        whole categories, functions or the asset to an extreme allele when an
        ``=`` condition asks for the minimum or maximum level. A candidate is
        only kept when it differs from the current state.

        Args:
            current_state: Baseline chromosome of the asset

        Returns:
            Between 1 and 5 independent chromosomes
        """
        if current_state.implementation_group != self.strategic_goals.implementation_group:
            raise ValueError(
                f"Current state scope {current_state.implementation_group.name} does not match "
                f"goals scope {self.strategic_goals.implementation_group.name}"
            )

        with logfire.span("Generate seed candidates", goals=self.strategic_goals.count_defined()):
            candidates = [current_state.clone()]

            for build in (
                self._gene_level_candidate,
                self._category_level_candidate,
                self._function_level_candidate,
                self._asset_level_candidate,
            ):
                candidate = build(current_state)
                if candidate is not None and not candidate.same_genes(current_state):
                    candidates.append(candidate)

            logfire.debug("Seed candidates generated", count=len(candidates))
            return candidates[:MAX_CANDIDATES]

    def _gene_level_candidate(self, current_state: Chromosome) -> Optional[Chromosome]:
        entries = self.strategic_goals.entries(Granularity.GENE)
        if not entries:
            return None
        candidate = current_state.clone()
        for entry in entries:
            allele = entry.condition.target_allele()
            # No allele satisfies the bound (e.g. "> 1.0"): leave the gene alone
            if allele is not None:
                candidate.update_allele(entry.key, allele)
        return candidate

    def _category_level_candidate(self, current_state: Chromosome) -> Optional[Chromosome]:
        return self._extreme_candidate(
            current_state,
            Granularity.CATEGORY,
            lambda entry: genes_for_category(entry.key, current_state.implementation_group),
        )

    def _function_level_candidate(self, current_state: Chromosome) -> Optional[Chromosome]:
        return self._extreme_candidate(
            current_state,
            Granularity.FUNCTION,
            lambda entry: genes_for_function(entry.key, current_state.implementation_group),
        )

    def _asset_level_candidate(self, current_state: Chromosome) -> Optional[Chromosome]:
        return self._extreme_candidate(
            current_state,
            Granularity.ASSET,
            lambda entry: genes_for(current_state.implementation_group),
        )

    def _extreme_candidate(self, current_state: Chromosome, granularity: Granularity, genes_of) -> Optional[Chromosome]:
        entries = [
            entry for entry in self.strategic_goals.entries(granularity)
            if _extreme_allele(entry) is not None
        ]
        if not entries:
            return None
        candidate = current_state.clone()
        for entry in entries:
            allele = _extreme_allele(entry)
            for gene in genes_of(entry):
                candidate.update_allele(gene, allele)
        return candidate


def _extreme_allele(entry: StrategicEntry) -> Optional[Allele]:
    """Minimum or maximum allele targeted by an ``=`` condition, else None."""
    if entry.condition.operator is not ComparisonOperator.EQUAL:
        return None
    threshold = entry.condition.threshold
    if abs(threshold - Allele.minimum().value) <= SCORE_TOLERANCE:
        return Allele.minimum()
    if abs(threshold - Allele.maximum().value) <= SCORE_TOLERANCE:
        return Allele.maximum()
    return None

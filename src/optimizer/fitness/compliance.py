"""
Goal compliance and constraint feasibility objectives.

Goal compliance measures how many strategic goals a chromosome meets.
Constraint feasibility decides whether the chromosome is an acceptable
solution at all, and how far it is from being one.
"""

from typing import List

from src.optimizer.core.chromosome import Chromosome
from src.optimizer.fitness.base import FitnessFunction, FitnessMetrics
from src.optimizer.goals.strategic import StrategicGoals, StrategicEntry


class GoalComplianceFitness(FitnessFunction):
    """
    Fraction of registered goals satisfied by a chromosome.

    With ``graded=True`` unmet goals earn partial credit according to how
    close their score is to the threshold. A chromosome reaches 1.0 only
    when every goal is met in both modes. With no goals the score is 1.0.
    """

    name = "goal_coverage"

    def __init__(self, strategic_goals: StrategicGoals, graded: bool = False):
        self.strategic_goals = strategic_goals
        self.graded = graded

    def evaluate(self, chromosome: Chromosome) -> float:
        return _coverage(self.strategic_goals.goals, chromosome, self.graded)

    def all_satisfied(self, chromosome: Chromosome) -> bool:
        return self.strategic_goals.goals_satisfied_by(chromosome)

    def calculate_metrics(self, chromosome: Chromosome) -> FitnessMetrics:
        goals = self.strategic_goals.goals
        unmet = [str(entry) for entry in goals if not entry.is_satisfied_by(chromosome)]
        return FitnessMetrics(
            score=self.evaluate(chromosome),
            details={
                "total_goals": len(goals),
                "satisfied_goals": len(goals) - len(unmet),
                "unsatisfied": unmet,
                "graded": self.graded,
            }
        )


class ConstraintFeasibility(FitnessFunction):
    """
    Hard constraint check.

    ``evaluate`` returns the mean satisfaction degree of the constraints
    (graded, 1.0 when all hold) and ``is_feasible`` the strict verdict.
    """

    name = "constraint_coverage"

    def __init__(self, strategic_goals: StrategicGoals):
        self.strategic_goals = strategic_goals

    def evaluate(self, chromosome: Chromosome) -> float:
        return _coverage(self.strategic_goals.constraints, chromosome, graded=True)

    def is_feasible(self, chromosome: Chromosome) -> bool:
        return self.strategic_goals.constraints_satisfied_by(chromosome)

    def calculate_metrics(self, chromosome: Chromosome) -> FitnessMetrics:
        constraints = self.strategic_goals.constraints
        violated = [str(entry) for entry in constraints if not entry.is_satisfied_by(chromosome)]
        return FitnessMetrics(
            score=self.evaluate(chromosome),
            details={
                "total_constraints": len(constraints),
                "violated": violated,
                "feasible": not violated,
            }
        )


def _coverage(entries: List[StrategicEntry], chromosome: Chromosome, graded: bool) -> float:
    if not entries:
        return 1.0
    if graded:
        total = sum(entry.satisfaction_degree(chromosome) for entry in entries)
    else:
        total = sum(1.0 for entry in entries if entry.is_satisfied_by(chromosome))
    return total / len(entries)

"""
Survival analysis across cohorts.

Public API:
    kaplan_meier(subjects) -> KMSolution
    logrank(subjects) -> LogRankSolution
    at_risk_table(subjects, checkpoints) -> AtRiskSolution
    extract_median(curve) -> float | None
    cohort_summary(subjects) -> CohortSummary
    generate_cohort(n, groups) -> list[Subject]
"""

from cohortsurv.survival._common import (
    AtRiskRow,
    CohortSummary,
    GroupResult,
    Subject,
    SurvivalCurve,
    SurvivalPoint,
)
from cohortsurv.survival.datasets import (
    EXPRESSION_GROUPS,
    MUTATION_GROUPS,
    TREATMENT_GROUPS,
    GroupProfile,
    generate_cohort,
    group_colors,
)
from cohortsurv.survival.design import CohortDesign, GroupSeries
from cohortsurv.survival.solution import AtRiskSolution, KMSolution, LogRankSolution
from cohortsurv.survival.solvers import (
    at_risk_table,
    cohort_summary,
    extract_median,
    kaplan_meier,
    logrank,
)

__all__ = [
    # Functions
    "kaplan_meier",
    "logrank",
    "at_risk_table",
    "extract_median",
    "cohort_summary",
    "generate_cohort",
    "group_colors",
    # Solutions
    "KMSolution",
    "LogRankSolution",
    "AtRiskSolution",
    # Data
    "CohortDesign",
    "GroupSeries",
    "Subject",
    "SurvivalPoint",
    "SurvivalCurve",
    "GroupResult",
    "AtRiskRow",
    "CohortSummary",
    "GroupProfile",
    "TREATMENT_GROUPS",
    "MUTATION_GROUPS",
    "EXPRESSION_GROUPS",
]

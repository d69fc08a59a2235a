"""
cohortsurv: survival analysis for comparing cohorts.

Kaplan-Meier curves with Greenwood confidence bounds, median survival,
number-at-risk tables and the log-rank test, computed from
already-grouped subject records.

Submodules:
    survival: Estimators, tests and synthetic cohorts
    core: Result envelope, exceptions, validation, timing
"""

__version__ = "0.1.0"

from cohortsurv import survival
from cohortsurv.core.exceptions import (
    CohortSurvError,
    ValidationError,
    InvalidInputError,
    InsufficientGroupsError,
    NumericalError,
    InconsistentAtRiskError,
)
from cohortsurv.survival import (
    Subject,
    at_risk_table,
    cohort_summary,
    extract_median,
    generate_cohort,
    kaplan_meier,
    logrank,
)

__all__ = [
    "__version__",
    "survival",
    "kaplan_meier",
    "logrank",
    "at_risk_table",
    "extract_median",
    "cohort_summary",
    "generate_cohort",
    "Subject",
    "CohortSurvError",
    "ValidationError",
    "InvalidInputError",
    "InsufficientGroupsError",
    "NumericalError",
    "InconsistentAtRiskError",
]

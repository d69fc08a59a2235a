"""
Core infrastructure for cohortsurv.

Shared abstractions used by the survival module:
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
    defaults: Option defaults
    compute: Timing and tolerance utilities
"""

from cohortsurv.core.result import Result
from cohortsurv.core.exceptions import (
    CohortSurvError,
    ValidationError,
    InvalidInputError,
    InsufficientGroupsError,
    NumericalError,
    InconsistentAtRiskError,
)

__all__ = [
    # Result
    "Result",
    # Exceptions
    "CohortSurvError",
    "ValidationError",
    "InvalidInputError",
    "InsufficientGroupsError",
    "NumericalError",
    "InconsistentAtRiskError",
]

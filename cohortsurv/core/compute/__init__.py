"""
Shared compute infrastructure for cohortsurv.

Submodules:
    timing: Execution timing utilities
    tolerances: Numerical comparison tiers
"""

from cohortsurv.core.compute.timing import Timer
from cohortsurv.core.compute.tolerances import ToleranceTier, get_tolerance

__all__ = [
    "Timer",
    "ToleranceTier",
    "get_tolerance",
]

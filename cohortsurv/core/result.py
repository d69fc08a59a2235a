"""
Generic result container for all cohortsurv computations.

The Result class provides a standardized envelope that every survival
result uses. This enables shared tooling for timing, diagnostics and
serialization while allowing each analysis to define its own payload.

Design decisions:
    - Generic over parameter payload P for type safety
    - info dict for flexible metadata (method, options actually used)
    - timing is optional (don't burden unit tests)
    - Immutable (frozen=True) so repeated analyses are comparable
"""

from dataclasses import dataclass, field
from typing import TypeVar, Generic, Any

P = TypeVar('P')  # Parameter payload type


@dataclass(frozen=True)
class Result(Generic[P]):
    """
    Immutable result envelope for survival computations.

    Type Parameters:
        P: The analysis-specific parameter payload type

    Attributes:
        params: Analysis-specific payload (curves, test statistics, tables)
        info: Structured metadata (method, confidence level, alpha)
        timing: Execution timing breakdown, or None if not measured
        backend_name: Identifier of the routine that produced this result
        warnings: Non-fatal issues encountered during computation

    Examples:
        >>> Result(
        ...     params=KMParams(groups=groups, conf_level=0.95, conf_type="log-log"),
        ...     info={'method': 'Kaplan-Meier'},
        ...     timing={'total_seconds': 0.001},
        ...     backend_name='cpu_km',
        ... )
    """
    params: P
    info: dict[str, Any]
    timing: dict[str, float] | None
    backend_name: str
    warnings: tuple[str, ...] = field(default_factory=tuple)

    def has_warning(self, substring: str) -> bool:
        """Check if any warning contains the given substring."""
        return any(substring in w for w in self.warnings)

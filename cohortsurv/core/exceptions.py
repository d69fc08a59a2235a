"""
Exception hierarchy for cohortsurv.

All exceptions inherit from CohortSurvError to allow catching any
library-specific error. Callers serving results over HTTP are expected
to map ValidationError subclasses to 400-class responses and
NumericalError subclasses to 500-class responses.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Never catch and re-raise with less information
"""

from typing import Any


class CohortSurvError(Exception):
    """Base exception for all cohortsurv errors."""
    pass


class ValidationError(CohortSurvError):
    """
    Input validation failed.

    Raised when user-provided inputs or options fail validation checks.
    """
    pass


class InvalidInputError(ValidationError):
    """
    A subject record is malformed or the dataset is empty.

    Raised for negative or non-finite times, missing group or event
    fields, event values other than 0/1/True/False, and empty datasets.

    Attributes:
        index: Position of the offending record, if a single record is at fault
        field: Name of the offending field ('time', 'event', 'group'), if known
        value: The rejected value, if known
    """

    def __init__(
        self,
        message: str,
        index: int | None = None,
        field: str | None = None,
        value: Any = None,
    ):
        super().__init__(message)
        self.index = index
        self.field = field
        self.value = value


class InsufficientGroupsError(ValidationError):
    """
    A comparison across groups cannot be computed.

    Raised when the log-rank test is requested with fewer than two groups,
    or when a group has no observed events.

    Attributes:
        n_groups: Number of non-empty groups found
        groups_without_events: Labels of groups with zero observed events
    """

    def __init__(
        self,
        message: str,
        n_groups: int | None = None,
        groups_without_events: tuple[Any, ...] = (),
    ):
        super().__init__(message)
        self.n_groups = n_groups
        self.groups_without_events = tuple(groups_without_events)


class NumericalError(CohortSurvError):
    """
    Numerical computation failed.

    Base class for errors arising from internal invariant violations
    during computation.
    """
    pass


class InconsistentAtRiskError(NumericalError):
    """
    The at-risk count went negative while walking a survival series.

    This signals an inconsistent series (for example a starting count
    smaller than the number of subjects supplied), not bad user data.

    Attributes:
        time: Time at which the violation was detected
        at_risk: At-risk count before the step
        removed: Number of subjects leaving the risk set at that time
    """

    def __init__(
        self,
        message: str,
        time: float | None = None,
        at_risk: int | None = None,
        removed: int | None = None,
    ):
        super().__init__(message)
        self.time = time
        self.at_risk = at_risk
        self.removed = removed

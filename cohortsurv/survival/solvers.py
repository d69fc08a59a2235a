"""
Public API for survival analysis.

    kaplan_meier(subjects) → KMSolution
    logrank(subjects) → LogRankSolution
    at_risk_table(subjects, checkpoints) → AtRiskSolution
    extract_median(curve) → float | None
    cohort_summary(subjects) → CohortSummary

Each function validates its options, normalizes the subjects into a
CohortDesign, runs the estimator and wraps the Result in a Solution.
"""

from __future__ import annotations

import warnings
from typing import Any, Hashable, Iterable, Literal, Mapping, Sequence, Union

import numpy as np

from cohortsurv.core.compute.timing import Timer
from cohortsurv.core.defaults import (
    CONF_TYPES,
    DEFAULT_ALPHA,
    DEFAULT_CONF_LEVEL,
    DEFAULT_CONF_TYPE,
    DEFAULT_N_INTERVALS,
)
from cohortsurv.core.exceptions import InsufficientGroupsError, ValidationError
from cohortsurv.core.result import Result
from cohortsurv.core.validation import (
    check_1d,
    check_array,
    check_finite,
    check_non_decreasing,
    check_non_negative,
    check_open_unit_interval,
    check_positive_int,
)
from cohortsurv.survival._atrisk import at_risk_counts, default_checkpoints
from cohortsurv.survival._common import (
    AtRiskParams,
    CohortSummary,
    GroupResult,
    KMParams,
    Subject,
    SurvivalCurve,
)
from cohortsurv.survival._greenwood import greenwood_ci
from cohortsurv.survival._km import kaplan_meier_curve
from cohortsurv.survival._logrank import logrank_test
from cohortsurv.survival._median import curve_arrays, median_survival_time
from cohortsurv.survival.design import CohortDesign
from cohortsurv.survival.solution import AtRiskSolution, KMSolution, LogRankSolution


SubjectsLike = Union[CohortDesign, Iterable[Union[Subject, Mapping[str, Any]]]]


def _as_design(
    subjects: SubjectsLike,
    groups: Sequence[Hashable] | None,
) -> CohortDesign:
    if isinstance(subjects, CohortDesign):
        if groups is None:
            return subjects
        subjects = [s for series in subjects for s in series.subjects]
    return CohortDesign.from_subjects(subjects, groups=groups)


def _unknown_labels(
    option: Mapping[Hashable, Any] | None,
    labels: Sequence[Hashable],
    name: str,
) -> list[str]:
    if not option:
        return []
    unknown = [k for k in option if k not in labels]
    if not unknown:
        return []
    msg = f"{name} given for unknown group(s) {unknown!r}; ignored"
    warnings.warn(msg, UserWarning, stacklevel=3)
    return [msg]


def kaplan_meier(
    subjects: SubjectsLike,
    conf_level: float = DEFAULT_CONF_LEVEL,
    *,
    conf_type: Literal["log-log", "log", "plain"] = DEFAULT_CONF_TYPE,
    colors: Mapping[Hashable, str] | None = None,
    metadata: Mapping[Hashable, Mapping[str, Any]] | None = None,
    groups: Sequence[Hashable] | None = None,
) -> KMSolution:
    """Kaplan-Meier survival curves, one per group.

    Parameters
    ----------
    subjects : iterable of Subject or mapping, or CohortDesign
        Subject records with ``time``, ``event`` and ``group``.
    conf_level : float
        Confidence level for the pointwise bounds (default 0.95).
    conf_type : str
        CI transformation: "log-log" (default), "log", "plain".
    colors : mapping or None
        Group label -> display color, passed through to each GroupResult.
    metadata : mapping or None
        Group label -> opaque mapping, passed through to each GroupResult.
    groups : sequence or None
        Explicit group order; subjects in unlisted groups are dropped.

    Returns
    -------
    KMSolution
        Groups in first-appearance order (or the order of ``groups``).

    Raises
    ------
    InvalidInputError
        If any subject record is malformed or there are no subjects.
    ValidationError
        If ``conf_level`` is outside (0, 1) or ``conf_type`` is unknown.
    """
    check_open_unit_interval(conf_level, "conf_level")
    if conf_type not in CONF_TYPES:
        raise ValidationError(
            f"conf_type must be 'log-log', 'log', or 'plain', "
            f"got '{conf_type}'"
        )

    timer = Timer()
    timer.start()

    with timer.section('normalize'):
        design = _as_design(subjects, groups)

    notes = _unknown_labels(colors, design.labels, "colors")
    notes += _unknown_labels(metadata, design.labels, "metadata")
    colors = colors or {}
    metadata = metadata or {}

    results = []
    with timer.section('estimate'):
        for series in design:
            curve = kaplan_meier_curve(series.time, series.event)
            curve = greenwood_ci(curve, conf_level, conf_type)
            results.append(GroupResult(
                name=series.label,
                n=series.n,
                events=series.n_events,
                curve=curve,
                median_survival=median_survival_time(curve.time, curve.survival),
                color=colors.get(series.label),
                metadata=dict(metadata.get(series.label, {})),
            ))

    timer.stop()

    params = KMParams(
        groups=tuple(results),
        conf_level=float(conf_level),
        conf_type=conf_type,
        n_observations=design.n,
        n_events_total=design.n_events,
    )

    result = Result(
        params=params,
        info={
            "method": "Kaplan-Meier",
            "conf_level": float(conf_level),
            "conf_type": conf_type,
        },
        timing=timer.result(),
        backend_name="cpu_km",
        warnings=tuple(notes),
    )

    return KMSolution(_result=result)


def logrank(
    subjects: SubjectsLike,
    alpha: float = DEFAULT_ALPHA,
    *,
    groups: Sequence[Hashable] | None = None,
) -> LogRankSolution:
    """Log-rank test for equality of survival across groups.

    Matches R's survival::survdiff() with rho = 0.

    Parameters
    ----------
    subjects : iterable of Subject or mapping, or CohortDesign
        Subject records with ``time``, ``event`` and ``group``.
    alpha : float
        Significance threshold (default 0.05).
    groups : sequence or None
        Explicit group order; subjects in unlisted groups are dropped.

    Returns
    -------
    LogRankSolution

    Raises
    ------
    InsufficientGroupsError
        If fewer than two groups are present or a group has no events.
    """
    check_open_unit_interval(alpha, "alpha")

    timer = Timer()
    timer.start()

    with timer.section('normalize'):
        design = _as_design(subjects, groups)

    if design.n_groups < 2:
        raise InsufficientGroupsError(
            f"log-rank test needs at least 2 groups, got {design.n_groups}",
            n_groups=design.n_groups,
        )
    no_events = tuple(s.label for s in design if s.n_events == 0)
    if no_events:
        raise InsufficientGroupsError(
            f"every group needs at least one event; "
            f"no events in {list(no_events)!r}",
            n_groups=design.n_groups,
            groups_without_events=no_events,
        )

    with timer.section('test'):
        params = logrank_test(
            [s.time for s in design],
            [s.event for s in design],
            design.labels,
            alpha=float(alpha),
        )

    timer.stop()

    notes = ()
    if params.degenerate:
        notes = (
            "variance of O - E is zero or singular; "
            "chi-square reported as 0 with p-value 1",
        )

    result = Result(
        params=params,
        info={"method": "Log-rank test", "alpha": float(alpha)},
        timing=timer.result(),
        backend_name="cpu_logrank",
        warnings=notes,
    )

    return LogRankSolution(_result=result)


def at_risk_table(
    subjects: SubjectsLike,
    checkpoints=None,
    *,
    n_intervals: int = DEFAULT_N_INTERVALS,
    groups: Sequence[Hashable] | None = None,
) -> AtRiskSolution:
    """Number of subjects still at risk at each checkpoint, per group.

    Parameters
    ----------
    subjects : iterable of Subject or mapping, or CohortDesign
        Subject records with ``time``, ``event`` and ``group``.
    checkpoints : array-like or None
        Finite, non-negative, ascending checkpoint times. When omitted,
        ``n_intervals + 1`` evenly spaced times from 0 to the largest
        observed time are used.
    n_intervals : int
        Number of intervals for generated checkpoints (default 6).
    groups : sequence or None
        Explicit group order; subjects in unlisted groups are dropped.

    Returns
    -------
    AtRiskSolution
    """
    check_positive_int(n_intervals, "n_intervals")

    timer = Timer()
    timer.start()

    with timer.section('normalize'):
        design = _as_design(subjects, groups)

    notes = ()
    auto = checkpoints is None
    if auto:
        checkpoints = default_checkpoints(design.max_time, n_intervals)
    else:
        checkpoints = check_array(checkpoints, "checkpoints")
        if checkpoints.ndim == 0:
            checkpoints = checkpoints.reshape(1)
        check_1d(checkpoints, "checkpoints")
        check_finite(checkpoints, "checkpoints")
        check_non_negative(checkpoints, "checkpoints")
        check_non_decreasing(checkpoints, "checkpoints")
        if n_intervals != DEFAULT_N_INTERVALS:
            notes = ("n_intervals ignored because checkpoints were given",)
        checkpoints = checkpoints.copy()

    with timer.section('count'):
        counts = at_risk_counts([s.time for s in design], checkpoints)

    timer.stop()

    params = AtRiskParams(
        checkpoints=checkpoints,
        counts=counts,
        group_labels=design.labels,
        auto_checkpoints=auto,
    )

    result = Result(
        params=params,
        info={"method": "At-risk table", "n_intervals": n_intervals if auto else None},
        timing=timer.result(),
        backend_name="cpu_atrisk",
        warnings=notes,
    )

    return AtRiskSolution(_result=result)


def extract_median(curve: SurvivalCurve | GroupResult | Iterable[Any]) -> float | None:
    """Median survival time read off a Kaplan-Meier curve.

    The first point with survival <= 0.5; no interpolation.

    Parameters
    ----------
    curve : SurvivalCurve, GroupResult or iterable of points
        Points may be SurvivalPoint instances or mappings with ``time``
        and ``survival`` keys.

    Returns
    -------
    float or None
        None when the curve never drops to 0.5 ("not reached").
    """
    if isinstance(curve, GroupResult):
        curve = curve.curve
    time, survival = curve_arrays(curve)
    return median_survival_time(time, survival)


def cohort_summary(
    subjects: SubjectsLike,
    *,
    groups: Sequence[Hashable] | None = None,
) -> CohortSummary:
    """Headline statistics of a cohort, pooled across groups.

    Parameters
    ----------
    subjects : iterable of Subject or mapping, or CohortDesign
        Subject records with ``time``, ``event`` and ``group``.
    groups : sequence or None
        Restrict to (and order by) these groups.

    Returns
    -------
    CohortSummary
    """
    design = _as_design(subjects, groups)
    time, event = design.pooled()

    pooled_curve = kaplan_meier_curve(time, event)
    n_events = int(np.sum(event))

    return CohortSummary(
        n_subjects=design.n,
        n_events=n_events,
        n_censored=design.n - n_events,
        n_groups=design.n_groups,
        event_rate=n_events / design.n,
        median_follow_up=float(np.median(time)),
        median_survival=median_survival_time(pooled_curve.time, pooled_curve.survival),
    )

"""
Value types and parameter payloads for survival analysis results.

Each payload dataclass is frozen and carried inside a Result[P] envelope.
Arrays stored on payloads are marked read-only so results cannot be
modified after they are returned.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Hashable, Iterator, Mapping

import numpy as np
from numpy.typing import NDArray


def _freeze(array: NDArray | None) -> NDArray | None:
    if array is not None:
        array.flags.writeable = False
    return array


def _optional_float(value) -> float | None:
    return None if value is None else float(value)


@dataclass(frozen=True)
class Subject:
    """One observed unit (patient, sample).

    Parameters
    ----------
    time : float
        Time from origin to event or censoring. Must be finite and >= 0.
    event : bool
        True if the event was observed at ``time``; False if censored.
    group : hashable
        Label of the cohort the subject belongs to.
    """

    time: float
    event: bool
    group: Hashable


@dataclass(frozen=True)
class SurvivalPoint:
    """One step of a group's Kaplan-Meier curve."""

    time: float
    survival: float
    at_risk: int
    events: int
    censored: int
    std_error: float | None = None
    lower: float | None = None
    upper: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "time": self.time,
            "survival": self.survival,
            "at_risk": self.at_risk,
            "events": self.events,
            "censored": self.censored,
            "std_error": self.std_error,
            "lower": self.lower,
            "upper": self.upper,
        }


@dataclass(frozen=True)
class SurvivalCurve:
    """Kaplan-Meier step function for a single group.

    Row 0 is the origin ``(0, 1.0, n, 0, 0)``; every following row is one
    distinct observed time. The Greenwood fields (``std_error``, ``lower``,
    ``upper``) are None until the curve has been annotated.
    """

    time: NDArray                      # (m,) origin, then distinct times
    survival: NDArray                  # (m,) S(t) after the step at time[i]
    n_risk: NDArray                    # (m,) at risk just before time[i]
    n_events: NDArray                  # (m,) events at time[i]
    n_censored: NDArray                # (m,) censored at time[i]
    std_error: NDArray | None = None   # (m,) Greenwood standard error
    lower: NDArray | None = None       # (m,) lower confidence bound
    upper: NDArray | None = None       # (m,) upper confidence bound
    conf_level: float | None = None
    conf_type: str | None = None

    def __post_init__(self) -> None:
        for name in ("time", "survival", "n_risk", "n_events", "n_censored",
                     "std_error", "lower", "upper"):
            _freeze(getattr(self, name))

    @property
    def has_confidence_bounds(self) -> bool:
        return self.lower is not None and self.upper is not None

    @property
    def points(self) -> tuple[SurvivalPoint, ...]:
        """The curve as a tuple of SurvivalPoint records."""
        return tuple(self[i] for i in range(len(self)))

    def __len__(self) -> int:
        return len(self.time)

    def __iter__(self) -> Iterator[SurvivalPoint]:
        for i in range(len(self)):
            yield self[i]

    def __getitem__(self, i: int) -> SurvivalPoint:
        return SurvivalPoint(
            time=float(self.time[i]),
            survival=float(self.survival[i]),
            at_risk=int(self.n_risk[i]),
            events=int(self.n_events[i]),
            censored=int(self.n_censored[i]),
            std_error=_optional_float(None if self.std_error is None else self.std_error[i]),
            lower=_optional_float(None if self.lower is None else self.lower[i]),
            upper=_optional_float(None if self.upper is None else self.upper[i]),
        )


@dataclass(frozen=True)
class GroupResult:
    """Kaplan-Meier result for one cohort.

    ``median_survival`` is None when the curve never drops to 0.5
    ("not reached"). ``color`` and ``metadata`` are passed through from
    the caller untouched.
    """

    name: Hashable
    n: int
    events: int
    curve: SurvivalCurve
    median_survival: float | None
    color: str | None = None
    metadata: Mapping[str, Any] = field(default_factory=dict)

    @property
    def censored(self) -> int:
        return self.n - self.events

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "n": self.n,
            "events": self.events,
            "median_survival": self.median_survival,
            "color": self.color,
            "metadata": dict(self.metadata),
            "curve": [p.to_dict() for p in self.curve],
        }


@dataclass(frozen=True)
class KMParams:
    """Kaplan-Meier curves for every group of a cohort."""

    groups: tuple[GroupResult, ...]
    conf_level: float
    conf_type: str
    n_observations: int
    n_events_total: int


@dataclass(frozen=True)
class LogRankParams:
    """Log-rank test parameters."""

    chi_square: float            # test statistic, >= 0
    df: int                      # degrees of freedom (n_groups - 1)
    p_value: float
    alpha: float
    significant: bool
    n_groups: int
    observed: NDArray            # (n_groups,) observed events per group
    expected: NDArray            # (n_groups,) expected events per group
    covariance: NDArray          # (n_groups, n_groups) hypergeometric covariance of O - E
    n_per_group: NDArray         # (n_groups,) subjects per group
    group_labels: tuple[Hashable, ...]
    n_event_times: int           # number of pooled distinct event times
    degenerate: bool             # variance block was zero or singular

    def __post_init__(self) -> None:
        for name in ("observed", "expected", "covariance", "n_per_group"):
            _freeze(getattr(self, name))

    @property
    def variance(self) -> NDArray:
        """(n_groups,) per-group variance of O - E (diagonal of covariance)."""
        return np.diag(self.covariance)


@dataclass(frozen=True)
class AtRiskRow:
    """Number of subjects still under observation at one checkpoint."""

    time: float
    counts: Mapping[Hashable, int]

    def __getitem__(self, group: Hashable) -> int:
        return self.counts[group]

    def to_dict(self) -> dict[str, Any]:
        return {"time": self.time, "at_risk": dict(self.counts)}


@dataclass(frozen=True)
class AtRiskParams:
    """At-risk table: one row per checkpoint, one column per group."""

    checkpoints: NDArray         # (c,) checkpoint times
    counts: NDArray              # (c, n_groups) subjects with time >= checkpoint
    group_labels: tuple[Hashable, ...]
    auto_checkpoints: bool       # True if checkpoints were generated

    def __post_init__(self) -> None:
        _freeze(self.checkpoints)
        _freeze(self.counts)

    @property
    def rows(self) -> tuple[AtRiskRow, ...]:
        return tuple(
            AtRiskRow(
                time=float(t),
                counts={g: int(self.counts[i, k])
                        for k, g in enumerate(self.group_labels)},
            )
            for i, t in enumerate(self.checkpoints)
        )


@dataclass(frozen=True)
class CohortSummary:
    """Headline statistics for a whole cohort, pooled across groups."""

    n_subjects: int
    n_events: int
    n_censored: int
    n_groups: int
    event_rate: float                  # events / subjects
    median_follow_up: float            # median of observed times
    median_survival: float | None      # pooled KM median, None if not reached

    def to_dict(self) -> dict[str, Any]:
        return {
            "n_subjects": self.n_subjects,
            "n_events": self.n_events,
            "n_censored": self.n_censored,
            "n_groups": self.n_groups,
            "event_rate": self.event_rate,
            "median_follow_up": self.median_follow_up,
            "median_survival": self.median_survival,
        }

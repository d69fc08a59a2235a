"""
Synthetic clinical cohorts for examples, demos and statistical checks.

Event times are exponential with the group's median survival
(rate = ln 2 / median). Each subject is censored administratively at
``max_follow_up``; a fraction ``dropout_rate`` instead drops out at a
uniform time in [0, max_follow_up). Times are rounded to one decimal.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

import numpy as np

from cohortsurv.core.exceptions import ValidationError
from cohortsurv.core.validation import check_positive_int
from cohortsurv.survival._common import Subject


@dataclass(frozen=True)
class GroupProfile:
    """One synthetic group: its median survival drives sampling.

    ``hazard_ratio`` and ``color`` are descriptive preset metadata for
    legends and reports; ``generate_cohort`` does not read them.
    """

    median_survival: float       # months
    hazard_ratio: float          # nominal, relative to the reference group
    color: str


TREATMENT_GROUPS = {
    "Control": GroupProfile(median_survival=24.0, hazard_ratio=1.0, color="#4a90d9"),
    "Treatment A": GroupProfile(median_survival=36.0, hazard_ratio=0.65, color="#e74c3c"),
    "Treatment B": GroupProfile(median_survival=30.0, hazard_ratio=0.78, color="#2ecc71"),
}

MUTATION_GROUPS = {
    "TP53 Wild-type": GroupProfile(median_survival=32.0, hazard_ratio=1.0, color="#3498db"),
    "TP53 Mutant": GroupProfile(median_survival=18.0, hazard_ratio=1.8, color="#e67e22"),
}

EXPRESSION_GROUPS = {
    "Low Expression": GroupProfile(median_survival=20.0, hazard_ratio=1.5, color="#9b59b6"),
    "High Expression": GroupProfile(median_survival=38.0, hazard_ratio=0.55, color="#1abc9c"),
}


def group_colors(groups: Mapping[str, GroupProfile]) -> dict[str, str]:
    """Map each group name to its display color."""
    return {name: profile.color for name, profile in groups.items()}


def generate_cohort(
    n: int = 100,
    groups: Mapping[str, GroupProfile] = TREATMENT_GROUPS,
    *,
    max_follow_up: float = 60.0,
    dropout_rate: float = 0.15,
    rng: np.random.Generator | int | None = None,
) -> list[Subject]:
    """Generate a synthetic multi-group survival cohort.

    Subjects are split evenly across groups; the last group takes the
    remainder. The returned list is sorted by time.

    Parameters
    ----------
    n : int
        Total number of subjects (at least one per group).
    groups : mapping
        Group name -> GroupProfile.
    max_follow_up : float
        Administrative censoring time.
    dropout_rate : float
        Probability that a subject drops out early, in [0, 1].
    rng : Generator, int or None
        Random generator or seed.

    Returns
    -------
    list of Subject

    Examples
    --------
    >>> cohort = generate_cohort(200, MUTATION_GROUPS, rng=7)
    >>> solution = kaplan_meier(cohort, colors=group_colors(MUTATION_GROUPS))
    """
    check_positive_int(n, "n")
    if len(groups) == 0:
        raise ValidationError("groups must define at least one group")
    if n < len(groups):
        raise ValidationError(
            f"n must be at least the number of groups ({len(groups)}), got {n}"
        )
    if not (max_follow_up > 0 and np.isfinite(max_follow_up)):
        raise ValidationError(f"max_follow_up must be positive and finite, got {max_follow_up}")
    if not 0.0 <= dropout_rate <= 1.0:
        raise ValidationError(f"dropout_rate must be in [0, 1], got {dropout_rate}")

    rng = np.random.default_rng(rng)
    names = list(groups)
    per_group = n // len(names)

    subjects = []
    for i, name in enumerate(names):
        size = n - per_group * (len(names) - 1) if i == len(names) - 1 else per_group
        profile = groups[name]

        true_time = rng.exponential(profile.median_survival / np.log(2.0), size=size)
        drops_out = rng.random(size) < dropout_rate
        dropout_time = rng.random(size) * max_follow_up
        censor_time = np.where(drops_out, dropout_time, max_follow_up)

        event = true_time <= censor_time
        time = np.round(np.where(event, true_time, censor_time), 1)

        subjects.extend(
            Subject(time=float(t), event=bool(e), group=name)
            for t, e in zip(time, event)
        )

    subjects.sort(key=lambda s: s.time)
    return subjects

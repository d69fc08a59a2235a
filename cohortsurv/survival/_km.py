"""
Kaplan-Meier product-limit estimator.

- Product-limit survival estimate: S(t) = prod(1 - d_j / n_j)
- One multiplicative step per distinct time, so tied events at the same
  time form a single step
- Censor-only times still produce a point (for censoring marks) with
  unchanged survival
- The at-risk count is reported before the step and reduced by
  d_j + c_j afterwards

References:
    Kaplan, E. L., & Meier, P. (1958). Nonparametric estimation from
        incomplete observations. JASA, 53(282), 457-481.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from cohortsurv.core.exceptions import InconsistentAtRiskError
from cohortsurv.survival._common import SurvivalCurve


def kaplan_meier_curve(
    time: NDArray,
    event: NDArray,
    n_at_risk: int | None = None,
) -> SurvivalCurve:
    """Compute the Kaplan-Meier step function for one group.

    Parameters
    ----------
    time : NDArray
        (n,) time to event or censoring.
    event : NDArray
        (n,) event indicator (1=event, 0=censored).
    n_at_risk : int or None
        At-risk count at the origin. Defaults to ``len(time)``; a caller
        walking a partial series may pass the full group size.

    Returns
    -------
    SurvivalCurve
        Origin point followed by one point per distinct time.

    Raises
    ------
    InconsistentAtRiskError
        If more subjects leave the risk set than were at risk.
    """
    n = len(time) if n_at_risk is None else int(n_at_risk)

    # Distinct times with per-time event and censoring counts
    unique_times, inverse, counts = np.unique(
        time, return_inverse=True, return_counts=True,
    )
    m = len(unique_times)
    d = np.bincount(inverse.ravel(), weights=event, minlength=m)
    c = counts - d

    # n_j: at risk just before t_j = n minus everyone removed at earlier times
    removed_before = np.concatenate(([0], np.cumsum(counts)[:-1])) if m else np.zeros(0)
    n_risk = n - removed_before

    remaining = n_risk - counts
    if np.any(remaining < 0):
        j = int(np.flatnonzero(remaining < 0)[0])
        raise InconsistentAtRiskError(
            f"at-risk count would become {int(remaining[j])} at time "
            f"{unique_times[j]} ({int(n_risk[j])} at risk, "
            f"{int(counts[j])} leaving)",
            time=float(unique_times[j]),
            at_risk=int(n_risk[j]),
            removed=int(counts[j]),
        )

    # n_j >= counts_j >= 1 here, so the ratio is always defined
    survival = np.cumprod(1.0 - d / n_risk)

    return SurvivalCurve(
        time=np.concatenate(([0.0], unique_times)).astype(np.float64),
        survival=np.concatenate(([1.0], survival)).astype(np.float64),
        n_risk=np.concatenate(([n], n_risk)).astype(np.int64),
        n_events=np.concatenate(([0], d)).astype(np.int64),
        n_censored=np.concatenate(([0], c)).astype(np.int64),
    )

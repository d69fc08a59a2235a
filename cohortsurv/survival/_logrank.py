"""
Log-rank test for comparing survival curves across groups.

Algorithm:
    1. Pool the distinct event times of all groups (censor-only times
       only shrink the risk sets; they add no observed/expected term)
    2. At each pooled event time t_j:
       - n_kj = number at risk in group k (time >= t_j)
       - d_kj = observed events in group k at t_j
       - N_j = total at risk, D_j = total events
       - Expected events in group k: E_kj = n_kj * D_j / N_j
       - Hypergeometric covariance:
         V_kl += D_j (N_j - D_j) / (N_j^2 (N_j - 1)) * n_kj (delta_kl N_j - n_lj)
         (skipped when N_j == 1)
    3. Statistic: (O - E)^T V^-1 (O - E) over the first k-1 groups,
       which is (O_1 - E_1)^2 / V_11 for two groups
    4. p-value: upper tail of chi-square with k-1 degrees of freedom

References:
    Mantel, N. (1966). Evaluation of survival data and two new rank order
        statistics arising in its consideration. Cancer Chemotherapy
        Reports, 50(3), 163-170.
    Peto, R. & Peto, J. (1972). Asymptotically efficient rank invariant
        test procedures. JRSS A, 135(2), 185-207.
"""

from __future__ import annotations

from typing import Hashable, Sequence

import numpy as np
from numpy.typing import NDArray
from scipy import stats

from cohortsurv.survival._common import LogRankParams


def risk_and_event_counts(
    sorted_times: Sequence[NDArray],
    sorted_events: Sequence[NDArray],
    event_times: NDArray,
) -> tuple[NDArray, NDArray]:
    """At-risk and event counts per pooled event time and group.

    Parameters
    ----------
    sorted_times : sequence of NDArray
        One ascending time array per group.
    sorted_events : sequence of NDArray
        Matching event indicators.
    event_times : NDArray
        (m,) pooled distinct event times, ascending.

    Returns
    -------
    (n_kg, d_kg) : two (m, n_groups) float arrays
    """
    m = len(event_times)
    n_groups = len(sorted_times)
    n_kg = np.zeros((m, n_groups), dtype=np.float64)
    d_kg = np.zeros((m, n_groups), dtype=np.float64)

    for k, (times, events) in enumerate(zip(sorted_times, sorted_events)):
        n_kg[:, k] = len(times) - np.searchsorted(times, event_times, side="left")

        own_event_times = times[events == 1]
        left = np.searchsorted(own_event_times, event_times, side="left")
        right = np.searchsorted(own_event_times, event_times, side="right")
        d_kg[:, k] = right - left

    return n_kg, d_kg


def logrank_test(
    sorted_times: Sequence[NDArray],
    sorted_events: Sequence[NDArray],
    group_labels: Sequence[Hashable],
    alpha: float,
) -> LogRankParams:
    """Compute the log-rank test.

    Callers guarantee at least two groups and at least one event per group.

    Parameters
    ----------
    sorted_times : sequence of NDArray
        One ascending time array per group.
    sorted_events : sequence of NDArray
        Matching event indicators (1=event, 0=censored).
    group_labels : sequence
        Group labels, same order as the arrays.
    alpha : float
        Significance threshold.

    Returns
    -------
    LogRankParams
    """
    n_groups = len(sorted_times)

    pooled_event_times = np.unique(np.concatenate([
        times[events == 1] for times, events in zip(sorted_times, sorted_events)
    ]))
    m = len(pooled_event_times)

    n_kg, d_kg = risk_and_event_counts(sorted_times, sorted_events, pooled_event_times)

    D_j = d_kg.sum(axis=1)     # (m,) total events at each time
    N_j = n_kg.sum(axis=1)     # (m,) total at risk at each time

    # --- Observed and expected events per group ---
    # N_j >= D_j >= 1 at every pooled event time
    observed = d_kg.sum(axis=0)
    expected = (n_kg * (D_j / N_j)[:, None]).sum(axis=0)

    # --- Variance-covariance matrix of O - E ---
    multi = N_j > 1
    factor = np.divide(
        D_j * (N_j - D_j),
        N_j ** 2 * (N_j - 1),
        out=np.zeros(m, dtype=np.float64),
        where=multi,
    )
    V = np.diag((factor[:, None] * n_kg * N_j[:, None]).sum(axis=0))
    V -= np.einsum("j,jk,jl->kl", factor, n_kg, n_kg)

    # --- Chi-squared statistic ---
    # Use the first (n_groups-1) groups; the last is linearly dependent
    # since sum(O_k - E_k) = 0
    df = n_groups - 1
    oe_diff = (observed - expected)[:df]
    degenerate = False

    if df == 1:
        if V[0, 0] > 0:
            statistic = float(oe_diff[0] ** 2 / V[0, 0])
        else:
            statistic = 0.0
            degenerate = True
    else:
        V_sub = V[:df, :df]
        try:
            statistic = float(oe_diff @ np.linalg.solve(V_sub, oe_diff))
        except np.linalg.LinAlgError:
            statistic = 0.0
            degenerate = True

    if not np.isfinite(statistic):
        statistic = 0.0
        degenerate = True
    # rounding in the quadratic form can leave a tiny negative value
    statistic = max(statistic, 0.0)

    p_value = float(np.clip(stats.chi2.sf(statistic, df), 0.0, 1.0))

    return LogRankParams(
        chi_square=statistic,
        df=df,
        p_value=p_value,
        alpha=alpha,
        significant=bool(p_value < alpha),
        n_groups=n_groups,
        observed=observed,
        expected=expected,
        covariance=V,
        n_per_group=np.array([len(t) for t in sorted_times], dtype=np.int64),
        group_labels=tuple(group_labels),
        n_event_times=m,
        degenerate=degenerate,
    )

"""
Greenwood variance and pointwise confidence bounds for a Kaplan-Meier curve.

- Greenwood sum: G(t) = sum_{t_j <= t} d_j / (n_j * (n_j - d_j))
- Variance: Var(S(t)) = S(t)^2 * G(t)
- Bounds via log-minus-log (default), log, or plain transformation
- z = 1.96 at the default 95% level, the normal quantile otherwise

Every division and logarithm is guarded: a point where n_j == d_j
contributes nothing to G, and when S(t) is exactly 0 or 1 both bounds
equal S(t).
"""

from __future__ import annotations

import dataclasses

import numpy as np
from numpy.typing import NDArray
from scipy import stats

from cohortsurv.core.defaults import DEFAULT_CONF_LEVEL, DEFAULT_Z
from cohortsurv.survival._common import SurvivalCurve


def greenwood_terms(n_risk: NDArray, n_events: NDArray) -> NDArray:
    """Per-point Greenwood contributions d_j / (n_j * (n_j - d_j)).

    Points with no events, or where every subject at risk has the event,
    contribute 0.
    """
    n_risk = np.asarray(n_risk, dtype=np.float64)
    n_events = np.asarray(n_events, dtype=np.float64)
    denom = n_risk * (n_risk - n_events)
    valid = (n_events > 0) & (n_risk > n_events)
    return np.divide(n_events, denom, out=np.zeros_like(n_events), where=valid)


def confidence_bounds(
    survival: NDArray,
    greenwood_sum: NDArray,
    z: float,
    conf_type: str,
) -> tuple[NDArray, NDArray]:
    """Compute pointwise bounds for S(t).

    Parameters
    ----------
    survival : S(t) values
    greenwood_sum : cumulative Greenwood sum G(t)
    z : normal quantile (e.g. 1.96 for 95%)
    conf_type : "log-log", "log", or "plain"

    Returns
    -------
    (lower, upper) clipped to [0, 1], with lower <= S(t) <= upper
    """
    root_g = np.sqrt(greenwood_sum)
    interior = (survival > 0.0) & (survival < 1.0)

    lower = survival.copy()
    upper = survival.copy()

    if conf_type == "log-log":
        # theta = log(-log S); se(theta) = sqrt(G) / |log S|
        # back-transform: S ** exp(+/- z * se(theta))
        log_s = np.log(survival, out=np.zeros_like(survival), where=interior)
        sigma = np.divide(
            root_g, np.abs(log_s), out=np.zeros_like(survival), where=interior,
        )
        s = survival[interior]
        lower[interior] = s ** np.exp(z * sigma[interior])
        upper[interior] = s ** np.exp(-z * sigma[interior])

    elif conf_type == "log":
        # se(log S) = se(S) / S = sqrt(G)
        s = survival[interior]
        lower[interior] = s * np.exp(-z * root_g[interior])
        upper[interior] = s * np.exp(z * root_g[interior])

    elif conf_type == "plain":
        se = survival * root_g
        lower[interior] = survival[interior] - z * se[interior]
        upper[interior] = survival[interior] + z * se[interior]

    else:
        raise ValueError(
            f"Unknown conf_type '{conf_type}'. "
            f"Choose from 'log-log', 'log', 'plain'."
        )

    lower = np.minimum(np.clip(lower, 0.0, 1.0), survival)
    upper = np.maximum(np.clip(upper, 0.0, 1.0), survival)
    return lower, upper


def normal_quantile(conf_level: float) -> float:
    """Two-sided z for a confidence level; exactly 1.96 at 95%."""
    if conf_level == DEFAULT_CONF_LEVEL:
        return DEFAULT_Z
    return float(stats.norm.ppf((1.0 + conf_level) / 2.0))


def greenwood_ci(
    curve: SurvivalCurve,
    conf_level: float,
    conf_type: str,
) -> SurvivalCurve:
    """Annotate a curve with Greenwood standard errors and confidence bounds.

    Parameters
    ----------
    curve : SurvivalCurve
        Output of ``kaplan_meier_curve``.
    conf_level : float
        Confidence level (e.g. 0.95).
    conf_type : str
        CI transformation: "log-log", "log", or "plain".

    Returns
    -------
    SurvivalCurve
        A new curve with ``std_error``, ``lower`` and ``upper`` filled in.
    """
    greenwood_sum = np.cumsum(greenwood_terms(curve.n_risk, curve.n_events))
    survival = np.asarray(curve.survival, dtype=np.float64)
    std_error = survival * np.sqrt(greenwood_sum)

    z = normal_quantile(conf_level)
    lower, upper = confidence_bounds(survival, greenwood_sum, z, conf_type)

    return dataclasses.replace(
        curve,
        std_error=std_error,
        lower=lower,
        upper=upper,
        conf_level=conf_level,
        conf_type=conf_type,
    )

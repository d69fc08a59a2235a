"""
Number-at-risk table for a set of checkpoint times.

At checkpoint c a subject is counted if its observed time is >= c,
whatever its eventual status. At every curve time this equals the
``n_risk`` reported by the Kaplan-Meier estimator.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
from numpy.typing import NDArray


def default_checkpoints(max_time: float, n_intervals: int) -> NDArray:
    """Evenly spaced checkpoints from 0 to ``max_time`` inclusive.

    Returns ``n_intervals + 1`` values, or the single checkpoint 0 when
    every observed time is 0.
    """
    if max_time <= 0.0:
        return np.zeros(1, dtype=np.float64)
    return np.linspace(0.0, max_time, n_intervals + 1)


def at_risk_counts(
    sorted_times: Sequence[NDArray],
    checkpoints: NDArray,
) -> NDArray:
    """Count subjects with time >= checkpoint, per group.

    Parameters
    ----------
    sorted_times : sequence of NDArray
        One ascending time array per group.
    checkpoints : NDArray
        (c,) checkpoint times.

    Returns
    -------
    NDArray
        (c, n_groups) integer counts.
    """
    counts = np.zeros((len(checkpoints), len(sorted_times)), dtype=np.int64)
    for k, times in enumerate(sorted_times):
        # searchsorted(left) = number of subjects with time < checkpoint
        counts[:, k] = len(times) - np.searchsorted(times, checkpoints, side="left")
    return counts

"""
Median survival read off a Kaplan-Meier step function.

The median is the first curve time at which S(t) <= 0.5. Because the
curve is a step function, the value is read at the step; there is no
interpolation between points.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

import numpy as np
from numpy.typing import NDArray

from cohortsurv.core.defaults import MEDIAN_THRESHOLD
from cohortsurv.survival._common import SurvivalCurve


def median_survival_time(
    time: NDArray,
    survival: NDArray,
    threshold: float = MEDIAN_THRESHOLD,
) -> float | None:
    """First time with survival <= threshold, or None if never reached."""
    reached = np.flatnonzero(np.asarray(survival) <= threshold)
    if len(reached) == 0:
        return None
    return float(np.asarray(time)[reached[0]])


def curve_arrays(curve: SurvivalCurve | Iterable[Any]) -> tuple[NDArray, NDArray]:
    """(time, survival) arrays from a SurvivalCurve or an iterable of points.

    Points may be SurvivalPoint instances or mappings with ``time`` and
    ``survival`` keys, in curve order.
    """
    if isinstance(curve, SurvivalCurve):
        return curve.time, curve.survival

    times = []
    survivals = []
    for point in curve:
        if isinstance(point, Mapping):
            times.append(point["time"])
            survivals.append(point["survival"])
        else:
            times.append(point.time)
            survivals.append(point.survival)
    return (
        np.asarray(times, dtype=np.float64),
        np.asarray(survivals, dtype=np.float64),
    )

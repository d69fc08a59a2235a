"""
Input validation utilities for cohortsurv.

These validators follow the "fail fast, fail loud" principle. They raise
immediately with clear error messages rather than silently correcting
or making assumptions about caller intent.

Design principles:
    - No silent type coercion (except np.asarray on array-likes)
    - Clear, actionable error messages with actual values
    - Each function validates ONE thing
    - Parameter names included in all error messages
"""

import numpy as np
from numpy.typing import ArrayLike, NDArray
from typing import Any

from cohortsurv.core.exceptions import InvalidInputError, ValidationError


def check_array(
    array: ArrayLike,
    name: str,
) -> NDArray[np.floating[Any]]:
    """
    Validate and convert input to a float64 numpy array.

    Accepts any array-like and converts to numpy array. Rejects inputs
    that result in object dtype (indicating mixed types or missing values)
    and non-numeric dtypes.

    Args:
        array: Input to validate
        name: Parameter name for error messages

    Returns:
        numpy.ndarray with float64 dtype

    Raises:
        InvalidInputError: If input cannot be converted to a numeric array
    """
    try:
        result = np.asarray(array)
    except (ValueError, TypeError) as e:
        raise InvalidInputError(
            f"{name}: cannot convert to array: {e}", field=name
        ) from e

    if result.dtype == object:
        raise InvalidInputError(
            f"{name}: converted to object dtype, indicating mixed types or missing values",
            field=name,
        )

    if not (np.issubdtype(result.dtype, np.number) or result.dtype == np.bool_):
        raise InvalidInputError(
            f"{name}: non-numeric dtype {result.dtype}, expected numeric data",
            field=name,
        )

    return result.astype(np.float64)


def check_1d(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify array is 1-dimensional.

    Raises:
        InvalidInputError: If array is not 1D
    """
    if array.ndim != 1:
        raise InvalidInputError(
            f"{name}: expected 1D array, got {array.ndim}D with shape {array.shape}",
            field=name,
        )


def check_finite(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify array contains no NaN or Inf values.

    Args:
        array: Array to check
        name: Parameter name for error messages

    Raises:
        InvalidInputError: If array contains non-finite values
    """
    finite = np.isfinite(array)
    if not np.all(finite):
        n_nan = int(np.sum(np.isnan(array)))
        n_inf = int(np.sum(np.isinf(array)))
        first = int(np.flatnonzero(~finite)[0])
        raise InvalidInputError(
            f"{name}: contains non-finite values ({n_nan} NaN, {n_inf} Inf)",
            index=first,
            field=name,
            value=float(array[first]),
        )


def check_non_negative(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify every element is >= 0.

    Raises:
        InvalidInputError: If any element is negative
    """
    negative = array < 0
    if np.any(negative):
        first = int(np.flatnonzero(negative)[0])
        raise InvalidInputError(
            f"{name}: must be non-negative, found {array[first]} at index {first}",
            index=first,
            field=name,
            value=float(array[first]),
        )


def check_binary(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify array contains only 0 and 1.

    Raises:
        InvalidInputError: If any element is not 0 or 1
    """
    bad = ~np.isin(array, (0.0, 1.0))
    if np.any(bad):
        first = int(np.flatnonzero(bad)[0])
        raise InvalidInputError(
            f"{name}: must contain only 0 and 1, got {array[first]} at index {first}",
            index=first,
            field=name,
            value=float(array[first]),
        )


def check_consistent_length(
    *arrays: NDArray[Any],
    names: tuple[str, ...]
) -> None:
    """
    Verify all arrays have the same length (first dimension).

    Raises:
        ValueError: If number of names doesn't match number of arrays
        InvalidInputError: If arrays have inconsistent lengths
    """
    if len(arrays) != len(names):
        raise ValueError(
            f"Number of arrays ({len(arrays)}) must match number of names ({len(names)})"
        )

    if len(arrays) < 2:
        return

    lengths = [arr.shape[0] for arr in arrays]
    if len(set(lengths)) > 1:
        details = ", ".join(f"{name}={length}" for name, length in zip(names, lengths))
        raise InvalidInputError(f"Inconsistent lengths: {details}")


def check_non_decreasing(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify a 1D array is sorted ascending (ties allowed).

    Raises:
        InvalidInputError: If a later element is smaller than an earlier one
    """
    drops = np.flatnonzero(np.diff(array) < 0)
    if len(drops) > 0:
        i = int(drops[0]) + 1
        raise InvalidInputError(
            f"{name}: must be in ascending order, "
            f"{array[i]} at index {i} follows {array[i - 1]}",
            index=i,
            field=name,
            value=float(array[i]),
        )


def check_open_unit_interval(value: float, name: str) -> None:
    """
    Verify a scalar option lies strictly between 0 and 1.

    Used for confidence levels and significance thresholds.

    Raises:
        ValidationError: If value is outside (0, 1) or not a real number
    """
    if isinstance(value, bool) or not isinstance(value, (int, float, np.floating)):
        raise ValidationError(f"{name} must be a real number, got {value!r}")
    if not (0.0 < float(value) < 1.0):
        raise ValidationError(f"{name} must be in (0, 1), got {value}")


def check_positive_int(value: int, name: str) -> None:
    """
    Verify a scalar option is an integer >= 1.

    Raises:
        ValidationError: If value is not a positive integer
    """
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or value < 1:
        raise ValidationError(f"{name} must be a positive integer, got {value!r}")

"""Differencing transforms: integer differencing, its inverse, and the
fractional (long-memory) generalization.

References:
    - Box & Jenkins (1976): Time Series Analysis: Forecasting and Control
    - Hosking (1981): "Fractional differencing", Biometrika 68(1)
"""

from __future__ import annotations

import math
from typing import Tuple

import numpy as np

from .exceptions import InvalidOrderError
from .stats import as_series, check_order


def difference(x: np.ndarray, d: int = 1) -> np.ndarray:
    """Apply first-order backward differencing d times.

    Each pass computes y_i = x_i - x_{i-1} and shortens the series by one,
    so the result has length n - d.

    Args:
        x: 1D array of time series values, shape (n,).
        d: Number of differencing passes. Must satisfy 0 <= d < n.

    Returns:
        Differenced series of shape (n - d,).

    Raises:
        InvalidOrderError: If d is negative, not an integer, or >= n.

    Example:
        >>> difference(np.array([1.0, 2.0, 4.0, 7.0]), d=1)
        array([1., 2., 3.])
        >>> difference(np.array([1.0, 2.0, 4.0, 7.0]), d=2)
        array([1., 1.])
    """
    x = as_series(x)
    d = check_order(d, len(x), name="d")
    result = x.copy()
    for _ in range(d):
        result = result[1:] - result[:-1]
    return result


def inverse_difference(x: np.ndarray, d: int = 1) -> np.ndarray:
    """Undo d differencing passes up to the lost leading values.

    Prepends d zeros and takes the cumulative sum d times. The result is on
    the scale of the original series, but the d leading values dropped by
    differencing cannot be recovered, so the reconstruction differs from the
    original by a polynomial of degree d-1.

    Args:
        x: Differenced series, shape (m,).
        d: Number of passes to invert. Must be >= 0.

    Returns:
        Integrated series of shape (m + d,).

    Example:
        >>> inverse_difference(np.array([1.0, 2.0, 3.0]), d=1)
        array([0., 1., 3., 6.])
    """
    x = as_series(x)
    if isinstance(d, bool) or not isinstance(d, (int, np.integer)) or d < 0:
        raise InvalidOrderError(f"d must be a non-negative integer, got {d!r}")
    result = np.concatenate([np.zeros(int(d)), x])
    for _ in range(int(d)):
        result = np.cumsum(result)
    return result


def split_order(d: float) -> Tuple[int, float]:
    """Split a real integration order into integer and fractional parts.

    Returns:
        Tuple (k, f) with k = floor(d) and 0 <= f < 1.

    Example:
        >>> split_order(1.4)
        (1, 0.3999999999999999)
    """
    d = float(d)
    if not math.isfinite(d) or d < 0.0:
        raise InvalidOrderError(f"d must be a finite non-negative number, got {d}")
    k = math.floor(d)
    return k, d - k


def fractional_weights(d: float, n: int) -> np.ndarray:
    """Binomial-series weights of (1 - B)^d truncated to n terms.

    w_0 = 1 and w_k = w_{k-1} * (k - 1 - d) / k.

    Example:
        >>> fractional_weights(0.5, 4)
        array([ 1.    , -0.5   , -0.125 , -0.0625])
    """
    if n < 1:
        raise InvalidOrderError(f"n must be >= 1, got {n}")
    weights = np.empty(n)
    weights[0] = 1.0
    for k in range(1, n):
        weights[k] = weights[k - 1] * (k - 1 - d) / k
    return weights


def _check_fraction(d: float) -> float:
    d = float(d)
    if not (0.0 <= d < 1.0):
        raise InvalidOrderError(f"fractional order must lie in [0, 1), got {d}")
    return d


def fractional_difference(x: np.ndarray, d: float) -> np.ndarray:
    """Apply the fractional difference operator (1 - B)^d, 0 <= d < 1.

    y_t = Σ_{k=0}^{t} w_k x_{t-k}, with the weights truncated at the series
    length. The output has the same length as the input.
    """
    x = as_series(x)
    d = _check_fraction(d)
    if d == 0.0:
        return x.copy()
    weights = fractional_weights(d, len(x))
    return np.convolve(x, weights)[: len(x)]


def fractional_integrate(x: np.ndarray, d: float) -> np.ndarray:
    """Apply the fractional integration operator (1 - B)^(-d), 0 <= d < 1.

    This is the truncated inverse of :func:`fractional_difference`.
    """
    x = as_series(x)
    d = _check_fraction(d)
    if d == 0.0:
        return x.copy()
    weights = fractional_weights(-d, len(x))
    return np.convolve(x, weights)[: len(x)]


__all__ = [
    "difference",
    "inverse_difference",
    "split_order",
    "fractional_weights",
    "fractional_difference",
    "fractional_integrate",
]

"""Numeric building blocks shared by the estimators.

This module holds the input validation helpers, the sample moments, the lag
matrix used by the regression estimators, and the autocorrelation engine:
sample autocovariance/autocorrelation and the partial autocorrelation obtained
from the Levinson-Durbin recursion.

References:
    - Box & Jenkins (1976): Time Series Analysis: Forecasting and Control
    - Brockwell & Davis (1991): Time Series: Theory and Methods, §5.2
"""

from __future__ import annotations

from typing import Optional, Tuple

import numpy as np

from .exceptions import InsufficientDataError, InvalidOrderError, SingularMatrixError


def as_series(x: np.ndarray, name: str = "x") -> np.ndarray:
    """Validate and convert input into a 1D float array.

    Raises:
        InsufficientDataError: If the input is not 1D, is empty, or contains
            NaN or infinite values.
    """
    arr = np.asarray(x, dtype=float)
    if arr.ndim != 1:
        raise InsufficientDataError(f"{name} must be 1D array, got shape {arr.shape}")
    if arr.size == 0:
        raise InsufficientDataError(f"{name} must be non-empty")
    if not np.all(np.isfinite(arr)):
        raise InsufficientDataError(f"{name} must contain only finite values")
    return arr


def check_order(order: int, n: int, name: str = "order", minimum: int = 0) -> int:
    """Validate an integer model order against a series length.

    Raises:
        InvalidOrderError: If the order is not an integer, is below
            ``minimum``, or is not smaller than ``n``.
    """
    if isinstance(order, bool) or not isinstance(order, (int, np.integer)):
        raise InvalidOrderError(f"{name} must be an integer, got {order!r}")
    order = int(order)
    if order < minimum:
        raise InvalidOrderError(f"{name} must be >= {minimum}, got {order}")
    if order >= n:
        raise InvalidOrderError(
            f"{name} must be smaller than the series length {n}, got {order}"
        )
    return order


def mean(x: np.ndarray) -> float:
    """Arithmetic mean of a series."""
    x = as_series(x)
    return float(np.sum(x) / x.size)


def variance(x: np.ndarray, ddof: int = 0) -> float:
    """Sample variance with divisor ``N - ddof``."""
    x = as_series(x)
    n = x.size
    if n - ddof <= 0:
        raise InsufficientDataError(
            f"Need more than ddof={ddof} observations, got {n}"
        )
    centered = x - mean(x)
    return float(np.dot(centered, centered) / (n - ddof))


def lag_matrix(x: np.ndarray, p: int) -> np.ndarray:
    """Build design matrix with lags 1 through p.

    Args:
        x: 1D time series array, shape (n,).
        p: Number of lags to include. Must be >= 1.

    Returns:
        Design matrix of shape (n-p, p) where row i contains
        x[i+p-1], x[i+p-2], ..., x[i] (lag 1 first).

    Example:
        >>> x = np.array([1.0, 2.0, 3.0, 4.0, 5.0])
        >>> lag_matrix(x, p=2)
        array([[2., 1.],
               [3., 2.],
               [4., 3.]])
    """
    x = as_series(x)
    n = len(x)
    if p < 1:
        raise InvalidOrderError(f"p must be >= 1, got {p}")
    if n < p + 1:
        raise InsufficientDataError(f"Need at least p+1={p+1} observations, got {n}")

    X = np.zeros((n - p, p))
    for j in range(p):
        X[:, j] = x[p - 1 - j : n - 1 - j]
    return X


def acf(
    x: np.ndarray, max_lag: Optional[int] = None, covariance: bool = False
) -> np.ndarray:
    """Compute the sample autocorrelation (or autocovariance) function.

    For each lag t the empirical covariance is

        γ(t) = (1/N) * Σ_{i=0}^{N-1-t} (x_i - x̄)(x_{i+t} - x̄)

    In correlation mode every lag is divided by γ(0) and lag 0 is exactly 1.0.
    A constant series has no defined correlation; in that case all lags
    beyond 0 are reported as 0.0.

    Args:
        x: 1D time series array, shape (n,), with n >= 2.
        max_lag: Largest lag to compute. None means n-1; larger values are
            clamped to n-1.
        covariance: Return autocovariances instead of autocorrelations.

    Returns:
        Array of shape (max_lag+1,).

    Raises:
        InsufficientDataError: If the series has fewer than 2 observations.
        InvalidOrderError: If max_lag is negative.

    Example:
        >>> acf(np.array([1.0, 2.0, 3.0, 4.0, 5.0]), max_lag=2)
        array([ 1. ,  0.4, -0.1])
    """
    x = as_series(x)
    n = len(x)
    if n < 2:
        raise InsufficientDataError(f"Need at least 2 observations, got {n}")
    if max_lag is None:
        max_lag = n - 1
    if max_lag < 0:
        raise InvalidOrderError(f"max_lag must be >= 0, got {max_lag}")
    max_lag = min(int(max_lag), n - 1)

    centered = x - mean(x)
    gamma = np.array(
        [np.dot(centered[: n - t], centered[t:]) / n for t in range(max_lag + 1)]
    )
    if covariance:
        return gamma

    rho = np.zeros(max_lag + 1)
    rho[0] = 1.0
    if gamma[0] == 0.0 or np.ptp(x) == 0.0:
        return rho
    rho[1:] = gamma[1:] / gamma[0]
    return rho


def acov(x: np.ndarray, max_lag: Optional[int] = None) -> np.ndarray:
    """Sample autocovariances γ(0..max_lag) with divisor N."""
    return acf(x, max_lag=max_lag, covariance=True)


def _durbin_recursion(
    rho: np.ndarray, cov0: float, order: int
) -> Tuple[np.ndarray, float, np.ndarray]:
    """Run the Levinson-Durbin recursion up to ``order``.

    Returns the order-``order`` coefficients, the prediction-error variance,
    and the reflection coefficients φ_kk for k = 1..order.
    """
    previous = np.zeros(order)
    current = np.zeros(order)
    reflections = np.zeros(order)
    var = float(cov0)

    for i in range(1, order + 1):
        num = rho[i] - np.dot(previous[: i - 1], rho[i - 1 : 0 : -1])
        den = 1.0 - np.dot(previous[: i - 1], rho[1:i])
        if den == 0.0 or not np.isfinite(den):
            raise SingularMatrixError(
                "Levinson-Durbin denominator vanished", estimator="levinson_durbin", order=i
            )
        phi_ii = num / den
        if i > 1:
            current[: i - 1] = previous[: i - 1] - phi_ii * previous[i - 2 :: -1]
        current[i - 1] = phi_ii
        reflections[i - 1] = phi_ii
        var *= 1.0 - phi_ii * phi_ii
        previous, current = current, previous

    return previous.copy(), var, reflections


def levinson_durbin(
    rho: np.ndarray, cov0: float, order: Optional[int] = None
) -> Tuple[np.ndarray, float]:
    """Solve the Yule-Walker system for one order by Levinson-Durbin recursion.

    Args:
        rho: Autocorrelations [ρ(0), ρ(1), ..., ρ(m)] with ρ(0) = 1.
        cov0: Lag-0 autocovariance, used to seed the error variance.
        order: AR order to solve for. None (or anything above m) means m.

    Returns:
        Tuple of (phi, var) where phi holds the AR coefficients
        [φ_1, ..., φ_order] and var is the prediction-error variance.

    Raises:
        SingularMatrixError: If a recursion denominator is zero.

    Example:
        >>> phi, var = levinson_durbin(np.array([1.0, 0.7, 0.49]), cov0=2.0)
        >>> np.round(phi, 12)
        array([0.7, 0. ])
    """
    rho = np.asarray(rho, dtype=float)
    if rho.ndim != 1 or rho.size == 0:
        raise InsufficientDataError("rho must be a non-empty 1D array")
    max_order = rho.size - 1
    order = max_order if order is None else min(int(order), max_order)
    if order < 0:
        raise InvalidOrderError(f"order must be >= 0, got {order}")
    phi, var, _ = _durbin_recursion(rho, cov0, order)
    return phi, var


def pacf(x: np.ndarray, max_lag: Optional[int] = None) -> np.ndarray:
    """Compute the partial autocorrelation function via Levinson-Durbin.

    The partial autocorrelation at lag k is the last coefficient φ_kk of the
    AR(k) solution. All lags come out of a single O(max_lag²) pass.

    Args:
        x: 1D time series array, shape (n,), with n >= 2.
        max_lag: Largest lag. None means n-1; larger values are clamped.

    Returns:
        Array [π(1), ..., π(max_lag)] of shape (max_lag,). There is no lag-0
        entry.

    Example:
        >>> x = np.array([1.0, 2.0, 3.0, 4.0, 5.0])
        >>> bool(pacf(x, max_lag=1)[0] == acf(x, max_lag=1)[1])
        True
    """
    rho = acf(x, max_lag=max_lag)
    cov0 = acf(x, max_lag=0, covariance=True)[0]
    order = len(rho) - 1
    _, _, reflections = _durbin_recursion(rho, cov0, order)
    return reflections


__all__ = [
    "as_series",
    "check_order",
    "mean",
    "variance",
    "lag_matrix",
    "acf",
    "acov",
    "levinson_durbin",
    "pacf",
]

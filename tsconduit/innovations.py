"""One-step prediction residuals for ARMA-type models.

For t >= p the prediction is

    x̂_t = c + Σ_j φ_j x_{t-j-1} + Σ_j θ_j e_{t-j-1}

and the residual is e_t = x_t - x̂_t; the first p residuals are zero. The MA
term makes this a causal recursive (IIR) filter: each residual depends on the
residuals before it. The recursion runs through ``scipy.signal.lfilter``,
which evaluates it strictly left to right.
"""

from __future__ import annotations

import numpy as np
from scipy.signal import lfilter

from .stats import as_series, check_order, lag_matrix


def _coefficients(values: np.ndarray, name: str) -> np.ndarray:
    arr = np.asarray(values, dtype=float).ravel()
    if not np.all(np.isfinite(arr)):
        raise ValueError(f"{name} must contain only finite values")
    return arr


def residuals(
    x: np.ndarray,
    intercept: float,
    phi: np.ndarray,
    theta: np.ndarray,
) -> np.ndarray:
    """Replay a series through an ARMA filter and return its residuals.

    Args:
        x: 1D time series array, shape (n,).
        intercept: Constant term c.
        phi: AR coefficients [φ_1, ..., φ_p]; p must be smaller than n.
        theta: MA coefficients [θ_1, ..., θ_q].

    Returns:
        Residuals of shape (n,); entries 0..p-1 are zero.

    Example:
        >>> residuals(np.array([1.0, 2.0, 3.0]), 0.0, [1.0], [])
        array([0., 1., 1.])
    """
    x = as_series(x)
    phi = _coefficients(phi, "phi")
    theta = _coefficients(theta, "theta")
    n = len(x)
    p = check_order(len(phi), n, name="AR order")

    driving = np.zeros(n)
    prediction = np.full(n - p, float(intercept))
    if p > 0:
        prediction += lag_matrix(x, p) @ phi
    driving[p:] = x[p:] - prediction

    if theta.size == 0:
        return driving
    return lfilter([1.0], np.concatenate(([1.0], theta)), driving)


def conditional_sum_squares(
    x: np.ndarray,
    intercept: float,
    phi: np.ndarray,
    theta: np.ndarray,
) -> float:
    """Sum of squared residuals; +inf when the filter blows up."""
    with np.errstate(over="ignore", invalid="ignore"):
        res = residuals(x, intercept, phi, theta)
        css = float(np.dot(res, res))
    return css if np.isfinite(css) else float("inf")


__all__ = ["residuals", "conditional_sum_squares"]

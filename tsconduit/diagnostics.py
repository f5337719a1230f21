"""Fit diagnostics: residual variance and information criteria.

    AIC = 2k + N ln(σ²)
    BIC = N ln(σ²) + k ln(N)

where σ² = RSS/N is the residual variance and k = p + q counts the AR and MA
coefficients.

References:
    - Akaike (1974): "A new look at the statistical model identification"
    - Schwarz (1978): "Estimating the dimension of a model"
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Tuple

import numpy as np

from .exceptions import InvalidOrderError
from .innovations import residuals as compute_residuals

Criterion = Literal["aic", "bic"]

# Lower bound applied to σ² before taking logarithms.
MIN_VARIANCE = 1e-12


@dataclass(frozen=True)
class FitDiagnostics:
    """Residual-based summary of one fit.

    Attributes:
        sigma2: Residual variance RSS/N.
        aic: Akaike Information Criterion.
        bic: Bayesian Information Criterion.
        nobs: Number of observations N the residuals were computed on.
        n_params: Parameter count k (AR plus MA order).
        rss: Residual sum of squares.
    """

    sigma2: float
    aic: float
    bic: float
    nobs: int
    n_params: int
    rss: float


def normalize_criterion(criterion: str) -> Criterion:
    """Return the canonical lower-case criterion name."""
    name = str(criterion).lower()
    if name not in ("aic", "bic"):
        raise InvalidOrderError(f"criterion must be 'aic' or 'bic', got {criterion!r}")
    return name  # type: ignore[return-value]


def residual_variance(res: np.ndarray) -> float:
    """RSS/N of a residual vector."""
    res = np.asarray(res, dtype=float)
    if res.size == 0:
        raise ValueError("residuals must be non-empty")
    return float(np.dot(res, res) / res.size)


def _log_variance(sigma2: float) -> float:
    return float(np.log(max(float(sigma2), MIN_VARIANCE)))


def aic(sigma2: float, nobs: int, n_params: int) -> float:
    """Akaike Information Criterion 2k + N ln(σ²)."""
    return 2.0 * n_params + nobs * _log_variance(sigma2)


def bic(sigma2: float, nobs: int, n_params: int) -> float:
    """Bayesian Information Criterion N ln(σ²) + k ln(N)."""
    return nobs * _log_variance(sigma2) + n_params * float(np.log(nobs))


def information_criterion(
    criterion: str, sigma2: float, nobs: int, n_params: int
) -> float:
    """Evaluate the named criterion ("aic" or "bic")."""
    if normalize_criterion(criterion) == "aic":
        return aic(sigma2, nobs, n_params)
    return bic(sigma2, nobs, n_params)


def compute_diagnostics(
    x: np.ndarray, intercept: float, phi: np.ndarray, theta: np.ndarray
) -> Tuple[FitDiagnostics, np.ndarray]:
    """Recompute residuals for fitted coefficients and derive σ², AIC and BIC.

    Returns:
        Tuple of (diagnostics, residuals).
    """
    with np.errstate(over="ignore", invalid="ignore"):
        res = compute_residuals(x, intercept, phi, theta)
        rss = float(np.dot(res, res))
    if not np.isfinite(rss):
        rss = float("inf")
    nobs = len(res)
    n_params = len(np.atleast_1d(phi)) + len(np.atleast_1d(theta))
    sigma2 = rss / nobs
    diagnostics = FitDiagnostics(
        sigma2=sigma2,
        aic=aic(sigma2, nobs, n_params),
        bic=bic(sigma2, nobs, n_params),
        nobs=nobs,
        n_params=n_params,
        rss=rss,
    )
    return diagnostics, res


__all__ = [
    "Criterion",
    "FitDiagnostics",
    "MIN_VARIANCE",
    "normalize_criterion",
    "residual_variance",
    "aic",
    "bic",
    "information_criterion",
    "compute_diagnostics",
]

"""Parameter estimators for AR, MA and ARMA models.

Every estimator is a pure function of a series and an order. It returns an
:class:`EstimationResult` or raises a subclass of
:class:`~tsconduit.exceptions.EstimationError`; none of them leaves a partial
or silently unchanged coefficient vector behind.

- :func:`estimate_ols`: AR(p) by least squares on the lag matrix.
- :func:`estimate_yule_walker`: AR(p) from the empirical covariance system.
- :func:`estimate_burg`: AR(p) by Burg's recursion on the lagged moments.
- :func:`estimate_durbin`: MA(q) by Durbin's two-stage regression.
- :func:`estimate_css`: ARMA(p, q) with intercept by conditional sum of
  squares, minimized with L-BFGS on forward-difference gradients.

References:
    - Box & Jenkins (1976): Time Series Analysis: Forecasting and Control
    - Burg (1975): Maximum Entropy Spectral Analysis
    - Durbin (1959): "Efficient estimation of parameters in moving-average models"
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional

import numpy as np
from scipy.linalg import LinAlgError, cho_factor, cho_solve, qr, solve_triangular

from .config import DEFAULT_CSS_CONFIG, CSSConfig
from .exceptions import EstimationError, InsufficientDataError, SingularMatrixError
from .innovations import conditional_sum_squares
from .logging import get_logger
from .optimize import Problem, lbfgs
from .stats import as_series, check_order, lag_matrix, mean, pacf

logger = get_logger(__name__)


@dataclass(frozen=True)
class EstimationResult:
    """Coefficients produced by one estimator call.

    Attributes:
        method: Estimator name ("ols", "yule_walker", "burg", "durbin", "css").
        intercept: Constant term (0.0 for estimators that do not fit one).
        phi: AR coefficients [φ_1, ..., φ_p], shape (p,).
        theta: MA coefficients [θ_1, ..., θ_q], shape (q,).
        converged: False only when an iterative estimator stopped before
            meeting its tolerance; the coefficients are then the best iterate.
        iterations: Optimizer iterations taken (0 for closed-form estimators).
        objective: Final objective value for iterative estimators.
        message: Human-readable status.
    """

    method: str
    intercept: float
    phi: np.ndarray
    theta: np.ndarray = field(default_factory=lambda: np.zeros(0))
    converged: bool = True
    iterations: int = 0
    objective: Optional[float] = None
    message: str = ""

    def __post_init__(self) -> None:
        for name in ("phi", "theta"):
            arr = np.array(getattr(self, name), dtype=float).ravel()
            arr.setflags(write=False)
            object.__setattr__(self, name, arr)

    @property
    def ar_order(self) -> int:
        return int(self.phi.size)

    @property
    def ma_order(self) -> int:
        return int(self.theta.size)


def estimate_ols(x: np.ndarray, order: int) -> EstimationResult:
    """Estimate AR(p) coefficients by ordinary least squares.

    Builds the (n-p) × p lag matrix X and solves the normal equations
    XᵀX φ = Xᵀy through a Cholesky factorization of XᵀX. No intercept is fitted.

    Args:
        x: 1D time series array, shape (n,).
        order: AR order p, 1 <= p < n.

    Returns:
        EstimationResult with ``phi`` of shape (p,).

    Raises:
        InvalidOrderError: If the order is out of range.
        SingularMatrixError: If XᵀX is not positive definite (collinear lags).

    Example:
        >>> rng = np.random.default_rng(0)
        >>> eps = rng.normal(size=2000)
        >>> x = np.zeros(2000)
        >>> for t in range(1, 2000):
        ...     x[t] = 0.7 * x[t - 1] + eps[t]
        >>> res = estimate_ols(x, order=1)
        >>> bool(abs(res.phi[0] - 0.7) < 0.05)
        True
    """
    x = as_series(x)
    order = check_order(order, len(x), minimum=1)

    X = lag_matrix(x, order)
    y = x[order:]
    xtx = X.T @ X
    xty = X.T @ y

    try:
        factor = cho_factor(xtx, lower=True)
    except LinAlgError as exc:
        raise SingularMatrixError(
            "XᵀX is not positive definite (collinear lags)", estimator="ols", order=order
        ) from exc
    phi = cho_solve(factor, xty)
    if not np.all(np.isfinite(phi)):
        raise SingularMatrixError(
            "normal equations produced non-finite coefficients", estimator="ols", order=order
        )
    return EstimationResult(method="ols", intercept=0.0, phi=phi, message="OLS estimation successful")


def estimate_yule_walker(x: np.ndarray, order: int) -> EstimationResult:
    """Estimate AR(p) coefficients from the empirical covariance system.

    With m = n - p the system is

        R[i, j] = (1/m) Σ_{k<m} x_{k+i} x_{k+j},   r[i] = (1/m) Σ_{k<m} x_{k+i} x_{k+p}

    for i, j in 0..p-1. It is solved with a QR factorization of R; the
    solution is ordered oldest lag first, so it is reversed before returning.

    Raises:
        InvalidOrderError: If the order is out of range.
        SingularMatrixError: If R is rank deficient.
    """
    x = as_series(x)
    n = len(x)
    order = check_order(order, n, minimum=1)
    m = n - order

    segments = np.stack([x[i : i + m] for i in range(order + 1)])
    gram = segments @ segments.T / m
    R = gram[:order, :order]
    r = gram[:order, order]

    q_factor, r_factor = qr(R)
    diag = np.abs(np.diag(r_factor))
    tol = float(diag.max(initial=0.0)) * order * np.finfo(float).eps
    if not np.all(np.isfinite(diag)) or np.any(diag <= tol):
        raise SingularMatrixError(
            "covariance matrix is rank deficient", estimator="yule_walker", order=order
        )
    solution = solve_triangular(r_factor, q_factor.T @ r)
    phi = solution[::-1]
    return EstimationResult(
        method="yule_walker", intercept=0.0, phi=phi, message="Yule-Walker estimation successful"
    )


def _lagged_moments(x: np.ndarray, max_lag: int) -> np.ndarray:
    """r_k = Σ_{i>=k} x_i x_{i-k} / (N - k) for k = 0..max_lag, without centring."""
    n = len(x)
    return np.array([np.dot(x[k:], x[: n - k]) / (n - k) for k in range(max_lag + 1)])


def estimate_burg(x: np.ndarray, order: int) -> EstimationResult:
    """Estimate AR(p) coefficients with Burg's recursion.

    Starting from the raw lagged moments r_k (divisor N - k) and e_0 = r_0,
    each stage i computes

        λ_i = (r_i - Σ_{j<i} a_j r_{i-j}) / e_{i-1}
        a_j ← a_j - λ_i a_{i-j}   (j < i),   a_i = λ_i
        e_i = e_{i-1} (1 - λ_i²)

    The order update reads the previous stage's coefficients from a separate
    buffer.

    Raises:
        InvalidOrderError: If the order is out of range.
        SingularMatrixError: If the error energy is not positive before the
            requested order is reached.
    """
    x = as_series(x)
    order = check_order(order, len(x), minimum=1)

    r = _lagged_moments(x, order)
    previous = np.zeros(order)
    current = np.zeros(order)
    energy = float(r[0])

    for stage in range(order):
        if not (energy > 0.0 and np.isfinite(energy)):
            raise SingularMatrixError(
                f"prediction error energy vanished at stage {stage + 1}",
                estimator="burg",
                order=order,
            )
        # previous[:stage] holds a_1..a_stage; r[stage:0:-1] is r_stage..r_1.
        reflection = (r[stage + 1] - float(np.dot(previous[:stage], r[stage:0:-1]))) / energy

        if stage > 0:
            current[:stage] = previous[:stage] - reflection * previous[stage - 1 :: -1]
        current[stage] = reflection
        previous, current = current, previous
        energy *= 1.0 - reflection * reflection

    return EstimationResult(
        method="burg",
        intercept=0.0,
        phi=previous.copy(),
        message=f"Burg estimation successful (error energy {energy:.6g})",
    )


def durbin_ar_order(order: int, n: int) -> int:
    """Length of the long autoregression used by :func:`estimate_durbin`.

    m = round(ln(10 · q · n)), rounding halves away from zero.
    """
    return int(math.floor(math.log(10 * order * n) + 0.5))


def estimate_durbin(x: np.ndarray, order: int) -> EstimationResult:
    """Estimate MA(q) coefficients with Durbin's two-stage method.

    1. Fit a long AR(m) by :func:`estimate_yule_walker`, m = round(ln(10·q·n)).
    2. Use its one-step residuals ε_t (t >= m) as proxies for the noise.
    3. Regress the AR predictions x_t - ε_t on ε_{t-1}, ..., ε_{t-q}:
       θ = (XᵀX)⁻¹ Xᵀ y.

    Raises:
        InvalidOrderError: If the order is out of range.
        InsufficientDataError: If the series is too short for the long AR
            and the regression.
        SingularMatrixError: If either stage hits a singular system.
    """
    x = as_series(x)
    n = len(x)
    order = check_order(order, n, minimum=1)
    m = durbin_ar_order(order, n)
    if n - m - order < order:
        raise InsufficientDataError(
            f"needs at least {m + 2 * order} observations (long AR order {m}), got {n}",
            estimator="durbin",
            order=order,
        )

    try:
        long_ar = estimate_yule_walker(x, m)
    except EstimationError as exc:
        raise SingularMatrixError(
            f"long AR({m}) stage failed: {exc}", estimator="durbin", order=order
        ) from exc

    noise = x[m:] - lag_matrix(x, m) @ long_ar.phi
    y = (x[m:] - noise)[order:]
    X = lag_matrix(noise, order)

    try:
        inverse = np.linalg.inv(X.T @ X)
    except np.linalg.LinAlgError as exc:
        raise SingularMatrixError(
            "regression matrix is singular", estimator="durbin", order=order
        ) from exc
    theta = inverse @ X.T @ y
    if not np.all(np.isfinite(theta)):
        raise SingularMatrixError(
            "regression produced non-finite coefficients", estimator="durbin", order=order
        )
    return EstimationResult(
        method="durbin",
        intercept=0.0,
        phi=np.zeros(0),
        theta=theta,
        message=f"Durbin estimation successful (long AR order {m})",
    )


def estimate_css(
    x: np.ndarray,
    ar_order: int,
    ma_order: int,
    config: Optional[CSSConfig] = None,
) -> EstimationResult:
    """Fit intercept, AR and MA coefficients by conditional sum of squares.

    Minimizes Σ e_t² over [c, φ_1..φ_p, θ_1..θ_q], where e_t are the residuals
    of :func:`tsconduit.innovations.residuals`. The search starts from
    c = mean(x), φ = PACF at lags 1..p and θ = 1.0, and runs L-BFGS with
    forward-difference gradients for at most ``config.max_iterations``
    iterations. Failing to meet the gradient tolerance is not an error: the
    best iterate is returned with ``converged=False`` and a warning is logged.

    Args:
        x: 1D time series array, shape (n,).
        ar_order: AR order p, 0 <= p < n.
        ma_order: MA order q, 0 <= q < n.
        config: Optimizer settings; defaults to DEFAULT_CSS_CONFIG.

    Returns:
        EstimationResult with intercept, ``phi`` of shape (p,) and ``theta``
        of shape (q,).
    """
    x = as_series(x)
    n = len(x)
    p = check_order(ar_order, n, name="ar_order")
    q = check_order(ma_order, n, name="ma_order")
    if config is None:
        config = DEFAULT_CSS_CONFIG

    start = [mean(x)]
    if p > 0:
        start.extend(pacf(x, max_lag=p))
    start.extend([1.0] * q)
    start = np.asarray(start, dtype=float)

    def objective(params: np.ndarray) -> float:
        if not np.all(np.isfinite(params)):
            return float("inf")
        return conditional_sum_squares(x, params[0], params[1 : p + 1], params[p + 1 :])

    problem = Problem(fun=objective, dim=start.size, diff_step=config.diff_step)
    result = lbfgs(
        problem,
        start,
        m=config.memory,
        maxiter=config.max_iterations,
        tol=config.gtol,
        max_line_search=config.max_line_search,
    )

    if not result.success:
        logger.warning(
            "CSS fit of ARMA(%d, %d) stopped after %d iterations without "
            "convergence (%s); using best iterate with CSS=%.6g",
            p,
            q,
            result.nit,
            result.message,
            result.fun,
        )
    else:
        logger.debug(
            "CSS fit of ARMA(%d, %d) converged in %d iterations, CSS=%.6g",
            p,
            q,
            result.nit,
            result.fun,
        )

    params = result.x
    return EstimationResult(
        method="css",
        intercept=float(params[0]),
        phi=params[1 : p + 1],
        theta=params[p + 1 :],
        converged=result.success,
        iterations=result.nit,
        objective=result.fun,
        message=result.message,
    )


__all__ = [
    "EstimationResult",
    "estimate_ols",
    "estimate_yule_walker",
    "estimate_burg",
    "durbin_ar_order",
    "estimate_durbin",
    "estimate_css",
]

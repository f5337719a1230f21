"""Model facades: AR, MA, ARMA, ARIMA and FARIMA.

A facade holds an order and an estimation method. ``fit`` is pure: it takes a
series and returns a new immutable :class:`FittedModel` without touching the
facade. ``autofit`` searches a range of orders and returns the fit that
minimizes AIC or BIC; ``select_order`` returns the whole search.

Example:
    >>> from tsconduit import AR
    >>> x = AR.simulate(1000, [0.6], seed=0)
    >>> fitted = AR(1, method="burg").fit(x)
    >>> fitted.ar_order
    1
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union

import numpy as np

from .config import CSSConfig
from .diagnostics import compute_diagnostics
from .estimation import (
    EstimationResult,
    estimate_burg,
    estimate_css,
    estimate_durbin,
    estimate_ols,
    estimate_yule_walker,
)
from .exceptions import InvalidOrderError
from .logging import get_logger
from .selection import OrderSearch1D, OrderSearch2D, search_order_pairs, search_orders
from .simulation import (
    NoiseSource,
    simulate_ar,
    simulate_arima,
    simulate_arma,
    simulate_farima,
    simulate_ma,
)
from .stats import as_series, check_order
from .transforms import difference, fractional_difference, split_order

logger = get_logger(__name__)

_AR_ESTIMATORS = {
    "ols": estimate_ols,
    "yule_walker": estimate_yule_walker,
    "burg": estimate_burg,
}


@dataclass(frozen=True)
class FittedModel:
    """Immutable result of fitting a model to a series.

    Attributes:
        model: Model family ("AR", "MA", "ARMA", "ARIMA", "FARIMA").
        method: Estimator used ("ols", "yule_walker", "burg", "durbin", "css").
        intercept: Constant term (0.0 for estimators that do not fit one).
        phi: AR coefficients, shape (p,).
        theta: MA coefficients, shape (q,).
        d: Differencing order (int for ARIMA, float for FARIMA, 0 otherwise).
        sigma2: Residual variance RSS/N on the fitted (differenced) series.
        aic: Akaike Information Criterion.
        bic: Bayesian Information Criterion.
        nobs: Length of the series the residuals were computed on.
        converged: False when an iterative estimator stopped early.
        message: Estimator status message.
        residuals: One-step residuals, shape (nobs,).
    """

    model: str
    method: str
    intercept: float
    phi: np.ndarray
    theta: np.ndarray
    d: Union[int, float]
    sigma2: float
    aic: float
    bic: float
    nobs: int
    converged: bool
    message: str
    residuals: np.ndarray

    def __post_init__(self) -> None:
        for name in ("phi", "theta", "residuals"):
            arr = np.array(getattr(self, name), dtype=float).ravel()
            arr.setflags(write=False)
            object.__setattr__(self, name, arr)

    @property
    def ar_order(self) -> int:
        return int(self.phi.size)

    @property
    def ma_order(self) -> int:
        return int(self.theta.size)

    @property
    def order(self) -> Tuple[int, Union[int, float], int]:
        """(p, d, q)."""
        return self.ar_order, self.d, self.ma_order

    @property
    def label(self) -> str:
        """Short name such as ``"ARMA(1, 2)"``."""
        if self.model == "AR":
            return f"AR({self.ar_order})"
        if self.model == "MA":
            return f"MA({self.ma_order})"
        if self.model == "ARMA":
            return f"ARMA({self.ar_order}, {self.ma_order})"
        return f"{self.model}({self.ar_order}, {self.d}, {self.ma_order})"

    def summary(self) -> str:
        """Human-readable report; see :func:`tsconduit.summary.format_model_summary`."""
        from .summary import format_model_summary

        return format_model_summary(self)


def _assemble(
    model: str, result: EstimationResult, series: np.ndarray, d: Union[int, float] = 0
) -> FittedModel:
    diagnostics, res = compute_diagnostics(series, result.intercept, result.phi, result.theta)
    fitted = FittedModel(
        model=model,
        method=result.method,
        intercept=result.intercept,
        phi=result.phi,
        theta=result.theta,
        d=d,
        sigma2=diagnostics.sigma2,
        aic=diagnostics.aic,
        bic=diagnostics.bic,
        nobs=diagnostics.nobs,
        converged=result.converged,
        message=result.message,
        residuals=res,
    )
    logger.debug(
        "Fitted %s by %s: sigma2=%.6g aic=%.6g bic=%.6g",
        fitted.label,
        fitted.method,
        fitted.sigma2,
        fitted.aic,
        fitted.bic,
    )
    return fitted


def _require_int(value: int, name: str, minimum: int) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise InvalidOrderError(f"{name} must be an integer, got {value!r}")
    if value < minimum:
        raise InvalidOrderError(f"{name} must be >= {minimum}, got {value}")
    return int(value)


def _require_method(method: str, allowed: Sequence[str]) -> str:
    if method not in allowed:
        raise InvalidOrderError(f"method must be one of {tuple(allowed)}, got {method!r}")
    return method


class AR:
    """Autoregressive model of order p >= 1.

    Args:
        order: AR order p.
        method: "ols", "yule_walker", "burg" or "css".
        config: Optimizer settings for the "css" method.
    """

    METHODS = ("ols", "yule_walker", "burg", "css")

    def __init__(
        self, order: int, method: str = "yule_walker", config: Optional[CSSConfig] = None
    ):
        self.order = _require_int(order, "order", 1)
        self.method = _require_method(method, self.METHODS)
        self.config = config

    def fit(self, x: np.ndarray) -> FittedModel:
        x = as_series(x)
        check_order(self.order, len(x), minimum=1)
        if self.method == "css":
            result = estimate_css(x, self.order, 0, self.config)
        else:
            result = _AR_ESTIMATORS[self.method](x, self.order)
        return _assemble("AR", result, x)

    @classmethod
    def select_order(
        cls,
        x: np.ndarray,
        max_order: int,
        criterion: str = "aic",
        method: str = "yule_walker",
        config: Optional[CSSConfig] = None,
    ) -> OrderSearch1D:
        """Fit AR(1)..AR(max_order) and score each by ``criterion``."""
        x = as_series(x)
        check_order(max_order, len(x), name="max_order", minimum=1)
        _require_method(method, cls.METHODS)
        return search_orders(
            range(1, max_order + 1),
            lambda k: cls(k, method=method, config=config).fit(x),
            criterion,
        )

    @classmethod
    def autofit(
        cls,
        x: np.ndarray,
        max_order: int,
        criterion: str = "aic",
        method: str = "yule_walker",
        config: Optional[CSSConfig] = None,
    ) -> FittedModel:
        """Return the AR fit with the lowest criterion over orders 1..max_order."""
        return cls.select_order(x, max_order, criterion, method, config).best_fit

    @staticmethod
    def simulate(
        length: int,
        phi: Sequence[float],
        noise_mean: float = 0.0,
        noise_variance: float = 1.0,
        noise: Optional[NoiseSource] = None,
        seed: Optional[int] = None,
    ) -> np.ndarray:
        return simulate_ar(length, phi, noise_mean, noise_variance, noise, seed)


class MA:
    """Moving-average model of order q >= 1.

    Args:
        order: MA order q.
        method: "durbin" or "css".
        config: Optimizer settings for the "css" method.
    """

    METHODS = ("durbin", "css")

    def __init__(self, order: int, method: str = "durbin", config: Optional[CSSConfig] = None):
        self.order = _require_int(order, "order", 1)
        self.method = _require_method(method, self.METHODS)
        self.config = config

    def fit(self, x: np.ndarray) -> FittedModel:
        x = as_series(x)
        check_order(self.order, len(x), minimum=1)
        if self.method == "css":
            result = estimate_css(x, 0, self.order, self.config)
        else:
            result = estimate_durbin(x, self.order)
        return _assemble("MA", result, x)

    @classmethod
    def select_order(
        cls,
        x: np.ndarray,
        max_order: int,
        criterion: str = "aic",
        method: str = "durbin",
        config: Optional[CSSConfig] = None,
    ) -> OrderSearch1D:
        """Fit MA(1)..MA(max_order) and score each by ``criterion``."""
        x = as_series(x)
        check_order(max_order, len(x), name="max_order", minimum=1)
        _require_method(method, cls.METHODS)
        return search_orders(
            range(1, max_order + 1),
            lambda k: cls(k, method=method, config=config).fit(x),
            criterion,
        )

    @classmethod
    def autofit(
        cls,
        x: np.ndarray,
        max_order: int,
        criterion: str = "aic",
        method: str = "durbin",
        config: Optional[CSSConfig] = None,
    ) -> FittedModel:
        """Return the MA fit with the lowest criterion over orders 1..max_order."""
        return cls.select_order(x, max_order, criterion, method, config).best_fit

    @staticmethod
    def simulate(
        length: int,
        theta: Sequence[float],
        noise_mean: float = 0.0,
        noise_variance: float = 1.0,
        noise: Optional[NoiseSource] = None,
        seed: Optional[int] = None,
    ) -> np.ndarray:
        return simulate_ma(length, theta, noise_mean, noise_variance, noise, seed)


class ARMA:
    """ARMA(p, q) model with intercept, fitted by conditional sum of squares."""

    METHODS = ("css",)

    def __init__(
        self,
        ar_order: int,
        ma_order: int,
        method: str = "css",
        config: Optional[CSSConfig] = None,
    ):
        self.ar_order = _require_int(ar_order, "ar_order", 0)
        self.ma_order = _require_int(ma_order, "ma_order", 0)
        self.method = _require_method(method, self.METHODS)
        self.config = config

    def fit(self, x: np.ndarray) -> FittedModel:
        x = as_series(x)
        result = estimate_css(x, self.ar_order, self.ma_order, self.config)
        return _assemble("ARMA", result, x)

    @classmethod
    def select_order(
        cls,
        x: np.ndarray,
        max_ar_order: int,
        max_ma_order: int,
        criterion: str = "aic",
        config: Optional[CSSConfig] = None,
    ) -> OrderSearch2D:
        """Fit every (p, q) in 0..max_ar_order x 0..max_ma_order."""
        x = as_series(x)
        check_order(max_ar_order, len(x), name="max_ar_order")
        check_order(max_ma_order, len(x), name="max_ma_order")
        return search_order_pairs(
            range(max_ar_order + 1),
            range(max_ma_order + 1),
            lambda p, q: cls(p, q, config=config).fit(x),
            criterion,
        )

    @classmethod
    def autofit(
        cls,
        x: np.ndarray,
        max_ar_order: int,
        max_ma_order: int,
        criterion: str = "aic",
        config: Optional[CSSConfig] = None,
    ) -> FittedModel:
        """Return the ARMA fit with the lowest criterion over the order grid."""
        return cls.select_order(x, max_ar_order, max_ma_order, criterion, config).best_fit

    @staticmethod
    def simulate(
        length: int,
        phi: Sequence[float],
        theta: Sequence[float],
        noise_mean: float = 0.0,
        noise_variance: float = 1.0,
        noise: Optional[NoiseSource] = None,
        seed: Optional[int] = None,
    ) -> np.ndarray:
        return simulate_arma(length, phi, theta, noise_mean, noise_variance, noise, seed)


class ARIMA:
    """ARIMA(p, d, q): an ARMA(p, q) fitted to the d-th difference of the series.

    σ², AIC and BIC are reported on the differenced series of length N - d.
    """

    METHODS = ("css",)

    def __init__(
        self,
        ar_order: int,
        d: int,
        ma_order: int,
        method: str = "css",
        config: Optional[CSSConfig] = None,
    ):
        self.ar_order = _require_int(ar_order, "ar_order", 0)
        self.d = _require_int(d, "d", 0)
        self.ma_order = _require_int(ma_order, "ma_order", 0)
        self.method = _require_method(method, self.METHODS)
        self.config = config

    def fit(self, x: np.ndarray) -> FittedModel:
        x = as_series(x)
        series = difference(x, self.d) if self.d > 0 else x
        result = estimate_css(series, self.ar_order, self.ma_order, self.config)
        return _assemble("ARIMA", result, series, d=self.d)

    @classmethod
    def select_order(
        cls,
        x: np.ndarray,
        d: int,
        max_ar_order: int,
        max_ma_order: int,
        criterion: str = "aic",
        config: Optional[CSSConfig] = None,
    ) -> OrderSearch2D:
        """Fit every (p, d, q) with fixed d over the (p, q) grid."""
        x = as_series(x)
        d = check_order(d, len(x), name="d")
        n = len(x) - d
        check_order(max_ar_order, n, name="max_ar_order")
        check_order(max_ma_order, n, name="max_ma_order")
        return search_order_pairs(
            range(max_ar_order + 1),
            range(max_ma_order + 1),
            lambda p, q: cls(p, d, q, config=config).fit(x),
            criterion,
        )

    @classmethod
    def autofit(
        cls,
        x: np.ndarray,
        d: int,
        max_ar_order: int,
        max_ma_order: int,
        criterion: str = "aic",
        config: Optional[CSSConfig] = None,
    ) -> FittedModel:
        """Return the ARIMA fit with the lowest criterion over the order grid."""
        return cls.select_order(x, d, max_ar_order, max_ma_order, criterion, config).best_fit

    @staticmethod
    def simulate(
        length: int,
        phi: Sequence[float],
        d: int,
        theta: Sequence[float],
        noise_mean: float = 0.0,
        noise_variance: float = 1.0,
        noise: Optional[NoiseSource] = None,
        seed: Optional[int] = None,
    ) -> np.ndarray:
        return simulate_arima(length, phi, d, theta, noise_mean, noise_variance, noise, seed)


class FARIMA:
    """Fractionally integrated ARMA(p, d, q) with real d >= 0.

    The series is fractionally differenced by the fractional part of d, then
    differenced by its integer part, and an ARMA(p, q) is fitted to the result.
    """

    METHODS = ("css",)

    def __init__(
        self,
        ar_order: int,
        d: float,
        ma_order: int,
        method: str = "css",
        config: Optional[CSSConfig] = None,
    ):
        self.ar_order = _require_int(ar_order, "ar_order", 0)
        self.ma_order = _require_int(ma_order, "ma_order", 0)
        self.method = _require_method(method, self.METHODS)
        self._integer_d, self._fraction = split_order(d)
        self.d = float(d)
        self.config = config

    def transform(self, x: np.ndarray) -> np.ndarray:
        """Apply the fractional and then the integer differencing to ``x``."""
        series = as_series(x)
        if self._fraction > 0.0:
            series = fractional_difference(series, self._fraction)
        if self._integer_d > 0:
            series = difference(series, self._integer_d)
        return series

    def fit(self, x: np.ndarray) -> FittedModel:
        series = self.transform(x)
        result = estimate_css(series, self.ar_order, self.ma_order, self.config)
        return _assemble("FARIMA", result, series, d=self.d)

    @classmethod
    def select_order(
        cls,
        x: np.ndarray,
        d: float,
        max_ar_order: int,
        max_ma_order: int,
        criterion: str = "aic",
        config: Optional[CSSConfig] = None,
    ) -> OrderSearch2D:
        """Fit every (p, d, q) with fixed d over the (p, q) grid."""
        series = cls(0, d, 0).transform(x)
        check_order(max_ar_order, len(series), name="max_ar_order")
        check_order(max_ma_order, len(series), name="max_ma_order")
        return search_order_pairs(
            range(max_ar_order + 1),
            range(max_ma_order + 1),
            lambda p, q: cls(p, d, q, config=config).fit(x),
            criterion,
        )

    @classmethod
    def autofit(
        cls,
        x: np.ndarray,
        d: float,
        max_ar_order: int,
        max_ma_order: int,
        criterion: str = "aic",
        config: Optional[CSSConfig] = None,
    ) -> FittedModel:
        """Return the FARIMA fit with the lowest criterion over the order grid."""
        return cls.select_order(x, d, max_ar_order, max_ma_order, criterion, config).best_fit

    @staticmethod
    def simulate(
        length: int,
        phi: Sequence[float],
        d: float,
        theta: Sequence[float],
        noise_mean: float = 0.0,
        noise_variance: float = 1.0,
        noise: Optional[NoiseSource] = None,
        seed: Optional[int] = None,
    ) -> np.ndarray:
        return simulate_farima(length, phi, d, theta, noise_mean, noise_variance, noise, seed)


__all__ = ["FittedModel", "AR", "MA", "ARMA", "ARIMA", "FARIMA"]

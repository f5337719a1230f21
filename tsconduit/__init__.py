"""tsconduit - linear time-series estimation and simulation on NumPy/SciPy.

Provides AR, MA, ARMA, ARIMA and fractionally integrated ARMA models with
OLS, Yule-Walker, Burg, Durbin and conditional-sum-of-squares estimators,
AIC/BIC order selection and process simulators.

Example:
    >>> from tsconduit import ARMA
    >>> x = ARMA.simulate(1000, [0.5], [0.3], seed=0)
    >>> fitted = ARMA.autofit(x, max_ar_order=2, max_ma_order=2, criterion="bic")
    >>> print(fitted.summary())  # doctest: +SKIP

References:
    - Box & Jenkins (1976): Time Series Analysis: Forecasting and Control
    - Brockwell & Davis (1991): Time Series: Theory and Methods
    - Hosking (1981): "Fractional differencing"
"""

__version__ = "0.1.0"

# Configuration and errors
from .config import DEFAULT_CSS_CONFIG, CSSConfig

# Diagnostics
from .diagnostics import (
    FitDiagnostics,
    aic,
    bic,
    compute_diagnostics,
    information_criterion,
    residual_variance,
)

# Estimators
from .estimation import (
    EstimationResult,
    estimate_burg,
    estimate_css,
    estimate_durbin,
    estimate_ols,
    estimate_yule_walker,
)
from .exceptions import (
    EstimationError,
    InsufficientDataError,
    InvalidOrderError,
    OrderSelectionError,
    SingularMatrixError,
    TimeSeriesError,
)

# Residuals
from .innovations import conditional_sum_squares, residuals

# Logging
from .logging import configure_logging, get_logger, set_log_level

# Models
from .models import AR, ARIMA, ARMA, FARIMA, MA, FittedModel

# Order selection
from .selection import OrderSearch1D, OrderSearch2D, search_order_pairs, search_orders

# Simulation
from .simulation import (
    NoiseSource,
    gaussian_noise,
    simulate_ar,
    simulate_arima,
    simulate_arma,
    simulate_farima,
    simulate_ma,
)

# Statistics
from .stats import acf, acov, lag_matrix, levinson_durbin, pacf

# Summary
from .summary import format_model_summary, model_summary, print_model_summary

# Transforms
from .transforms import (
    difference,
    fractional_difference,
    fractional_integrate,
    fractional_weights,
    inverse_difference,
    split_order,
)

__all__ = [
    "__version__",
    # Configuration and errors
    "CSSConfig",
    "DEFAULT_CSS_CONFIG",
    "TimeSeriesError",
    "InvalidOrderError",
    "InsufficientDataError",
    "EstimationError",
    "SingularMatrixError",
    "OrderSelectionError",
    # Logging
    "get_logger",
    "set_log_level",
    "configure_logging",
    # Statistics
    "acf",
    "acov",
    "pacf",
    "levinson_durbin",
    "lag_matrix",
    # Transforms
    "difference",
    "inverse_difference",
    "split_order",
    "fractional_weights",
    "fractional_difference",
    "fractional_integrate",
    # Residuals
    "residuals",
    "conditional_sum_squares",
    # Diagnostics
    "FitDiagnostics",
    "residual_variance",
    "aic",
    "bic",
    "information_criterion",
    "compute_diagnostics",
    # Estimators
    "EstimationResult",
    "estimate_ols",
    "estimate_yule_walker",
    "estimate_burg",
    "estimate_durbin",
    "estimate_css",
    # Order selection
    "OrderSearch1D",
    "OrderSearch2D",
    "search_orders",
    "search_order_pairs",
    # Models
    "FittedModel",
    "AR",
    "MA",
    "ARMA",
    "ARIMA",
    "FARIMA",
    # Simulation
    "NoiseSource",
    "gaussian_noise",
    "simulate_arma",
    "simulate_ar",
    "simulate_ma",
    "simulate_arima",
    "simulate_farima",
    # Summary
    "model_summary",
    "format_model_summary",
    "print_model_summary",
]

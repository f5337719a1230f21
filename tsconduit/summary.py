"""Fitted-model summary utilities.

``model_summary`` returns a plain dictionary for programmatic access;
``format_model_summary`` and ``print_model_summary`` render it for humans.
"""

from __future__ import annotations

import sys
from typing import IO, TYPE_CHECKING, Any, Dict, Optional

if TYPE_CHECKING:
    from tsconduit.models import FittedModel


def model_summary(fit: "FittedModel") -> Dict[str, Any]:
    """
    Generate a summary dictionary for a fitted model.

    Parameters
    ----------
    fit:
        Result of a facade's ``fit`` or ``autofit``.

    Returns
    -------
    Dict[str, Any]
        Dictionary containing:
        - model: str, e.g. "ARIMA(1, 1, 0)"
        - family: str
        - method: str
        - order: tuple (p, d, q)
        - intercept: float
        - phi: list of float
        - theta: list of float
        - sigma2, aic, bic: float
        - nobs: int
        - converged: bool
        - message: str
    """
    return {
        "model": fit.label,
        "family": fit.model,
        "method": fit.method,
        "order": fit.order,
        "intercept": float(fit.intercept),
        "phi": [float(v) for v in fit.phi],
        "theta": [float(v) for v in fit.theta],
        "sigma2": float(fit.sigma2),
        "aic": float(fit.aic),
        "bic": float(fit.bic),
        "nobs": int(fit.nobs),
        "converged": bool(fit.converged),
        "message": fit.message,
    }


def _format_coefficients(values) -> str:
    if not values:
        return "-"
    return ", ".join(f"{v:.6g}" for v in values)


def format_model_summary(fit: "FittedModel") -> str:
    """Render :func:`model_summary` as a multi-line report."""
    summary = model_summary(fit)
    lines = [
        f"{summary['model']} fitted by {summary['method']}",
        "=" * 50,
        f"Observations: {summary['nobs']}",
        f"Intercept: {summary['intercept']:.6g}",
        f"AR coefficients: {_format_coefficients(summary['phi'])}",
        f"MA coefficients: {_format_coefficients(summary['theta'])}",
    ]
    if summary["family"] in ("ARIMA", "FARIMA"):
        lines.append(f"Differencing order: {summary['order'][1]}")
    lines.extend(
        [
            f"Residual variance: {summary['sigma2']:.6g}",
            f"AIC: {summary['aic']:.6g}",
            f"BIC: {summary['bic']:.6g}",
            f"Converged: {summary['converged']}",
        ]
    )
    if summary["message"]:
        lines.append(f"Message: {summary['message']}")
    return "\n".join(lines)


def print_model_summary(fit: "FittedModel", file: Optional[IO[str]] = None) -> None:
    """
    Pretty-print a model summary to stdout or a file.

    This is a utility function for human-readable output, so it uses print()
    intentionally. For programmatic access, use model_summary() instead.
    """
    if file is None:
        file = sys.stdout
    print(format_model_summary(fit), file=file)


__all__ = ["model_summary", "format_model_summary", "print_model_summary"]

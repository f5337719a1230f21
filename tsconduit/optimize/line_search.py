"""Deterministic line-search routines following Nocedal & Wright, ch. 3."""

from __future__ import annotations

from typing import Optional

import numpy as np

from .core import Array, Gradient, Objective


class _LineRestriction:
    """φ(α) = f(x + αp) and φ'(α) = ∇f(x + αp)·p with evaluation counting.

    Non-finite objective values map to +inf so a step that leaves the stable
    region is treated as too long.
    """

    def __init__(self, f: Objective, grad: Optional[Gradient], x: Array, p: Array):
        self.f = f
        self.grad = grad
        self.x = x
        self.p = p
        self.nfev = 0

    def value(self, alpha: float) -> float:
        self.nfev += 1
        value = float(self.f(self.x + alpha * self.p))
        return value if np.isfinite(value) else np.inf

    def slope(self, alpha: float) -> float:
        return float(np.dot(self.grad(self.x + alpha * self.p), self.p))


def backtracking_armijo(
    f: Objective,
    x: Array,
    p: Array,
    grad_fx: Array,
    alpha0: float = 1.0,
    rho: float = 0.5,
    c: float = 1e-4,
    max_iter: int = 50,
    fx: float | None = None,
) -> tuple[float, int]:
    """Shrink the step by ``rho`` until the sufficient-decrease test passes.

    Returns ``(0.0, nfev)`` when no acceptable step is found within
    ``max_iter`` trials.
    """
    if not (0 < c < 1):
        raise ValueError("Armijo constant c must lie in (0, 1)")
    if not (0 < rho < 1):
        raise ValueError("rho must lie in (0, 1)")
    line = _LineRestriction(f, None, np.asarray(x, dtype=float), np.asarray(p, dtype=float))
    phi0 = line.value(0.0) if fx is None else float(fx)
    slope0 = float(np.dot(grad_fx, p))
    alpha = float(alpha0)
    for _ in range(max_iter):
        if line.value(alpha) <= phi0 + c * alpha * slope0:
            return alpha, line.nfev
        alpha *= rho
    return 0.0, line.nfev


def wolfe_line_search(
    f: Objective,
    grad: Gradient,
    x: Array,
    p: Array,
    alpha0: float = 1.0,
    c1: float = 1e-4,
    c2: float = 0.9,
    max_iter: int = 40,
) -> tuple[float, int]:
    """Find a step satisfying the strong Wolfe conditions.

    The bracketing phase doubles the step until the sufficient-decrease test
    fails, the objective stops decreasing, or the slope turns non-negative;
    the bracket is then narrowed by :func:`_zoom`.

    Raises:
        ValueError: If ``p`` is not a descent direction at ``x``.
    """
    if not (0 < c1 < c2 < 1):
        raise ValueError("Require 0 < c1 < c2 < 1 for Wolfe conditions.")

    line = _LineRestriction(f, grad, np.asarray(x, dtype=float), np.asarray(p, dtype=float))
    phi0 = line.value(0.0)
    slope0 = line.slope(0.0)
    if slope0 >= 0:
        raise ValueError("Search direction must be a descent direction.")

    prev_alpha, prev_phi = 0.0, phi0
    alpha = float(alpha0)
    for iteration in range(max_iter):
        phi_alpha = line.value(alpha)
        too_far = phi_alpha > phi0 + c1 * alpha * slope0
        if too_far or (iteration > 0 and phi_alpha >= prev_phi):
            return _zoom(line, prev_alpha, prev_phi, alpha, phi_alpha, phi0, slope0, c1, c2), line.nfev
        slope = line.slope(alpha)
        if not np.isfinite(slope):
            return _zoom(line, prev_alpha, prev_phi, alpha, phi_alpha, phi0, slope0, c1, c2), line.nfev
        if abs(slope) <= -c2 * slope0:
            return alpha, line.nfev
        if slope >= 0:
            return _zoom(line, alpha, phi_alpha, prev_alpha, prev_phi, phi0, slope0, c1, c2), line.nfev
        prev_alpha, prev_phi = alpha, phi_alpha
        alpha *= 2.0
    return prev_alpha, line.nfev


def _trial_step(lo: float, phi_lo: float, hi: float, phi_hi: float, slope_lo: float) -> float:
    """Safeguarded quadratic interpolation inside [lo, hi] (either order)."""
    width = hi - lo
    if np.isfinite(phi_hi) and np.isfinite(slope_lo):
        curvature = phi_hi - phi_lo - slope_lo * width
        if curvature > 0:
            step = lo - slope_lo * width * width / (2.0 * curvature)
            left, right = sorted((lo, hi))
            margin = 0.1 * abs(width)
            if left + margin <= step <= right - margin:
                return step
    return lo + 0.5 * width


def _zoom(
    line: _LineRestriction,
    lo: float,
    phi_lo: float,
    hi: float,
    phi_hi: float,
    phi0: float,
    slope0: float,
    c1: float,
    c2: float,
    max_iter: int = 32,
) -> float:
    """Narrow [lo, hi] until a strong Wolfe step is found.

    ``lo`` always satisfies sufficient decrease and has the lowest objective
    seen, so it is returned when the interval collapses.
    """
    slope_lo = line.slope(lo) if lo > 0 else slope0
    for _ in range(max_iter):
        alpha = _trial_step(lo, phi_lo, hi, phi_hi, slope_lo)
        phi_alpha = line.value(alpha)
        if phi_alpha > phi0 + c1 * alpha * slope0 or phi_alpha >= phi_lo:
            hi, phi_hi = alpha, phi_alpha
        else:
            slope = line.slope(alpha)
            if abs(slope) <= -c2 * slope0:
                return alpha
            if slope * (hi - lo) >= 0:
                hi, phi_hi = lo, phi_lo
            lo, phi_lo, slope_lo = alpha, phi_alpha, slope
        if abs(hi - lo) < 1e-12:
            break
    return lo


__all__ = ["backtracking_armijo", "wolfe_line_search"]

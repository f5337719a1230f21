"""Finite-difference helpers for the optimizers."""

from __future__ import annotations

from typing import Callable

import numpy as np

Array = np.ndarray
Objective = Callable[[Array], float]


def approx_grad(
    fun: Objective,
    x: Array,
    eps: float = 1.4901161193847656e-08,
    scheme: str = "forward",
    f0: float | None = None,
    return_evals: bool = False,
) -> Array | tuple[Array, int]:
    """Compute a finite-difference gradient approximation.

    Parameters
    ----------
    fun:
        Objective function returning a scalar given x.
    x:
        Point where the gradient is approximated.
    eps:
        Perturbation size for finite differences.
    scheme:
        ``"forward"`` (one extra evaluation per coordinate) or ``"central"``.
    f0:
        Objective value at ``x`` if already known; only used by the forward
        scheme.
    """
    if eps <= 0:
        raise ValueError("eps must be positive")
    if scheme not in ("forward", "central"):
        raise ValueError(f"scheme must be 'forward' or 'central', got {scheme}")
    x = np.asarray(x, dtype=float).copy()
    grad = np.zeros_like(x, dtype=float)
    evals = 0
    if scheme == "forward" and f0 is None:
        f0 = fun(x)
        evals += 1
    for i in range(x.size):
        ei = np.zeros_like(x)
        ei[i] = eps
        if scheme == "forward":
            grad[i] = (fun(x + ei) - f0) / eps
            evals += 1
        else:
            grad[i] = (fun(x + ei) - fun(x - ei)) / (2.0 * eps)
            evals += 2
    if return_evals:
        return grad, evals
    return grad


__all__ = ["Array", "Objective", "approx_grad"]

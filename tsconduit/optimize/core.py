"""Core interfaces shared by the optimization routines."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Optional

import numpy as np

Array = np.ndarray
Objective = Callable[[Array], float]
Gradient = Callable[[Array], Array]

RTOL = 1e-5
ATOL = 1e-10


@dataclass(frozen=True)
class Problem:
    """Container describing a smooth minimization problem.

    When ``grad`` is None the optimizers fall back to forward finite
    differences with step ``diff_step``.
    """

    fun: Objective
    grad: Optional[Gradient] = None
    dim: Optional[int] = None
    diff_step: float = 1.4901161193847656e-08


@dataclass
class OptimizeResult:
    """Result object returned by the optimizers in this package.

    ``x`` is always the lowest-objective iterate visited, whether or not the
    run converged.
    """

    x: Array
    fun: float
    nit: int
    success: bool
    message: str
    grad_norm: float
    nfev: int
    njev: int
    history: List[Array] = field(default_factory=list)


def check_convergence(grad_norm: float, tol: float, x_norm: float = 0.0) -> bool:
    """Return True if the gradient norm satisfies the relative tolerance."""
    return grad_norm <= max(tol * max(1.0, x_norm), ATOL)


__all__ = [
    "Array",
    "Objective",
    "Gradient",
    "Problem",
    "OptimizeResult",
    "check_convergence",
    "RTOL",
    "ATOL",
]

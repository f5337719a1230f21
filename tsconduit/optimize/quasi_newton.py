"""Limited-memory BFGS for smooth objectives with optional numeric gradients."""

from __future__ import annotations

import inspect
from collections import deque
from typing import Callable

import numpy as np

from .core import RTOL, OptimizeResult, Problem, check_convergence
from .line_search import backtracking_armijo, wolfe_line_search
from .utils import approx_grad

# Curvature pairs with sᵀy at or below this are not stored.
_MIN_CURVATURE = 1e-12


class _CurvatureMemory:
    """The last ``m`` step/gradient-change pairs and the two-loop recursion."""

    def __init__(self, m: int):
        self.steps: deque = deque(maxlen=m)
        self.changes: deque = deque(maxlen=m)

    def __len__(self) -> int:
        return len(self.steps)

    def clear(self) -> None:
        self.steps.clear()
        self.changes.clear()

    def update(self, s: np.ndarray, y: np.ndarray) -> bool:
        if float(np.dot(s, y)) <= _MIN_CURVATURE:
            return False
        self.steps.append(s)
        self.changes.append(y)
        return True

    def direction(self, grad: np.ndarray) -> np.ndarray:
        """Return -H·grad for the implicit inverse-Hessian approximation H."""
        q = grad.copy()
        coefficients = []
        for s, y in zip(reversed(self.steps), reversed(self.changes)):
            rho = 1.0 / float(np.dot(y, s))
            a = rho * float(np.dot(s, q))
            q -= a * y
            coefficients.append((rho, a))
        if self.steps:
            s, y = self.steps[-1], self.changes[-1]
            q *= float(np.dot(s, y) / np.dot(y, y))
        for (rho, a), s, y in zip(reversed(coefficients), self.steps, self.changes):
            b = rho * float(np.dot(y, q))
            q += (a - b) * s
        return -q


class _Evaluator:
    """Objective and gradient calls with evaluation counters."""

    def __init__(self, problem: Problem):
        self.problem = problem
        self.nfev = 0
        self.njev = 0

    def fun(self, x: np.ndarray) -> float:
        self.nfev += 1
        return float(self.problem.fun(x))

    def grad(self, x: np.ndarray, fx: float | None = None) -> np.ndarray:
        if self.problem.grad is not None:
            self.njev += 1
            return np.asarray(self.problem.grad(x), dtype=float)
        g, evals = approx_grad(
            self.problem.fun, x, eps=self.problem.diff_step, f0=fx, return_evals=True
        )
        self.nfev += int(evals)
        return g


def _line_search_requires_grad(func: Callable) -> bool:
    params = list(inspect.signature(func).parameters.values())
    return len(params) >= 2 and params[1].name == "grad"


def lbfgs(
    problem: Problem,
    x0: np.ndarray,
    m: int = 6,
    maxiter: int = 200,
    tol: float = RTOL,
    line_search: Callable = wolfe_line_search,
    max_line_search: int = 40,
    history: bool = False,
) -> OptimizeResult:
    """Limited-memory BFGS using two-loop recursion.

    The run stops when the relative gradient tolerance is met, when
    ``maxiter`` iterations have been taken, or when no step along the search
    direction lowers the objective. In every case the lowest-objective iterate
    visited is returned and ``success`` records whether the tolerance was met.

    ``line_search`` is either a Wolfe-style search taking ``(f, grad, x, p)``
    or an Armijo-style search taking ``(f, x, p, grad_fx)``.
    """
    if m <= 0:
        raise ValueError("Memory parameter m must be positive.")
    evaluator = _Evaluator(problem)
    x = np.asarray(x0, dtype=float).copy()
    trace = [x.copy()] if history else []

    fx = evaluator.fun(x)
    if not np.isfinite(fx):
        return OptimizeResult(
            x=x,
            fun=fx,
            nit=0,
            success=False,
            message="Objective is not finite at the starting point.",
            grad_norm=float("nan"),
            nfev=evaluator.nfev,
            njev=0,
            history=trace,
        )
    grad = evaluator.grad(x, fx)
    memory = _CurvatureMemory(m)
    wolfe = _line_search_requires_grad(line_search)
    best = (x.copy(), fx, grad.copy())
    success = False
    message = "Maximum iterations reached."
    nit = 0

    while nit < maxiter:
        if not np.all(np.isfinite(grad)):
            message = "Gradient is not finite."
            break
        if check_convergence(float(np.linalg.norm(grad)), tol, float(np.linalg.norm(x))):
            success = True
            message = "Gradient tolerance satisfied."
            break

        direction = memory.direction(grad)
        if float(np.dot(grad, direction)) >= 0.0:
            # Stale pairs; restart from steepest descent.
            memory.clear()
            direction = -grad
        alpha0 = 1.0 if len(memory) else min(1.0, 1.0 / float(np.linalg.norm(direction)))

        try:
            if wolfe:
                alpha, evals = line_search(
                    evaluator.problem.fun,
                    evaluator.grad,
                    x,
                    direction,
                    alpha0=alpha0,
                    max_iter=max_line_search,
                )
            else:
                alpha, evals = line_search(evaluator.problem.fun, x, direction, grad, alpha0=alpha0)
        except ValueError:
            alpha, evals = 0.0, 0
        evaluator.nfev += int(evals)

        fx_new = evaluator.fun(x + alpha * direction) if alpha > 0 else np.inf
        if not (np.isfinite(fx_new) and fx_new < fx):
            alpha, evals = backtracking_armijo(
                evaluator.problem.fun, x, direction, grad, alpha0=alpha0, fx=fx
            )
            evaluator.nfev += int(evals)
            if alpha <= 0.0:
                message = "Line search could not decrease the objective."
                break
            fx_new = evaluator.fun(x + alpha * direction)

        step = alpha * direction
        x_new = x + step
        grad_new = evaluator.grad(x_new, fx_new)
        memory.update(step, grad_new - grad)
        x, fx, grad = x_new, fx_new, grad_new
        if fx < best[1]:
            best = (x.copy(), fx, grad.copy())
        if history:
            trace.append(x.copy())
        nit += 1

    best_x, best_f, best_grad = best
    return OptimizeResult(
        x=best_x,
        fun=float(best_f),
        nit=nit,
        success=success,
        message=message,
        grad_norm=float(np.linalg.norm(best_grad)),
        nfev=evaluator.nfev,
        njev=evaluator.njev,
        history=trace,
    )


__all__ = ["lbfgs"]

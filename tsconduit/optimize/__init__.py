"""Deterministic quasi-Newton optimization used by the CSS estimator.

Example
-------
>>> import numpy as np
>>> from tsconduit.optimize import Problem, lbfgs
>>> def rosen(x):
...     return (1 - x[0])**2 + 100 * (x[1] - x[0]**2)**2
>>> res = lbfgs(Problem(fun=rosen, dim=2), np.array([-1.2, 1.0]), maxiter=500)
>>> bool(res.fun < 1e-4)
True
"""

from .core import ATOL, RTOL, OptimizeResult, Problem, check_convergence
from .line_search import backtracking_armijo, wolfe_line_search
from .quasi_newton import lbfgs
from .utils import approx_grad

__all__ = [
    "ATOL",
    "Problem",
    "OptimizeResult",
    "RTOL",
    "approx_grad",
    "backtracking_armijo",
    "check_convergence",
    "lbfgs",
    "wolfe_line_search",
]

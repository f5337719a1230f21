import numpy as np
import pytest

from tsconduit.optimize.line_search import backtracking_armijo, wolfe_line_search


def quadratic_fun(x: np.ndarray) -> float:
    return float(x.T @ x)


def quadratic_grad(x: np.ndarray) -> np.ndarray:
    return 2 * x


def rosen(x: np.ndarray) -> float:
    return (1 - x[0]) ** 2 + 100 * (x[1] - x[0] ** 2) ** 2


def rosen_grad(x: np.ndarray) -> np.ndarray:
    return np.array(
        [
            -2 * (1 - x[0]) - 400 * x[0] * (x[1] - x[0] ** 2),
            200 * (x[1] - x[0] ** 2),
        ]
    )


def test_backtracking_armijo_monotone():
    x = np.array([1.0, -2.0])
    grad = quadratic_grad(x)
    direction = -grad
    alpha, nevals = backtracking_armijo(quadratic_fun, x, direction, grad)
    assert 0 < alpha <= 1.0
    assert quadratic_fun(x + alpha * direction) <= quadratic_fun(x)
    assert nevals > 0


def test_backtracking_armijo_reuses_known_value():
    x = np.array([1.0, -2.0])
    grad = quadratic_grad(x)
    _, with_fx = backtracking_armijo(quadratic_fun, x, -grad, grad, fx=quadratic_fun(x))
    _, without_fx = backtracking_armijo(quadratic_fun, x, -grad, grad)
    assert without_fx == with_fx + 1


def test_backtracking_armijo_returns_zero_on_ascent_direction():
    x = np.array([1.0, -2.0])
    grad = quadratic_grad(x)
    alpha, nevals = backtracking_armijo(quadratic_fun, x, grad, grad, max_iter=5)
    assert alpha == 0.0
    assert nevals == 6


def test_backtracking_armijo_raises_on_invalid_params():
    x = np.array([1.0])
    grad = quadratic_grad(x)
    with pytest.raises(ValueError):
        backtracking_armijo(quadratic_fun, x, -grad, grad, c=1.5)
    with pytest.raises(ValueError):
        backtracking_armijo(quadratic_fun, x, -grad, grad, rho=1.1)


def test_wolfe_conditions_rosenbrock():
    x = np.array([-1.2, 1.0])
    grad = rosen_grad(x)
    direction = -grad
    alpha, _ = wolfe_line_search(rosen, rosen_grad, x, direction, alpha0=1e-3)
    phi0 = rosen(x)
    phi_alpha = rosen(x + alpha * direction)
    assert alpha > 0
    assert phi_alpha <= phi0 + 1e-4 * alpha * (grad @ direction)


def test_wolfe_zoom_phase_triggered():
    x = np.array([-1.2, 1.0])
    grad = rosen_grad(x)
    alpha, _ = wolfe_line_search(rosen, rosen_grad, x, -grad, alpha0=5.0)
    assert alpha < 1.0


def test_wolfe_rejects_ascent_direction():
    x = np.array([1.0, 1.0])
    grad = quadratic_grad(x)
    with pytest.raises(ValueError, match="descent direction"):
        wolfe_line_search(quadratic_fun, quadratic_grad, x, grad)


def test_wolfe_rejects_invalid_constants():
    x = np.array([1.0])
    with pytest.raises(ValueError):
        wolfe_line_search(quadratic_fun, quadratic_grad, x, -x, c1=0.9, c2=0.1)


def test_wolfe_handles_non_finite_objective():
    def barrier(x: np.ndarray) -> float:
        return float(x[0] ** 2) if x[0] > -0.5 else np.nan

    def barrier_grad(x: np.ndarray) -> np.ndarray:
        return np.array([2 * x[0]])

    x = np.array([1.0])
    alpha, _ = wolfe_line_search(barrier, barrier_grad, x, np.array([-2.0]), alpha0=1.0)
    assert np.isfinite(barrier(x + alpha * np.array([-2.0])))
    assert barrier(x + alpha * np.array([-2.0])) < barrier(x)

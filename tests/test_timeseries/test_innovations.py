"""Tests for the residual (innovations) computer."""

from __future__ import annotations

import numpy as np
import pytest

from tsconduit.exceptions import InvalidOrderError
from tsconduit.innovations import conditional_sum_squares, residuals


def reference_residuals(x, c, phi, theta):
    """Straightforward loop over the one-step predictions."""
    p, q = len(phi), len(theta)
    e = np.zeros(len(x))
    for t in range(p, len(x)):
        pred = c
        pred += sum(phi[j] * x[t - j - 1] for j in range(p))
        pred += sum(theta[j] * e[t - j - 1] for j in range(q) if t - j - 1 >= 0)
        e[t] = x[t] - pred
    return e


class TestResiduals:
    """Tests for residuals()."""

    def test_pure_ar(self):
        np.testing.assert_allclose(residuals(np.array([1.0, 2.0, 3.0]), 0.0, [1.0], []), [0, 1, 1])

    def test_leading_entries_are_zero(self, rng):
        x = rng.normal(size=20)
        res = residuals(x, 0.3, [0.2, -0.1, 0.05], [0.4])
        np.testing.assert_array_equal(res[:3], 0.0)

    def test_zero_model_returns_demeaned_series(self, rng):
        x = rng.normal(size=10)
        np.testing.assert_allclose(residuals(x, 1.5, [], []), x - 1.5)

    @pytest.mark.parametrize(
        "phi,theta",
        [([], [0.5]), ([0.6], [0.3]), ([0.5, -0.2], [0.4, 0.1, -0.3]), ([0.1, 0.2, 0.3], [])],
    )
    def test_matches_reference_recursion(self, rng, phi, theta):
        x = rng.normal(size=60)
        np.testing.assert_allclose(
            residuals(x, 0.2, phi, theta), reference_residuals(x, 0.2, phi, theta), atol=1e-12
        )

    def test_true_parameters_recover_noise(self, rng):
        n = 400
        eps = rng.normal(size=n)
        x = np.zeros(n)
        for t in range(n):
            x[t] = eps[t] + (0.5 * x[t - 1] + 0.3 * eps[t - 1] if t > 0 else 0.0)
        res = residuals(x, 0.0, [0.5], [0.3])
        # Initial condition e_0 = 0 decays geometrically with 0.3^t.
        np.testing.assert_allclose(res[20:], eps[20:], atol=1e-8)

    def test_ar_order_must_be_below_length(self):
        with pytest.raises(InvalidOrderError):
            residuals(np.ones(3), 0.0, [0.1, 0.1, 0.1], [])

    def test_non_finite_coefficients_rejected(self):
        with pytest.raises(ValueError, match="theta"):
            residuals(np.ones(5), 0.0, [], [np.nan])


class TestConditionalSumSquares:
    """Tests for the CSS objective."""

    def test_equals_sum_of_squared_residuals(self, rng):
        x = rng.normal(size=50)
        res = residuals(x, 0.1, [0.3], [0.2])
        assert conditional_sum_squares(x, 0.1, [0.3], [0.2]) == pytest.approx(np.dot(res, res))

    def test_explosive_filter_returns_inf(self, rng):
        x = rng.normal(size=2000)
        assert conditional_sum_squares(x, 0.0, [], [1e3]) == float("inf")

"""Tests for residual variance and information criteria."""

from __future__ import annotations

import numpy as np
import pytest

from tsconduit.diagnostics import (
    MIN_VARIANCE,
    aic,
    bic,
    compute_diagnostics,
    information_criterion,
    normalize_criterion,
    residual_variance,
)
from tsconduit.exceptions import InvalidOrderError


class TestCriteria:
    """Tests for AIC and BIC formulas."""

    def test_aic_formula(self):
        assert aic(2.0, 100, 3) == pytest.approx(6 + 100 * np.log(2.0))

    def test_bic_formula(self):
        assert bic(2.0, 100, 3) == pytest.approx(100 * np.log(2.0) + 3 * np.log(100))

    def test_bic_penalizes_more_than_aic_for_large_n(self):
        assert bic(1.0, 1000, 5) > aic(1.0, 1000, 5)

    def test_zero_variance_is_floored(self):
        assert aic(0.0, 10, 1) == pytest.approx(2 + 10 * np.log(MIN_VARIANCE))
        assert np.isfinite(bic(0.0, 10, 1))

    def test_information_criterion_dispatch(self):
        assert information_criterion("AIC", 1.5, 50, 2) == aic(1.5, 50, 2)
        assert information_criterion("bic", 1.5, 50, 2) == bic(1.5, 50, 2)

    def test_unknown_criterion(self):
        with pytest.raises(InvalidOrderError, match="criterion"):
            normalize_criterion("hqic")

    def test_residual_variance(self):
        assert residual_variance(np.array([1.0, -1.0, 2.0, 0.0])) == pytest.approx(1.5)
        with pytest.raises(ValueError):
            residual_variance(np.array([]))


class TestComputeDiagnostics:
    """Tests for compute_diagnostics()."""

    def test_fields(self, rng):
        x = rng.normal(size=120)
        diag, res = compute_diagnostics(x, 0.0, np.array([0.2]), np.array([0.1]))
        assert diag.nobs == 120
        assert diag.n_params == 2
        assert res.shape == (120,)
        assert diag.rss == pytest.approx(np.dot(res, res))
        assert diag.sigma2 == pytest.approx(diag.rss / 120)
        assert diag.aic == pytest.approx(aic(diag.sigma2, 120, 2))
        assert diag.bic == pytest.approx(bic(diag.sigma2, 120, 2))

    def test_explosive_coefficients_score_infinite(self, rng):
        x = rng.normal(size=2000)
        diag, _ = compute_diagnostics(x, 0.0, np.zeros(0), np.array([50.0]))
        assert diag.rss == float("inf")
        assert diag.aic == float("inf")

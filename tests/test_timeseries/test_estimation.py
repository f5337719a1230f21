"""Tests for the AR, MA and ARMA estimators."""

from __future__ import annotations

import numpy as np
import pytest

from tsconduit.config import CSSConfig
from tsconduit.exceptions import (
    EstimationError,
    InsufficientDataError,
    InvalidOrderError,
    SingularMatrixError,
)
from tsconduit.estimation import (
    EstimationResult,
    durbin_ar_order,
    estimate_burg,
    estimate_css,
    estimate_durbin,
    estimate_ols,
    estimate_yule_walker,
)
from tsconduit.innovations import conditional_sum_squares
from tsconduit.simulation import simulate_arma
from tsconduit.stats import mean, pacf

AR_ESTIMATORS = [estimate_ols, estimate_yule_walker, estimate_burg]


class TestEstimationResult:
    """Tests for the immutable result container."""

    def test_arrays_are_read_only(self):
        res = EstimationResult(method="ols", intercept=0.0, phi=[0.5, 0.1])
        assert res.ar_order == 2
        assert res.ma_order == 0
        with pytest.raises(ValueError):
            res.phi[0] = 1.0

    def test_source_array_not_aliased(self):
        phi = np.array([0.5])
        res = EstimationResult(method="ols", intercept=0.0, phi=phi)
        phi[0] = 9.0
        assert res.phi[0] == 0.5


class TestAREstimators:
    """Tests shared by OLS, Yule-Walker and Burg."""

    @pytest.mark.parametrize("estimator", AR_ESTIMATORS)
    def test_recovers_ar1(self, estimator, ar1_series):
        res = estimator(ar1_series, 1)
        assert res.phi.shape == (1,)
        assert res.phi[0] == pytest.approx(0.7, abs=0.05)
        assert res.intercept == 0.0
        assert res.converged

    @pytest.mark.parametrize("estimator", AR_ESTIMATORS)
    def test_recovers_ar1_half(self, estimator, ar1_factory):
        res = estimator(ar1_factory(5000, 0.5, seed=7), 1)
        assert res.phi[0] == pytest.approx(0.5, abs=0.05)

    @pytest.mark.parametrize("estimator", AR_ESTIMATORS)
    def test_recovers_ar2(self, estimator):
        x = simulate_arma(6000, [0.5, 0.3], [], seed=11)
        res = estimator(x, 2)
        np.testing.assert_allclose(res.phi, [0.5, 0.3], atol=0.06)

    @pytest.mark.parametrize("estimator", AR_ESTIMATORS)
    def test_method_name(self, estimator, ar1_series):
        assert estimator(ar1_series, 1).method in ("ols", "yule_walker", "burg")

    @pytest.mark.parametrize("estimator", AR_ESTIMATORS)
    @pytest.mark.parametrize("order", [0, 10, 2.0])
    def test_invalid_orders(self, estimator, order):
        with pytest.raises(InvalidOrderError):
            estimator(np.arange(10.0), order)

    @pytest.mark.parametrize("estimator", AR_ESTIMATORS)
    def test_zero_series_is_singular(self, estimator):
        with pytest.raises(SingularMatrixError):
            estimator(np.zeros(50), 2)

    def test_singular_error_carries_context(self):
        with pytest.raises(EstimationError) as excinfo:
            estimate_ols(np.zeros(20), 3)
        assert excinfo.value.estimator == "ols"
        assert excinfo.value.order == 3
        assert "ols (order=3)" in str(excinfo.value)

    def test_ols_does_not_increase_rss(self, rng):
        x = rng.normal(size=300).cumsum()
        res = estimate_ols(x, 3)
        fitted_rss = conditional_sum_squares(x, 0.0, res.phi, [])
        zero_rss = conditional_sum_squares(x, 0.0, np.zeros(3), [])
        assert fitted_rss <= zero_rss

    def test_ols_matches_lstsq(self, rng):
        x = rng.normal(size=200)
        X = np.column_stack([x[2:-1], x[1:-2], x[:-3]])
        expected, *_ = np.linalg.lstsq(X, x[3:], rcond=None)
        np.testing.assert_allclose(estimate_ols(x, 3).phi, expected, atol=1e-10)

    def test_yule_walker_and_burg_agree_on_long_series(self, ar1_series):
        yw = estimate_yule_walker(ar1_series, 3)
        burg = estimate_burg(ar1_series, 3)
        np.testing.assert_allclose(yw.phi, burg.phi, atol=0.02)

    def test_burg_order_one_reflection(self):
        x = np.array([1.0, 2.0, 3.0, 4.0])
        r0 = np.dot(x, x) / 4
        r1 = np.dot(x[1:], x[:-1]) / 3
        assert estimate_burg(x, 1).phi[0] == pytest.approx(r1 / r0)

    def test_burg_order_two_recursion(self):
        x = simulate_arma(40, [0.6, -0.3], [], seed=3)
        n = len(x)
        r0, r1, r2 = (np.dot(x[k:], x[: n - k]) / (n - k) for k in range(3))
        lam1 = r1 / r0
        e1 = r0 * (1.0 - lam1**2)
        lam2 = (r2 - lam1 * r1) / e1
        expected = [lam1 - lam2 * lam1, lam2]
        np.testing.assert_allclose(estimate_burg(x, 2).phi, expected, rtol=1e-10, atol=1e-12)
        np.testing.assert_allclose(estimate_burg(x, 2).phi, [0.524883, -0.299282], atol=1e-5)

    def test_burg_order_three_uses_previous_coefficients(self, rng):
        x = rng.normal(size=120)
        n = len(x)
        r = [np.dot(x[k:], x[: n - k]) / (n - k) for k in range(4)]
        a1 = r[1] / r[0]
        e = r[0] * (1.0 - a1**2)
        lam2 = (r[2] - a1 * r[1]) / e
        a1, a2 = a1 - lam2 * a1, lam2
        e *= 1.0 - lam2**2
        lam3 = (r[3] - a1 * r[2] - a2 * r[1]) / e
        expected = [a1 - lam3 * a2, a2 - lam3 * a1, lam3]
        np.testing.assert_allclose(estimate_burg(x, 3).phi, expected, rtol=1e-10, atol=1e-12)

    def test_burg_moments_are_not_centred(self):
        x = np.array([5.0, 6.0, 5.0, 6.0, 5.0])
        r0 = np.dot(x, x) / 5
        r1 = np.dot(x[1:], x[:-1]) / 4
        assert estimate_burg(x, 1).phi[0] == pytest.approx(r1 / r0)


class TestDurbin:
    """Tests for Durbin's two-stage MA estimator."""

    def test_long_ar_order(self):
        assert durbin_ar_order(1, 1000) == round(np.log(10 * 1000))
        assert durbin_ar_order(2, 500) == 9

    def test_recovers_ma1(self):
        x = simulate_arma(5000, [], [0.6], seed=3)
        res = estimate_durbin(x, 1)
        assert res.method == "durbin"
        assert res.phi.shape == (0,)
        assert res.theta[0] == pytest.approx(0.6, abs=0.08)

    def test_recovers_ma2(self):
        x = simulate_arma(8000, [], [0.4, 0.2], seed=5)
        res = estimate_durbin(x, 2)
        np.testing.assert_allclose(res.theta, [0.4, 0.2], atol=0.08)

    def test_short_series(self):
        with pytest.raises(InsufficientDataError) as excinfo:
            estimate_durbin(np.random.normal(size=6), 2)
        assert excinfo.value.estimator == "durbin"
        assert excinfo.value.order == 2
        assert str(excinfo.value).startswith("durbin (order=2): needs at least 9 observations")

    def test_zero_series_is_singular(self):
        with pytest.raises(SingularMatrixError) as excinfo:
            estimate_durbin(np.zeros(200), 1)
        assert excinfo.value.estimator == "durbin"

    def test_invalid_order(self):
        with pytest.raises(InvalidOrderError):
            estimate_durbin(np.random.normal(size=100), 0)


class TestCSS:
    """Tests for conditional-sum-of-squares estimation."""

    def test_recovers_arma11(self):
        x = simulate_arma(1000, [0.5], [0.3], seed=21)
        res = estimate_css(x, 1, 1)
        assert res.method == "css"
        assert res.phi[0] == pytest.approx(0.5, abs=0.12)
        assert res.theta[0] == pytest.approx(0.3, abs=0.12)
        assert res.intercept == pytest.approx(0.0, abs=0.2)
        assert res.iterations > 0

    def test_recovers_intercept(self):
        x = simulate_arma(1000, [0.4], [], noise_mean=1.2, seed=8)
        res = estimate_css(x, 1, 0)
        # Mean of the process is c / (1 - phi) with c = noise mean.
        assert res.intercept == pytest.approx(1.2, abs=0.25)
        assert res.phi[0] == pytest.approx(0.4, abs=0.1)

    def test_does_not_worsen_starting_point(self, rng):
        x = rng.normal(size=400)
        res = estimate_css(x, 1, 1)
        start = conditional_sum_squares(x, mean(x), [pacf(x, max_lag=1)[0]], [1.0])
        assert res.objective <= start
        assert np.isfinite(res.objective)

    def test_mean_only_model(self, rng):
        x = rng.normal(loc=3.0, size=300)
        res = estimate_css(x, 0, 0)
        assert res.ar_order == 0
        assert res.ma_order == 0
        assert res.intercept == pytest.approx(x.mean(), abs=1e-4)

    def test_iteration_cap_is_reported(self, log_stream):
        x = simulate_arma(500, [0.5], [0.3], seed=2)
        res = estimate_css(x, 1, 1, CSSConfig(max_iterations=1))
        assert not res.converged
        assert res.iterations == 1
        assert np.all(np.isfinite(res.phi))
        assert "without convergence" in log_stream.getvalue()

    def test_invalid_orders(self):
        with pytest.raises(InvalidOrderError):
            estimate_css(np.ones(5), 5, 0)
        with pytest.raises(InvalidOrderError):
            estimate_css(np.ones(5), 0, -1)

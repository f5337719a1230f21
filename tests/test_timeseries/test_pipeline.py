"""End-to-end tests: simulate, select an order, fit and report."""

from __future__ import annotations

import numpy as np
import pytest

import tsconduit


def test_public_api_exports_resolve():
    for name in tsconduit.__all__:
        assert hasattr(tsconduit, name), name


def test_arima_pipeline():
    x = tsconduit.ARIMA.simulate(800, [0.6], 1, [], seed=71)
    fit = tsconduit.ARIMA.autofit(x, d=1, max_ar_order=2, max_ma_order=1, criterion="bic")
    assert fit.d == 1
    assert fit.ar_order >= 1
    assert fit.nobs == 799
    assert "ARIMA" in fit.summary()


def test_ar_methods_agree():
    x = tsconduit.AR.simulate(5000, [0.5, -0.2], seed=72)
    fits = {m: tsconduit.AR(2, method=m).fit(x) for m in ("ols", "yule_walker", "burg")}
    for fit in fits.values():
        np.testing.assert_allclose(fit.phi, [0.5, -0.2], atol=0.05)
    sigmas = [fit.sigma2 for fit in fits.values()]
    assert max(sigmas) - min(sigmas) < 0.01


def test_residuals_of_fit_are_white(ar1_series):
    fit = tsconduit.AR(1, method="ols").fit(ar1_series)
    rho = tsconduit.acf(fit.residuals[1:], max_lag=5)
    assert np.all(np.abs(rho[1:]) < 0.05)


def test_pacf_identifies_ar_order():
    x = tsconduit.simulate_ar(10000, [0.4, 0.3], seed=73)
    values = tsconduit.pacf(x, max_lag=6)
    assert abs(values[1]) == pytest.approx(0.3, abs=0.05)
    assert np.all(np.abs(values[2:]) < 0.05)

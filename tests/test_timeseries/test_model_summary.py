"""Tests for the fitted-model summary utilities."""

from __future__ import annotations

from io import StringIO

import pytest

from tsconduit.models import AR, ARIMA
from tsconduit.simulation import simulate_arima
from tsconduit.summary import format_model_summary, model_summary, print_model_summary


@pytest.fixture
def ar_fit(ar1_series):
    return AR(2, method="burg").fit(ar1_series)


def test_model_summary_keys(ar_fit):
    summary = model_summary(ar_fit)
    assert summary["model"] == "AR(2)"
    assert summary["family"] == "AR"
    assert summary["method"] == "burg"
    assert summary["order"] == (2, 0, 0)
    assert len(summary["phi"]) == 2
    assert summary["theta"] == []
    assert summary["nobs"] == 5000
    assert isinstance(summary["converged"], bool)


def test_format_model_summary_lists_coefficients(ar_fit):
    text = format_model_summary(ar_fit)
    lines = text.splitlines()
    assert lines[0] == "AR(2) fitted by burg"
    assert lines[1] == "=" * 50
    assert "MA coefficients: -" in text
    assert "Observations: 5000" in text


def test_integrated_models_report_d():
    x = simulate_arima(300, [0.5], 1, [], seed=1)
    text = format_model_summary(ARIMA(1, 1, 0).fit(x))
    assert "Differencing order: 1" in text
    assert text.startswith("ARIMA(1, 1, 0) fitted by css")


def test_print_model_summary_writes_to_file(ar_fit):
    buffer = StringIO()
    print_model_summary(ar_fit, file=buffer)
    assert buffer.getvalue() == format_model_summary(ar_fit) + "\n"


def test_print_model_summary_defaults_to_stdout(ar_fit, capsys):
    print_model_summary(ar_fit)
    assert "AR(2) fitted by burg" in capsys.readouterr().out

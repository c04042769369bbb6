"""Tests for display formatting, interpretation bands and the HTML report."""

import math

import pytest

from horizon.engine import compute_detectability
from horizon.reporting import (
    build_html_report, format_number, format_percent, interpretation,
    metrics_table, power_band, power_color, regime_color, regime_label,
)


@pytest.mark.parametrize("value, expected", [
    (0.5, "0.500"),
    (1.23456, "1.235"),
    (10000, "10000.000"),
    (0.0001, "0.000"),
    (0.00005, "5.00e-05"),
    (20000, "2.00e+04"),
    (0.0, "0.00e+00"),
    (-1.5, "-1.50e+00"),
])
def test_format_number(value, expected):
    assert format_number(value) == expected


def test_format_number_decimals():
    assert format_number(0.123456, decimals=2) == "0.12"


def test_format_number_nan():
    assert format_number(math.nan) == "nan"


@pytest.mark.parametrize("value, expected", [
    (0.00001, "< 0.01%"),
    (0.99999, "> 99.99%"),
    (0.5, "50.00%"),
    (0.0327, "3.27%"),
    (0.0001, "0.01%"),
])
def test_format_percent(value, expected):
    assert format_percent(value) == expected


@pytest.mark.parametrize("power, band", [
    (0.0, "undetectable"),
    (0.1999, "undetectable"),
    (0.2, "underpowered"),
    (0.7999, "underpowered"),
    (0.8, "adequate"),
    (1.0, "adequate"),
])
def test_power_band(power, band):
    assert power_band(power) == band


@pytest.mark.parametrize("gamma, label", [
    (100.0, "Deep in the Trap"),
    (10.0, "High-Dimensional Trap"),
    (1.5, "High-Dimensional Trap"),
    (1.0, "Approaching Horizon"),
    (0.5, "Approaching Horizon"),
    (0.1, "Below Horizon"),
    (0.001, "Below Horizon"),
])
def test_regime_label(gamma, label):
    assert regime_label(gamma) == label


def test_regime_and_power_colors():
    assert regime_color(100.0) == "#ff4444"
    assert regime_color(0.001) == "#22cc66"
    assert power_color(0.9) == "#22cc66"
    assert power_color(0.8) == "#44aa44"
    assert power_color(0.3) == "#ff8844"
    assert power_color(0.1) == "#ff4444"


class TestInterpretation:
    def test_undetectable(self, high_dim_metrics):
        text = interpretation(high_dim_metrics, 0.1)
        assert "below the noise floor" in text
        assert "delta = 0.100" in text
        assert "sigma_min = 0.632" in text

    def test_underpowered(self, low_dim_metrics):
        text = interpretation(low_dim_metrics, 0.1)
        assert text.startswith("Your study is underpowered.")

    def test_adequate(self):
        m = compute_detectability(100, 100000, 0.2, 0.2)
        assert power_band(m.power) == "adequate"
        assert "Causal inference is feasible." in interpretation(m, 0.2)


def test_metrics_table(high_dim_metrics):
    tbl = metrics_table(high_dim_metrics)
    rows = dict(tbl["rows"])
    assert rows["regime"] == "Deep in the Trap"
    assert rows["power band"] == "undetectable"
    assert rows["false positive rate (alpha)"].startswith("2.2")


class TestHtmlReport:
    def test_writes_self_contained_file(self, tmp_path, high_dim_metrics, capsys):
        out = build_html_report(high_dim_metrics, 0.1, out_path=tmp_path / "report.html")
        text = out.read_text(encoding="utf-8")
        assert text.startswith("<!DOCTYPE html>")
        assert "Interpretation:" in text
        assert "Deep in the Trap" in text
        assert "<h2>Detection statistics</h2>" in text
        assert "Wrote" in capsys.readouterr().out

    def test_embeds_tables_and_figures(self, tmp_path, low_dim_metrics):
        fig = tmp_path / "power_vs_num_samples.png"
        fig.write_bytes(b"\x89PNG\r\n\x1a\nnot-really-an-image")
        extra = {"title": "Extra <table>", "headers": ["a", "b"], "rows": [[1, 2]]}
        out = build_html_report(
            low_dim_metrics, 0.1,
            out_path=tmp_path / "sub" / "report.html",
            tables=[extra],
            figures=[fig],
        )
        text = out.read_text(encoding="utf-8")
        assert "data:image/png;base64," in text
        assert "power_vs_num_samples.png" in text
        assert "Extra &lt;table&gt;" in text
        assert "<td>1</td><td>2</td>" in text

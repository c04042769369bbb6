"""Tests for the normal CDF approximation and the detectability engine."""

import dataclasses
import math
import subprocess
import sys
from pathlib import Path

import numpy as np
import pytest
from hypothesis import given, settings, strategies as st
from scipy.stats import norm

from horizon.engine import DetectabilityMetrics, compute_detectability, normal_cdf


finite_reals = st.floats(min_value=-50.0, max_value=50.0, allow_nan=False, allow_infinity=False)

valid_designs = st.tuples(
    st.floats(min_value=100, max_value=50_000),
    st.floats(min_value=10, max_value=100_000),
    st.floats(min_value=0.05, max_value=0.5),
    st.floats(min_value=0.01, max_value=0.5),
)


class TestNormalCDF:
    def test_zero_is_one_half(self):
        assert normal_cdf(0.0) == pytest.approx(0.5, abs=1e-8)

    @given(finite_reals)
    def test_antisymmetric(self, x):
        assert normal_cdf(-x) == pytest.approx(1.0 - normal_cdf(x), abs=1.5e-7)

    @given(finite_reals)
    def test_in_unit_interval(self, x):
        assert 0.0 <= normal_cdf(x) <= 1.0

    def test_monotone_non_decreasing(self):
        xs = np.linspace(-10.0, 10.0, 4001)
        vals = np.array([normal_cdf(x) for x in xs])
        assert np.all(np.diff(vals) >= -1e-12)

    def test_close_to_exact_cdf(self):
        xs = np.linspace(-8.0, 8.0, 1601)
        approx = np.array([normal_cdf(x) for x in xs])
        assert np.max(np.abs(approx - norm.cdf(xs))) < 1.5e-7

    def test_known_value_at_two(self):
        assert 1.0 - normal_cdf(2.0) == pytest.approx(0.02275, abs=1e-5)

    def test_infinities_saturate(self):
        assert normal_cdf(math.inf) == 1.0
        assert normal_cdf(-math.inf) == 0.0

    def test_nan_propagates(self):
        assert math.isnan(normal_cdf(math.nan))

    def test_accepts_numpy_scalars(self):
        assert normal_cdf(np.float64(1.0)) == normal_cdf(1.0)


class TestScenarios:
    def test_high_dimensional_design(self, high_dim_metrics):
        m = high_dim_metrics
        assert m.gamma == 100.0
        assert m.sigma_min == pytest.approx(0.2 * 100 ** 0.25, rel=1e-12)
        assert m.sigma_min == pytest.approx(0.6325, abs=1e-4)
        assert m.threshold == pytest.approx(1.2649, abs=1e-4)
        assert m.z_score == pytest.approx(0.1581, abs=1e-4)
        assert m.false_positive_rate == pytest.approx(0.02275, abs=1e-5)
        assert m.false_negative_rate == pytest.approx(0.9673, abs=5e-4)
        assert m.power == pytest.approx(0.0327, abs=5e-4)
        assert m.is_high_dimensional
        assert not m.is_detectable

    def test_high_dimensional_design_against_exact_cdf(self, high_dim_metrics):
        m = high_dim_metrics
        arg = (m.threshold - 0.1) / m.sigma_min
        assert m.false_negative_rate == pytest.approx(norm.cdf(arg), abs=1.5e-7)

    def test_low_dimensional_design(self, low_dim_metrics):
        m = low_dim_metrics
        assert m.gamma == pytest.approx(0.001, rel=1e-15)
        assert m.sigma_min == pytest.approx(0.0357, abs=1e-4)
        assert m.threshold == pytest.approx(0.0714, abs=1e-4)
        assert m.is_detectable
        assert not m.is_high_dimensional
        assert m.power > 0.75
        assert m.power == pytest.approx(norm.sf((m.threshold - 0.1) / m.sigma_min), abs=1.5e-7)


class TestInvariants:
    @given(valid_designs)
    def test_rates_in_unit_interval(self, design):
        m = compute_detectability(*design)
        for value in (m.false_positive_rate, m.false_negative_rate, m.power):
            assert 0.0 <= value <= 1.0
        assert m.power == 1.0 - m.false_negative_rate

    @given(valid_designs)
    def test_threshold_is_twice_noise_floor(self, design):
        m = compute_detectability(*design)
        assert m.threshold == 2 * m.sigma_min
        assert m.gamma >= 0 and m.sigma_min >= 0 and m.threshold >= 0

    @given(valid_designs)
    def test_false_positive_rate_is_constant(self, design):
        # threshold / sigma_min is exactly 2 for every finite non-zero floor.
        m = compute_detectability(*design)
        assert m.false_positive_rate == 1.0 - normal_cdf(2.0)

    @given(valid_designs)
    def test_detectable_matches_threshold(self, design):
        m = compute_detectability(*design)
        assert m.is_detectable == (design[3] > m.threshold)
        assert m.is_high_dimensional == (m.gamma > 1)

    @given(valid_designs)
    def test_idempotent(self, design):
        assert compute_detectability(*design) == compute_detectability(*design)

    def test_power_increases_with_samples(self):
        powers = [compute_detectability(20000, n, 0.2, 0.1).power for n in (10, 100, 1000, 10000, 100000)]
        assert powers == sorted(powers)

    def test_unit_gamma_is_not_high_dimensional(self):
        m = compute_detectability(500, 500, 0.2, 0.1)
        assert m.gamma == 1.0
        assert not m.is_high_dimensional
        assert compute_detectability(501, 500, 0.2, 0.1).is_high_dimensional


class TestDegenerateInputs:
    def test_zero_samples(self):
        m = compute_detectability(20000, 0, 0.2, 0.1)
        assert m.gamma == math.inf
        assert m.sigma_min == math.inf
        assert m.threshold == math.inf
        assert m.z_score == 0.0
        # inf / inf is nan, and nan flows through the CDF.
        assert math.isnan(m.false_positive_rate)
        assert math.isnan(m.false_negative_rate)
        assert math.isnan(m.power)
        assert m.is_high_dimensional
        assert not m.is_detectable

    def test_zero_over_zero(self):
        m = compute_detectability(0, 0, 0.2, 0.1)
        assert math.isnan(m.gamma)
        assert math.isnan(m.sigma_min)
        assert not m.is_high_dimensional
        assert not m.is_detectable

    def test_negative_gamma_gives_nan_floor(self):
        m = compute_detectability(-100, 100, 0.2, 0.1)
        assert m.gamma == -1.0
        assert math.isnan(m.sigma_min)
        assert math.isnan(m.power)

    def test_zero_features_gives_zero_floor(self):
        m = compute_detectability(0, 100, 0.2, 0.1)
        assert m.sigma_min == 0.0
        assert m.z_score == math.inf
        assert math.isnan(m.false_positive_rate)
        # (0 - 0.1) / 0 is -inf, so the CDF saturates to 0 and power to 1.
        assert m.false_negative_rate == 0.0
        assert m.power == 1.0
        assert m.is_detectable

    def test_negative_variance_is_computed_literally(self):
        m = compute_detectability(20000, 200, -0.2, 0.1)
        assert m.sigma_min < 0
        assert m.threshold == 2 * m.sigma_min
        assert m.false_positive_rate == 1.0 - normal_cdf(2.0)

    @settings(max_examples=200)
    @given(st.tuples(*[st.floats(allow_nan=True, allow_infinity=True)] * 4))
    def test_never_raises(self, design):
        m = compute_detectability(*design)
        assert isinstance(m, DetectabilityMetrics)

    def test_repeated_nan_results_are_identical(self):
        a = compute_detectability(20000, 0, 0.2, 0.1)
        b = compute_detectability(20000, 0, 0.2, 0.1)
        assert repr(a) == repr(b)


class TestRecord:
    def test_frozen(self, high_dim_metrics):
        with pytest.raises(dataclasses.FrozenInstanceError):
            high_dim_metrics.power = 1.0

    def test_to_dict(self, high_dim_metrics):
        d = high_dim_metrics.to_dict()
        assert list(d) == [
            "gamma", "sigma_min", "threshold", "z_score",
            "false_positive_rate", "false_negative_rate", "power",
            "is_high_dimensional", "is_detectable",
        ]
        assert all(type(v) in (float, bool) for v in d.values())

    def test_summary(self, high_dim_metrics):
        text = high_dim_metrics.summary()
        assert "sigma_min" in text
        assert "high-dimensional (gamma > 1):   True" in text
        assert "detectable (delta > threshold): False" in text


def test_engine_import_leaves_matplotlib_alone():
    code = (
        "import sys, horizon.engine, horizon.config; "
        "print('matplotlib' in sys.modules)"
    )
    result = subprocess.run(
        [sys.executable, "-c", code],
        capture_output=True, text=True, check=True,
        cwd=Path(__file__).resolve().parents[1],
    )
    assert result.stdout.strip() == "False"

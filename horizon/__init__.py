"""
horizon -- detectability limits for high-dimensional causal inference.

In high-dimensional data a 1/f background of correlations sets a noise floor
that no algorithm can get below.  The "horizon" package computes that floor
for an experimental design and reports whether an expected effect is
detectable above it.

Key exports
-----------
compute_detectability : function
    The engine.  Maps (num_features, num_samples, background_variance,
    expected_effect) to a DetectabilityMetrics record: dimensionality ratio
    gamma = p/N, noise floor sigma_min = sigma_fixed * gamma^(1/4), a
    2 sigma_min detection threshold, and the resulting error rates and power.
normal_cdf : function
    Abramowitz & Stegun approximation of the standard normal CDF used by the
    engine.
DetectabilityMetrics : dataclass
    Immutable result record.
min_samples_for_power, max_features_for_power, minimum_detectable_effect :
    Planning helpers that invert the engine for a target power.
"""

from horizon.engine import compute_detectability, normal_cdf, DetectabilityMetrics
from horizon.planning import (
    min_samples_for_power,
    max_features_for_power,
    minimum_detectable_effect,
)

__all__ = [
    "compute_detectability",
    "normal_cdf",
    "DetectabilityMetrics",
    "min_samples_for_power",
    "max_features_for_power",
    "minimum_detectable_effect",
]

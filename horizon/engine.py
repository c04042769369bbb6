"""Detectability engine: noise floor, threshold, and power of a design.

Given the four parameters of an experiment -- feature count p, sample count
N, background variance sigma_fixed and expected effect size delta -- the
engine evaluates the spectral-wall formulas

    gamma     = p / N
    sigma_min = sigma_fixed * gamma ** (1/4)
    threshold = 2 * sigma_min
    power     = 1 - Phi((threshold - delta) / sigma_min)

and returns the result as an immutable ``DetectabilityMetrics`` record.

Usage::

    from horizon import compute_detectability
    m = compute_detectability(20000, 200, 0.2, 0.1)
    print(m.summary())

The engine is total: it never validates, clamps or raises.  Degenerate
inputs (N = 0, negative variances, ...) are represented with IEEE-754
sentinels (inf, nan) that propagate through every dependent field.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass

import numpy as np

from horizon.config import THRESHOLD_SIGMAS, GAMMA_EXPONENT


# Abramowitz & Stegun 7.1.26 coefficients for erf.
_A1 = 0.254829592
_A2 = -0.284496736
_A3 = 1.421413741
_A4 = -1.453152027
_A5 = 1.061405429
_P = 0.3275911


def normal_cdf(x: float) -> float:
    """Standard normal CDF via the Abramowitz & Stegun 7.1.26 approximation.

    Phi(x) = (1 + erf(x / sqrt(2))) / 2, with erf approximated by a fifth
    order polynomial in t = 1 / (1 + p|x|) times exp(-x^2).  The absolute
    error on erf is below 1.5e-7 for every real x.

    Every downstream metric depends on this exact polynomial, not on
    ``scipy.stats.norm.cdf``.  NaN maps to NaN; +inf and -inf map to 1 and 0.
    """
    x = float(x)
    sign = -1.0 if x < 0 else 1.0
    x = abs(x) / math.sqrt(2.0)
    t = 1.0 / (1.0 + _P * x)
    y = 1.0 - (((((_A5 * t + _A4) * t) + _A3) * t + _A2) * t + _A1) * t * math.exp(-x * x)
    return 0.5 * (1.0 + sign * y)


@dataclass(frozen=True)
class DetectabilityMetrics:
    """Detection statistics of a single experimental design."""

    gamma: float
    sigma_min: float
    threshold: float
    z_score: float
    false_positive_rate: float
    false_negative_rate: float
    power: float
    is_high_dimensional: bool
    is_detectable: bool

    def to_dict(self) -> dict:
        return asdict(self)

    def summary(self) -> str:
        """Return a readable summary table."""
        lines = [
            "Detection statistics",
            "-" * 44,
            f"  dimensionality ratio  gamma     {self.gamma:12.6g}",
            f"  noise floor           sigma_min {self.sigma_min:12.6g}",
            f"  detection threshold   2*sigma   {self.threshold:12.6g}",
            f"  z-score               delta/sig {self.z_score:12.6g}",
            f"  false positive rate   alpha     {self.false_positive_rate:12.6g}",
            f"  false negative rate   beta      {self.false_negative_rate:12.6g}",
            f"  statistical power     1-beta    {self.power:12.6g}",
            "-" * 44,
            f"  high-dimensional (gamma > 1):   {self.is_high_dimensional}",
            f"  detectable (delta > threshold): {self.is_detectable}",
        ]
        return "\n".join(lines)


def compute_detectability(
    num_features: float,
    num_samples: float,
    background_variance: float,
    expected_effect: float,
) -> DetectabilityMetrics:
    """Evaluate the noise floor, threshold and error rates of a design.

    Parameters
    ----------
    num_features : float
        Number of measured variables p (genes, transcripts, ...).
    num_samples : float
        Number of independent observations N.  ``num_samples = 0`` yields a
        non-finite ``gamma`` (inf, or nan when ``num_features`` is 0 too).
    background_variance : float
        Typical SD of background pairwise correlations, sigma_fixed.
    expected_effect : float
        True effect size delta to be detected.

    Returns
    -------
    DetectabilityMetrics

    Notes
    -----
    The arithmetic is done in numpy float64 scalars with all floating-point
    warnings silenced, so division by zero gives inf, 0/0 gives nan and a
    negative gamma raised to the 1/4 power gives nan instead of an exception
    or a complex number.  The evaluation order is fixed (gamma, sigma_min,
    threshold, z_score, false_positive_rate, false_negative_rate, power) so
    repeated calls are bit-identical.

    The false positive rate is 1 - Phi(threshold / sigma_min) and the
    threshold is always 2 * sigma_min, so it equals 1 - Phi(2) ~ 0.0228 for
    every design with a finite non-zero noise floor.
    """
    p = np.float64(num_features)
    n = np.float64(num_samples)
    sigma_fixed = np.float64(background_variance)
    delta = np.float64(expected_effect)

    with np.errstate(all="ignore"):
        gamma = p / n
        sigma_min = sigma_fixed * np.power(gamma, GAMMA_EXPONENT)
        threshold = THRESHOLD_SIGMAS * sigma_min
        z_score = delta / sigma_min
        false_positive_rate = 1.0 - normal_cdf(threshold / sigma_min)
        false_negative_rate = normal_cdf((threshold - delta) / sigma_min)
        power = 1.0 - false_negative_rate

    return DetectabilityMetrics(
        gamma=float(gamma),
        sigma_min=float(sigma_min),
        threshold=float(threshold),
        z_score=float(z_score),
        false_positive_rate=float(false_positive_rate),
        false_negative_rate=float(false_negative_rate),
        power=float(power),
        is_high_dimensional=bool(gamma > 1),
        is_detectable=bool(delta > threshold),
    )

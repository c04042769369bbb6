"""Design planning: invert the detectability engine for a target power.

The engine answers "what power does this design have?".  The helpers here
answer the inverse questions a study planner asks:

* min_samples_for_power -- how many samples N do I need?
* max_features_for_power -- how many features p can I afford to measure?
* minimum_detectable_effect -- what is the smallest delta I can detect?

For positive inputs power is strictly increasing in N and in delta and
strictly decreasing in p, because the noise floor sigma_min scales as
(p / N)^(1/4).  Each helper brackets the crossing point and solves it with
``scipy.optimize.brentq`` against ``compute_detectability`` itself, so the
answers agree with the calculator's CDF approximation rather than with the
exact normal CDF.  Integer answers are then nudged by one unit at a time
until they are the tightest integer that meets the target.
"""

import math

from scipy.optimize import brentq

from horizon.config import (
    TARGET_POWER, THRESHOLD_SIGMAS,
    MAX_SAMPLES_SEARCH, MAX_FEATURES_SEARCH,
)
from horizon.engine import compute_detectability, normal_cdf


def _check_positive(name: str, value: float) -> None:
    if not (math.isfinite(value) and value > 0):
        raise ValueError(f"{name} must be a positive finite number, got {value!r}.")


def _check_target(target_power: float) -> None:
    if not (0.0 < target_power < 1.0):
        raise ValueError(f"target_power must be in (0, 1), got {target_power!r}.")


def floor_power() -> float:
    """Power of a design with no signal, 1 - Phi(THRESHOLD_SIGMAS) ~ 0.0228.

    Every design's power lies above this value, so any target at or below it
    is met trivially.
    """
    return 1.0 - normal_cdf(THRESHOLD_SIGMAS)


def min_samples_for_power(
    num_features: float,
    background_variance: float,
    expected_effect: float,
    target_power: float = TARGET_POWER,
    *,
    max_samples: float = MAX_SAMPLES_SEARCH,
) -> int:
    """Smallest integer sample count N whose power reaches *target_power*.

    Parameters
    ----------
    num_features : float
        Feature count p of the design.
    background_variance : float
        sigma_fixed of the design.
    expected_effect : float
        Effect size delta to be detected.
    target_power : float
        Required power, strictly between 0 and 1 (default 0.8).
    max_samples : float
        Upper end of the search bracket.

    Returns
    -------
    int

    Raises
    ------
    ValueError
        If an input is not positive, the target is outside (0, 1), or the
        target is not reached by ``max_samples``.
    """
    _check_positive("num_features", num_features)
    _check_positive("background_variance", background_variance)
    _check_positive("expected_effect", expected_effect)
    _check_target(target_power)

    def power_at(n: float) -> float:
        return compute_detectability(num_features, n, background_variance, expected_effect).power

    if power_at(1) >= target_power:
        return 1
    if power_at(max_samples) < target_power:
        raise ValueError(
            f"Power {target_power:g} is not reached with up to {max_samples:g} samples."
        )

    # Solve on log10(N): power changes over many decades of N.
    root = brentq(
        lambda log_n: power_at(10.0 ** log_n) - target_power,
        0.0, math.log10(max_samples), xtol=1e-12,
    )
    n = max(1, math.ceil(10.0 ** root))
    while power_at(n) < target_power:
        n += 1
    while n > 1 and power_at(n - 1) >= target_power:
        n -= 1
    return int(n)


def max_features_for_power(
    num_samples: float,
    background_variance: float,
    expected_effect: float,
    target_power: float = TARGET_POWER,
    *,
    min_features: float = 1,
    max_features: float = MAX_FEATURES_SEARCH,
) -> int:
    """Largest integer feature count p whose power still reaches *target_power*.

    The answer is never below ``ceil(min_features)``.  Raises ``ValueError`` if
    that integer misses the target, or if the target is still met at
    ``max_features`` (no finite answer in the bracket).
    """
    _check_positive("num_samples", num_samples)
    _check_positive("background_variance", background_variance)
    _check_positive("expected_effect", expected_effect)
    _check_positive("min_features", min_features)
    _check_target(target_power)

    def power_at(p: float) -> float:
        return compute_detectability(p, num_samples, background_variance, expected_effect).power

    if power_at(min_features) < target_power:
        raise ValueError(
            f"Power {target_power:g} is not reached even with {min_features:g} features."
        )
    if power_at(max_features) >= target_power:
        raise ValueError(
            f"Power stays above {target_power:g} up to {max_features:g} features."
        )

    root = brentq(
        lambda log_p: power_at(10.0 ** log_p) - target_power,
        math.log10(min_features), math.log10(max_features), xtol=1e-12,
    )
    lowest = math.ceil(min_features)
    p = max(lowest, math.floor(10.0 ** root))
    while p > lowest and power_at(p) < target_power:
        p -= 1
    if power_at(p) < target_power:
        raise ValueError(
            f"Power {target_power:g} is not reached with an integer feature count "
            f"of at least {min_features:g}."
        )
    while power_at(p + 1) >= target_power:
        p += 1
    return int(p)


def minimum_detectable_effect(
    num_features: float,
    num_samples: float,
    background_variance: float,
    target_power: float = TARGET_POWER,
) -> float:
    """Effect size delta at which the design's power equals *target_power*.

    Returns 0.0 when the target is at or below the no-signal power floor
    (see ``floor_power``).
    """
    _check_positive("num_features", num_features)
    _check_positive("num_samples", num_samples)
    _check_positive("background_variance", background_variance)
    _check_target(target_power)

    sigma_min = compute_detectability(
        num_features, num_samples, background_variance, 0.0
    ).sigma_min
    if not (math.isfinite(sigma_min) and sigma_min > 0):
        raise ValueError(f"Noise floor is degenerate (sigma_min = {sigma_min!r}).")

    def power_at(delta: float) -> float:
        return compute_detectability(num_features, num_samples, background_variance, delta).power

    if power_at(0.0) >= target_power:
        return 0.0

    # Ten noise-floor units beyond the threshold puts power at 1 - Phi(-10) = 1.
    hi = (THRESHOLD_SIGMAS + 10.0) * sigma_min
    return float(brentq(lambda d: power_at(d) - target_power, 0.0, hi, xtol=1e-15, rtol=1e-12))

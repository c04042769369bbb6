"""Parameter sweeps and design grids over the detectability engine.

Each row of the returned DataFrames is one call to
``compute_detectability``: the four inputs followed by every field of the
resulting ``DetectabilityMetrics``.  The engine is evaluated one design at a
time (no vectorised re-implementation) so that sweep rows are bit-identical
to what the calculator shows for the same inputs.
"""

from itertools import product
from typing import Iterable, List

import numpy as np
import pandas as pd

from horizon.config import DEFAULTS
from horizon.engine import compute_detectability
from horizon.reporting import format_number, format_percent, power_band

PARAMETERS = list(DEFAULTS)


def _row(num_features, num_samples, background_variance, expected_effect) -> dict:
    m = compute_detectability(num_features, num_samples, background_variance, expected_effect)
    row = {
        "num_features": num_features,
        "num_samples": num_samples,
        "background_variance": background_variance,
        "expected_effect": expected_effect,
    }
    row.update(m.to_dict())
    return row


def log_spaced(lo: float, hi: float, num: int) -> np.ndarray:
    """Unique integers spaced evenly on a log scale between *lo* and *hi*."""
    if lo <= 0 or hi < lo:
        raise ValueError(f"Need 0 < lo <= hi, got lo={lo!r}, hi={hi!r}.")
    vals = np.geomspace(lo, hi, num=num)
    return np.unique(np.round(vals).astype(np.int64))


def sweep_parameter(name: str, values: Iterable[float], **base) -> pd.DataFrame:
    """Evaluate the engine while varying one parameter.

    Parameters
    ----------
    name : str
        One of "num_features", "num_samples", "background_variance",
        "expected_effect".
    values : iterable of float
        Values taken by *name*.
    **base
        Fixed values for the other parameters; anything omitted falls back
        to ``horizon.config.DEFAULTS``.

    Returns
    -------
    DataFrame with one row per value.
    """
    if name not in PARAMETERS:
        raise ValueError(f"Unknown parameter {name!r}; expected one of {PARAMETERS}.")
    unknown = set(base) - set(PARAMETERS)
    if unknown:
        raise ValueError(f"Unknown base parameters: {sorted(unknown)}.")

    params = dict(DEFAULTS)
    params.update(base)
    rows = []
    for v in values:
        params[name] = v
        rows.append(_row(**params))
    return pd.DataFrame(rows, columns=_columns())


def design_grid(
    features: Iterable[float],
    samples: Iterable[float],
    background_variance: float = DEFAULTS["background_variance"],
    expected_effect: float = DEFAULTS["expected_effect"],
) -> pd.DataFrame:
    """Long-form table over every (num_features, num_samples) combination."""
    rows = [
        _row(p, n, background_variance, expected_effect)
        for p, n in product(features, samples)
    ]
    return pd.DataFrame(rows, columns=_columns())


def _columns() -> List[str]:
    return PARAMETERS + [
        "gamma", "sigma_min", "threshold", "z_score",
        "false_positive_rate", "false_negative_rate", "power",
        "is_high_dimensional", "is_detectable",
    ]


def sweep_table(df: pd.DataFrame, x: str, *, max_rows: int = 20) -> dict:
    """Condense a sweep into a report table (evenly thinned to *max_rows*)."""
    if len(df) > max_rows:
        idx = np.unique(np.linspace(0, len(df) - 1, max_rows).round().astype(int))
        df = df.iloc[idx]
    rows = [
        [
            format_number(r[x]),
            format_number(r["gamma"]),
            format_number(r["sigma_min"]),
            format_percent(r["power"]),
            power_band(r["power"]),
        ]
        for _, r in df.iterrows()
    ]
    return {
        "title": f"Power versus {x}",
        "headers": [x, "gamma", "sigma_min", "power", "band"],
        "rows": rows,
    }

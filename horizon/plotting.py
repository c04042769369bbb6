"""Figures for design sweeps: power curves and a power heatmap.

Both functions follow the same convention: the figure is written to
``fig_dir/<name>.<FIG_FORMAT>`` (``FIG_DIR`` when *fig_dir* is None), then
``plt.show()`` is called and the saved path is returned.  Every displayed
figure is therefore also persisted to disk.

Importing this module forces the non-interactive Agg backend so figure
rendering works in headless environments (CI, remote servers) without an X
display.
"""

from pathlib import Path
from typing import Optional

import numpy as np
import pandas as pd
import matplotlib
matplotlib.use("Agg")

import matplotlib.pyplot as plt

from horizon.config import FIG_DIR, FIG_FORMAT, UNDETECTABLE_POWER, ADEQUATE_POWER


def _finish(fig, name: str, fig_dir: Optional[Path]) -> Path:
    fig_dir = Path(FIG_DIR if fig_dir is None else fig_dir)
    fig_dir.mkdir(parents=True, exist_ok=True)
    out = fig_dir / f"{name}.{FIG_FORMAT}"
    fig.savefig(out, format=FIG_FORMAT, bbox_inches="tight")
    print(f"Wrote {out}")
    plt.show()
    plt.close(fig)
    return out


def plot_power_curve(
    df: pd.DataFrame,
    x: str = "num_samples",
    *,
    fig_dir: Optional[Path] = None,
) -> Path:
    """Power and false-negative rate against one swept parameter.

    *df* is the output of ``sweep_parameter``.  The x axis is logarithmic;
    dashed lines mark the undetectable (0.2) and adequate (0.8) power bands.
    """
    if x not in df.columns:
        raise ValueError(f"Column {x!r} not in sweep table.")
    df = df.sort_values(x)

    fig = plt.figure(figsize=(8, 5))
    plt.plot(df[x], df["power"], lw=2, label="power (1 - beta)")
    plt.plot(df[x], df["false_negative_rate"], lw=1.5, ls="--", label="false negative rate (beta)")
    plt.plot(df[x], df["false_positive_rate"], lw=1, ls=":", color="gray", label="false positive rate (alpha)")
    plt.axhline(ADEQUATE_POWER, color="#22cc66", lw=0.8, ls="--")
    plt.axhline(UNDETECTABLE_POWER, color="#ff4444", lw=0.8, ls="--")
    if (df[x] > 0).all():
        plt.xscale("log")
    plt.ylim(-0.02, 1.02)
    plt.xlabel(x)
    plt.ylabel("probability")
    plt.title(f"Detection power versus {x}")
    plt.legend(loc="best", fontsize=9)
    plt.grid(alpha=0.3)
    return _finish(fig, f"power_vs_{x}", fig_dir)


def plot_power_heatmap(grid: pd.DataFrame, *, fig_dir: Optional[Path] = None) -> Path:
    """Power over a (num_features x num_samples) grid from ``design_grid``.

    The white line marks gamma = p / N = 1, the edge of the high-dimensional
    regime.
    """
    table = grid.pivot_table(index="num_features", columns="num_samples", values="power")
    features = table.index.to_numpy(dtype=float)
    samples = table.columns.to_numpy(dtype=float)

    fig = plt.figure(figsize=(8, 6))
    mesh = plt.pcolormesh(samples, features, table.to_numpy(), shading="nearest",
                          cmap="RdYlGn", vmin=0.0, vmax=1.0)
    plt.colorbar(mesh, label="power")
    diag = np.array([max(samples.min(), features.min()), min(samples.max(), features.max())])
    if diag[0] < diag[1]:
        plt.plot(diag, diag, color="white", lw=1.5, label="gamma = 1")
        plt.legend(loc="lower right", fontsize=9)
    plt.xscale("log")
    plt.yscale("log")
    plt.xlabel("num_samples (N)")
    plt.ylabel("num_features (p)")
    plt.title("Detection power across designs")
    return _finish(fig, "power_heatmap", fig_dir)

"""
Design-space sweep around a reference experiment.

Starting from one design (defaults: 20,000 features, 200 samples, background
variance 0.2, effect 0.1) the script runs in three phases:
  Phase 1 -- One-parameter sweeps of sample count and feature count, with a
             power curve for each.
  Phase 2 -- A features x samples grid and its power heatmap, showing where
             the gamma = 1 horizon sits relative to the 80% power contour.
  Phase 3 -- Planning answers for the reference design, then an HTML report
             bundling the metrics, sweep tables and figures.

Usage:
    python scripts/run_design_sweep.py [--features P] [--samples N]
        [--variance S] [--effect D] [--out-dir DIR]
"""

import argparse
import os
import sys
from pathlib import Path

REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, REPO_ROOT)

from horizon.config import DEFAULTS, FIG_DIR, PARAMETER_RANGES, TARGET_POWER  # noqa: E402
from horizon.engine import compute_detectability  # noqa: E402
from horizon.sweep import sweep_parameter, design_grid, log_spaced, sweep_table  # noqa: E402
from horizon.plotting import plot_power_curve, plot_power_heatmap  # noqa: E402
from horizon.calculator import plan_table  # noqa: E402
from horizon.reporting import build_html_report  # noqa: E402


def main():
    parser = argparse.ArgumentParser(description="Sweep the design space around one experiment.")
    parser.add_argument("--features", type=float, default=DEFAULTS["num_features"])
    parser.add_argument("--samples", type=float, default=DEFAULTS["num_samples"])
    parser.add_argument("--variance", type=float, default=DEFAULTS["background_variance"])
    parser.add_argument("--effect", type=float, default=DEFAULTS["expected_effect"])
    parser.add_argument("--out-dir", type=Path, default=FIG_DIR,
                        help="Directory for figures and the report (default: %(default)s)")
    args = parser.parse_args()

    base = {
        "num_features": args.features,
        "num_samples": args.samples,
        "background_variance": args.variance,
        "expected_effect": args.effect,
    }
    figures, tables = [], []

    # --- Phase 1: one-parameter sweeps over the calculator's ranges ---
    for name in ("num_samples", "num_features"):
        lo, hi, _ = PARAMETER_RANGES[name]
        print(f"\n=== Sweeping {name} over [{lo:g}, {hi:g}] ===")
        others = {k: v for k, v in base.items() if k != name}
        df = sweep_parameter(name, log_spaced(lo, hi, 60), **others)
        figures.append(plot_power_curve(df, x=name, fig_dir=args.out_dir))
        tables.append(sweep_table(df, name))

    # --- Phase 2: features x samples grid ---
    print("\n=== Design grid ===")
    grid = design_grid(
        log_spaced(*PARAMETER_RANGES["num_features"][:2], 30),
        log_spaced(*PARAMETER_RANGES["num_samples"][:2], 30),
        background_variance=args.variance,
        expected_effect=args.effect,
    )
    n_adequate = int((grid["power"] >= TARGET_POWER).sum())
    print(f"{n_adequate} of {len(grid)} grid designs reach {TARGET_POWER:.0%} power.")
    figures.append(plot_power_heatmap(grid, fig_dir=args.out_dir))

    # --- Phase 3: planning + report ---
    metrics = compute_detectability(**base)
    print()
    print(metrics.summary())
    tables.insert(0, plan_table(base, TARGET_POWER))
    build_html_report(
        metrics, args.effect,
        out_path=args.out_dir / "horizon_report.html",
        tables=tables,
        figures=figures,
    )


if __name__ == "__main__":
    main()

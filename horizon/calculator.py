"""Command-line detectability calculator.

Usage::

    python -m horizon.calculator --features 20000 --samples 200 \\
        --variance 0.2 --effect 0.1 --plan

Prints the detection statistics, regime, power band and interpretation for
one design.  ``--json`` prints the raw metrics as strict JSON instead
(non-finite values become null), ``--plan`` adds the sample size, feature
budget and minimum detectable effect needed for the target power, and
``--html`` writes a self-contained report.  A planning question the solver
cannot answer is reported as "unreachable: <reason>" in its own row; the
other answers are still printed and the exit code stays 0.
"""

import argparse
import json
import math
import sys
from typing import List, Optional

from horizon.config import DEFAULTS, PARAMETER_RANGES, TARGET_POWER
from horizon.engine import compute_detectability
from horizon.planning import (
    min_samples_for_power, max_features_for_power, minimum_detectable_effect,
)
from horizon.reporting import (
    build_html_report, format_number, format_percent, interpretation,
    power_band, regime_label,
)


def out_of_range(params: dict) -> List[str]:
    """Names of parameters outside their documented calculator range."""
    bad = []
    for name, value in params.items():
        lo, hi, _ = PARAMETER_RANGES[name]
        if not (lo <= value <= hi):
            bad.append(name)
    return bad


def json_safe(values: dict) -> dict:
    """Replace non-finite floats with None so the payload is strict JSON."""
    return {
        k: None if isinstance(v, float) and not math.isfinite(v) else v
        for k, v in values.items()
    }


def plan_table(params: dict, target_power: float) -> dict:
    """Planning answers for a design, as a report table."""
    p, n = params["num_features"], params["num_samples"]
    sigma, delta = params["background_variance"], params["expected_effect"]
    questions = [
        ("samples needed", lambda: f"{min_samples_for_power(p, sigma, delta, target_power):,}"),
        ("max features", lambda: f"{max_features_for_power(n, sigma, delta, target_power):,}"),
        ("min detectable effect",
         lambda: format_number(minimum_detectable_effect(p, n, sigma, target_power))),
    ]
    rows = []
    for question, solve in questions:
        try:
            rows.append([question, solve()])
        except ValueError as exc:
            rows.append([question, f"unreachable: {exc}"])
    return {
        "title": f"Design for {format_percent(target_power)} power",
        "headers": ["question", "answer"],
        "rows": rows,
    }


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Detectability of a causal effect under the high-dimensional noise floor."
    )
    parser.add_argument("--features", type=float, default=DEFAULTS["num_features"],
                        help="Number of features p (default: %(default)g)")
    parser.add_argument("--samples", type=float, default=DEFAULTS["num_samples"],
                        help="Number of samples N (default: %(default)g)")
    parser.add_argument("--variance", type=float, default=DEFAULTS["background_variance"],
                        help="Background variance sigma_fixed (default: %(default)g)")
    parser.add_argument("--effect", type=float, default=DEFAULTS["expected_effect"],
                        help="Expected effect size delta (default: %(default)g)")
    parser.add_argument("--target-power", type=float, default=TARGET_POWER,
                        help="Target power for --plan (default: %(default)g)")
    parser.add_argument("--plan", action="store_true",
                        help="Also solve for samples, features and effect at the target power")
    parser.add_argument("--json", action="store_true", help="Print raw metrics as JSON")
    parser.add_argument("--html", default=None, help="Write an HTML report to this path")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    params = {
        "num_features": args.features,
        "num_samples": args.samples,
        "background_variance": args.variance,
        "expected_effect": args.effect,
    }

    for name in out_of_range(params):
        lo, hi, _ = PARAMETER_RANGES[name]
        print(f"Warning: {name}={params[name]:g} is outside the calibrated range "
              f"[{lo:g}, {hi:g}].", file=sys.stderr)

    metrics = compute_detectability(**params)

    tables = []
    if args.plan:
        if not (0.0 < args.target_power < 1.0):
            print(f"--target-power must be in (0, 1), got {args.target_power:g}.", file=sys.stderr)
            sys.exit(1)
        tables.append(plan_table(params, args.target_power))

    if args.json:
        out = {"inputs": json_safe(params), "metrics": json_safe(metrics.to_dict())}
        if tables:
            out["plan"] = dict(tables[0]["rows"])
        print(json.dumps(out, indent=2, allow_nan=False))
    else:
        print(metrics.summary())
        print()
        print(f"Regime:     {regime_label(metrics.gamma)}")
        print(f"Power band: {power_band(metrics.power)} ({format_percent(metrics.power)})")
        print()
        print(interpretation(metrics, args.effect))
        for tbl in tables:
            print()
            print(tbl["title"])
            for question, answer in tbl["rows"]:
                print(f"  {question:<24s}{answer}")

    if args.html:
        build_html_report(metrics, args.effect, out_path=args.html, tables=tables)
    return 0


if __name__ == "__main__":
    sys.exit(main())

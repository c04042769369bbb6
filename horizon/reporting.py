"""Display formatting, interpretation bands and the HTML report.

Provides the presentation helpers that sit between the engine and a reader:

- format_number / format_percent: the calculator's display rules.
- regime_label / regime_color and power_band / power_color: qualitative
  bands keyed on gamma and on power.
- interpretation: the plain-language verdict for a design.
- build_html_report: compiles the metrics, interpretation, optional sweep
  tables and any saved figures into a single self-contained HTML file that
  can be viewed in any browser without external dependencies.
"""

import base64
import html
from pathlib import Path
from typing import List, Optional

from horizon.config import (
    SCI_LOW, SCI_HIGH, PERCENT_LOW, PERCENT_HIGH,
    UNDETECTABLE_POWER, ADEQUATE_POWER,
    REGIME_BANDS, REGIME_FLOOR, POWER_COLORS, POWER_COLOR_FLOOR,
    REPORT_PATH,
)
from horizon.engine import DetectabilityMetrics


def format_number(x: float, decimals: int = 3) -> str:
    """Fixed-point text for moderate values, scientific notation otherwise.

    Anything below ``SCI_LOW`` (including zero and negatives) or above
    ``SCI_HIGH`` is shown with two significant decimals in exponent form.
    """
    if x < SCI_LOW or x > SCI_HIGH:
        return f"{x:.2e}"
    return f"{x:.{decimals}f}"


def format_percent(x: float) -> str:
    if x < PERCENT_LOW:
        return "< 0.01%"
    if x > PERCENT_HIGH:
        return "> 99.99%"
    return f"{x * 100:.2f}%"


def _regime(gamma: float):
    for cutoff, label, color in REGIME_BANDS:
        if gamma > cutoff:
            return label, color
    return REGIME_FLOOR


def regime_label(gamma: float) -> str:
    """Name of the dimensionality regime for a given gamma = p / N."""
    return _regime(gamma)[0]


def regime_color(gamma: float) -> str:
    return _regime(gamma)[1]


def power_band(power: float) -> str:
    """Classify power as "undetectable", "underpowered" or "adequate"."""
    if power < UNDETECTABLE_POWER:
        return "undetectable"
    if power < ADEQUATE_POWER:
        return "underpowered"
    return "adequate"


def power_color(power: float) -> str:
    for cutoff, color in POWER_COLORS:
        if power > cutoff:
            return color
    return POWER_COLOR_FLOOR


def interpretation(metrics: DetectabilityMetrics, expected_effect: float) -> str:
    """Plain-language verdict on a design, keyed on its power band."""
    delta = f"{expected_effect:.3f}"
    sigma = format_number(metrics.sigma_min)
    band = power_band(metrics.power)
    if band == "undetectable":
        return (
            f"Your expected effect size (delta = {delta}) is below the noise floor "
            f"(sigma_min = {sigma}). You have only a {format_percent(metrics.power)} "
            "chance of detecting true regulatory interactions. This is not an "
            "algorithm problem; it is a fundamental information-theoretic limit. "
            "Consider increasing N or reducing p."
        )
    if band == "underpowered":
        return (
            f"Your study is underpowered. With delta = {delta} and noise floor "
            f"sigma_min = {sigma}, you will miss "
            f"{format_percent(metrics.false_negative_rate)} of true interactions. "
            "To reach 80% power, you need either larger effects, more samples, "
            "or fewer features."
        )
    return (
        f"Your design has adequate power ({format_percent(metrics.power)}) to "
        f"detect effects of size delta = {delta}. The noise floor "
        f"sigma_min = {sigma} is sufficiently below your expected signal. "
        "Causal inference is feasible."
    )


def metrics_table(metrics: DetectabilityMetrics) -> dict:
    """Display rows for a design, in the layout used by ``build_html_report``."""
    return {
        "title": "Detection statistics",
        "headers": ["quantity", "value"],
        "rows": [
            ["dimensionality ratio (gamma)", format_number(metrics.gamma)],
            ["regime", regime_label(metrics.gamma)],
            ["noise floor (sigma_min)", format_number(metrics.sigma_min)],
            ["detection threshold (2 sigma_min)", format_number(metrics.threshold)],
            ["z-score (delta / sigma_min)", format_number(metrics.z_score)],
            ["false positive rate (alpha)", format_percent(metrics.false_positive_rate)],
            ["false negative rate (beta)", format_percent(metrics.false_negative_rate)],
            ["statistical power", format_percent(metrics.power)],
            ["power band", power_band(metrics.power)],
        ],
    }


def build_html_report(
    metrics: DetectabilityMetrics,
    expected_effect: float,
    out_path: Path = REPORT_PATH,
    tables: Optional[List[dict]] = None,
    figures: Optional[List[Path]] = None,
) -> Path:
    """Write a single self-contained HTML report for one design.

    Parameters
    ----------
    metrics : DetectabilityMetrics
        Engine output for the design being reported.
    expected_effect : float
        The delta the metrics were computed for (quoted in the text).
    out_path : Path
        Output path for the generated HTML file.
    tables : list of dict, optional
        Extra tables, each with keys "title" (str), "headers" (list of str)
        and "rows" (list of list).
    figures : list of Path, optional
        Image files to embed as base64 <img> tags.

    Returns
    -------
    Path of the written file.
    """
    out_path = Path(out_path)
    accent = power_color(metrics.power)
    parts = [
        "<!DOCTYPE html><html><head>",
        "<meta charset='utf-8'>",
        "<title>The Causal Horizon</title>",
        "<style>",
        "body{font-family:system-ui,sans-serif;background:#0a0a0f;color:#e8e8e8;"
        "max-width:900px;margin:0 auto;padding:20px}",
        "h2{margin-top:40px;border-bottom:1px solid #333;padding-bottom:6px}",
        ".power{font-size:48px;text-align:center;font-family:monospace}",
        ".note{color:#888;line-height:1.6}",
        ".fig{background:#fff;border-radius:8px;margin:24px 0;padding:12px;text-align:center}",
        ".fig img{max-width:100%;height:auto}",
        ".fig p{color:#333;font-size:14px;margin:8px 0 0}",
        "table{border-collapse:collapse;margin:20px auto;font-size:14px}",
        "th,td{border:1px solid #333;padding:6px 12px;text-align:right}",
        "th{background:#1a1a24}",
        "td:first-child,th:first-child{text-align:left}",
        "</style></head><body>",
        "<h1>The Causal Horizon</h1>",
        f"<div class='power' style='color:{accent}'>{format_percent(metrics.power)}</div>",
        f"<p class='note' style='text-align:center'>Statistical power for "
        f"delta = {expected_effect:.3f}; regime: "
        f"<span style='color:{regime_color(metrics.gamma)}'>"
        f"{regime_label(metrics.gamma)}</span></p>",
        f"<p class='note'><strong>Interpretation:</strong> "
        f"{html.escape(interpretation(metrics, expected_effect))}</p>",
    ]

    for tbl in [metrics_table(metrics)] + list(tables or []):
        parts.append(f"<h2>{html.escape(tbl['title'])}</h2>")
        parts.append("<table>")
        parts.append("<tr>" + "".join(f"<th>{html.escape(str(h))}</th>" for h in tbl["headers"]) + "</tr>")
        for row in tbl["rows"]:
            parts.append("<tr>" + "".join(f"<td>{html.escape(str(c))}</td>" for c in row) + "</tr>")
        parts.append("</table>")

    if figures:
        parts.append("<h2>Figures</h2>")
        for fig_path in figures:
            fig_path = Path(fig_path)
            data = base64.b64encode(fig_path.read_bytes()).decode("ascii")
            fmt = fig_path.suffix.lstrip(".") or "png"
            mime = "image/svg+xml" if fmt == "svg" else f"image/{fmt}"
            parts.append('<div class="fig">')
            parts.append(f'<img src="data:{mime};base64,{data}"/>')
            parts.append(f"<p>{fig_path.name}</p>")
            parts.append("</div>")

    parts.append(
        "<p class='note'>sigma_min = sigma_fixed * (p/N)^(1/4); "
        "power = 1 - Phi((2 sigma_min - delta) / sigma_min). "
        "Detection threshold set at 2 sigma_min.</p>"
    )
    parts.append("</body></html>")

    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text("\n".join(parts), encoding="utf-8")
    n_tables = 1 + (len(tables) if tables else 0)
    n_figs = len(figures) if figures else 0
    print(f"Wrote {out_path} with {n_tables} tables and {n_figs} figures.")
    return out_path

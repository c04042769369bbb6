"""Package-wide constants for the detectability calculator.

Every tuneable number used outside the core engine lives here -- default
experiment parameters, the documented input ranges of the interactive
calculator, interpretation band cut-offs, and figure output settings -- so
that the CLI, sweeps and plots import a single source of truth.

The detection policy constant ``THRESHOLD_SIGMAS`` is also defined here and
read by the engine.
"""

from pathlib import Path

# ---------------------------------------------------------------------------
# Detection policy
# ---------------------------------------------------------------------------

# Detection threshold expressed in units of the noise floor:
# threshold = THRESHOLD_SIGMAS * sigma_min.
THRESHOLD_SIGMAS = 2.0

# Exponent on the dimensionality ratio in the noise floor formula
# sigma_min = sigma_fixed * gamma ** GAMMA_EXPONENT.
GAMMA_EXPONENT = 0.25

# ---------------------------------------------------------------------------
# Default experiment (transcriptomics-like design)
# ---------------------------------------------------------------------------

DEFAULT_NUM_FEATURES = 20_000
DEFAULT_NUM_SAMPLES = 200
DEFAULT_BACKGROUND_VARIANCE = 0.2
DEFAULT_EXPECTED_EFFECT = 0.1

DEFAULTS = {
    "num_features": DEFAULT_NUM_FEATURES,
    "num_samples": DEFAULT_NUM_SAMPLES,
    "background_variance": DEFAULT_BACKGROUND_VARIANCE,
    "expected_effect": DEFAULT_EXPECTED_EFFECT,
}

# Documented (min, max, step) of each input.  The engine does not enforce
# these; the calculator only warns when a value falls outside them.
PARAMETER_RANGES = {
    "num_features": (100, 50_000, 100),
    "num_samples": (10, 100_000, 10),
    "background_variance": (0.05, 0.50, 0.01),
    "expected_effect": (0.01, 0.50, 0.005),
}

# ---------------------------------------------------------------------------
# Interpretation bands
# ---------------------------------------------------------------------------

# Power below UNDETECTABLE_POWER is "undetectable"; below ADEQUATE_POWER it is
# "underpowered"; anything else is "adequate".
UNDETECTABLE_POWER = 0.2
ADEQUATE_POWER = 0.8

# Default target for the planning helpers.
TARGET_POWER = ADEQUATE_POWER

# Regime labels keyed on gamma, checked top to bottom with strict ">".
REGIME_BANDS = [
    (10.0, "Deep in the Trap", "#ff4444"),
    (1.0, "High-Dimensional Trap", "#ff8844"),
    (0.1, "Approaching Horizon", "#44aa44"),
]
REGIME_FLOOR = ("Below Horizon", "#22cc66")

# Power colour scale, checked top to bottom with strict ">".
POWER_COLORS = [
    (0.8, "#22cc66"),
    (0.5, "#44aa44"),
    (0.2, "#ff8844"),
]
POWER_COLOR_FLOOR = "#ff4444"

# Display formatting: numbers outside [SCI_LOW, SCI_HIGH] are printed in
# scientific notation; percentages are clamped to "< 0.01%" / "> 99.99%".
SCI_LOW = 1e-4
SCI_HIGH = 1e4
PERCENT_LOW = 1e-4
PERCENT_HIGH = 0.9999

# ---------------------------------------------------------------------------
# Planning search brackets
# ---------------------------------------------------------------------------

MAX_SAMPLES_SEARCH = 1e9
MAX_FEATURES_SEARCH = 1e12
MAX_EFFECT_SEARCH = 1e6

# ---------------------------------------------------------------------------
# Figure and report output
# ---------------------------------------------------------------------------

# Directory where design-sweep figures are written by scripts/run_design_sweep.py.
FIG_DIR = Path("figures")

# Image format for saved figures (e.g. "png", "pdf", "svg").
FIG_FORMAT = "png"

# Default output path of the HTML report.
REPORT_PATH = Path("horizon_report.html")

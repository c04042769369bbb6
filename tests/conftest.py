"""Shared fixtures for the horizon test suite."""

import pytest

from horizon.engine import compute_detectability


# Transcriptomics-like design from the calculator's defaults: deep in the
# high-dimensional regime, effect far below the noise floor.
HIGH_DIM_DESIGN = (20000, 200, 0.2, 0.1)

# Few features, many samples: below the horizon and detectable.
LOW_DIM_DESIGN = (100, 100000, 0.2, 0.1)


@pytest.fixture
def high_dim_design():
    return HIGH_DIM_DESIGN


@pytest.fixture
def low_dim_design():
    return LOW_DIM_DESIGN


@pytest.fixture
def high_dim_metrics():
    return compute_detectability(*HIGH_DIM_DESIGN)


@pytest.fixture
def low_dim_metrics():
    return compute_detectability(*LOW_DIM_DESIGN)

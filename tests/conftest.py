from __future__ import annotations

import sys
from pathlib import Path

import matplotlib
import pytest

matplotlib.use("Agg")

# pytest may run without installing the project; ensure repo root is importable.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from preload_sweep import SweepAxes  # noqa: E402


@pytest.fixture()
def sample_config() -> Path:
    return REPO_ROOT / "config" / "sweep_config.json"


@pytest.fixture()
def collision_axes() -> SweepAxes:
    """Weight memory c*f*kx*ky + f collides for (c=1, kx=2) and (c=2, kx=1)."""
    return SweepAxes(input_spatial=[17], input_channels=[1, 2], filters=[1],
                     kernel_x=[1, 2], kernel_y=[1], stride=[1])

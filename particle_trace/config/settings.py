"""
Project settings (constants + small helpers).
Units: scene units for positions, seconds (s) for reconstructed time,
milliseconds (ms) for wall-clock sample timestamps.
"""
from __future__ import annotations

import os
from typing import Optional

# Paths
BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(__file__)))
OUTPUT_DIR = os.path.join(BASE_DIR, "outputs")

# Run
DEFAULT_RANDOM_SEED: Optional[int] = None
VALIDATE_ON_IMPORT = False

# Scene
SCALE = 10
GRID_SLICES = 25
TARGET_FPS = 100
FRAME_INTERVAL_MS = 1000 // TARGET_FPS

# Particle (first run)
INITIAL_POSITION = (SCALE * -12.0, 0.0, 0.0)
INITIAL_VELOCITY = (10.0, 10.0, 0.0)
INITIAL_ACCELERATION = (0.01, -0.9, -0.003)

# Random-walk acceleration (new runs)
RANDOM_WALK_RANGE = 1.0
RANDOM_WALK_DIVISOR = 1.0
RANDOM_WALK_REFRESH_PROBABILITY = 0.5
NEW_RUN_POLICY = "random_walk"  # "fixed" or "random_walk"

# Time-step awareness (disabled, as in the original demo loop)
SCALE_ACCELERATION_BY_DT = False
DT_DIVISOR = 1e8  # dt = elapsed_ms / DT_DIVISOR

# Reconstruction
DERIVATIVE_EPS = 1e-4
MIN_RECONSTRUCTION_SAMPLES = 2

# Scrubbing
SCRUB_RIGHT_TO_LEFT = False

# Headless run / plots
HEADLESS_TICKS = 40
PLOT_SAMPLES = 400


def clamp_unit(val: Optional[float]) -> float:
    out = 0.0 if val is None else float(val)
    return max(0.0, min(1.0, out))


def validate_settings() -> None:
    if SCALE <= 0:
        raise ValueError("SCALE must be > 0")
    if TARGET_FPS <= 0:
        raise ValueError("TARGET_FPS must be > 0")
    if FRAME_INTERVAL_MS <= 0:
        raise ValueError("FRAME_INTERVAL_MS must be > 0")
    if RANDOM_WALK_RANGE < 0:
        raise ValueError("RANDOM_WALK_RANGE must be >= 0")
    if RANDOM_WALK_DIVISOR == 0:
        raise ValueError("RANDOM_WALK_DIVISOR must be non-zero")
    if not (0.0 <= RANDOM_WALK_REFRESH_PROBABILITY <= 1.0):
        raise ValueError("RANDOM_WALK_REFRESH_PROBABILITY must be in [0, 1]")
    if NEW_RUN_POLICY not in ("fixed", "random_walk"):
        raise ValueError("NEW_RUN_POLICY must be 'fixed' or 'random_walk'")
    if DT_DIVISOR <= 0:
        raise ValueError("DT_DIVISOR must be > 0")
    if DERIVATIVE_EPS <= 0:
        raise ValueError("DERIVATIVE_EPS must be > 0")
    if MIN_RECONSTRUCTION_SAMPLES < 1:
        raise ValueError("MIN_RECONSTRUCTION_SAMPLES must be >= 1")
    if HEADLESS_TICKS <= 0:
        raise ValueError("HEADLESS_TICKS must be > 0")
    if PLOT_SAMPLES < 2:
        raise ValueError("PLOT_SAMPLES must be >= 2")


if VALIDATE_ON_IMPORT:
    validate_settings()

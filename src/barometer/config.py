"""
Configuration & Path Management
===============================
This module serves as the central registry for file paths and default constants.

Why is this file needed?
------------------------
1. Abstraction: It prevents hardcoded paths and magic numbers (canvas size,
   liquid level, snapping thresholds) scattered throughout the code.
2. Deployment: It handles the logic required by PyInstaller (sys._MEIPASS) to
   find assets (liquid definitions) when the app is frozen into an .exe.

The values below are DEFAULTS only. The running simulation reads its
parameters from an explicit `Environment` instance, never from this module.

Exports:
    ASSETS_PATH (str): Absolute path to the assets directory.
    DEFAULT_LIQUIDS_PATH (str): Absolute path to the extra liquids file.
"""
import logging
import os
import sys
from pathlib import Path

logger = logging.getLogger(__name__)


def get_resource_path(relative_path: str) -> str:
    """
    Get absolute path to resource, works for dev and for PyInstaller.
    """
    if hasattr(sys, '_MEIPASS'):
        # PyInstaller temp folder
        base_path: str = getattr(sys, '_MEIPASS')
        return os.path.join(base_path, relative_path)

    # Development mode: resolve relative to this file
    # config.py is in src/barometer/
    current_file_path: Path = Path(__file__)
    project_root: Path = current_file_path.parent.parent.parent
    return os.path.join(str(project_root), relative_path)


ASSETS_PATH: str = get_resource_path("assets")
DEFAULT_LIQUIDS_PATH: str = os.path.join(ASSETS_PATH, "liquids.json")

if not os.path.exists(ASSETS_PATH):
    logger.warning(f"Assets path not found at {ASSETS_PATH}")

# Canvas (pixels, Y axis pointing down)
CANVAS_WIDTH: int = 847
CANVAS_HEIGHT: int = 600
STROKE: int = 4
MARGIN: int = 25

# Scene defaults
DEFAULT_LEVEL: float = 400.0
DEFAULT_PIXELS_PER_METRE: float = 200.0

# Tolerances
THRESHOLD: float = 0.02          # fraction below which a tube snaps to empty/full
ANGLE_THRESHOLD: float = 5.0     # degrees from 180 still counted as upside down
PIXEL_THRESHOLD: float = 5.0     # probe snapping distance

# Mystery puzzles
QUANTA_DENSITY: float = 100.0    # kg/m³
MIN_DENSITY: int = 5             # in multiples of QUANTA_DENSITY
MAX_DENSITY: int = 200
QUANTA_ALTITUDE: float = 100.0   # m
MIN_ALTITUDE: int = 1            # in multiples of QUANTA_ALTITUDE
MAX_ALTITUDE: int = 10

# Significant figures used for display and guess comparison
PRECISION: int = 3
